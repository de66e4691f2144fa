from typing import TYPE_CHECKING, List, Optional
from datetime import datetime, timezone

from sqlalchemy import BigInteger, ForeignKey, Text
from sqlmodel import Column, Field, Relationship, SQLModel

from .question_tag_link import QuestionTagLink

if TYPE_CHECKING:
    from .tag import Tag


class Question(SQLModel, table=True):
    """问题模型。投票数、回答数、浏览数都是派生缓存，真实数据以投票表和回答表为准。"""

    __tablename__ = "questions"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(sa_column=Column(BigInteger, nullable=False, index=True))
    subject_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            BigInteger,
            ForeignKey("subjects.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    title: str = Field(max_length=255)
    content: str = Field(sa_column=Column(Text, nullable=False))

    # 派生缓存
    upvotes: int = Field(default=0, nullable=False, index=True)
    downvotes: int = Field(default=0, nullable=False)
    answer_count: int = Field(default=0, nullable=False, index=True)
    view_count: int = Field(default=0, nullable=False, index=True)

    is_solved: bool = Field(default=False, nullable=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )
    # 只在内容被编辑时更新，计数器的写回不会改动它
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )

    tags: List["Tag"] = Relationship(
        back_populates="questions", link_model=QuestionTagLink
    )

from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import BigInteger, ForeignKey, Text
from sqlmodel import Column, Field, SQLModel


class Answer(SQLModel, table=True):
    """
    回答模型。
    is_accepted 是由赞成票数推导出的“已认证”状态，只能由投票流程重新计算，
    调用方不应直接修改。
    """

    __tablename__ = "answers"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    question_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    user_id: int = Field(sa_column=Column(BigInteger, nullable=False, index=True))
    content: str = Field(sa_column=Column(Text, nullable=False))

    upvotes: int = Field(default=0, nullable=False)
    downvotes: int = Field(default=0, nullable=False)
    is_accepted: bool = Field(default=False, nullable=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
    # 计数器和认证状态的写回不会改动它
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )

from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

from .question_tag_link import QuestionTagLink

if TYPE_CHECKING:
    from .question import Question


class Tag(SQLModel, table=True):
    """标签模型。"""

    __tablename__ = "tags"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=50, unique=True, index=True)
    # 累计被关联的次数，只增不减
    usage_count: int = Field(default=0, nullable=False)

    questions: List["Question"] = Relationship(
        back_populates="tags", link_model=QuestionTagLink
    )

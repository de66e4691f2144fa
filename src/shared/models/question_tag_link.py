from sqlalchemy import BigInteger, ForeignKey
from sqlmodel import Column, Field, SQLModel


class QuestionTagLink(SQLModel, table=True):
    """问题和标签的多对多关联表模型，随任一端删除而级联删除。"""

    __tablename__ = "question_tags"  # type: ignore

    question_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("questions.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    tag_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("tags.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )

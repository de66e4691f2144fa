from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import BigInteger, ForeignKey
from sqlmodel import Column, Field, SQLModel, UniqueConstraint

from shared.enum.vote_value import VoteValue


class QuestionVote(SQLModel, table=True):
    """问题投票记录，每个用户对每个问题至多一条。"""

    __tablename__ = "question_votes"  # type: ignore
    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_question_votes_user_question"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(sa_column=Column(BigInteger, nullable=False, index=True))
    question_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    vote_type: str = Field(max_length=10)  # "upvote" 或 "downvote"

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)},
    )

    @property
    def value(self) -> VoteValue:
        return VoteValue(self.vote_type)

    def set_value(self, value: VoteValue):
        self.vote_type = value.value

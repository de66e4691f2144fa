from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import BigInteger, ForeignKey
from sqlmodel import Column, Field, SQLModel, UniqueConstraint

from shared.enum.vote_value import VoteValue


class AnswerVote(SQLModel, table=True):
    """回答投票记录，每个用户对每个回答至多一条。"""

    __tablename__ = "answer_votes"  # type: ignore
    __table_args__ = (
        UniqueConstraint("answer_id", "user_id", name="uq_answer_votes_answer_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    answer_id: int = Field(
        sa_column=Column(
            BigInteger,
            ForeignKey("answers.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    user_id: int = Field(sa_column=Column(BigInteger, nullable=False, index=True))
    is_upvote: bool = Field(nullable=False)

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
        return VoteValue.from_bool(self.is_upvote)

    def set_value(self, value: VoteValue):
        self.is_upvote = value.is_upvote

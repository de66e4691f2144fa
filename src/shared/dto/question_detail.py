from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, Field

from shared.models.question import Question


class QuestionDetail(BaseModel):
    """问题的只读视图，附带学科名和标签名"""

    id: int
    user_id: int
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
    title: str
    content: str
    upvotes: int = 0
    downvotes: int = 0
    answer_count: int = 0
    view_count: int = 0
    is_solved: bool = False
    created_at: datetime
    updated_at: datetime
    tags: List[str] = Field(default_factory=list, description="按名称排序的标签名")

    @property
    def net_votes(self) -> int:
        return self.upvotes - self.downvotes

    @classmethod
    def from_question(
        cls,
        question: Question,
        tags: List[str],
        subject_name: Optional[str] = None,
    ) -> "QuestionDetail":
        assert question.id is not None
        return cls(
            id=question.id,
            user_id=question.user_id,
            subject_id=question.subject_id,
            subject_name=subject_name,
            title=question.title,
            content=question.content,
            upvotes=question.upvotes,
            downvotes=question.downvotes,
            answer_count=question.answer_count,
            view_count=question.view_count,
            is_solved=question.is_solved,
            created_at=question.created_at,
            updated_at=question.updated_at,
            tags=sorted(tags),
        )

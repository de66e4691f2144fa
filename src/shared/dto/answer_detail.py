from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AnswerDetail(BaseModel):
    """回答的只读视图"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    question_id: int
    user_id: int
    content: str
    upvotes: int = 0
    downvotes: int = 0
    is_accepted: bool = False
    created_at: datetime
    updated_at: datetime

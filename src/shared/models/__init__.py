from .subject import Subject
from .question_tag_link import QuestionTagLink
from .tag import Tag
from .question import Question
from .answer import Answer
from .question_vote import QuestionVote
from .answer_vote import AnswerVote

# 这一行是为了让 Alembic/SQLModel 能够发现所有模型
__all__ = [
    "Subject",
    "QuestionTagLink",
    "Tag",
    "Question",
    "Answer",
    "QuestionVote",
    "AnswerVote",
]

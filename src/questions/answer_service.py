import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker
from sqlmodel import select

from questions.validation import validate_answer_input
from shared.database import read_scope, transactional_scope
from shared.dto.answer_detail import AnswerDetail
from shared.exceptions import NotFoundError
from shared.models import Answer, Question
from shared.pagination import PageResult, clamp_page_size, offset_for, paginate
from voting.vote_aggregator import recount_answers

logger = logging.getLogger(__name__)

# 已认证的回答优先，其次按赞成票，最后按时间先后
ANSWER_ORDERING = (
    Answer.is_accepted.desc(),  # type: ignore
    Answer.upvotes.desc(),  # type: ignore
    Answer.created_at.asc(),  # type: ignore
    Answer.id.asc(),  # type: ignore
)


class AnswerService:
    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def save_answer(self, question_id: int, author_id: int, content: str) -> AnswerDetail:
        """
        发布回答，并在同一事务中重新统计问题的回答数
        """
        content = validate_answer_input(question_id, author_id, content)

        with transactional_scope(self.session_factory) as session:
            if session.get(Question, question_id) is None:
                logger.warning(f"回答失败: 问题 {question_id} 不存在")
                raise NotFoundError(f"问题 {question_id} 不存在")

            answer = Answer(question_id=question_id, user_id=author_id, content=content)
            session.add(answer)
            session.flush()
            answer_count = recount_answers(session, question_id)
            detail = AnswerDetail.model_validate(answer)

        logger.info(
            f"用户 {author_id} 回答了问题 {question_id}，当前共 {answer_count} 个回答"
        )
        return detail

    def find_answers(self, question_id: int) -> List[AnswerDetail]:
        statement = (
            select(Answer)
            .where(Answer.question_id == question_id)
            .order_by(*ANSWER_ORDERING)
        )
        with read_scope(self.session_factory) as session:
            answers = session.execute(statement).scalars().all()
            return [AnswerDetail.model_validate(answer) for answer in answers]

    def list_answers_page(
        self, question_id: int, page: int, page_size: int
    ) -> PageResult:
        """分页获取某个问题的回答"""
        offset = offset_for(page, page_size)
        page_size = clamp_page_size(page_size)

        with read_scope(self.session_factory) as session:
            total_count = session.execute(
                select(func.count())
                .select_from(Answer)
                .where(Answer.question_id == question_id)
            ).scalar_one()

            items: List[AnswerDetail] = []
            if offset < total_count:
                statement = (
                    select(Answer)
                    .where(Answer.question_id == question_id)
                    .order_by(*ANSWER_ORDERING)
                    .limit(page_size)
                    .offset(offset)
                )
                items = [
                    AnswerDetail.model_validate(answer)
                    for answer in session.execute(statement).scalars().all()
                ]

        return paginate(items, total_count, page_size, page)

    def find_answer_by_id(self, answer_id: Optional[int]) -> Optional[AnswerDetail]:
        if answer_id is None or answer_id <= 0:
            return None
        with read_scope(self.session_factory) as session:
            answer = session.get(Answer, answer_id)
            return AnswerDetail.model_validate(answer) if answer else None

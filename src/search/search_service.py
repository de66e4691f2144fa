import dataclasses
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload, sessionmaker

from search.qo.question_search import QuestionSearchCriteria
from search.query_builder import FacetedQueryBuilder
from shared.database import read_scope
from shared.dto.question_detail import QuestionDetail
from shared.models import Question
from shared.pagination import PageResult, clamp_page_size, offset_for, paginate

logger = logging.getLogger(__name__)


class SearchService:
    """问题搜索的只读入口，不开启事务。"""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        query_builder: Optional[FacetedQueryBuilder] = None,
    ):
        self.session_factory = session_factory
        self.query_builder = query_builder or FacetedQueryBuilder()

    def search(self, criteria: Optional[QuestionSearchCriteria]) -> List[QuestionDetail]:
        """
        根据搜索条件返回一页问题
        """
        if criteria is None:
            return []
        with read_scope(self.session_factory) as session:
            return self._fetch(session, criteria)

    def count(self, criteria: QuestionSearchCriteria) -> int:
        with read_scope(self.session_factory) as session:
            return self._count(session, criteria)

    def search_page(
        self, criteria: Optional[QuestionSearchCriteria], page: int, page_size: int
    ) -> PageResult:
        """
        按页码搜索，返回带分页元数据的结果。
        页码超出范围时返回空列表，但总数和页数依旧正确。
        """
        offset = offset_for(page, page_size)
        page_size = clamp_page_size(page_size)
        if criteria is None:
            return paginate([], 0, page_size, page)
        paged_criteria = dataclasses.replace(criteria, limit=page_size, offset=offset)

        with read_scope(self.session_factory) as session:
            total_count = self._count(session, paged_criteria)
            if total_count == 0 or offset >= total_count:
                items: List[QuestionDetail] = []
            else:
                items = self._fetch(session, paged_criteria)

        return paginate(items, total_count, page_size, page)

    def _count(self, session: Session, criteria: QuestionSearchCriteria) -> int:
        count_stmt = self.query_builder.build_count_statement(criteria)
        return session.execute(count_stmt).scalar_one_or_none() or 0

    def _fetch(
        self, session: Session, criteria: QuestionSearchCriteria
    ) -> List[QuestionDetail]:
        try:
            statement = self.query_builder.build_statement(criteria).options(
                selectinload(Question.tags)  # type: ignore
            )
            rows = session.execute(statement).all()
        except Exception:
            logger.error("执行问题搜索时出错", exc_info=True)
            raise

        return [
            QuestionDetail.from_question(
                question, [tag.name for tag in question.tags], subject_name
            )
            for question, subject_name in rows
        ]

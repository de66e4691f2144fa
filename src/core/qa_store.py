import logging
from typing import List, Optional

from sqlalchemy.engine import Engine

from questions.answer_service import AnswerService
from questions.question_service import QuestionService
from search.qo.question_search import DEFAULT_SEARCH_LIMIT, QuestionSearchCriteria
from search.search_service import SearchService
from shared.database import close_db
from shared.dto.answer_detail import AnswerDetail
from shared.dto.question_detail import QuestionDetail
from shared.dto.subject_detail import SubjectDetail
from shared.dto.tag_detail import TagDetail
from shared.enum.item_kind import ItemKind
from shared.enum.vote_value import VoteValue
from shared.pagination import PageResult
from subjects.subject_service import SubjectService
from tag_system.tag_service import TagService
from voting.dto.vote_result import VoteResult
from voting.vote_service import VoteService

logger = logging.getLogger(__name__)


class QAStore:
    """
    问答存储对外暴露的全部同步操作。
    本身不持有状态，只把调用转发给注入的各个服务；
    各服务由 bootstrap.build_store 统一创建。
    """

    def __init__(
        self,
        question_service: QuestionService,
        answer_service: AnswerService,
        vote_service: VoteService,
        search_service: SearchService,
        subject_service: SubjectService,
        tag_service: TagService,
        default_page_size: int = DEFAULT_SEARCH_LIMIT,
        engine: Optional[Engine] = None,
    ):
        self.question_service = question_service
        self.answer_service = answer_service
        self.vote_service = vote_service
        self.search_service = search_service
        self.subject_service = subject_service
        self.tag_service = tag_service
        self.default_page_size = default_page_size
        self.engine = engine

    def close(self):
        """释放数据库连接池"""
        if self.engine is not None:
            close_db(self.engine)
            self.engine = None

    # --- 问题 ---

    def save_question(
        self,
        author_id: int,
        title: str,
        content: str,
        tags: Optional[List[str]] = None,
        subject_id: Optional[int] = None,
    ) -> QuestionDetail:
        return self.question_service.save_question(
            author_id, title, content, tags, subject_id
        )

    def update_question(
        self,
        question_id: int,
        acting_user_id: int,
        title: str,
        content: str,
        tags: Optional[List[str]] = None,
        subject_id: Optional[int] = None,
    ) -> QuestionDetail:
        return self.question_service.update_question(
            question_id, acting_user_id, title, content, tags, subject_id
        )

    def delete_question(self, question_id: int, acting_user_id: int) -> bool:
        return self.question_service.delete_question(question_id, acting_user_id)

    def find_by_id(self, question_id: Optional[int]) -> Optional[QuestionDetail]:
        return self.question_service.find_by_id(question_id)

    def find_by_author(
        self, author_id: Optional[int], limit: Optional[int] = None, offset: int = 0
    ) -> List[QuestionDetail]:
        """按时间倒序列出某个用户提出的问题"""
        if author_id is None:
            return []
        criteria = QuestionSearchCriteria(
            author_id=author_id,
            limit=limit or self.default_page_size,
            offset=offset,
        )
        return self.search_service.search(criteria)

    def increment_view_count(self, question_id: int) -> bool:
        return self.question_service.increment_view_count(question_id)

    def mark_solved(self, question_id: int, solved: bool = True) -> QuestionDetail:
        return self.question_service.mark_solved(question_id, solved)

    # --- 搜索 ---

    def search(self, criteria: Optional[QuestionSearchCriteria]) -> List[QuestionDetail]:
        return self.search_service.search(criteria)

    def search_page(
        self,
        criteria: Optional[QuestionSearchCriteria],
        page: int,
        page_size: Optional[int] = None,
    ) -> PageResult:
        return self.search_service.search_page(
            criteria, page, page_size or self.default_page_size
        )

    # --- 回答 ---

    def save_answer(self, question_id: int, author_id: int, content: str) -> AnswerDetail:
        return self.answer_service.save_answer(question_id, author_id, content)

    def find_answers(self, question_id: int) -> List[AnswerDetail]:
        return self.answer_service.find_answers(question_id)

    def list_answers_page(
        self, question_id: int, page: int, page_size: Optional[int] = None
    ) -> PageResult:
        return self.answer_service.list_answers_page(
            question_id, page, page_size or self.default_page_size
        )

    def find_answer_by_id(self, answer_id: Optional[int]) -> Optional[AnswerDetail]:
        return self.answer_service.find_answer_by_id(answer_id)

    # --- 投票 ---

    def cast_vote_on_question(
        self, question_id: int, voter_id: int, value: VoteValue
    ) -> VoteResult:
        return self.vote_service.cast_vote(ItemKind.QUESTION, question_id, voter_id, value)

    def cast_vote_on_answer(
        self, answer_id: int, voter_id: int, value: VoteValue
    ) -> VoteResult:
        return self.vote_service.cast_vote(ItemKind.ANSWER, answer_id, voter_id, value)

    def get_user_vote(
        self, kind: ItemKind, item_id: int, voter_id: int
    ) -> Optional[VoteValue]:
        return self.vote_service.get_user_vote(kind, item_id, voter_id)

    # --- 学科 ---

    def create_subject(
        self, name: str, description: Optional[str] = None
    ) -> SubjectDetail:
        return self.subject_service.create_subject(name, description)

    def find_subject_by_name(self, name: str) -> Optional[SubjectDetail]:
        return self.subject_service.find_subject_by_name(name)

    def list_subjects(self) -> List[SubjectDetail]:
        return self.subject_service.list_subjects()

    # --- 标签 ---

    def get_all_tags(self) -> List[TagDetail]:
        return self.tag_service.get_all_tags()

    def get_trending_tags(self, limit: int = 10) -> List[TagDetail]:
        return self.tag_service.get_trending_tags(limit)

    def find_tag_by_name(self, name: str) -> Optional[TagDetail]:
        return self.tag_service.find_tag_by_name(name)

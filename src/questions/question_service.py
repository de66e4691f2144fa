import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session, selectinload, sessionmaker
from sqlmodel import select

from questions.validation import validate_question_input
from shared.database import read_scope, transactional_scope
from shared.dto.question_detail import QuestionDetail
from shared.enum.item_kind import ItemKind
from shared.exceptions import NotAuthorizedError, NotFoundError, StoreError
from shared.models import Answer, Question, Subject
from tag_system.tag_index import TagIndex
from voting.vote_ledger import VoteLedger

logger = logging.getLogger(__name__)


class QuestionService:
    """问题的增删改查。写操作各自在一个事务中完成，标签替换与问题写入同进同退。"""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def save_question(
        self,
        author_id: int,
        title: str,
        content: str,
        tags: Optional[List[str]] = None,
        subject_id: Optional[int] = None,
    ) -> QuestionDetail:
        """
        创建新问题并关联标签
        """
        title, content, tag_names = validate_question_input(author_id, title, content, tags)

        with transactional_scope(self.session_factory) as session:
            subject_name = self._resolve_subject_name(session, subject_id)
            question = Question(
                user_id=author_id,
                subject_id=subject_id,
                title=title,
                content=content,
            )
            session.add(question)
            session.flush()
            assert question.id is not None

            tag_index = TagIndex(session)
            tag_index.replace_tags(question.id, tag_names)
            detail = QuestionDetail.from_question(
                question, tag_index.get_tag_names(question.id), subject_name
            )

        logger.info(f"用户 {author_id} 创建问题 {detail.id}: {title}")
        return detail

    def update_question(
        self,
        question_id: int,
        acting_user_id: int,
        title: str,
        content: str,
        tags: Optional[List[str]] = None,
        subject_id: Optional[int] = None,
    ) -> QuestionDetail:
        """
        编辑问题，只有作者本人可以编辑。标签整体替换。
        """
        title, content, tag_names = validate_question_input(
            acting_user_id, title, content, tags
        )

        with transactional_scope(self.session_factory) as session:
            question = self._get_owned_question(session, question_id, acting_user_id)
            subject_name = self._resolve_subject_name(session, subject_id)

            question.title = title
            question.content = content
            question.subject_id = subject_id
            question.updated_at = datetime.now(timezone.utc)
            session.add(question)
            session.flush()

            tag_index = TagIndex(session)
            tag_index.replace_tags(question_id, tag_names)
            detail = QuestionDetail.from_question(
                question, tag_index.get_tag_names(question_id), subject_name
            )

        logger.info(f"问题 {question_id} 已由用户 {acting_user_id} 更新")
        return detail

    def delete_question(self, question_id: int, acting_user_id: int) -> bool:
        """
        删除问题及其全部关联数据：标签关联、问题投票、回答投票、回答。
        """
        with transactional_scope(self.session_factory) as session:
            self._get_owned_question(session, question_id, acting_user_id)

            TagIndex(session).clear_tags(question_id)
            VoteLedger(session, ItemKind.QUESTION).delete_for_items([question_id])

            answer_ids = (
                session.execute(select(Answer.id).where(Answer.question_id == question_id))
                .scalars()
                .all()
            )
            VoteLedger(session, ItemKind.ANSWER).delete_for_items(answer_ids)
            session.execute(
                delete(Answer).where(Answer.question_id == question_id)  # type: ignore
            )
            session.execute(
                delete(Question).where(Question.id == question_id)  # type: ignore
            )

        logger.info(
            f"问题 {question_id} 已被用户 {acting_user_id} 删除（连同 {len(answer_ids)} 个回答）"
        )
        return True

    def find_by_id(self, question_id: Optional[int]) -> Optional[QuestionDetail]:
        """
        根据ID获取问题，不存在时返回 None
        """
        if question_id is None or question_id <= 0:
            return None

        statement = (
            select(Question, Subject.name.label("subject_name"))  # type: ignore
            .outerjoin(Subject, Question.subject_id == Subject.id)  # type: ignore
            .where(Question.id == question_id)
            .options(selectinload(Question.tags))  # type: ignore
        )
        with read_scope(self.session_factory) as session:
            row = session.execute(statement).first()
            if row is None:
                return None
            question, subject_name = row
            return QuestionDetail.from_question(
                question, [tag.name for tag in question.tags], subject_name
            )

    def increment_view_count(self, question_id: int) -> bool:
        """
        浏览数 +1。尽力而为：存储失败只记录日志并返回 False，不向上抛出。
        """
        try:
            with transactional_scope(self.session_factory) as session:
                result = session.execute(
                    update(Question)
                    .where(Question.id == question_id)  # type: ignore
                    .values(view_count=Question.view_count + 1)
                )
                return result.rowcount > 0
        except StoreError:
            logger.error(f"增加问题 {question_id} 的浏览数失败", exc_info=True)
            return False

    def mark_solved(self, question_id: int, solved: bool = True) -> QuestionDetail:
        with transactional_scope(self.session_factory) as session:
            question = session.get(Question, question_id)
            if question is None:
                logger.warning(f"标记解决状态失败: 问题 {question_id} 不存在")
                raise NotFoundError(f"问题 {question_id} 不存在")

            question.is_solved = solved
            session.add(question)
            session.flush()
            detail = QuestionDetail.from_question(
                question,
                TagIndex(session).get_tag_names(question_id),
                self._resolve_subject_name(session, question.subject_id),
            )

        logger.info(f"问题 {question_id} 已标记为{'已解决' if solved else '未解决'}")
        return detail

    def _get_owned_question(
        self, session: Session, question_id: int, acting_user_id: int
    ) -> Question:
        question = session.get(Question, question_id)
        if question is None:
            logger.warning(f"问题 {question_id} 不存在")
            raise NotFoundError(f"问题 {question_id} 不存在")
        if question.user_id != acting_user_id:
            logger.warning(f"用户 {acting_user_id} 试图修改他人的问题 {question_id}")
            raise NotAuthorizedError(f"用户 {acting_user_id} 不是问题 {question_id} 的作者")
        return question

    def _resolve_subject_name(
        self, session: Session, subject_id: Optional[int]
    ) -> Optional[str]:
        if subject_id is None:
            return None
        subject = session.get(Subject, subject_id)
        if subject is None:
            raise NotFoundError(f"学科 {subject_id} 不存在")
        return subject.name

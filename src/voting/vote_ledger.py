import logging
from typing import Iterable, Optional, Union

from sqlalchemy import case, delete, func
from sqlalchemy.orm import Session
from sqlmodel import select

from shared.enum.item_kind import ItemKind
from shared.enum.vote_outcome import VoteOutcome
from shared.enum.vote_value import VoteValue
from shared.models import AnswerVote, QuestionVote
from voting.dto.vote_result import VoteCounts

logger = logging.getLogger(__name__)

VoteRow = Union[QuestionVote, AnswerVote]


class VoteLedger:
    """
    投票记录表（问题或回答）的读写封装。
    每个 (投票者, 对象) 至多一条记录，由唯一约束保证。
    所有方法都在调用方提供的会话（事务）内执行，本身不提交。
    """

    def __init__(self, session: Session, kind: ItemKind):
        self.session = session
        self.kind = kind
        if kind is ItemKind.QUESTION:
            self._model = QuestionVote
            self._item_column = QuestionVote.question_id
            self._is_up = QuestionVote.vote_type == VoteValue.UP.value
            self._is_down = QuestionVote.vote_type == VoteValue.DOWN.value
        else:
            self._model = AnswerVote
            self._item_column = AnswerVote.answer_id
            self._is_up = AnswerVote.is_upvote.is_(True)  # type: ignore
            self._is_down = AnswerVote.is_upvote.is_(False)  # type: ignore

    def _new_row(self, item_id: int, voter_id: int, value: VoteValue) -> VoteRow:
        if self.kind is ItemKind.QUESTION:
            return QuestionVote(user_id=voter_id, question_id=item_id, vote_type=value.value)
        return AnswerVote(answer_id=item_id, user_id=voter_id, is_upvote=value.is_upvote)

    def find_vote(self, item_id: int, voter_id: int) -> Optional[VoteRow]:
        statement = select(self._model).where(
            self._item_column == item_id,
            self._model.user_id == voter_id,  # type: ignore
        )
        return self.session.execute(statement).scalars().first()

    def get_vote_value(self, item_id: int, voter_id: int) -> Optional[VoteValue]:
        vote = self.find_vote(item_id, voter_id)
        return vote.value if vote else None

    def cast_vote(self, item_id: int, voter_id: int, value: VoteValue) -> VoteOutcome:
        """
        切换式投票：
        - 没有记录：新建，返回 CREATED
        - 已有相同方向的记录：删除（取消投票），返回 REMOVED
        - 已有相反方向的记录：原地改写，返回 UPDATED
        并发下插入可能违反唯一约束，此时 flush 抛出 IntegrityError，由调用方决定是否重试。
        """
        existing = self.find_vote(item_id, voter_id)

        if existing is None:
            self.session.add(self._new_row(item_id, voter_id, value))
            outcome = VoteOutcome.CREATED
        elif existing.value is value:
            self.session.delete(existing)
            outcome = VoteOutcome.REMOVED
        else:
            existing.set_value(value)
            self.session.add(existing)
            outcome = VoteOutcome.UPDATED

        self.session.flush()
        logger.debug(
            f"{self.kind.value} {item_id} 收到用户 {voter_id} 的 {value.value}: {outcome.value}"
        )
        return outcome

    def count_votes(self, item_id: int) -> VoteCounts:
        """从投票表统计赞成/反对数"""
        statement = select(
            func.coalesce(func.sum(case((self._is_up, 1), else_=0)), 0),
            func.coalesce(func.sum(case((self._is_down, 1), else_=0)), 0),
        ).where(self._item_column == item_id)
        upvotes, downvotes = self.session.execute(statement).one()
        return VoteCounts(upvotes=int(upvotes), downvotes=int(downvotes))

    def delete_for_items(self, item_ids: Iterable[int]) -> int:
        """删除若干对象的全部投票记录，返回删除的行数"""
        ids = list(item_ids)
        if not ids:
            return 0
        result = self.session.execute(
            delete(self._model).where(self._item_column.in_(ids))  # type: ignore
        )
        return result.rowcount or 0

import logging

from sqlalchemy import func, update
from sqlalchemy.orm import Session
from sqlmodel import select

from shared.enum.item_kind import ItemKind
from shared.exceptions import NotFoundError
from shared.models import Answer, Question
from voting.dto.vote_result import VoteCounts
from voting.vote_ledger import VoteLedger

logger = logging.getLogger(__name__)

# 回答获得认证所需的赞成票数
VERIFIED_ANSWER_THRESHOLD = 10


def is_verified(upvotes: int) -> bool:
    return upvotes >= VERIFIED_ANSWER_THRESHOLD


class VoteAggregator:
    """
    根据投票表重新计算问题/回答上缓存的赞成、反对数。
    对回答而言，计数和认证状态在同一条 UPDATE 中写回，二者不会分开更新。
    必须与投票操作在同一事务中调用。
    """

    def __init__(self, session: Session, ledger: VoteLedger):
        self.session = session
        self.ledger = ledger

    def recompute(self, item_id: int) -> VoteCounts:
        counts = self.ledger.count_votes(item_id)
        if self.ledger.kind is ItemKind.QUESTION:
            self._write_question_counts(item_id, counts)
        else:
            self._write_answer_counts(item_id, counts)
        return counts

    def _write_question_counts(self, question_id: int, counts: VoteCounts):
        result = self.session.execute(
            update(Question)
            .where(Question.id == question_id)  # type: ignore
            .values(upvotes=counts.upvotes, downvotes=counts.downvotes)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"问题 {question_id} 不存在")

    def _write_answer_counts(self, answer_id: int, counts: VoteCounts):
        was_accepted = self.session.execute(
            select(Answer.is_accepted).where(Answer.id == answer_id)
        ).scalar_one_or_none()
        if was_accepted is None:
            raise NotFoundError(f"回答 {answer_id} 不存在")

        verified = is_verified(counts.upvotes)
        self.session.execute(
            update(Answer)
            .where(Answer.id == answer_id)  # type: ignore
            .values(
                upvotes=counts.upvotes,
                downvotes=counts.downvotes,
                is_accepted=verified,
            )
        )

        if bool(was_accepted) != verified:
            status = "已认证" if verified else "取消认证"
            logger.info(f"回答 {answer_id} {status} (赞成票: {counts.upvotes})")


def recount_answers(session: Session, question_id: int) -> int:
    """按回答表重新统计问题的回答数并写回，返回新的回答数"""
    answer_count = session.execute(
        select(func.count()).select_from(Answer).where(Answer.question_id == question_id)
    ).scalar_one()
    session.execute(
        update(Question)
        .where(Question.id == question_id)  # type: ignore
        .values(answer_count=answer_count)
    )
    return answer_count

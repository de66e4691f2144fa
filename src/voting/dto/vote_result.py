from typing import Optional

from pydantic import BaseModel, Field

from shared.enum.item_kind import ItemKind
from shared.enum.vote_outcome import VoteOutcome
from shared.enum.vote_value import VoteValue


class VoteCounts(BaseModel):
    """从投票表重新统计出的赞成/反对数"""

    upvotes: int = 0
    downvotes: int = 0

    @property
    def net_votes(self) -> int:
        return self.upvotes - self.downvotes


class VoteResult(BaseModel):
    """一次投票操作完成后的结果"""

    item_kind: ItemKind
    item_id: int
    voter_id: int
    outcome: VoteOutcome
    upvotes: int
    downvotes: int
    current_vote: Optional[VoteValue] = Field(
        default=None, description="操作后该用户对此对象的投票，取消投票后为 None"
    )
    is_accepted: Optional[bool] = Field(
        default=None, description="仅对回答有效：重新计算后的认证状态"
    )

    @property
    def net_votes(self) -> int:
        return self.upvotes - self.downvotes

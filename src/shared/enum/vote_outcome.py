from enum import Enum


class VoteOutcome(str, Enum):
    """一次投票操作对投票记录造成的结果"""

    CREATED = "created"  # 新建投票
    UPDATED = "updated"  # 改为相反方向
    REMOVED = "removed"  # 重复投票，取消

from enum import Enum


class VoteValue(str, Enum):
    """投票方向"""

    UP = "upvote"
    DOWN = "downvote"

    @property
    def is_upvote(self) -> bool:
        return self is VoteValue.UP

    @classmethod
    def from_bool(cls, is_upvote: bool) -> "VoteValue":
        return cls.UP if is_upvote else cls.DOWN

from enum import Enum


class SortOption(str, Enum):
    """问题搜索结果的排序方式"""

    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_UPVOTED = "most_upvoted"
    MOST_VIEWED = "most_viewed"
    MOST_ANSWERED = "most_answered"

from dataclasses import dataclass, field
from typing import List, Optional

from shared.enum.sort_option import SortOption

DEFAULT_SEARCH_LIMIT = 20


@dataclass
class QuestionSearchCriteria:
    """封装所有搜索条件的查询对象"""

    search_text: Optional[str] = None  # 在标题或正文中模糊匹配
    subject_id: Optional[int] = None
    author_id: Optional[int] = None
    tags: List[str] = field(default_factory=list)  # 必须同时拥有全部标签
    only_unanswered: bool = False
    only_solved: bool = False
    sort_option: SortOption = SortOption.NEWEST
    limit: int = DEFAULT_SEARCH_LIMIT
    offset: int = 0

    def __post_init__(self):
        self.sort_option = (
            SortOption(self.sort_option) if self.sort_option else SortOption.NEWEST
        )
        self.tags = list(self.tags or [])
        if self.limit is None or self.limit <= 0:
            self.limit = DEFAULT_SEARCH_LIMIT
        if self.offset is None or self.offset < 0:
            self.offset = 0

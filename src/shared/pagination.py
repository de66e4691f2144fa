import math
from typing import Generic, List, Sequence, TypeVar

from pydantic import BaseModel, Field

from shared.exceptions import ValidationError

DataType = TypeVar("DataType")

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


class PageResult(BaseModel, Generic[DataType]):
    """
    标准分页结果
    页码从 0 开始
    """

    items: List[DataType]
    total_count: int = Field(description="符合条件的总项目数")
    page_size: int = Field(description="每页的项目数（已限制在合法范围内）")
    current_page: int = Field(description="当前页码")
    total_pages: int = Field(description="总页数")
    has_next: bool
    has_previous: bool


def clamp_page_size(page_size: int) -> int:
    """将每页数量限制在 [1, 100]"""
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, page_size))


def validate_page(current_page: int):
    if current_page < 0:
        raise ValidationError(f"页码不能为负数: {current_page}")


def offset_for(current_page: int, page_size: int) -> int:
    """计算某一页的偏移量"""
    validate_page(current_page)
    return current_page * clamp_page_size(page_size)


def paginate(
    items: Sequence[DataType], total_count: int, page_size: int, current_page: int
) -> PageResult[DataType]:
    """
    根据总数、每页数量和当前页码生成分页元数据。
    请求的偏移量超出总数时返回空列表，但元数据依旧正确。
    """
    validate_page(current_page)
    page_size = clamp_page_size(page_size)
    total_count = max(0, total_count)

    return PageResult(
        items=list(items),
        total_count=total_count,
        page_size=page_size,
        current_page=current_page,
        total_pages=math.ceil(total_count / page_size),
        has_next=(current_page + 1) * page_size < total_count,
        has_previous=current_page > 0,
    )

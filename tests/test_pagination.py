# tests/test_pagination.py

import pytest

from shared.exceptions import ValidationError
from shared.pagination import clamp_page_size, offset_for, paginate


@pytest.mark.parametrize(
    "test_id, total_count, page_size, current_page, expected",
    [
        # expected: (total_pages, has_next, has_previous)
        ("1_first_page", 12, 10, 0, (2, True, False)),
        ("2_last_page", 12, 10, 1, (2, False, True)),
        ("3_beyond_end", 12, 10, 5, (2, False, True)),
        ("4_exact_fit", 20, 10, 1, (2, False, True)),
        ("5_empty", 0, 10, 0, (0, False, False)),
        ("6_single_item", 1, 1, 0, (1, False, False)),
    ],
)
def test_paginate_metadata(test_id, total_count, page_size, current_page, expected):
    result = paginate([], total_count, page_size, current_page)
    actual = (result.total_pages, result.has_next, result.has_previous)
    assert actual == expected, f"测试 '{test_id}' 失败"
    assert result.total_count == total_count
    assert result.current_page == current_page


@pytest.mark.parametrize(
    "page_size, expected",
    [(0, 1), (-5, 1), (1, 1), (50, 50), (100, 100), (1000, 100)],
)
def test_clamp_page_size(page_size, expected):
    assert clamp_page_size(page_size) == expected


def test_paginate_clamps_page_size():
    result = paginate([], 500, 1000, 0)
    assert result.page_size == 100
    assert result.total_pages == 5


def test_negative_page_rejected():
    with pytest.raises(ValidationError):
        paginate([], 10, 10, -1)
    with pytest.raises(ValidationError):
        offset_for(-1, 10)


def test_offset_for():
    assert offset_for(0, 10) == 0
    assert offset_for(3, 10) == 30
    assert offset_for(2, 0) == 2

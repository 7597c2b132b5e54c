"""
Name: Pagination DTO Tests
"""

import pytest

from postboard.application.query_engine import ListPage
from postboard.crosscutting.pagination import to_page

pytestmark = pytest.mark.unit


def test_to_page_maps_items_and_meta():
    list_page = ListPage(items=[1, 2, 3], total=8, page=2, limit=3)

    page = to_page(list_page, lambda n: n * 10)

    assert page.items == [10, 20, 30]
    assert page.pagination.model_dump() == {"page": 2, "limit": 3, "total": 8, "pages": 3}


def test_to_page_empty():
    page = to_page(ListPage(items=[], total=0, page=1, limit=10), str)
    assert page.items == []
    assert page.pagination.pages == 0

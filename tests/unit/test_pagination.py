"""Unit tests for pagination defaults."""

import pytest

from portfolio_manager.schemas import PaginatedResponse, Pagination


class TestPagination:
    """Out-of-range values fall back to defaults instead of failing."""
    
    def test_unspecified_is_first_page_of_ten(self):
        """No values means the first page of ten."""
        pagination = Pagination()
        
        assert (pagination.page, pagination.limit) == (1, 10)
        assert pagination.offset == 0
    
    def test_zero_values_behave_like_unspecified(self):
        """Zero page and limit fall back to defaults."""
        pagination = Pagination(page=0, limit=0)
        
        assert (pagination.page, pagination.limit) == (1, 10)
    
    @pytest.mark.parametrize("limit", [-5, 101, 1000])
    def test_limit_outside_range_uses_default(self, limit):
        """Limits outside 1..100 fall back to ten."""
        assert Pagination(page=2, limit=limit).limit == 10
    
    def test_limit_bounds_are_inclusive(self):
        """One and one hundred are both accepted."""
        assert Pagination(limit=1).limit == 1
        assert Pagination(limit=100).limit == 100
    
    def test_negative_page_becomes_first(self):
        """Negative pages become the first page."""
        assert Pagination(page=-3, limit=5).page == 1
    
    def test_offset(self):
        """Offset skips the earlier pages."""
        assert Pagination(page=3, limit=20).offset == 40


class TestPaginatedResponse:
    
    def test_has_more_when_rows_remain(self):
        """has_more is set while later pages exist."""
        response = PaginatedResponse.create(["a"] * 10, 25, Pagination(page=2, limit=10))
        
        assert response.has_more is True
        assert response.page == 2
        assert response.limit == 10
    
    def test_last_page(self):
        """The last page has nothing more."""
        response = PaginatedResponse.create(["a"] * 5, 25, Pagination(page=3, limit=10))
        
        assert response.has_more is False

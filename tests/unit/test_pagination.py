"""
Unit tests for Pagination utilities.

This module covers the lenient parameter parsing, the metadata arithmetic and
``paginate`` against a real table.
"""

import pytest
from sqlalchemy import desc
from sqlalchemy.future import select

from app.shared.pagination import (
    PaginationMeta,
    PaginationParams,
    build_pagination_meta,
    paginate,
)
from models import Yarn
from tests.factories import YarnFactory


class TestPaginationParams:
    """Test cases for PaginationParams."""

    def test_default_values(self):
        params = PaginationParams()

        assert params.page == 1
        assert params.limit == 20
        assert params.offset == 0

    def test_custom_values(self):
        params = PaginationParams(page=3, limit=50)

        assert params.page == 3
        assert params.limit == 50
        assert params.offset == 100

    @pytest.mark.parametrize("page", [0, -5])
    def test_page_below_one_is_clamped(self, page):
        assert PaginationParams(page=page).page == 1

    def test_limit_is_clamped(self):
        assert PaginationParams(limit=0).limit == 1
        assert PaginationParams(limit=-3).limit == 1
        assert PaginationParams(limit=500).limit == 100

    @pytest.mark.parametrize("raw", ["abc", "", None, "1.5x"])
    def test_non_numeric_falls_back_to_defaults(self, raw):
        params = PaginationParams(page=raw, limit=raw)

        assert params.page == 1
        assert params.limit == 20

    def test_numeric_strings_are_parsed(self):
        params = PaginationParams(page="2", limit=" 10 ")

        assert params.page == 2
        assert params.limit == 10


class TestPaginationMeta:
    """Test cases for the metadata arithmetic."""

    def test_middle_page(self):
        meta = build_pagination_meta(page=2, limit=10, total=25)

        assert meta == {
            "page": 2,
            "limit": 10,
            "total": 25,
            "total_pages": 3,
            "has_next": True,
            "has_prev": True,
        }

    def test_last_page(self):
        meta = build_pagination_meta(page=3, limit=10, total=25)

        assert meta["has_next"] is False
        assert meta["has_prev"] is True

    def test_empty_result(self):
        meta = build_pagination_meta(page=1, limit=20, total=0)

        assert meta["total_pages"] == 0
        assert meta["has_next"] is False
        assert meta["has_prev"] is False

    def test_page_beyond_the_end(self):
        meta = build_pagination_meta(page=9, limit=10, total=25)

        assert meta["has_next"] is False
        assert meta["has_prev"] is True

    def test_meta_matches_model(self):
        meta = build_pagination_meta(1, 10, 3)

        assert PaginationMeta(**meta).total_pages == 1
        assert set(meta) == set(PaginationMeta.model_fields)


class TestPaginate:
    """Test cases for paginate against the database."""

    @pytest.mark.asyncio
    async def test_second_page(self, test_db):
        YarnFactory._meta.sqlalchemy_session = test_db
        YarnFactory.create_batch(25)
        await test_db.commit()

        result = await paginate(
            test_db,
            select(Yarn),
            PaginationParams(page=2, limit=10),
            order_by=desc(Yarn.created_at),
        )

        assert len(result["data"]) == 10
        assert result["pagination"]["total"] == 25
        assert result["pagination"]["total_pages"] == 3
        assert result["pagination"]["has_next"] is True
        assert result["pagination"]["has_prev"] is True

    @pytest.mark.asyncio
    async def test_filtered_count(self, test_db):
        YarnFactory._meta.sqlalchemy_session = test_db
        YarnFactory.create_batch(3, brand="Drops")
        YarnFactory.create_batch(2, brand="Malabrigo")
        await test_db.commit()

        result = await paginate(
            test_db, select(Yarn).where(Yarn.brand == "Drops"), PaginationParams()
        )

        assert result["pagination"]["total"] == 3
        assert {yarn.brand for yarn in result["data"]} == {"Drops"}

    @pytest.mark.asyncio
    async def test_page_beyond_the_end_is_empty(self, test_db):
        YarnFactory._meta.sqlalchemy_session = test_db
        YarnFactory.create_batch(2)
        await test_db.commit()

        result = await paginate(test_db, select(Yarn), PaginationParams(page=5, limit=10))

        assert result["data"] == []
        assert result["pagination"]["total"] == 2

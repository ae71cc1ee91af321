"""
Unit tests for derived project costs.
"""

import uuid
from types import SimpleNamespace

import pytest

from app.domains.project.costs import (
    build_cost_summary,
    compute_totals,
    summary_currency,
    total_additional_cost,
    total_yarn_cost,
    totals_by_currency,
    yarn_line_total,
)
from tests.factories import yarn_usage


def _cost(amount, currency="EUR", **extra):
    return {
        "id": str(uuid.uuid4()),
        "description": "Stitch markers",
        "amount": amount,
        "currency": currency,
        "category": "notions",
        "purchase_date": None,
        **extra,
    }


def _project(yarns_used=None, additional_costs=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        yarns_used=yarns_used or [],
        additional_costs=additional_costs or [],
    )


class TestTotals:
    """Test cases for the cost totals."""

    def test_yarn_line_total(self):
        assert yarn_line_total(yarn_usage(uuid.uuid4(), quantity=3, cost=4.5)) == pytest.approx(13.5)

    def test_missing_price_counts_as_zero(self):
        assert yarn_line_total(yarn_usage(uuid.uuid4(), quantity=3, cost=None)) == 0

    def test_yarn_and_additional_totals(self):
        yarns = [
            yarn_usage(uuid.uuid4(), quantity=3, cost=10),
            yarn_usage(uuid.uuid4(), quantity=2, cost=6),
        ]
        costs = [_cost(15)]

        assert total_yarn_cost(yarns) == pytest.approx(42)
        assert total_additional_cost(costs) == pytest.approx(15)

        totals = compute_totals(_project(yarns, costs))
        assert totals == {
            "total_yarn_cost": pytest.approx(42),
            "total_additional_cost": pytest.approx(15),
            "total_project_cost": pytest.approx(57),
        }

    def test_empty_project_costs_nothing(self):
        assert compute_totals(_project()) == {
            "total_yarn_cost": 0,
            "total_additional_cost": 0,
            "total_project_cost": 0,
        }


class TestCurrencies:
    def test_summary_currency_follows_first_yarn(self):
        yarns = [
            yarn_usage(uuid.uuid4(), currency="USD"),
            yarn_usage(uuid.uuid4(), currency="EUR"),
        ]

        assert summary_currency(yarns) == "USD"

    def test_summary_currency_defaults(self):
        assert summary_currency([]) == "EUR"

    def test_totals_by_currency_never_converts(self):
        yarns = [
            yarn_usage(uuid.uuid4(), quantity=2, cost=5, currency="USD"),
            yarn_usage(uuid.uuid4(), quantity=1, cost=8, currency="EUR"),
        ]
        costs = [_cost(4, currency="EUR"), _cost(1.5, currency="GBP")]

        assert totals_by_currency(yarns, costs) == {
            "USD": pytest.approx(10),
            "EUR": pytest.approx(12),
            "GBP": pytest.approx(1.5),
        }


class TestBuildCostSummary:
    """Test cases for the cost report."""

    def test_breakdown_lines(self):
        yarn_id = uuid.uuid4()
        yarns = [yarn_usage(yarn_id, quantity=3, cost=10)]
        costs = [_cost(15)]
        project = _project(yarns, costs)

        summary = build_cost_summary(project, {str(yarn_id): "Merino Worsted"})

        assert summary.project_id == project.id
        assert summary.yarn_cost == pytest.approx(30)
        assert summary.additional_cost == pytest.approx(15)
        assert summary.total_cost == pytest.approx(45)
        assert summary.currency == "EUR"

        line = summary.breakdown.yarns[0]
        assert line.yarn_name == "Merino Worsted"
        assert line.quantity == 3
        assert line.unit.value == "skeins"
        assert line.total == pytest.approx(30)

        extra = summary.breakdown.additional[0]
        assert extra.description == "Stitch markers"
        assert extra.amount == 15

    def test_deleted_yarn_has_no_name(self):
        project = _project([yarn_usage(uuid.uuid4(), quantity=1, cost=2)])

        summary = build_cost_summary(project, {})

        assert summary.breakdown.yarns[0].yarn_name is None
        assert summary.yarn_cost == pytest.approx(2)

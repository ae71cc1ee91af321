"""Derived project costs.

Nothing here is stored: totals are recomputed from the embedded collections
every time a project is read.
"""

from collections import defaultdict
from typing import Any, Mapping

from app.core.config import settings
from app.schemas.project import (
    AdditionalCostLine,
    CostBreakdown,
    CostSummary,
    YarnCostLine,
)


def yarn_line_total(item: Mapping[str, Any]) -> float:
    """quantity_used x cost_per_unit, a missing price counting as 0."""
    return float(item.get("quantity_used") or 0) * float(item.get("cost_per_unit") or 0)


def total_yarn_cost(yarns_used: list[dict]) -> float:
    return sum((yarn_line_total(item) for item in yarns_used), 0.0)


def total_additional_cost(additional_costs: list[dict]) -> float:
    return sum((float(cost.get("amount") or 0) for cost in additional_costs), 0.0)


def compute_totals(project) -> dict[str, float]:
    yarn_cost = total_yarn_cost(project.yarns_used or [])
    additional_cost = total_additional_cost(project.additional_costs or [])
    return {
        "total_yarn_cost": yarn_cost,
        "total_additional_cost": additional_cost,
        "total_project_cost": yarn_cost + additional_cost,
    }


def summary_currency(yarns_used: list[dict]) -> str:
    """Currency of the first yarn line, else the configured default."""
    if yarns_used and yarns_used[0].get("currency"):
        return yarns_used[0]["currency"]
    return settings.default_currency


def totals_by_currency(yarns_used: list[dict], additional_costs: list[dict]) -> dict[str, float]:
    """Per-currency sums; amounts in different currencies are never converted."""
    totals: dict[str, float] = defaultdict(float)
    for item in yarns_used:
        totals[item.get("currency") or settings.default_currency] += yarn_line_total(item)
    for cost in additional_costs:
        totals[cost.get("currency") or settings.default_currency] += float(cost.get("amount") or 0)
    return dict(totals)


def build_cost_summary(project, yarn_names: Mapping[str, str]) -> CostSummary:
    """
    Build the cost report of a project.

    Args:
        project: the Project row
        yarn_names: yarn id (as string) -> yarn name, for the yarns still in the catalog

    Returns:
        CostSummary with totals and a line-by-line breakdown
    """
    yarns_used = project.yarns_used or []
    additional_costs = project.additional_costs or []
    totals = compute_totals(project)

    yarn_lines = [
        YarnCostLine(
            usage_id=item["id"],
            yarn_id=item["yarn_id"],
            yarn_name=yarn_names.get(str(item["yarn_id"])),
            quantity=item["quantity_used"],
            unit=item.get("quantity_unit") or "skeins",
            cost_per_unit=item.get("cost_per_unit"),
            currency=item.get("currency") or settings.default_currency,
            total=yarn_line_total(item),
        )
        for item in yarns_used
    ]
    additional_lines = [
        AdditionalCostLine(
            cost_id=cost["id"],
            description=cost["description"],
            amount=cost["amount"],
            currency=cost.get("currency") or settings.default_currency,
            category=cost.get("category"),
            purchase_date=cost.get("purchase_date"),
        )
        for cost in additional_costs
    ]

    return CostSummary(
        project_id=project.id,
        yarn_cost=totals["total_yarn_cost"],
        additional_cost=totals["total_additional_cost"],
        total_cost=totals["total_project_cost"],
        currency=summary_currency(yarns_used),
        totals_by_currency=totals_by_currency(yarns_used, additional_costs),
        breakdown=CostBreakdown(yarns=yarn_lines, additional=additional_lines),
    )

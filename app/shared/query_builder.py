"""Translate incoming filter mappings into SQLAlchemy conditions."""

from typing import Any, Mapping

from sqlalchemy import inspect

RESERVED_KEYS = frozenset({"page", "limit", "sort", "select", "populate"})


def clean_filters(filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop reserved keys and empty values (None or empty string)."""
    if not filters:
        return {}
    return {
        key: value
        for key, value in filters.items()
        if key not in RESERVED_KEYS and value is not None and value != ""
    }


def build_filters(model: Any, filters: Mapping[str, Any] | None) -> list:
    """
    Build equality conditions on ``model`` for every usable filter.

    Keys that are not mapped columns of the model are ignored, as are the
    reserved pagination keys and empty values.
    """
    columns = inspect(model).columns.keys()
    conditions = []
    for key, value in clean_filters(filters).items():
        if key not in columns:
            continue
        if hasattr(value, "value"):  # Enum members compare by their value
            value = value.value
        conditions.append(getattr(model, key) == value)
    return conditions

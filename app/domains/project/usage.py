"""Usage collections of a project: kinds, invariants and in-place edits.

A project carries three parallel usage collections (yarns, needles, hooks).
They follow the same rules, so each is described once by a ``UsageKind`` and
the helpers below work on any of them. Items are the stored JSON dicts.

Invariants per kind, checked whenever the collection changes:
  * a catalog reference appears at most once;
  * at most one item has ``is_primary`` set.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Type
from uuid import UUID

from pydantic import BaseModel

from app.exceptions.project import DuplicateReferenceError, MultiplePrimaryError
from app.schemas.project import (
    HookSummary,
    HookUsage,
    NeedleSummary,
    NeedleUsage,
    YarnSummary,
    YarnUsage,
)
from models import Hook, Needle, Yarn


@dataclass(frozen=True)
class UsageKind:
    """Describes one usage collection of the project aggregate."""

    name: str  # "yarn"
    label: str  # "Yarn", used in messages
    collection: str  # attribute on Project holding the JSON list
    ref_field: str  # reference id key inside each item
    model: Any  # catalog ORM class the reference points to
    item_schema: Type[BaseModel]
    summary_schema: Type[BaseModel]

    @property
    def expand_key(self) -> str:
        return self.name


YARN = UsageKind(
    name="yarn",
    label="Yarn",
    collection="yarns_used",
    ref_field="yarn_id",
    model=Yarn,
    item_schema=YarnUsage,
    summary_schema=YarnSummary,
)

NEEDLE = UsageKind(
    name="needle",
    label="Needle",
    collection="needles_used",
    ref_field="needle_id",
    model=Needle,
    item_schema=NeedleUsage,
    summary_schema=NeedleSummary,
)

HOOK = UsageKind(
    name="hook",
    label="Hook",
    collection="hooks_used",
    ref_field="hook_id",
    model=Hook,
    item_schema=HookUsage,
    summary_schema=HookSummary,
)

USAGE_KINDS = (YARN, NEEDLE, HOOK)

# Patch fields that may be set back to null; any other null in a patch is ignored
CLEARABLE_FIELDS = frozenset({"notes", "cost_per_unit"})


def reference_ids(kind: UsageKind, items: Iterable[dict]) -> list[str]:
    """Reference ids of ``items`` as strings, in collection order."""
    return [str(item[kind.ref_field]) for item in items]


def ensure_unique_references(kind: UsageKind, items: Iterable[dict]) -> None:
    seen = set()
    for ref in reference_ids(kind, items):
        if ref in seen:
            raise DuplicateReferenceError(kind.name)
        seen.add(ref)


def ensure_single_primary(kind: UsageKind, items: Iterable[dict]) -> None:
    primaries = sum(1 for item in items if item.get("is_primary"))
    if primaries > 1:
        raise MultiplePrimaryError(kind.name)


def validate_usage_items(kind: UsageKind, items: list[dict]) -> None:
    """Check both collection invariants; the first violation found is raised."""
    ensure_unique_references(kind, items)
    ensure_single_primary(kind, items)


def has_reference(kind: UsageKind, items: Iterable[dict], ref_id: UUID | str) -> bool:
    return str(ref_id) in reference_ids(kind, items)


def find_usage(items: list[dict], usage_id: UUID | str) -> Optional[int]:
    """Index of the item whose sub-identity is ``usage_id``, or None."""
    target = str(usage_id)
    for index, item in enumerate(items):
        if str(item.get("id")) == target:
            return index
    return None


def clear_primary(items: Iterable[dict], keep: UUID | str | None = None) -> list[dict]:
    """Copy of ``items`` with ``is_primary`` unset everywhere except on ``keep``."""
    keep = str(keep) if keep is not None else None
    cleared = []
    for item in items:
        item = dict(item)
        if str(item.get("id")) != keep:
            item["is_primary"] = False
        cleared.append(item)
    return cleared


def append_usage(kind: UsageKind, items: list[dict], new_item: dict) -> list[dict]:
    """New collection with ``new_item`` appended.

    A primary newcomer first takes the flag away from its siblings of the
    same kind; other kinds are never touched.
    """
    siblings = clear_primary(items) if new_item.get("is_primary") else [dict(i) for i in items]
    updated = siblings + [new_item]
    validate_usage_items(kind, updated)
    return updated


def patch_usage(kind: UsageKind, items: list[dict], index: int, patch: dict) -> list[dict]:
    """New collection with ``patch`` merged onto the item at ``index``."""
    updated = [dict(i) for i in items]
    merged = {**updated[index], **patch}
    # Round-trip through the item schema so the stored shape stays valid
    updated[index] = kind.item_schema.model_validate(merged).model_dump(mode="json")
    if patch.get("is_primary"):
        updated = clear_primary(updated, keep=updated[index]["id"])
    validate_usage_items(kind, updated)
    return updated


def remove_usage(items: list[dict], index: int) -> list[dict]:
    """New collection without the item at ``index``; order is preserved."""
    return [dict(item) for i, item in enumerate(items) if i != index]

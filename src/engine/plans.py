from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from src.utils.temporal import group_date_label, parse_timestamp

TONIGHT_KEY = "tonight"
NO_DATE_KEY = "noDate"
PAST_KEY = "past"


@dataclass(frozen=True)
class Plan:
    id: str
    name: str = "New Plan"
    emoji: str = "✨"
    date: str | None = None
    is_tonight: bool = False
    item_count: int = 0
    share_code: str | None = None


@dataclass(frozen=True)
class PlanItem:
    id: str
    plan_id: str
    venue_name: str
    sort_order: int = 0
    venue_category: str | None = None
    venue_neighborhood: str | None = None
    arrival_time: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PlanGroup:
    key: str
    label: str
    plans: tuple[Plan, ...]
    is_tonight: bool = False
    date: str | None = None


def load_plan(payload: dict[str, Any]) -> Plan:
    return Plan(
        id=str(payload["id"]),
        name=str(payload.get("name") or "New Plan"),
        emoji=str(payload.get("emoji") or "✨"),
        date=payload.get("date") or None,
        is_tonight=bool(payload.get("is_tonight", False)),
        item_count=int(payload.get("item_count") or 0),
        share_code=payload.get("share_code"),
    )


def load_plan_item(payload: dict[str, Any], plan_id: str) -> PlanItem:
    return PlanItem(
        id=str(payload.get("id") or ""),
        plan_id=str(payload.get("plan_id") or plan_id),
        venue_name=str(payload.get("venue_name") or "Untitled"),
        sort_order=int(payload.get("sort_order") or 0),
        venue_category=payload.get("venue_category"),
        venue_neighborhood=payload.get("venue_neighborhood"),
        arrival_time=payload.get("arrival_time"),
        notes=payload.get("notes"),
    )


def _plan_day(plan: Plan) -> str | None:
    dt = parse_timestamp(plan.date)
    return dt.date().isoformat() if dt is not None else None


def group_plans(plans: Sequence[Plan], now: datetime) -> list[PlanGroup]:
    """Partition plans into Tonight, one group per upcoming date, No Date and Past.

    Every plan lands in exactly one group. Tonight and No Date are always
    present; Past only when it has plans. Unparsable dates count as no date.
    """
    today = now.replace(tzinfo=None).date().isoformat()
    tonight: list[Plan] = []
    no_date: list[Plan] = []
    past: list[Plan] = []
    upcoming: dict[str, list[Plan]] = {}

    for plan in plans:
        day = _plan_day(plan)
        if plan.is_tonight:
            tonight.append(plan)
        elif day is None:
            no_date.append(plan)
        elif day < today:
            past.append(plan)
        else:
            upcoming.setdefault(day, []).append(plan)

    result = [
        PlanGroup(
            key=TONIGHT_KEY, label="Tonight", plans=tuple(tonight), is_tonight=True, date=today
        )
    ]
    for day in sorted(upcoming):
        result.append(
            PlanGroup(
                key=day, label=group_date_label(day, now), plans=tuple(upcoming[day]), date=day
            )
        )
    result.append(PlanGroup(key=NO_DATE_KEY, label="No Date", plans=tuple(no_date)))
    if past:
        result.append(PlanGroup(key=PAST_KEY, label="Past", plans=tuple(past)))
    return result


def _move(items: Sequence[Any], from_index: int, to_index: int) -> list[Any]:
    if not (0 <= from_index < len(items)) or not (0 <= to_index < len(items)):
        raise ValueError(f"Reorder indices out of range: {from_index} -> {to_index}")
    out = list(items)
    out.insert(to_index, out.pop(from_index))
    return out


def reorder_group(
    groups: Sequence[PlanGroup], group_key: str, from_index: int, to_index: int
) -> list[PlanGroup]:
    """Move one plan inside a single group; every other group is returned unchanged."""
    if not any(g.key == group_key for g in groups):
        raise ValueError(f"Unknown plan group: {group_key}")
    return [
        replace(g, plans=tuple(_move(g.plans, from_index, to_index))) if g.key == group_key else g
        for g in groups
    ]


def apply_group_order(group: PlanGroup, plan_ids: Sequence[str]) -> PlanGroup:
    """Apply a full new ordering to a group. Ids from other groups are rejected."""
    by_id = {plan.id: plan for plan in group.plans}
    if len(plan_ids) != len(by_id) or set(plan_ids) != set(by_id):
        raise ValueError(f"New order for group '{group.key}' must contain exactly its own plans.")
    return replace(group, plans=tuple(by_id[pid] for pid in plan_ids))


def reorder_plan_items(items: Sequence[PlanItem], item_ids: Sequence[str]) -> list[PlanItem]:
    """Return items in ``item_ids`` order with sort_order reassigned from 0."""
    by_id = {item.id: item for item in items}
    if len(item_ids) != len(by_id) or set(item_ids) != set(by_id):
        raise ValueError("New item order must contain exactly the plan's items.")
    return [replace(by_id[iid], sort_order=i) for i, iid in enumerate(item_ids)]


def flow_hint(plan: Plan) -> str:
    count = plan.item_count or 0
    if count == 0:
        return "Empty"
    if count == 1:
        return "1 spot"
    if count == 2:
        return "Dinner → Drinks"
    if count == 3:
        return "Dinner → Drinks → Nightlife"
    return f"{count} spots planned"

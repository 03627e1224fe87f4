from __future__ import annotations

import secrets
import string
from collections.abc import Sequence

from src.engine.plans import Plan, PlanItem

SHARE_CODE_ALPHABET = string.ascii_lowercase + string.digits


def generate_share_code(length: int = 8) -> str:
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(length))


def get_share_url(base_url: str, share_code: str) -> str:
    return f"{base_url.rstrip('/')}/{share_code}"


def generate_share_text(plan: Plan, items: Sequence[PlanItem], share_url: str) -> str:
    when = "Tonight" if plan.is_tonight else (plan.date or "Date TBD")
    lines = [f"{plan.emoji} {plan.name} ({when})"]
    for position, item in enumerate(sorted(items, key=lambda i: i.sort_order), start=1):
        line = f"{position}. {item.venue_name}"
        if item.arrival_time:
            line += f" at {item.arrival_time}"
        if item.venue_neighborhood:
            line += f" ({item.venue_neighborhood})"
        lines.append(line)
    lines.append(f"See the plan: {share_url}")
    return "\n".join(lines)

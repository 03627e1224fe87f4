from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any

import requests

from src.engine.content import ContentRecord
from src.engine.dialogue import RecommendationContext, build_recommendation_request
from src.ingestion.normalizer import normalize_records

DEFAULT_LIMIT = 50
DEFAULT_TIMEOUT_SECONDS = 15


@dataclass(frozen=True)
class RecommendationResult:
    """Three already-ordered lists returned by the recommendation service."""

    top_picks: list[ContentRecord] = field(default_factory=list)
    after_dinner: list[ContentRecord] = field(default_factory=list)
    events: list[ContentRecord] = field(default_factory=list)

    def itinerary(self) -> list[ContentRecord]:
        """Night plan stops: the first top pick, then up to two after-dinner spots."""
        return [*self.top_picks[:1], *self.after_dinner[:2]]


def _log_request(method: str, path: str, status: str, error: str = "") -> None:
    msg = f"[API] {method} {path} status={status}"
    if error:
        msg += f" error={error}"
    stream = sys.stderr if status == "failed" else sys.stdout
    print(msg, file=stream)


def _unwrap(payload: Any, key: str) -> list[Any]:
    if isinstance(payload, dict):
        payload = payload.get(key) or []
    return payload if isinstance(payload, list) else []


def _get(base_url: str, path: str, params: dict[str, Any], timeout_seconds: int) -> Any:
    try:
        resp = requests.get(f"{base_url.rstrip('/')}{path}", params=params, timeout=timeout_seconds)
        resp.raise_for_status()
    except requests.RequestException as exc:
        _log_request("GET", path, "failed", str(exc))
        raise
    _log_request("GET", path, "ok")
    return resp.json()


def fetch_venues(
    base_url: str,
    city: str,
    limit: int = DEFAULT_LIMIT,
    category: str | None = None,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> list[ContentRecord]:
    params: dict[str, Any] = {"city": city, "limit": limit}
    if category:
        params["category"] = category
    payload = _get(base_url, "/api/venues", params, timeout_seconds)
    return normalize_records(_unwrap(payload, "venues"), kind="venue")


def fetch_events(
    base_url: str,
    city: str,
    limit: int = DEFAULT_LIMIT,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> list[ContentRecord]:
    payload = _get(base_url, "/api/events", {"city": city, "limit": limit}, timeout_seconds)
    return normalize_records(_unwrap(payload, "events"), kind="event")


def request_recommendations(
    base_url: str,
    context: RecommendationContext,
    city: str,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> RecommendationResult:
    path = "/api/lumina"
    try:
        resp = requests.post(
            f"{base_url.rstrip('/')}{path}",
            json=build_recommendation_request(context, city),
            timeout=timeout_seconds,
        )
        resp.raise_for_status()
    except requests.RequestException as exc:
        _log_request("POST", path, "failed", str(exc))
        raise
    _log_request("POST", path, "ok")
    payload = resp.json()
    if not isinstance(payload, dict):
        payload = {}
    return RecommendationResult(
        top_picks=normalize_records(_unwrap(payload, "topPicks")),
        after_dinner=normalize_records(_unwrap(payload, "afterDinner")),
        events=normalize_records(_unwrap(payload, "events"), kind="event"),
    )

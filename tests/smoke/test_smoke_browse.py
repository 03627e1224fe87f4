from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest
import requests

from src.cli import main, run_browse, run_share
from src.config.settings import Settings
from src.engine.content import Event


def _settings(tmp_path: Path) -> Settings:
    return Settings(
        api_base_url="http://api.test",
        default_city="Manhattan",
        request_timeout_seconds=5,
        fetch_limit=50,
        collection_cap=15,
        search_cap=20,
        collections_config_path=str(tmp_path / "missing.yaml"),
        share_base_url="https://lumina.app/plan",
        log_level="INFO",
        verbose_fetch_logs=False,
    )


def test_browse_builds_default_event_rows(tmp_path, sample_events, now):
    result = run_browse(_settings(tmp_path), kind="events", now=now, fetch=lambda: sample_events)
    assert result["status"] == "ok"
    rows = {c["label"]: c["items"] for c in result["collections"]}
    assert rows["🌙 Tonight"] == ["Afro Fest (Tonight)"]
    assert rows["🍾 Brunch Parties"] == ["Bottomless Brunch Party"]


def test_browse_search_mode(tmp_path, sample_events, now):
    result = run_browse(_settings(tmp_path), query="salsa", now=now, fetch=lambda: sample_events)
    assert result == {"status": "ok", "results": ["Salsa Night (Saturday, October 24)"]}


def test_browse_reports_fetch_failure(tmp_path, now):
    def boom() -> list[Event]:
        raise requests.ConnectionError("offline")

    result = run_browse(_settings(tmp_path), now=now, fetch=boom)
    assert result["status"] == "failed"
    assert "offline" in result["error"]


def test_main_exits_on_invalid_config(monkeypatch):
    monkeypatch.setenv("LUMINA_API_BASE", "no-scheme")
    with pytest.raises(SystemExit) as exc:
        main(["--kind", "events"])
    assert exc.value.code == 1


def test_browse_skips_bad_menu_row_instead_of_crashing(tmp_path, sample_events, now, capsys):
    config = tmp_path / "collections.yaml"
    config.write_text(
        "events:\n  - label: Broken\n    cap: 0\n  - label: Afro\n    terms: afrobeats\n",
        encoding="utf-8",
    )
    settings = replace(_settings(tmp_path), collections_config_path=str(config))
    result = run_browse(settings, kind="events", now=now, fetch=lambda: sample_events)
    assert result["status"] == "ok"
    assert [c["label"] for c in result["collections"]] == ["Afro"]
    assert "[CONFIG] menu=events entry=Broken status=skipped" in capsys.readouterr().err


def test_share_uses_configured_base_url(tmp_path):
    settings = replace(_settings(tmp_path), share_base_url="https://plans.test/p/")
    payload = {
        "plan": {"id": "p1", "name": "Birthday", "emoji": "🎉", "share_code": "abc123"},
        "items": [{"id": "1", "venue_name": "Carbone", "sort_order": 0}],
    }
    assert run_share(settings, payload).splitlines() == [
        "🎉 Birthday (Date TBD)",
        "1. Carbone",
        "See the plan: https://plans.test/p/abc123",
    ]


def test_main_prints_share_text(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("LUMINA_API_BASE", raising=False)
    monkeypatch.setenv("SHARE_BASE_URL", "https://plans.test/p")
    plan_file = tmp_path / "plan.json"
    plan_file.write_text(
        json.dumps({"plan": {"id": "p1", "name": "Night Out", "is_tonight": True}}),
        encoding="utf-8",
    )
    main(["--share-plan", str(plan_file)])
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "✨ Night Out (Tonight)"
    assert out[-1].startswith("See the plan: https://plans.test/p/")

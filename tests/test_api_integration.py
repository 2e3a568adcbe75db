# tests/test_api_integration.py
"""
Integration Tests for the snakedraft HTTP API.

Focus
-----
These tests verify the HTTP contract (request/response schemas, error codes and
statuses) on top of a real engine. The clock ticker is disabled so the clock
only moves through `POST /clock/tick`, and the session file lives in `tmp_path`.

Scenarios
---------
1. **Setup**: configure participants and catalog, then start.
2. **Happy Path**: pick, undo, redo, results and CSV export.
3. **Error Handling**: every domain error maps to its status and `error` code.
4. **Persistence**: a new app restores the autosaved session.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from snakedraft.api.app import create_app
from snakedraft.api.session_store import SessionHolder
from snakedraft.core.contracts.session import DraftConfig
from snakedraft.core.draft.engine import DraftEngine
from snakedraft.core.history.storage import SessionStore

CONFIG = DraftConfig(
    participant_count=2,
    total_rounds=2,
    early_round_seconds=12,
    late_round_seconds=8,
    early_rounds=1,
    warning_threshold=10,
)

ITEMS: list[dict[str, Any]] = [
    {"name": "Ace", "category": "QB", "grouping": "KC", "week": 6, "rank": 1},
    {"name": "Bo", "category": "RB1", "grouping": "SF", "week": 9, "rank": 2},
    {"name": "Cy", "category": "WR", "grouping": "KC", "week": 6, "rank": 3},
    {"name": "Di", "category": "RB", "grouping": "BUF", "week": 7, "rank": 4},
    {"name": "Ed", "category": "TE", "grouping": "SF", "week": 9, "rank": "NR"},
]


def _install_holder(path: Path) -> SessionHolder:
    holder = SessionHolder(CONFIG, SessionStore(path))
    SessionHolder._instance = holder
    return holder


@pytest.fixture  # type: ignore[misc]
def client(tmp_path: Path) -> Generator[TestClient, None, None]:
    """
    Create a clean API client for each test.

    The holder is a process-wide singleton, so we install a fresh one backed by
    a temporary session file and remove it afterwards.
    """
    _install_holder(tmp_path / "session.json")
    app = create_app(auto_tick=False, restore=False)
    with TestClient(app) as c:
        yield c
    SessionHolder._instance = None


def _start(client: TestClient) -> dict[str, Any]:
    resp = client.post(
        "/session/start",
        json={"catalog": {"items": ITEMS}, "participants": ["Sharks", "Jets"]},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def _item_id(client: TestClient, name: str) -> str:
    items = client.get("/items", params={"search": name}).json()
    return str(items[0]["item_id"])


def test_setup_then_start(client: TestClient) -> None:
    resp = client.get("/session")
    assert resp.status_code == 200
    assert resp.json()["status"] == "not_started"

    assert client.post("/session/participants", json={"labels": ["A", "B"]}).status_code == 200
    assert client.put("/session/participants/1", json={"label": "Jets"}).status_code == 200
    csv_text = "RK,PLAYER NAME,TEAM,POS,BYE\n1,Ace,KC,QB,6\n2,Bo,SF,RB,9\n"
    assert client.post("/session/catalog", json={"csv": csv_text}).status_code == 200

    started = client.post("/session/start").json()["session"]
    assert started["status"] == "in_progress"
    assert started["clock_status"] == "running"
    assert started["remaining"] == 12
    assert started["current"]["participant"] == "A"
    assert [t["participant"] for t in started["upcoming"]] == ["Jets", "Jets"]


def test_items_are_best_available_first(client: TestClient) -> None:
    _start(client)
    names = [i["name"] for i in client.get("/items").json()]
    assert names == ["Ace", "Bo", "Cy", "Di", "Ed"]

    rbs = client.get("/items", params={"category": "RB"}).json()
    assert [i["name"] for i in rbs] == ["Bo", "Di"]

    filters = client.get("/items/filters").json()
    assert filters["categories"] == ["QB", "RB", "TE", "WR"]


def test_pick_undo_redo_flow(client: TestClient) -> None:
    _start(client)
    ace = _item_id(client, "Ace")

    resp = client.post("/session/picks", json={"item_id": ace})
    assert resp.status_code == 200
    body = resp.json()
    assert body["events"][0]["kind"] == "pick_completed"
    assert body["session"]["pointer"] == 1
    assert body["session"]["recent"][0]["name"] == "Ace"

    undone = client.post("/session/undo").json()["session"]
    assert undone["pointer"] == 0 and undone["can_redo"] is True

    redone = client.post("/session/redo").json()["session"]
    assert redone["pointer"] == 1

    top = client.post("/session/picks/top", json={"filters": {"category": "RB"}}).json()
    assert top["session"]["recent"][-1]["name"] == "Bo"

    board = client.get("/board").json()
    assert board["rounds"][0][1]["overall"] == 2

    results = client.get("/results").json()
    assert [r["label"] for r in results] == ["Sharks", "Jets"]

    csv_resp = client.get("/results.csv")
    assert csv_resp.status_code == 200
    assert csv_resp.headers["content-type"].startswith("text/csv")
    assert csv_resp.text.splitlines()[1] == "Sharks,Ace,QB,KC,1,1,1,6"


def test_domain_errors_map_to_status_and_code(client: TestClient) -> None:
    resp = client.post("/session/picks", json={"item_id": "nope"})
    assert resp.status_code == 409
    assert resp.json()["error"] == "invalid_session_state"

    resp = client.post("/session/start", json={"catalog": {"items": []}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_config"

    resp = client.post("/session/catalog", json={"csv": "NAME\nx\n"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"

    _start(client)
    ace = _item_id(client, "Ace")
    client.post("/session/picks", json={"item_id": ace})

    resp = client.post("/session/picks", json={"item_id": ace})
    assert resp.status_code == 409
    assert resp.json()["error"] == "already_taken"

    resp = client.post("/session/picks", json={"item_id": "nope"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"

    resp = client.post("/session/redo")
    assert resp.status_code == 409
    assert resp.json()["error"] == "nothing_to_redo"

    resp = client.post("/session/start")
    assert resp.json()["error"] == "invalid_session_state"


def test_draft_complete_error(client: TestClient) -> None:
    _start(client)
    for _ in range(4):
        assert client.post("/session/picks/top").status_code == 200
    assert client.get("/session").json()["status"] == "complete"

    resp = client.post("/session/picks/top")
    assert resp.status_code == 409
    assert resp.json()["error"] == "draft_complete"


def test_clock_endpoints_and_event_log(client: TestClient) -> None:
    _start(client)

    paused = client.post("/clock/pause").json()["session"]
    assert paused["clock_status"] == "paused" and paused["paused"] is True

    resp = client.post("/clock/pause")
    assert resp.status_code == 409
    assert resp.json()["error"] == "invalid_clock_state"

    assert client.post("/clock/tick").json()["session"]["remaining"] == 12
    client.post("/clock/toggle")

    events: list[dict[str, Any]] = []
    for _ in range(12):
        events.extend(client.post("/clock/tick").json()["events"])
    assert [e["kind"] for e in events] == ["threshold_crossed", "turn_expired"]

    session = client.get("/session").json()
    assert session["clock_status"] == "expired"
    assert session["remaining"] == 0

    log = client.get("/events", params={"after": 0}).json()
    assert [e["event"]["kind"] for e in log] == ["threshold_crossed", "turn_expired"]
    assert client.get("/events", params={"after": log[-1]["seq"]}).json() == []

    restarted = client.post("/clock/restart").json()["session"]
    assert restarted["clock_status"] == "running"
    assert restarted["remaining"] == 12


def test_restore_on_startup(tmp_path: Path) -> None:
    """A fresh app with restore enabled picks up the autosaved session."""
    path = tmp_path / "session.json"
    first = _install_holder(path)
    first.engine.start(ITEMS, ["Sharks", "Jets"])
    first.engine.pick_top()

    _install_holder(path)
    app = create_app(auto_tick=False, restore=True)
    with TestClient(app) as c:
        session = c.get("/session").json()
        state = c.get("/session/state").json()
    SessionHolder._instance = None

    assert session["pointer"] == 1
    assert session["current"]["participant"] == "Jets"
    assert state["picks"][0]["overall"] == 1


def _write_corrupt(path: Path) -> None:
    path.write_text("{not json", encoding="utf-8")


def _write_oversized(path: Path) -> None:
    """Five picks from a 3-round draft, more than CONFIG's four."""
    engine = DraftEngine(DraftConfig(participant_count=2, total_rounds=3))
    engine.start(ITEMS)
    for _ in range(5):
        engine.pick_top()
    SessionStore(path).save(engine.state)


@pytest.mark.parametrize("write", [_write_corrupt, _write_oversized])  # type: ignore[misc]
def test_unusable_saved_session_does_not_block_startup(tmp_path: Path, write: Any) -> None:
    path = tmp_path / "session.json"
    write(path)

    holder = _install_holder(path)
    app = create_app(auto_tick=False, restore=True)
    with TestClient(app) as c:
        assert c.get("/health").status_code == 200
        session = c.get("/session").json()
    SessionHolder._instance = None

    assert session["status"] == "not_started"
    assert session["pointer"] == 0
    assert holder.restore() is False
    assert path.exists()

import json
from pathlib import Path

from grix_mcp.infra.telemetry import RuntimeEventLogger


def test_events_append_jsonl(tmp_path: Path) -> None:
    events = RuntimeEventLogger(str(tmp_path))
    events.emit("signals.state", state="creating")
    events.emit("signals.state", state="polling", agent_id="a1")
    rows = [json.loads(line) for line in (tmp_path / "runtime_events.jsonl").read_text().splitlines()]
    assert [r["state"] for r in rows] == ["creating", "polling"]
    assert rows[1]["agent_id"] == "a1"


def test_events_without_data_dir(tmp_path: Path) -> None:
    events = RuntimeEventLogger(None)
    events.emit("options.refresh", key="BTC:call:long")
    assert events.path is None
    assert list(tmp_path.iterdir()) == []

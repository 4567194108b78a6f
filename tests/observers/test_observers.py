import json
import logging

from vmboot.observers.dispatcher import EventBus
from vmboot.observers.events import AttemptFailed, AuthAttempt, BootstrapAborted, new_ctx
from vmboot.observers.jsonfile import JsonFileObserver
from vmboot.observers.logger import LoggerObserver


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


def test_new_ctx_shape():
    ctx = new_ctx(instance="agent-1", zone="us-east1-b")
    assert set(ctx) == {"ts", "run_id", "instance", "zone"}
    assert ctx["ts"].endswith("Z")
    assert new_ctx("a", run_id="fixed")["run_id"] == "fixed"

def test_bus_keeps_delivering_after_observer_failure():
    class Broken:
        def notify(self, ev): raise RuntimeError("boom")
    cap = Capture()
    bus = EventBus([Broken(), cap])
    ev = AuthAttempt(**new_ctx("agent-1"), username="jenkins", attempt=1, max_attempts=3)

    bus.emit(ev)

    assert cap.events == [ev]

def test_logger_observer_maps_levels(caplog):
    logger = logging.getLogger("observer-test")
    obs = LoggerObserver(logger)
    ctx = new_ctx("agent-1")

    with caplog.at_level(logging.DEBUG, logger="observer-test"):
        obs.notify(AuthAttempt(**ctx, username="jenkins", attempt=1, max_attempts=3))
        obs.notify(AttemptFailed(**ctx, attempt=1, result="rejected", retry_in_s=15.0))
        obs.notify(BootstrapAborted(**ctx, attempts=1, error="InterruptedError: x"))

    assert [r.levelno for r in caplog.records] == [logging.INFO, logging.WARNING, logging.ERROR]
    assert "username=jenkins" in caplog.records[0].getMessage()
    assert caplog.records[1].getMessage().startswith("[EVENT] AttemptFailed:")

def test_jsonfile_observer_appends_lines(tmp_path):
    path = tmp_path / "nested" / "events.jsonl"
    obs = JsonFileObserver(path)
    ctx = new_ctx("agent-1", zone="z")

    obs.notify(AuthAttempt(**ctx, username="jenkins", attempt=1, max_attempts=2))
    obs.notify(AttemptFailed(**ctx, attempt=1, result="transient_error"))

    rows = [json.loads(line) for line in path.read_text().splitlines()]
    assert [r["type"] for r in rows] == ["AuthAttempt", "AttemptFailed"]
    assert rows[1]["level"] == "warning"
    assert rows[1]["retry_in_s"] is None
    assert rows[0]["zone"] == "z"

from __future__ import annotations

from datetime import datetime

import pytest

from scrapedash.core.run.state import LogEntry, RunPhase, RunSnapshot

NOW = datetime(2026, 1, 1, 9, 5, 7)


def test_initial_snapshot() -> None:
    s = RunSnapshot.initial(now=NOW)

    assert s.phase is RunPhase.STOPPED
    assert s.work_count == 0
    assert s.status_message == "Ready to start"
    assert [e.message for e in s.log] == ["Application initialized"]
    assert not s.is_running
    assert not s.is_paused


@pytest.mark.parametrize(
    ("phase", "is_running", "is_paused"),
    [
        (RunPhase.STOPPED, False, False),
        (RunPhase.RUNNING, True, False),
        (RunPhase.PAUSED, True, True),
    ],
)
def test_derived_flags(phase: RunPhase, is_running: bool, is_paused: bool) -> None:
    s = RunSnapshot(phase=phase)
    assert s.is_running is is_running
    assert s.is_paused is is_paused


def test_evolve_appends_entry_last_and_leaves_source_untouched() -> None:
    s0 = RunSnapshot.initial(now=NOW)
    s1 = s0.evolve(entry=LogEntry(timestamp=NOW, message="Unit 1 created"), work_count=1)

    assert s1 is not s0
    assert len(s0.log) == 1
    assert s0.work_count == 0
    assert s1.work_count == 1
    assert s1.last_entry is not None
    assert s1.last_entry.message == "Unit 1 created"


def test_evolve_with_capacity_keeps_newest() -> None:
    s = RunSnapshot.initial(now=NOW)
    for i in range(5):
        s = s.evolve(entry=LogEntry(timestamp=NOW, message=f"m{i}"), log_capacity=3)

    assert [e.message for e in s.log] == ["m2", "m3", "m4"]


def test_snapshot_is_frozen() -> None:
    s = RunSnapshot.initial(now=NOW)
    with pytest.raises(AttributeError):
        s.work_count = 5  # type: ignore[misc]


def test_log_entry_render() -> None:
    assert LogEntry(timestamp=NOW, message="Scraping started").render() == "09:05:07: Scraping started"

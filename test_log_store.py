import pytest
import asyncio
import json
from datetime import datetime, timezone, timedelta
from unittest.mock import patch
from models.log_entry import LogEntry, ActionType, ActionStatus, MAX_LOG
from services.log_store import LogStore

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_entry(i: int, status: ActionStatus = ActionStatus.SUCCESS, latency=None) -> LogEntry:
    return LogEntry(
        timestamp=BASE_TIME + timedelta(minutes=i),
        action=ActionType.HEALTH_CHECK,
        status=status,
        latency_ms=latency,
    )


@pytest.fixture
def store(tmp_path):
    return LogStore(str(tmp_path / "logs.json"))


@pytest.mark.asyncio
async def test_missing_file_loads_empty(store):
    assert await store.load() == []


@pytest.mark.asyncio
async def test_corrupt_file_loads_empty(store):
    with open(store.path, "w") as f:
        f.write("{not json")
    assert await store.load() == []


@pytest.mark.asyncio
async def test_non_list_document_loads_empty(store):
    with open(store.path, "w") as f:
        json.dump({"entries": []}, f)
    assert await store.load() == []


@pytest.mark.asyncio
async def test_malformed_entries_are_skipped(store):
    good = make_entry(1).to_document()
    with open(store.path, "w") as f:
        json.dump([good, {"action": "Reboot"}, "garbage"], f)

    entries = await store.load()
    assert entries == [make_entry(1)]


@pytest.mark.asyncio
async def test_round_trip_preserves_present_and_absent_latency(store):
    entries = [
        make_entry(2, ActionStatus.ERROR),
        make_entry(1, ActionStatus.SUCCESS, latency=120),
        LogEntry(
            timestamp=BASE_TIME,
            action=ActionType.RESTORE_TRIGGERED,
            status=ActionStatus.SUCCESS,
            http_status=200,
        ),
    ]
    assert await store.save(entries) is True

    loaded = await store.load()
    assert loaded == entries
    assert loaded[0].latency_ms is None
    assert loaded[1].latency_ms == 120


@pytest.mark.asyncio
async def test_absent_latency_is_omitted_on_disk(store):
    await store.save([make_entry(0, ActionStatus.ERROR), make_entry(1, latency=42)])

    with open(store.path) as f:
        raw = json.load(f)
    assert "latencyMs" not in raw[0]
    assert raw[1]["latencyMs"] == 42
    assert raw[1]["action"] == "HealthCheck"
    assert raw[1]["status"] == "Success"


@pytest.mark.asyncio
async def test_append_is_newest_first_and_capped(store):
    for i in range(MAX_LOG + 25):
        await store.append(make_entry(i, latency=i))

    entries = await store.load()
    assert len(entries) == MAX_LOG
    assert entries[0].latency_ms == MAX_LOG + 24
    assert entries[-1].latency_ms == 25
    timestamps = [entry.timestamp for entry in entries]
    assert timestamps == sorted(timestamps, reverse=True)


@pytest.mark.asyncio
async def test_concurrent_appends_are_not_lost(store):
    await asyncio.gather(*(store.append(make_entry(i)) for i in range(30)))

    entries = await store.load()
    assert len(entries) == 30


@pytest.mark.asyncio
async def test_write_failure_is_reported_not_raised(store):
    with patch("services.log_store.tempfile.mkstemp", side_effect=OSError("disk full")):
        assert await store.save([make_entry(0)]) is False
        await store.append(make_entry(1))

    assert await store.load() == []


@pytest.mark.asyncio
async def test_clear_empties_the_log(store):
    await store.append(make_entry(0))
    await store.clear()
    assert await store.load() == []


@pytest.mark.asyncio
async def test_append_stamps_entry_at_record_time(store):
    stale = make_entry(0)  # 2026-03-01, long before the append

    stored = await store.append(stale)

    assert stored.timestamp > stale.timestamp
    assert stored.action == stale.action
    assert await store.load() == [stored]

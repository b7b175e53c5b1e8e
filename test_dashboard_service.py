import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from models.log_entry import LogEntry, ActionType, ActionStatus
from models.system_status import SystemStatus
from services.dashboard_service import DashboardService, calculate_uptime_ratio, build_activity_series
from services.health_checker import HealthChecker, HealthCheckResult
from services.log_store import LogStore

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def entries_with(statuses):
    """Newest-first entries, one minute apart, mixing action types."""
    actions = [ActionType.HEALTH_CHECK, ActionType.RESTORE_TRIGGERED, ActionType.CACHE_CLEAR]
    total = len(statuses)
    return [
        LogEntry(
            timestamp=BASE_TIME + timedelta(minutes=total - i),
            action=actions[i % 3],
            status=status,
        )
        for i, status in enumerate(statuses)
    ]


@pytest.fixture
def store(tmp_path):
    return LogStore(str(tmp_path / "logs.json"))


def test_uptime_ratio_of_empty_log_is_100():
    assert calculate_uptime_ratio([]) == 100.0


def test_uptime_ratio_three_success_one_error():
    entries = entries_with([ActionStatus.SUCCESS] * 3 + [ActionStatus.ERROR])
    assert calculate_uptime_ratio(entries) == 75.0


def test_uptime_ratio_rounds_to_one_decimal():
    entries = entries_with([ActionStatus.SUCCESS, ActionStatus.SUCCESS, ActionStatus.ERROR])
    assert calculate_uptime_ratio(entries) == 66.7


def test_uptime_ratio_rounds_halves_up():
    # 1 of 80 is exactly 1.25%
    entries = entries_with([ActionStatus.SUCCESS] + [ActionStatus.ERROR] * 79)
    assert calculate_uptime_ratio(entries) == 1.3


def test_activity_series_is_last_twenty_oldest_first():
    statuses = [ActionStatus.ERROR] + [ActionStatus.SUCCESS] * 24
    entries = entries_with(statuses)

    series = build_activity_series(entries)

    assert len(series) == 20
    # newest entry (the error) ends the series
    assert series[-1].value == 0
    assert all(point.value == 1 for point in series[:-1])
    expected_first = entries[19].timestamp.astimezone().strftime("%H:%M:%S")
    assert series[0].label == expected_first


@pytest.mark.asyncio
async def test_dashboard_counts_across_all_actions(store):
    await store.save(entries_with([ActionStatus.SUCCESS, ActionStatus.ERROR, ActionStatus.SUCCESS, ActionStatus.SUCCESS]))
    status = SystemStatus()
    status.record(False, 90, BASE_TIME)

    data = await DashboardService(store, status).get_dashboard_data()

    assert data.success_count == 3
    assert data.error_count == 1
    assert data.uptime_ratio == 75.0
    assert data.currently_down is False
    assert data.last_checked_at == BASE_TIME
    assert data.last_latency_ms == 90
    assert len(data.entries) == 4
    assert len(data.activity) == 4


@pytest.mark.asyncio
async def test_dashboard_without_probe_reports_unknown(store):
    data = await DashboardService(store, SystemStatus()).get_dashboard_data()

    assert data.entries == []
    assert data.uptime_ratio == 100.0
    assert data.currently_down is None
    assert data.last_checked_at is None


@pytest.mark.asyncio
async def test_dashboard_live_probe_runs_before_loading(store):
    status = SystemStatus()
    checker = AsyncMock()

    async def probe():
        entry = LogEntry(timestamp=BASE_TIME, action=ActionType.HEALTH_CHECK, status=ActionStatus.SUCCESS, latency_ms=80)
        await store.append(entry)
        status.record(True, 80, BASE_TIME)
        return HealthCheckResult(True, 80, 503)

    checker.check_health.side_effect = probe

    data = await DashboardService(store, status, health_checker=checker).get_dashboard_data()

    checker.check_health.assert_awaited_once()
    assert data.currently_down is True
    assert len(data.entries) == 1
    assert data.entries[0].latency_ms == 80


@pytest.mark.asyncio
async def test_dashboard_reuses_recent_status_within_max_age(store):
    status = SystemStatus()
    checker = HealthChecker("https://site.example.com", store, status)
    service = DashboardService(store, status, health_checker=checker, probe_max_age=120)

    with patch("services.health_checker.httpx.AsyncClient") as mock_client:
        response = MagicMock()
        response.status_code = 200
        response.elapsed.total_seconds.return_value = 0.05
        mock_instance = AsyncMock()
        mock_instance.get.return_value = response
        mock_client.return_value.__aenter__.return_value = mock_instance

        first = await service.get_dashboard_data()
        second = await service.get_dashboard_data()

        assert mock_instance.get.await_count == 1
        assert len(second.entries) == 1
        assert first.last_latency_ms == second.last_latency_ms == 50

        # once the cached result ages out the site is checked again
        status.last_checked = status.last_checked - timedelta(seconds=121)
        third = await service.get_dashboard_data()

    assert mock_instance.get.await_count == 2
    assert len(third.entries) == 2
    assert third.currently_down is False

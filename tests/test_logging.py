import pytest

from common.logger import get_app_logger
from common.logger.logger_middleware import LogSeverity, RequestLogEntry


def entry(status_code: int, duration_ms: float, threshold: float = 1000.0):
    return RequestLogEntry(
        request_id="req-1",
        method="GET",
        path="/patients",
        status_code=status_code,
        duration_ms=duration_ms,
        slow_threshold_ms=threshold,
    )


@pytest.mark.parametrize(
    "status_code, duration_ms, slow, error, severity",
    [
        (200, 5.0, False, False, LogSeverity.INFO),
        (200, 1500.0, True, False, LogSeverity.WARNING),
        (404, 5.0, False, False, LogSeverity.WARNING),
        (500, 5.0, False, True, LogSeverity.ERROR),
        (503, 1500.0, True, True, LogSeverity.ERROR),
    ],
)
def test_log_entry_classification(status_code, duration_ms, slow, error, severity):
    log_entry = entry(status_code, duration_ms)

    assert log_entry.is_slow is slow
    assert log_entry.is_error is error
    assert log_entry.severity is severity


def test_threshold_is_configurable_and_not_logged():
    log_entry = entry(200, 300.0, threshold=250.0)

    assert log_entry.is_slow is True
    assert "slow_threshold_ms" not in log_entry.model_dump()


def test_timing_stats_count_calls():
    logger = get_app_logger("tests.timing", track_timing=True)

    logger.debug("below the configured level")
    logger.warning("counted", patient_id="abc")

    stats = logger.get_timing_stats()
    assert stats["total_calls"] == 2
    assert stats["max_time_ms"] >= 0


def test_timing_disabled_by_default():
    assert get_app_logger("tests.plain").get_timing_stats() == {
        "error": "Timing tracking not enabled"
    }


def test_bind_returns_independent_logger():
    base = get_app_logger("tests.bind", track_timing=True)

    bound = base.bind(patient_id="abc")
    bound.warning("bound event")

    assert bound.name == "tests.bind"
    assert base.get_timing_stats()["total_calls"] == 0

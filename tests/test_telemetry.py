import pytest
from wafermap.utils import telemetry
from wafermap.utils.telemetry import PerformanceMonitor, track_performance

@pytest.fixture(autouse=True)
def clean_logs():
    PerformanceMonitor.clear_logs()
    yield
    PerformanceMonitor.clear_logs()

def test_track_performance_logs_event():
    @track_performance("Unit Op")
    def work(x):
        return x * 2

    assert work(21) == 42
    logs = PerformanceMonitor.get_logs()
    assert logs[0]["Operation"] == "Unit Op"
    assert logs[0]["Duration (s)"] >= 0

def test_track_performance_logs_on_failure():
    @track_performance()
    def boom():
        raise RuntimeError("fail")

    with pytest.raises(RuntimeError):
        boom()
    assert PerformanceMonitor.get_logs()[0]["Operation"] == "boom"

def test_log_buffer_is_bounded():
    for i in range(PerformanceMonitor.MAX_ENTRIES + 5):
        PerformanceMonitor.log_event(f"op{i}", 0.0)
    logs = PerformanceMonitor.get_logs()
    assert len(logs) == PerformanceMonitor.MAX_ENTRIES
    assert logs[0]["Operation"] == f"op{PerformanceMonitor.MAX_ENTRIES + 4}"
    assert not PerformanceMonitor.to_dataframe().empty

def test_logs_use_session_state_under_streamlit(monkeypatch):
    session = {}
    monkeypatch.setattr(telemetry.runtime, "exists", lambda: True)
    monkeypatch.setattr(telemetry.st, "session_state", session)

    PerformanceMonitor.log_event("Viewer Op", 0.1)
    assert session[PerformanceMonitor.SESSION_KEY][0]["Operation"] == "Viewer Op"

    monkeypatch.setattr(telemetry.runtime, "exists", lambda: False)
    assert PerformanceMonitor.get_logs() == []

def test_separate_sessions_do_not_share_logs(monkeypatch):
    monkeypatch.setattr(telemetry.runtime, "exists", lambda: True)
    first, second = {}, {}

    monkeypatch.setattr(telemetry.st, "session_state", first)
    PerformanceMonitor.log_event("First Session", 0.0)

    monkeypatch.setattr(telemetry.st, "session_state", second)
    assert PerformanceMonitor.get_logs() == []
    PerformanceMonitor.clear_logs()
    assert second[PerformanceMonitor.SESSION_KEY] == []
    assert len(first[PerformanceMonitor.SESSION_KEY]) == 1

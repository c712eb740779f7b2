import importlib


def test_metrics_flag_parsing(monkeypatch):
    monkeypatch.setenv("METRICS_ENABLED", "TRUE")
    monkeypatch.setenv("METRICS_PATH", "/_relay/metrics")
    import cors_relay.vars as vars_module

    importlib.reload(vars_module)
    try:
        assert vars_module.METRICS_ENABLED is True
        assert vars_module.METRICS_PATH == "/_relay/metrics"
    finally:
        monkeypatch.delenv("METRICS_ENABLED")
        monkeypatch.delenv("METRICS_PATH")
        importlib.reload(vars_module)


def test_log_level_is_lowercased(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    import cors_relay.vars as vars_module

    importlib.reload(vars_module)
    try:
        assert vars_module.LOG_LEVEL == "debug"
    finally:
        monkeypatch.delenv("LOG_LEVEL")
        importlib.reload(vars_module)

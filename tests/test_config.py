"""Tests for environment configuration."""

from pathlib import Path

from locals3.config import Settings


def test_defaults(monkeypatch) -> None:
    for name in ("LOCALS3_STORAGE_ROOT", "LOCALS3_LOG_LEVEL", "LOCALS3_LOG_JSON", "LOCALS3_HOST", "LOCALS3_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.storage_root == Path("storage")
    assert settings.log_level == "INFO"
    assert settings.log_json is False
    assert settings.port == 8000


def test_reads_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("LOCALS3_STORAGE_ROOT", str(tmp_path))
    monkeypatch.setenv("LOCALS3_LOG_LEVEL", "debug")
    monkeypatch.setenv("LOCALS3_LOG_JSON", "true")
    monkeypatch.setenv("LOCALS3_PORT", "9001")

    settings = Settings.from_env()

    assert settings.storage_root == tmp_path
    assert settings.log_level == "debug"
    assert settings.log_json is True
    assert settings.port == 9001


def test_configure_logging_filters_by_level(capsys) -> None:
    import structlog

    from locals3.logging_config import configure_logging

    configure_logging("warning", json=True)
    try:
        logger = structlog.get_logger("locals3.test")
        logger.info("hidden_event")
        logger.warning("shown_event", bucket="x")
    finally:
        structlog.reset_defaults()

    out = capsys.readouterr().out
    assert "hidden_event" not in out
    assert '"event": "shown_event"' in out
    assert '"bucket": "x"' in out

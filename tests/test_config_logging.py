from __future__ import annotations

import logging
from pathlib import Path

import pytest

from declared_persons.config import DEFAULT_SOURCE_URL, get_settings
from declared_persons.logging_config import configure_logging


def test_get_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("DECLARED_PERSONS_URL", "DECLARED_PERSONS_TIMEOUT",
                "DECLARED_PERSONS_LIMIT", "DECLARED_PERSONS_LOG"):
        monkeypatch.delenv(var, raising=False)
    s = get_settings()
    assert s.source_url == DEFAULT_SOURCE_URL
    assert s.request_timeout == 10.0
    assert s.default_limit == 100
    assert s.log_path == Path("logs/declared_persons.log")


def test_get_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DECLARED_PERSONS_URL", "http://localhost:8080/odata")
    monkeypatch.setenv("DECLARED_PERSONS_TIMEOUT", "2.5")
    monkeypatch.setenv("DECLARED_PERSONS_LIMIT", "500")
    monkeypatch.setenv("DECLARED_PERSONS_LOG", "")
    s = get_settings()
    assert s.source_url == "http://localhost:8080/odata"
    assert s.request_timeout == 2.5
    assert s.default_limit == 500
    assert s.log_path is None


@pytest.mark.parametrize("var, raw", [("DECLARED_PERSONS_LIMIT", "lots"), ("DECLARED_PERSONS_TIMEOUT", "0")])
def test_get_settings_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch, var: str, raw: str) -> None:
    monkeypatch.setenv(var, raw)
    with pytest.raises(RuntimeError, match=var):
        get_settings()


def test_configure_logging_adds_stream_handler() -> None:
    configure_logging(None)
    root = logging.getLogger()
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "run.log"
    configure_logging(log_path, logging.DEBUG)
    logging.getLogger("declared_persons.test").debug("hello file")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello file" in log_path.read_text(encoding="utf-8")
    configure_logging(None)

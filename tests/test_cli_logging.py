from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from lineage.cli import app


def test_json_formatter_with_exc_and_stack() -> None:
    formatter = app.JsonFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("test").makeRecord(
            "test", logging.ERROR, __file__, 0, "failure", (), sys.exc_info(), func="func"
        )
    record.stack_info = "trace info"
    payload = json.loads(formatter.format(record))
    assert payload["level"] == "ERROR"
    assert payload["msg"] == "failure"
    assert "exc_info" in payload
    assert payload["stack"]


def test_configure_logging_json_and_file(tmp_path: Path) -> None:
    log_file = tmp_path / "app.log"
    app.configure_logging(use_json=True, log_file=str(log_file), max_bytes=1024, backup_count=2)
    try:
        logger = logging.getLogger("lineage")
        logger.error("error message")
        rotating = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(rotating) == 1
        assert rotating[0].maxBytes == 1024
        assert rotating[0].backupCount == 2
        for handler in logger.handlers:
            handler.flush()
        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["msg"] == "error message"
    finally:
        app.configure_logging()
    assert not any(isinstance(h, RotatingFileHandler) for h in logging.getLogger("lineage").handlers)


def test_child_loggers_reach_lineage_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "load.log"
    app.configure_logging(log_file=str(log_file))
    try:
        logging.getLogger("lineage.genealogy.loader").info("Loaded %d people", 3)
        for handler in logging.getLogger("lineage").handlers:
            handler.flush()
        assert "Loaded 3 people" in log_file.read_text(encoding="utf-8")
    finally:
        app.configure_logging()


def test_emit_success_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(app, "OUTPUT_JSON", True)
    app.emit_success("demo", text="done", data={"value": 5})
    out = capsys.readouterr().out.strip()
    payload = json.loads(out)
    assert payload["ok"] is True
    assert payload["command"] == "demo"
    assert payload["value"] == 5
    assert payload["result"] == "done"


def test_emit_success_text(capsys: pytest.CaptureFixture[str]) -> None:
    app.emit_success("demo", text="plain", data={"ignored": True})
    assert capsys.readouterr().out.strip() == "plain"


def test_cli_log_flags(stark_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_file = tmp_path / "cli.log"
    try:
        code = app.main(["--log-json", "--log-file", str(log_file), "--data", str(stark_file), "stats"])
    finally:
        app.configure_logging()
    assert code == 0
    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any("Loaded 6 people" in record["msg"] for record in records)
    assert "people: 6" in capsys.readouterr().out

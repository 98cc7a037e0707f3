import contextlib
import io
import json
import shlex
from pathlib import Path

import pytest

from lineage.cli import app


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("LINEAGE_DATA", "LINEAGE_CONFIG", "LINEAGE_INITIAL_CAPACITY", "LINEAGE_LOAD_FACTOR"):
        monkeypatch.delenv(key, raising=False)


def run_cli(cmd: str):
    argv = shlex.split(cmd)
    stdout = io.StringIO()
    stderr = io.StringIO()
    try:
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            try:
                code = app.main(argv)
            except SystemExit as exc:  # CLI may call sys.exit
                code = exc.code if isinstance(exc.code, int) else 1
    finally:
        app.OUTPUT_JSON = False
        app.configure_logging()
    return code, stdout.getvalue().strip(), stderr.getvalue().strip()


def parse_error(stderr: str) -> dict:
    if not stderr.strip():
        return {}
    return json.loads(stderr.splitlines()[-1])


def test_lookup_prints_details(stark_file: Path) -> None:
    code, out, _ = run_cli(f"--data {stark_file} lookup Ned")
    assert code == 0
    lines = out.splitlines()
    assert lines[0] == "Name: eddard stark"
    assert "Title: Lord of Winterfell" in lines
    assert "Hair color: N/A" in lines
    assert lines[-1] == "Children: robb stark first of his name, arya stark, sansa stark"


def test_lookup_json(stark_file: Path) -> None:
    code, out, _ = run_cli(f"--json --data {stark_file} lookup 'the young wolf'")
    assert code == 0
    payload = json.loads(out)
    assert payload["ok"] is True
    assert payload["command"] == "lookup"
    assert payload["person"]["name"] == "robb stark first of his name"
    assert payload["person"]["father"] == "Eddard Stark"


def test_lookup_missing_returns_not_found(stark_file: Path) -> None:
    code, out, err = run_cli(f"--data {stark_file} lookup 'Jon Snow'")
    env = parse_error(err)
    assert code == 6
    assert out == ""
    assert env["error"] == "NotFound"
    assert "Jon Snow" in env["detail"]
    assert "matches" in env["hint"]


def test_data_from_environment(stark_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINEAGE_DATA", str(stark_file))
    code, out, _ = run_cli("matches wolf")
    assert code == 0
    assert out == "robb stark first of his name"


def test_missing_data_argument_is_bad_input() -> None:
    code, _, err = run_cli("stats")
    env = parse_error(err)
    assert code == 2
    assert env["error"] == "BadInput"
    assert "LINEAGE_DATA" in env["hint"]


def test_missing_data_file_is_io(tmp_path: Path) -> None:
    code, _, err = run_cli(f"--data {tmp_path / 'missing.json'} stats")
    env = parse_error(err)
    assert code == 5
    assert env["error"] == "IO"


def test_invalid_document_is_bad_input(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"House": [{"A": [{"Fate": 7}]}]}), encoding="utf-8")
    code, _, err = run_cli(f"--data {bad} stats")
    env = parse_error(err)
    assert code == 2
    assert "Invalid genealogy document" in env["detail"]


def test_matches_without_hits(stark_file: Path) -> None:
    code, out, _ = run_cli(f"--data {stark_file} matches lannister")
    assert code == 0
    assert out == "No matches found for: lannister"


def test_ancestors(stark_file: Path) -> None:
    code, out, _ = run_cli(f"--json --data {stark_file} ancestors 'Sansa Stark'")
    assert code == 0
    payload = json.loads(out)
    assert payload["ancestors"] == ["eddard stark", "rickard stark first of his name"]

    code, _, err = run_cli(f"--data {stark_file} ancestors 'Jon Snow'")
    assert code == 6
    assert parse_error(err)["error"] == "NotFound"


def test_generation(stark_file: Path) -> None:
    code, out, _ = run_cli(f"--data {stark_file} generation 2")
    assert code == 0
    assert out.splitlines() == ["brandon stark", "eddard stark"]

    code, out, _ = run_cli(f"--data {stark_file} generation 9")
    assert code == 0
    assert out == "Generation 9 is empty"

    code, _, err = run_cli(f"--data {stark_file} generation 0")
    assert code == 2
    assert parse_error(err)["error"] == "BadInput"


def test_titles(stark_file: Path) -> None:
    code, out, _ = run_cli(f"--json --data {stark_file} titles 'king in the north'")
    assert code == 0
    assert json.loads(out)["holders"] == ["robb stark first of his name"]

    code, _, err = run_cli(f"--data {stark_file} titles ' '")
    assert code == 2


def test_stats_and_verify(stark_file: Path) -> None:
    code, out, _ = run_cli(f"--json --data {stark_file} stats")
    assert code == 0
    stats = json.loads(out)["stats"]
    assert stats["people"] == 6
    assert stats["keys"] == 8

    code, out, _ = run_cli(f"--data {stark_file} verify --verbose")
    assert code == 0
    lines = out.splitlines()
    assert lines[0] == "OK: index verified"
    assert lines[1].startswith("Capacity=16, Keys=8, People=6")


def test_config_file_shapes_the_table(stark_file: Path, tmp_path: Path) -> None:
    cfg_path = tmp_path / "lineage.toml"
    cfg_path.write_text("[table]\ninitial_capacity = 2\nload_factor = 1.0\n", encoding="utf-8")
    code, out, _ = run_cli(f"--json --config {cfg_path} --data {stark_file} stats")
    assert code == 0
    stats = json.loads(out)["stats"]
    assert stats["capacity"] == 8
    assert stats["load_factor"] == pytest.approx(1.0)


def test_serve_rejects_bad_port(stark_file: Path) -> None:
    code, _, err = run_cli(f"--data {stark_file} serve --port 70000")
    assert code == 2
    assert "--port" in parse_error(err)["detail"]

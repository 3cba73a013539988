"""Test query logging — daily JSONL files with retention cleanup."""

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from chlens.adapters._base import ClickHouseError
from chlens.normalize import resolve_error, resolve_query_results
from chlens.querylog import _project_slug, cleanup_old_logs, log_query


def test_project_slug_encodes_cwd():
    with patch("chlens.querylog.os.getcwd", return_value="/home/ana/projects/shop"):
        slug = _project_slug()
    assert slug == "home-ana-projects-shop"


def test_log_query_creates_file(tmp_path):
    env = resolve_query_results([{"x": 1}], "SELECT 1 AS x", conn_id="local", duration_ms=3.0)
    with patch("chlens.querylog._LOG_ROOT", tmp_path), patch(
        "chlens.querylog.os.getcwd", return_value="/test/project"
    ):
        log_query(env, host="localhost", database="default")

    log_files = list((tmp_path / "test-project").glob("*.jsonl"))
    assert len(log_files) == 1
    today = datetime.now(UTC).strftime("%Y-%m-%d")
    assert log_files[0].name == f"{today}.jsonl"

    entry = json.loads(log_files[0].read_text().strip())
    assert entry["conn"] == "local"
    assert entry["sql"] == "SELECT 1 AS x"
    assert entry["row_count"] == 1
    assert entry["error"] is None
    assert entry["duration_ms"] == 3.0
    assert entry["host"] == "localhost"
    assert "ts" in entry


def test_log_query_records_error(tmp_path):
    env = resolve_error(ClickHouseError("Code: 62. Syntax error"), "SELECTT", conn_id="local")
    with patch("chlens.querylog._LOG_ROOT", tmp_path), patch(
        "chlens.querylog.os.getcwd", return_value="/test/project"
    ):
        log_query(env, settings={"max_result_rows": "10"})
        log_query(env)

    lines = next((tmp_path / "test-project").glob("*.jsonl")).read_text().strip().split("\n")
    assert len(lines) == 2
    entry = json.loads(lines[0])
    assert entry["error"] == "Code: 62. Syntax error"
    assert entry["row_count"] == 0
    assert entry["settings"] == {"max_result_rows": "10"}


def test_cleanup_deletes_old_files(tmp_path):
    project_dir = tmp_path / "test-project"
    project_dir.mkdir(parents=True)

    old_date = (datetime.now(UTC) - timedelta(days=40)).strftime("%Y-%m-%d")
    (project_dir / f"{old_date}.jsonl").write_text('{"sql":"old"}\n')
    recent_date = (datetime.now(UTC) - timedelta(days=5)).strftime("%Y-%m-%d")
    (project_dir / f"{recent_date}.jsonl").write_text('{"sql":"recent"}\n')
    (project_dir / "notes.jsonl").write_text("")

    with patch("chlens.querylog._LOG_ROOT", tmp_path), patch(
        "chlens.querylog.os.getcwd", return_value="/test/project"
    ):
        deleted = cleanup_old_logs(retention_days=30)

    assert deleted == 1
    assert not (project_dir / f"{old_date}.jsonl").exists()
    assert (project_dir / f"{recent_date}.jsonl").exists()


def test_cleanup_no_directory(tmp_path):
    with patch("chlens.querylog._LOG_ROOT", tmp_path), patch(
        "chlens.querylog.os.getcwd", return_value="/nonexistent/project"
    ):
        assert cleanup_old_logs() == 0

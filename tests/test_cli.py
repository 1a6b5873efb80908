import json

from typer.testing import CliRunner

from client_cli.main import app, parse_sse_line


runner = CliRunner()


def test_parse_sse_line_decodes_payloads():
    assert parse_sse_line('data: {"type": "chunk", "content": "REAS"}') == {"type": "chunk", "content": "REAS"}
    assert parse_sse_line(b'data: {"type": "done", "response": "[]"}\n') == {"type": "done", "response": "[]"}


def test_parse_sse_line_ignores_noise():
    assert parse_sse_line("") is None
    assert parse_sse_line(": keep-alive") is None
    assert parse_sse_line("data: not json") is None
    assert parse_sse_line("data: [1, 2]") is None


def test_plan_requires_existing_request_file(tmp_path):
    result = runner.invoke(app, ["plan", str(tmp_path / "missing.json")])
    assert result.exit_code != 0


def test_plan_reports_unreachable_server(tmp_path, monkeypatch):
    request_file = tmp_path / "request.json"
    request_file.write_text(json.dumps({"mode": "quick"}), encoding="utf-8")
    monkeypatch.setenv("PLANNER_URL", "http://127.0.0.1:9")
    result = runner.invoke(app, ["plan", str(request_file)])
    assert result.exit_code == 1

"""
Tests for the live runner entry point (run_live.main_async)
"""
import json
import textwrap
from uuid import uuid4

import pytest

import run_live


@pytest.fixture(autouse=True)
def _no_log_handlers(monkeypatch):
    # keep the root logger free of handlers bound to captured streams
    monkeypatch.setattr(run_live, "configure_logging", lambda level=None: None)


def _write_bridge(tmp_path, monkeypatch, body):
    name = f"bridge_{uuid4().hex}"
    (tmp_path / f"{name}.py").write_text(textwrap.dedent(body), encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.setenv("SPEC_FACTORY_BRIDGE", name)
    return name


GOOD_BRIDGE = """
from mock_tools.callers import RecordingCaller
from mock_tools.loader import load_fixtures

async def create_mcp_caller():
    return RecordingCaller(load_fixtures().responses())
"""

SYNC_BRIDGE = """
from mock_tools.callers import RecordingCaller
from mock_tools.loader import load_fixtures

def create_mcp_caller():
    return RecordingCaller(load_fixtures().responses())
"""

TRACE_DOWN_BRIDGE = """
from mock_tools.callers import RecordingCaller
from mock_tools.loader import load_fixtures

def create_mcp_caller():
    return RecordingCaller(load_fixtures().responses(), failures={"query_trace": "trace store unavailable"})
"""


@pytest.mark.asyncio
async def test_requires_live_flag(monkeypatch, capsys):
    monkeypatch.delenv("NEXUS_LIVE", raising=False)

    code = await run_live.main_async([])

    assert code == 1
    assert "NEXUS_LIVE=true" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_missing_bridge_module(monkeypatch, capsys):
    monkeypatch.setenv("NEXUS_LIVE", "true")
    monkeypatch.setenv("SPEC_FACTORY_BRIDGE", f"no_such_bridge_{uuid4().hex}")

    code = await run_live.main_async([])

    assert code == 1
    assert "Failed to load live bridge" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_bridge_without_factory(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("NEXUS_LIVE", "true")
    _write_bridge(tmp_path, monkeypatch, "VALUE = 1\n")

    code = await run_live.main_async([])

    assert code == 1
    assert "must export create_mcp_caller()" in capsys.readouterr().err


@pytest.mark.asyncio
@pytest.mark.parametrize("bridge", [GOOD_BRIDGE, SYNC_BRIDGE])
async def test_prints_result_json(tmp_path, monkeypatch, capsys, bridge):
    monkeypatch.setenv("NEXUS_LIVE", "TRUE")
    _write_bridge(tmp_path, monkeypatch, bridge)

    code = await run_live.main_async([])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["specResult"]["mode"] == "dry_run"
    assert out["specError"] is None
    assert out["traceResult"] is None
    assert out["registryResult"] is None


@pytest.mark.asyncio
async def test_all_stages_and_pdf_report(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("NEXUS_LIVE", "true")
    _write_bridge(tmp_path, monkeypatch, GOOD_BRIDGE)
    report = tmp_path / "report.pdf"

    code = await run_live.main_async([
        "--trace-run-id", "run-abc-123",
        "--provider", "anthropic",
        "--model-id", "claude-test-model",
        "--out", str(report),
    ])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["traceResult"]["totalEvents"] == 3
    assert out["registryResult"]["entry"]["id"] == "claude-test-model"
    assert report.read_bytes().startswith(b"%PDF")


@pytest.mark.asyncio
async def test_csv_report_holds_trace_events(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("NEXUS_LIVE", "true")
    _write_bridge(tmp_path, monkeypatch, GOOD_BRIDGE)
    report = tmp_path / "trace.csv"

    code = await run_live.main_async(["--trace-run-id", "run-abc-123", "--out", str(report)])

    assert code == 0
    lines = report.read_text(encoding="utf-8").splitlines()
    assert "eventType" in lines[0]
    assert len(lines) == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("out_name", ["trace.csv", "missing_dir/result.json"])
async def test_report_write_failure_exits_nonzero(tmp_path, monkeypatch, capsys, out_name):
    monkeypatch.setenv("NEXUS_LIVE", "true")
    _write_bridge(tmp_path, monkeypatch, GOOD_BRIDGE)

    code = await run_live.main_async(["--out", str(tmp_path / out_name)])

    captured = capsys.readouterr()
    assert code == 1
    assert json.loads(captured.out)["specResult"]["mode"] == "dry_run"
    assert "Failed to write report" in captured.err


@pytest.mark.asyncio
async def test_stage_two_failure_exits_nonzero_without_partial_result(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("NEXUS_LIVE", "true")
    _write_bridge(tmp_path, monkeypatch, TRACE_DOWN_BRIDGE)

    code = await run_live.main_async(["--trace-run-id", "run-abc-123"])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "trace store unavailable" in captured.err


def test_provider_needs_model_id():
    with pytest.raises(SystemExit):
        run_live.parse_args(["--provider", "anthropic"])


def test_build_config_defaults():
    config = run_live.build_config(run_live.parse_args([]))
    assert config["dryRun"] is True
    assert config["spec"].startswith("# Test Spec")
    assert "traceRunId" not in config and "registryImport" not in config


def test_build_config_spec_file(tmp_path):
    spec = tmp_path / "spec.md"
    spec.write_text("# Mine\n\n## Requirements\n- x\n", encoding="utf-8")

    config = run_live.build_config(run_live.parse_args(["--spec-file", str(spec), "--execute"]))

    assert config["spec"].startswith("# Mine")
    assert config["dryRun"] is False

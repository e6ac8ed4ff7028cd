"""
src/run_live.py

Run the spec factory against a live tool server.

Usage:
    NEXUS_LIVE=true NEXUS_MCP_COMMAND="npx nexus-agents mcp" spec-factory-live
    NEXUS_LIVE=true spec-factory-live --trace-run-id run-abc-123 --out report.pdf

The bridge module (SPEC_FACTORY_BRIDGE, default `live_bridge`) must expose
create_mcp_caller(), sync or async, returning a tool caller.
"""


import argparse
import asyncio
import importlib
import inspect
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from config import LIVE_ENV_VAR, LIVE_TEST_SPEC, Provider, bridge_module_name, configure_logging, is_live_mode
from pipeline.caller import ToolCaller
from pipeline.exports import export_report
from pipeline.orchestrator import error_message, run_factory_pipeline


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:

    ap = argparse.ArgumentParser(description="Run execute_spec -> query_trace -> registry_import against a live server.")
    ap.add_argument("--spec-file", help="Markdown spec to execute (default: built-in minimal spec)")
    ap.add_argument("--execute", action="store_true", help="Run the spec for real instead of a dry run")
    ap.add_argument("--trace-run-id", help="Also query traces for this run id")
    ap.add_argument("--provider", choices=[p.value for p in Provider], help="Registry import provider")
    ap.add_argument("--model-id", help="Registry import model id (needs --provider)")
    ap.add_argument("--out", help="Also write the result to this path (.pdf for a PDF summary, .csv for trace events, else JSON)")
    ap.add_argument("--log-level", default=None)
    args = ap.parse_args(argv)

    if bool(args.provider) != bool(args.model_id):
        ap.error("--provider and --model-id go together")

    return args

def build_config(args: argparse.Namespace) -> Dict[str, Any]:

    if args.spec_file:
        with open(args.spec_file, "r", encoding="utf-8") as f:
            spec = f.read()
    else:
        spec = LIVE_TEST_SPEC

    config: Dict[str, Any] = {"spec": spec, "dryRun": not args.execute}
    if args.trace_run_id:
        config["traceRunId"] = args.trace_run_id
    if args.provider:
        config["registryImport"] = {"provider": args.provider, "modelId": args.model_id}

    return config

async def load_bridge_caller(module_name: str) -> ToolCaller:
    """Import the bridge module and build a caller from its create_mcp_caller()."""

    mod = importlib.import_module(module_name)
    factory = getattr(mod, "create_mcp_caller", None)
    if not callable(factory):
        raise RuntimeError(f"{module_name} must export create_mcp_caller()")

    caller = factory()
    if inspect.isawaitable(caller):
        caller = await caller

    return caller

async def _close(caller: Any) -> None:

    aclose = getattr(caller, "aclose", None)
    if aclose is not None:
        await aclose()

async def main_async(argv: Optional[List[str]] = None) -> int:

    args = parse_args(argv)
    configure_logging(args.log_level)

    if not is_live_mode():
        print(f"Set {LIVE_ENV_VAR}=true to run against a live MCP server.", file=sys.stderr)
        return 1

    try:
        caller = await load_bridge_caller(bridge_module_name())
    except Exception as e:
        print(f"Failed to load live bridge: {error_message(e)}", file=sys.stderr)
        return 1

    print("Running spec factory against live MCP server...\n", file=sys.stderr)
    try:
        result = await run_factory_pipeline(caller, build_config(args))
    except Exception as e:
        print(f"Pipeline failed: {error_message(e)}", file=sys.stderr)
        return 1
    finally:
        await _close(caller)

    print(json.dumps(result.to_wire(), indent=2))
    if args.out:
        try:
            logger.info("report written to %s", export_report(result, args.out))
        except Exception as e:
            print(f"Failed to write report: {error_message(e)}", file=sys.stderr)
            return 1

    return 0

def main() -> None:

    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":

    main()

# EOF

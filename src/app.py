"""
src/app.py

Gradio panel for running the factory pipeline by hand, against the canned
fixtures or a live MCP server.
"""


import json
from typing import Any, Dict

import gradio as gr

from config import DEFAULT_DRY_RUN, Provider, bridge_module_name, configure_logging, is_live_mode
from mock_tools.callers import RecordingCaller
from mock_tools.loader import load_fixtures
from pipeline.errors import ContractViolation
from pipeline.orchestrator import error_message, run_factory_pipeline
from pipeline.spec_builder import build_test_spec
from run_live import load_bridge_caller


APP_TITLE = "Spec Factory (Conformance Panel)"
APP_DESC = (
    "Runs execute_spec, then query_trace and registry_import when configured, "
    "and shows the validated result. 'fixtures' uses canned responses; "
    "'live' needs NEXUS_LIVE=true and a bridge to a running MCP server."
)

BACKENDS = ["fixtures", "live"]
NO_PROVIDER = "(none)"


def build_config(spec: str, dry_run: bool, trace_run_id: str, provider: str, model_id: str) -> Dict[str, Any]:
    """Blank optional fields mean 'skip that stage'."""

    config: Dict[str, Any] = {"spec": spec, "dryRun": bool(dry_run)}
    if (trace_run_id or "").strip():
        config["traceRunId"] = trace_run_id.strip()
    if provider and provider != NO_PROVIDER and (model_id or "").strip():
        config["registryImport"] = {"provider": provider, "modelId": model_id.strip()}

    return config

async def handle_run(spec: str, dry_run: bool, trace_run_id: str, provider: str, model_id: str, backend: str) -> str:
    """
    Run the pipeline and return pretty JSON for the output box.

    Stage 2/3 failures come back as {"error": ..., "stage_error": true} instead
    of a partial result.
    """

    config = build_config(spec, dry_run, trace_run_id, provider, model_id)
    calls = None

    if backend == "live":
        if not is_live_mode():
            return json.dumps({"error": "Set NEXUS_LIVE=true to use the live backend."}, indent=2)
        try:
            caller = await load_bridge_caller(bridge_module_name())
        except Exception as e:
            return json.dumps({"error": f"Failed to load live bridge: {error_message(e)}"}, indent=2)
    else:
        caller = RecordingCaller(load_fixtures().responses())
        calls = caller.calls

    try:
        result = await run_factory_pipeline(caller, config)
    except ContractViolation as e:
        return json.dumps({"error": str(e), "stage_error": True, **e.to_dict()}, indent=2)
    except Exception as e:
        return json.dumps({"error": error_message(e), "stage_error": True}, indent=2)
    finally:
        aclose = getattr(caller, "aclose", None)
        if aclose is not None:
            await aclose()

    out: Dict[str, Any] = {"result": result.to_wire()}
    if calls is not None:
        out["calls"] = [c.model_dump() for c in calls]

    return json.dumps(out, indent=2)

def app():
    with gr.Blocks(title=APP_TITLE) as demo:
        gr.Markdown(f"# {APP_TITLE}")
        gr.Markdown(APP_DESC)

        spec = gr.Textbox(
            label="Spec (markdown)",
            value=build_test_spec("Hello World", "Print hello"),
            lines=10
        )
        with gr.Row():
            dry_run = gr.Checkbox(label="Dry run", value=DEFAULT_DRY_RUN)
            backend = gr.Dropdown(label="Backend", choices=BACKENDS, value=BACKENDS[0])
        with gr.Row():
            trace_run_id = gr.Textbox(label="Trace run id", placeholder="e.g., run-abc-123")
            provider = gr.Dropdown(
                label="Registry provider",
                choices=[NO_PROVIDER] + [p.value for p in Provider],
                value=NO_PROVIDER
            )
            model_id = gr.Textbox(label="Model id", placeholder="e.g., claude-test-model")

        out = gr.Code(label="Result", language="json")
        run = gr.Button("Run pipeline", variant="primary")

        run.click(
            fn=handle_run,
            inputs=[spec, dry_run, trace_run_id, provider, model_id, backend],
            outputs=[out]
        )

    return demo


if __name__ == "__main__":

    configure_logging()
    app().launch()

# EOF

"""
src/pipeline/orchestrator.py

Runs execute_spec -> query_trace -> registry_import and collects the results.

Failure handling per stage comes from config.STAGE_ISOLATION:
- execute_spec is isolated: any failure is recorded as `spec_error` and the
  remaining stages still run. A bad spec must not block trace inspection.
- query_trace and registry_import are not: their errors propagate to whoever
  called run_factory_pipeline, and nothing after them runs.

Stages run one after another; the caller is the only await point.
"""


import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple, TypeVar, Union

from config import STAGE_ISOLATION, ToolName
from pipeline.caller import ToolCaller
from pipeline.models import FactoryConfig, FactoryResult, RegistryImportOutcome, TraceQueryOutcome
from stages.execute_spec import execute_spec
from stages.query_trace import query_trace
from stages.registry_import import import_model


logger = logging.getLogger(__name__)

T = TypeVar("T")


# --- Stage runner --------------------------------------------------------------
def error_message(exc: BaseException) -> str:

    return str(exc) or type(exc).__name__

async def _run_stage(stage: ToolName, step: Callable[[], Awaitable[T]]) -> Tuple[Optional[T], Optional[str]]:
    """
    Await one stage under its isolation policy.

    Returns (value, None) on success. For an isolated stage a failure returns
    (None, message); otherwise the exception is re-raised untouched.
    """

    try:
        return await step(), None
    except Exception as exc:
        if not STAGE_ISOLATION[stage.value]:
            logger.error("stage %s failed, aborting pipeline: %s", stage.value, error_message(exc))
            raise
        logger.warning("stage %s failed, continuing: %s", stage.value, error_message(exc))
        return None, error_message(exc)


# --- Pipeline ------------------------------------------------------------------
async def run_factory_pipeline(caller: ToolCaller, config: Union[FactoryConfig, Mapping[str, Any]]) -> FactoryResult:
    """
    Run the full factory pipeline against `caller`.

    Args:
        caller: anything implementing pipeline.caller.ToolCaller
        config: a FactoryConfig, or a mapping with the same keys (camelCase or snake_case)

    Returns: FactoryResult with exactly one of spec_result / spec_error set.
    """

    cfg = config if isinstance(config, FactoryConfig) else FactoryConfig.model_validate(dict(config))

    # Stage 1: always attempted, failure absorbed
    spec_result, spec_error = await _run_stage(
        ToolName.EXECUTE_SPEC,
        lambda: execute_spec(caller, cfg.spec, cfg.dry_run),
    )

    # Stage 2: only with a run id
    trace_result: Optional[TraceQueryOutcome] = None
    if cfg.trace_run_id is not None:
        trace_result, _ = await _run_stage(
            ToolName.QUERY_TRACE,
            lambda: query_trace(caller, cfg.trace_run_id),
        )

    # Stage 3: only when an import target is configured
    registry_result: Optional[RegistryImportOutcome] = None
    if cfg.registry_import is not None:
        target = cfg.registry_import
        registry_result, _ = await _run_stage(
            ToolName.REGISTRY_IMPORT,
            lambda: import_model(caller, target.provider, target.model_id),
        )

    return FactoryResult(
        spec_result=spec_result,
        spec_error=spec_error,
        trace_result=trace_result,
        registry_result=registry_result,
    )

"""
src/stages/query_trace.py

Stage 2: read the recorded events of a run

Optional filters (event_type, limit) are left out of the tool arguments when
unset, so `query_trace(caller, "run-1")` sends exactly {"runId": "run-1"}.
"""


import logging
from typing import Optional

from config import ToolName
from pipeline.caller import ToolCaller
from pipeline.contracts import QUERY_TRACE_INPUT, TRACE_QUERY_OUTCOME
from pipeline.models import TraceQueryOutcome


logger = logging.getLogger(__name__)


async def query_trace(
    caller: ToolCaller,
    run_id: str,
    event_type: Optional[str] = None,
    limit: Optional[int] = None,
) -> TraceQueryOutcome:

    params = QUERY_TRACE_INPUT.parse({"runId": run_id, "eventType": event_type, "limit": limit})
    args = params.model_dump(mode="json", by_alias=True, exclude_none=True)
    logger.debug("calling %s with %s", ToolName.QUERY_TRACE.value, args)

    raw = await caller.call(ToolName.QUERY_TRACE.value, args)
    outcome = TRACE_QUERY_OUTCOME.parse(raw)
    logger.info(
        "%s %s: %d/%d events from %s%s",
        ToolName.QUERY_TRACE.value, outcome.run_id, len(outcome.events), outcome.total_events,
        outcome.source, " (truncated)" if outcome.truncated else "",
    )

    return outcome

"""
src/stages/registry_import.py

Stage 3: preview a model registry import

The tester never writes to the registry: `dryRun: true` is always sent, whatever
the caller wants.

The service is expected to answer persisted=false for a dry run. The response
contract does not enforce that (the tool never promised it), so a reply that
breaks it is logged as a warning and returned as-is.
"""


import logging
from typing import Union

from config import Provider, ToolName
from pipeline.caller import ToolCaller
from pipeline.contracts import REGISTRY_IMPORT_INPUT, REGISTRY_IMPORT_OUTCOME
from pipeline.models import RegistryImportOutcome


logger = logging.getLogger(__name__)


async def import_model(caller: ToolCaller, provider: Union[Provider, str], model_id: str) -> RegistryImportOutcome:

    params = REGISTRY_IMPORT_INPUT.parse({"provider": provider, "modelId": model_id, "dryRun": True})
    args = params.model_dump(mode="json", by_alias=True, exclude_none=True)
    logger.debug("calling %s with %s", ToolName.REGISTRY_IMPORT.value, args)

    raw = await caller.call(ToolName.REGISTRY_IMPORT.value, args)
    outcome = REGISTRY_IMPORT_OUTCOME.parse(raw)

    if outcome.dry_run and outcome.persisted:
        logger.warning("%s reported persisted=true for a dry run of %s", ToolName.REGISTRY_IMPORT.value, outcome.entry.id)
    for w in outcome.warnings:
        logger.info("%s warning: %s", ToolName.REGISTRY_IMPORT.value, w)

    return outcome

"""
src/pipeline/models.py

Pydantic models for the three tool contracts and the pipeline I/O.

Wire payloads use camelCase keys; attributes here are snake_case with camelCase
aliases, so both `DryRunOutcome(mode="dry_run", spec=..., dag=...)` and
`TraceQueryOutcome.model_validate({"runId": ...})` work.
"""


from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from config import DEFAULT_DRY_RUN, MAX_SPEC_CHARS, TRACE_LIMIT_MAX, TRACE_LIMIT_MIN, Provider


class WireModel(BaseModel):

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        protected_namespaces=(),
    )


# --- execute_spec --------------------------------------------------------------
class ExecuteSpecInput(WireModel):

    spec: StrictStr = Field(min_length=1, max_length=MAX_SPEC_CHARS)
    dry_run: Optional[StrictBool] = None


class DryRunOutcome(WireModel):
    """Plan preview. `spec` and `dag` belong to the remote service; only their presence is checked."""

    mode: Literal["dry_run"]
    spec: Any
    dag: Any


class ExecutionOutcome(WireModel):
    """Real run. `analysis` is only filled when at least one task failed."""

    mode: Literal["execute"]
    execution: Any
    analysis: Optional[Any] = None


SpecOutcome = Annotated[Union[DryRunOutcome, ExecutionOutcome], Field(discriminator="mode")]


# --- query_trace ---------------------------------------------------------------
class QueryTraceInput(WireModel):

    run_id: StrictStr = Field(min_length=1)
    event_type: Optional[StrictStr] = None
    limit: Optional[StrictInt] = Field(default=None, ge=TRACE_LIMIT_MIN, le=TRACE_LIMIT_MAX)


class TraceQueryOutcome(WireModel):

    run_id: StrictStr
    events: List[Dict[str, Any]]
    total_events: StrictInt
    truncated: StrictBool
    source: Literal["disk", "not_found"]

    @model_validator(mode="after")
    def _not_found_is_empty(self) -> "TraceQueryOutcome":

        if self.source == "not_found" and (self.events or self.total_events != 0):
            raise ValueError("source 'not_found' requires no events and totalEvents == 0")

        return self


# --- registry_import -----------------------------------------------------------
class RegistryImportInput(WireModel):

    provider: Provider
    model_id: StrictStr = Field(min_length=1)
    dry_run: Optional[StrictBool] = None


class QualityScores(WireModel):

    reasoning: StrictFloat
    code_generation: StrictFloat
    speed: StrictFloat
    cost: StrictFloat


class Pricing(WireModel):

    input_per_1m: StrictFloat = Field(alias="inputPer1M")
    output_per_1m: StrictFloat = Field(alias="outputPer1M")


class ModelEntry(WireModel):

    id: StrictStr
    display_name: StrictStr
    provider: StrictStr                         # free-form here; the input side is the closed set
    context_window: StrictInt = Field(gt=0)
    output_modalities: List[StrictStr]
    input_modalities: List[StrictStr]
    tool_capabilities: List[StrictStr]
    special_features: List[StrictStr]
    pricing: Pricing
    quality_scores: QualityScores
    cli_name: StrictStr
    cli_model_name: StrictStr


class RegistryImportOutcome(WireModel):

    dry_run: StrictBool
    entry: ModelEntry
    persisted: StrictBool
    warnings: List[StrictStr]


# --- Pipeline I/O --------------------------------------------------------------
class RegistryImportTarget(WireModel):

    provider: Provider
    model_id: StrictStr = Field(min_length=1)


class FactoryConfig(WireModel):

    spec: str
    dry_run: StrictBool = DEFAULT_DRY_RUN
    trace_run_id: Optional[StrictStr] = None
    registry_import: Optional[RegistryImportTarget] = None

    @field_validator("dry_run", mode="before")
    @classmethod
    def _default_dry_run(cls, v: Any) -> Any:
        # null means "not given"
        return DEFAULT_DRY_RUN if v is None else v


class FactoryResult(WireModel):

    spec_result: Optional[SpecOutcome] = None
    spec_error: Optional[str] = None
    trace_result: Optional[TraceQueryOutcome] = None
    registry_result: Optional[RegistryImportOutcome] = None

    @model_validator(mode="after")
    def _one_spec_slot(self) -> "FactoryResult":

        if (self.spec_result is None) == (self.spec_error is None):
            raise ValueError("exactly one of specResult / specError must be set")

        return self

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys (what the live runner prints)."""

        return self.model_dump(mode="json", by_alias=True)


class ToolCall(BaseModel):

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

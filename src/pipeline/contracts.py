"""
src/pipeline/contracts.py

Named validation contracts over the models in pipeline.models.

A Contract wraps a pydantic TypeAdapter:
- parse(raw): typed value, or ContractViolation listing every bad field path
- check(raw): never raises; returns ContractCheck(ok, value, error)

Contracts never mutate the payload they are given.
"""


from typing import Any, Dict, Generic, List, NamedTuple, Optional, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from pipeline.errors import ContractViolation, FieldIssue, InputRejected
from pipeline.models import (
    DryRunOutcome,
    ExecuteSpecInput,
    ExecutionOutcome,
    ModelEntry,
    QualityScores,
    QueryTraceInput,
    RegistryImportInput,
    RegistryImportOutcome,
    SpecOutcome,
    TraceQueryOutcome,
)


T = TypeVar("T")


class ContractCheck(NamedTuple):

    ok: bool
    value: Any = None
    error: Optional[ContractViolation] = None


# --- Error translation ---------------------------------------------------------
def _path(loc: tuple) -> str:
    """('entry', 'pricing', 'inputPer1M') -> 'entry.pricing.inputPer1M'; list indexes as [i]."""

    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += ("." if out else "") + str(part)

    return out or "(root)"

def _expected(err: Dict[str, Any]) -> str:

    ctx = err.get("ctx") or {}
    for key in ("expected", "expected_tags"):
        if key in ctx:
            return str(ctx[key])
    if "discriminator" in ctx:
        return f"{ctx['discriminator']} tag"

    return err.get("type", "valid value")

def issues_from(exc: ValidationError) -> List[FieldIssue]:

    return [FieldIssue(_path(e["loc"]), e["msg"], _expected(e)) for e in exc.errors()]


# --- Contract ------------------------------------------------------------------
class Contract(Generic[T]):

    def __init__(self, name: str, shape: Type[T], error_cls: Type[ContractViolation] = ContractViolation):

        self.name = name
        self.error_cls = error_cls
        self._adapter = TypeAdapter(shape)

    def parse(self, raw: Any) -> T:

        try:
            return self._adapter.validate_python(raw)
        except ValidationError as exc:
            raise self.error_cls(self.name, issues_from(exc)) from exc

    def check(self, raw: Any) -> ContractCheck:

        try:
            return ContractCheck(True, self.parse(raw))
        except ContractViolation as exc:
            return ContractCheck(False, None, exc)

    def __repr__(self) -> str:

        return f"Contract({self.name!r})"


def _input(name: str, shape: Any) -> Contract:

    return Contract(name, shape, InputRejected)


# --- Registry ------------------------------------------------------------------
EXECUTE_SPEC_INPUT = _input("execute_spec input", ExecuteSpecInput)
DRY_RUN_OUTCOME = Contract("execute_spec dry_run response", DryRunOutcome)
EXECUTION_OUTCOME = Contract("execute_spec execute response", ExecutionOutcome)
SPEC_OUTCOME = Contract("execute_spec response", SpecOutcome)

QUERY_TRACE_INPUT = _input("query_trace input", QueryTraceInput)
TRACE_QUERY_OUTCOME = Contract("query_trace response", TraceQueryOutcome)

REGISTRY_IMPORT_INPUT = _input("registry_import input", RegistryImportInput)
QUALITY_SCORES = Contract("quality scores", QualityScores)
MODEL_ENTRY = Contract("model entry", ModelEntry)
REGISTRY_IMPORT_OUTCOME = Contract("registry_import response", RegistryImportOutcome)

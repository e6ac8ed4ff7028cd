"""
src/pipeline/errors.py

Error types raised around tool calls:
- ToolCallError: the tool caller itself failed (message kept verbatim)
- ContractViolation: a payload did not match its contract
- InputRejected: stage arguments failed their input contract; nothing was sent
"""


from typing import Any, Dict, List, NamedTuple


class FieldIssue(NamedTuple):

    path: str
    message: str
    expected: str


class ToolCallError(RuntimeError):
    """Raised by tool callers when the remote tool reports an error."""


class ContractViolation(ValueError):

    def __init__(self, contract: str, issues: List[FieldIssue]):

        self.contract = contract
        self.issues = list(issues)
        super().__init__(self._render())

    def _render(self) -> str:

        lines = "; ".join(f"{i.path}: {i.message} (expected {i.expected})" for i in self.issues)

        return f"{self.contract} failed validation: {lines or 'unknown error'}"

    def to_dict(self) -> Dict[str, Any]:

        return {
            "contract": self.contract,
            "issues": [i._asdict() for i in self.issues],
        }


class InputRejected(ContractViolation):
    """Stage arguments failed their input contract before any tool call."""

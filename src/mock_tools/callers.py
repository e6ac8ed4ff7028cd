"""
src/mock_tools/callers.py

In-memory tool caller for tests and demos

RecordingCaller answers each tool with a canned payload and records every call
as a ToolCall, in order, so tests can assert on names and arguments.

Unknown tool names fail like a real server would, with the closest known name
suggested (RapidFuzz) to make typos in tests obvious.
"""


import copy
from typing import Any, Dict, List, Optional

from rapidfuzz import fuzz, process

from pipeline.errors import ToolCallError
from pipeline.models import ToolCall


class RecordingCaller:

    def __init__(self, responses: Dict[str, Any], failures: Optional[Dict[str, str]] = None):
        """
        Args:
            responses: tool name -> raw payload returned for that tool
            failures: tool name -> error message; these tools raise ToolCallError instead
        """

        self.responses = dict(responses)
        self.failures = dict(failures or {})
        self.calls: List[ToolCall] = []

    async def call(self, tool_name: str, args: Dict[str, Any]) -> Any:

        self.calls.append(ToolCall(name=tool_name, arguments=copy.deepcopy(args)))

        if tool_name in self.failures:
            raise ToolCallError(self.failures[tool_name])
        if tool_name not in self.responses:
            raise ToolCallError(_no_mock_message(tool_name, list(self.responses) + list(self.failures)))

        return copy.deepcopy(self.responses[tool_name])

    @property
    def tool_names(self) -> List[str]:

        return [c.name for c in self.calls]


def _no_mock_message(tool_name: str, known: List[str]) -> str:

    msg = f"No mock: {tool_name}"
    match = process.extractOne(tool_name, known, scorer=fuzz.WRatio, score_cutoff=60) if known else None

    if match:
        name, _score, _idx = match
        msg += f" (did you mean '{name}'?)"

    return msg

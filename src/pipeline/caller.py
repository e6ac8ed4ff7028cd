"""
src/pipeline/caller.py

The one seam between the pipeline and whatever actually runs the tools.

Anything with `async call(tool_name, args)` fits: the MCP stdio bridge in
live_bridge.py, or mock_tools.callers.RecordingCaller in tests.
"""


from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class ToolCaller(Protocol):

    async def call(self, tool_name: str, args: Dict[str, Any]) -> Any:
        """Run `tool_name` with `args` and return its raw result, or raise."""
        ...

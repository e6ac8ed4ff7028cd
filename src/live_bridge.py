"""
src/live_bridge.py

Tool caller backed by a live MCP server over stdio

create_mcp_caller() spawns the command in NEXUS_MCP_COMMAND, performs the MCP
`initialize` handshake and returns a McpStdioCaller. Messages are line-delimited
JSON-RPC 2.0 on the child's stdin/stdout.

A `tools/call` reply is turned into a plain Python value:
- `structuredContent` if the server sent one
- otherwise the joined text content, parsed as JSON (raw text if not JSON)
- `isError: true` or a JSON-RPC `error` raises ToolCallError with the server text
"""


import asyncio
import json
import logging
import os
import shlex
from typing import Any, Dict, List, Optional

from config import MCP_COMMAND_ENV_VAR, mcp_timeout_seconds
from pipeline.errors import ToolCallError


logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-06-18"
CLIENT_INFO = {"name": "spec-factory", "version": "0.1.0"}
STREAM_LIMIT = 16 * 1024 * 1024             # bytes per JSON-RPC line


# --- Response decoding ---------------------------------------------------------
def _content_text(result: Dict[str, Any]) -> str:

    parts: List[str] = []
    for item in result.get("content") or []:
        if isinstance(item, dict) and item.get("type") == "text" and isinstance(item.get("text"), str):
            parts.append(item["text"])

    return "\n".join(parts).strip()

def decode_tool_result(tool_name: str, message: Dict[str, Any]) -> Any:
    """Extract the tool payload from a JSON-RPC `tools/call` response message."""

    if "error" in message:
        err = message["error"]
        detail = err.get("message") if isinstance(err, dict) else str(err)
        raise ToolCallError(f"{tool_name}: {detail}")

    result = message.get("result")
    if not isinstance(result, dict):
        raise ToolCallError(f"{tool_name}: malformed response (no result object)")

    if result.get("isError"):
        raise ToolCallError(_content_text(result) or f"{tool_name} failed")

    if result.get("structuredContent") is not None:
        return result["structuredContent"]

    text = _content_text(result)
    try:
        return json.loads(text)
    except ValueError:
        return text


# --- Caller --------------------------------------------------------------------
class McpStdioCaller:

    def __init__(self, proc: asyncio.subprocess.Process, *, timeout_s: float):

        self.proc = proc
        self.timeout_s = timeout_s
        self._id = 0
        self._lock = asyncio.Lock()

    async def _request(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:

        async with self._lock:
            self._id += 1
            req_id = self._id
            payload: Dict[str, Any] = {"jsonrpc": "2.0", "id": req_id, "method": method}
            if params is not None:
                payload["params"] = params

            if self.proc.returncode is not None:
                raise ToolCallError(f"MCP process exited before '{method}' (exit_code={self.proc.returncode})")

            self.proc.stdin.write((json.dumps(payload, ensure_ascii=True) + "\n").encode("utf-8"))
            await self.proc.stdin.drain()

            try:
                return await asyncio.wait_for(self._read_response(req_id), timeout=self.timeout_s)
            except asyncio.TimeoutError as e:
                raise ToolCallError(f"Timeout waiting for response to {method} (id={req_id})") from e

    async def _read_response(self, req_id: int) -> Dict[str, Any]:

        while True:
            line = await self.proc.stdout.readline()
            if not line:
                raise ToolCallError(f"MCP process closed stdout (exit_code={self.proc.returncode})")
            line = line.strip()
            if not line:
                continue
            try:
                msg = json.loads(line)
            except ValueError:
                logger.debug("skipping non-JSON line from MCP server: %r", line[:200])
                continue
            # notifications and stale replies
            if isinstance(msg, dict) and msg.get("id") == req_id:
                return msg

    async def _notify(self, method: str) -> None:

        payload = {"jsonrpc": "2.0", "method": method}
        self.proc.stdin.write((json.dumps(payload) + "\n").encode("utf-8"))
        await self.proc.stdin.drain()

    async def initialize(self) -> None:

        resp = await self._request(
            "initialize",
            {"protocolVersion": PROTOCOL_VERSION, "capabilities": {}, "clientInfo": CLIENT_INFO},
        )
        if "error" in resp:
            raise ToolCallError(f"MCP initialize rejected: {resp['error']}")
        await self._notify("notifications/initialized")
        logger.info("connected to MCP server %s", (resp.get("result") or {}).get("serverInfo"))

    async def call(self, tool_name: str, args: Dict[str, Any]) -> Any:

        msg = await self._request("tools/call", {"name": tool_name, "arguments": args or {}})

        return decode_tool_result(tool_name, msg)

    async def aclose(self) -> None:

        if self.proc.returncode is not None:
            return
        self.proc.terminate()
        try:
            await asyncio.wait_for(self.proc.wait(), timeout=2)
        except asyncio.TimeoutError:
            self.proc.kill()
            await self.proc.wait()


async def create_mcp_caller(command: Optional[str] = None) -> McpStdioCaller:
    """
    Spawn the MCP server and return an initialized caller.

    Args:
        command: shell-style command line; defaults to $NEXUS_MCP_COMMAND
    """

    command = command or os.getenv(MCP_COMMAND_ENV_VAR)
    if not command:
        raise RuntimeError(f"Set {MCP_COMMAND_ENV_VAR} to the command that starts the MCP server.")

    argv = shlex.split(command)
    logger.debug("MCP stdio launch: %r", argv)
    proc = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.DEVNULL,
        limit=STREAM_LIMIT,
    )

    caller = McpStdioCaller(proc, timeout_s=mcp_timeout_seconds())
    try:
        await caller.initialize()
    except Exception:
        await caller.aclose()
        raise

    return caller

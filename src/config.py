"""
src/config.py

Tool names, providers, limits and environment lookups for the spec factory.
"""


import logging
import os
import sys
from enum import Enum
from typing import Dict, Optional


class ToolName(str, Enum):

    EXECUTE_SPEC = "execute_spec"
    QUERY_TRACE = "query_trace"
    REGISTRY_IMPORT = "registry_import"

class Provider(str, Enum):

    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    OPENAI = "openai"


# Input limits
MAX_SPEC_CHARS: int = 50_000
TRACE_LIMIT_MIN: int = 1
TRACE_LIMIT_MAX: int = 500

# Defaults
DEFAULT_DRY_RUN: bool = True
DEFAULT_BRIDGE_MODULE: str = "live_bridge"
DEFAULT_MCP_TIMEOUT_S: float = 60.0
DEFAULT_LOG_LEVEL: str = "INFO"

# True: failure is recorded on the result. False: failure propagates to the caller.
STAGE_ISOLATION: Dict[str, bool] = {
    ToolName.EXECUTE_SPEC.value: True,
    ToolName.QUERY_TRACE.value: False,
    ToolName.REGISTRY_IMPORT.value: False,
}

# Spec sent by the live runner
LIVE_TEST_SPEC: str = (
    "# Test Spec\n"
    "\n"
    "## Requirements\n"
    "- Simple test\n"
    "\n"
    "## Acceptance Criteria\n"
    "- Passes validation"
)

# Environment variables
LIVE_ENV_VAR = "NEXUS_LIVE"
BRIDGE_ENV_VAR = "SPEC_FACTORY_BRIDGE"
MCP_COMMAND_ENV_VAR = "NEXUS_MCP_COMMAND"
MCP_TIMEOUT_ENV_VAR = "NEXUS_MCP_TIMEOUT"
LOG_LEVEL_ENV_VAR = "SPEC_FACTORY_LOG_LEVEL"


def is_live_mode() -> bool:
    """True when NEXUS_LIVE=true (case-insensitive)."""

    return os.getenv(LIVE_ENV_VAR, "").strip().lower() == "true"

def bridge_module_name() -> str:

    return os.getenv(BRIDGE_ENV_VAR) or DEFAULT_BRIDGE_MODULE

def mcp_timeout_seconds() -> float:
    """Per-call timeout for the live bridge. Falls back to the default on junk values."""

    raw = os.getenv(MCP_TIMEOUT_ENV_VAR)
    if not raw:
        return DEFAULT_MCP_TIMEOUT_S

    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_MCP_TIMEOUT_S

    return value if value > 0 else DEFAULT_MCP_TIMEOUT_S

def configure_logging(level: Optional[str] = None) -> None:
    """
    Install a single stderr handler on the root logger.

    Level comes from the argument, then SPEC_FACTORY_LOG_LEVEL, then INFO.
    Calling it twice does not stack handlers.
    """

    name = (level or os.getenv(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, name, logging.INFO))

    if any(getattr(h, "_spec_factory", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    handler._spec_factory = True
    root.addHandler(handler)
# EOF

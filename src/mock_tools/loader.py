"""
src/mock_tools/loader.py

Canned tool responses for deterministic runs (tests, the demo panel).
"""


import copy
import json
from pathlib import Path
from typing import Any, Dict


FIXTURES_PATH = Path(__file__).resolve().parent / "mock_responses.json"

REQUIRED_KEYS = [
    "dry_run",
    "execution",
    "execution_with_failures",
    "trace",
    "trace_not_found",
    "trace_filtered",
    "registry_import",
    "registry_openai",
]


class Fixtures:

    def __init__(self, data: Dict[str, Any]):

        self._data = data
        self.dry_run = data["dry_run"]
        self.execution = data["execution"]
        self.execution_with_failures = data["execution_with_failures"]
        self.trace = data["trace"]
        self.trace_not_found = data["trace_not_found"]
        self.trace_filtered = data["trace_filtered"]
        self.registry_import = data["registry_import"]
        self.registry_openai = data["registry_openai"]

    def responses(self) -> Dict[str, Any]:
        """Default reply per tool name, ready for RecordingCaller."""

        return {
            "execute_spec": self.dry_run,
            "query_trace": self.trace,
            "registry_import": self.registry_import,
        }


def load_fixtures(path: Path = FIXTURES_PATH) -> Fixtures:
    """
    Load the canned payloads. Every call returns fresh copies, so a test can
    mutate what it gets without leaking into the next one.
    """

    if not path.exists():
        raise FileNotFoundError(f"Fixture file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    # Sanity checks
    for key in REQUIRED_KEYS:
        if key not in data:
            raise ValueError(f"{path.name} missing '{key}'")

    return Fixtures(copy.deepcopy(data))

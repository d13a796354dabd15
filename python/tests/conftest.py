"""
Pytest configuration and fixtures for opc-shell tests.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
PYTHON_SRC = REPO_ROOT / "python"
if str(PYTHON_SRC) not in sys.path:
    sys.path.append(str(PYTHON_SRC))

from opc_shell.clients import BaseTagClient, MonitorCallback, Node, ReadEvent, StopMonitor, join_tag
from opc_shell.context import ShellContext
from opc_shell.values import Kind


DEFAULT_TREE: Dict[str, List[str]] = {
    "": ["Plant", "Utilities"],
    "Plant": ["Tank1", "Pump"],
    "Plant.Tank1": ["Level", "Setpoint", "Running", "Label", "Spare"],
    "Utilities": [],
}

DEFAULT_VALUES: Dict[str, Any] = {
    "Plant.Pump": 3,
    "Plant.Tank1.Level": 12.5,
    "Plant.Tank1.Setpoint": 40,
    "Plant.Tank1.Running": True,
    "Plant.Tank1.Label": "north",
    "Plant.Tank1.Spare": None,
}

DEFAULT_TYPES: Dict[str, Optional[str]] = {
    "Plant.Tank1.Level": "Double",
    "Plant.Tank1.Setpoint": "Int32",
    "Plant.Tank1.Running": "Boolean",
}


class FakeClient(BaseTagClient):
    """In-memory tag tree implementing the client interface."""

    def __init__(
        self,
        tree: Optional[Dict[str, List[str]]] = None,
        values: Optional[Dict[str, Any]] = None,
        types: Optional[Dict[str, Optional[str]]] = None,
    ) -> None:
        super().__init__("fake://plant")
        self.tree = dict(DEFAULT_TREE if tree is None else tree)
        self.values = dict(DEFAULT_VALUES if values is None else values)
        self.types = dict(DEFAULT_TYPES if types is None else types)
        self.writes: List[Tuple[str, Any, Kind]] = []
        self.monitors: List[Tuple[str, MonitorCallback]] = []
        self.write_error: Optional[Exception] = None
        self.connect_error: Optional[Exception] = None
        self.connected = False
        self.close_calls = 0
        self.explore_calls = 0
        self.stop_calls = 0

    def connect(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    def close(self) -> None:
        self.close_calls += 1
        self.connected = False

    def explore_folder(self, tag: str) -> List[Node]:
        parent = self.find_node(tag) if tag else self.root_node
        self.explore_calls += 1
        return self._remember([Node(join_tag(tag, name), name, parent) for name in self.tree.get(tag, [])])

    def get_data_type(self, tag: str) -> Optional[str]:
        return self.types.get(tag)

    def read(self, tag: str) -> ReadEvent:
        if tag not in self.values:
            raise LookupError(f"Node not found: {tag}")
        return ReadEvent(self.values[tag], quality="Good")

    def write(self, tag: str, value: Any, kind: Kind) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.writes.append((tag, value, kind))
        self.values[tag] = value

    def monitor(self, tag: str, callback: MonitorCallback) -> StopMonitor:
        self.monitors.append((tag, callback))

        def stop() -> None:
            self.stop_calls += 1

        return stop


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def ctx(fake_client: FakeClient) -> ShellContext:
    return ShellContext(fake_client)

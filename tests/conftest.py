from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from engine.config import EngineConfig
from engine.controller import SimulationController


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def controller(config):
    """Fresh controller at the initial state (one snapshot in history)."""
    return SimulationController(config)

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the rotating log file out of the home directory during tests.
os.environ.setdefault("XLFLOW_LOG_DIR", tempfile.mkdtemp(prefix="xlflow-logs-"))

from xlflow.schema import SchemaRegistry


@pytest.fixture()
def registry() -> SchemaRegistry:
    """Fresh schema registry so cached descriptors never leak between tests."""

    return SchemaRegistry()

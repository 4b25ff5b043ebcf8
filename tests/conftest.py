"""
Pytest configuration and shared fixtures for gcode_interpreter tests.

Provides fixture document paths, call counting helpers and the custom
markers used across the test suite.
"""

import logging
import os
import sys
from collections import Counter
from pathlib import Path

import pytest

# Add the parent directory to Python path so we can import the package
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

logger = logging.getLogger(__name__)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ============================================================================
# FIXTURE DOCUMENTS
# ============================================================================

@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def circle_file() -> str:
    """7-line circle: G0 x2, G1 x1, G2 x4 after modal continuation."""
    return str(FIXTURES_DIR / "circle.nc")


@pytest.fixture(scope="session")
def one_inch_circle_file() -> str:
    """Circle with G17/G20/G90/G94/G54 setup: G0 x4, G1 x2, G2 x4."""
    return str(FIXTURES_DIR / "one-inch-circle.nc")


@pytest.fixture
def circle_text(circle_file) -> str:
    return Path(circle_file).read_text(encoding="utf-8")


# ============================================================================
# CALL COUNTING
# ============================================================================

class CallRecorder:
    """Records (code, args) pairs and counts calls per code."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.counts: Counter = Counter()

    def record(self, code: str, args: dict) -> None:
        assert isinstance(args, dict)
        self.calls.append((code, args))
        self.counts[code] += 1

    def handler(self, code: str):
        """Return a handler-table callable recording calls under code."""
        return lambda args: self.record(code, args)

    def handlers(self, *codes: str) -> dict:
        return {code: self.handler(code) for code in codes}


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()


# ============================================================================
# PYTEST CONFIGURATION HOOKS
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that load complete G-code documents"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that exercise complete workflows"
    )
    config.addinivalue_line(
        "markers", "gcode: Tests specifically for G-code parsing and interpretation functionality"
    )


def pytest_sessionstart(session):
    """Called after the Session object has been created."""
    logger.info("Starting gcode_interpreter test session")

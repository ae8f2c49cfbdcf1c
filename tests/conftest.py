# tests/conftest.py
import sys
import random
from datetime import datetime
from pathlib import Path

# ---------------------------------------------------------
# Ensure project root is on PYTHONPATH BEFORE app imports
# ---------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# ---------------------------------------------------------
# Now safe to import app + dependencies
# ---------------------------------------------------------
import pytest

from configurations import config
from services.store import SavingsStore

FIXED_NOW = datetime(2026, 1, 1)


@pytest.fixture(autouse=True)
def offline_config(monkeypatch):
    """
    Tests never call the LLM and never verify webhook signatures
    unless they opt in explicitly.
    """
    monkeypatch.setattr(config, "DEBUG", False)
    monkeypatch.setattr(config, "AI_TARGET_PARSER", False)
    monkeypatch.setattr(config, "LINE_CHANNEL_SECRET", None)
    monkeypatch.setattr(config, "DEFAULT_TIMELINE_DAYS", 30)


@pytest.fixture
def store():
    return SavingsStore()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def now_fn():
    return lambda: FIXED_NOW

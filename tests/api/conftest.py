import random

import pytest
from fastapi.testclient import TestClient

from API_LAYER.app import app
from services.message_handler import MessageHandler
from services.store import SavingsStore


@pytest.fixture
def client():
    # Fresh in-memory store per test; startup keeps whatever is installed here
    app.state.store = SavingsStore()
    app.state.handler = MessageHandler(app.state.store, random.Random(0))
    return TestClient(app)

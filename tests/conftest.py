"""Shared fixtures. Env is pinned before plantsnap.services.api is imported."""
import json
import os

os.environ["SECRET_STORE"] = "memory"
os.environ["VISION_ADAPTER"] = "mock"
os.environ["DEMO_DELAY_S"] = "0"

import cv2
import numpy as np
import pytest

from plantsnap.adapters.secrets.memory_store import InMemorySecretStore
from plantsnap.services.session import SessionState
from plantsnap.services.status_store import StatusStore

VALID_KEY = "sk-" + "x" * 25

PEACE_LILY_ENVELOPE = (
    '{"choices":[{"message":{"content":"{\\"commonName\\":\\"Peace Lily\\",'
    '\\"scientificName\\":\\"Spathiphyllum\\",\\"confidence\\":0.95,'
    '\\"care\\":[\\"Keep soil moist\\",\\"Bright indirect light\\"]}"}}]}'
)


def envelope(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def plant_content(**overrides) -> str:
    data = {
        "commonName": "Snake Plant",
        "scientificName": "Dracaena trifasciata",
        "confidence": 0.88,
        "care": ["Water sparingly", "Tolerates low light"],
    }
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def secret_store():
    return InMemorySecretStore()


@pytest.fixture
def session(secret_store, status):
    s = SessionState(secret_store, status)
    s.initialize()
    return s


@pytest.fixture
def authed_session(session):
    session.save(VALID_KEY)
    return session


@pytest.fixture
def png_bytes():
    """Small solid-green PNG; any decodable format is accepted."""
    frame = np.zeros((16, 24, 3), dtype=np.uint8)
    frame[:, :] = (40, 160, 60)
    ok, buf = cv2.imencode(".png", frame)
    assert ok
    return bytes(buf)

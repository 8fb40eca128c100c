import base64
import binascii
import os
from fastapi import FastAPI
from dotenv import load_dotenv
from plantsnap.services.models import (
    SaveKeyRequest, ImageRequest, DemoModeRequest,
    OkResponse, IdentifyResponse, StatusResponse, PlantResultOut,
    validate_api_key,
)
from plantsnap.services.status_store import StatusStore
from plantsnap.services.session import SessionState
from plantsnap.orchestrator.state_machine import IdentifyOrchestrator
from plantsnap.orchestrator.errors import ValidationError, NotReadyError

load_dotenv(dotenv_path="plantsnap/.env", override=False)

app = FastAPI(title="plantsnap")

status = StatusStore()

# Secret store: SECRET_STORE env var (keyring | memory, default: keyring)
_secret_store = os.getenv("SECRET_STORE", "keyring").lower()
if _secret_store == "memory":
    from plantsnap.adapters.secrets.memory_store import InMemorySecretStore
    store = InMemorySecretStore()
else:
    from plantsnap.adapters.secrets.keyring_store import KeyringSecretStore
    store = KeyringSecretStore(status)
status.log(f"secret store: {type(store).__name__}")

# Vision adapter: VISION_ADAPTER env var (openai | mock, default: openai)
_vision_adapter = os.getenv("VISION_ADAPTER", "openai").lower()
if _vision_adapter == "mock":
    from plantsnap.adapters.vision.mock_vision import MockVision
    vision = MockVision(status)
else:
    from plantsnap.adapters.vision.openai_vision import OpenAIVision
    vision = OpenAIVision(status)
status.log(f"vision adapter: {type(vision).__name__}")

demo_delay = float(os.getenv("DEMO_DELAY_S", "1.0"))

session = SessionState(store, status)

# The identify screen lives only while a key is saved
screen: IdentifyOrchestrator | None = None


def _on_session_change(name, value):
    global screen
    if name != "is_authenticated":
        return
    if value:
        screen = IdentifyOrchestrator(vision=vision, session=session, status_store=status, demo_delay=demo_delay)
        status.log("screen: identify")
    else:
        screen = None
        status.log("screen: login")


session.subscribe(_on_session_change)
session.initialize()


@app.get("/status", response_model=StatusResponse)
def get_status():
    s = screen
    if s is None:
        return StatusResponse(screen="login", authenticated=session.is_authenticated, logs=status.logs)
    return StatusResponse(
        screen="identify",
        authenticated=session.is_authenticated,
        loading=s.is_loading,
        demo_mode=s.demo_mode,
        has_image=s.image is not None,
        phase=s.phase.value,
        result=PlantResultOut.from_result(s.result),
        logs=status.logs,
    )


@app.post("/auth/key", response_model=OkResponse)
def save_key(req: SaveKeyRequest):
    try:
        key = validate_api_key(req.api_key)
    except ValidationError as e:
        status.log("AUTH: rejected key")
        return OkResponse(ok=False, error=str(e))
    session.save(key)
    return OkResponse(ok=True)


@app.delete("/auth/key", response_model=OkResponse)
def clear_key():
    session.clear()
    return OkResponse(ok=True)


@app.post("/image", response_model=OkResponse)
def set_image(req: ImageRequest):
    s = screen
    if s is None:
        return OkResponse(ok=False, error="not authenticated")
    try:
        image_bytes = base64.b64decode(req.image, validate=True)
    except (binascii.Error, ValueError) as e:
        status.log(f"IMAGE decode error: {e}")
        return OkResponse(ok=False, error="base64 decode failed")
    if s.is_loading:
        return OkResponse(ok=False, error="busy")
    s.set_image(image_bytes)
    return OkResponse(ok=True)


@app.post("/demo_mode", response_model=OkResponse)
def set_demo_mode(req: DemoModeRequest):
    s = screen
    if s is None:
        return OkResponse(ok=False, error="not authenticated")
    s.set_demo_mode(req.enabled)
    return OkResponse(ok=True)


@app.post("/identify", response_model=IdentifyResponse)
def identify():
    s = screen
    if s is None:
        return IdentifyResponse(ok=False, error="not authenticated")
    try:
        result = s.identify()
    except NotReadyError as e:
        status.log(f"IDENTIFY rejected: {e}")
        return IdentifyResponse(ok=False, error=str(e))
    if s is not screen:
        # logged out mid-request: the result belongs to a torn-down screen
        status.log("IDENTIFY: screen closed, result discarded")
        return IdentifyResponse(ok=False, error="screen closed")
    return IdentifyResponse(ok=True, result=PlantResultOut.from_result(result))


@app.get("/health")
def health():
    return {
        "api": True,
        "vision_adapter": type(vision).__name__,
        "secret_store": type(store).__name__,
        "authenticated": session.is_authenticated,
    }

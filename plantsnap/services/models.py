from pydantic import BaseModel
from typing import Literal, Optional, List
from plantsnap.orchestrator.contracts import PlantResult
from plantsnap.orchestrator.errors import ValidationError

API_KEY_PREFIX = "sk-"
API_KEY_MIN_LEN = 21   # must be longer than 20 chars


def validate_api_key(raw: str) -> str:
    """Very basic shape check before a key is saved. Returns the stripped key."""
    key = (raw or "").strip()
    if not key.startswith(API_KEY_PREFIX) or len(key) < API_KEY_MIN_LEN:
        raise ValidationError("Invalid API Key")
    return key


class SaveKeyRequest(BaseModel):
    api_key: str

class ImageRequest(BaseModel):
    image: str  # base64, any format OpenCV can decode

class DemoModeRequest(BaseModel):
    enabled: bool

class PlantResultOut(BaseModel):
    commonName: str
    scientificName: str
    confidence: float
    care: List[str]
    notes: Optional[str] = None

    @classmethod
    def from_result(cls, r: Optional[PlantResult]) -> Optional["PlantResultOut"]:
        return cls(**r.to_dict()) if r is not None else None

class OkResponse(BaseModel):
    ok: bool
    error: Optional[str] = None

class IdentifyResponse(BaseModel):
    ok: bool
    result: Optional[PlantResultOut] = None
    error: Optional[str] = None

class StatusResponse(BaseModel):
    screen: Literal["login", "identify"]
    authenticated: bool
    loading: bool = False
    demo_mode: bool = False
    has_image: bool = False
    phase: Optional[Literal["idle", "loading", "success", "fallback"]] = None
    result: Optional[PlantResultOut] = None
    logs: list[str]

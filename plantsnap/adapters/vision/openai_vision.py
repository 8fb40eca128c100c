"""
OpenAI Vision plant identifier.
Uses the chat completions API with an image_url content part.

The model is asked for strict JSON, so the response is decoded twice:
the chat-completions envelope first, then the JSON string inside
choices[0].message.content. Each stage raises its own DecodeError subclass.

No retries and no fallback here; that policy lives in the orchestrator.
"""
import os
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from plantsnap.adapters.image.jpeg_encoder import encode_jpeg, to_data_uri, JPEG_QUALITY
from plantsnap.adapters.vision.base import VisionAdapter
from plantsnap.orchestrator.contracts import PlantResult
from plantsnap.orchestrator.errors import TransportError, EnvelopeDecodeError, ContentDecodeError

OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
OPENAI_MODEL   = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "60"))

MAX_TOKENS  = 500
TEMPERATURE = 0

SYSTEM_PROMPT = (
    "You are a plant identifier. Given one photo, return ONLY strict JSON matching "
    "the provided schema. If uncertain, set both names to 'unknown' and confidence "
    "≤ 0.3. Keep care to two short, non-duplicative tips. No extra text."
)

RESULT_SCHEMA = (
    '{ "type": "object", "properties": { '
    '"commonName": { "type": "string" }, '
    '"scientificName": { "type": "string" }, '
    '"confidence": { "type": "number", "minimum": 0, "maximum": 1 }, '
    '"care": { "type": "array", "items": { "type": "string" }, "maxItems": 2 }, '
    '"notes": { "type": "string" } }, '
    '"required": ["commonName", "scientificName", "confidence", "care"] }'
)


class _Message(BaseModel):
    content: str

class _Choice(BaseModel):
    message: _Message

class _Envelope(BaseModel):
    model_config = ConfigDict(strict=True)

    choices: List[_Choice]

class _PlantPayload(BaseModel):
    # no string-to-number coercion, no NaN/Infinity literals
    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    commonName: str
    scientificName: str
    confidence: float
    care: List[str]
    notes: Optional[str] = None


def build_payload(data_uri: str, model: str = OPENAI_MODEL) -> dict:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": data_uri}},
                    {"type": "text", "text": f"Schema: {RESULT_SCHEMA}"},
                ],
            },
        ],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
    }


def decode_envelope(raw: bytes) -> str:
    """Stage 1: chat-completions envelope -> choices[0].message.content."""
    try:
        envelope = _Envelope.model_validate_json(raw)
    except PydanticValidationError as e:
        raise EnvelopeDecodeError(f"malformed envelope: {e.error_count()} error(s)") from e
    if not envelope.choices:
        raise EnvelopeDecodeError("envelope has no choices")
    return envelope.choices[0].message.content


def decode_content(content: str) -> PlantResult:
    """Stage 2: embedded content string -> PlantResult."""
    try:
        p = _PlantPayload.model_validate_json(content)
    except PydanticValidationError as e:
        raise ContentDecodeError(f"content is not strict result JSON: {e.error_count()} error(s)") from e
    return PlantResult(
        common_name=p.commonName,
        scientific_name=p.scientificName,
        confidence=p.confidence,
        care=p.care,
        notes=p.notes,
    )


class OpenAIVision(VisionAdapter):
    def __init__(self, status_store, url: str = OPENAI_API_URL, model: str = OPENAI_MODEL,
                 timeout: float = OPENAI_TIMEOUT, http_client: httpx.Client | None = None):
        self.status = status_store
        self.url = url
        self.model = model
        self.timeout = timeout
        self._http = http_client
        self.status.log(f"openai_vision: ready (model={self.model})")

    def identify(self, image_bytes: bytes, api_key: str) -> PlantResult:
        jpeg = encode_jpeg(image_bytes, JPEG_QUALITY)
        payload = build_payload(to_data_uri(jpeg), model=self.model)
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        self.status.log(f"openai_vision: POST jpeg={len(jpeg)}B")
        try:
            if self._http is not None:
                resp = self._http.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            else:
                resp = httpx.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            self.status.log(f"openai_vision: transport error {type(e).__name__}")
            raise TransportError(f"request failed: {type(e).__name__}: {e}") from e

        if resp.status_code >= 400:
            self.status.log(f"openai_vision: HTTP {resp.status_code} — {resp.text[:300]}")
            raise TransportError(f"HTTP {resp.status_code}", status_code=resp.status_code)

        content = decode_envelope(resp.content)
        self.status.log(f"openai_vision: raw='{content[:200]}'")
        result = decode_content(content)
        self.status.log(f"openai_vision: → {result.common_name} (conf={result.confidence:.2f})")
        return result

"""
Fake chat-completions server for exercising OpenAIVision without spending tokens.

Simulates POST /v1/chat/completions on port 9100 and answers with a Peace Lily
result wrapped in the usual envelope.

FAKE_OPENAI_MODE selects the behaviour:
  ok       — valid envelope + valid JSON content (default)
  garbage  — valid envelope, content is prose instead of JSON
  error    — HTTP 500

Usage:
    python plantsnap/scripts/fake_openai_server.py
    OPENAI_API_URL=http://127.0.0.1:9100/v1/chat/completions SECRET_STORE=memory \
        uvicorn plantsnap.web.app:app
"""

import json
import os
import time
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

app = FastAPI(title="fake-openai-server")

MODE = os.getenv("FAKE_OPENAI_MODE", "ok")

_CONTENT = {
    "commonName": "Peace Lily",
    "scientificName": "Spathiphyllum",
    "confidence": 0.95,
    "care": ["Keep soil moist", "Bright indirect light"],
}


def _envelope(content: str) -> dict:
    return {
        "id": "chatcmpl-fake",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
    }


@app.post("/v1/chat/completions")
async def chat_completions(request: Request):
    auth = request.headers.get("authorization", "")
    if not auth.startswith("Bearer sk-"):
        print("[openai] 401 — missing or malformed bearer token")
        return JSONResponse(status_code=401, content={"error": {"message": "Incorrect API key provided"}})

    body = await request.json()
    user_parts = body["messages"][1]["content"]
    uri = user_parts[0]["image_url"]["url"]
    print(f"[openai] model={body.get('model')} image={len(uri)} chars max_tokens={body.get('max_tokens')}")
    time.sleep(0.3)

    if MODE == "error":
        return JSONResponse(status_code=500, content={"error": {"message": "fake server error"}})
    if MODE == "garbage":
        return _envelope("I think this is a peace lily!")
    return _envelope(json.dumps(_CONTENT))


if __name__ == "__main__":
    print(f"Fake OpenAI server starting on http://localhost:9100 (mode={MODE})")
    uvicorn.run(app, host="0.0.0.0", port=9100)

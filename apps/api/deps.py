from fastapi import HTTPException, status

from packages.config import (
    LLM_API_KEY,
    LLM_BASE_URL,
    LLM_MAX_TOKENS,
    LLM_MODEL,
    LLM_TEMPERATURE,
    LLM_TIMEOUT_SEC,
)
from services.planning.completion import CompletionClient
from . import store


def get_completion_client() -> CompletionClient:
    return CompletionClient(
        api_key=LLM_API_KEY,
        model=LLM_MODEL,
        base_url=LLM_BASE_URL,
        temperature=LLM_TEMPERATURE,
        max_tokens=LLM_MAX_TOKENS,
        timeout=LLM_TIMEOUT_SEC,
    )


def get_upload(upload_id: str) -> store.StoredUpload:
    upload = store.get(upload_id)
    if upload is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Upload not found or expired")
    return upload

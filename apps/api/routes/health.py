from fastapi import APIRouter

from .. import store
from ..schemas import HealthResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health():
    return {"status": "ok", "uploads": store.count()}

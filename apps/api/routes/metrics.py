from fastapi import APIRouter, Response

from packages.metrics import snapshot

router = APIRouter()


@router.get("/metrics")
def metrics():
    counters, durations = snapshot()
    lines = [f"{name} {value}" for name, value in sorted(counters.items())]
    lines.extend(f"{name}_sum {value:.6f}" for name, value in sorted(durations.items()))
    return Response(content="\n".join(lines) + "\n", media_type="text/plain")

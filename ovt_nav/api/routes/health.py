from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health(request: Request):
    aggregator = getattr(request.app.state, "aggregator", None)
    poller = getattr(request.app.state, "poller", None)
    return {
        "status": "ok",
        "nav_state": aggregator.state.value if aggregator else "not_initialized",
        "polling": bool(poller and poller.running),
    }

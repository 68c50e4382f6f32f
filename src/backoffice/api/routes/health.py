"""Health check endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from backoffice import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Return service health status."""
    return {"status": "healthy", "service": "backoffice-api", "version": __version__}


@router.get("/health/ready")
async def readiness(request: Request):
    """Readiness probe: checks the database and reports alert pipeline state."""
    checks: dict[str, str] = {}
    overall_ok = True

    try:
        session_factory = request.app.state.db_session_factory
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:
        checks["database"] = f"error: {exc}"
        overall_ok = False

    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        checks["alerts"] = "disabled"
    else:
        checks["alerts"] = "polling" if pipeline.fetcher.running else "idle"

    status_code = 200 if overall_ok else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if overall_ok else "not_ready",
            "checks": checks,
        },
    )

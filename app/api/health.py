from fastapi import APIRouter
from sqlalchemy import text

from app.database import engine

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Liveness",
    description="Answers as long as the process is serving requests."
)
def health_check():
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness",
    description="Reports whether the product database accepts queries."
)
def readiness_check():
    """
    Run a trivial query against the product database.

    The connection error text is included when the database is unreachable,
    so a failing deploy shows why the catalogue cannot be served.
    """
    checks = {"database": False}

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)

    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }

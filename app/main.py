import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.availability import router as availability_router
from app.api.v1.displacement import router as displacement_router
from app.core.config import settings

CONTEXT_KEYS = (
    "tenant_id",
    "service_id",
    "date",
    "month",
    "slot_count",
    "available_days",
    "distance_km",
    "status_code",
    "elapsed_ms",
    "reason",
    "error",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        line = super().format(record)
        return f"{line} | {' '.join(pairs)}" if pairs else line


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("app.http")

app = FastAPI(title="Studio Availability", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(availability_router, prefix="/api/v1", tags=["availability"])
app.include_router(displacement_router, prefix="/api/v1", tags=["displacement"])


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s",
        request.method,
        request.url.path,
        extra={
            "status_code": response.status_code,
            "elapsed_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    )
    return response


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "store": settings.STORE_PROVIDER}

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from community_events.api.v1.router import router as v1_router
from community_events.core.config import settings
from community_events.core.logging import configure_logging
from community_events.db import create_schema
from community_events.middleware.request_id import RequestIdMiddleware
from community_events.middleware.throttle import SubmissionThrottleMiddleware

configure_logging()

if settings.database_url.startswith("sqlite"):
    # No migrations for the local file database; build the tables in place.
    create_schema()

app = FastAPI(title="Community Events API")

# Starlette runs the LAST added middleware FIRST (outermost).
# RequestId wraps everything so throttled and preflight responses are tagged too.
app.add_middleware(SubmissionThrottleMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/")
def root():
    return {"name": "Community Events API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(v1_router, prefix="/v1")

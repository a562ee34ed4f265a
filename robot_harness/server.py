"""
FastAPI HTTP server for the robot harness.

Exposes:
- POST /api/run - Run one control message, return the envelopes it emitted
- GET /api/status - Current status of the reference robot

One harness lives for the life of the app, so the reference robot keeps its
state across runs. Runs are serialized: a run finishes before the next starts.
"""

import logging
import sys
import threading
from fastapi import FastAPI
from pydantic import BaseModel, Field

from .channels import Outbound, RecordingChannel
from .config import get_log_level
from .harness import Tester
from .models import Envelope, RunOptions

logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


class RunResponse(BaseModel):
    """Response body for POST /api/run."""
    messages: list[Envelope] = Field(default_factory=list, description="Envelopes in emission order")


class StatusResponse(BaseModel):
    """Response body for GET /api/status."""
    status: str = Field(..., description="Reference robot status, '?,?,?' before the first drop")


def create_app() -> FastAPI:
    """Build the app with its own harness and outbox."""
    app = FastAPI(
        title="Robot Harness API",
        description="Differential test harness for the robot table simulator",
        version="1.0.0",
    )

    outbox = RecordingChannel()
    tester = Tester(Outbound.single(outbox))
    lock = threading.Lock()

    @app.post("/api/run", response_model=RunResponse, response_model_exclude_none=True)
    def run(options: RunOptions) -> RunResponse:
        logger.info("POST /api/run key=%r count=%s", options.key, options.count)
        with lock:
            tester.handle(options)
            messages = outbox.drain()
        logger.info("run emitted %d messages", len(messages))
        return RunResponse(messages=messages)

    @app.get("/api/status", response_model=StatusResponse)
    def status() -> StatusResponse:
        with lock:
            return StatusResponse(status=tester.robot.status)

    return app


app = create_app()

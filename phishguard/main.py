# phishguard/main.py

from __future__ import annotations

import json
import logging
import secrets
import time

import sentry_sdk
from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from phishguard.automation import AutomationDispatcher
from phishguard.config import EngineConfig
from phishguard.engine import ThreatAssessor
from phishguard.errors import InputEmpty, InputRejected

# ---------------------------------------------------------
# Config + logging
# ---------------------------------------------------------
CONFIG = EngineConfig.from_env()

logger = logging.getLogger("phishguard")
logging.basicConfig(level=logging.INFO, format="%(message)s")

if CONFIG.sentry_dsn:
    sentry_sdk.init(dsn=CONFIG.sentry_dsn, traces_sample_rate=0.2)

ASSESSOR = ThreatAssessor(CONFIG)
DISPATCHER = AutomationDispatcher(CONFIG)

app = FastAPI(title="PhishGuard Threat Assessment API")


# ---------------------------------------------------------
# Error handlers
# ---------------------------------------------------------
@app.exception_handler(InputRejected)
async def input_rejected_handler(request: Request, exc: InputRejected):
    return JSONResponse({"error": exc.reason}, status_code=400)


@app.exception_handler(InputEmpty)
async def input_empty_handler(request: Request, exc: InputEmpty):
    return JSONResponse({"error": "content is empty"}, status_code=400)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse({"error": "Invalid request.", "detail": exc.errors()}, status_code=422)


# Return JSON for unexpected errors to avoid empty/HTML responses
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(json.dumps({"event": "error", "path": str(request.url.path), "error": str(exc)}))
    return JSONResponse({"error": "Internal server error."}, status_code=500)


@app.middleware("http")
async def request_log(request: Request, call_next):
    request_id = secrets.token_hex(8)
    request.state.request_id = request_id
    start_time = time.time()
    response = await call_next(request)
    duration = round((time.time() - start_time) * 1000, 2)
    logger.info(
        json.dumps(
            {
                "event": "request",
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": duration,
            }
        )
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------
# Models
# ---------------------------------------------------------
class AnalyzeRequest(BaseModel):
    content: str


# ---------------------------------------------------------
# Routes
# ---------------------------------------------------------
@app.get("/health")
def health():
    return {"status": "ok", "primary_analyzer": CONFIG.primary_analyzer_enabled}


@app.post("/analyze")
def analyze(body: AnalyzeRequest, background_tasks: BackgroundTasks):
    result = ASSESSOR.assess(body.content)
    # runs after the response is sent; never affects it
    background_tasks.add_task(DISPATCHER.dispatch, result)
    return JSONResponse(result.to_dict())

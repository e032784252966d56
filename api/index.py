import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

# Resolve paths relative to this file so the server works from any CWD
API_DIR = Path(__file__).resolve().parent
BASE_DIR = API_DIR.parent
FRONTEND_DIR = BASE_DIR / "frontend"

# Serverless entry point: sibling modules are imported flat
if str(API_DIR) not in sys.path:
    sys.path.append(str(API_DIR))

from config import get_settings
from letters import procedure_choices, render, render_letter_parts
from llm import RewriteError, rewrite_notes
from logger import logger, request_context
from models import (
    CaseRecord, ErrorResponse, ProcedureCatalogue, ProcedureKind,
    RenderResponse, RewriteRequest, RewriteResponse
)

REWRITE_PATH = "/api/rewrite"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(f"Rewrite provider: {settings.provider} ({settings.model_id})")
    if not settings.api_key:
        logger.warning("No provider API key configured; /api/rewrite will answer 'API Key missing'")
    yield


app = FastAPI(title="Endo Referral Letters", lifespan=lifespan)

# CORS: allow same-origin + localhost dev. Never wildcard with credentials.
_ALLOWED_ORIGINS = get_settings().cors_origins
_ALLOW_CREDENTIALS = "*" not in _ALLOWED_ORIGINS

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    token = request_context.set(request.headers.get("X-Request-ID", "-"))
    try:
        return await call_next(request)
    finally:
        request_context.reset(token)


# The rewrite route only ever answers 200 or 500.
@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    if request.url.path == REWRITE_PATH:
        logger.warning(f"Rejected malformed rewrite request: {exc.errors()}")
        return JSONResponse(status_code=500, content={"error": "Invalid request"})
    return await request_validation_exception_handler(request, exc)


# ─── Health ────────────────────────────────────────────────────────────────────

@app.get("/api/health")
async def health():
    settings = get_settings()
    return {"status": "ok", "provider": settings.provider, "model": settings.model_id}


# ─── Letter Templates ──────────────────────────────────────────────────────────

@app.get("/api/procedures", response_model=ProcedureCatalogue)
async def get_procedures():
    return {"default": ProcedureKind.ROOT_CANAL_TREATMENT, "procedures": procedure_choices()}


@app.post("/api/render", response_model=RenderResponse)
async def render_preview(record: CaseRecord):
    """Render the letter preview. Called by the form on every edit."""
    content, closing = render_letter_parts(record, practitioner=get_settings().practitioner)
    return RenderResponse(
        body=render(record),
        letter=f"{content}\n\n{closing}",
        content=content,
        closing=closing,
    )


# ─── Notes Rewrite ─────────────────────────────────────────────────────────────

@app.post(REWRITE_PATH, response_model=RewriteResponse, responses={500: {"model": ErrorResponse}})
async def rewrite(req: RewriteRequest):
    try:
        output = await rewrite_notes(req.notes, req.patient_name)
    except RewriteError as e:
        return JSONResponse(status_code=500, content={"error": e.message})
    return RewriteResponse(output=output)


# Serve explicit index.html on root
@app.get("/")
async def serve_index():
    index_path = FRONTEND_DIR / "index.html"
    if not index_path.exists():
        return JSONResponse(status_code=404, content={"error": "index.html not found."})
    return FileResponse(index_path)

# Mount frontend
app.mount("/", StaticFiles(directory=str(FRONTEND_DIR), html=True), name="frontend")

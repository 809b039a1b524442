"""latin1-ascii Web App — FastAPI backend.

Endpoints:
  GET  /health
  POST /api/convert                  → one-shot conversion of posted text
  POST /api/check                    → list unhandled 8-bit characters
  POST /api/documents                → create a document → document_id
  GET  /api/documents/{id}           → text, selection, undo state
  POST /api/documents/{id}/convert   → convert a region of the document
  POST /api/documents/{id}/convert-interactive → scripted per-match decisions
  POST /api/documents/{id}/undo | /redo
  DELETE /api/documents/{id}

Run with:
  uvicorn latin1_ascii.web.app:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from latin1_ascii.core.buffer import StringBuffer
from latin1_ascii.core.config import ConfigLoader
from latin1_ascii.core.converter import RegionError
from latin1_ascii.core.models import Decision
from latin1_ascii.core.scanner import find_uncovered_8bit
from latin1_ascii.core.session import EditorSession
from latin1_ascii.web.documents import Document, document_manager

# ---------------------------------------------------------------------------
# Configuration via environment variables
# ---------------------------------------------------------------------------

_ENV = os.environ.get("LATIN1_ASCII_ENV", "dev")

_MAX_TEXT_KB = int(os.environ.get("LATIN1_ASCII_MAX_TEXT_KB", "1024"))
_MAX_TEXT_CHARS = _MAX_TEXT_KB * 1024

# CORS origins: "*" = all, otherwise a comma-separated list
_CORS_ORIGINS_RAW = os.environ.get("LATIN1_ASCII_CORS_ORIGINS", "*")
_CORS_ORIGINS: list[str] = (
    ["*"]
    if _CORS_ORIGINS_RAW in ("*", "")
    else [o.strip() for o in _CORS_ORIGINS_RAW.split(",") if o.strip()]
)
# allow_credentials is incompatible with allow_origins=["*"]
_CORS_ALLOW_CREDENTIALS = "*" not in _CORS_ORIGINS

_logger = logging.getLogger(__name__)

_config = ConfigLoader().load()

# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="latin1-ascii API",
    description="Convert Latin-1 high-bit characters in text regions to 7-bit ASCII",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_CORS_ORIGINS,
    allow_credentials=_CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def _log_startup() -> None:
    _logger.info(
        "latin1-ascii started: env=%s max_text=%dKB cors=%s strict_default=%s table=%d entries",
        _ENV,
        _MAX_TEXT_KB,
        _CORS_ORIGINS_RAW,
        _config.strict,
        len(_config.table),
    )


@app.exception_handler(RegionError)
async def _region_error_handler(request: Request, exc: RegionError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.get("/health")
async def health():
    from latin1_ascii import __version__
    return {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# Stateless conversion
# ---------------------------------------------------------------------------


@app.post("/api/convert")
async def convert_text(request: Request):
    """Convert a region of the posted text (whole text when no bounds are given)."""
    body = await _json_body(request)
    session = _new_session(_text_field(body), whole_text_selected=True)
    changed = session.convert_region(
        _int_field(body, "start"), _int_field(body, "end"), strict=_bool_field(body, "strict")
    )
    return {"text": session.buffer.text, "changed": changed}


@app.post("/api/check")
async def check_text(request: Request):
    """Report 8-bit characters the replacement table does not cover."""
    body = await _json_body(request)
    session = _new_session(_text_field(body), whole_text_selected=True)
    start, end = _int_field(body, "start"), _int_field(body, "end")
    uncovered = session.region_has_uncovered_8bit(start, end)
    characters: list[dict] = []
    if uncovered:
        start = 0 if start is None else start
        end = len(session.buffer) if end is None else end
        characters = [
            {"offset": offset, "char": char, "codepoint": f"0x{ord(char):02X}"}
            for offset, char in find_uncovered_8bit(
                session.buffer, min(start, end), max(start, end), session.config.table
            )
        ]
    return {"uncovered": uncovered, "characters": characters}


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@app.post("/api/documents")
async def create_document(request: Request):
    """Store a text with an optional ``[start, end]`` selection."""
    body = await _json_body(request)
    text = _text_field(body)
    selection = body.get("selection")
    if selection is not None:
        if (
            not isinstance(selection, list)
            or len(selection) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in selection)
        ):
            raise HTTPException(status_code=422, detail="'selection' must be [start, end]")
        if not (0 <= min(selection) and max(selection) <= len(text)):
            raise HTTPException(status_code=422, detail="'selection' outside the text")
    session = _new_session(text)
    if selection is not None:
        session.buffer.set_selection(*selection)
    document = document_manager.create(session)
    _logger.info("Created document %s (%d chars)", document.id, len(text))
    return document.to_dict()


@app.get("/api/documents/{document_id}")
async def get_document(document_id: str):
    return _get_document(document_id).to_dict()


@app.delete("/api/documents/{document_id}")
async def delete_document(document_id: str):
    if not document_manager.delete(document_id):
        raise HTTPException(status_code=404, detail="Document not found or expired")
    return {"ok": True}


@app.post("/api/documents/{document_id}/convert")
async def convert_document(document_id: str, request: Request):
    document = _get_document(document_id)
    body = await _json_body(request, allow_empty=True)
    with document.lock:
        changed = document.session.convert_region(
            _int_field(body, "start"), _int_field(body, "end"), strict=_bool_field(body, "strict")
        )
        return {**document.to_dict(), "changed": changed}


@app.post("/api/documents/{document_id}/convert-interactive")
async def convert_document_interactive(document_id: str, request: Request):
    """Run interactive conversion, answering each prompt from ``decisions`` in order.

    Running out of decisions answers ``quit``.
    """
    document = _get_document(document_id)
    body = await _json_body(request)
    raw = body.get("decisions", [])
    if not isinstance(raw, list):
        raise HTTPException(status_code=422, detail="'decisions' must be a list")
    try:
        decisions = [Decision(d) for d in raw]
    except ValueError:
        raise HTTPException(
            status_code=422,
            detail=f"'decisions' entries must be one of {[d.value for d in Decision]}",
        )

    prompts: list[str] = []
    notices: list[str] = []
    answers = iter(decisions)

    def prompt(message: str) -> Decision:
        prompts.append(message)
        return next(answers, Decision.QUIT)

    with document.lock:
        session = document.session
        interactive = EditorSession(
            session.buffer, session.config, prompt=prompt, notify=notices.append,
            history=session.history,
        )
        changed = interactive.convert_region_interactive(
            _int_field(body, "start"), _int_field(body, "end"), strict=_bool_field(body, "strict")
        )
        return {**document.to_dict(), "changed": changed, "prompts": prompts, "notices": notices}


@app.post("/api/documents/{document_id}/undo")
async def undo_document(document_id: str):
    document = _get_document(document_id)
    with document.lock:
        done = document.session.undo()
        return {**document.to_dict(), "done": done}


@app.post("/api/documents/{document_id}/redo")
async def redo_document(document_id: str):
    document = _get_document(document_id)
    with document.lock:
        done = document.session.redo()
        return {**document.to_dict(), "done": done}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _new_session(text: str, whole_text_selected: bool = False) -> EditorSession:
    buffer = StringBuffer(text, selection=(0, len(text)) if whole_text_selected else None)
    return EditorSession(buffer, _config)


def _get_document(document_id: str) -> Document:
    document = document_manager.get(document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found or expired")
    return document


async def _json_body(request: Request, allow_empty: bool = False) -> dict[str, Any]:
    raw = await request.body()
    if not raw and allow_empty:
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=422, detail="Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=422, detail="Request body must be a JSON object")
    return body


def _text_field(body: dict[str, Any]) -> str:
    text = body.get("text")
    if not isinstance(text, str):
        raise HTTPException(status_code=422, detail="'text' must be a string")
    if len(text) > _MAX_TEXT_CHARS:
        raise HTTPException(status_code=413, detail=f"Text exceeds {_MAX_TEXT_KB} KB")
    return text


def _int_field(body: dict[str, Any], key: str) -> int | None:
    value = body.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise HTTPException(status_code=422, detail=f"'{key}' must be an integer")
    return value


def _bool_field(body: dict[str, Any], key: str) -> bool | None:
    value = body.get(key)
    if value is not None and not isinstance(value, bool):
        raise HTTPException(status_code=422, detail=f"'{key}' must be a boolean")
    return value

from __future__ import annotations

import logging
from dataclasses import is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pydantic import RootModel

from playground.artifacts import IdExhausted
from playground.config import settings
from playground.dispatcher import build_dispatcher
from playground.logging import setup_logging
from playground.types import Command

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.SERVICE_NAME, version="1.0.0")

dispatcher = build_dispatcher(settings)
dispatcher.artifacts.ensure_dirs()

STATIC_DIR = Path(settings.STATIC_DIR)
if STATIC_DIR.exists():
	app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


def _to_json(obj: Any, *, depth: int = 0, max_depth: int = 12) -> Any:
	"""Convert a response value to JSON-safe structures, tagging dataclasses with `_type`."""
	if depth > max_depth:
		return {"_truncated": True}
	if obj is None:
		return None
	if isinstance(obj, (str, int, float, bool)):
		return obj
	if isinstance(obj, (list, tuple)):
		return [_to_json(x, depth=depth + 1, max_depth=max_depth) for x in obj]
	if isinstance(obj, dict):
		return {str(k): _to_json(v, depth=depth + 1, max_depth=max_depth) for k, v in obj.items()}
	if is_dataclass(obj):
		data: Dict[str, Any] = {"_type": obj.__class__.__name__}
		for k, v in obj.__dict__.items():
			data[k] = _to_json(v, depth=depth + 1, max_depth=max_depth)
		return data
	# Severity
	if isinstance(obj, Enum):
		return obj.name
	# Fallback (paths, timestamps)
	return str(obj)


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
	index_path = STATIC_DIR / "index.html"
	if index_path.exists():
		return HTMLResponse(index_path.read_text(encoding="utf-8"))
	return HTMLResponse(
		"<h2>Fay Playground</h2><p>POST <code>/json</code> with JSON: <code>{\"command\": \"check_module\", \"content\": \"...\"}</code></p>"
	)


@app.get("/health")
def health() -> Dict[str, str]:
	return {"status": "ok"}


class CommandRequest(RootModel):
	root: Command


@app.post("/json")
def handle(req: CommandRequest) -> Dict[str, Any]:
	# Sync handler: each request blocks its own worker thread while the toolchain runs.
	try:
		response = dispatcher.dispatch(req.root)
	except IdExhausted as exc:
		logger.error("Id generation exhausted: %s", exc)
		raise HTTPException(status_code=503, detail=str(exc))
	return _to_json(response)

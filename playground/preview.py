from __future__ import annotations

from pathlib import Path
from typing import Sequence

from playground.artifacts import ArtifactManager


def script_tag(src: str) -> str:
	return f'<script type="text/javascript" src="{src}"></script>'


def stylesheet_tag(href: str) -> str:
	return f"<link href='{href}' rel='stylesheet'>"


def render_preview(script_file: str, stylesheets: Sequence[str], scripts: Sequence[str]) -> str:
	head = ["    <meta http-equiv='Content-Type' content='text/html; charset=utf-8'>"]
	head += ["    " + stylesheet_tag(s) for s in stylesheets]
	head += ["    " + script_tag(s) for s in list(scripts) + [script_file]]
	lines = (
		["<!doctype html>", "<html>", "  <head>"]
		+ head
		+ ["  </head>", "  <body><noscript>Please enable JavaScript.</noscript></body>", "</html>"]
	)
	return "\n".join(lines) + "\n"


class PreviewEmitter:
	"""Writes `<id>.html` next to the compiled `<id>.js` for the client's preview frame."""

	def __init__(self, artifacts: ArtifactManager, stylesheets: Sequence[str], scripts: Sequence[str]) -> None:
		self.artifacts = artifacts
		self.stylesheets = list(stylesheets)
		self.scripts = list(scripts)

	def emit_preview(self, uid: str, script_file: str) -> Path:
		path = self.artifacts.generated_path(uid, ".html")
		path.write_text(render_preview(script_file, self.stylesheets, self.scripts), encoding="utf-8")
		self.artifacts.schedule_delete(path)
		return path

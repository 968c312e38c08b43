"""
Temporary and generated file lifecycle.

Every scratch source file, compiled script and preview page is named after a version-1 UUID and
removed a few seconds later by a daemon timer. Deletion is best effort: a file that is already
gone is not an error.
"""

from __future__ import annotations

import logging
import tempfile
import threading
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from playground.types import Artifact

logger = logging.getLogger(__name__)


class IdUnavailable(Exception):
	"""Raised by an id source that is momentarily unable to produce an id."""


class IdExhausted(RuntimeError):
	def __init__(self, attempts: int) -> None:
		super().__init__(f"No unique id available after {attempts} attempts")
		self.attempts = attempts


IdSource = Callable[[], Optional[uuid.UUID]]


class ArtifactManager:
	def __init__(
		self,
		gen_dir: Path | str,
		*,
		ttl: float = 5.0,
		temp_dir: Path | str | None = None,
		id_source: IdSource = uuid.uuid1,
		retry_delay: float = 0.01,
		max_attempts: int = 100,
	) -> None:
		self.gen_dir = Path(gen_dir)
		self.temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
		self.ttl = ttl
		self._id_source = id_source
		self._retry_delay = retry_delay
		self._max_attempts = max_attempts

	def new_id(self) -> str:
		attempts = 0
		while True:
			attempts += 1
			try:
				uid = self._id_source()
			except IdUnavailable:
				uid = None
			if uid is not None:
				return str(uid)
			if attempts >= self._max_attempts:
				raise IdExhausted(attempts)
			time.sleep(self._retry_delay)

	def new_artifact(self, extension: str) -> Artifact:
		"""Create an empty, uniquely named file in the temp directory."""
		uid = self.new_id()
		path = self.temp_dir / f"{uid}{extension}"
		path.touch(exist_ok=False)
		return Artifact(id=uid, path=path, created_at=datetime.now(timezone.utc))

	def generated_path(self, uid: str, extension: str) -> Path:
		return self.gen_dir / f"{uid}{extension}"

	def ensure_dirs(self) -> None:
		self.gen_dir.mkdir(parents=True, exist_ok=True)

	def delete_now(self, path: Path | str) -> None:
		try:
			Path(path).unlink(missing_ok=True)
		except OSError as exc:
			logger.debug("Could not delete %s: %s", path, exc)

	def schedule_delete(self, path: Path | str, delay: Optional[float] = None) -> threading.Timer:
		timer = threading.Timer(self.ttl if delay is None else delay, self._expire, args=(Path(path),))
		timer.daemon = True
		timer.start()
		return timer

	def _expire(self, path: Path) -> None:
		if path.exists():
			logger.debug("Expiring %s", path)
			self.delete_now(path)

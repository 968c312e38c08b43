from __future__ import annotations

import logging
import sys

FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
	root = logging.getLogger()
	root.setLevel(level.upper())
	if root.handlers:
		return
	handler = logging.StreamHandler(sys.stdout)
	handler.setFormatter(logging.Formatter(FORMAT))
	root.addHandler(handler)

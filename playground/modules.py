"""
Module resolution over the scoped module roots.

A module named `Demo.Calc` lives at `<root>/<scope>/Demo/Calc.hs`. Module names start with an
uppercase letter, which is how a file path is turned back into a name: everything before the
first uppercase-led path segment is treated as the root.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence

from playground.types import ModuleFound, ModuleList, ModuleLookupResult, ModuleNotFound

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9_']*(\.[A-Z][A-Za-z0-9_']*)*$")


def is_module_name(name: str) -> bool:
	return bool(_NAME_RE.match(name or ""))


def module_to_file(name: str, extension: str = ".hs") -> str:
	"""`Demo.Calc` -> `Demo/Calc.hs`"""
	return name.replace(".", "/") + extension


def file_to_module(path: str, extension: str = ".hs") -> str:
	"""`modules/project/Demo/Calc.hs` -> `Demo.Calc`"""
	parts = PurePosixPath(str(path).replace("\\", "/")).parts
	start = 0
	for i, part in enumerate(parts):
		if part[:1].isupper():
			start = i
			break
	name = ".".join(parts[start:])
	if extension and name.endswith(extension):
		name = name[: -len(extension)]
	return name


def _is_hidden(entry: str) -> bool:
	return all(c == "." for c in entry)


def walk_files(directory: Path) -> List[Path]:
	"""All files below `directory`, skipping entries made up only of dots."""
	files: List[Path] = []
	subdirs: List[Path] = []
	for entry in sorted(directory.iterdir()):
		if _is_hidden(entry.name):
			continue
		if entry.is_dir():
			subdirs.append(entry)
		else:
			files.append(entry)
	for sub in subdirs:
		files.extend(walk_files(sub))
	return files


class ModuleResolver:
	def __init__(self, modules_dir: Path | str, scopes: Sequence[str], extension: str = ".hs") -> None:
		self.modules_dir = Path(modules_dir)
		self.scopes = list(scopes)
		self.extension = extension

	def scope_dir(self, scope: str) -> Path:
		return self.modules_dir / scope

	def roots(self) -> List[Path]:
		"""Existing module roots in lookup priority order."""
		return [self.scope_dir(s) for s in self.scopes if self.scope_dir(s).is_dir()]

	def include_dirs(self) -> List[str]:
		return [str(p) for p in self.roots()]

	def list_modules(self, scope: str) -> ModuleList:
		root = self.scope_dir(scope)
		if not root.is_dir():
			logger.debug("No module root for scope %s at %s", scope, root)
			return ModuleList(scope=scope, modules=[])
		names = self._names(root, walk_files(root))
		return ModuleList(scope=scope, modules=sorted(names))

	def lookup_module(self, name: str) -> ModuleLookupResult:
		if not is_module_name(name):
			return ModuleNotFound(name=name)
		relative = module_to_file(name, self.extension)
		for root in self.roots():
			candidate = root / relative
			if candidate.is_file():
				return ModuleFound(name=name, content=candidate.read_text(encoding="utf-8"))
		return ModuleNotFound(name=name)

	def _names(self, root: Path, files: Iterable[Path]) -> List[str]:
		out: List[str] = []
		for f in files:
			if not f.name.endswith(self.extension):
				continue
			out.append(file_to_module(f.relative_to(root).as_posix(), self.extension))
		return out

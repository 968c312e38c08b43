"""
The only code that knows how to launch the external toolchain.

`ghc` type checks (no code generation, warnings as errors) and `fay` compiles to JavaScript.
Both are treated as opaque functions from a source file to an exit status plus text.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

TYPECHECK_FLAGS = ["-fno-code", "-Wall", "-Werror"]
COMPILE_FLAGS = ["--no-ghc"]

# `<file>:<line>:<column>` at the start of a line marks a reported diagnostic
_REPORT_RE = re.compile(r"^[^\s:][^:\n]*:\d+:\d+", re.MULTILINE)


class ToolchainStatus(Enum):
	OK = auto()
	FAILED = auto()
	UNAVAILABLE = auto()


@dataclass
class ToolchainResult:
	status: ToolchainStatus
	output: str

	@property
	def ok(self) -> bool:
		return self.status is ToolchainStatus.OK


def has_reports(output: str) -> bool:
	return bool(_REPORT_RE.search(output or ""))


class Toolchain:
	def __init__(
		self,
		*,
		typecheck_command: str = "ghc",
		compile_command: str = "fay",
		include_dirs: Sequence[str] = ("include",),
		package_flags: Sequence[str] = (),
		timeout: Optional[float] = 60.0,
		runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
	) -> None:
		self.typecheck_command = typecheck_command
		self.compile_command = compile_command
		self.include_dirs = list(include_dirs)
		self.package_flags = list(package_flags)
		self.timeout = timeout
		self._runner = runner

	def typecheck_argv(self, source_path: Path | str, include_dirs: Sequence[str] = ()) -> List[str]:
		return (
			[self.typecheck_command]
			+ self.package_flags
			+ TYPECHECK_FLAGS
			+ [str(source_path)]
			+ ["-i" + d for d in self.include_dirs]
			+ ["-i" + d for d in include_dirs]
		)

	def compile_argv(self, source_path: Path | str, out_path: Path | str) -> List[str]:
		argv = [self.compile_command] + COMPILE_FLAGS
		if self.include_dirs:
			argv.append("--include=" + ",".join(self.include_dirs))
		return argv + ["-o", str(out_path), str(source_path)]

	def typecheck(self, source_path: Path | str, include_dirs: Sequence[str] = ()) -> ToolchainResult:
		result = self._run(self.typecheck_argv(source_path, include_dirs))
		if result.ok and has_reports(result.output):
			return ToolchainResult(ToolchainStatus.FAILED, result.output)
		return result

	def compile(self, source_path: Path | str, out_path: Path | str) -> ToolchainResult:
		result = self._run(self.compile_argv(source_path, out_path))
		if result.ok and not Path(out_path).exists():
			output = result.output or f"{self.compile_command} produced no output file"
			return ToolchainResult(ToolchainStatus.FAILED, output)
		return result

	def _run(self, argv: List[str]) -> ToolchainResult:
		logger.info("Running %s", " ".join(argv))
		try:
			proc = self._runner(
				argv,
				stdin=subprocess.DEVNULL,
				stdout=subprocess.PIPE,
				stderr=subprocess.STDOUT,
				text=True,
				errors="replace",
				timeout=self.timeout,
				check=False,
			)
		except subprocess.TimeoutExpired:
			logger.warning("%s timed out after %ss", argv[0], self.timeout)
			return ToolchainResult(ToolchainStatus.UNAVAILABLE, f"{argv[0]} timed out after {self.timeout}s")
		except OSError as exc:
			logger.warning("Could not launch %s: %s", argv[0], exc)
			return ToolchainResult(ToolchainStatus.UNAVAILABLE, f"Could not launch {argv[0]}: {exc}")

		output = proc.stdout or ""
		if proc.returncode != 0:
			logger.info("%s exited with status %s", argv[0], proc.returncode)
			return ToolchainResult(ToolchainStatus.FAILED, output)
		return ToolchainResult(ToolchainStatus.OK, output)

"""Run the playground server, or check/compile a single file from the command line."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from playground.config import settings
from playground.dispatcher import Dispatcher, build_dispatcher
from playground.logging import setup_logging
from playground.types import CheckFailed, CheckOk, CompileFailed, CompileOk, ToolchainUnavailable

USAGE = "Usage: python -m playground.cli [--check <file> | --compile <file>]"


def check_file(dispatcher: Dispatcher, source: str) -> int:
	result = dispatcher.check_module(source)
	if isinstance(result, CheckOk):
		print(f"Check OK: {result.id}")
		return 0
	if isinstance(result, CheckFailed):
		for diagnostic in result.diagnostics:
			print(f"[{diagnostic.severity.name}] line {diagnostic.line}: {diagnostic.text}")
		if not result.diagnostics:
			print(result.raw_output)
		return 1
	print(f"Toolchain unavailable: {result.reason}")
	return 2


def compile_file(dispatcher: Dispatcher, source: str) -> int:
	result = dispatcher.compile_module(source)
	if isinstance(result, CompileOk):
		print(f"Compile OK: {dispatcher.artifacts.generated_path(result.id, '.html')}")
		return 0
	if isinstance(result, CompileFailed):
		print(result.raw_output)
		return 1
	assert isinstance(result, ToolchainUnavailable)
	print(f"Toolchain unavailable: {result.reason}")
	return 2


def serve() -> None:
	import uvicorn

	uvicorn.run("playground.main:app", host="0.0.0.0", port=settings.PORT)


def main(argv: Optional[List[str]] = None) -> int:
	args = sys.argv[1:] if argv is None else argv
	if not args:
		serve()
		return 0
	if len(args) != 2 or args[0] not in ("--check", "--compile"):
		print(USAGE)
		return 1

	setup_logging("WARNING")
	source = Path(args[1]).read_text(encoding="utf-8")
	dispatcher = build_dispatcher(settings)
	if args[0] == "--check":
		return check_file(dispatcher, source)
	return compile_file(dispatcher, source)


if __name__ == "__main__":
	sys.exit(main())

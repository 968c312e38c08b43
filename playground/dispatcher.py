from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional, Sequence, Tuple, Union, overload

from playground.artifacts import ArtifactManager
from playground.diagnostics import parse_messages
from playground.modules import ModuleResolver
from playground.preview import PreviewEmitter
from playground.toolchain import Toolchain, ToolchainStatus
from playground.types import (
	CheckFailed,
	CheckModule,
	CheckOk,
	CheckResult,
	CompileFailed,
	CompileModule,
	CompileOk,
	CompileResult,
	GetModule,
	ListModules,
	ModuleList,
	ModuleLookupResult,
	Response,
	ToolchainUnavailable,
)

logger = logging.getLogger(__name__)


def format_for_check(contents: str, prelude: Sequence[str]) -> Tuple[int, str]:
	"""Prepend the prelude lines and return how many lines were added."""
	header = "".join(line + "\n" for line in prelude)
	return len(prelude), header + contents


def write_source(path: Path, source: str) -> Optional[str]:
	"""Write `source` as UTF-8; return a reason instead of raising when it cannot be encoded."""
	try:
		path.write_text(source, encoding="utf-8")
	except UnicodeEncodeError as exc:
		# Never echo the offending character; the reply is UTF-8 too.
		return f"Source is not valid Unicode text at position {exc.start}: {exc.reason}"
	return None


def _unhandled(command: NoReturn) -> NoReturn:
	raise TypeError(f"Unhandled command: {command!r}")


class Dispatcher:
	def __init__(
		self,
		resolver: ModuleResolver,
		artifacts: ArtifactManager,
		toolchain: Toolchain,
		preview: PreviewEmitter,
		*,
		prelude_lines: Sequence[str] = (),
	) -> None:
		self.resolver = resolver
		self.artifacts = artifacts
		self.toolchain = toolchain
		self.preview = preview
		self.prelude_lines = list(prelude_lines)

	@overload
	def dispatch(self, command: ListModules) -> ModuleList: ...

	@overload
	def dispatch(self, command: GetModule) -> ModuleLookupResult: ...

	@overload
	def dispatch(self, command: CheckModule) -> CheckResult: ...

	@overload
	def dispatch(self, command: CompileModule) -> CompileResult: ...

	def dispatch(self, command: Union[ListModules, GetModule, CheckModule, CompileModule]) -> Response:
		if isinstance(command, ListModules):
			return self.handle_list(command)
		if isinstance(command, GetModule):
			return self.handle_get(command)
		if isinstance(command, CheckModule):
			return self.handle_check(command)
		if isinstance(command, CompileModule):
			return self.handle_compile(command)
		_unhandled(command)

	# One handler per command; each return type is the command's response type.

	def handle_list(self, command: ListModules) -> ModuleList:
		return self.list_modules(command.scope)

	def handle_get(self, command: GetModule) -> ModuleLookupResult:
		return self.get_module(command.name)

	def handle_check(self, command: CheckModule) -> CheckResult:
		return self.check_module(command.content)

	def handle_compile(self, command: CompileModule) -> CompileResult:
		return self.compile_module(command.content)

	def list_modules(self, scope: str) -> ModuleList:
		return self.resolver.list_modules(scope)

	def get_module(self, name: str) -> ModuleLookupResult:
		return self.resolver.lookup_module(name)

	def check_module(self, content: str) -> CheckResult:
		artifact = self.artifacts.new_artifact(self.resolver.extension)
		self.artifacts.schedule_delete(artifact.path)
		skip, source = format_for_check(content, self.prelude_lines)
		try:
			error = write_source(artifact.path, source)
			if error is not None:
				logger.info("Check %s rejected: %s", artifact.id, error)
				return CheckFailed(diagnostics=[], raw_output=error)
			result = self.toolchain.typecheck(artifact.path, self.resolver.include_dirs())
		finally:
			self.artifacts.delete_now(artifact.path)

		if result.status is ToolchainStatus.UNAVAILABLE:
			return ToolchainUnavailable(reason=result.output)
		if result.ok:
			logger.info("Check %s ok", artifact.id)
			return CheckOk(id=artifact.id)
		diagnostics = parse_messages(result.output, skip)
		logger.info("Check %s failed with %d diagnostics", artifact.id, len(diagnostics))
		return CheckFailed(diagnostics=diagnostics, raw_output=result.output)

	def compile_module(self, content: str) -> CompileResult:
		artifact = self.artifacts.new_artifact(self.resolver.extension)
		self.artifacts.schedule_delete(artifact.path)
		self.artifacts.ensure_dirs()
		out_path = self.artifacts.generated_path(artifact.id, ".js")
		try:
			error = write_source(artifact.path, content)
			if error is not None:
				logger.info("Compile %s rejected: %s", artifact.id, error)
				return CompileFailed(raw_output=error)
			result = self.toolchain.compile(artifact.path, out_path)
		finally:
			self.artifacts.delete_now(artifact.path)
			self.artifacts.schedule_delete(out_path)

		if result.status is ToolchainStatus.UNAVAILABLE:
			return ToolchainUnavailable(reason=result.output)
		if not result.ok:
			logger.info("Compile %s failed", artifact.id)
			return CompileFailed(raw_output=result.output)
		self.preview.emit_preview(artifact.id, out_path.name)
		logger.info("Compile %s ok", artifact.id)
		return CompileOk(id=artifact.id)


def build_dispatcher(settings) -> Dispatcher:
	resolver = ModuleResolver(settings.MODULES_DIR, settings.MODULE_SCOPES, settings.SOURCE_EXTENSION)
	artifacts = ArtifactManager(
		settings.GEN_DIR,
		ttl=settings.ARTIFACT_TTL,
		retry_delay=settings.ID_RETRY_DELAY,
		max_attempts=settings.ID_MAX_ATTEMPTS,
	)
	toolchain = Toolchain(
		typecheck_command=settings.TYPECHECK_COMMAND,
		compile_command=settings.COMPILE_COMMAND,
		include_dirs=settings.INCLUDE_DIRS,
		package_flags=settings.GHC_PACKAGE_FLAGS,
		timeout=settings.TOOLCHAIN_TIMEOUT,
	)
	preview = PreviewEmitter(artifacts, settings.PREVIEW_STYLESHEETS, settings.PREVIEW_SCRIPTS)
	return Dispatcher(resolver, artifacts, toolchain, preview, prelude_lines=settings.PRELUDE_LINES)

"""Commands, responses and the records passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Annotated, ClassVar, List, Literal, Tuple, Type, Union

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Diagnostics and artifacts


class Severity(Enum):
	WARNING = auto()
	ERROR = auto()


@dataclass
class Diagnostic:
	severity: Severity
	line: int
	text: str


@dataclass(frozen=True)
class Artifact:
	id: str
	path: Path
	created_at: datetime


# ---------------------------------------------------------------------------
# Responses


@dataclass
class ModuleList:
	scope: str
	modules: List[str] = field(default_factory=list)


@dataclass
class ModuleFound:
	name: str
	content: str


@dataclass
class ModuleNotFound:
	name: str


@dataclass
class CheckOk:
	id: str


@dataclass
class CheckFailed:
	diagnostics: List[Diagnostic]
	raw_output: str


@dataclass
class CompileOk:
	id: str


@dataclass
class CompileFailed:
	raw_output: str


@dataclass
class ToolchainUnavailable:
	"""The toolchain could not be run at all (missing binary, permissions, timeout)."""

	reason: str


ModuleLookupResult = Union[ModuleFound, ModuleNotFound]
CheckResult = Union[CheckOk, CheckFailed, ToolchainUnavailable]
CompileResult = Union[CompileOk, CompileFailed, ToolchainUnavailable]
Response = Union[ModuleList, ModuleFound, ModuleNotFound, CheckOk, CheckFailed, CompileOk, CompileFailed, ToolchainUnavailable]


# ---------------------------------------------------------------------------
# Commands

Scope = Literal["library", "project", "global"]


class ListModules(BaseModel):
	command: Literal["list_modules"] = "list_modules"
	scope: Scope

	responses: ClassVar[Tuple[Type, ...]] = (ModuleList,)


class GetModule(BaseModel):
	command: Literal["get_module"] = "get_module"
	name: str

	responses: ClassVar[Tuple[Type, ...]] = (ModuleFound, ModuleNotFound)


class CheckModule(BaseModel):
	command: Literal["check_module"] = "check_module"
	content: str

	responses: ClassVar[Tuple[Type, ...]] = (CheckOk, CheckFailed, ToolchainUnavailable)


class CompileModule(BaseModel):
	command: Literal["compile_module"] = "compile_module"
	content: str

	responses: ClassVar[Tuple[Type, ...]] = (CompileOk, CompileFailed, ToolchainUnavailable)


Command = Annotated[
	Union[ListModules, GetModule, CheckModule, CompileModule],
	Field(discriminator="command"),
]

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

# Settings are read at import time; keep generated files out of the working tree.
_TMP = Path(tempfile.mkdtemp(prefix="playground-tests-"))
os.environ["STATIC_DIR"] = str(_TMP / "static")
os.environ["GEN_DIR"] = str(_TMP / "static" / "gen")
os.environ["MODULES_DIR"] = str(_TMP / "modules")

from playground.artifacts import ArtifactManager  # noqa: E402
from playground.dispatcher import Dispatcher  # noqa: E402
from playground.modules import ModuleResolver  # noqa: E402
from playground.preview import PreviewEmitter  # noqa: E402
from playground.toolchain import ToolchainResult, ToolchainStatus  # noqa: E402

MODULE_FILES = {
	"library/Data/Ref.hs": "module Data.Ref where\n",
	"library/Prelude/Extra.hs": "module Prelude.Extra where\n",
	"library/notes.txt": "not a module\n",
	"library/.../Secret.hs": "module Secret where\n",
	"project/Demo/Calc.hs": "module Demo.Calc where\n\nmain = return ()\n",
	"project/Main.hs": "module Main where\n",
	# shadowed by the library copy
	"project/Data/Ref.hs": "module Data.Ref where -- project\n",
}


@pytest.fixture
def modules_dir(tmp_path: Path) -> Path:
	root = tmp_path / "modules"
	for rel, content in MODULE_FILES.items():
		path = root / rel
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(content, encoding="utf-8")
	return root


@pytest.fixture
def resolver(modules_dir: Path) -> ModuleResolver:
	return ModuleResolver(modules_dir, ["library", "project", "global"])


@pytest.fixture
def artifacts(tmp_path: Path) -> ArtifactManager:
	scratch = tmp_path / "tmp"
	scratch.mkdir()
	return ArtifactManager(tmp_path / "gen", ttl=5.0, temp_dir=scratch, retry_delay=0.001)


def compiled_text(source: str) -> str:
	"""What the fake compiler emits for `source`; distinct sources give distinct scripts."""
	return "// compiled from:\n" + "\n".join("// " + line for line in source.splitlines()) + "\n"


class FakeToolchain:
	"""Stands in for ghc/fay; records what it was asked to do."""

	def __init__(self, status: ToolchainStatus = ToolchainStatus.OK, output: str = "", write_output: bool = True) -> None:
		self.status = status
		self.output = output
		self.write_output = write_output
		self.typechecked: List[Tuple[Path, List[str], str]] = []
		self.compiled: List[Tuple[Path, Path, str]] = []

	def typecheck(self, source_path, include_dirs: Sequence[str] = ()) -> ToolchainResult:
		source_path = Path(source_path)
		self.typechecked.append((source_path, list(include_dirs), source_path.read_text(encoding="utf-8")))
		return ToolchainResult(self.status, self.output)

	def compile(self, source_path, out_path) -> ToolchainResult:
		source_path, out_path = Path(source_path), Path(out_path)
		self.compiled.append((source_path, out_path, source_path.read_text(encoding="utf-8")))
		if self.status is ToolchainStatus.OK and self.write_output:
			out_path.write_text(compiled_text(source_path.read_text(encoding="utf-8")), encoding="utf-8")
		return ToolchainResult(self.status, self.output)


@pytest.fixture
def fake_toolchain() -> FakeToolchain:
	return FakeToolchain()


def make_dispatcher(
	resolver: ModuleResolver,
	artifacts: ArtifactManager,
	toolchain: FakeToolchain,
	prelude: Optional[Sequence[str]] = None,
) -> Dispatcher:
	preview = PreviewEmitter(artifacts, ["/css/gen.css"], ["/js/jquery.js", "/js/gen.js"])
	return Dispatcher(resolver, artifacts, toolchain, preview, prelude_lines=prelude or ())  # type: ignore[arg-type]


@pytest.fixture
def dispatcher(resolver, artifacts, fake_toolchain) -> Dispatcher:
	return make_dispatcher(resolver, artifacts, fake_toolchain)

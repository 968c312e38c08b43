from __future__ import annotations

from conftest import FakeToolchain, make_dispatcher

from playground import cli
from playground.toolchain import ToolchainStatus


def test_usage_on_bad_arguments(capsys):
	assert cli.main(["--frobnicate"]) == 1
	assert "Usage" in capsys.readouterr().out


def test_check_file_prints_diagnostics(capsys, resolver, artifacts):
	toolchain = FakeToolchain(ToolchainStatus.FAILED, "/tmp/x.hs:4:1: Warning: Defined but not used: `z'")
	code = cli.check_file(make_dispatcher(resolver, artifacts, toolchain), "z = 1")
	assert code == 1
	assert capsys.readouterr().out.strip() == "[WARNING] line 4: Defined but not used: `z'"


def test_check_file_ok(capsys, dispatcher):
	assert cli.check_file(dispatcher, "main = return ()") == 0
	assert capsys.readouterr().out.startswith("Check OK: ")


def test_compile_file_unavailable(capsys, resolver, artifacts):
	toolchain = FakeToolchain(ToolchainStatus.UNAVAILABLE, "Could not launch fay")
	assert cli.compile_file(make_dispatcher(resolver, artifacts, toolchain), "main = 1") == 2
	assert "Could not launch fay" in capsys.readouterr().out


def test_main_checks_file_with_configured_dispatcher(monkeypatch, tmp_path, dispatcher, capsys):
	source = tmp_path / "Main.hs"
	source.write_text("main = return ()", encoding="utf-8")
	monkeypatch.setattr(cli, "build_dispatcher", lambda settings: dispatcher)
	assert cli.main(["--check", str(source)]) == 0
	assert "Check OK" in capsys.readouterr().out

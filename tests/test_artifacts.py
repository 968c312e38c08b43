from __future__ import annotations

import time
import uuid

import pytest

from playground.artifacts import ArtifactManager, IdExhausted, IdUnavailable


def _wait_gone(path, timeout: float = 3.0) -> bool:
	deadline = time.monotonic() + timeout
	while time.monotonic() < deadline:
		if not path.exists():
			return True
		time.sleep(0.02)
	return not path.exists()


def test_new_artifact_exists_and_is_unique(artifacts):
	a = artifacts.new_artifact(".hs")
	b = artifacts.new_artifact(".hs")
	assert a.path.exists() and b.path.exists()
	assert a.id != b.id
	assert a.path.name == f"{a.id}.hs"
	assert a.path.parent == artifacts.temp_dir


def test_scheduled_delete_removes_after_ttl(tmp_path):
	manager = ArtifactManager(tmp_path / "gen", ttl=0.1, temp_dir=tmp_path)
	artifact = manager.new_artifact(".hs")
	manager.schedule_delete(artifact.path)
	assert artifact.path.exists()
	assert _wait_gone(artifact.path)


def test_delete_now_is_idempotent(artifacts):
	artifact = artifacts.new_artifact(".js")
	artifacts.delete_now(artifact.path)
	artifacts.delete_now(artifact.path)
	assert not artifact.path.exists()


def test_early_delete_makes_scheduled_delete_a_no_op(artifacts):
	artifact = artifacts.new_artifact(".hs")
	timer = artifacts.schedule_delete(artifact.path, delay=0.05)
	artifacts.delete_now(artifact.path)
	timer.join(timeout=2)
	assert not timer.is_alive()
	assert not artifact.path.exists()


def test_generated_path_keyed_by_id(artifacts):
	assert artifacts.generated_path("abc", ".html") == artifacts.gen_dir / "abc.html"


def test_id_source_exhaustion_is_retried(tmp_path):
	answers = [None, None, IdUnavailable(), uuid.UUID(int=42)]
	calls = []

	def flaky():
		calls.append(1)
		answer = answers.pop(0)
		if isinstance(answer, Exception):
			raise answer
		return answer

	manager = ArtifactManager(tmp_path, temp_dir=tmp_path, id_source=flaky, retry_delay=0.001)
	assert manager.new_id() == str(uuid.UUID(int=42))
	assert len(calls) == 4


def test_sustained_exhaustion_is_reported(tmp_path):
	manager = ArtifactManager(tmp_path, temp_dir=tmp_path, id_source=lambda: None, retry_delay=0.0, max_attempts=5)
	with pytest.raises(IdExhausted) as info:
		manager.new_id()
	assert info.value.attempts == 5

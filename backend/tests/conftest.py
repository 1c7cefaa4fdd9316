import sys

import pytest

from execution import sandbox


def local_command(job, workdir):
    """Run the job's Python source with the test interpreter instead of docker"""
    return [sys.executable, str(workdir / job.profile.filename)]


@pytest.fixture
def workspace_root(tmp_path, monkeypatch):
    root = tmp_path / "jobs"
    monkeypatch.setattr(sandbox, "WORKSPACE_ROOT", root)
    return root


@pytest.fixture
def removed_containers(monkeypatch):
    removed = []

    async def fake_remove_container(name):
        removed.append(name)

    monkeypatch.setattr(sandbox, "remove_container", fake_remove_container)
    return removed


@pytest.fixture
def local_sandbox(workspace_root, removed_containers, monkeypatch):
    """Sandbox launcher that runs Python sources directly on the host"""
    monkeypatch.setattr(sandbox, "build_docker_command", local_command)
    return workspace_root

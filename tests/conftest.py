"""
Shared fixtures: a scripted stand-in for the docker executable.
"""
import json

import pytest

from dockerton.RUNNERS.docker_client import DockerClient
from dockerton.UTILS.config import DockertonSettings

IMAGE_ID = "sha256:4f1c2d3e"


class FakeRunner:
    """Replays scripted output for one docker operation."""

    def __init__(self, name, docker):
        self.name = name
        self.docker = docker

    def run(self, command, on_stdout=None, on_stderr=None, working_dir=None):
        self.docker.calls.append((self.name, command))
        exit_code, stdout, stderr = self.docker.responses.get(self.name, (0, [], []))
        for chunk in stdout:
            if on_stdout:
                on_stdout(chunk)
        for chunk in stderr:
            if on_stderr:
                on_stderr(chunk)
        return exit_code


class FakeDocker:
    """Records every command and answers with scripted responses."""

    def __init__(self):
        self.calls = []
        self.responses = {
            "build_image": (0, ["Step 1/1 : FROM scratch\n", "Successfully built 4f1c2d3e\n"], []),
            "run_image": (0, ["Hello from Docker!\n"], []),
            "inspect": (0, [json.dumps([{"Id": IMAGE_ID, "RepoTags": ["test:latest"]}])], []),
        }

    def runner(self, name):
        return FakeRunner(name, self)

    def respond(self, name, exit_code=0, stdout=(), stderr=()):
        self.responses[name] = (exit_code, list(stdout), list(stderr))

    def commands(self, name):
        return [command for call_name, command in self.calls if call_name == name]


@pytest.fixture
def fake_docker():
    return FakeDocker()


@pytest.fixture
def client(fake_docker):
    return DockerClient(binary="docker", runner_factory=fake_docker.runner)


@pytest.fixture
def settings():
    return DockertonSettings()

"""
Unit tests for building and running images through the builder.
"""
import pytest

from dockerton import (
    BuildError,
    Dockerton,
    InspectError,
    ParseError,
    PreconditionError,
    RunError,
)
from dockerton.MODELS.image_details import ImageDetails


@pytest.fixture
def builder(tmp_path, monkeypatch, client, settings):
    monkeypatch.chdir(tmp_path)
    return Dockerton("test-tag", client=client, settings=settings).from_("scratch").cmd("echo hi")


class TestBuildImage:
    """Tests for Dockerton.build_image."""

    def test_requires_serialize(self, builder, fake_docker):
        with pytest.raises(PreconditionError, match="serialize"):
            builder.build_image()
        assert fake_docker.calls == []

    def test_builds_and_inspects(self, builder, fake_docker):
        builder.serialize()
        details = builder.build_image(stdout=lambda chunk: None)
        assert isinstance(details, ImageDetails)
        assert details.id == "sha256:4f1c2d3e"
        assert fake_docker.commands("build_image") == [["docker", "build", "-t", "test-tag", "."]]
        assert fake_docker.commands("inspect") == [["docker", "inspect", "test-tag"]]

    def test_default_stdout_forwarding(self, builder, capsys):
        builder.serialize()
        builder.build_image()
        captured = capsys.readouterr()
        assert "Successfully built" in captured.out

    def test_default_stderr_forwarding(self, builder, fake_docker, capsys):
        fake_docker.respond("build_image", exit_code=1, stderr=["pull access denied\n"])
        builder.serialize()
        with pytest.raises(BuildError):
            builder.build_image()
        assert "pull access denied" in capsys.readouterr().err

    def test_custom_stdout(self, builder, capsys):
        chunks = []
        builder.serialize()
        builder.build_image(stdout=chunks.append)
        assert chunks == ["Step 1/1 : FROM scratch\n", "Successfully built 4f1c2d3e\n"]
        assert capsys.readouterr().out == ""

    def test_custom_stderr(self, builder, fake_docker):
        errors = []
        fake_docker.respond("build_image", exit_code=1, stderr=["no such image\n"])
        builder.serialize()
        with pytest.raises(BuildError):
            builder.build_image(stderr=errors.append)
        assert errors == ["no such image\n"]

    def test_build_error_carries_exit_code(self, builder, fake_docker):
        fake_docker.respond("build_image", exit_code=125)
        builder.serialize()
        with pytest.raises(BuildError) as excinfo:
            builder.build_image()
        assert excinfo.value.exit_code == 125
        assert fake_docker.commands("inspect") == []

    def test_custom_dir_and_args(self, builder, fake_docker):
        builder.serialize(output_file="Dockerfile.dev")
        builder.build_image(dir="context", args={"-f": "Dockerfile.dev", "--memory": 512})
        assert fake_docker.commands("build_image") == [
            ["docker", "build", "-t", "test-tag", "-f", "Dockerfile.dev", "--memory", "512", "context"]
        ]

    def test_inspect_failure(self, builder, fake_docker):
        fake_docker.respond("inspect", exit_code=1)
        builder.serialize()
        with pytest.raises(InspectError):
            builder.build_image()

    def test_malformed_inspect_output(self, builder, fake_docker):
        fake_docker.respond("inspect", stdout=["not json"])
        builder.serialize()
        with pytest.raises(ParseError):
            builder.build_image()


class TestRunImage:
    """Tests for Dockerton.run_image."""

    def test_runs_tagged_image(self, builder, fake_docker):
        assert builder.run_image(stdout=lambda chunk: None) is None
        assert fake_docker.commands("run_image") == [["docker", "run", "test-tag"]]

    def test_default_stdout_forwarding(self, builder, capsys):
        builder.run_image()
        assert "Hello from Docker!" in capsys.readouterr().out

    def test_custom_callbacks(self, builder, fake_docker):
        out, err = [], []
        fake_docker.respond("run_image", exit_code=127,
                            stdout=["starting\n"], stderr=["exec: echo: not found\n"])
        with pytest.raises(RunError) as excinfo:
            builder.run_image(stdout=out.append, stderr=err.append)
        assert excinfo.value.exit_code == 127
        assert out == ["starting\n"]
        assert err == ["exec: echo: not found\n"]

    def test_run_args(self, builder, fake_docker):
        builder.run_image(args={"--name": "web"}, stdout=lambda chunk: None)
        assert fake_docker.commands("run_image") == [["docker", "run", "--name", "web", "test-tag"]]


def test_full_sequence(builder, fake_docker):
    builder.serialize()
    builder.build_image(stdout=lambda chunk: None)
    builder.run_image(stdout=lambda chunk: None)
    assert [name for name, _ in fake_docker.calls] == ["build_image", "inspect", "run_image"]


class TestDockerfileLocation:
    """Tests for pointing docker build at the written Dockerfile."""

    def test_custom_output_file_is_passed(self, builder, fake_docker):
        builder.serialize(output_file="Dockerfile.dev")
        builder.build_image(stdout=lambda chunk: None)
        assert fake_docker.commands("build_image") == [
            ["docker", "build", "-t", "test-tag", "-f", "Dockerfile.dev", "."]
        ]

    def test_dockerfile_inside_context_dir(self, builder, fake_docker, tmp_path):
        (tmp_path / "ctx").mkdir()
        builder.serialize(output_file="ctx/Dockerfile")
        builder.build_image(dir="ctx", stdout=lambda chunk: None)
        assert fake_docker.commands("build_image") == [["docker", "build", "-t", "test-tag", "ctx"]]

    def test_default_output_with_other_context(self, builder, fake_docker):
        builder.serialize()
        builder.build_image(dir="ctx", args={"--pull": "always"}, stdout=lambda chunk: None)
        assert fake_docker.commands("build_image") == [
            ["docker", "build", "-t", "test-tag", "-f", "./Dockerfile", "--pull", "always", "ctx"]
        ]

    def test_explicit_file_flag_wins(self, builder, fake_docker):
        builder.serialize(output_file="Dockerfile.dev")
        builder.build_image(args={"--file": "Other.Dockerfile"}, stdout=lambda chunk: None)
        assert fake_docker.commands("build_image") == [
            ["docker", "build", "-t", "test-tag", "--file", "Other.Dockerfile", "."]
        ]

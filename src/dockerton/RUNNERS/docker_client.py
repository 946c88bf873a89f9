# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Thin wrapper around the docker CLI: build, run and inspect.
"""
import json
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from ..errors import BuildError, InspectError, ParseError, RunError
from ..MODELS.image_details import ImageDetails
from ..UTILS.command_utils import construct_args_from_map
from ..UTILS.config import get_settings
from ..UTILS.debug import debug
from .process_runner import OutputCallback, ProcessRunner


class DockerClient:
    """
    Invokes the docker executable through a ProcessRunner.
    """
    def __init__(self,
                 binary: Optional[str] = None,
                 runner_factory: Callable[[str], ProcessRunner] = ProcessRunner):
        """
        :param binary: The docker executable; defaults to the configured one.
        :param runner_factory: Builds a runner for a given operation name.
        """
        self.binary = binary or get_settings().docker_binary
        self.runner_factory = runner_factory

    def build_command(self, tag: str, context_dir: Optional[str] = None,
                      args: Optional[Dict[str, str]] = None) -> List[str]:
        """Returns the `docker build` command line."""
        return ([self.binary, "build", "-t", tag]
                + construct_args_from_map(args)
                + [context_dir or "."])

    def run_command(self, tag: str, args: Optional[Dict[str, str]] = None) -> List[str]:
        """Returns the `docker run` command line."""
        return [self.binary, "run"] + construct_args_from_map(args) + [tag]

    def build(self,
              tag: str,
              context_dir: Optional[str] = None,
              args: Optional[Dict[str, str]] = None,
              on_stdout: Optional[OutputCallback] = None,
              on_stderr: Optional[OutputCallback] = None) -> None:
        """
        Builds an image from the Dockerfile in the build context.

        Args:
            tag (str): Name given to the image.
            context_dir (Optional[str]): Build context, defaults to ".".
            args (Optional[Dict[str, str]]): Extra flag/value pairs.
            on_stdout (Optional[OutputCallback]): Receives stdout chunks.
            on_stderr (Optional[OutputCallback]): Receives stderr chunks.

        Raises:
            BuildError: If docker exits with a non-zero code.
        """
        runner = self.runner_factory("build_image")
        exit_code = runner.run(self.build_command(tag, context_dir, args),
                               on_stdout=on_stdout, on_stderr=on_stderr)
        if exit_code != 0:
            raise BuildError(exit_code)

    def run(self,
            tag: str,
            args: Optional[Dict[str, str]] = None,
            on_stdout: Optional[OutputCallback] = None,
            on_stderr: Optional[OutputCallback] = None) -> None:
        """
        Runs a container from the tagged image until it exits.

        Raises:
            RunError: If docker exits with a non-zero code.
        """
        runner = self.runner_factory("run_image")
        exit_code = runner.run(self.run_command(tag, args),
                               on_stdout=on_stdout, on_stderr=on_stderr)
        if exit_code != 0:
            raise RunError(exit_code)

    def inspect(self, image: str) -> ImageDetails:
        """
        Executes `docker inspect <image>` and returns the first result.

        :param image: Image name or tag.
        :return: The parsed image details.
        :raises InspectError: If docker exits with a non-zero code.
        :raises ParseError: If the output is not a non-empty JSON list of images.
        """
        output: List[str] = []
        runner = self.runner_factory("inspect")
        exit_code = runner.run([self.binary, "inspect", image], on_stdout=output.append)
        if exit_code != 0:
            raise InspectError(exit_code, f"failed to inspect image, return code: {exit_code}")
        return self.parse_inspect_output("".join(output))

    @staticmethod
    def parse_inspect_output(raw: str) -> ImageDetails:
        """
        Parses raw `docker inspect` output.

        :param raw: The JSON text written by docker.
        :return: Details of the first image listed.
        :raises ParseError: On invalid JSON, an empty list or unexpected fields.
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(f"docker inspect returned invalid JSON: {e}") from e

        if not isinstance(data, list) or not data:
            raise ParseError("docker inspect returned no image data")

        debug("inspect: parsed %d image record(s)", len(data))
        try:
            return ImageDetails.model_validate(data[0])
        except ValidationError as e:
            raise ParseError(f"unexpected docker inspect output: {e}") from e

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
Exceptions raised by the Dockerfile builder and the docker client.
"""
from typing import Optional


class DockertonError(Exception):
    """Base class for every error raised by dockerton."""


class WriteError(DockertonError):
    """The generated Dockerfile could not be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to write Dockerfile to {path}: {reason}")


class PreconditionError(DockertonError):
    """An operation was invoked before the step it depends on."""


class _ExitCodeError(DockertonError):
    """Error carrying the exit code of a docker subprocess."""

    action = "docker"

    def __init__(self, exit_code: int, message: Optional[str] = None):
        self.exit_code = exit_code
        super().__init__(message or f"{self.action} exited with bad code: {exit_code}")


class BuildError(_ExitCodeError):
    """`docker build` exited with a non-zero code."""

    action = "build_image"


class RunError(_ExitCodeError):
    """`docker run` exited with a non-zero code."""

    action = "run_image"


class InspectError(_ExitCodeError):
    """`docker inspect` exited with a non-zero code."""

    action = "inspect"


class ParseError(DockertonError):
    """Output of `docker inspect` could not be interpreted."""


class DefinitionError(DockertonError):
    """An image definition file is malformed."""


class ProcessStartError(DockertonError):
    """An executable such as docker could not be started."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        super().__init__(f"Failed to start {executable}: {reason}")

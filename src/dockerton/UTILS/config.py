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
Settings for dockerton, read from the environment and an optional .env file.
"""
import os
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel

DEFAULT_OUTPUT_FILE = "./Dockerfile"
DEFAULT_DOCKER_BINARY = "docker"

_FALSE_VALUES = {"", "0", "false", "no", "off"}


def _is_enabled(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() not in _FALSE_VALUES


class DockertonSettings(BaseModel):
    """
    Process-wide configuration.

    debug: enables verbose tracing of spawned commands and file writes.
    docker_binary: executable used for build, run and inspect.
    output_file: default location of the generated Dockerfile.
    """
    debug: bool = False
    docker_binary: str = DEFAULT_DOCKER_BINARY
    output_file: str = DEFAULT_OUTPUT_FILE

    @classmethod
    def from_environment(cls,
                         environ: Optional[Mapping[str, str]] = None,
                         dotenv_path: Optional[str] = None) -> "DockertonSettings":
        """
        Builds settings from environment variables.

        When no explicit mapping is given, a .env file (if any) is loaded
        first; variables already present in the environment win.

        :param environ: Mapping to read instead of os.environ.
        :param dotenv_path: Explicit .env file to load.
        :return: The resolved settings.
        """
        if environ is None:
            load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True), override=False)
            environ = os.environ

        return cls(
            debug=_is_enabled(environ.get("DEBUG_DOCKERTON")),
            docker_binary=environ.get("DOCKERTON_DOCKER_BINARY") or DEFAULT_DOCKER_BINARY,
            output_file=environ.get("DOCKERTON_OUTPUT_FILE") or DEFAULT_OUTPUT_FILE,
        )


_settings: Optional[DockertonSettings] = None


def get_settings() -> DockertonSettings:
    """Returns the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = DockertonSettings.from_environment()
    return _settings

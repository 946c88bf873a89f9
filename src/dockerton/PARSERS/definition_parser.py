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
Parsers for YAML image definition files.
"""
import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from ..BUILDERS.dockerfile_builder import Dockerton
from ..errors import DefinitionError
from ..MODELS.image_definition import ImageDefinition
from ..UTILS.string_interpolation import EnvironmentInterpolator

# Instruction name -> (builder method, positional parameter names, number required)
INSTRUCTIONS = {
    "from": ("from_", ("image", "tag"), 1),
    "maintainer": ("maintainer", ("maintainer",), 1),
    "run": ("run", ("commands",), 1),
    "cmd": ("cmd", ("commands",), 1),
    "entrypoint": ("entrypoint", ("commands",), 1),
    "volume": ("volume", ("volumes",), 1),
    "label": ("label", ("key", "value"), 2),
    "expose": ("expose", ("ports",), 1),
    "env": ("env", ("key", "value"), 2),
    "add": ("add", ("sources", "destination"), 2),
    "copy": ("copy", ("sources", "destination"), 2),
    "user": ("user", ("user",), 1),
    "workdir": ("workdir", ("directory",), 1),
    "arg": ("arg", ("name", "default"), 1),
    "onbuild": ("onbuild", ("command",), 1),
    "stopsignal": ("stopsignal", ("signal",), 1),
}

# Instructions whose mapping argument is passed through whole
_MAPPING_INSTRUCTIONS = {"label", "env"}


class DefinitionParser:
    """
    Parser for dockerton.yml image definition files.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None):
        """
        Initializes the parser with an optional environment context for interpolation.

        :param context: A dictionary of environment variables for interpolation.
        """
        self.context = context if context is not None else dict(os.environ)

    def parse(self, definition_path: str) -> ImageDefinition:
        """
        Parses a definition file from a path.

        :param definition_path: Path to the definition file.
        :return: Parsed definition.
        """
        with open(definition_path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> ImageDefinition:
        """
        Parses a definition from a YAML string.

        :param content: YAML content of the definition.
        :return: Parsed definition.
        :raises DefinitionError: If the content is not a valid definition.
        """
        content = EnvironmentInterpolator.interpolate(content, self.context)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DefinitionError(f"Invalid YAML: {e}") from e
        if not data:
            data = {}
        if not isinstance(data, dict):
            raise DefinitionError("A definition must be a mapping")

        try:
            definition = ImageDefinition(**data)
        except ValidationError as e:
            raise DefinitionError(f"Invalid definition: {e}") from e

        for index, entry in enumerate(definition.instructions):
            self._resolve(index, entry)
        return definition

    def to_builder(self, definition: ImageDefinition, **builder_kwargs) -> Dockerton:
        """
        Creates a builder and applies every instruction of the definition.

        :param definition: A parsed definition.
        :param builder_kwargs: Extra arguments for the Dockerton constructor.
        :return: The populated builder.
        """
        builder = Dockerton(definition.tag, **builder_kwargs)
        for index, entry in enumerate(definition.instructions):
            method, args = self._resolve(index, entry)
            getattr(builder, method)(*args)
        return builder

    def _resolve(self, index: int, entry: Dict[str, Any]):
        """
        Maps one instruction entry to a builder method and its arguments.
        """
        if len(entry) != 1:
            raise DefinitionError(
                f"Instruction #{index + 1} must have exactly one key, got {sorted(entry)}")

        name, value = next(iter(entry.items()))
        keyword = str(name).lower()
        if keyword not in INSTRUCTIONS:
            raise DefinitionError(f"Instruction #{index + 1}: unknown instruction '{name}'")

        method, params, required = INSTRUCTIONS[keyword]
        return method, self._arguments(index, keyword, params, required, value)

    def _arguments(self, index: int, keyword: str, params, required: int, value: Any) -> List[Any]:
        """
        Converts an entry value into positional arguments for the builder method.
        """
        label = f"Instruction #{index + 1} ({keyword})"

        if len(params) == 1 or (keyword in _MAPPING_INSTRUCTIONS and isinstance(value, dict)):
            return [value]

        if isinstance(value, dict):
            unknown = [k for k in value if k not in params]
            missing = [p for p in params[:required] if p not in value]
            if missing or unknown:
                raise DefinitionError(f"{label} expects keys {list(params)}")
            return [value.get(p) for p in params]

        if isinstance(value, list):
            if keyword in ("add", "copy"):
                if len(value) < 2:
                    raise DefinitionError(f"{label} needs at least a source and a destination")
                sources = value[:-1]
                return [sources[0] if len(sources) == 1 else sources, value[-1]]
            if not required <= len(value) <= len(params):
                raise DefinitionError(f"{label} takes {required} to {len(params)} values")
            return list(value)

        if required > 1:
            raise DefinitionError(f"{label} needs {' and '.join(params)}")
        return [value]

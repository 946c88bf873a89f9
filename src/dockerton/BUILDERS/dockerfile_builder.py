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
Fluent builder that generates a Dockerfile and drives docker to build and run it.
"""
import os
import sys
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ..errors import PreconditionError, WriteError
from ..MODELS.image_details import ImageDetails
from ..MODELS.options import BuildOptions, RunOptions, SerializeOptions
from ..RUNNERS.docker_client import DockerClient
from ..UTILS import command_utils
from ..UTILS.config import DockertonSettings, get_settings
from ..UTILS.debug import debug

Writer = Callable[[str, str], None]
KeyOrMapping = Union[str, Mapping[str, Any]]


def write_dockerfile(path: str, content: str) -> None:
    """
    Writes the Dockerfile content to a path, exactly as given.

    :raises WriteError: If the file cannot be written.
    """
    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
    except OSError as e:
        raise WriteError(path, e.strerror or str(e)) from e


def forward_stdout(chunk: str) -> None:
    sys.stdout.write(chunk)
    sys.stdout.flush()


def forward_stderr(chunk: str) -> None:
    sys.stderr.write(chunk)
    sys.stderr.flush()


def generate_tag() -> str:
    """Returns a unique image tag for builders created without one."""
    return f"dockerton-{uuid.uuid4().hex[:12]}"


class Dockerton:
    """
    Accumulates Dockerfile instructions in call order.

    Every instruction method returns the builder so calls can be chained:

        Dockerton("whalesay").from_("docker/whalesay", "latest").cmd("cowsay hi")

    No validation is done on the resulting sequence; docker reports invalid
    Dockerfiles when the image is built.
    """
    def __init__(self,
                 tag: Optional[str] = None,
                 client: Optional[DockerClient] = None,
                 writer: Writer = write_dockerfile,
                 settings: Optional[DockertonSettings] = None):
        """
        :param tag: Name of the image to build; generated when omitted.
        :param client: Docker client used for build, run and inspect.
        :param writer: Callable used to write the Dockerfile to disk.
        :param settings: Configuration; the process-wide settings by default.
        """
        self.settings = settings or get_settings()
        self.tag = tag or generate_tag()
        self.client = client or DockerClient(binary=self.settings.docker_binary)
        self.writer = writer

        # Each formatted instruction, in the order it was added
        self.commands: List[str] = []

        # Content of the last serialize() call, None until then
        self.rendered: Optional[str] = None

        # Path written by the last serialize() call
        self.output_file: Optional[str] = None

    def _append(self, command: str) -> "Dockerton":
        self.commands.append(command)
        return self

    # Lifecycle

    def serialize(self, **options) -> str:
        """
        Generates the Dockerfile contents and writes them to disk.

        Options:
            output_file (str): Destination path, also accepted as `path`.
                Defaults to the configured output file, './Dockerfile'.

        Returns:
            str: The generated Dockerfile contents.

        Raises:
            WriteError: If the file cannot be written.
        """
        opts = SerializeOptions(**options)
        output_file = opts.output_file or self.settings.output_file

        rendered = "\n".join(self.commands)
        debug("serialize: writing %d instruction(s) to %s", len(self.commands), output_file)
        self.writer(output_file, rendered)

        self.rendered = rendered
        self.output_file = output_file
        return self.rendered

    def build_image(self, **options) -> ImageDetails:
        """
        Builds the image from the generated Dockerfile, tagged with `tag`.

        Options:
            stdout (callable): Receives each stdout chunk. Defaults to sys.stdout.
            stderr (callable): Receives each stderr chunk. Defaults to sys.stderr.
            dir (str): Build context directory. Defaults to the current directory.
            args (dict): Additional flag/value pairs for `docker build`.

        Returns:
            ImageDetails: Metadata of the built image, from `docker inspect`.

        Raises:
            PreconditionError: If serialize() has not been called.
            BuildError: If docker build exits with a non-zero code.
            InspectError: If docker inspect exits with a non-zero code.
            ParseError: If docker inspect output cannot be parsed.
        """
        if self.rendered is None:
            raise PreconditionError("Dockerfile not found - call serialize() first")

        opts = BuildOptions(**options)
        self.client.build(
            self.tag,
            context_dir=opts.dir,
            args=self._build_args(opts),
            on_stdout=opts.stdout or forward_stdout,
            on_stderr=opts.stderr or forward_stderr,
        )
        return self.client.inspect(self.tag)

    def _build_args(self, opts: BuildOptions) -> Dict[str, str]:
        """
        Adds `-f <output_file>` when docker would not find the generated
        Dockerfile as `Dockerfile` in the build context on its own.
        """
        if "-f" in opts.args or "--file" in opts.args:
            return opts.args
        context_dockerfile = os.path.join(opts.dir or ".", "Dockerfile")
        if os.path.abspath(self.output_file) == os.path.abspath(context_dockerfile):
            return opts.args
        return {"-f": self.output_file, **opts.args}

    def run_image(self, **options) -> None:
        """
        Runs the tagged image until the container exits.

        Options:
            stdout (callable): Receives each stdout chunk. Defaults to sys.stdout.
            stderr (callable): Receives each stderr chunk. Defaults to sys.stderr.
            args (dict): Additional flag/value pairs for `docker run`.

        Raises:
            RunError: If docker run exits with a non-zero code.
        """
        opts = RunOptions(**options)
        self.client.run(
            self.tag,
            args=opts.args,
            on_stdout=opts.stdout or forward_stdout,
            on_stderr=opts.stderr or forward_stderr,
        )

    # Instructions

    def from_(self, image: str, tag: Optional[str] = None) -> "Dockerton":
        """
        Adds a FROM; the tag is omitted when None or empty.

        See https://docs.docker.com/engine/reference/builder/#from
        """
        if tag:
            image = f"{image}:{tag}"
        return self._append(command_utils.construct_simple_command("FROM", image))

    def maintainer(self, maintainer: str) -> "Dockerton":
        """Adds a MAINTAINER."""
        return self._append(command_utils.construct_simple_command("MAINTAINER", maintainer))

    def run(self, commands: command_utils.StringOrList) -> "Dockerton":
        """
        Adds a RUN.

        A string is used in `RUN <command>` form, a list in
        `RUN ["command1", "command2", ...]` form.
        """
        return self._append(command_utils.construct_string_or_list_command("RUN", commands))

    def cmd(self, commands: command_utils.StringOrList) -> "Dockerton":
        """Adds a CMD, in shell form for a string or exec form for a list."""
        return self._append(command_utils.construct_string_or_list_command("CMD", commands))

    def entrypoint(self, commands: command_utils.StringOrList) -> "Dockerton":
        """Adds an ENTRYPOINT, in shell form for a string or exec form for a list."""
        return self._append(command_utils.construct_string_or_list_command("ENTRYPOINT", commands))

    def volume(self, volumes: command_utils.StringOrList) -> "Dockerton":
        """Adds a VOLUME, `VOLUME /data` or `VOLUME ["/data", "/logs"]`."""
        return self._append(command_utils.construct_string_or_list_command("VOLUME", volumes))

    def label(self, key: KeyOrMapping, value: Any = None) -> "Dockerton":
        """
        Adds a LABEL.

        Accepts either a key and a value, `.label("version", "1.0")`, or a
        mapping, `.label({"version": "1.0", "vendor": "acme"})`. Keys and
        values are quoted and escaped in both forms.
        """
        pairs = key if isinstance(key, Mapping) else {key: value}
        return self._append(command_utils.construct_key_value_command("LABEL", pairs, quote_keys=True))

    def expose(self, ports: Union[int, Sequence[int]]) -> "Dockerton":
        """
        Adds an EXPOSE.

        A single port gives `EXPOSE 80`, a list gives `EXPOSE 80 81 82`.
        """
        if command_utils.is_string_list(ports):
            return self._append("EXPOSE {}".format(" ".join(str(port) for port in ports)))
        return self._append(command_utils.construct_simple_command("EXPOSE", ports))

    def env(self, key: KeyOrMapping, value: Any = None) -> "Dockerton":
        """
        Adds an ENV.

        A key and a value give `ENV key value` with the value left as is.
        A mapping gives `ENV key="value" ...` with the values quoted and escaped.
        """
        if isinstance(key, Mapping):
            return self._append(command_utils.construct_key_value_command("ENV", key, quote_keys=False))
        return self._append(f"ENV {key} {value}")

    def add(self, sources: command_utils.StringOrList, destination: str) -> "Dockerton":
        """
        Adds an ADD.

        A single source gives `ADD src dest`; a list of sources gives
        `ADD ["src1", "src2", "dest"]`.
        """
        return self._append(self._source_command("ADD", sources, destination))

    def copy(self, sources: command_utils.StringOrList, destination: str) -> "Dockerton":
        """Adds a COPY, formatted like ADD."""
        return self._append(self._source_command("COPY", sources, destination))

    @staticmethod
    def _source_command(keyword: str, sources: command_utils.StringOrList, destination: str) -> str:
        if command_utils.is_string_list(sources):
            return command_utils.construct_string_or_list_command(keyword, list(sources) + [destination])
        return "{} {} {}".format(keyword,
                                 command_utils.escape_string(sources),
                                 command_utils.escape_string(destination))

    def user(self, user: str) -> "Dockerton":
        """Adds a USER."""
        return self._append(command_utils.construct_simple_command("USER", user))

    def workdir(self, directory: str) -> "Dockerton":
        """Adds a WORKDIR."""
        return self._append(command_utils.construct_simple_command("WORKDIR", directory))

    def arg(self, name: str, default: Optional[Any] = None) -> "Dockerton":
        """
        Adds an ARG, `ARG name` or `ARG name=default` when a default is given.
        """
        if default is not None:
            return self._append(f"ARG {name}={default}")
        return self._append(command_utils.construct_simple_command("ARG", name))

    def onbuild(self, command: str) -> "Dockerton":
        """Adds an ONBUILD trigger."""
        return self._append(command_utils.construct_simple_command("ONBUILD", command))

    def stopsignal(self, signal: Union[int, str]) -> "Dockerton":
        """Adds a STOPSIGNAL, either a number or a name such as SIGTERM."""
        return self._append(command_utils.construct_simple_command("STOPSIGNAL", str(signal)))

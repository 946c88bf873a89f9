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
Execution of system processes with streamed output and exit code reporting.
"""
import subprocess
import threading
from typing import Callable, IO, List, Optional

from ..errors import ProcessStartError
from ..UTILS.debug import debug

OutputCallback = Callable[[str], None]


class ProcessRunner:
    """
    Runs a single system process to completion.
    """
    def __init__(self, name: str):
        """
        Initializes the process runner.

        Args:
            name (str): Identifier for the process, used in trace output.
        """
        self.name = name
        self.process = None

    def run(self,
            command: List[str],
            on_stdout: Optional[OutputCallback] = None,
            on_stderr: Optional[OutputCallback] = None,
            working_dir: Optional[str] = None) -> int:
        """
        Starts the process and blocks until it exits.

        Each line written by the process is passed to the matching callback
        as soon as it is read. Both pipes are drained on their own thread.

        Args:
            command (List[str]): Command and arguments to execute.
            on_stdout (Optional[OutputCallback]): Receives stdout chunks.
            on_stderr (Optional[OutputCallback]): Receives stderr chunks.
            working_dir (Optional[str]): Directory to start the process in.

        Returns:
            int: The exit code of the process.

        Raises:
            ProcessStartError: If the executable cannot be started.
            Exception: The first exception raised by a callback, once the
                process has exited.
        """
        debug("%s: executing: %s", self.name, " ".join(command))

        try:
            self.process = subprocess.Popen(
                command,
                cwd=working_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                shell=False
            )
        except OSError as e:
            print(f"[{self.name}] Failed to start: {e}")
            raise ProcessStartError(command[0], e.strerror or str(e)) from e

        errors: List[BaseException] = []
        readers = [
            threading.Thread(target=self._pump, args=(self.process.stdout, on_stdout, errors), daemon=True),
            threading.Thread(target=self._pump, args=(self.process.stderr, on_stderr, errors), daemon=True),
        ]
        for reader in readers:
            reader.start()

        exit_code = self.process.wait()
        for reader in readers:
            reader.join()

        debug("%s: exited with code %d", self.name, exit_code)
        if errors:
            raise errors[0]
        return exit_code

    @staticmethod
    def _pump(pipe: IO[str], callback: Optional[OutputCallback], errors: List[BaseException]):
        # The pipe is drained to EOF even after a callback fails
        with pipe:
            for chunk in iter(pipe.readline, ''):
                if callback is None:
                    continue
                try:
                    callback(chunk)
                except Exception as e:
                    errors.append(e)
                    callback = None

    def get_exit_code(self) -> Optional[int]:
        """
        Gets the exit code of the last process.

        Returns:
            Optional[int]: Exit code if the process finished, None otherwise.
        """
        if self.process:
            return self.process.poll()
        return None

"""
Option sets accepted by the builder's serialize, build and run operations.
"""
from typing import Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

OutputCallback = Callable[[str], None]


class SerializeOptions(BaseModel):
    """
    Options for writing the Dockerfile.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    output_file: Optional[str] = Field(default=None, alias="path")


class _ProcessOptions(BaseModel):
    """
    Options shared by operations that spawn a docker subprocess.
    """
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    stdout: Optional[OutputCallback] = None
    stderr: Optional[OutputCallback] = None
    args: Dict[str, str] = {}

    @field_validator("args", mode="before")
    @classmethod
    def _stringify_args(cls, value):
        if value is None:
            return {}
        return {str(flag): str(flag_value) for flag, flag_value in dict(value).items()}


class BuildOptions(_ProcessOptions):
    """
    Options for `docker build`.

    dir: the build context directory, defaults to the current directory.
    args: extra flag/value pairs, e.g. {"-f": "path/to/Dockerfile"}.
    """
    dir: Optional[str] = None


class RunOptions(_ProcessOptions):
    """
    Options for `docker run`; args are placed before the image tag.
    """

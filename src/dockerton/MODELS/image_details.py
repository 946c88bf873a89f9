"""
Models for the image metadata reported by `docker inspect`.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageConfig(BaseModel):
    """
    Subset of the image's runtime configuration.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    cmd: Optional[List[str]] = Field(default=None, alias="Cmd")
    entrypoint: Optional[List[str]] = Field(default=None, alias="Entrypoint")
    env: Optional[List[str]] = Field(default=None, alias="Env")
    working_dir: Optional[str] = Field(default=None, alias="WorkingDir")
    user: Optional[str] = Field(default=None, alias="User")
    labels: Optional[Dict[str, str]] = Field(default=None, alias="Labels")
    exposed_ports: Optional[Dict[str, Any]] = Field(default=None, alias="ExposedPorts")


class ImageDetails(BaseModel):
    """
    The first entry of `docker inspect <image>` output.

    Only `Id` is required; unknown fields are kept so callers can reach
    anything the engine reports.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="Id", min_length=1)
    repo_tags: Optional[List[str]] = Field(default_factory=list, alias="RepoTags")
    created: Optional[str] = Field(default=None, alias="Created")
    size: Optional[int] = Field(default=None, alias="Size")
    architecture: Optional[str] = Field(default=None, alias="Architecture")
    os: Optional[str] = Field(default=None, alias="Os")
    config: Optional[ImageConfig] = Field(default=None, alias="Config")

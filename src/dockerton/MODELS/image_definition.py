"""
Models for image definition files.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ImageDefinition(BaseModel):
    """
    An image described as data: a tag, where to write the Dockerfile and
    the ordered instructions, each a single-key mapping such as
    {"run": "apt-get update"}.
    """
    tag: Optional[str] = None
    output_file: Optional[str] = None
    build_dir: Optional[str] = None
    instructions: List[Dict[str, Any]] = Field(default_factory=list)

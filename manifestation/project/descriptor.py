# manifestation/project/descriptor.py
from __future__ import annotations
import logging
import tomllib
from pathlib import Path
from typing import Any

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from manifestation.core.errors import InvalidManifestError

logger = logging.getLogger(__name__)

__all__ = [
    "ProjectBuildConfig", "ModDependency", "ProjectDescriptor",
    "parseDescriptorText", "loadDescriptor",
]

JSON5_SUFFIXES = {".json5", ".json"}



class ProjectBuildConfig(BaseModel):
    """Optional build inputs, relative to the descriptor's directory."""
    model_config = ConfigDict(extra="ignore")

    csharp: str | None = None # C# project (.csproj) built with dotnet
    godot: str | None = None  # project.godot exported to a .pck



class ModDependency(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    thunderstore_version: str | None = None



class ProjectDescriptor(BaseModel):
    """Represents a validated project descriptor (manifestation.toml)."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, pattern=r"^[^/\\]+$") # used as a directory and file name
    name: str | None = None
    description: str
    version: str
    homepage: str | None = None
    author: str | None = None

    icon: str
    readme: str | None = None
    changelog: str | None = None

    project: ProjectBuildConfig = Field(default_factory=ProjectBuildConfig)
    dependencies: list[ModDependency] = Field(default_factory=list)
    extra_files: list[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def checkIdIsPlainName(cls, value: str) -> str:
        if value in (".", ".."):
            raise ValueError("id must not be '.' or '..'")
        return value

    @property
    def displayName(self) -> str:
        return self.name if self.name is not None else self.id

    @property
    def hasManagedBuild(self) -> bool:
        return self.project.csharp is not None

    @property
    def hasSceneBuild(self) -> bool:
        return self.project.godot is not None



def parseDescriptorText(text: str, *, fmt: str = "toml", source: str = "<string>") -> ProjectDescriptor:
    """
    Parses descriptor text in `fmt` ("toml" or "json5") and validates its shape.
    Only the schema is checked here; referenced files are not touched.
    """
    try:
        raw: Any = json5.loads(text) if fmt == "json5" else tomllib.loads(text)
    except ValueError as err:
        # tomllib.TOMLDecodeError and json5 syntax errors are both ValueErrors
        raise InvalidManifestError(f"Failed to parse project descriptor '{source}': {err}") from err

    if not isinstance(raw, dict):
        raise InvalidManifestError(f"Project descriptor '{source}' must be a table/object at the top level")

    try:
        return ProjectDescriptor.model_validate(raw)
    except ValidationError as err:
        raise InvalidManifestError(f"Invalid project descriptor '{source}':\n{err}") from err



def loadDescriptor(path: Path | str) -> ProjectDescriptor:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as err:
        raise InvalidManifestError(f"Project descriptor '{path}' not found") from err
    except (OSError, UnicodeDecodeError) as err:
        raise InvalidManifestError(f"Failed to read project descriptor '{path}'") from err

    fmt = "json5" if path.suffix.lower() in JSON5_SUFFIXES else "toml"
    descriptor = parseDescriptorText(text, fmt=fmt, source=str(path))
    logger.debug("Loaded descriptor '%s' (id=%s, version=%s)", path, descriptor.id, descriptor.version)
    return descriptor

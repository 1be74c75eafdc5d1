# manifestation/build/toolchain.py
from __future__ import annotations
import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

__all__ = [
    "ManagedBuildInvocation",
    "SceneExportInvocation",
    "BuildResult",
    "Toolchain",
    "SubprocessToolchain",
    "EXPORT_PRESET_NAME",
]


EXPORT_PRESET_NAME = "manifestation"



@dataclass(frozen=True, slots=True)
class ManagedBuildInvocation:
    """`dotnet build` of the C# project into the mod directory."""
    project: Path
    outputDir: Path
    gdweavePath: Path
    configuration: str = "Release"

    def command(self) -> list[str]:
        return [
            "dotnet", "build", str(self.project),
            "-c", self.configuration,
            "-o", str(self.outputDir),
        ]

    def environment(self) -> dict[str, str]:
        return {"GDWeavePath": str(self.gdweavePath)}



@dataclass(frozen=True, slots=True)
class SceneExportInvocation:
    """Headless Godot export of one preset into a .pck file."""
    editor: Path
    projectDir: Path
    outputPack: Path
    preset: str = EXPORT_PRESET_NAME

    def command(self) -> list[str]:
        return [
            str(self.editor),
            "--no-window",
            "--path", str(self.projectDir),
            "--export-pack", self.preset,
            str(self.outputPack),
        ]



@dataclass(frozen=True, slots=True)
class BuildResult:
    returncode: int
    command: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.returncode == 0



class Toolchain(Protocol):
    def runManagedBuild(self, invocation: ManagedBuildInvocation) -> BuildResult:
        ...

    def runSceneExport(self, invocation: SceneExportInvocation) -> BuildResult:
        ...



class SubprocessToolchain:
    """
    Runs the real toolchains with blocking subprocess calls.

    Output is not captured: dotnet and Godot write straight to the console.
    No timeout is applied. OSError (e.g. executable not found) propagates to the caller.
    """

    def runManagedBuild(self, invocation: ManagedBuildInvocation) -> BuildResult:
        env = dict(os.environ)
        env.update(invocation.environment())
        return self._run(invocation.command(), env=env)

    def runSceneExport(self, invocation: SceneExportInvocation) -> BuildResult:
        return self._run(invocation.command())

    def _run(self, cmd: list[str], env: dict[str, str] | None = None) -> BuildResult:
        logger.info("Running: %s", subprocess.list2cmdline(cmd))
        completed = subprocess.run(cmd, env=env, check=False)
        logger.debug("Exited with status %d", completed.returncode)
        return BuildResult(returncode=completed.returncode, command=cmd)

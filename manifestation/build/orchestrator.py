# manifestation/build/orchestrator.py
from __future__ import annotations
import logging
from pathlib import Path

from manifestation.config.settings import ToolchainSettings
from manifestation.core.errors import BuildFailedError, MissingSettingError
from manifestation.core.fsops import writeText
from manifestation.core.logging import setLogContext
from manifestation.project.descriptor import ProjectDescriptor
from .toolchain import (
    EXPORT_PRESET_NAME,
    BuildResult,
    ManagedBuildInvocation,
    SceneExportInvocation,
    Toolchain,
)

logger = logging.getLogger(__name__)

__all__ = [
    "EXPORT_PRESETS_FILE_NAME", "DEFAULT_EXPORT_PRESETS",
    "ensureExportPresets", "runManagedBuild", "runSceneExport", "runBuilds",
]


EXPORT_PRESETS_FILE_NAME = "export_presets.cfg"

DEFAULT_EXPORT_PRESETS = f"""[preset.0]
name="{EXPORT_PRESET_NAME}"
platform="Windows Desktop"
runnable=true
export_filter="all_resources"
include_filter=""
exclude_filter=""

[preset.0.options]
application/modify_resources=false"""



def ensureExportPresets(projectDir: Path) -> Path:
    """Writes the default export preset next to the Godot project unless one already exists."""
    presets = projectDir / EXPORT_PRESETS_FILE_NAME
    if not presets.exists():
        logger.info("Writing default export preset to '%s'", presets)
        writeText(presets, DEFAULT_EXPORT_PRESETS)
    return presets



def _check(result: BuildResult, step: str, message: str) -> None:
    if not result.ok:
        raise BuildFailedError(f"{message} (exit status {result.returncode})", step=step, returncode=result.returncode)



def runManagedBuild(
    descriptor: ProjectDescriptor,
    descriptorDir: Path,
    modDir: Path,
    settings: ToolchainSettings,
    toolchain: Toolchain,
) -> None:
    assert descriptor.project.csharp is not None
    if settings.gdweave_path is None:
        raise MissingSettingError("No GDWeave path configured - run the setup first (--gdweave-path)")

    invocation = ManagedBuildInvocation(
        project=descriptorDir / descriptor.project.csharp,
        outputDir=modDir,
        gdweavePath=settings.gdweave_path,
    )
    logger.info("Building C# project '%s'", invocation.project)
    try:
        result = toolchain.runManagedBuild(invocation)
    except OSError as err:
        raise BuildFailedError("Failed to launch dotnet", step="csharp") from err
    _check(result, "csharp", "Failed to build C# project")



def runSceneExport(
    descriptor: ProjectDescriptor,
    descriptorDir: Path,
    modDir: Path,
    settings: ToolchainSettings,
    toolchain: Toolchain,
) -> None:
    assert descriptor.project.godot is not None
    if settings.godot_path is None:
        raise MissingSettingError("No Godot editor path configured - run the setup first (--godot-path)")

    projectDir = (descriptorDir / descriptor.project.godot).parent
    ensureExportPresets(projectDir)

    invocation = SceneExportInvocation(
        editor=settings.godot_path,
        projectDir=projectDir,
        outputPack=modDir / f"{descriptor.id}.pck",
    )
    logger.info("Exporting Godot project '%s'", projectDir)
    try:
        result = toolchain.runSceneExport(invocation)
    except OSError as err:
        raise BuildFailedError(f"Failed to launch Godot editor '{settings.godot_path}'", step="godot") from err
    _check(result, "godot", "Failed to export Godot project")



def runBuilds(
    descriptor: ProjectDescriptor,
    descriptorDir: Path,
    modDir: Path,
    settings: ToolchainSettings,
    toolchain: Toolchain,
) -> list[str]:
    """
    Runs the configured build steps in order: C# first, then the Godot export.
    Returns the names of the steps that ran. The first failure aborts; whatever
    a failed step left in `modDir` stays there.
    """
    ran: list[str] = []

    if descriptor.hasManagedBuild:
        setLogContext(stage="csharp")
        runManagedBuild(descriptor, descriptorDir, modDir, settings, toolchain)
        ran.append("csharp")

    if descriptor.hasSceneBuild:
        setLogContext(stage="godot")
        runSceneExport(descriptor, descriptorDir, modDir, settings, toolchain)
        ran.append("godot")

    if not ran:
        logger.debug("No build steps configured")
    return ran

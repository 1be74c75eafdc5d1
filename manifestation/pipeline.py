# manifestation/pipeline.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path

from manifestation.archive.assembler import buildArchives, copyArchive
from manifestation.assets.collector import collectAssets
from manifestation.build.orchestrator import runBuilds
from manifestation.build.toolchain import SubprocessToolchain, Toolchain
from manifestation.config.settings import ToolchainSettings
from manifestation.core.fsops import ensureDir, recreateDir
from manifestation.core.logging import clearLogContext, setLogContext
from manifestation.manifests.synth import writeManifests
from manifestation.project.descriptor import ProjectDescriptor, loadDescriptor

logger = logging.getLogger(__name__)

__all__ = ["WORK_DIR_NAME", "MODS_SUBPATH", "WorkingTree", "PipelineResult", "runPipeline"]


WORK_DIR_NAME = "manifestation"
MODS_SUBPATH = ("GDWeave", "mods")



@dataclass(frozen=True, slots=True)
class WorkingTree:
    """
    <descriptor-dir>/manifestation/ and the mod directory inside it
    (GDWeave/mods/<id>/). Rebuilt from scratch on every run and left on disk.
    """
    workDir: Path
    modDir: Path

    @classmethod
    def locate(cls, descriptorDir: Path, modId: str) -> WorkingTree:
        workDir = descriptorDir / WORK_DIR_NAME
        return cls(workDir=workDir, modDir=workDir.joinpath(*MODS_SUBPATH, modId))

    @classmethod
    def prepare(cls, descriptorDir: Path, modId: str) -> WorkingTree:
        """Wipes any previous output and creates the empty tree."""
        located = cls.locate(descriptorDir, modId)
        workDir = recreateDir(located.workDir)
        tree = cls.locate(workDir.parent, modId)
        ensureDir(tree.modDir)
        return tree



@dataclass(frozen=True, slots=True)
class PipelineResult:
    descriptor: ProjectDescriptor
    tree: WorkingTree
    modArchive: Path
    thunderstoreArchive: Path
    builds: tuple[str, ...] = ()
    copiedTo: Path | None = None



def runPipeline(
    descriptorPath: Path | str,
    *,
    settings: ToolchainSettings,
    toolchain: Toolchain | None = None,
    copy: bool = False,
    copyTo: Path | None = None,
) -> PipelineResult:
    """
    Packages the project described by `descriptorPath`.

    Stages run strictly in order and the first error aborts the run:
      1) load descriptor
      2) wipe + create the working tree
      3) C# build, then Godot export (each only if configured)
      4) GDWeave + Thunderstore manifests
      5) readme/changelog, icon, extra files
      6) <id>.zip and thunderstore.zip
      7) optional copy of <id>.zip
    Partial output of a failed run stays on disk.
    """
    descriptorPath = Path(descriptorPath)
    toolchain = toolchain or SubprocessToolchain()

    try:
        setLogContext(stage="load")
        descriptor = loadDescriptor(descriptorPath)
        descriptorDir = descriptorPath.resolve().parent
        setLogContext(modId=descriptor.id)
        logger.info("Packaging %s %s", descriptor.id, descriptor.version)

        setLogContext(stage="prepare")
        tree = WorkingTree.prepare(descriptorDir, descriptor.id)

        builds = runBuilds(descriptor, descriptorDir, tree.modDir, settings, toolchain)

        setLogContext(stage="manifests")
        writeManifests(descriptor, tree)

        setLogContext(stage="assets")
        collectAssets(descriptor, descriptorDir, tree)

        setLogContext(stage="archive")
        modArchive, thunderstoreArchive = buildArchives(descriptor, tree)

        copiedTo = None
        if copy:
            setLogContext(stage="copy")
            copiedTo = copyArchive(modArchive, copyTo, settings)

        logger.info("Done: %s", tree.workDir)
        return PipelineResult(
            descriptor=descriptor,
            tree=tree,
            modArchive=modArchive,
            thunderstoreArchive=thunderstoreArchive,
            builds=tuple(builds),
            copiedTo=copiedTo,
        )
    finally:
        clearLogContext()

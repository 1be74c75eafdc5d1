# manifestation/archive/assembler.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING
from zipfile import ZIP_DEFLATED, ZipFile

from manifestation.config.settings import ToolchainSettings
from manifestation.core.errors import IOFailureError, MissingSettingError
from manifestation.core.fsops import copyFile, ensureDir
from manifestation.project.descriptor import ProjectDescriptor

if TYPE_CHECKING:
    from manifestation.pipeline import WorkingTree

logger = logging.getLogger(__name__)

__all__ = [
    "THUNDERSTORE_ARCHIVE_NAME",
    "IGNORED_SUFFIXES",
    "ArchiveSpec",
    "zipDirectory",
    "writeArchive",
    "buildArchives",
    "copyArchive",
]


THUNDERSTORE_ARCHIVE_NAME = "thunderstore.zip"

# dotnet build leaves these next to the assembly; the loader never needs them
IGNORED_SUFFIXES = (".deps.json", ".pdb")



@dataclass(frozen=True, slots=True)
class ArchiveSpec:
    """File names skipped while archiving. Applies to files only; directories are always walked."""
    names: frozenset[str] = field(default_factory=frozenset)
    suffixes: tuple[str, ...] = IGNORED_SUFFIXES

    @classmethod
    def forMod(cls, modId: str) -> ArchiveSpec:
        # The archives are written inside the tree being walked
        return cls(names=frozenset({THUNDERSTORE_ARCHIVE_NAME, f"{modId}.zip"}))

    def ignores(self, fileName: str) -> bool:
        return fileName in self.names or fileName.endswith(self.suffixes)



def zipDirectory(zf: ZipFile, root: Path, spec: ArchiveSpec) -> int:
    """
    Adds every non-ignored file under `root` to `zf`, named relative to `root`.
    Walks with an explicit stack; entries are visited in sorted order.
    Returns the number of files written.
    """
    count = 0
    stack: list[tuple[Path, str]] = [(root, "")]
    while stack:
        directory, prefix = stack.pop()
        subdirs: list[tuple[Path, str]] = []
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            arcname = f"{prefix}{entry.name}"
            if entry.is_dir():
                subdirs.append((entry, f"{arcname}/"))
                continue
            if not entry.is_file() or spec.ignores(entry.name):
                continue
            zf.write(entry, arcname=arcname)
            count += 1
        # Reversed so the first subdirectory is popped next
        stack.extend(reversed(subdirs))
    return count



def writeArchive(output: Path, root: Path, spec: ArchiveSpec) -> Path:
    try:
        # Pre-1980 mtimes (old reference assemblies) are clamped to 1980
        with ZipFile(output, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
            count = zipDirectory(zf, root, spec)
    except (OSError, ValueError) as err:
        raise IOFailureError(f"Failed to write archive '{output}' from '{root}'") from err
    logger.info("Packaged %d file(s) -> %s", count, output)
    return output



def buildArchives(descriptor: ProjectDescriptor, tree: WorkingTree) -> tuple[Path, Path]:
    """
    Writes <workDir>/<id>.zip (mod directory only) and <workDir>/thunderstore.zip
    (whole working tree). Returns (modArchive, thunderstoreArchive).
    """
    spec = ArchiveSpec.forMod(descriptor.id)
    modArchive = writeArchive(tree.workDir / f"{descriptor.id}.zip", tree.modDir, spec)
    thunderstoreArchive = writeArchive(tree.workDir / THUNDERSTORE_ARCHIVE_NAME, tree.workDir, spec)
    return modArchive, thunderstoreArchive



def copyArchive(archive: Path, destination: Path | None, settings: ToolchainSettings) -> Path:
    """
    Copies `archive` to `destination`. An existing directory receives the archive under
    its own name; anything else is taken as the target file path. Without a destination
    the archive goes to <gdweave_path>/mods/.
    """
    if destination is None:
        if settings.gdweave_path is None:
            raise MissingSettingError("No copy destination given and no GDWeave path configured")
        destination = ensureDir(settings.gdweave_path / "mods")

    if destination.is_dir():
        target = destination / archive.name
    else:
        ensureDir(destination.parent)
        target = destination

    copyFile(archive, target)
    logger.info("Copied %s -> %s", archive.name, target)
    return target

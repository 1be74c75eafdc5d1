# manifestation/assets/collector.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from manifestation.core.errors import InvalidAssetError, MissingAssetError
from manifestation.core.fsops import copyFile
from manifestation.project.descriptor import ProjectDescriptor

if TYPE_CHECKING:
    from manifestation.pipeline import WorkingTree

logger = logging.getLogger(__name__)

__all__ = [
    "ICON_SIZE", "ICON_FILE_NAME", "README_FILE_NAME", "CHANGELOG_FILE_NAME",
    "validateIcon", "collectIcon", "collectDocs", "collectExtraFiles", "collectAssets",
]


ICON_SIZE = (256, 256)
ICON_FILE_NAME = "icon.png"
README_FILE_NAME = "README.md"
CHANGELOG_FILE_NAME = "CHANGELOG.md"



def _requireFile(path: Path, what: str) -> Path:
    if not path.is_file():
        raise MissingAssetError(f"{what} '{path}' not found", path=path)
    return path



def validateIcon(icon: Path) -> tuple[int, int]:
    """Opens `icon` as an image and checks it is exactly 256x256. Returns the size."""
    _requireFile(icon, "Icon")
    try:
        with Image.open(icon) as image:
            size = image.size
    except (UnidentifiedImageError, OSError) as err:
        raise InvalidAssetError(f"Icon '{icon}' is not a readable image", path=icon) from err

    if size != ICON_SIZE:
        width, height = size
        raise InvalidAssetError(f"Icon must be 256x256, '{icon}' is {width}x{height}", path=icon)
    return size



def collectIcon(descriptor: ProjectDescriptor, descriptorDir: Path, tree: WorkingTree) -> list[Path]:
    icon = descriptorDir / descriptor.icon
    validateIcon(icon)
    # Thunderstore wants it at the package root, GDWeave next to the mod manifest
    return [
        copyFile(icon, tree.workDir / ICON_FILE_NAME),
        copyFile(icon, tree.modDir / ICON_FILE_NAME),
    ]



def collectDocs(descriptor: ProjectDescriptor, descriptorDir: Path, tree: WorkingTree) -> list[Path]:
    copied: list[Path] = []
    for declared, target, what in (
        (descriptor.readme, README_FILE_NAME, "Readme"),
        (descriptor.changelog, CHANGELOG_FILE_NAME, "Changelog"),
    ):
        if declared is None:
            continue
        source = _requireFile(descriptorDir / declared, what)
        copied.append(copyFile(source, tree.workDir / target))
    return copied



def collectExtraFiles(descriptor: ProjectDescriptor, descriptorDir: Path, tree: WorkingTree) -> list[Path]:
    copied: list[Path] = []
    for entry in descriptor.extra_files:
        source = _requireFile(descriptorDir / entry, "Extra file")
        copied.append(copyFile(source, tree.modDir / source.name))
    return copied



def collectAssets(descriptor: ProjectDescriptor, descriptorDir: Path, tree: WorkingTree) -> list[Path]:
    """Copies readme/changelog, the validated icon, and extra files into the working tree."""
    copied = collectDocs(descriptor, descriptorDir, tree)
    copied.extend(collectIcon(descriptor, descriptorDir, tree))
    copied.extend(collectExtraFiles(descriptor, descriptorDir, tree))
    logger.info("Collected %d asset file(s)", len(copied))
    return copied

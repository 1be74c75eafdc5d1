# manifestation/manifests/synth.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from manifestation.core.fsops import writeText
from manifestation.project.descriptor import ProjectDescriptor

if TYPE_CHECKING:
    from manifestation.pipeline import WorkingTree

logger = logging.getLogger(__name__)

__all__ = [
    "MANIFEST_FILE_NAME",
    "GDWeaveMetadata",
    "GDWeaveManifest",
    "ThunderstoreManifest",
    "synthesizeManifests",
    "renderManifest",
    "writeManifests",
]


MANIFEST_FILE_NAME = "manifest.json"



class GDWeaveMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    name: str | None = None
    author: str | None = None
    version: str | None = None
    description: str | None = None
    homepage: str | None = None



class GDWeaveManifest(BaseModel):
    """manifest.json read by the GDWeave loader from GDWeave/mods/<id>/."""
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    id: str
    assembly_path: str | None = None
    pack_path: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    metadata: GDWeaveMetadata | None = None



class ThunderstoreManifest(BaseModel):
    """manifest.json at the root of a Thunderstore package."""
    name: str
    version_number: str
    website_url: str
    description: str
    dependencies: list[str] = Field(default_factory=list)



def synthesizeManifests(descriptor: ProjectDescriptor) -> tuple[GDWeaveManifest, ThunderstoreManifest]:
    """
    Derives both manifests from the descriptor alone. AssemblyPath/PackPath follow
    the build configuration, not the build outcome.
    """
    gdweave = GDWeaveManifest(
        id=descriptor.id,
        assembly_path=f"{descriptor.id}.dll" if descriptor.hasManagedBuild else None,
        pack_path=f"{descriptor.id}.pck" if descriptor.hasSceneBuild else None,
        dependencies=[dep.id for dep in descriptor.dependencies if dep.id is not None],
        metadata=GDWeaveMetadata(
            name=descriptor.displayName,
            author=descriptor.author,
            version=descriptor.version,
            description=descriptor.description,
            homepage=descriptor.homepage,
        ),
    )

    thunderstore = ThunderstoreManifest(
        name=descriptor.displayName,
        version_number=descriptor.version,
        website_url=descriptor.homepage or "",
        description=descriptor.description,
        dependencies=[
            dep.thunderstore_version
            for dep in descriptor.dependencies
            if dep.thunderstore_version is not None
        ],
    )
    return gdweave, thunderstore



def renderManifest(manifest: BaseModel) -> str:
    # Field order is declaration order, so output is stable run to run
    payload = manifest.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(payload, ensure_ascii=False, indent=2)



def writeManifests(descriptor: ProjectDescriptor, tree: WorkingTree) -> tuple[Path, Path]:
    """Writes the GDWeave manifest into the mod directory and the Thunderstore manifest at the tree root."""
    gdweave, thunderstore = synthesizeManifests(descriptor)

    gdweavePath = writeText(tree.modDir / MANIFEST_FILE_NAME, renderManifest(gdweave))
    thunderstorePath = writeText(tree.workDir / MANIFEST_FILE_NAME, renderManifest(thunderstore))

    logger.info(
        "Wrote manifests (%d GDWeave dependencies, %d Thunderstore dependencies)",
        len(gdweave.dependencies), len(thunderstore.dependencies),
    )
    return gdweavePath, thunderstorePath

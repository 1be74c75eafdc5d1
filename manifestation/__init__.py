# manifestation/__init__.py
from .pipeline import WorkingTree, PipelineResult, runPipeline
from .config.settings import ToolchainSettings, loadSettings
from .project.descriptor import ProjectDescriptor, loadDescriptor

__version__ = "0.1.0"

__all__ = [
    "WorkingTree",
    "PipelineResult",
    "runPipeline",
    "ToolchainSettings",
    "loadSettings",
    "ProjectDescriptor",
    "loadDescriptor",
]

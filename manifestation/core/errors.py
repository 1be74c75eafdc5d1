# manifestation/core/errors.py
from __future__ import annotations

__all__ = [
    "ManifestationError",
    "InvalidManifestError",
    "MissingSettingError",
    "MissingAssetError",
    "InvalidAssetError",
    "BuildFailedError",
    "IOFailureError",
]



class ManifestationError(Exception):
    """Base for every failure that aborts a packaging run."""
    pass



class InvalidManifestError(ManifestationError):
    """Project descriptor is missing, unreadable, or does not match the schema."""
    pass



class MissingSettingError(ManifestationError):
    """A toolchain path needed by the requested step was never configured."""
    pass



class MissingAssetError(ManifestationError):
    """A file declared by the project descriptor does not exist."""
    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path



class InvalidAssetError(ManifestationError):
    """An asset exists but cannot be used (wrong icon size, not an image)."""
    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path



class BuildFailedError(ManifestationError):
    """An external build step exited nonzero or could not be launched."""
    def __init__(self, message: str, step: str, returncode: int | None = None):
        super().__init__(message)
        self.step = step
        self.returncode = returncode



class IOFailureError(ManifestationError):
    """A filesystem operation (create, remove, copy, write) failed."""
    pass

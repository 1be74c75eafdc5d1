# manifestation/config/settings.py
from __future__ import annotations
import logging
import os
import sys
from pathlib import Path

import json5
from pydantic import BaseModel, ConfigDict, ValidationError

from manifestation.core.errors import IOFailureError
from manifestation.core.fsops import ensureDir, writeText

logger = logging.getLogger(__name__)

__all__ = [
    "CONFIG_DIR_ENV", "CONFIG_FILE_NAME", "ToolchainSettings",
    "getConfigDir", "getConfigPath", "loadSettings", "saveSettings",
]


CONFIG_DIR_ENV = "MANIFESTATION_CONFIG_DIR"
CONFIG_FILE_NAME = "config.json5"



class ToolchainSettings(BaseModel):
    """
    Per-machine toolchain locations. Both are optional; a missing path only
    matters once a descriptor asks for the build step that needs it.
    """
    model_config = ConfigDict(extra="ignore")

    godot_path: Path | None = None
    gdweave_path: Path | None = None



def _defaultConfigDir() -> Path:
    if sys.platform.startswith("win"):
        roaming = os.getenv("APPDATA")
        base = Path(roaming).expanduser() if roaming else Path.home() / "AppData" / "Roaming"
        return base / "notnite" / "manifestation" / "config"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "com.notnite.manifestation"

    xdgCfg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdgCfg).expanduser() if xdgCfg else Path.home() / ".config"
    return base / "manifestation"



def getConfigDir() -> Path:
    """Returns the settings directory: $MANIFESTATION_CONFIG_DIR if set, else the per-user default."""
    envDir = os.getenv(CONFIG_DIR_ENV)
    if envDir:
        return Path(envDir).expanduser()
    return _defaultConfigDir()



def getConfigPath() -> Path:
    return getConfigDir() / CONFIG_FILE_NAME



def loadSettings(path: Path | None = None) -> ToolchainSettings:
    """
    Reads persisted settings. A missing file yields empty settings; so does a file
    that cannot be parsed (logged), since the pipeline only needs the paths for
    build steps that are actually configured.
    """
    filePath = path or getConfigPath()
    if not filePath.exists():
        logger.debug("No settings file at '%s'", filePath)
        return ToolchainSettings()
    try:
        raw = json5.loads(filePath.read_text(encoding="utf-8"))
        return ToolchainSettings.model_validate(raw or {})
    except (OSError, ValueError, ValidationError) as err:
        logger.error("Failed to read settings '%s': %s", filePath, err)
        return ToolchainSettings()



def saveSettings(settings: ToolchainSettings, path: Path | None = None) -> Path:
    filePath = path or getConfigPath()
    ensureDir(filePath.parent)
    payload = {
        key: str(value)
        for key, value in settings.model_dump().items()
        if value is not None
    }
    try:
        text = json5.dumps(payload, ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as err:
        raise IOFailureError(f"Failed to serialize settings for '{filePath}'") from err
    writeText(filePath, text + "\n")
    logger.info("Saved settings to '%s'", filePath)
    return filePath

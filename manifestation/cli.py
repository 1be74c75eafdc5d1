# manifestation/cli.py
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

from manifestation.config.settings import ToolchainSettings, getConfigPath, loadSettings, saveSettings
from manifestation.core.errors import ManifestationError
from manifestation.core.logging import configureLogging
from manifestation.pipeline import runPipeline

logger = logging.getLogger(__name__)

__all__ = ["buildParser", "formatErrorChain", "configure", "main"]



def buildParser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="manifestation",
        description="Build and package a GDWeave mod into <id>.zip and thunderstore.zip.",
    )
    p.add_argument(
        "descriptor",
        nargs="?",
        type=Path,
        help="Path to the project descriptor (manifestation.toml). Omit to view or change settings.",
    )
    p.add_argument("--copy", action="store_true", help="Copy <id>.zip to GDWeave/mods (or --copy-to) after packaging")
    p.add_argument("--copy-to", type=Path, default=None, help="Destination file or directory for --copy")
    p.add_argument("--godot-path", type=Path, default=None, help="Save the Godot editor executable path")
    p.add_argument("--gdweave-path", type=Path, default=None, help="Save the GDWeave directory path")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write JSON log records to this file")
    return p



def formatErrorChain(err: BaseException) -> str:
    lines = [str(err)]
    cause = err.__cause__
    while cause is not None:
        lines.append(f"  caused by: {type(cause).__name__}: {cause}")
        cause = cause.__cause__
    return "\n".join(lines)



def configure(godotPath: Path | None, gdweavePath: Path | None) -> int:
    """Updates persisted settings with whichever paths were given, or prints the current ones."""
    current = loadSettings()
    configPath = getConfigPath()

    if godotPath is None and gdweavePath is None:
        print(f"Settings file: {configPath}")
        print(f"  godot_path:   {current.godot_path or '(not set)'}")
        print(f"  gdweave_path: {current.gdweave_path or '(not set)'}")
        print("Use --godot-path / --gdweave-path to change them.")
        return 0

    for label, path in (("Godot editor", godotPath), ("GDWeave directory", gdweavePath)):
        if path is not None and not path.exists():
            print(f"ERROR: {label} '{path}' does not exist", file=sys.stderr)
            return 1

    updated = ToolchainSettings(
        godot_path=godotPath.resolve() if godotPath else current.godot_path,
        gdweave_path=gdweavePath.resolve() if gdweavePath else current.gdweave_path,
    )
    saveSettings(updated, configPath)
    return 0



def main(argv: list[str] | None = None) -> int:
    parser = buildParser()
    args = parser.parse_args(argv)
    if args.descriptor is None and (args.copy or args.copy_to is not None):
        parser.error("--copy and --copy-to need a project descriptor")
    configureLogging(verbose=args.verbose, logFile=args.log_file)

    try:
        if args.descriptor is None:
            return configure(args.godot_path, args.gdweave_path)

        result = runPipeline(
            args.descriptor,
            settings=loadSettings(),
            copy=args.copy or args.copy_to is not None,
            copyTo=args.copy_to,
        )
    except ManifestationError as err:
        logger.debug("Packaging failed", exc_info=True)
        print(f"ERROR: {formatErrorChain(err)}", file=sys.stderr)
        return 1

    print(f"Wrote {result.modArchive}")
    print(f"Wrote {result.thunderstoreArchive}")
    if result.copiedTo is not None:
        print(f"Copied to {result.copiedTo}")
    return 0

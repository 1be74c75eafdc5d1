import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import pytest
from PIL import Image

from manifestation.build.toolchain import BuildResult, ManagedBuildInvocation, SceneExportInvocation
from manifestation.core.logging.formatters import DevFormatter, JsonFormatter



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



# ----------------------------
# Helpers
# ----------------------------

def writeIcon(path: Path, size: tuple[int, int] = (256, 256), color=(200, 40, 40, 255)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, format="PNG")
    return path


def _tomlValue(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, list):
        return "[" + ", ".join(_tomlValue(item) for item in value) + "]"
    raise TypeError(f"Unsupported TOML value: {value!r}")


def renderToml(data: dict[str, Any]) -> str:
    """Enough TOML for descriptors: scalars, string lists, [project], [[dependencies]]."""
    lines: list[str] = []
    for key, value in data.items():
        if key in ("project", "dependencies"):
            continue
        lines.append(f"{key} = {_tomlValue(value)}")
    if "project" in data:
        lines.append("")
        lines.append("[project]")
        for key, value in data["project"].items():
            lines.append(f"{key} = {_tomlValue(value)}")
    for dep in data.get("dependencies", []):
        lines.append("")
        lines.append("[[dependencies]]")
        for key, value in dep.items():
            lines.append(f"{key} = {_tomlValue(value)}")
    return "\n".join(lines) + "\n"


@dataclass
class FakeToolchain:
    """Records invocations instead of spawning dotnet/Godot; optionally drops fake outputs."""
    managedStatus: int = 0
    sceneStatus: int = 0
    managedOutputs: tuple[str, ...] = ()
    calls: list[tuple[str, Any]] = field(default_factory=list)

    def runManagedBuild(self, invocation: ManagedBuildInvocation) -> BuildResult:
        self.calls.append(("csharp", invocation))
        for name in self.managedOutputs:
            (invocation.outputDir / name).write_bytes(b"built:" + name.encode())
        return BuildResult(returncode=self.managedStatus, command=invocation.command())

    def runSceneExport(self, invocation: SceneExportInvocation) -> BuildResult:
        self.calls.append(("godot", invocation))
        if self.sceneStatus == 0:
            invocation.outputPack.write_bytes(b"GDPC")
        return BuildResult(returncode=self.sceneStatus, command=invocation.command())


# ----------------------------
# Fixtures
# ----------------------------

@pytest.fixture()
def makeProject(tmp_path) -> Callable[..., Path]:
    """
    Writes a minimal valid project (descriptor + 256x256 icon) under tmp_path/project.
    Keyword overrides are merged into the descriptor; returns the descriptor path.
    """
    def _make(**overrides: Any) -> Path:
        root = tmp_path / "project"
        root.mkdir(parents=True, exist_ok=True)
        writeIcon(root / "icon.png")
        data: dict[str, Any] = {
            "id": "Example.Mod",
            "name": "Example Mod",
            "description": "An example mod",
            "version": "1.2.3",
            "author": "someone",
            "homepage": "https://example.invalid/mod",
            "icon": "icon.png",
        }
        data.update(overrides)
        data = {key: value for key, value in data.items() if value is not None}
        descriptor = root / "manifestation.toml"
        descriptor.write_text(renderToml(data), encoding="utf-8")
        return descriptor
    return _make


@pytest.fixture()
def fakeToolchain() -> FakeToolchain:
    return FakeToolchain()


@pytest.fixture(autouse=True)
def isolatedConfigDir(monkeypatch, tmp_path) -> Path:
    """Never read or write the real per-user settings during tests."""
    configDir = tmp_path / "config"
    monkeypatch.setenv("MANIFESTATION_CONFIG_DIR", str(configDir))
    return configDir


@pytest.fixture(autouse=True)
def restoreRootLogging():
    """Drops handlers installed by configureLogging() so they do not leak into later tests."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, (DevFormatter, JsonFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

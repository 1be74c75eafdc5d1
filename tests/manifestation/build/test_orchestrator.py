from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FakeToolchain
from manifestation.build.orchestrator import (
    DEFAULT_EXPORT_PRESETS,
    ensureExportPresets,
    runBuilds,
)
from manifestation.build.toolchain import ManagedBuildInvocation, SceneExportInvocation
from manifestation.config.settings import ToolchainSettings
from manifestation.core.errors import BuildFailedError, MissingSettingError
from manifestation.project.descriptor import parseDescriptorText


BASE = """
id = "Build.Mod"
description = "d"
version = "1.0.0"
icon = "icon.png"
"""


def _descriptor(csharp: str | None = None, godot: str | None = None):
    text = BASE + "\n[project]\n"
    if csharp:
        text += f'csharp = "{csharp}"\n'
    if godot:
        text += f'godot = "{godot}"\n'
    return parseDescriptorText(text)


@pytest.fixture()
def dirs(tmp_path: Path) -> tuple[Path, Path]:
    projectDir = tmp_path / "project"
    modDir = projectDir / "manifestation" / "GDWeave" / "mods" / "Build.Mod"
    modDir.mkdir(parents=True)
    (projectDir / "godot").mkdir()
    return projectDir, modDir


def test_runBuilds_nothingConfigured_invokesNothing(dirs, fakeToolchain: FakeToolchain) -> None:
    projectDir, modDir = dirs
    ran = runBuilds(_descriptor(), projectDir, modDir, ToolchainSettings(), fakeToolchain)
    assert ran == []
    assert fakeToolchain.calls == []


def test_runBuilds_bothConfigured_runsCSharpThenGodot(dirs, fakeToolchain: FakeToolchain, tmp_path: Path) -> None:
    projectDir, modDir = dirs
    settings = ToolchainSettings(godot_path=tmp_path / "godot.exe", gdweave_path=tmp_path / "GDWeave")

    ran = runBuilds(
        _descriptor(csharp="src/Build.Mod.csproj", godot="godot/project.godot"),
        projectDir, modDir, settings, fakeToolchain,
    )

    assert ran == ["csharp", "godot"]
    assert [name for name, _inv in fakeToolchain.calls] == ["csharp", "godot"]

    managed: ManagedBuildInvocation = fakeToolchain.calls[0][1]
    assert managed.project == projectDir / "src" / "Build.Mod.csproj"
    assert managed.outputDir == modDir
    assert managed.environment() == {"GDWeavePath": str(tmp_path / "GDWeave")}
    assert managed.command() == [
        "dotnet", "build", str(projectDir / "src" / "Build.Mod.csproj"),
        "-c", "Release", "-o", str(modDir),
    ]

    scene: SceneExportInvocation = fakeToolchain.calls[1][1]
    assert scene.command() == [
        str(tmp_path / "godot.exe"),
        "--no-window",
        "--path", str(projectDir / "godot"),
        "--export-pack", "manifestation",
        str(modDir / "Build.Mod.pck"),
    ]
    assert (projectDir / "godot" / "export_presets.cfg").read_text(encoding="utf-8") == DEFAULT_EXPORT_PRESETS


def test_runBuilds_csharpWithoutGDWeavePath_raises(dirs, fakeToolchain: FakeToolchain) -> None:
    projectDir, modDir = dirs
    with pytest.raises(MissingSettingError):
        runBuilds(_descriptor(csharp="a.csproj"), projectDir, modDir, ToolchainSettings(), fakeToolchain)
    assert fakeToolchain.calls == []


def test_runBuilds_godotWithoutEditorPath_raises(dirs, fakeToolchain: FakeToolchain, tmp_path: Path) -> None:
    projectDir, modDir = dirs
    settings = ToolchainSettings(gdweave_path=tmp_path)
    with pytest.raises(MissingSettingError):
        runBuilds(_descriptor(godot="godot/project.godot"), projectDir, modDir, settings, fakeToolchain)


def test_runBuilds_csharpFailure_abortsBeforeGodot(dirs, tmp_path: Path) -> None:
    projectDir, modDir = dirs
    toolchain = FakeToolchain(managedStatus=1)
    settings = ToolchainSettings(godot_path=tmp_path / "godot.exe", gdweave_path=tmp_path)

    with pytest.raises(BuildFailedError) as info:
        runBuilds(
            _descriptor(csharp="a.csproj", godot="godot/project.godot"),
            projectDir, modDir, settings, toolchain,
        )

    assert info.value.step == "csharp"
    assert info.value.returncode == 1
    assert [name for name, _inv in toolchain.calls] == ["csharp"]


def test_runBuilds_godotFailure_raises(dirs, tmp_path: Path) -> None:
    projectDir, modDir = dirs
    toolchain = FakeToolchain(sceneStatus=3)
    settings = ToolchainSettings(godot_path=tmp_path / "godot.exe")

    with pytest.raises(BuildFailedError) as info:
        runBuilds(_descriptor(godot="godot/project.godot"), projectDir, modDir, settings, toolchain)
    assert info.value.step == "godot"


def test_runBuilds_launchFailure_isBuildFailed(dirs, tmp_path: Path) -> None:
    class MissingDotnet(FakeToolchain):
        def runManagedBuild(self, invocation):
            raise FileNotFoundError("dotnet")

    projectDir, modDir = dirs
    with pytest.raises(BuildFailedError) as info:
        runBuilds(
            _descriptor(csharp="a.csproj"), projectDir, modDir,
            ToolchainSettings(gdweave_path=tmp_path), MissingDotnet(),
        )
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_ensureExportPresets_keepsExistingFile(tmp_path: Path) -> None:
    presets = tmp_path / "export_presets.cfg"
    presets.write_text("[preset.0]\nname=\"custom\"\n", encoding="utf-8")

    ensureExportPresets(tmp_path)

    assert presets.read_text(encoding="utf-8") == "[preset.0]\nname=\"custom\"\n"

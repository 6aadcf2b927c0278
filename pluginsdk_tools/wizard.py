"""Installs Visual Studio project templates for every configured game."""

from __future__ import annotations

import argparse
import sys
from dataclasses import fields
from pathlib import Path

from .settings import AppSettings
from .template_generator import (
    Game,
    GenerationFlags,
    GenerationSettings,
    TemplateError,
    generate_template,
)

DEFAULT_VS_VERSION = 2010

_GAMES = (
    (Game.SA, "GTASA", "sa", "D3D9", False),
    (Game.VC, "GTAVC", "vc", "D3D8toD3D9", True),
    (Game.III, "GTAIII", "iii", "D3D8toD3D9", True),
)


def make_path_line(path: str) -> str:
    """Use backslashes and make sure the path ends with one."""
    path = path.replace("/", "\\")
    if not path.endswith("\\"):
        path += "\\"
    return path


def vs_version_from_documents_path(path: str) -> int:
    """Return the first Visual Studio year (2010 to 2017) named in ``path``, or 0."""
    return next((v for v in range(2010, 2018) if str(v) in path), 0)


def environment_settings() -> AppSettings:
    """Return settings that refer to the SDK environment variables."""
    return AppSettings(
        plugin_sdk_folder="$(PLUGIN_SDK_DIR)",
        directx9_sdk_folder="$(DIRECTX9_SDK_DIR)",
        rwd3d9_folder="$(RWD3D9_DIR)",
        sa_cleo_sdk_folder="$(CLEO_SDK_SA_DIR)",
        vc_cleo_sdk_folder="$(CLEO_SDK_VC_DIR)",
        iii_cleo_sdk_folder="$(CLEO_SDK_III_DIR)",
        sa_asi_output_folder="$(GTA_SA_DIR)\\scripts",
        vc_asi_output_folder="$(GTA_VC_DIR)\\scripts",
        iii_asi_output_folder="$(GTA_III_DIR)\\scripts",
        sa_cleo_output_folder="$(GTA_SA_DIR)\\cleo",
        vc_cleo_output_folder="$(GTA_VC_DIR)\\cleo",
        iii_cleo_output_folder="$(GTA_III_DIR)\\cleo",
    )


def generate_all(settings: AppSettings, templates_dir: str | Path) -> tuple[int, list[Path]]:
    """Generate every template the settings allow.

    Returns the Visual Studio version used and the archives written.  A
    template that fails is reported on stderr and skipped.
    """
    templates_dir = Path(templates_dir)
    if not settings.vs_documents_folder:
        return 0, []
    if not Path(settings.vs_documents_folder).is_dir():
        raise TemplateError(
            "Unable to install Project Templates for Visual Studio:\n"
            f'directory "{settings.vs_documents_folder}" does not exist'
        )

    gen = GenerationSettings(
        vs_documents_path=make_path_line(settings.vs_documents_folder),
        plugin_sdk_path=make_path_line(settings.plugin_sdk_folder or "$(PLUGIN_SDK_DIR)"),
    )
    rwd3d9_available = bool(settings.rwd3d9_folder)
    d3d9_available = bool(settings.directx9_sdk_folder)
    if rwd3d9_available:
        gen.rwd3d9_path = make_path_line(settings.rwd3d9_folder)
    if d3d9_available:
        gen.d3d9_sdk_path = make_path_line(settings.directx9_sdk_folder)

    version = vs_version_from_documents_path(gen.vs_documents_path)
    if not version:
        print(
            f'Warning: Can\'t determine Visual Studio version (path: "{gen.vs_documents_path}"). '
            f"Settings VS version to default ({DEFAULT_VS_VERSION})",
            file=sys.stderr,
        )
        version = DEFAULT_VS_VERSION
    if not (templates_dir / f"vs{version}").is_dir():
        print(
            f'Error: Directory for VS version "{version}" does not exist '
            f'("{templates_dir / f"vs{version}"}"). '
            f"Settings VS version to default ({DEFAULT_VS_VERSION})",
            file=sys.stderr,
        )
        version = DEFAULT_VS_VERSION

    archives: list[Path] = []

    def run(name: str, game: Game, flags: GenerationFlags) -> None:
        try:
            archives.append(generate_template(templates_dir, name, version, game, flags, gen))
        except TemplateError as error:
            print(f"Error: {error}", file=sys.stderr)

    la, d3d9, cleo = GenerationFlags.LA, GenerationFlags.D3D9, GenerationFlags.CLEO
    for game, base, prefix, d3d_label, needs_rw in _GAMES:
        asi_output = getattr(settings, f"{prefix}_asi_output_folder")
        if not asi_output:
            continue
        d3d_ok = d3d9_available and (rwd3d9_available or not needs_rw)
        setattr(gen, f"{prefix}_asi_output_path", make_path_line(asi_output))
        run(base, game, GenerationFlags.NONE)
        run(f"{base}_1LA", game, la)
        if d3d_ok:
            run(f"{base}_{d3d_label}", game, d3d9)
            run(f"{base}_{d3d_label}_1LA", game, d3d9 | la)
        cleo_sdk = getattr(settings, f"{prefix}_cleo_sdk_folder")
        if not cleo_sdk:
            continue
        setattr(gen, f"{prefix}_cleo_sdk_path", make_path_line(cleo_sdk))
        cleo_output = getattr(settings, f"{prefix}_cleo_output_folder")
        if not cleo_output:
            continue
        setattr(gen, f"{prefix}_cleo_output_path", make_path_line(cleo_output))
        run(f"{base}_CLEO", game, cleo)
        run(f"{base}_CLEO_1LA", game, cleo | la)
        if d3d_ok:
            run(f"{base}_CLEO_{d3d_label}", game, cleo | d3d9)
            run(f"{base}_CLEO_{d3d_label}_1LA", game, cleo | d3d9 | la)
    return version, archives


def main(argv: list[str] | None = None) -> int:
    """Command entry point: save the given folders and install the templates."""
    parser = argparse.ArgumentParser(description="Install Plugin-SDK project templates.")
    parser.add_argument("--settings", default="settings.ini", help="settings file")
    parser.add_argument("--templates", default="templates", help="templates folder")
    parser.add_argument(
        "--use-environment-variables",
        action="store_true",
        help="refer to the SDK environment variables",
    )
    for item in fields(AppSettings):
        parser.add_argument("--" + item.name.replace("_", "-"), dest=item.name)
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    settings = AppSettings()
    settings.read(args.settings)
    if args.use_environment_variables:
        env = environment_settings()
        for item in fields(AppSettings):
            if item.name != "vs_documents_folder":
                setattr(settings, item.name, getattr(env, item.name))
    for item in fields(AppSettings):
        value = getattr(args, item.name)
        if value is not None:
            setattr(settings, item.name, value)
    try:
        settings.write(args.settings)
    except OSError as error:
        print(f"Error: can't write settings: {error}", file=sys.stderr)
        return 1

    if not settings.vs_documents_folder:
        print("Error: Visual Studio documents folder is not set", file=sys.stderr)
        return 1
    try:
        version, _ = generate_all(settings, args.templates)
    except TemplateError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    print(f"Successfully installed Project Templates for Visual Studio {version}")
    return 0
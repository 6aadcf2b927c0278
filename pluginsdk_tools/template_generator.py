"""Generates Visual Studio project templates for the plugin SDK."""

from __future__ import annotations

import enum
import zipfile
from dataclasses import dataclass
from pathlib import Path

from .project_item_file import ProjectItemFile

_CPP_STD = "c++14"
_TOOL_CMD = '"$(PLUGIN_SDK_DIR)\\tools\\general\\pluginsdk-build.exe" '


class Game(enum.Enum):
    """The games a template can target."""

    SA = 0
    VC = 1
    III = 2


class GenerationFlags(enum.IntFlag):
    """Optional features of a template."""

    NONE = 0
    D3D9 = 1
    CLEO = 2
    LA = 4


class TemplateError(Exception):
    """Raised when a template cannot be generated."""


@dataclass
class GenerationSettings:
    """Folders that go into the generated projects."""

    vs_documents_path: str = ""
    plugin_sdk_path: str = ""
    d3d9_sdk_path: str = ""
    rwd3d9_path: str = ""
    vc_cleo_sdk_path: str = ""
    sa_cleo_sdk_path: str = ""
    iii_cleo_sdk_path: str = ""
    vc_asi_output_path: str = ""
    sa_asi_output_path: str = ""
    iii_asi_output_path: str = ""
    vc_cleo_output_path: str = ""
    sa_cleo_output_path: str = ""
    iii_cleo_output_path: str = ""


@dataclass(frozen=True)
class _GameInfo:
    prefix: str
    short_name: str
    long_name: str
    icon: str
    include: str
    plugin_dir: str
    game_dir: str
    define: str
    game_name: str
    abbr: str
    abbr_low: str
    protagonist: str
    city: str
    cleo_library: str
    plugin_library: str
    d3d_label: str


_GAMES = {
    Game.SA: _GameInfo(
        "sa", "GTA SA ", "A project for GTA San Andreas ", "SA.ico", "plugin.h",
        "plugin_sa", "game_sa", "GTASA", "San Andreas", "SA", "sa", "CJ", "San Andreas",
        "cleo", "plugin", "D3D9",
    ),
    Game.VC: _GameInfo(
        "vc", "GTA VC ", "A project for GTA Vice City ", "VC.ico", "plugin_vc.h",
        "plugin_vc", "game_vc", "GTAVC", "Vice City", "VC", "vc", "Tommy", "Vice City",
        "VC.CLEO", "plugin_vc", "D3D8toD3D9",
    ),
    Game.III: _GameInfo(
        "iii", "GTA III ", "A project for GTA III ", "III.ico", "plugin_III.h",
        "plugin_III", "game_III", "GTA3", "3", "3", "3", "Claude", "Liberty City",
        "III.CLEO", "plugin_III", "D3D8toD3D9",
    ),
}


def _add_csv(line: str, value: str) -> str:
    return value if not line else f"{line};{value}"


def library_name(vs_version: int, name: str) -> str:
    """Return the library name as the given Visual Studio version expects it."""
    return f"{name}.lib" if vs_version >= 2015 else name


def to_csv(value: str, at_begin: bool) -> str:
    """Return ``value`` with a separator before or after it; empty stays empty."""
    if not value:
        return ""
    return f";{value}" if at_begin else f"{value};"


def template_title(game: Game, flags: GenerationFlags) -> tuple[str, str, str]:
    """Return the template's name, description and icon file name."""
    info = _GAMES[game]
    name, description = info.short_name, info.long_name
    kind = "CLEO plugin" if flags & GenerationFlags.CLEO else ".ASI plugin"
    name += kind
    description += kind
    if flags & GenerationFlags.D3D9:
        name += f" ({info.d3d_label}"
        description += f" with {info.d3d_label}"
        if flags & GenerationFlags.LA:
            name += "+LA comp."
            description += " and Limit Adjuster compatibility"
        name += ")"
        description += ")"
    elif flags & GenerationFlags.LA:
        name += " (+LA comp.)"
        description += " with Limit Adjuster compatibility"
    return name, description, info.icon


def _load(path: Path) -> ProjectItemFile:
    item = ProjectItemFile()
    try:
        item.read(path)
    except OSError as error:
        raise TemplateError(f'Can\'t open file "{path}"') from error
    return item


def _save(item: ProjectItemFile, path: Path) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        item.write(path)
    except OSError as error:
        raise TemplateError(f'Can\'t open file "{path}"') from error
    return path


def process_main_cpp(templates_dir: str | Path, game: Game) -> Path:
    """Write the game's main source file into the temporary folder."""
    templates_dir = Path(templates_dir)
    main_cpp = _load(templates_dir / "Main.cpp")
    main_cpp.set_lines_value('#include "plugin.h"', f'#include "{_GAMES[game].include}"')
    return _save(main_cpp, templates_dir / "temp" / "Main.cpp")


def process_vstemplate(
    templates_dir: str | Path, game: Game, vs_version: int, flags: GenerationFlags
) -> Path:
    """Write the template description file into the temporary folder."""
    templates_dir = Path(templates_dir)
    vstemplate = _load(templates_dir / f"vs{vs_version}" / "MyTemplate.vstemplate")
    name, description, icon = template_title(game, flags)
    vstemplate.set_nodes_value("Name", name)
    vstemplate.set_nodes_value("Description", description)
    vstemplate.set_nodes_value("Icon", icon)
    return _save(vstemplate, templates_dir / "temp" / "MyTemplate.vstemplate")


def process_project(
    templates_dir: str | Path,
    game: Game,
    vs_version: int,
    flags: GenerationFlags,
    settings: GenerationSettings,
) -> Path:
    """Write the project file, with build commands, into the temporary folder."""
    templates_dir = Path(templates_dir)
    project = _load(templates_dir / f"vs{vs_version}" / "Project.vcxproj")
    info = _GAMES[game]
    sdk = settings.plugin_sdk_path
    definitions = include_folders = lib_folders = dependencies = ""
    vc_includes = vc_libraries = ""

    if vs_version >= 2015:
        lib_folders = _add_csv(lib_folders, sdk + "output\\lib\\")
        for define in ("_USING_V110_SDK71_", "_CRT_SECURE_NO_WARNINGS",
                       "_CRT_NON_CONFORMING_SWPRINTFS"):
            definitions = _add_csv(definitions, define)
    else:
        lib_folders = _add_csv(lib_folders, sdk + "output\\mingw\\lib\\")

    if flags & GenerationFlags.LA:
        definitions = _add_csv(definitions, "_PLUGIN_LA_COMP")

    include_folders = _add_csv(include_folders, f"{sdk}{info.plugin_dir}\\")
    include_folders = _add_csv(include_folders, f"{sdk}{info.plugin_dir}\\{info.game_dir}\\")
    kind = "cleo" if flags & GenerationFlags.CLEO else "asi"
    out_dir = getattr(settings, f"{info.prefix}_{kind}_output_path")
    for define in (
        info.define,
        f'GTAGAME_NAME="{info.game_name}"',
        f'GTAGAME_ABBR="{info.abbr}"',
        f'GTAGAME_ABBRLOW="{info.abbr_low}"',
        f'GTAGAME_PROTAGONISTNAME="{info.protagonist}"',
        f'GTAGAME_CITYNAME="{info.city}"',
    ):
        definitions = _add_csv(definitions, define)

    if flags & GenerationFlags.D3D9:
        vc_includes = _add_csv(vc_includes, settings.d3d9_sdk_path + "Include\\")
        vc_libraries = _add_csv(vc_libraries, settings.d3d9_sdk_path + "Lib\\x86\\")
        dependencies = _add_csv(dependencies, library_name(vs_version, "d3d9"))
        dependencies = _add_csv(dependencies, library_name(vs_version, "d3dx9"))
        if game is not Game.SA:
            dependencies = _add_csv(dependencies, library_name(vs_version, "rwd3d9"))
            include_folders = _add_csv(include_folders, settings.rwd3d9_path + "source\\")
            lib_folders = _add_csv(lib_folders, settings.rwd3d9_path + "libs\\")
        definitions = _add_csv(definitions, "_DX9_SDK_INSTALLED")

    if flags & GenerationFlags.CLEO:
        extension = ".cleo"
        cleo_sdk = getattr(settings, f"{info.prefix}_cleo_sdk_path")
        include_folders = _add_csv(include_folders, cleo_sdk)
        lib_folders = _add_csv(lib_folders, cleo_sdk)
        dependencies = _add_csv(dependencies, library_name(vs_version, info.cleo_library))
    else:
        extension = ".asi"

    plugin_lib = info.plugin_library

    project.set_nodes_value("OutDir", out_dir)
    project.set_nodes_value("NMakeOutput", "$(ProjectName)" + extension,
                            "$TargetNameRelease$", True)
    project.set_nodes_value("NMakeOutput", "$(ProjectName)_d" + extension,
                            "$TargetNameDebug$", True)
    project.set_nodes_value("NMakePreprocessorDefinitions",
                            definitions + ";NDEBUG;$(NMakePreprocessorDefinitions)",
                            "$PreprocessorDefinitionsRelease$", True)
    project.set_nodes_value("NMakePreprocessorDefinitions",
                            definitions + ";_DEBUG;$(NMakePreprocessorDefinitions)",
                            "$PreprocessorDefinitionsDebug$", True)
    if vc_includes:
        search_path = f"{vc_includes};{include_folders};$(NMakeIncludeSearchPath)"
    else:
        search_path = f"{include_folders};$(NMakeIncludeSearchPath)"
    project.set_nodes_value("NMakeIncludeSearchPath", search_path)

    build_config = "buildtype:(DLL) "
    proj_config = 'projectdir:"($(ProjectDir))" projectname:"($(ProjectName))" '
    out_dirs = {
        config: f'outdir:"({out_dir})" intdir:"($(ProjectDir).obj\\{config}\\)" '
        for config in ("Release", "Debug")
    }
    target_names = {
        "Release": f'targetname:"($(ProjectName){extension})" ',
        "Debug": f'targetname:"($(ProjectName)_d{extension})" ',
    }
    all_include_dirs = _add_csv(_add_csv(_add_csv("", vc_includes), "$(ProjectDir)"),
                                include_folders)
    all_library_dirs = _add_csv(_add_csv("", vc_libraries), lib_folders)
    escaped_definitions = definitions.replace('"', "&lt;&gt;")
    deps_csv = to_csv(dependencies, True)
    libraries = {
        "Release": f'libraries:"(paths;{plugin_lib}{deps_csv})" ',
        "Debug": f'libraries:"(paths_d;{plugin_lib}_d{deps_csv})" ',
    }
    defines = {
        "Release": f'definitions:"({escaped_definitions};NDEBUG)" ',
        "Debug": f'definitions:"({escaped_definitions};_DEBUG)" ',
    }
    additional = {
        "Release": f'additional:"(-std={_CPP_STD} -m32 -O2 -fpermissive)" ',
        "Debug": f'additional:"(-std={_CPP_STD} -m32 -g -fpermissive)" ',
    }
    link_additional = {
        "Release": 'linkadditional:"(-s -static-libgcc -static-libstdc++)"',
        "Debug": 'linkadditional:"(-static-libgcc -static-libstdc++)"',
    }

    for config in ("Release", "Debug"):
        options = (
            f'includeDirs:"({all_include_dirs})" '
            f'libraryDirs:"({all_library_dirs})" '
            + libraries[config] + defines[config] + additional[config] + link_additional[config]
        )
        common = proj_config + target_names[config] + out_dirs[config]
        project.set_nodes_value(
            "NMakeBuildCommandLine",
            _TOOL_CMD + "build " + build_config + common + options,
            f"$BuildCommandLine{config}$", True,
        )
        project.set_nodes_value(
            "NMakeReBuildCommandLine",
            _TOOL_CMD + "rebuild " + build_config + common + options,
            f"$RebuildCommandLine{config}$", True,
        )
        project.set_nodes_value(
            "NMakeCleanCommandLine",
            _TOOL_CMD + "clean " + common,
            f"$CleanCommandLine{config}$", True,
        )

    return _save(project, templates_dir / "temp" / "Project.vcxproj")


def generate_template(
    templates_dir: str | Path,
    file_name: str,
    vs_version: int,
    game: Game,
    flags: GenerationFlags,
    settings: GenerationSettings,
) -> Path:
    """Build a template archive in the Visual Studio documents folder; return its path."""
    templates_dir = Path(templates_dir)
    files = [
        process_main_cpp(templates_dir, game),
        process_project(templates_dir, game, vs_version, flags, settings),
        process_vstemplate(templates_dir, game, vs_version, flags),
        templates_dir / f"vs{vs_version}" / "Project.vcxproj.filters",
        templates_dir / _GAMES[game].icon,
    ]
    documents_path = settings.vs_documents_path
    if not documents_path.endswith(f"vs{vs_version}\\"):
        documents_path += "Templates\\ProjectTemplates\\Plugin-SDK\\"
    sub_folder = "CLEO" if flags & GenerationFlags.CLEO else "ASI"
    archive = Path(documents_path.replace("\\", "/")) / sub_folder / f"{file_name}.zip"
    try:
        archive.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as bundle:
            for path in files:
                bundle.write(path, arcname=path.name)
    except OSError as error:
        raise TemplateError(f"can't create .zip archive ({archive})") from error
    return archive
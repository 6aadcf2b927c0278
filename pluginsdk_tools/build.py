"""Builds a Visual Studio project's sources with the GNU toolchain."""

from __future__ import annotations

import enum
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

VERSION = "1.1.2"

ERROR_NOT_ENOUGH_PARAMETERS = 1
ERROR_UNKNOWN_BUILD_COMMAND = 2
ERROR_BUILD_TYPE_NOT_SET = 3
ERROR_UNKNOWN_BUILD_TYPE = 4
ERROR_PROJECT_DIR_NOT_SET = 5
ERROR_PROJECT_NAME_NOT_SET = 6
ERROR_TARGET_NAME_NOT_SET = 7
ERROR_INT_DIR_NOT_SET = 8
ERROR_CANT_OPEN_PROJECT_FILE = 9
ERROR_CANT_OPEN_INT_DIR = 10
ERROR_CANT_COMPILE_FILE = 11
ERROR_CANT_OPEN_OUTPUT_DIRECTORY = 12
ERROR_FAILED_TO_LINK_OBJECTS = 13

_INCLUDE_TAG = '<ClCompile Include="'


class BuildCommand(enum.Enum):
    """What the tool was asked to do."""

    BUILD = "build"
    REBUILD = "rebuild"
    CLEAN = "clean"


class BuildError(Exception):
    """A build failure carrying the tool's exit code."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass
class BuildParameters:
    """Options collected from the command line."""

    fulllog: bool = False
    buildtype: str = ""
    projectdir: str = ""
    projectname: str = ""
    targetname: str = ""
    outdir: str = ""
    intdir: str = ""
    definitions: list[str] = field(default_factory=list)
    include_dirs: list[str] = field(default_factory=list)
    library_dirs: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    additional: str = ""
    linkadditional: str = ""


def _unwrap(arg: str) -> str:
    if len(arg) < 2 or not arg.startswith("(") or not arg.endswith(")"):
        print(f"Warning: incorrect parameter {arg}")
    return arg[1:len(arg) - 1] if len(arg) >= 2 else ""


def read_one_parameter(arg: str) -> str:
    """Read a ``(value)`` parameter; only the part before a ``;`` is kept."""
    return _unwrap(arg).split(";", 1)[0]


def read_parameters(arg: str) -> list[str]:
    """Read a ``(a;b;c)`` parameter into its values."""
    return _unwrap(arg).split(";")


_SINGLE_OPTIONS = {
    "buildtype:": "buildtype",
    "projectdir:": "projectdir",
    "projectname:": "projectname",
    "targetname:": "targetname",
    "outdir:": "outdir",
    "intdir:": "intdir",
    "additional:": "additional",
    "linkadditional:": "linkadditional",
}

_LIST_OPTIONS = {
    "includeDirs:": "include_dirs",
    "libraryDirs:": "library_dirs",
    "libraries:": "libraries",
}


def parse_arguments(argv: list[str]) -> tuple[BuildCommand, BuildParameters]:
    """Parse ``<command> <option>...`` and check the required options."""
    if not argv:
        raise BuildError(ERROR_NOT_ENOUGH_PARAMETERS, "not enough parameters")
    try:
        command = BuildCommand(argv[0])
    except ValueError:
        raise BuildError(ERROR_UNKNOWN_BUILD_COMMAND, "unknown build command") from None

    params = BuildParameters()
    for arg in argv[1:]:
        single = next((p for p in _SINGLE_OPTIONS if arg.startswith(p)), None)
        listed = next((p for p in _LIST_OPTIONS if arg.startswith(p)), None)
        if single is not None:
            setattr(params, _SINGLE_OPTIONS[single], read_one_parameter(arg[len(single):]))
        elif arg.startswith("definitions:"):
            params.definitions.extend(read_parameters(arg[len("definitions:"):]))
            params.definitions = [
                d.replace("<", "\\").replace(">", '"') for d in params.definitions
            ]
        elif listed is not None:
            getattr(params, _LIST_OPTIONS[listed]).extend(read_parameters(arg[len(listed):]))
        elif arg.startswith("fulllog"):
            params.fulllog = True

    building = command is not BuildCommand.CLEAN
    if building and not params.buildtype:
        raise BuildError(ERROR_BUILD_TYPE_NOT_SET, "buildtype is not set")
    if building and params.buildtype not in ("DLL", "LIB"):
        raise BuildError(ERROR_UNKNOWN_BUILD_TYPE, "unknown buildtype")
    if not params.projectdir:
        raise BuildError(ERROR_PROJECT_DIR_NOT_SET, "projectdir is not set")
    if not params.projectname:
        raise BuildError(ERROR_PROJECT_NAME_NOT_SET, "projectname is not set")
    if not params.targetname:
        raise BuildError(ERROR_TARGET_NAME_NOT_SET, "targetname is not set")
    if params.outdir in ("", "\\", "/"):
        params.outdir = params.projectdir
    if not params.intdir:
        raise BuildError(ERROR_INT_DIR_NOT_SET, "intdir is not set")
    return command, params


def read_project_sources(project_file: str | Path) -> list[str]:
    """Return the ``ClCompile`` source paths listed in a project file."""
    try:
        text = Path(project_file).read_text()
    except OSError:
        raise BuildError(
            ERROR_CANT_OPEN_PROJECT_FILE, f"can't open project file {project_file}"
        ) from None
    sources = []
    for line in text.splitlines():
        stripped = line.lstrip(" \t")
        if stripped.startswith(_INCLUDE_TAG):
            end = stripped.find('"', len(_INCLUDE_TAG))
            if end != -1:
                sources.append(stripped[len(_INCLUDE_TAG):end])
    return sources


def _source_path(params: BuildParameters, source: str) -> Path:
    return (Path(params.projectdir) / source.replace("\\", "/")).resolve()


def _object_path(params: BuildParameters, source: str) -> Path:
    name = _source_path(params, source).stem + ".o"
    return Path(params.intdir).resolve() / params.projectname / name


def compile_command(params: BuildParameters, source: str | Path, object_file: str | Path) -> str:
    """Return the compiler arguments for one source file."""
    parts = []
    if params.additional:
        parts.append(params.additional + " ")
    parts.extend(f'-D"{d}" ' for d in params.definitions)
    parts.extend(f'-I"{Path(d).resolve()}" ' for d in params.include_dirs)
    parts.append(f'-c "{source}" ')
    parts.append(f'-o "{object_file}"')
    return "".join(parts)


def link_command(params: BuildParameters, sources: Iterable[str], output_path: str | Path) -> str:
    """Return the archiver or linker arguments for the output file."""
    is_lib = params.buildtype == "LIB"
    parts = ["-r -s " if is_lib else "-shared -Wl,--dll "]
    if params.linkadditional:
        parts.append(params.linkadditional + " ")
    if not is_lib:
        parts.append("-o ")
    parts.append(f'"{output_path}" ')
    parts.extend(f'"{_object_path(params, s)}" ' for s in sources)
    parts.extend(f'-L"{Path(d).resolve()}" ' for d in params.library_dirs)
    parts.extend(f'-l"{lib}" ' for lib in params.libraries)
    return "".join(parts)


def _execute(tool: str, command: str) -> int:
    args: str | list[str]
    if os.name == "nt":
        args = f"{tool} {command}"
    else:
        args = [tool, *shlex.split(command)]
    try:
        return subprocess.run(args).returncode
    except OSError as error:
        return error.errno or 1


def clean(params: BuildParameters, sources: Iterable[str]) -> list[Path]:
    """Delete the object files and the output file; return what was deleted."""
    deleted = []
    intdir = Path(params.intdir).resolve()
    candidates = [intdir / (_source_path(params, s).stem + ".o") for s in sources]
    candidates.append(Path(params.outdir).resolve() / params.targetname)
    for path in candidates:
        if path.exists():
            path.unlink()
            deleted.append(path)
            if params.fulllog:
                print(f"Deleting: {path}")
    return deleted


def build(params: BuildParameters, sources: list[str]) -> Path | None:
    """Compile every source and link the output; return the output path."""
    if not sources:
        print("Warning: no files for compilation")
        return None

    objects_dir = Path(params.intdir) / params.projectname
    if objects_dir.exists():
        for old in [p for p in objects_dir.iterdir() if p.suffix == ".o"]:
            old.unlink()
    else:
        try:
            objects_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass
        if not objects_dir.exists():
            raise BuildError(ERROR_CANT_OPEN_INT_DIR, "can't open intdir directory")

    print("Compiling...")
    for source in sources:
        source_path = _source_path(params, source)
        object_path = _object_path(params, source)
        if params.fulllog:
            print(f"Compiling: relative:  {source}")
            print(f"Compiling: canonical: {source_path}")
            print(f"Compiling: object:    {object_path}")
        command = compile_command(params, source_path, object_path)
        if params.fulllog:
            print(f"Compiling: {source_path.name} : {command}")
        else:
            print(source_path.name)
        if _execute("g++", command) != 0:
            raise BuildError(
                ERROR_CANT_COMPILE_FILE, f"can't compile {source_path.name} ({source_path})"
            )

    outdir = Path(params.outdir)
    if not outdir.exists():
        try:
            outdir.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass
        if not outdir.exists():
            raise BuildError(ERROR_CANT_OPEN_OUTPUT_DIRECTORY, "can't open outdir directory")

    print("Linking...")
    output_path = outdir.resolve() / params.targetname
    command = link_command(params, sources, output_path)
    if params.fulllog:
        print(f"Linking: {command}")
    tool = "ar" if params.buildtype == "LIB" else "g++"
    if _execute(tool, command) != 0:
        raise BuildError(
            ERROR_FAILED_TO_LINK_OBJECTS, f"failed to link objects (command: {command})"
        )
    size = output_path.stat().st_size / 1024.0 if output_path.exists() else 0.0
    print(f"{params.projectname}.vcxproj -> {output_path} ({size:.2f} KB)")
    return output_path


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``build|rebuild|clean <option>...``."""
    args = sys.argv[1:] if argv is None else argv
    print(f">>> Plugin-SDK Build Tool v.{VERSION} <<<")
    try:
        command, params = parse_arguments(args)
        sources = read_project_sources(params.projectdir + params.projectname + ".vcxproj")
        if command is BuildCommand.CLEAN:
            clean(params, sources)
        else:
            build(params, sources)
    except BuildError as error:
        print(f"Error: {error}")
        return error.code
    return 0
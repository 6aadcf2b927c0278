"""Installs the project wizard into a Code::Blocks installation."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Iterable

FUNCTION_BEGIN = "function RegisterWizards()"
REGISTER_LINE = (
    '\n    RegisterWizard(wizProject,     _T("pluginsdk"),    '
    '_T("Plugin-SDK project"),    _T("Plugin-SDK"));\n'
)


class WizardInstallError(Exception):
    """Raised when the wizard cannot be installed."""


def register_wizard(lines: Iterable[str]) -> str | None:
    """Return the script text with the wizard registered.

    ``lines`` are the script's lines without line endings.  Returns None when
    the wizard is already registered.
    """
    out: list[str] = []
    function_found = False
    in_function = False
    for line in lines:
        if not function_found and line.startswith(FUNCTION_BEGIN):
            function_found = True
            in_function = True
        elif in_function:
            if line.startswith("}"):
                in_function = False
                out.append(REGISTER_LINE)
            elif "RegisterWizard" in line and "pluginsdk" in line and "Plugin-SDK project" in line:
                return None
        out.append(line + "\n")
    return "".join(out)


def install_wizard(codeblocks_dir: str | Path, plugin_sdk_dir: str | Path) -> bool:
    """Copy the wizard files and register the wizard.

    Returns True if the wizard was already registered (an update) and False
    if it was newly registered.
    """
    codeblocks_dir = Path(codeblocks_dir)
    plugin_sdk_dir = Path(plugin_sdk_dir)
    if not codeblocks_dir.is_dir():
        raise WizardInstallError(f"Code::Blocks directory ('{codeblocks_dir}') does not exist")
    wizard_root = codeblocks_dir / "share" / "CodeBlocks" / "templates" / "wizard"
    script_file = wizard_root / "config.script"
    if not script_file.is_file():
        raise WizardInstallError(f"Code::Blocks script file ('{script_file}') does not exist")
    wizard_dir = plugin_sdk_dir / "tools" / "templates" / "codeblocks" / "pluginsdk"
    if not wizard_dir.is_dir():
        raise WizardInstallError(f"Wizard directory ('{wizard_dir}') does not exist")
    try:
        shutil.copytree(wizard_dir, wizard_root / "pluginsdk", dirs_exist_ok=True)
    except OSError as error:
        raise WizardInstallError(f"Failed to copy Wizard directory:\n{error}") from error
    try:
        text = script_file.read_text()
    except OSError as error:
        raise WizardInstallError("Can't open config.script file for reading") from error
    new_text = register_wizard(text.splitlines())
    if new_text is None:
        return True
    try:
        script_file.write_text(new_text)
    except OSError as error:
        raise WizardInstallError("Can't open config.script file for writing") from error
    return False


def main(argv: list[str] | None = None) -> int:
    """Command entry point: ``<codeblocks dir> <plugin-sdk dir>``."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 2:
        print(f"Error: Not enough parameters ({len(args) + 1}, expected 3)", file=sys.stderr)
        return 1
    try:
        updated = install_wizard(args[0], args[1])
    except WizardInstallError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    action = "updated" if updated else "installed"
    print(f"Successfully {action} Plugin-SDK Project Wizard for Code::Blocks")
    return 0
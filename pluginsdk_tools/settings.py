"""Persistent folder settings of the project template wizard."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, fields
from pathlib import Path

GENERAL_SECTION = "General"

_KEYS = {
    "plugin_sdk_folder": "PLUGIN_SDK_FOLDER",
    "directx9_sdk_folder": "DIRECTX9_SDK_FOLDER",
    "rwd3d9_folder": "RWD3D9_FOLDER",
    "vs_documents_folder": "VS_DOCUMENTS_FOLDER",
    "sa_asi_output_folder": "SA/ASI_PLUGINS_OUTPUT_FOLDER",
    "sa_cleo_output_folder": "SA/CLEO_PLUGINS_OUTPUT_FOLDER",
    "sa_cleo_sdk_folder": "SA/CLEO_SDK_FOLDER",
    "vc_asi_output_folder": "VC/ASI_PLUGINS_OUTPUT_FOLDER",
    "vc_cleo_output_folder": "VC/CLEO_PLUGINS_OUTPUT_FOLDER",
    "vc_cleo_sdk_folder": "VC/CLEO_SDK_FOLDER",
    "iii_asi_output_folder": "III/ASI_PLUGINS_OUTPUT_FOLDER",
    "iii_cleo_output_folder": "III/CLEO_PLUGINS_OUTPUT_FOLDER",
    "iii_cleo_sdk_folder": "III/CLEO_SDK_FOLDER",
}


def _split_key(key: str) -> tuple[str, str]:
    section, _, option = key.rpartition("/")
    return section or GENERAL_SECTION, option


def _load(path: str | Path) -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keep key case
    parser.read(path, encoding="utf-8")
    return parser


@dataclass
class AppSettings:
    """Folders remembered between runs, stored in an INI file."""

    plugin_sdk_folder: str = ""
    directx9_sdk_folder: str = ""
    rwd3d9_folder: str = ""
    vs_documents_folder: str = ""
    sa_asi_output_folder: str = ""
    sa_cleo_output_folder: str = ""
    sa_cleo_sdk_folder: str = ""
    vc_asi_output_folder: str = ""
    vc_cleo_output_folder: str = ""
    vc_cleo_sdk_folder: str = ""
    iii_asi_output_folder: str = ""
    iii_cleo_output_folder: str = ""
    iii_cleo_sdk_folder: str = ""

    def read(self, path: str | Path) -> None:
        """Load the settings from ``path``; missing values become empty."""
        parser = _load(path)
        for item in fields(self):
            section, option = _split_key(_KEYS[item.name])
            setattr(self, item.name, parser.get(section, option, fallback=""))

    def write(self, path: str | Path) -> None:
        """Store the settings in ``path``, keeping any other values in it."""
        parser = _load(path)
        for item in fields(self):
            section, option = _split_key(_KEYS[item.name])
            if not parser.has_section(section):
                parser.add_section(section)
            parser.set(section, option, getattr(self, item.name))
        with open(path, "w", encoding="utf-8") as stream:
            parser.write(stream)
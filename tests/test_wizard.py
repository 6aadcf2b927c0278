import zipfile

import pytest

from pluginsdk_tools.settings import AppSettings
from pluginsdk_tools.template_generator import TemplateError
from pluginsdk_tools.wizard import (
    environment_settings,
    generate_all,
    main,
    make_path_line,
    vs_version_from_documents_path,
)


@pytest.fixture
def templates(tmp_path):
    root = tmp_path / "templates"
    vs = root / "vs2015"
    vs.mkdir(parents=True)
    (root / "Main.cpp").write_text('#include "plugin.h"\n\nusing namespace plugin;\n')
    (vs / "MyTemplate.vstemplate").write_text(
        "<VSTemplate>\n  <Name>x</Name>\n  <Description>x</Description>\n  <Icon>x</Icon>\n</VSTemplate>"
    )
    (vs / "Project.vcxproj").write_text(
        "<Project>\n  <OutDir>x</OutDir>\n"
        "  <NMakeOutput>$TargetNameRelease$</NMakeOutput>\n</Project>"
    )
    (vs / "Project.vcxproj.filters").write_text("<Project/>")
    for icon in ("SA.ico", "VC.ico", "III.ico"):
        (root / icon).write_bytes(b"\x00")
    return root


@pytest.fixture
def documents(tmp_path):
    docs = tmp_path / "docs" / "vs2015"
    docs.mkdir(parents=True)
    return docs


def test_make_path_line_converts_slashes():
    assert make_path_line("C:/a/b") == "C:\\a\\b\\"


def test_make_path_line_keeps_trailing_backslash():
    assert make_path_line("C:\\a\\") == "C:\\a\\"


def test_vs_version_found():
    assert vs_version_from_documents_path("C:\\Docs\\Visual Studio 2015\\") == 2015


def test_vs_version_missing():
    assert vs_version_from_documents_path("C:\\Docs\\Visual Studio\\") == 0


def test_environment_settings():
    env = environment_settings()
    assert env.plugin_sdk_folder == "$(PLUGIN_SDK_DIR)"
    assert env.sa_asi_output_folder == "$(GTA_SA_DIR)\\scripts"
    assert env.iii_cleo_output_folder == "$(GTA_III_DIR)\\cleo"
    assert env.vs_documents_folder == ""


def test_generate_all_missing_documents(tmp_path, templates):
    settings = AppSettings(vs_documents_folder=str(tmp_path / "nowhere"))
    with pytest.raises(TemplateError):
        generate_all(settings, templates)


def test_generate_all_without_documents_does_nothing(templates):
    assert generate_all(AppSettings(sa_asi_output_folder="out"), templates) == (0, [])


def test_generate_sa_asi(templates, documents):
    settings = AppSettings(vs_documents_folder=str(documents), sa_asi_output_folder="out")
    version, archives = generate_all(settings, templates)
    assert version == 2015
    assert sorted(a.name for a in archives) == ["GTASA.zip", "GTASA_1LA.zip"]
    with zipfile.ZipFile(archives[0]) as bundle:
        names = set(bundle.namelist())
    assert {"Main.cpp", "Project.vcxproj", "MyTemplate.vstemplate", "SA.ico"} <= names


def test_generate_with_d3d9_and_cleo(templates, documents):
    settings = AppSettings(
        vs_documents_folder=str(documents),
        directx9_sdk_folder="dx",
        sa_asi_output_folder="out",
        sa_cleo_sdk_folder="cleo",
        sa_cleo_output_folder="cleo-out",
        vc_asi_output_folder="vc-out",
    )
    _, archives = generate_all(settings, templates)
    names = {a.name for a in archives}
    assert "GTASA_CLEO_D3D9_1LA.zip" in names
    assert "GTASA_D3D9.zip" in names
    assert "GTAVC_D3D8toD3D9.zip" not in names
    assert len(archives) == 10


def test_main_writes_settings_and_fails_without_documents(tmp_path, templates):
    settings_path = tmp_path / "s.ini"
    code = main([
        "--settings", str(settings_path),
        "--templates", str(templates),
        "--use-environment-variables",
    ])
    assert code == 1
    loaded = AppSettings()
    loaded.read(settings_path)
    assert loaded.rwd3d9_folder == "$(RWD3D9_DIR)"


def test_main_success(tmp_path, templates, documents):
    code = main([
        "--settings", str(tmp_path / "s.ini"),
        "--templates", str(templates),
        "--vs-documents-folder", str(documents),
        "--iii-asi-output-folder", "out",
    ])
    assert code == 0
    assert (documents / "ASI" / "GTAIII.zip").is_file()
import zipfile

import pytest

from pluginsdk_tools.template_generator import (
    Game,
    GenerationFlags,
    GenerationSettings,
    TemplateError,
    generate_template,
    library_name,
    process_main_cpp,
    process_project,
    process_vstemplate,
    template_title,
    to_csv,
)

PROJECT = """<Project>
  <PropertyGroup>
    <OutDir>old</OutDir>
    <NMakeOutput>$TargetNameRelease$</NMakeOutput>
    <NMakeOutput>$TargetNameDebug$</NMakeOutput>
    <NMakePreprocessorDefinitions>$PreprocessorDefinitionsRelease$</NMakePreprocessorDefinitions>
    <NMakePreprocessorDefinitions>$PreprocessorDefinitionsDebug$</NMakePreprocessorDefinitions>
    <NMakeIncludeSearchPath>old</NMakeIncludeSearchPath>
    <NMakeBuildCommandLine>$BuildCommandLineRelease$</NMakeBuildCommandLine>
    <NMakeReBuildCommandLine>$RebuildCommandLineRelease$</NMakeReBuildCommandLine>
    <NMakeCleanCommandLine>$CleanCommandLineRelease$</NMakeCleanCommandLine>
    <NMakeBuildCommandLine>$BuildCommandLineDebug$</NMakeBuildCommandLine>
    <NMakeReBuildCommandLine>$RebuildCommandLineDebug$</NMakeReBuildCommandLine>
    <NMakeCleanCommandLine>$CleanCommandLineDebug$</NMakeCleanCommandLine>
  </PropertyGroup>
</Project>"""

VSTEMPLATE = """<VSTemplate>
  <TemplateData>
    <Name>x</Name>
    <Description>x</Description>
    <Icon>x</Icon>
  </TemplateData>
</VSTemplate>"""

MAIN = '#include "plugin.h"\n\nusing namespace plugin;\n'


@pytest.fixture
def templates(tmp_path):
    root = tmp_path / "templates"
    for version in (2010, 2015):
        folder = root / f"vs{version}"
        folder.mkdir(parents=True)
        (folder / "Project.vcxproj").write_text(PROJECT, encoding="utf-8")
        (folder / "MyTemplate.vstemplate").write_text(VSTEMPLATE, encoding="utf-8")
        (folder / "Project.vcxproj.filters").write_text("<Filters/>", encoding="utf-8")
    (root / "Main.cpp").write_text(MAIN, encoding="utf-8")
    for icon in ("SA.ico", "VC.ico", "III.ico"):
        (root / icon).write_bytes(b"icon")
    return root


def _settings(tmp_path):
    return GenerationSettings(
        vs_documents_path=str(tmp_path / "docs") + "\\",
        plugin_sdk_path="SDK\\",
        d3d9_sdk_path="DX\\",
        rwd3d9_path="RW\\",
        vc_cleo_sdk_path="VCCLEO\\",
        sa_cleo_sdk_path="SACLEO\\",
        sa_asi_output_path="SAOUT\\",
        vc_cleo_output_path="VCCLEOOUT\\",
    )


def _nodes(path, tag):
    open_tag = f"<{tag}>"
    close_tag = f"</{tag}>"
    return [
        line.strip()[len(open_tag):-len(close_tag)]
        for line in path.read_text(encoding="utf-8").split("\n")
        if line.strip().startswith(open_tag)
    ]


def test_library_name():
    assert library_name(2015, "d3d9") == "d3d9.lib"
    assert library_name(2010, "d3d9") == "d3d9"


def test_to_csv():
    assert to_csv("", True) == ""
    assert to_csv("a", True) == ";a"
    assert to_csv("a", False) == "a;"


def test_template_title_plain_asi():
    name, description, icon = template_title(Game.SA, GenerationFlags.NONE)
    assert name == "GTA SA .ASI plugin"
    assert description == "A project for GTA San Andreas .ASI plugin"
    assert icon == "SA.ico"


def test_template_title_flags():
    name, description, icon = template_title(
        Game.VC, GenerationFlags.CLEO | GenerationFlags.D3D9 | GenerationFlags.LA
    )
    assert name.startswith("GTA VC CLEO plugin")
    assert "D3D8toD3D9" in name and "+LA comp." in name
    assert "Limit Adjuster compatibility" in description
    assert icon == "VC.ico"
    la_name, _, _ = template_title(Game.III, GenerationFlags.LA)
    assert la_name.endswith(" (+LA comp.)")


def test_process_main_cpp(templates):
    out = process_main_cpp(templates, Game.VC)
    assert out == templates / "temp" / "Main.cpp"
    assert out.read_text(encoding="utf-8").split("\n")[0] == '#include "plugin_vc.h"'


def test_process_vstemplate(templates):
    out = process_vstemplate(templates, Game.III, 2015, GenerationFlags.NONE)
    expected_name, expected_description, _ = template_title(Game.III, GenerationFlags.NONE)
    assert _nodes(out, "Name") == [expected_name]
    assert _nodes(out, "Description") == [expected_description]
    assert _nodes(out, "Icon") == ["III.ico"]
    assert "    <Icon>III.ico</Icon>" in out.read_text(encoding="utf-8").split("\n")


def test_process_project_sa_asi(templates, tmp_path):
    settings = _settings(tmp_path)
    out = process_project(templates, Game.SA, 2015, GenerationFlags.NONE, settings)
    assert _nodes(out, "OutDir") == [settings.sa_asi_output_path]
    assert _nodes(out, "NMakeOutput") == ["$(ProjectName).asi", "$(ProjectName)_d.asi"]
    release, debug = _nodes(out, "NMakePreprocessorDefinitions")
    assert release.startswith("_USING_V110_SDK71_")
    assert 'GTAGAME_NAME="San Andreas"' in release
    assert release.endswith(";NDEBUG;$(NMakePreprocessorDefinitions)")
    assert debug.endswith(";_DEBUG;$(NMakePreprocessorDefinitions)")
    build_release = _nodes(out, "NMakeBuildCommandLine")[0]
    assert build_release.startswith(
        '"$(PLUGIN_SDK_DIR)\\tools\\general\\pluginsdk-build.exe" build buildtype:(DLL) '
    )
    assert "GTAGAME_NAME=&lt;&gt;San Andreas&lt;&gt;" in build_release
    assert "SDK\\output\\lib\\" in build_release
    clean_release = _nodes(out, "NMakeCleanCommandLine")[0]
    assert "buildtype:" not in clean_release
    assert "$(ProjectName).asi" in clean_release


def test_process_project_vc_cleo_d3d9(templates, tmp_path):
    settings = _settings(tmp_path)
    flags = GenerationFlags.CLEO | GenerationFlags.D3D9
    out = process_project(templates, Game.VC, 2010, flags, settings)
    assert _nodes(out, "OutDir") == [settings.vc_cleo_output_path]
    assert _nodes(out, "NMakeOutput")[0] == "$(ProjectName).cleo"
    assert _nodes(out, "NMakeIncludeSearchPath")[0].startswith("DX\\Include\\;")
    build_debug = _nodes(out, "NMakeBuildCommandLine")[1]
    assert "SDK\\output\\mingw\\lib\\" in build_debug
    assert "VC.CLEO" in build_debug and "rwd3d9" in build_debug
    assert ".lib" not in build_debug
    assert "libraries:\"(paths_d;plugin_vc_d" in build_debug
    assert "RW\\source\\" in build_debug


def test_process_project_missing_template(templates, tmp_path):
    with pytest.raises(TemplateError):
        process_project(templates, Game.SA, 2013, GenerationFlags.NONE, _settings(tmp_path))


def test_generate_template_archive(templates, tmp_path):
    settings = _settings(tmp_path)
    archive = generate_template(templates, "GTASA", 2015, Game.SA, GenerationFlags.NONE, settings)
    assert archive == tmp_path / "docs" / "Templates" / "ProjectTemplates" / "Plugin-SDK" / "ASI" / "GTASA.zip"
    with zipfile.ZipFile(archive) as bundle:
        assert set(bundle.namelist()) == {
            "Main.cpp",
            "Project.vcxproj",
            "MyTemplate.vstemplate",
            "Project.vcxproj.filters",
            "SA.ico",
        }
        assert bundle.read("SA.ico") == b"icon"


def test_generate_template_cleo_folder(templates, tmp_path):
    settings = _settings(tmp_path)
    archive = generate_template(
        templates, "GTAVC_CLEO", 2015, Game.VC, GenerationFlags.CLEO, settings
    )
    assert archive.parent.name == "CLEO"
    assert archive.name == "GTAVC_CLEO.zip"
    assert archive.is_file()


def test_generate_template_missing_main(templates, tmp_path):
    (templates / "Main.cpp").unlink()
    with pytest.raises(TemplateError):
        generate_template(
            templates, "GTASA", 2015, Game.SA, GenerationFlags.NONE, _settings(tmp_path)
        )
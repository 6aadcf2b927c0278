import re

from pluginsdk_tools.comments import INDENT_UNIT
from pluginsdk_tools.enums import CppEnum, EnumMember, bitfield_name


def _members():
    return [EnumMember("A", 0), EnumMember("B", 1)]


def test_full_name():
    assert CppEnum(name="eFoo").full_name() == "eFoo"
    assert CppEnum(name="eFoo", scope="CPed").full_name() == "CPed::eFoo"


def test_render_basic():
    text = CppEnum(name="eFoo", width=4, members=_members()).render(0)
    lines = text.split("\n")
    assert lines[0] == "enum PLUGIN_API eFoo : unsigned int {"
    assert lines[1] == INDENT_UNIT + "A = 0,"
    assert lines[2] == INDENT_UNIT + "B = 1"
    assert lines[3] == "};"


def test_render_signed_class():
    text = CppEnum(name="eFoo", width=2, is_class=True, is_signed=True).render(0)
    assert text.startswith("enum class PLUGIN_API eFoo : short {")


def test_render_without_base_type():
    text = CppEnum(name="eFoo", width=3, members=_members()).render(0)
    assert text.startswith("enum PLUGIN_API eFoo {")
    assert ":" not in text.split("\n")[0]


def test_render_hexadecimal():
    en = CppEnum(name="eFoo", is_hexadecimal=True, members=[EnumMember("A", 16)])
    assert INDENT_UNIT + "A = 0x10" in en.render(0)


def test_render_comments():
    en = CppEnum(name="eFoo", comment="an enum", members=[EnumMember("A", 0, "first")])
    lines = en.render(1).split("\n")
    assert lines[0] == INDENT_UNIT + "//! an enum"
    assert lines[2] == INDENT_UNIT * 2 + "A = 0 //!< first"
    assert lines[-1] == INDENT_UNIT + "};"


def test_bitfield_name_strips_start_word():
    en = CppEnum(start_word="PED_FLAG")
    assert bitfield_name(en, EnumMember("PED_FLAG_IS_DEAD")) == "IsDead"


def test_bitfield_name_keeps_mixed_case():
    assert bitfield_name(CppEnum(), EnumMember("bIsDead")) == "bIsDead"


def test_bitfield_name_without_matching_start_word():
    en = CppEnum(start_word="PED")
    assert bitfield_name(en, EnumMember("CAR_X")) == ""


def test_bitfield_fills_total_width():
    en = CppEnum(
        width=1,
        members=[EnumMember("FLAG_ONE"), EnumMember("FLAG_TWO", bit_width=2)],
    )
    text = en.render_bitfield(0, False)
    widths = [int(w) for w in re.findall(r": (\d+);", text)]
    assert sum(widths) == en.width * 8
    assert "unsigned char bFlagOne : 1;" in text
    assert "unsigned char nFlagTwo : 2;" in text


def test_bitfield_anonymous_prefix_and_unnamed():
    en = CppEnum(width=4, start_word="X", members=[EnumMember("X_ON"), EnumMember("Y")])
    lines = en.render_bitfield(0, True).splitlines()
    assert lines[0] == "unsigned int m_bOn : 1;"
    assert lines[1] == "unsigned int : 1;"


def test_bitfield_full_width_has_no_padding():
    en = CppEnum(width=1, is_signed=True, members=[EnumMember("A", bit_width=8)])
    lines = en.render_bitfield(0, False).splitlines()
    assert lines == ["char nA : 8;"]
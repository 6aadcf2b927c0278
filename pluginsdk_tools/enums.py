"""C++ enum declarations and bitfield structures for generated headers."""

from __future__ import annotations

from dataclasses import dataclass, field

from .comments import format_comment, indentation

_BASE_TYPES = {1: "char", 2: "short", 4: "int", 8: "long long"}


def _hex(value: int) -> str:
    return f"0x{value & 0xFFFFFFFF:X}"


@dataclass
class EnumMember:
    """One enumerator."""

    name: str = ""
    value: int = 0
    comment: str = ""
    bit_width: int = 0


@dataclass
class CppEnum:
    """An enum as described by the SDK database."""

    name: str = ""
    module_name: str = ""
    scope: str = ""
    width: int = 0
    is_class: bool = False
    is_hexadecimal: bool = False
    is_signed: bool = False
    is_bitfield: bool = False
    is_anonymous: bool = False
    used_as_bitfield_member: bool = False
    start_word: str = ""
    comment: str = ""
    members: list[EnumMember] = field(default_factory=list)

    def full_name(self) -> str:
        """Return the name qualified with the scope."""
        if not self.scope:
            return self.name
        return f"{self.scope}::{self.name}"

    def _sign_prefix(self) -> str:
        return "" if self.is_signed else "unsigned "

    def render(self, indent: int) -> str:
        """Return the enum declaration at the given indentation level."""
        out = [format_comment(self.comment, indent, 0), indentation(indent), "enum "]
        if self.is_class:
            out.append("class ")
        out.append(f"PLUGIN_API {self.name} ")
        if self.width in _BASE_TYPES:
            out.append(f": {self._sign_prefix()}{_BASE_TYPES[self.width]} ")
        out.append("{\n")
        inner = indent + 1
        last_index = len(self.members) - 1
        for number, member in enumerate(self.members):
            value = _hex(member.value) if self.is_hexadecimal else str(member.value)
            body = f"{member.name} = {value}"
            if number != last_index:
                body += ","
            out.append(indentation(inner) + body)
            out.append(format_comment(member.comment, inner, len(body)))
            out.append("\n")
        out.append(indentation(indent) + "};")
        return "".join(out)

    def render_bitfield(self, indent: int, anonymous_member: bool) -> str:
        """Return the enum's members as bitfield declarations."""
        field_type = self._sign_prefix() + {2: "short", 4: "int", 8: "long long"}.get(
            self.width, "char"
        )
        total_width = self.width * 8
        current_width = 0
        out: list[str] = []
        for member in self.members:
            if current_width != 0 and current_width % 8 == 0:
                out.append("\n")
            body = field_type + " "
            name = bitfield_name(self, member)
            width = member.bit_width or 1
            if name:
                if anonymous_member:
                    body += "m_"
                body += ("b" if width == 1 else "n") + name + " "
            body += f": {width};"
            out.append(indentation(indent) + body)
            out.append(format_comment(member.comment, indent, len(body)))
            out.append("\n")
            current_width += width
        if current_width < total_width:
            out.append(f"{indentation(indent)}{field_type} : {total_width - current_width};\n")
        return "".join(out)


def bitfield_name(cpp_enum: CppEnum, member: EnumMember) -> str:
    """Derive a bitfield member name from an enumerator name.

    The enum's start word is cut off; names without lower-case letters are
    turned from UPPER_CASE into CamelCase.
    """
    name = ""
    if not cpp_enum.start_word:
        name = member.name
    elif member.name.startswith(cpp_enum.start_word):
        name = member.name[len(cpp_enum.start_word):]
        if name.startswith("_"):
            name = name[1:]
    parts = name.split("_")
    if not any(c.islower() for part in parts for c in part):
        return "".join(part.capitalize() for part in parts if part)
    return name
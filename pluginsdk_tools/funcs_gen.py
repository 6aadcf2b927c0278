"""Turns a plain list of function signatures into plugin-sdk declarations and wrappers."""

from __future__ import annotations

import enum
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

INPUT_FILE = "funcs.h"
OUTPUT_FILE = "funcs_conv.h"

DEFAULT_TYPES = frozenset({
    "int", "signed int", "unsigned int", "uint", "bool", "short", "unsigned short",
    "char", "signed short", "signed char", "unsigned char", "Int32", "UInt32", "Int16", "UInt16", "Int8",
    "UInt8", "Bool", "Float", "float", "double", "Double", "__int8", "unsigned __int8", "signed __int8",
    "__int16", "unsigned __int16", "signed __int16", "__int32", "unsigned __int32", "signed __int32", "Long",
    "long", "ushort", "uchar",
})

_CORRECT_NAMES = {
    "uint": "unsigned int",
    "ushort": "unsigned short",
    "uchar": "unsigned char",
    "uint*": "unsigned int*",
    "ushort*": "unsigned short*",
    "uchar*": "unsigned char*",
    "uint *": "unsigned int*",
    "ushort *": "unsigned short*",
    "uchar *": "unsigned char*",
    "uint**": "unsigned int**",
    "ushort**": "unsigned short**",
    "uchar**": "unsigned char**",
    "uint **": "unsigned int **",
    "ushort **": "unsigned short **",
    "uchar **": "unsigned char **",
    "uint&": "unsigned int&",
    "ushort&": "unsigned short&",
    "uchar&": "unsigned char&",
    "uint &": "unsigned int &",
    "ushort &": "unsigned short &",
    "uchar &": "unsigned char &",
}

_INDENT = "    "


class CallType(enum.Enum):
    """Calling convention of a function."""

    THISCALL = 0
    STDCALL = 1
    CDECL = 2


@dataclass
class FuncParam:
    """One function parameter."""

    type_name: str
    name: str


@dataclass
class Function:
    """A function read from the input list."""

    ret_type: str = ""
    class_name: str = ""
    name: str = ""
    call_type: CallType = CallType.THISCALL
    is_method: bool = False
    is_static: bool = False
    is_return: bool = False
    is_constructor: bool = False
    is_destructor: bool = False
    params: list[FuncParam] = field(default_factory=list)
    comment: str = ""
    extra_comment: str = ""
    address: str = ""


def correct_type_name(type_name: str) -> str:
    """Expand the short unsigned type aliases."""
    return _CORRECT_NAMES.get(type_name, type_name)


def is_default_type(type_name: str) -> bool:
    """True for pointers, references and built-in types that can be returned directly."""
    if "*" in type_name or "&" in type_name:
        return True
    return type_name in DEFAULT_TYPES


def _skip_space(text: str, index: int) -> int:
    while index < len(text) and text[index] in " \t":
        index += 1
    return index


def _read_to(text: str, index: int, delimiter: str) -> tuple[str, int]:
    """Read up to ``delimiter``; return the text and the index just past it."""
    end = text.find(delimiter, index)
    if end == -1:
        return text[index:], len(text) + 1
    return text[index:end], end + 1


def parse_parameter(text: str, index: int) -> FuncParam:
    """Parse one parameter declaration; unnamed parameters are called ``arg<index>``."""
    pos = _skip_space(text, 0)
    end = pos
    while end < len(text) and text[end] not in " *&":
        end += 1
    type_name = text[pos:end]
    name = f"arg{index}"
    if end >= len(text):
        return FuncParam(type_name, name)
    pos = _skip_space(text, end)
    while pos < len(text):
        c = text[pos]
        if c in "&*":
            type_name += c
            pos += 1
        elif text.startswith("const", pos):
            type_name += " const"
            pos += 5
        else:
            name, pos = _read_to(text, pos, " ")
            break
        pos = _skip_space(text, pos)
    return FuncParam(type_name, name)


def normalise_extra_comment(text: str) -> str:
    """Cut the text at its line end and collapse runs of blanks."""
    out: list[str] = []
    for i, c in enumerate(text):
        if c == "\n":
            break
        following = text[i + 1] if i + 1 < len(text) else ""
        if c in " \t" and following in (" ", "\t"):
            continue
        out.append(c)
    return "".join(out)


def _parse_params(line: str, pos: int) -> tuple[list[FuncParam], int]:
    params_text, pos = _read_to(line, pos, ")")
    params: list[FuncParam] = []
    if params_text and params_text != "void":
        params = [parse_parameter(part, i) for i, part in enumerate(params_text.split(","))]
    return params, pos


def _split_method_name(full_name: str, function: Function) -> None:
    class_name, pos = _read_to(full_name, 0, ":")
    function.class_name = class_name
    function.name = full_name[pos + 1:]
    function.is_method = True
    if "~" in function.name:
        function.is_destructor = True
    elif function.name == function.class_name:
        function.is_constructor = True


def _next_line(lines: Iterator[str]) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise ValueError("unexpected end of input: missing 'end' line") from None


def _read_comment(lines: Iterator[str], line: str) -> tuple[str, str]:
    comment = ""
    while line.startswith("/"):
        comment += line
        line = _next_line(lines)
    return comment, line


def _parse_vtable_entry(line: str, comment: str, address: str) -> Function:
    function = Function(comment=comment, extra_comment=line, call_type=CallType.THISCALL)
    pos = _skip_space(line, 0)
    ret_type, pos = _read_to(line, pos, " ")
    function.is_return = ret_type != "void"
    function.ret_type = ret_type
    pos = _skip_space(line, pos)
    full_name, pos = _read_to(line, pos, "(")
    _split_method_name(full_name, function)
    function.params, pos = _parse_params(line, pos)
    function.address = address
    return function


def _parse_function_entry(line: str, comment: str) -> Function:
    function = Function(comment=comment, extra_comment=line)
    pos = _skip_space(line, 0)
    call_name, pos = _read_to(line, pos, " ")
    pos = _skip_space(line, pos)
    if call_name == "thiscall":
        function.call_type = CallType.THISCALL
    elif call_name == "stdcall":
        function.call_type = CallType.STDCALL
    else:
        function.call_type = CallType.CDECL
    ret_type, pos = _read_to(line, pos, " ")
    function.is_return = ret_type != "void"
    function.ret_type = ret_type
    pos = _skip_space(line, pos)
    full_name, pos = _read_to(line, pos, "(")
    if ":" in full_name:
        _split_method_name(full_name, function)
        if function.call_type is not CallType.THISCALL:
            function.is_static = True
    else:
        function.name = full_name
    function.params, pos = _parse_params(line, pos)
    pos = _skip_space(line, pos)
    function.address = line[pos:pos + 8].rstrip("\r\n")
    return function


def parse_funcs(text: str) -> tuple[list[Function], int]:
    """Parse the input list; return the functions and how many of them are virtual.

    The first line names the vtable base index, virtual methods follow up to
    an ``end`` line, then one heading line and the plain functions up to
    another ``end`` line.
    """
    lines = iter(text.splitlines(keepends=True))
    header = _next_line(lines)
    match = re.match(r"\s*\S+\s+([+-]?\d+)", header)
    vtable_base = int(match.group(1)) if match else 0
    functions: list[Function] = []

    line = _next_line(lines)
    while not line.startswith("end"):
        comment, line = _read_comment(lines, line)
        address = str(vtable_base + len(functions))
        functions.append(_parse_vtable_entry(line, comment, address))
        line = _next_line(lines)
    vtable_count = len(functions)

    _next_line(lines)
    line = _next_line(lines)
    while not line.startswith("end"):
        comment, line = _read_comment(lines, line)
        functions.append(_parse_function_entry(line, comment))
        line = _next_line(lines)
    return functions, vtable_count


def _declared_params(function: Function) -> str:
    return ", ".join(f"{correct_type_name(p.type_name)} {p.name}" for p in function.params)


def _render_body(function: Function, virtual: bool, old_style: bool) -> str:
    ret = correct_type_name(function.ret_type)
    by_pointer = function.is_return and not is_default_type(ret)
    direct = function.is_return and not by_pointer
    cls = function.class_name
    addr = function.address
    thiscall = function.call_type is CallType.THISCALL
    out: list[str] = []

    if function.is_return:
        out.append(f"{ret} result;\n    " if by_pointer else "return ")

    if old_style:
        has_params = False
        if thiscall:
            has_params = True
            kind = ret if direct else "void"
            out.append(f"reinterpret_cast<{kind}(__thiscall *)({cls} *")
        elif function.call_type is CallType.CDECL:
            kind = ret if direct else "void"
            out.append(f"reinterpret_cast<{kind}(__cdecl *)(")
        if by_pointer:
            if has_params:
                out.append(", ")
            has_params = True
            out.append(f"{ret}*")
    else:
        has_params = True
        if thiscall:
            base = "CallVirtualMethod" if virtual else "CallMethod"
            if direct:
                out.append(f"plugin::{base}AndReturn<{ret}, {addr}, {cls} *")
            else:
                out.append(f"plugin::{base}<{addr}, {cls} *")
        elif function.call_type is CallType.CDECL:
            if direct:
                out.append(f"plugin::CallAndReturn<{ret}, {addr}")
            else:
                out.append(f"plugin::Call<{addr}")
        if by_pointer:
            out.append(f", {ret}*")

    if function.params:
        if has_params:
            out.append(", ")
        out.append(", ".join(correct_type_name(p.type_name) for p in function.params))

    if old_style:
        out.append(")>(")
        if virtual:
            out.append(f"(*reinterpret_cast<void ***>(this))[{addr}])(")
        else:
            out.append(f"{addr})(")
    else:
        out.append(">(")

    if thiscall:
        out.append("this")
    if by_pointer:
        if thiscall:
            out.append(", ")
        out.append("&result")
    if function.params:
        if thiscall or by_pointer:
            out.append(", ")
        out.append(", ".join(p.name for p in function.params))
    out.append(");\n")
    if by_pointer:
        out.append("    return result;\n")
    return "".join(out)


def render(functions: list[Function], vtable_count: int, old_style: bool) -> str:
    """Render the header declarations and the wrapper definitions."""
    out = ["// header\n\n"]
    if vtable_count > 0:
        if functions[0].is_method:
            out.append(_INDENT)
        out.append("//vtable\n\n")
    for i, function in enumerate(functions):
        indent = _INDENT if function.is_method else ""
        if i == vtable_count:
            out.append("\n" + indent + "//funcs\n\n")
        if function.comment:
            out.append(indent + function.comment)
        out.append(indent)
        if function.is_static:
            out.append("static ")
        if not function.is_constructor and not function.is_destructor:
            out.append(correct_type_name(function.ret_type) + " ")
        out.append(f"{function.name}({_declared_params(function)});\n")

    out.append("\n// source\n\n")
    for i, function in enumerate(functions):
        out.append(f"// Converted from {normalise_extra_comment(function.extra_comment)}\n")
        if not function.is_constructor and not function.is_destructor:
            out.append(correct_type_name(function.ret_type) + " ")
        if function.is_method:
            out.append(function.class_name + "::")
        out.append(f"{function.name}({_declared_params(function)}) {{\n    ")
        out.append(_render_body(function, i < vtable_count, old_style))
        out.append("}\n\n")
    return "".join(out)


def _describe(function: Function, kind: str) -> str:
    lines = [
        f"{kind} {function.extra_comment.rstrip()}",
        "",
        "Function info:",
        f" retTypeName {function.ret_type}",
        f" className {function.class_name}",
        f" funcName {function.name}",
        f" funcType {function.call_type.value}",
        f" isMethod {int(function.is_method)}",
        f" isStatic {int(function.is_static)}",
        f" isReturn {int(function.is_return)}",
        f" isConstructor {int(function.is_constructor)}",
        f" isDestructor {int(function.is_destructor)}",
        f" address {function.address}",
        f"  Num params: {len(function.params)}",
    ]
    lines += [f"    Param {p.name} with_type {p.type_name}" for p in function.params]
    if function.comment:
        lines.append(f"Comment: {function.comment.rstrip()}")
    lines.append("")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Convert ``funcs.h`` in the working directory into ``funcs_conv.h``.

    The ``-oldstyle`` option emits raw ``reinterpret_cast`` calls instead of
    the plugin call helpers.
    """
    args = sys.argv[1:] if argv is None else argv
    old_style = any(arg.lower() == "-oldstyle" for arg in args)
    try:
        text = Path(INPUT_FILE).read_text()
        functions, vtable_count = parse_funcs(text)
    except (OSError, ValueError) as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    for i, function in enumerate(functions):
        print(_describe(function, "VTABLE" if i < vtable_count else "FUNC"))
    try:
        Path(OUTPUT_FILE).write_text(render(functions, vtable_count, old_style))
    except OSError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0
"""Text writers for TypeScript declaration output.

IndentedTextWriter is the line-oriented sink that owns indentation.
TypescriptTextWriter sits on top of it and knows declaration syntax:
interfaces, properties, call signatures, JSDoc comments and block scopes.
"""

import io
import re
from collections.abc import Callable
from contextlib import contextmanager
from dataclasses import dataclass
from typing import NamedTuple, TextIO

from discovery_typings.naming import format_property_name

JSDOC_START = "/**"
JSDOC_END = "*/"
ZERO_WIDTH_JOINER = "\u200d"

IGNORE_BANNED_TYPE = "// tslint:disable-next-line:ban-types"
DISABLE_MAX_LINE_LENGTH = "// tslint:disable:max-line-length"
ENABLE_MAX_LINE_LENGTH = "// tslint:enable:max-line-length"

# JSDoc tags that trip no-redundant-jsdoc when they show up in descriptions
_JSDOC_TAG_RE = re.compile(r"@(class|this|type(?:def)?|property)")
_LINE_BREAK_RE = re.compile(r"\r?\n")
_IRREGULAR_SPACES_RE = re.compile(
    "["
    "\u000b"  # line tabulation
    "\u000c"  # form feed
    "\u00a0"  # no-break space
    "\u0085"  # next line
    "\u1680"  # ogham space mark
    "\u180e"  # mongolian vowel separator
    "\ufeff"  # zero width no-break space
    "\u2000-\u200b"  # en quad .. zero width space
    "\u2028"  # line separator
    "\u2029"  # paragraph separator
    "\u202f"  # narrow no-break space
    "\u205f"  # medium mathematical space
    "\u3000"  # ideographic space
    "]"
)
_PREFIX_I_RE = re.compile(r"^I[A-Z]")


def has_prefix_i(name: str) -> bool:
    """True for names like ``IPAllocationPolicy`` that tslint reads as I-prefixed."""
    return bool(_PREFIX_I_RE.match(name))


class IndentedTextWriter:
    """Writes text to a stream, prefixing lines with the current indentation."""

    def __init__(self, stream: TextIO | None = None, new_line: str = "\n", tab_string: str = "    "):
        self.stream = stream if stream is not None else io.StringIO()
        self.new_line = new_line
        self.tab_string = tab_string
        self.indent = 0

    @property
    def indentation(self) -> str:
        return self.tab_string * self.indent

    def write(self, chunk: str) -> None:
        self.stream.write(chunk)

    def start_indented_line(self, chunk: str = "") -> None:
        self.write(self.indentation + chunk)

    def end_indented_line(self, chunk: str = "") -> None:
        self.write(chunk + self.indentation)

    def write_line(self, chunk: str = "") -> None:
        if chunk:
            self.start_indented_line(chunk + self.new_line)
        else:
            self.write(self.new_line)

    def write_new_line(self, chunk: str = "") -> None:
        self.end_indented_line(chunk + self.new_line)

    @contextmanager
    def indented(self):
        """Increase indentation for the duration of the block."""
        self.indent += 1
        try:
            yield
        finally:
            self.indent -= 1

    def braces(self, header: str, body: Callable[[], None]) -> None:
        self.write_line(header + " {")
        with self.indented():
            body()
        self.write_line("}")

    def getvalue(self) -> str:
        """Text written so far, for writers backed by an in-memory buffer."""
        return self.stream.getvalue()

    def end(self) -> None:
        self.stream.flush()
        if not isinstance(self.stream, io.StringIO):
            self.stream.close()


WriterCallback = Callable[["TypescriptTextWriter"], None]

FLAT = "flat"
NESTED = "nested"


@dataclass(frozen=True)
class TypeRendering:
    """A rendered type: a flat token such as ``string[]``, or a callback that
    writes a nested structure through a TypescriptTextWriter."""

    kind: str
    token: str = ""
    callback: WriterCallback | None = None

    @classmethod
    def flat(cls, token: str) -> "TypeRendering":
        return cls(kind=FLAT, token=token)

    @classmethod
    def nested(cls, callback: WriterCallback) -> "TypeRendering":
        return cls(kind=NESTED, callback=callback)


def as_rendering(value: "str | TypeRendering") -> TypeRendering:
    if isinstance(value, TypeRendering):
        return value
    return TypeRendering.flat(value)


class Parameter(NamedTuple):
    name: str
    type: "str | TypeRendering"
    required: bool = True


class TypescriptTextWriter:
    """Emits TypeScript declaration syntax through an IndentedTextWriter."""

    def __init__(
        self,
        writer: IndentedTextWriter,
        max_line_length: int,
        banned_types: list[str],
        is_prefixed_interface_name: Callable[[str], bool] = has_prefix_i,
    ):
        self.writer = writer
        self.max_line_length = max_line_length
        self.banned_types = banned_types
        self.is_prefixed_interface_name = is_prefixed_interface_name

    def _braces(self, text: str, context: WriterCallback) -> None:
        self.writer.braces(text, lambda: context(self))

    def _includes_banned_type(self, type_token: str) -> bool:
        return any(re.search(rf"\b{re.escape(banned)}\b", type_token) for banned in self.banned_types)

    # -- declarations ---------------------------------------------------------

    def reference_types(self, types: str) -> None:
        self.writer.write_line(f'/// <reference types="{types}" />')

    def namespace(self, name: str, context: WriterCallback) -> None:
        self._braces(f"namespace {name}", context)

    def declare_namespace(self, name: str, context: WriterCallback) -> None:
        self.writer.write_line()
        self._braces(f"declare namespace {name}", context)

    def interface(self, name: str, context: WriterCallback, empty_interface: bool = False) -> None:
        ignore_rules = []
        if self.is_prefixed_interface_name(name):
            ignore_rules.append("interface-name")
        if empty_interface:
            ignore_rules.append("no-empty-interface")
        if ignore_rules:
            self.writer.write_line(f"// tslint:disable-next-line:{' '.join(ignore_rules)}")
        self._braces(f"interface {name}", context)

    def anonymous_type(self, context: WriterCallback) -> None:
        self.end_line("{")
        with self.writer.indented():
            context(self)
        self.writer.start_indented_line("}")

    def scope(self, context: WriterCallback, start_tag: str = "{", end_tag: str = "}") -> None:
        self.writer.write(start_tag)
        self.writer.write(self.writer.new_line)
        with self.writer.indented():
            context(self)
        self.writer.start_indented_line(end_tag)

    def property(self, name: str, type: "str | TypeRendering", required: bool = True) -> None:
        rendering = as_rendering(type)
        prefix = f"{format_property_name(name)}{'' if required else '?'}: "
        if rendering.kind == NESTED:
            self.writer.start_indented_line(prefix)
            rendering.callback(self)
            self.end_line(";")
        elif rendering.kind == FLAT:
            if self._includes_banned_type(rendering.token):
                self.writer.write_line(IGNORE_BANNED_TYPE)
            self.writer.write_line(f"{prefix}{rendering.token};")

    def method(self, name: str, parameters: list[Parameter], return_type: str, single_line: bool = False) -> None:
        banned_return_type = self._includes_banned_type(return_type)
        if single_line and banned_return_type:
            self.writer.write_line(IGNORE_BANNED_TYPE)

        self.writer.start_indented_line(f"{name}(")

        for index, parameter in enumerate(parameters):
            rendering = as_rendering(parameter.type)
            if rendering.kind == FLAT and self._includes_banned_type(rendering.token):
                self.writer.write_new_line(IGNORE_BANNED_TYPE)
            self.write(f"{parameter.name}{'' if parameter.required else '?'}: ")
            self.write(rendering)

            if index + 1 < len(parameters):
                self.write(",")
                if single_line:
                    self.write(" ")
                else:
                    self.writer.write_new_line()

        if not single_line and banned_return_type:
            self.writer.write_new_line()
            self.writer.write_new_line(IGNORE_BANNED_TYPE)

        self.write(f"): {return_type};")
        self.end_line()

    # -- comments -------------------------------------------------------------

    def _comment_width(self) -> int:
        delimiters = len(f"{JSDOC_START}  {JSDOC_END}")
        return self.max_line_length - len(self.writer.indentation) - delimiters

    def comment(self, text: str | None = "") -> None:
        """Write a JSDoc comment, wrapping long lines on word boundaries.

        Lines that cannot be wrapped (usually URLs) are left whole and the
        comment is fenced with max-line-length suppression markers.
        """
        if not text or not text.strip():
            return

        text = text.replace("*/", f"*{ZERO_WIDTH_JOINER}/")
        text = _JSDOC_TAG_RE.sub(lambda m: f"@{ZERO_WIDTH_JOINER}{m.group(1)}", text)
        text = _IRREGULAR_SPACES_RE.sub(" ", text)

        width = self._comment_width()
        lines: list[str] = []
        for line in _LINE_BREAK_RE.split(text.strip()):
            if len(line) > width:
                lines.extend(wrap_words(line, width))
            else:
                lines.append(line)
        lines = [line.strip() for line in lines]

        too_long = max(len(line) for line in lines) > width
        if too_long:
            self.writer.write_line(DISABLE_MAX_LINE_LENGTH)
        if len(lines) == 1:
            self.writer.write_line(f"{JSDOC_START} {lines[0]} {JSDOC_END}")
        else:
            self.writer.write_line(JSDOC_START)
            for line in lines:
                self.writer.write_line(f" * {line}" if line else " *")
            self.writer.write_line(f" {JSDOC_END}")
        if too_long:
            self.writer.write_line(ENABLE_MAX_LINE_LENGTH)

    # -- raw output -----------------------------------------------------------

    def new_line(self, chunk: str = "") -> None:
        """Start a new indented line without ending it."""
        self.writer.start_indented_line(chunk)

    def end_line(self, chunk: str = "") -> None:
        self.writer.write(chunk)
        self.writer.write(self.writer.new_line)

    def write_line(self, chunk: str = "") -> None:
        self.writer.write_line(chunk)

    def write(self, chunk: "str | TypeRendering" = "") -> None:
        if isinstance(chunk, str):
            self.writer.write(chunk)
        elif chunk.kind == FLAT:
            self.writer.write(chunk.token)
        elif chunk.kind == NESTED:
            chunk.callback(self)

    def getvalue(self) -> str:
        return self.writer.getvalue()

    def end(self) -> None:
        self.writer.end()


def wrap_words(line: str, width: int) -> list[str]:
    """Greedily pack words into lines no longer than width; words are never split."""
    lines = []
    current = ""
    for word in line.split(" "):
        if not current:
            current = word
        elif len(current) + 1 + len(word) > width:
            lines.append(current)
            current = word
        else:
            current += " " + word
    lines.append(current)
    return lines

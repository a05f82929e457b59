"""
Placeholder parsing for statement templates.

The parser only looks at text following a '?'; everything else, SQL keywords
included, is kept as opaque literal text. Supported forms:

    ?1                  - the first parameter
    ?{1}                - the first parameter
    ?{1.username}       - field/accessor 'username' of the first parameter
    ?{1.author.username}

A '?' that is not followed by a digit or '{' stays literal, so driver-native
'?' markers may appear in the text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Tuple, Union

from querybind.errors import TemplateSyntaxError

logger = logging.getLogger(__name__)

PARAMSTYLES = ('qmark', 'format', 'pyformat', 'numeric', 'named')

_DIGITS = frozenset('0123456789')


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class Placeholder:
    arg_index: int
    path: Tuple[str, ...] = ()

    def describe(self) -> str:
        """Source form of the placeholder, e.g. '?{1.author.username}'."""
        if not self.path:
            return f"?{self.arg_index}"
        return "?{" + ".".join([str(self.arg_index), *self.path]) + "}"


Segment = Union[Literal, Placeholder]


@dataclass(frozen=True, slots=True)
class Template:
    """Immutable parsed form of a statement string."""

    source: str
    segments: Tuple[Segment, ...] = field(default=())

    @property
    def placeholders(self) -> Tuple[Placeholder, ...]:
        return tuple(s for s in self.segments if isinstance(s, Placeholder))

    @property
    def max_index(self) -> int:
        return max((p.arg_index for p in self.placeholders), default=0)

    def render(self, paramstyle: str = 'qmark') -> str:
        """
        Render the driver-native statement text.

        Each placeholder becomes one bind marker of the given DB-API paramstyle,
        in source order. For 'format'/'pyformat' literal '%' characters are
        doubled so the driver does not read them as markers.

        Args:
            paramstyle: one of 'qmark', 'format', 'pyformat', 'numeric', 'named'

        Returns:
            SQL text with positional bind markers
        """
        if paramstyle not in PARAMSTYLES:
            raise ValueError(f"Unsupported paramstyle: {paramstyle}")

        parts = []
        position = 0
        for segment in self.segments:
            if isinstance(segment, Literal):
                if paramstyle in ('format', 'pyformat'):
                    parts.append(segment.text.replace('%', '%%'))
                else:
                    parts.append(segment.text)
                continue
            position += 1
            if paramstyle == 'qmark':
                parts.append('?')
            elif paramstyle in ('format', 'pyformat'):
                parts.append('%s')
            elif paramstyle == 'numeric':
                parts.append(f":{position}")
            else:
                parts.append(f":p{position}")
        return ''.join(parts)

    def __str__(self):
        return self.source


def _parse_braced(template: str, start: int) -> Tuple[Placeholder, int]:
    # start points at the '{'
    end = template.find('}', start + 1)
    if end == -1:
        raise TemplateSyntaxError("Unterminated '{' in placeholder", template, start)

    content = template[start + 1:end]
    if not content:
        raise TemplateSyntaxError("Empty placeholder '?{}'", template, start)

    index_text, *path = content.split('.')
    if not index_text or not set(index_text) <= _DIGITS:
        raise TemplateSyntaxError(
            f"Placeholder index must be numeric, got {index_text!r}", template, start + 1)
    arg_index = int(index_text)
    if arg_index == 0:
        raise TemplateSyntaxError("Placeholder index must be 1 or greater", template, start + 1)

    for name in path:
        if not name.isidentifier():
            raise TemplateSyntaxError(
                f"Invalid member name {name!r} in placeholder ?{{{content}}}", template, start + 1)

    return Placeholder(arg_index, tuple(path)), end + 1


def _parse_digits(template: str, start: int) -> Tuple[Placeholder, int]:
    end = start
    while end < len(template) and template[end] in _DIGITS:
        end += 1
    arg_index = int(template[start:end])
    if arg_index == 0:
        raise TemplateSyntaxError("Placeholder index must be 1 or greater", template, start)
    return Placeholder(arg_index), end


def parse(template: str) -> Template:
    """
    Parse a statement template into literal and placeholder segments.

    Args:
        template: statement text with embedded placeholders

    Returns:
        Template whose segments follow the source order

    Raises:
        TemplateSyntaxError: on an unterminated brace, empty braces, a zero or
            non-numeric index, or an invalid member name
    """
    if not isinstance(template, str):
        raise TemplateSyntaxError(f"Template must be a string, got {type(template).__name__}")

    segments = []
    literal = []
    i = 0
    length = len(template)

    while i < length:
        ch = template[i]
        nxt = template[i + 1] if i + 1 < length else ''
        if ch == '?' and nxt == '{':
            placeholder, i = _parse_braced(template, i + 1)
        elif ch == '?' and nxt in _DIGITS:
            placeholder, i = _parse_digits(template, i + 1)
        else:
            literal.append(ch)
            i += 1
            continue

        if literal:
            segments.append(Literal(''.join(literal)))
            literal = []
        segments.append(placeholder)

    if literal:
        segments.append(Literal(''.join(literal)))

    parsed = Template(template, tuple(segments))
    logger.debug(f"Parsed template with {len(parsed.placeholders)} placeholders: {template}")
    return parsed

"""
Parser for field annotations written in struct-tag syntax.

An annotation string holds space separated ``key:"value"`` pairs. The value
is a comma separated list whose first segment is the field name and whose
remaining segments are options::

    avro:"b,type=string|null" json:"bee,omitempty"

Annotations can also be supplied as a plain mapping (dataclass field
metadata, Arrow field metadata) of key to value text.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from avroinfer.constants import (ITEMS_OPTION_PREFIX, TOKEN_SEPARATOR,
                                 TYPE_OPTION_PREFIX, VALUES_OPTION_PREFIX)
from avroinfer.errors import TagParseError


@dataclass(frozen=True)
class FieldTag:
    """Marker carrying raw tag text, for use as ``Annotated[int, FieldTag('avro:"b"')]``."""
    text: str


@dataclass(frozen=True)
class Tag:
    """A single ``key:"name,opt,..."`` annotation."""
    key: str
    name: str
    options: Tuple[str, ...] = ()

    @classmethod
    def from_value(cls, key: str, value: str) -> 'Tag':
        """Split an annotation value into its name and options."""
        segments = value.split(',')
        return cls(key=key, name=segments[0], options=tuple(segments[1:]))


@dataclass(frozen=True)
class Tags:
    """Ordered collection of parsed annotations."""
    tags: Tuple[Tag, ...] = ()

    def get(self, key: str) -> Optional[Tag]:
        """Return the first annotation registered under key, or None."""
        for tag in self.tags:
            if tag.key == key:
                return tag
        return None

    def keys(self) -> List[str]:
        return [tag.key for tag in self.tags]

    def __add__(self, other: 'Tags') -> 'Tags':
        return Tags(self.tags + other.tags)

    def __len__(self) -> int:
        return len(self.tags)

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> 'Tags':
        """Build tags from string entries of a mapping; other entries are ignored."""
        return cls(tuple(Tag.from_value(key, value) for key, value in mapping.items()
                         if isinstance(key, str) and isinstance(value, str)))


_SIMPLE_ESCAPES = {
    'a': b'\x07', 'b': b'\b', 'f': b'\f', 'n': b'\n',
    'r': b'\r', 't': b'\t', 'v': b'\v', '\\': b'\\', '"': b'"',
}

_ESCAPE = re.compile(r'\\(?:([abfnrtv\\"])|x([0-9a-fA-F]{2})|([0-7]{3})|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8}))')


def _unquote(body: str) -> Optional[str]:
    """
    Unescape the inside of a double-quoted tag value, Go string-literal style.

    `\\x` and octal escapes are raw bytes; the result is decoded as UTF-8 with
    invalid sequences replaced. Returns None on a malformed escape or a raw
    newline.
    """
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == '\n':
            return None
        if ch != '\\':
            out += ch.encode('utf-8', 'surrogatepass')
            i += 1
            continue
        match = _ESCAPE.match(body, i)
        if match is None:
            return None
        simple, hex_byte, octal_byte, short_rune, long_rune = match.groups()
        if simple:
            out += _SIMPLE_ESCAPES[simple]
        elif hex_byte:
            out.append(int(hex_byte, 16))
        elif octal_byte:
            if int(octal_byte, 8) > 0xFF:
                return None
            out.append(int(octal_byte, 8))
        else:
            rune = int(short_rune or long_rune, 16)
            if rune > 0x10FFFF or 0xD800 <= rune <= 0xDFFF:
                return None
            out += chr(rune).encode('utf-8')
        i = match.end()
    return out.decode('utf-8', 'replace')


def _is_key_char(ch: str) -> bool:
    return ch > ' ' and ch not in (':', '"', '\x7f')


def parse_tags(text: str) -> Tags:
    """
    Parse struct-tag text into Tags.

    Args:
        text (str): Raw annotation text such as ``avro:"b" json:"bee"``.

    Returns:
        Tags: The annotations in the order they appear.

    Raises:
        TagParseError: If a key, separator or quoted value is malformed.
    """
    tags: List[Tag] = []
    rest = text
    while rest:
        rest = rest.lstrip(' ')
        if not rest:
            break
        i = 0
        while i < len(rest) and _is_key_char(rest[i]):
            i += 1
        if i == 0:
            raise TagParseError('bad syntax for struct tag key', text)
        if i + 1 >= len(rest) or rest[i] != ':':
            raise TagParseError('bad syntax for struct tag pair', text)
        if rest[i + 1] != '"':
            raise TagParseError('bad syntax for struct tag value', text)
        key = rest[:i]
        rest = rest[i + 1:]

        # scan the quoted value, skipping escaped characters
        i = 1
        while i < len(rest) and rest[i] != '"':
            if rest[i] == '\\':
                i += 1
            i += 1
        if i >= len(rest):
            raise TagParseError('bad syntax for struct tag value', text)
        quoted = rest[:i + 1]
        rest = rest[i + 1:]
        value = _unquote(quoted[1:-1])
        if value is None:
            raise TagParseError('bad syntax for struct tag value', text)
        tags.append(Tag.from_value(key, value))
    return Tags(tuple(tags))


def parse_field_tags(field_descriptor) -> Tags:
    """Combine a field's metadata entries (first) with its parsed raw tag text."""
    tags = Tags.from_mapping(field_descriptor.metadata)
    if field_descriptor.tag:
        tags = tags + parse_tags(field_descriptor.tag)
    return tags


def _split_tokens(option: str, prefix: str) -> List[str]:
    return option[len(prefix):].split(TOKEN_SEPARATOR)


@dataclass(frozen=True)
class FieldAnnotation:
    """Structured view of one annotation: name plus type, items and values overrides."""
    name: str = ''
    type_override: Optional[Tuple[str, ...]] = None
    items_override: Optional[Tuple[str, ...]] = None
    values_override: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_tag(cls, tag: Tag) -> 'FieldAnnotation':
        """
        Interpret a tag's options.

        Repeated ``type=`` options accumulate their tokens in order, while
        ``items=`` and ``values=`` keep the last occurrence.
        """
        type_tokens: Optional[List[str]] = None
        items_tokens: Optional[List[str]] = None
        values_tokens: Optional[List[str]] = None
        for option in tag.options:
            if option.startswith(TYPE_OPTION_PREFIX):
                type_tokens = (type_tokens or []) + _split_tokens(option, TYPE_OPTION_PREFIX)
            elif option.startswith(ITEMS_OPTION_PREFIX):
                items_tokens = _split_tokens(option, ITEMS_OPTION_PREFIX)
            elif option.startswith(VALUES_OPTION_PREFIX):
                values_tokens = _split_tokens(option, VALUES_OPTION_PREFIX)
        return cls(
            name=tag.name,
            type_override=_as_tuple(type_tokens),
            items_override=_as_tuple(items_tokens),
            values_override=_as_tuple(values_tokens))


def _as_tuple(tokens: Optional[Iterable[str]]) -> Optional[Tuple[str, ...]]:
    return tuple(tokens) if tokens is not None else None

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    Union,
)

from notmodified._exceptions import ParseError

"""
HTTP header parsing for conditional requests.

Token and quoted-string rules follow RFC 7230 Section 3.2.6, entity-tags
follow RFC 2616 Section 3.11 (opaque-tag is a quoted-string).
"""


def is_char(c: str) -> bool:
    """CHAR = any US-ASCII character (octets 0 - 127)"""
    if not c:
        return False
    return ord(c) <= 127


def is_ctl(c: str) -> bool:
    """CTL = control characters (0-31 and 127)"""
    if not c:
        return False
    b = ord(c)
    return b <= 31 or b == 127


def is_separator(c: str) -> bool:
    if not c:
        return False
    return c in '()<>@,;:\\"/[]?={} \t'


def is_token(c: str) -> bool:
    """
    Check if character is valid in an HTTP token.

    Per RFC 7230 Section 3.2.6, token chars are CHAR but not CTL or separators.

    Examples:
        >>> is_token('a')
        True
        >>> is_token('*')
        True
        >>> is_token(',')
        False
        >>> is_token('"')
        False
    """
    return is_char(c) and not is_ctl(c) and not is_separator(c)


def is_qd_text(c: str) -> bool:
    r"""
    Check if character is valid in quoted-text.

    qdtext = HTAB / SP / %x21 / %x23-5B / %x5D-7E / obs-text
    """
    if not c:
        return False

    b = ord(c)
    return b in (0x09, 0x20, 0x21) or 0x23 <= b <= 0x5B or 0x5D <= b <= 0x7E or b >= 0x80


def http_unquote_pair(c: str) -> str:
    """
    Unquote the character following a backslash in a quoted-pair.

    quoted-pair = "\" ( HTAB / SP / VCHAR / obs-text )

    Invalid characters are replaced with '?'.
    """
    if not c:
        return "?"

    b = ord(c)
    if b == 0x09 or b == 0x20 or (0x21 <= b <= 0x7E) or b >= 0x80:
        return c
    return "?"


def http_unquote(raw: str) -> tuple[int, str]:
    """
    Unquote the leading HTTP quoted-string of `raw`.

    Returns a tuple of (eaten, result), where eaten is the number of characters
    consumed including both quotes, or -1 when `raw` does not start with a
    complete quoted-string.

    Examples:
        >>> http_unquote('"xyzzy"')
        (7, 'xyzzy')
        >>> http_unquote('"a\\\\"b", "c"')
        (6, 'a"b')
        >>> http_unquote('"open')
        (-1, '')
    """
    if not raw or raw[0] != '"':
        return -1, ""

    buf: list[str] = []
    i = 1

    while i < len(raw):
        b = raw[i]

        if b == '"':
            return i + 1, "".join(buf)

        elif b == "\\":
            if i + 1 >= len(raw):
                return -1, ""

            buf.append(http_unquote_pair(raw[i + 1]))
            i += 2

        else:
            buf.append(b if is_qd_text(b) else "?")
            i += 1

    return -1, ""


class Headers(MutableMapping[str, str]):
    def __init__(self, headers: Mapping[str, Union[str, List[str]]]) -> None:
        self._headers = {k.lower(): ([v] if isinstance(v, str) else v[:]) for k, v in headers.items()}

    def get_list(self, key: str) -> Optional[List[str]]:
        return self._headers.get(key.lower(), None)

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), []).append(value)

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return repr(self._headers)

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers


@dataclass(frozen=True)
class EntityTag:
    value: str
    weak: bool = False

    def strong_equals(self, other: EntityTag) -> bool:
        return not self.weak and not other.weak and self.value == other.value

    def weak_equals(self, other: EntityTag) -> bool:
        return self.value == other.value

    def __str__(self) -> str:
        quoted = '"' + self.value.replace("\\", "\\\\").replace('"', '\\"') + '"'
        return f"W/{quoted}" if self.weak else quoted


class Wildcard:
    """The `*` member of If-Match and If-None-Match, matching any current entity."""

    _instance: Optional[Wildcard] = None

    def __new__(cls) -> Wildcard:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "WILDCARD"

    def __str__(self) -> str:
        return "*"


WILDCARD = Wildcard()

ETagCandidate = Union[EntityTag, Wildcard]


def _consume_entity_tag(raw: str) -> Tuple[int, EntityTag]:
    weak = raw.startswith("W/")
    offset = 2 if weak else 0

    if raw[offset : offset + 1] == '"':
        eaten, opaque = http_unquote(raw[offset:])
        if eaten == -1:
            raise ParseError("Invalid quotes around the entity-tag.")
        return offset + eaten, EntityTag(opaque, weak=weak)

    # Some origins send the opaque-tag without quotes, accept it as a bare token.
    end = offset
    while end < len(raw) and is_token(raw[end]):
        end += 1

    if end == offset:
        raise ParseError(f"The character {raw[offset : offset + 1]!r} is not permitted in an entity-tag.")
    if raw[offset:end] == "*":
        raise ParseError("The wildcard cannot be combined with entity-tags.")
    return end, EntityTag(raw[offset:end], weak=weak)


def parse_entity_tag(value: str) -> EntityTag:
    """
    Parse a single entity-tag, as found in the ETag response header.

    Examples:
        >>> parse_entity_tag('"xyzzy"')
        EntityTag(value='xyzzy', weak=False)
        >>> parse_entity_tag('W/"xyzzy"')
        EntityTag(value='xyzzy', weak=True)
    """
    raw = value.strip()
    if not raw:
        raise ParseError("The entity-tag should not be left blank.")

    eaten, tag = _consume_entity_tag(raw)
    if eaten != len(raw):
        raise ParseError(f"Unexpected data after the entity-tag: {raw[eaten:]!r}.")
    return tag


def parse_entity_tag_list(value: str) -> List[ETagCandidate]:
    """
    Parse an If-Match or If-None-Match field value.

    If-Match = "*" | 1#entity-tag

    Empty list elements are ignored, so a blank value yields an empty list.

    Examples:
        >>> parse_entity_tag_list("*")
        [WILDCARD]
        >>> parse_entity_tag_list('"a", W/"b"')
        [EntityTag(value='a', weak=False), EntityTag(value='b', weak=True)]
    """
    if value.strip() == "*":
        return [WILDCARD]

    tags: List[ETagCandidate] = []
    i = 0
    length = len(value)

    while i < length:
        while i < length and value[i] in (" ", "\t", ","):
            i += 1

        if i >= length:
            break

        eaten, tag = _consume_entity_tag(value[i:])
        tags.append(tag)
        i += eaten

        while i < length and value[i] in (" ", "\t"):
            i += 1

        if i < length and value[i] != ",":
            raise ParseError(f"Unexpected character {value[i]!r} after an entity-tag.")

    return tags


def has_range(headers: Mapping[str, str]) -> bool:
    return bool(headers.get("range", "").strip())

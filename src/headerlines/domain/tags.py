"""Tag domain logic — parsing ``"Name,opt1,opt2"`` field tags."""

from __future__ import annotations

import functools
from dataclasses import dataclass

SKIP = "-"
OMITEMPTY = "omitempty"
AS_INT = "int"
UNIX = "unix"


@dataclass(frozen=True, slots=True)
class TagOptions:
    """Membership-only option set parsed from the tail of a tag."""

    tokens: frozenset[str] = frozenset()

    def contains(self, option: str) -> bool:
        """Exact, case-sensitive membership test."""
        return option in self.tokens

    def __contains__(self, option: object) -> bool:
        return option in self.tokens


@functools.lru_cache(maxsize=512)
def parse_tag(tag: str) -> tuple[str, TagOptions]:
    """Split a raw tag into (name, options).

    Only the first comma separates the name; everything after it is the
    option list.

    Examples:
        >>> parse_tag("field,foobar,foo")[0]
        'field'
        >>> parse_tag(",omitempty")[1].contains("omitempty")
        True
        >>> parse_tag("omitempty")[1].contains("omitempty")
        False
    """
    name, sep, rest = tag.partition(",")
    if not sep:
        return name, TagOptions()
    return name, TagOptions(frozenset(rest.split(",")))


def resolve_key(declared: str, tag: str | None) -> tuple[str, TagOptions]:
    """Return the effective header key and options for a field.

    The declared name is used when there is no tag or the tag's name part is
    empty. A key of ``"-"`` means the field is never encoded.
    """
    if not tag:
        return declared, TagOptions()
    name, options = parse_tag(tag)
    return name or declared, options

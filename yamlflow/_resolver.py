"""Tag resolution — the registry of tags and the implicit scan.

A resolver is immutable once built.  `TagResolver.create(flags)` returns a
process-wide cached instance per flag combination; only USE_DATETIME
changes what gets wired in, so there are at most two of them.
"""

from __future__ import annotations

import functools
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Tuple

from ._constants import (
    TAG_BINARY,
    TAG_BOOL,
    TAG_FLOAT,
    TAG_INT,
    TAG_NON_SPECIFIC,
    TAG_NULL,
    TAG_PREFIX,
    TAG_STR,
    TAG_STR_ALIAS,
    TAG_TIMESTAMP,
)
from ._errors import ERR_UNRECOGNIZED_SCALAR, ERR_UNSUPPORTED_TAG, TagError
from ._flags import ParseFlags
from ._tags import (
    BinaryTag,
    BoolTag,
    FloatTag,
    IntTag,
    NonSpecificTag,
    NullTag,
    StrTag,
    Tag,
    TimestampTag,
)


class TagResolver:
    """Map of tag name -> Tag, plus the implicit tags in priority order.

    Unless given explicitly, the implicit order is the registration order
    of the tags whose `implicit` attribute is set.  The string tag accepts
    everything, so it has to come last.
    """

    def __init__(self, tags: Mapping[str, Tag],
                 implicit_tags: Optional[Sequence[Tag]] = None) -> None:
        self._tags = MappingProxyType(dict(tags))
        if implicit_tags is None:
            implicit_tags = [t for t in tags.values() if t.implicit]
        unique = []
        for tag in implicit_tags:
            # The "str" alias registers the same tag twice.
            if not any(tag is seen for seen in unique):
                unique.append(tag)
        self._implicit_tags: Tuple[Tag, ...] = tuple(unique)

    @property
    def tags(self) -> Mapping[str, Tag]:
        return self._tags

    @property
    def implicit_tags(self) -> Tuple[Tag, ...]:
        return self._implicit_tags

    @classmethod
    def create(cls, flags: int = 0) -> "TagResolver":
        """Return the standard resolver for the given parse flags."""
        return _standard_resolver(bool(ParseFlags(flags) & ParseFlags.USE_DATETIME))

    def extend(self, tags: Mapping[str, Tag]) -> "TagResolver":
        """Return a new resolver with extra tags.

        New implicit tags are tried before the existing ones, so a custom
        recognizer can claim text the built-in tags would otherwise take.
        """
        merged = dict(self._tags)
        merged.update(tags)
        new_implicit = [t for t in tags.values() if t.implicit]
        return TagResolver(merged, new_implicit + list(self._implicit_tags))

    def canonical_tag(self, tag: str) -> str:
        """Return the registry key for a tag as written after the first `!`.

        "!int" (from "!!int") and "int" (from "!int") both become
        "tag:yaml.org,2002:int".  Registered local names ("str") and
        names already containing a scheme are kept as they are.
        """
        if tag.startswith("!"):
            name = tag[1:]
            return TAG_PREFIX + name if name else TAG_NON_SPECIFIC
        if tag == TAG_NON_SPECIFIC or tag in self._tags or ":" in tag:
            return tag
        return TAG_PREFIX + tag

    def supports_tag(self, tag: str) -> bool:
        return self.canonical_tag(tag) in self._tags

    def resolve(self, value: str, tag: Optional[str] = None) -> Any:
        """Construct the typed value of a scalar.

        Without a tag the implicit tags are scanned in priority order and
        the first one that recognizes the text builds the value.  With a
        tag the matching tag builds it without any recognition step.
        """
        if tag is None:
            for implicit_tag in self._implicit_tags:
                if implicit_tag.recognize(value):
                    return implicit_tag.construct(value, True)
            raise TagError(ERR_UNRECOGNIZED_SCALAR, "Unsupported plain scalar {!r}.".format(value))

        key = self.canonical_tag(tag)
        try:
            explicit_tag = self._tags[key]
        except KeyError:
            raise TagError(ERR_UNSUPPORTED_TAG, "Unsupported tag {!r}.".format(tag))
        return explicit_tag.construct(value, False)

    def __repr__(self) -> str:
        return "<TagResolver tags={}>".format(sorted(self._tags))


@functools.lru_cache(maxsize=None)
def _standard_resolver(use_datetime: bool) -> TagResolver:
    str_tag = StrTag()
    return TagResolver({
        TAG_NON_SPECIFIC: NonSpecificTag(),
        TAG_NULL: NullTag(),
        TAG_BOOL: BoolTag(),
        TAG_INT: IntTag(),
        TAG_FLOAT: FloatTag(),
        TAG_TIMESTAMP: TimestampTag(use_datetime),
        TAG_BINARY: BinaryTag(),
        TAG_STR: str_tag,
        TAG_STR_ALIAS: str_tag,
    })

"""yamlflow — inline (flow) YAML parser and dumper with tag resolution.

Parse single-line flow YAML into Python values and dump Python values
back, with plain scalars typed through a tag resolver.

Quick start:
    >>> from yamlflow import parse, dump
    >>> parse("{name: demo, ports: [80, 0x1BB], ratio: .5e1, on: ~}")
    {'name': 'demo', 'ports': [80, 443], 'ratio': 5.0, 'on': None}
    >>> dump({"version": "010", "retries": 3, "scale": 2.0})
    "{ version: '010', retries: 3, scale: !!float 2 }"

Explicit tags override implicit typing:
    >>> parse("[!!str 42, !!binary SGVsbG8=]")
    ['42', b'Hello']
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ._dumper import dump_value
from ._errors import (
    ERR_CONSTANT_SUPPORT_DISABLED,
    ERR_DUPLICATE_KEY,
    ERR_EMPTY_REFERENCE,
    ERR_INVALID_BASE64_CHARSET,
    ERR_INVALID_BASE64_LENGTH,
    ERR_INVALID_ESCAPE,
    ERR_INVALID_OBJECT,
    ERR_INVALID_TIMESTAMP,
    ERR_LIMIT_DEPTH,
    ERR_MALFORMED_MAPPING,
    ERR_MALFORMED_QUOTED_SCALAR,
    ERR_MALFORMED_SCALAR,
    ERR_OBJECT_SUPPORT_DISABLED,
    ERR_REFERENCE_NOT_FOUND,
    ERR_RESERVED_INDICATOR,
    ERR_TRAILING_GARBAGE,
    ERR_TYPE_MISMATCH,
    ERR_UNDEFINED_CONSTANT,
    ERR_UNEXPECTED_CHARACTERS,
    ERR_UNRECOGNIZED_SCALAR,
    ERR_UNSUPPORTED_RESOURCE,
    ERR_UNSUPPORTED_TAG,
    ERR_UNTERMINATED_MAPPING,
    ERR_UNTERMINATED_SEQUENCE,
    AliasError,
    DumpError,
    FlowError,
    ParseError,
    TagError,
)
from ._flags import DumpFlags, DumpOptions, ParseFlags, ParseOptions
from ._inline import InlineParser
from ._resolver import TagResolver
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

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "parse",
    "dump",
    # Configuration
    "ParseFlags",
    "DumpFlags",
    "ParseOptions",
    "DumpOptions",
    # Type system
    "TagResolver",
    "Tag",
    "NullTag",
    "BoolTag",
    "IntTag",
    "FloatTag",
    "StrTag",
    "BinaryTag",
    "TimestampTag",
    "NonSpecificTag",
    # Exceptions
    "FlowError",
    "ParseError",
    "TagError",
    "AliasError",
    "DumpError",
    # Error codes
    "ERR_TRAILING_GARBAGE",
    "ERR_UNEXPECTED_CHARACTERS",
    "ERR_RESERVED_INDICATOR",
    "ERR_MALFORMED_SCALAR",
    "ERR_MALFORMED_QUOTED_SCALAR",
    "ERR_UNTERMINATED_SEQUENCE",
    "ERR_UNTERMINATED_MAPPING",
    "ERR_MALFORMED_MAPPING",
    "ERR_DUPLICATE_KEY",
    "ERR_INVALID_ESCAPE",
    "ERR_LIMIT_DEPTH",
    "ERR_UNRECOGNIZED_SCALAR",
    "ERR_UNSUPPORTED_TAG",
    "ERR_TYPE_MISMATCH",
    "ERR_INVALID_BASE64_LENGTH",
    "ERR_INVALID_BASE64_CHARSET",
    "ERR_INVALID_TIMESTAMP",
    "ERR_OBJECT_SUPPORT_DISABLED",
    "ERR_CONSTANT_SUPPORT_DISABLED",
    "ERR_UNDEFINED_CONSTANT",
    "ERR_INVALID_OBJECT",
    "ERR_EMPTY_REFERENCE",
    "ERR_REFERENCE_NOT_FOUND",
    "ERR_UNSUPPORTED_RESOURCE",
]


# ── Core API ──────────────────────────────────────────────────

def parse(source: str,
          flags: int = ParseFlags(0),
          references: Optional[Mapping[str, Any]] = None,
          *,
          line_number: Optional[int] = None,
          tag_resolver: Optional[TagResolver] = None) -> Any:
    """Parse an inline YAML expression into a Python value.

    `references` maps anchor names to already resolved values for `*name`
    aliases; it is only read.  `line_number` is the line of the enclosing
    document, reported on errors.  `tag_resolver` replaces the standard
    resolver for `flags`.

    Raises ParseError (or its TagError / AliasError subclasses).
    """
    options = ParseOptions.from_flags(flags)
    resolver = tag_resolver if tag_resolver is not None else TagResolver.create(flags)
    return InlineParser(options, resolver, references, line_number).parse(source)


def dump(value: Any, flags: int = DumpFlags(0)) -> str:
    """Render a Python value as an inline YAML string.

    Raises DumpError for values that cannot be represented, but only under
    DumpFlags.EXCEPTION_ON_INVALID_TYPE; otherwise they render as null.
    """
    return dump_value(value, DumpOptions.from_flags(flags))

"""yamlflow constants — tag names, reserved indicators, shared regexes.

Everything here is immutable and shared by the parser, the dumper and
the tag implementations.  The regular expressions are compiled once at
import time.
"""

from __future__ import annotations

import re

# ── Tag names ────────────────────────────────────────────────
# Every explicit tag is keyed by its canonical, namespaced form.
# "!!int" in source text and "!int" both end up as TAG_INT.
TAG_PREFIX = "tag:yaml.org,2002:"

TAG_NON_SPECIFIC = ""  # bare "!"
TAG_NULL = TAG_PREFIX + "null"
TAG_BOOL = TAG_PREFIX + "bool"
TAG_INT = TAG_PREFIX + "int"
TAG_FLOAT = TAG_PREFIX + "float"
TAG_STR = TAG_PREFIX + "str"
TAG_BINARY = TAG_PREFIX + "binary"
TAG_TIMESTAMP = TAG_PREFIX + "timestamp"

# Local alias kept for documents written against older dumpers.
TAG_STR_ALIAS = "str"

# ── Foreign objects and constants ────────────────────────────
OBJECT_PREFIX = "!php/object:"
LEGACY_OBJECT_PREFIX = "!!php/object:"
CONSTANT_PREFIX = "!php/const:"

# ── Plain-scalar rules ───────────────────────────────────────
# A plain scalar cannot start with @ or ` (reserved) nor with a block
# scalar indicator (| or >).
RESERVED_INDICATORS = frozenset("@`|>")
QUOTE_CHARS = frozenset("\"'")

# A colon after a plain mapping key must be followed by one of these.
KEY_COLON_FOLLOWERS = frozenset(" []{}")

# ── Signed 64-bit integer range ──────────────────────────────
# Python ints are arbitrary-precision; integer scalars outside this range
# stay strings, the same as on a 64-bit host.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# ── Nesting limit ────────────────────────────────────────────
# Deepest allowed collection nesting; well below the recursion limit.
MAX_DEPTH: int = 128

# ── Regular expressions ──────────────────────────────────────

# Double-quoted content allows backslash escapes; single-quoted content
# allows '' as an escaped quote.
QUOTED_STRING_RE = re.compile(
    r"""(?:"([^"\\]*(?:\\.[^"\\]*)*)"|'([^']*(?:''[^']*)*)')""",
    re.DOTALL,
)

# Trailing content allowed after a top-level construct.
TRAILING_COMMENT_RE = re.compile(r"\s+#.*\Z", re.DOTALL)

# Start of a comment inside a plain scalar.
INLINE_COMMENT_RE = re.compile(r"[ \t]+#")

HEX_RE = re.compile(r"^0x[0-9a-f_]+\Z", re.IGNORECASE)

DIGITS_RE = re.compile(r"^[0-9]+[_0-9]*\Z")

# Numeric literal accepted by the float tag once sign and group
# separators are removed ("1", "1.", "1.5", "1e5", "1.5E-3").
NUMERIC_RE = re.compile(r"^(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?\Z")

# Whole-string numeric test used by the dumper to force quoting of
# strings such as "1.5" or "-3".
NUMERIC_STRING_RE = re.compile(r"^[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?\Z")

TIMESTAMP_RE = re.compile(
    r"""
    ^
    (?P<year>[0-9][0-9][0-9][0-9])
    -(?P<month>[0-9][0-9]?)
    -(?P<day>[0-9][0-9]?)
    (?:(?:[Tt]|[ \t]+)
    (?P<hour>[0-9][0-9]?)
    :(?P<minute>[0-9][0-9])
    :(?P<second>[0-9][0-9])
    (?:\.(?P<fraction>[0-9]*))?
    (?:[ \t]*(?P<tz>Z|(?P<tz_sign>[-+])(?P<tz_hour>[0-9][0-9]?)
    (?::(?P<tz_minute>[0-9][0-9]))?))?)?
    \Z
    """,
    re.VERBOSE,
)

BASE64_RE = re.compile(r"^[A-Z0-9+/]+={0,2}\Z", re.IGNORECASE)

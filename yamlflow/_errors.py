"""yamlflow error codes and exception classes.

Every exception carries a `.code` attribute holding one of the ERR_*
strings below.  Tests and callers compare codes, never messages.

    FlowError
    ├── ParseError        malformed flow syntax
    │   ├── TagError      type construction / tag policy failures
    │   └── AliasError    unresolvable *alias references
    └── DumpError         values that cannot be rendered
"""

from __future__ import annotations

from typing import Optional

# ── Syntax errors ────────────────────────────────────────────
ERR_TRAILING_GARBAGE: str = "ERR_TRAILING_GARBAGE"
ERR_UNEXPECTED_CHARACTERS: str = "ERR_UNEXPECTED_CHARACTERS"
ERR_RESERVED_INDICATOR: str = "ERR_RESERVED_INDICATOR"
ERR_MALFORMED_SCALAR: str = "ERR_MALFORMED_SCALAR"
ERR_MALFORMED_QUOTED_SCALAR: str = "ERR_MALFORMED_QUOTED_SCALAR"
ERR_UNTERMINATED_SEQUENCE: str = "ERR_UNTERMINATED_SEQUENCE"
ERR_UNTERMINATED_MAPPING: str = "ERR_UNTERMINATED_MAPPING"
ERR_MALFORMED_MAPPING: str = "ERR_MALFORMED_MAPPING"
ERR_DUPLICATE_KEY: str = "ERR_DUPLICATE_KEY"
ERR_INVALID_ESCAPE: str = "ERR_INVALID_ESCAPE"
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"

# ── Tag errors ───────────────────────────────────────────────
ERR_UNRECOGNIZED_SCALAR: str = "ERR_UNRECOGNIZED_SCALAR"
ERR_UNSUPPORTED_TAG: str = "ERR_UNSUPPORTED_TAG"
ERR_TYPE_MISMATCH: str = "ERR_TYPE_MISMATCH"
ERR_INVALID_BASE64_LENGTH: str = "ERR_INVALID_BASE64_LENGTH"
ERR_INVALID_BASE64_CHARSET: str = "ERR_INVALID_BASE64_CHARSET"
ERR_INVALID_TIMESTAMP: str = "ERR_INVALID_TIMESTAMP"
ERR_OBJECT_SUPPORT_DISABLED: str = "ERR_OBJECT_SUPPORT_DISABLED"
ERR_CONSTANT_SUPPORT_DISABLED: str = "ERR_CONSTANT_SUPPORT_DISABLED"
ERR_UNDEFINED_CONSTANT: str = "ERR_UNDEFINED_CONSTANT"
ERR_INVALID_OBJECT: str = "ERR_INVALID_OBJECT"

# ── Alias errors ─────────────────────────────────────────────
ERR_EMPTY_REFERENCE: str = "ERR_EMPTY_REFERENCE"
ERR_REFERENCE_NOT_FOUND: str = "ERR_REFERENCE_NOT_FOUND"

# ── Dump errors ──────────────────────────────────────────────
ERR_UNSUPPORTED_RESOURCE: str = "ERR_UNSUPPORTED_RESOURCE"
# ERR_OBJECT_SUPPORT_DISABLED is shared with the parser side.


class FlowError(Exception):
    """Base class for every yamlflow error.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code


class ParseError(FlowError):
    """Malformed inline YAML.

    `snippet` is the offending part of the source when known; `line` is the
    1-based line of the enclosing document when the caller supplied one.
    """

    def __init__(self, code: str, msg: str = "",
                 snippet: Optional[str] = None,
                 line: Optional[int] = None) -> None:
        super().__init__(code, msg)
        self.snippet = snippet
        self.line = line

    def __str__(self) -> str:
        msg = super().__str__()
        if self.line is not None:
            msg = "{} at line {}".format(msg, self.line)
        return msg


class TagError(ParseError):
    """A scalar could not be constructed for its (explicit or implicit) tag."""


class AliasError(ParseError):
    """An `*alias` reference could not be resolved."""


class DumpError(FlowError):
    """A value cannot be represented in inline YAML."""

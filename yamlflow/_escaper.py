"""Quoted-scalar escaping and unescaping.

The parser only needs the two unescape functions: both take the content
of an already delimited quoted scalar (outer quotes removed).  The dumper
uses the other four to decide how a string has to be quoted.
"""

from __future__ import annotations

import re

from ._errors import ERR_INVALID_ESCAPE, ParseError

# ── Unescaping ───────────────────────────────────────────────

_ESCAPE_RE = re.compile(r"\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|.)", re.DOTALL)

_SIMPLE_ESCAPES = {
    "0": "\x00",
    "a": "\x07",
    "b": "\x08",
    "t": "\t",
    "\t": "\t",
    "n": "\n",
    "v": "\x0b",
    "f": "\x0c",
    "r": "\r",
    "e": "\x1b",
    " ": " ",
    '"': '"',
    "/": "/",
    "\\": "\\",
    "N": "\u0085",  # next line
    "_": "\u00a0",  # non-breaking space
    "L": "\u2028",  # line separator
    "P": "\u2029",  # paragraph separator
}


def unescape_single_quoted(value: str) -> str:
    return value.replace("''", "'")


def unescape_double_quoted(value: str) -> str:
    return _ESCAPE_RE.sub(_unescape_character, value)


def _unescape_character(m: "re.Match[str]") -> str:
    seq = m.group(1)
    if seq[0] in "xuU" and len(seq) > 1:
        try:
            return chr(int(seq[1:], 16))
        except (ValueError, OverflowError):
            raise ParseError(ERR_INVALID_ESCAPE,
                             "Escape \"\\{}\" is not a valid code point.".format(seq),
                             snippet=m.group(0))
    try:
        return _SIMPLE_ESCAPES[seq]
    except KeyError:
        raise ParseError(ERR_INVALID_ESCAPE,
                         "Found unknown escape character \"\\{}\".".format(seq),
                         snippet=m.group(0))


# ── Escaping ─────────────────────────────────────────────────

# Characters that can only be written inside double quotes.
_DOUBLE_QUOTE_RE = re.compile("[\x00-\x1f\u0085\u00a0\u2028\u2029]")

_DOUBLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\x00": "\\0",
    "\x07": "\\a",
    "\x08": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\x0b": "\\v",
    "\x0c": "\\f",
    "\r": "\\r",
    "\x1b": "\\e",
    "\u0085": "\\N",
    "\u00a0": "\\_",
    "\u2028": "\\L",
    "\u2029": "\\P",
}

_SINGLE_QUOTE_WORDS = frozenset(
    ["null", "~", "true", "false", "y", "n", "yes", "no", "on", "off"]
)

# Any of these characters anywhere, or an indicator at the start.
_SINGLE_QUOTE_RE = re.compile(r"""[\s'":{}\[\],&*#?]|\A[-?|<>=!%@`]""")


def requires_double_quoting(value: str) -> bool:
    return _DOUBLE_QUOTE_RE.search(value) is not None


def escape_with_double_quotes(value: str) -> str:
    out = []
    for ch in value:
        esc = _DOUBLE_ESCAPES.get(ch)
        if esc is None and ch < "\x20":
            esc = "\\x{:02x}".format(ord(ch))
        out.append(esc if esc is not None else ch)
    return '"{}"'.format("".join(out))


def requires_single_quoting(value: str) -> bool:
    if value.lower() in _SINGLE_QUOTE_WORDS:
        return True
    return _SINGLE_QUOTE_RE.search(value) is not None


def escape_with_single_quotes(value: str) -> str:
    return "'{}'".format(value.replace("'", "''"))

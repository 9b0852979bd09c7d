"""Inline (flow) YAML parser.

Recursive descent over a single-line flow expression:

    [a, b, [c]]          sequence
    {a: 1, b: {c: 2}}    mapping
    'quoted', "quoted"   quoted scalars (never type-evaluated)
    plain                plain scalars, typed by the TagResolver

All grammar functions share one `_Cursor` (text + offset).  A function
that consumes a construct leaves the offset on its last character: the
closing bracket of a collection, or the terminator that ended a scalar.
The caller decides whether to step past it.
"""

from __future__ import annotations

import functools
import logging
import re
from types import SimpleNamespace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ._constants import (
    CONSTANT_PREFIX,
    INLINE_COMMENT_RE,
    KEY_COLON_FOLLOWERS,
    LEGACY_OBJECT_PREFIX,
    MAX_DEPTH,
    OBJECT_PREFIX,
    QUOTE_CHARS,
    QUOTED_STRING_RE,
    RESERVED_INDICATORS,
    TRAILING_COMMENT_RE,
)
from ._errors import (
    ERR_CONSTANT_SUPPORT_DISABLED,
    ERR_DUPLICATE_KEY,
    ERR_EMPTY_REFERENCE,
    ERR_LIMIT_DEPTH,
    ERR_MALFORMED_MAPPING,
    ERR_MALFORMED_QUOTED_SCALAR,
    ERR_MALFORMED_SCALAR,
    ERR_OBJECT_SUPPORT_DISABLED,
    ERR_REFERENCE_NOT_FOUND,
    ERR_RESERVED_INDICATOR,
    ERR_TRAILING_GARBAGE,
    ERR_UNEXPECTED_CHARACTERS,
    ERR_UNTERMINATED_MAPPING,
    ERR_UNTERMINATED_SEQUENCE,
    AliasError,
    ParseError,
    TagError,
)
from ._escaper import unescape_double_quoted, unescape_single_quoted
from ._flags import ParseOptions
from ._objects import lookup_constant, unserialize_object
from ._resolver import TagResolver

logger = logging.getLogger(__name__)

# Characters stripped around plain scalars.
_TRIM = " \t\n\r\x00\x0b"

SEQUENCE_TERMINATORS: Tuple[str, ...] = (",", "]")
MAPPING_TERMINATORS: Tuple[str, ...] = (",", "}")
KEY_TERMINATORS: Tuple[str, ...] = (":", " ")

_TAG_NAME_RE = re.compile(r"[^ \t]*")


@functools.lru_cache(maxsize=None)
def _terminator_re(terminators: Tuple[str, ...]) -> "re.Pattern[str]":
    # Shortest non-empty run up to the first terminator.
    return re.compile("(.+?)(?:{})".format("|".join(re.escape(t) for t in terminators)))


class _Cursor:
    __slots__ = ("text", "pos", "depth")

    def __init__(self, text: str, pos: int = 0, depth: int = 0) -> None:
        self.text = text
        self.pos = pos
        self.depth = depth

    def __repr__(self) -> str:
        return "<_Cursor pos={} depth={} near {!r}>".format(
            self.pos, self.depth, self.text[self.pos:self.pos + 20])


class InlineParser:
    """Parser state for one `parse` call.

    Options, resolver and reference table are fixed at construction; the
    only thing that moves is the cursor handed through the grammar
    functions.  Instances are cheap and must not be shared between
    concurrent calls.
    """

    def __init__(self, options: ParseOptions, resolver: TagResolver,
                 references: Optional[Mapping[str, Any]] = None,
                 line_number: Optional[int] = None) -> None:
        self.options = options
        self.resolver = resolver
        self.references: Mapping[str, Any] = references if references is not None else {}
        self.line_number = line_number

    # ── Entry point ──────────────────────────────────────────

    def parse(self, value: str) -> Any:
        value = value.strip(_TRIM)
        if not value:
            return ""

        try:
            cur = _Cursor(value)
            first = value[0]
            if first == "[":
                result = self.parse_sequence(cur)
                cur.pos += 1
            elif first == "{":
                result = self.parse_mapping(cur)
                cur.pos += 1
            else:
                result = self.parse_scalar(cur, None, evaluate=True)

            # Only a comment may follow.
            rest = value[cur.pos:]
            if rest and not TRAILING_COMMENT_RE.match(rest):
                raise ParseError(ERR_TRAILING_GARBAGE,
                                 "Unexpected characters near \"{}\".".format(rest),
                                 snippet=rest)
        except ParseError as e:
            if e.line is None:
                e.line = self.line_number
            raise

        return result

    # ── Scalars ──────────────────────────────────────────────

    def parse_scalar(self, cur: _Cursor, terminators: Optional[Tuple[str, ...]] = None,
                     evaluate: bool = True,
                     unterminated: str = ERR_MALFORMED_SCALAR) -> Any:
        """Parse a quoted or plain scalar starting at the cursor.

        Without terminators the scalar runs to the end of the text (minus
        a trailing comment).  Quoted scalars are returned as strings; plain
        ones are trimmed and, when `evaluate` is set, typed.
        """
        text = cur.text

        if cur.pos < len(text) and text[cur.pos] in QUOTE_CHARS:
            output = self.parse_quoted_scalar(cur)
            if terminators is not None:
                rest = text[cur.pos:].lstrip(" ")
                if not rest or rest[0] not in terminators:
                    raise ParseError(ERR_UNEXPECTED_CHARACTERS,
                                     "Unexpected characters ({}).".format(text[cur.pos:]),
                                     snippet=text[cur.pos:])
            return output

        if terminators is None:
            output = text[cur.pos:]
            cur.pos += len(output)
            m = INLINE_COMMENT_RE.search(output)
            if m:
                output = output[:m.start()]
        else:
            m = _terminator_re(terminators).match(text, cur.pos)
            if m is None:
                # A terminator right here means the scalar is empty, as in "{a: }".
                if text[cur.pos:cur.pos + 1] in terminators:
                    unterminated = ERR_MALFORMED_SCALAR
                raise ParseError(unterminated,
                                 "Malformed inline YAML string: {}.".format(text),
                                 snippet=text[cur.pos:])
            output = m.group(1)
            cur.pos += len(output)

        if output and output[0] in RESERVED_INDICATORS:
            raise ParseError(ERR_RESERVED_INDICATOR,
                             "The reserved indicator \"{}\" cannot start a plain scalar; "
                             "you need to quote the scalar.".format(output[0]),
                             snippet=output)

        if output and output[0] == "%":
            logger.warning("Not quoting the scalar %r starting with the \"%%\" indicator "
                           "character is deprecated.", output)

        output = output.strip(_TRIM)
        if evaluate:
            return self.evaluate_scalar(output)
        return output

    def parse_quoted_scalar(self, cur: _Cursor) -> str:
        m = QUOTED_STRING_RE.match(cur.text, cur.pos)
        if m is None:
            raise ParseError(ERR_MALFORMED_QUOTED_SCALAR,
                             "Malformed inline YAML string: {}.".format(cur.text[cur.pos:]),
                             snippet=cur.text[cur.pos:])

        inner = m.group(0)[1:-1]
        if cur.text[cur.pos] == '"':
            output = unescape_double_quoted(inner)
        else:
            output = unescape_single_quoted(inner)

        cur.pos = m.end()
        return output

    # ── Collections ──────────────────────────────────────────

    def parse_sequence(self, cur: _Cursor) -> List[Any]:
        """[foo, bar, ...]"""
        output: List[Any] = []
        text = cur.text
        n = len(text)
        self._descend(cur)
        cur.pos += 1

        while cur.pos < n:
            ch = text[cur.pos]
            if ch == "[":
                output.append(self.parse_sequence(cur))
            elif ch == "{":
                output.append(self.parse_mapping(cur))
            elif ch == "]":
                cur.depth -= 1
                return output
            elif ch in ", ":
                pass
            else:
                is_quoted = ch in QUOTE_CHARS
                value = self.parse_scalar(cur, SEQUENCE_TERMINATORS, evaluate=True,
                                          unterminated=ERR_UNTERMINATED_SEQUENCE)

                # [key: value] is shorthand for [{key: value}]
                if isinstance(value, str) and not is_quoted and ": " in value:
                    try:
                        value = self.parse_mapping(_Cursor("{" + value + "}", depth=cur.depth))
                    except ParseError as e:
                        logger.debug("Keeping %r as a string, not a mapping: %s", value, e)

                output.append(value)
                cur.pos -= 1

            cur.pos += 1

        raise ParseError(ERR_UNTERMINATED_SEQUENCE,
                         "Malformed inline YAML string: {}.".format(text),
                         snippet=text)

    def parse_mapping(self, cur: _Cursor) -> Any:
        """{foo: bar, bar: foo, ...}

        Returns a dict, or a SimpleNamespace under OBJECT_FOR_MAP.
        """
        output: Dict[str, Any] = {}
        text = cur.text
        n = len(text)
        self._descend(cur)
        cur.pos += 1

        while cur.pos < n:
            ch = text[cur.pos]
            if ch in " ,":
                cur.pos += 1
                continue
            if ch == "}":
                cur.depth -= 1
                if self.options.object_for_map:
                    return SimpleNamespace(**output)
                return output

            # key
            is_key_quoted = ch in QUOTE_CHARS
            key = self.parse_scalar(cur, KEY_TERMINATORS, evaluate=False)

            colon = text.find(":", cur.pos)
            if colon == -1 or colon + 1 >= n:
                break
            cur.pos = colon

            if not is_key_quoted and text[colon + 1] not in KEY_COLON_FOLLOWERS:
                raise ParseError(ERR_MALFORMED_MAPPING,
                                 "Colons must be followed by a space or an indication "
                                 "character (i.e. \" \", \",\", \"[\", \"]\", \"{\", \"}\").",
                                 snippet=text[colon:])

            # value
            while cur.pos < n:
                ch = text[cur.pos]
                if ch == "[":
                    value = self.parse_sequence(cur)
                elif ch == "{":
                    value = self.parse_mapping(cur)
                elif ch in ": ":
                    cur.pos += 1
                    continue
                else:
                    value = self.parse_scalar(cur, MAPPING_TERMINATORS, evaluate=True,
                                              unterminated=ERR_UNTERMINATED_MAPPING)
                    cur.pos -= 1

                cur.pos += 1
                self._store(output, key, value)
                break
            else:
                break

        raise ParseError(ERR_UNTERMINATED_MAPPING,
                         "Malformed inline YAML string: {}.".format(text),
                         snippet=text)

    def _descend(self, cur: _Cursor) -> None:
        cur.depth += 1
        if cur.depth > MAX_DEPTH:
            raise ParseError(ERR_LIMIT_DEPTH,
                             "Collections nested deeper than {} levels.".format(MAX_DEPTH),
                             snippet=cur.text[cur.pos:cur.pos + 20])

    def _store(self, output: Dict[str, Any], key: str, value: Any) -> None:
        # Keys must be unique; the first one wins.
        if key not in output:
            output[key] = value
            return
        if self.options.strict_keys:
            raise ParseError(ERR_DUPLICATE_KEY,
                             "Duplicate key \"{}\" detected.".format(key),
                             snippet=key)
        logger.debug("Duplicate key %r detected on line %s; keeping the first value.",
                     key, self.line_number)

    # ── Scalar evaluation ────────────────────────────────────

    def evaluate_scalar(self, scalar: str) -> Any:
        """Turn plain scalar text into a value.

        Aliases, object and constant literals are handled here; explicit
        tags the resolver knows are constructed explicitly; everything
        else goes through implicit resolution.
        """
        if scalar.startswith("*"):
            return self._evaluate_alias(scalar)

        if scalar.startswith("!"):
            if scalar.startswith(OBJECT_PREFIX):
                return self._evaluate_object(scalar[len(OBJECT_PREFIX):])
            if scalar.startswith(LEGACY_OBJECT_PREFIX):
                if self.options.object_support:
                    logger.warning("The !!php/object tag to indicate dumped objects is deprecated; "
                                   "use the !php/object tag instead.")
                return self._evaluate_object(scalar[len(LEGACY_OBJECT_PREFIX):])
            if scalar.startswith(CONSTANT_PREFIX):
                return self._evaluate_constant(scalar)

            tag = _TAG_NAME_RE.match(scalar, 1).group(0)
            if self.resolver.supports_tag(tag):
                rest = scalar[1 + len(tag):].lstrip(_TRIM)
                value = self.parse_scalar(_Cursor(rest), None, evaluate=False)
                return self.resolver.resolve(value, tag)
            logger.debug("Unsupported tag %r, resolving %r as a plain scalar.", tag, scalar)

        return self.resolver.resolve(scalar)

    def _evaluate_alias(self, scalar: str) -> Any:
        pos = scalar.find("#")
        name = scalar[1:pos] if pos != -1 else scalar[1:]
        name = name.rstrip(" \t")

        # an unquoted *
        if not name:
            raise AliasError(ERR_EMPTY_REFERENCE,
                             "A reference must contain at least one character.",
                             snippet=scalar)
        if name not in self.references:
            raise AliasError(ERR_REFERENCE_NOT_FOUND,
                             "Reference \"{}\" does not exist.".format(name),
                             snippet=scalar)
        return self.references[name]

    def _evaluate_object(self, payload: str) -> Any:
        if self.options.object_support:
            return unserialize_object(payload)
        if self.options.exception_on_invalid_type:
            raise TagError(ERR_OBJECT_SUPPORT_DISABLED,
                           "Object support when parsing a YAML file has been disabled.")
        return None

    def _evaluate_constant(self, scalar: str) -> Any:
        if self.options.constant_support:
            return lookup_constant(scalar[len(CONSTANT_PREFIX):])
        if self.options.exception_on_invalid_type:
            raise TagError(ERR_CONSTANT_SUPPORT_DISABLED,
                           "The string \"{}\" could not be parsed as a constant. Have you forgotten "
                           "to pass the ALLOW_CONSTANTS flag to the parser?".format(scalar),
                           snippet=scalar)
        return None

"""Scalar tags — recognition and construction of typed values.

Each tag answers two questions about a piece of scalar text:

    recognize(text)            is this plain scalar mine?  (implicit tags only)
    construct(text, implicit)  build the typed value

`construct(text, implicit=True)` is what the resolver calls after
`recognize` already said yes.  With `implicit=False` the tag re-checks the
text itself, because an explicit `!!int abc` never went through
recognition.  A text that fails that check is a TYPE_MISMATCH.
"""

from __future__ import annotations

import base64
import binascii
import calendar
import datetime
import logging
import math
import re
from typing import Any, Optional, Union

from ._constants import BASE64_RE, INT64_MAX, INT64_MIN, NUMERIC_RE, TIMESTAMP_RE
from ._errors import (
    ERR_INVALID_BASE64_CHARSET,
    ERR_INVALID_BASE64_LENGTH,
    ERR_INVALID_TIMESTAMP,
    ERR_TYPE_MISMATCH,
    TagError,
)

logger = logging.getLogger(__name__)

_DIGITS = "0123456789"

_HEX_INT_RE = re.compile(r"^0x_*[0-9A-Fa-f][0-9A-Fa-f_]*\Z")
_OCT_INT_RE = re.compile(r"^0o_*[0-7][0-7_]*\Z")
_DEC_INT_RE = re.compile(r"^[-+]?[0-9][0-9_]*\Z")
_OCT_DIGITS_RE = re.compile(r"^[0-7]+\Z")

# Leading integer prefix, the way a loose string-to-int cast reads it.
_LOOSE_INT_RE = re.compile(r"^[ \t\n\r\v\f]*([-+]?[0-9]+)")

_WHITESPACE_RE = re.compile(r"\s")


class Tag:
    """Base class for all tags.

    Subclasses that support implicit recognition set `implicit = True` and
    override `recognize`.
    """

    implicit = False

    def recognize(self, value: str) -> bool:
        return False

    def construct(self, value: Any, implicit: bool = False) -> Any:
        raise NotImplementedError

    def _check(self, value: Any, implicit: bool, kind: str) -> None:
        if not isinstance(value, str) or (not implicit and not self.recognize(value)):
            raise TagError(ERR_TYPE_MISMATCH, "not {}: {!r}".format(kind, value))

    def __repr__(self) -> str:
        return "<{}>".format(type(self).__name__)


class NullTag(Tag):
    implicit = True

    def recognize(self, value: str) -> bool:
        return value in ("", "~") or value.lower() == "null"

    def construct(self, value: Any, implicit: bool = False) -> None:
        return None


class BoolTag(Tag):
    implicit = True

    def recognize(self, value: str) -> bool:
        return value.lower() in ("true", "false")

    def construct(self, value: Any, implicit: bool = False) -> bool:
        self._check(value, implicit, "a bool")
        return value[0] in "tT"


class IntTag(Tag):
    """Decimal, hexadecimal (0x) and octal (0o or leading 0) integers.

    Decimal text whose integer value does not print back as the same text
    ("+5", "09"), and text in any base whose value does not fit in a signed
    64-bit integer, is returned as the cleaned string instead.
    """

    implicit = True

    def recognize(self, value: str) -> bool:
        if not value:
            return False
        if value.startswith("0o"):
            return _OCT_INT_RE.match(value) is not None
        if value.startswith("0x"):
            return _HEX_INT_RE.match(value) is not None
        return _DEC_INT_RE.match(value) is not None

    def construct(self, value: Any, implicit: bool = False) -> Union[int, str]:
        self._check(value, implicit, "an int")

        cleaned = value.replace("_", "")
        negative = cleaned.startswith("-")
        digits = cleaned[1:] if negative else cleaned

        if cleaned.startswith("0x"):
            n = int(cleaned[2:], 16)
        elif cleaned.startswith("0o"):
            n = int(cleaned[2:], 8)
        elif digits[0] == "0" and (negative or len(digits) > 1) and _OCT_DIGITS_RE.match(digits):
            # Leading zero means octal, for "-0..." too.
            n = -int(digits, 8) if negative else int(digits, 8)
        else:
            n = int(cleaned)
            if str(n) != cleaned:
                return cleaned

        # Every base shares the int64 range.
        if n < INT64_MIN or n > INT64_MAX:
            return cleaned
        return n


class FloatTag(Tag):
    implicit = True

    def recognize(self, value: str) -> bool:
        if not value:
            return False
        body = value[1:] if value[0] in "+-" else value
        if not body:
            return False
        if body.lower() in (".inf", ".nan"):
            return True
        if body[0] not in _DIGITS and body[0] != ".":
            return False
        return NUMERIC_RE.match(body.replace(",", "").replace("_", "")) is not None

    def construct(self, value: Any, implicit: bool = False) -> float:
        self._check(value, implicit, "a float")

        special = value.lower().lstrip("+-")
        if special == ".nan":
            return math.nan
        if special == ".inf":
            return -math.inf if value[0] == "-" else math.inf

        if "," in value:
            logger.warning("Using the comma as a group separator for floats is deprecated: %r", value)

        return float(value.replace(",", "").replace("_", ""))


class StrTag(Tag):
    implicit = True

    def recognize(self, value: str) -> bool:
        return True

    def construct(self, value: Any, implicit: bool = False) -> str:
        if not isinstance(value, str):
            raise TagError(ERR_TYPE_MISMATCH, "not a string: {!r}".format(value))
        return value


class BinaryTag(Tag):
    """Base64 encoded binary data.  Only ever used explicitly (`!!binary`)."""

    def construct(self, value: Any, implicit: bool = False) -> bytes:
        if not isinstance(value, str):
            raise TagError(ERR_TYPE_MISMATCH, "expected binary of type str, got {}".format(type(value).__name__))

        value = _WHITESPACE_RE.sub("", value)
        if not value:
            return b""

        if len(value) % 4 != 0:
            raise TagError(
                ERR_INVALID_BASE64_LENGTH,
                "The normalized base64 encoded data (data without whitespace characters) "
                "length must be a multiple of four ({} bytes given).".format(len(value)),
            )

        if not BASE64_RE.match(value):
            raise TagError(
                ERR_INVALID_BASE64_CHARSET,
                "The base64 encoded data ({}) contains invalid characters.".format(value),
            )

        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error:
            raise TagError(ERR_INVALID_BASE64_CHARSET, "Invalid base64 padding: {}".format(value))


class TimestampTag(Tag):
    """ISO-8601-ish timestamps, normalized to UTC.

    With `use_datetime` the result is an aware `datetime.datetime` in UTC,
    otherwise the number of seconds since the epoch as an `int`.  Text
    without a timezone is taken to be UTC.
    """

    implicit = True

    def __init__(self, use_datetime: bool = True) -> None:
        self.use_datetime = use_datetime

    def recognize(self, value: str) -> bool:
        # Minimal length of 8, e.g. "2001-1-1"
        if len(value) < 8 or not all(c in _DIGITS for c in value[:4]):
            return False
        return TIMESTAMP_RE.match(value) is not None

    def construct(self, value: Any, implicit: bool = False) -> Union[datetime.datetime, int]:
        self._check(value, implicit, "a timestamp")

        m = TIMESTAMP_RE.match(value)
        fraction = (m.group("fraction") or "")[:6].ljust(6, "0")
        try:
            dt = datetime.datetime(
                int(m.group("year")),
                int(m.group("month")),
                int(m.group("day")),
                int(m.group("hour") or 0),
                int(m.group("minute") or 0),
                int(m.group("second") or 0),
                int(fraction),
                tzinfo=_parse_tz(m),
            ).astimezone(datetime.timezone.utc)
        except (ValueError, OverflowError) as e:
            raise TagError(ERR_INVALID_TIMESTAMP, "invalid timestamp {!r}: {}".format(value, e))

        if self.use_datetime:
            return dt
        return calendar.timegm(dt.utctimetuple())

    def __repr__(self) -> str:
        return "<TimestampTag use_datetime={}>".format(self.use_datetime)


def _parse_tz(m: "re.Match[str]") -> Optional[datetime.tzinfo]:
    tz = m.group("tz")
    if not tz or tz == "Z":
        return datetime.timezone.utc
    offset = datetime.timedelta(hours=int(m.group("tz_hour")),
                                minutes=int(m.group("tz_minute") or 0))
    if m.group("tz_sign") == "-":
        offset = -offset
    return datetime.timezone(offset)


class NonSpecificTag(Tag):
    """The bare `!` tag.

    Deprecated escape hatch kept for old documents: text is cast to an
    integer the loose way ("12abc" -> 12, "abc" -> 0); anything that is
    not text passes through.
    """

    def construct(self, value: Any, implicit: bool = False) -> Any:
        if isinstance(value, str):
            m = _LOOSE_INT_RE.match(value)
            return int(m.group(1)) if m else 0
        return value

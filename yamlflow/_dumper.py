"""Inline (flow) YAML dumper.

`dump_value` renders one Python value as an inline YAML string such that
parsing it back gives the same value.  The dispatch order matters: bool
before int (bool is an int subclass), numbers before strings, and the
quoting checks from the most to the least restrictive.
"""

from __future__ import annotations

import base64
import datetime
import io
import math
import socket
from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any, Dict, List

from ._constants import DIGITS_RE, HEX_RE, NUMERIC_STRING_RE
from ._errors import (
    ERR_OBJECT_SUPPORT_DISABLED,
    ERR_UNSUPPORTED_RESOURCE,
    DumpError,
)
from ._escaper import (
    escape_with_double_quotes,
    escape_with_single_quotes,
    requires_double_quoting,
    requires_single_quoting,
)
from ._flags import DumpOptions
from ._objects import serialize_object
from ._resolver import TagResolver
from ._tags import StrTag

# Host resources that have no YAML representation.
_RESOURCE_TYPES = (io.IOBase, socket.socket)

_VALUE_TYPES = (type(None), bool, int, float, str, bytes, list, tuple, dict)


def dump_value(value: Any, options: DumpOptions) -> str:
    if isinstance(value, _RESOURCE_TYPES):
        if options.exception_on_invalid_type:
            raise DumpError(ERR_UNSUPPORTED_RESOURCE,
                            "Unable to dump resources in a YAML file (\"{}\").".format(type(value).__name__))
        return "null"

    if isinstance(value, datetime.datetime):
        return _dump_datetime(value)
    if isinstance(value, datetime.date):
        return value.isoformat()

    if not isinstance(value, _VALUE_TYPES):
        return _dump_object(value, options)

    if isinstance(value, (list, tuple, dict)):
        return dump_array(value, options)

    if value is None:
        return "null"
    # bool must be checked before int
    if value is True:
        return "true"
    if value is False:
        return "false"

    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _dump_float(value)

    if isinstance(value, bytes):
        return "!!binary " + base64.b64encode(value).decode("ascii")

    # str from here on; numeric text must stay a string
    if NUMERIC_STRING_RE.match(value):
        return "'{}'".format(value)
    if value == "":
        return "''"
    if requires_double_quoting(value):
        return escape_with_double_quotes(value)
    if (requires_single_quoting(value)
            or DIGITS_RE.match(value)
            or HEX_RE.match(value)
            or _resolves_to_non_string(value)):
        return escape_with_single_quotes(value)
    return value


def is_hash(value: Dict[Any, Any]) -> bool:
    """True unless the keys are exactly 0, 1, 2, ... in order."""
    for expected, key in enumerate(value):
        if isinstance(key, bool) or key != expected or not isinstance(key, int):
            return True
    return False


def dump_array(value: Any, options: DumpOptions) -> str:
    if isinstance(value, (list, tuple)):
        return "[{}]".format(", ".join(dump_value(v, options) for v in value))

    if value and not is_hash(value):
        return "[{}]".format(", ".join(dump_value(v, options) for v in value.values()))

    output: List[str] = []
    for k, v in value.items():
        output.append("{}: {}".format(dump_value(k, options), dump_value(v, options)))
    return "{{ {} }}".format(", ".join(output))


def _dump_datetime(value: datetime.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    if value.microsecond:
        return value.isoformat()
    return value.isoformat(timespec="seconds")


def _dump_object(value: Any, options: DumpOptions) -> str:
    if options.object_support:
        return "!php/object:" + serialize_object(value)

    if options.object_as_map:
        if isinstance(value, SimpleNamespace):
            return dump_array(dict(vars(value)), options)
        if isinstance(value, Mapping):
            return dump_array(dict(value), options)

    if options.exception_on_invalid_type:
        raise DumpError(ERR_OBJECT_SUPPORT_DISABLED,
                        "Object support when dumping a YAML file has been disabled.")
    return "null"


def _dump_float(value: float) -> str:
    # repr() is the shortest text that reads back to the same float.
    if math.isnan(value):
        return ".NaN"
    if math.isinf(value):
        return "-.Inf" if value < 0 else ".Inf"

    repr_ = repr(value)
    if value.is_integer():
        # Untagged, a whole number reads back as an int.
        if repr_.endswith(".0"):
            repr_ = repr_[:-2]
        return "!!float " + repr_
    return repr_


def _resolves_to_non_string(value: str) -> bool:
    # Plain text that an implicit tag other than str would claim.
    for tag in TagResolver.create().implicit_tags:
        if isinstance(tag, StrTag):
            return False
        if tag.recognize(value):
            return True
    return False

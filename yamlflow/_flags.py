"""Parse and dump flags.

Callers combine flags with `|`; every entry point turns them into a
frozen options record once, and that record is what travels through the
recursion.  Nothing here is ever mutated during a call.
"""

from __future__ import annotations

import enum
from typing import NamedTuple


class ParseFlags(enum.IntFlag):
    EXCEPTION_ON_INVALID_TYPE = 1
    ALLOW_OBJECTS = 2
    OBJECT_FOR_MAP = 4
    ALLOW_CONSTANTS = 8
    USE_DATETIME = 16
    # Duplicate mapping keys raise instead of keeping the first value.
    STRICT_KEYS = 32


class DumpFlags(enum.IntFlag):
    EXCEPTION_ON_INVALID_TYPE = 1
    ALLOW_OBJECTS = 2
    OBJECT_AS_MAP = 4


class ParseOptions(NamedTuple):
    exception_on_invalid_type: bool = False
    object_support: bool = False
    object_for_map: bool = False
    constant_support: bool = False
    use_datetime: bool = False
    strict_keys: bool = False

    @classmethod
    def from_flags(cls, flags: int) -> "ParseOptions":
        flags = ParseFlags(flags)
        return cls(
            exception_on_invalid_type=bool(flags & ParseFlags.EXCEPTION_ON_INVALID_TYPE),
            object_support=bool(flags & ParseFlags.ALLOW_OBJECTS),
            object_for_map=bool(flags & ParseFlags.OBJECT_FOR_MAP),
            constant_support=bool(flags & ParseFlags.ALLOW_CONSTANTS),
            use_datetime=bool(flags & ParseFlags.USE_DATETIME),
            strict_keys=bool(flags & ParseFlags.STRICT_KEYS),
        )


class DumpOptions(NamedTuple):
    exception_on_invalid_type: bool = False
    object_support: bool = False
    object_as_map: bool = False

    @classmethod
    def from_flags(cls, flags: int) -> "DumpOptions":
        flags = DumpFlags(flags)
        return cls(
            exception_on_invalid_type=bool(flags & DumpFlags.EXCEPTION_ON_INVALID_TYPE),
            object_support=bool(flags & DumpFlags.ALLOW_OBJECTS),
            object_as_map=bool(flags & DumpFlags.OBJECT_AS_MAP),
        )

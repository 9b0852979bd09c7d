"""Foreign objects (`!php/object:`) and named constants (`!php/const:`).

Object payloads are pickles, base64 encoded so they never contain flow
syntax delimiters.  Unpickling runs arbitrary code; the parser only gets
here when the caller passed ALLOW_OBJECTS.
"""

from __future__ import annotations

import base64
import binascii
import builtins
import importlib
import pickle
from typing import Any

from ._errors import ERR_INVALID_OBJECT, ERR_UNDEFINED_CONSTANT, TagError


def serialize_object(obj: Any) -> str:
    return base64.b64encode(pickle.dumps(obj)).decode("ascii")


def unserialize_object(payload: str) -> Any:
    try:
        raw = base64.b64decode(payload.strip(), validate=True)
        return pickle.loads(raw)
    except (binascii.Error, pickle.UnpicklingError, EOFError, ValueError,
            AttributeError, ImportError) as e:
        raise TagError(ERR_INVALID_OBJECT, "Unable to unserialize object: {}".format(e))


def lookup_constant(name: str) -> Any:
    """Resolve "module.attr" (or "package.module.Class.ATTR") to its value.

    A name without a dot is looked up in the builtins.  The longest
    importable module prefix wins.
    """
    parts = name.split(".")
    if not all(parts):
        raise TagError(ERR_UNDEFINED_CONSTANT, "The constant \"{}\" is not defined.".format(name))

    if len(parts) == 1:
        try:
            return getattr(builtins, name)
        except AttributeError:
            raise TagError(ERR_UNDEFINED_CONSTANT, "The constant \"{}\" is not defined.".format(name))

    for split in range(len(parts) - 1, 0, -1):
        try:
            target = importlib.import_module(".".join(parts[:split]))
        except ImportError:
            continue
        try:
            for attr in parts[split:]:
                target = getattr(target, attr)
        except AttributeError:
            break
        return target

    raise TagError(ERR_UNDEFINED_CONSTANT, "The constant \"{}\" is not defined.".format(name))

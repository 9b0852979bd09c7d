"""Data-driven parse tests.

Runs every vector in vectors/parse_vectors.json.  A vector either expects
a JSON value (compared through json.dumps, so 1 and 1.0 differ) or an
error code.

Usage:
    python tests/test_vectors.py [--vectors FILE]
    python -m pytest tests/test_vectors.py -v
    YAMLFLOW_VECTORS=path/to/vectors.json python tests/test_vectors.py
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import unittest
from typing import Any, Dict, List, Tuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from yamlflow import FlowError, ParseFlags, parse

# ── Locate vector data ────────────────────────────────────────

_VECTORS_FILE: str = os.environ.get(
    "YAMLFLOW_VECTORS",
    os.path.join(os.path.dirname(__file__), "vectors", "parse_vectors.json"),
)


def _load_vectors() -> List[dict]:
    with open(_VECTORS_FILE, "r", encoding="utf-8") as f:
        return json.load(f)["vectors"]


def _expected(vec: dict) -> Dict[str, Any]:
    if "err" in vec:
        return {"err": vec["err"]}
    return {"value": json.dumps(vec["expect"])}


def _run_vector(vec: dict) -> Dict[str, Any]:
    """Execute one vector.  Returns {"value": <json>} or {"err": code}."""
    flags = ParseFlags(0)
    for name in vec.get("flags", []):
        flags |= ParseFlags[name]

    try:
        return {"value": json.dumps(parse(vec["input"], flags))}
    except FlowError as e:
        return {"err": e.code}


# ── unittest integration ──────────────────────────────────────

class VectorTests(unittest.TestCase):
    """Dynamically generated: one test method per vector."""
    pass


def _make_test(vec: dict):
    def test_fn(self: unittest.TestCase) -> None:
        got = _run_vector(vec)
        exp = _expected(vec)
        self.assertEqual(got, exp,
                         "{} ({!r}): got {} expected {}".format(vec["test_id"], vec["input"], got, exp))
    return test_fn


# Attach test methods at import time.
for _vec in _load_vectors():
    _name = "test_{}".format(_vec["test_id"])
    _fn = _make_test(_vec)
    _fn.__name__ = _name
    _fn.__qualname__ = "VectorTests.{}".format(_name)
    setattr(VectorTests, _name, _fn)


# ── Standalone runner ─────────────────────────────────────────

def main() -> None:
    global _VECTORS_FILE

    parser = argparse.ArgumentParser(description="yamlflow parse vector runner")
    parser.add_argument("--vectors", default=None, help="Vector file to run")
    args, _remaining = parser.parse_known_args()
    if args.vectors:
        _VECTORS_FILE = args.vectors

    vectors = _load_vectors()
    failures: List[Tuple[str, dict, dict]] = []
    for vec in vectors:
        got = _run_vector(vec)
        exp = _expected(vec)
        if got != exp:
            failures.append((vec["test_id"], got, exp))

    passed = len(vectors) - len(failures)
    print("VECTORS: {}/{} PASS".format(passed, len(vectors)))
    for tid, got, exp in failures:
        print("  FAIL {}: got={} expected={}".format(tid, got, exp))

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()

"""Seeded random round-trip tests: parse(dump(v)) must give v back.

Generates value trees out of everything the dumper can produce a
parseable rendering for: null, bools, int64 ints, floats (including the
non-finite ones), strings biased towards the awkward cases, bytes, UTC
datetimes, lists and string-keyed dicts.

    YAMLFLOW_SEED=7 YAMLFLOW_ROUNDS=5000 python -m pytest tests/test_roundtrip.py
"""

from __future__ import annotations

import datetime
import math
import os
import random
import sys
import unittest
from typing import Any

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from yamlflow import ParseFlags, dump, parse

SEED = int(os.environ.get("YAMLFLOW_SEED", "4242"))
ROUNDS = int(os.environ.get("YAMLFLOW_ROUNDS", "500"))

UTC = datetime.timezone.utc

# Strings that look like something other than a string.
TRICKY_STRINGS = [
    "", "null", "Null", "~", "true", "False", "yes", "010", "09", "0x1F",
    "0o17", "-0", "+5", "1.5", "1.", ".", "0", "1e3", "1_000", "1,000.5",
    ".inf", "-.inf", ".NaN", "2001-12-14", "2001-12-14T21:59:43Z",
    "- a", "a: b", "a:b", "*ref", "&anchor", "!str", "!!int 1", "%x", "@x",
    "`x`", "|x", ">x", "?x", "# c", "a # c", " padded ", "it's", 'say "hi"',
    "[x]", "{x}", "x, y", "back\\slash", "tab\there", "new\nline",
    "\u0085", "\u00a0nbsp", "é", "中文",
    "0xFFFFFFFFFFFFFFFFFF", "0o1000000000000000000000", "-01000000000000000000001",
]

# Alphabet for generated strings: mostly plain characters, plus every
# character with a meaning in flow syntax.
ALPHABET = (
    "abcdefxyzABZ0123456789"
    " .-_:/,'\"#[]{}*&!%@`|>?~=\\\t\n"
    "éß中\u0085"
)


def rand_string(rng: random.Random) -> str:
    if rng.random() < 0.3:
        return rng.choice(TRICKY_STRINGS)
    return "".join(rng.choice(ALPHABET) for _ in range(rng.randint(0, 12)))


def rand_float(rng: random.Random) -> float:
    r = rng.random()
    if r < 0.1:
        return rng.choice([math.inf, -math.inf, 0.0, 5e-324, 1.7976931348623157e308])
    if r < 0.3:
        # Whole numbers must come back as floats.
        return float(rng.randint(-10**6, 10**6))
    if r < 0.4:
        return rng.uniform(-1, 1) * 10 ** rng.randint(-30, 30)
    return rng.uniform(-1e6, 1e6)


def rand_datetime(rng: random.Random) -> datetime.datetime:
    dt = datetime.datetime(1970, 1, 1, tzinfo=UTC) + datetime.timedelta(
        seconds=rng.randint(0, 4 * 10**9))
    if rng.random() < 0.5:
        dt = dt.replace(microsecond=rng.randint(1, 999999))
    return dt


def rand_scalar(rng: random.Random) -> Any:
    kind = rng.randint(0, 7)
    if kind == 0:
        return None
    if kind == 1:
        return rng.random() < 0.5
    if kind == 2:
        return rng.randint(-(2**63), 2**63 - 1)
    if kind == 3:
        return rand_float(rng)
    if kind == 4:
        return bytes(rng.randint(0, 255) for _ in range(rng.randint(0, 12)))
    if kind == 5:
        return rand_datetime(rng)
    return rand_string(rng)


def rand_value(rng: random.Random, depth: int = 0) -> Any:
    r = rng.random()
    if depth > 3 or r < 0.5:
        return rand_scalar(rng)
    if r < 0.75:
        return [rand_value(rng, depth + 1) for _ in range(rng.randint(0, 5))]
    return {rand_string(rng): rand_value(rng, depth + 1) for _ in range(rng.randint(0, 5))}


class TestRoundTrip(unittest.TestCase):
    def assertSameValue(self, got: Any, want: Any, path: str = "$") -> None:
        """Deep equality that also checks types and treats NaN as equal to NaN."""
        self.assertIs(type(got), type(want), "type mismatch at {}".format(path))
        if isinstance(want, float) and math.isnan(want):
            self.assertTrue(math.isnan(got), "expected NaN at {}".format(path))
        elif isinstance(want, list):
            self.assertEqual(len(got), len(want), "length mismatch at {}".format(path))
            for i, (g, w) in enumerate(zip(got, want)):
                self.assertSameValue(g, w, "{}[{}]".format(path, i))
        elif isinstance(want, dict):
            self.assertEqual(list(got), list(want), "keys mismatch at {}".format(path))
            for k in want:
                self.assertSameValue(got[k], want[k], "{}.{}".format(path, k))
        else:
            self.assertEqual(got, want, "value mismatch at {}".format(path))

    def roundtrip(self, value: Any) -> None:
        text = dump(value)
        try:
            got = parse(text, ParseFlags.USE_DATETIME)
        except Exception as e:
            self.fail("parse({!r}) from {!r} raised {!r}".format(text, value, e))
        self.assertSameValue(got, value)

    def test_tricky_strings(self):
        for s in TRICKY_STRINGS:
            with self.subTest(s=s):
                self.roundtrip(s)
                self.roundtrip([s])
                self.roundtrip({s: s})

    def test_nan(self):
        self.roundtrip(math.nan)
        self.roundtrip([math.nan, {"x": math.nan}])

    def test_random_scalars(self):
        rng = random.Random(SEED)
        for _ in range(ROUNDS):
            value = rand_scalar(rng)
            with self.subTest(value=value):
                self.roundtrip(value)

    def test_random_trees(self):
        rng = random.Random(SEED + 1)
        for _ in range(ROUNDS):
            value = rand_value(rng)
            with self.subTest(value=value):
                self.roundtrip(value)

    def test_dump_is_deterministic(self):
        rng = random.Random(SEED + 2)
        for _ in range(50):
            value = rand_value(rng)
            self.assertEqual(dump(value), dump(value))


if __name__ == "__main__":
    unittest.main()

"""yamlflow command-line interface.

Usage:
    python3 -m yamlflow parse '{a: 1, b: [x, 0x1F]}'
    echo '[2001-12-14, .inf]' | python3 -m yamlflow parse --datetime
    python3 -m yamlflow parse --refs refs.json '*base'
    echo '{"a": [1, 2.0, "010"]}' | python3 -m yamlflow dump
    python3 -m yamlflow version
"""

from __future__ import annotations

import argparse
import base64
import datetime
import json
import logging
import math
import sys
from types import SimpleNamespace
from typing import Any, List, Optional

from . import (
    DumpFlags,
    FlowError,
    ParseFlags,
    __version__,
    dump,
    parse,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yamlflow",
        description="yamlflow — inline YAML parser and dumper",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Log deprecations (-v) and debug details (-vv) to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── parse ──
    parse_p = sub.add_parser("parse", help="Parse an inline YAML expression, print JSON")
    parse_p.add_argument("expr", nargs="?", metavar="EXPR",
                         help="Expression to parse (default: read stdin)")
    parse_p.add_argument("--input", "-i", metavar="FILE",
                         help="Read the expression from FILE")
    parse_p.add_argument("--refs", metavar="FILE",
                         help="JSON object of values for *alias references")
    parse_p.add_argument("--datetime", action="store_true",
                         help="Build datetimes instead of epoch seconds")
    parse_p.add_argument("--objects", action="store_true",
                         help="Unserialize !php/object: literals")
    parse_p.add_argument("--constants", action="store_true",
                         help="Resolve !php/const: literals")
    parse_p.add_argument("--object-for-map", action="store_true",
                         help="Build mappings as namespaces")
    parse_p.add_argument("--strict-keys", action="store_true",
                         help="Reject duplicate mapping keys")
    parse_p.add_argument("--exceptions", action="store_true",
                         help="Fail on disabled objects/constants instead of yielding null")

    # ── dump ──
    dump_p = sub.add_parser("dump", help="Render a JSON document as inline YAML")
    dump_p.add_argument("--input", "-i", metavar="FILE",
                        help="Read JSON from FILE instead of stdin")
    dump_p.add_argument("--objects", action="store_true",
                        help="Serialize unknown objects as !php/object: literals")
    dump_p.add_argument("--object-as-map", action="store_true",
                        help="Render namespaces and mappings as YAML mappings")
    dump_p.add_argument("--exceptions", action="store_true",
                        help="Fail on values that cannot be dumped instead of writing null")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> str:
    """Read text from a file or stdin."""
    if filepath:
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()
    if sys.stdin.isatty():
        print("yamlflow: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.read()


def _to_json(value: Any) -> Any:
    """Make a parsed value JSON-serializable."""
    if isinstance(value, dict):
        return {str(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, SimpleNamespace):
        return {k: _to_json(v) for k, v in vars(value).items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, float):
        if math.isnan(value):
            return ".nan"
        if math.isinf(value):
            return "-.inf" if value < 0 else ".inf"
        return value
    if value is None or isinstance(value, (bool, int, str)):
        return value
    return repr(value)


def _cmd_parse(args: argparse.Namespace) -> None:
    source = args.expr if args.expr is not None else _read_input(args.input)

    flags = ParseFlags(0)
    if args.exceptions:
        flags |= ParseFlags.EXCEPTION_ON_INVALID_TYPE
    if args.objects:
        flags |= ParseFlags.ALLOW_OBJECTS
    if args.object_for_map:
        flags |= ParseFlags.OBJECT_FOR_MAP
    if args.constants:
        flags |= ParseFlags.ALLOW_CONSTANTS
    if args.datetime:
        flags |= ParseFlags.USE_DATETIME
    if args.strict_keys:
        flags |= ParseFlags.STRICT_KEYS

    references = None
    if args.refs:
        with open(args.refs, "r", encoding="utf-8") as f:
            references = json.load(f)

    value = parse(source, flags, references)
    print(json.dumps(_to_json(value), ensure_ascii=False))


def _cmd_dump(args: argparse.Namespace) -> None:
    value = json.loads(_read_input(args.input))

    flags = DumpFlags(0)
    if args.exceptions:
        flags |= DumpFlags.EXCEPTION_ON_INVALID_TYPE
    if args.objects:
        flags |= DumpFlags.ALLOW_OBJECTS
    if args.object_as_map:
        flags |= DumpFlags.OBJECT_AS_MAP

    print(dump(value, flags))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"yamlflow {__version__}")
        return

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG if args.verbose > 1 else logging.WARNING,
                            format="yamlflow: %(levelname)s: %(message)s")

    try:
        if args.command == "parse":
            _cmd_parse(args)
        elif args.command == "dump":
            _cmd_dump(args)
    except FlowError as e:
        print(f"yamlflow: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"yamlflow: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()

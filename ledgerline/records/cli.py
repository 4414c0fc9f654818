import argparse
import logging
import sys
from typing import List, Optional

from .handler import RecordHandler
from .options import Options
from .validator import RecordError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledgerline",
        description="Parse, inspect and rewrite multi-schema record documents.",
        epilog="Example usage:\n"
               "  ledgerline parse inventory.txt --options options.yaml --output inventory.json\n"
               "  ledgerline schemas inventory.txt\n"
               "  ledgerline roundtrip inventory.txt inventory-rewritten.txt",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--verbose", action="store_true", help="Log engine progress to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a document and dump it as JSON")
    parse_cmd.add_argument("document", help="Path to the document")
    parse_cmd.add_argument("--options", help="YAML or JSON options file", default=None)
    parse_cmd.add_argument("--output", help="Write JSON to this file instead of stdout", default=None)
    parse_cmd.add_argument("--quiet", action="store_true", help="Suppress progress messages")

    schemas_cmd = subparsers.add_parser("schemas", help="List the schemas of a document")
    schemas_cmd.add_argument("document", help="Path to the document")
    schemas_cmd.add_argument("--options", help="YAML or JSON options file", default=None)

    roundtrip_cmd = subparsers.add_parser("roundtrip", help="Parse a document and write it back")
    roundtrip_cmd.add_argument("document", help="Path to the document")
    roundtrip_cmd.add_argument("output", help="Path to write the rewritten document")
    roundtrip_cmd.add_argument("--options", help="YAML or JSON options file", default=None)
    roundtrip_cmd.add_argument("--quiet", action="store_true", help="Suppress progress messages")
    return parser


def _handler(args: argparse.Namespace) -> RecordHandler:
    options = Options.from_file(args.options) if args.options else Options()
    return RecordHandler(options, quiet=getattr(args, "quiet", False))


def cmd_parse(args: argparse.Namespace) -> int:
    handler = _handler(args)
    if not args.quiet:
        print(f"Parsing: {args.document}", file=sys.stderr)
    result = handler.read(args.document)
    json_str = handler.export(result, "json", args.output)
    if json_str is not None:
        print(json_str)
    return 0


def cmd_schemas(args: argparse.Namespace) -> int:
    result = _handler(args).read(args.document)
    for name in result.schemas:
        print(f"{name}\t{len(result[name])}")
    return 0


def cmd_roundtrip(args: argparse.Namespace) -> int:
    handler = _handler(args)
    result = handler.read(args.document)
    handler.write(args.output, result)
    if not args.quiet:
        print(f"Wrote {len(result)} schema(s) to: {args.output}")
    return 0


COMMANDS = {
    "parse": cmd_parse,
    "schemas": cmd_schemas,
    "roundtrip": cmd_roundtrip,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return COMMANDS[args.command](args)
    except (RecordError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

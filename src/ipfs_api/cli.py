"""ipfs-api - command-line front end for the object API.

Usage:
    ipfs-api [--api URL] resolve PATH [--recursive]
    ipfs-api [--api URL] stat PATH
    ipfs-api [--api URL] lookup PATH
    ipfs-api [--api URL] get PATH
    ipfs-api [--api URL] put [--data TEXT | --input FILE] [--link NAME=PATH ...]
    ipfs-api [--api URL] pin PATH [--no-recursive]
    ipfs-api [--api URL] unpin PATH [--no-recursive]
    ipfs-api [--api URL] publish PATH [--lifetime SECONDS]

All output is deterministic JSON on stdout.

Exit codes:
    0: Success
    1: Internal error (unexpected)
    2: API error (transport, remote, decoding or input error)
"""

from __future__ import annotations

import argparse
import base64
import json
import sys
from datetime import timedelta
from typing import Any

from ipfs_api.config import set_api_endpoint
from ipfs_api.errors import CommitError, IpfsApiError
from ipfs_api.name import publish_for, resolve
from ipfs_api.object import CommittedObject, Link, Object, get
from ipfs_api.reference import Reference
from ipfs_api.stats import lookup, stat


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _make_error_result(error_type: str, message: str) -> dict[str, Any]:
    return {"error": {"message": message, "type": error_type}}


def _reference_to_dict(ref: Reference) -> dict[str, Any]:
    return {"hash": ref.hash, "path": str(ref), "size": ref.size}


def _object_to_dict(obj: CommittedObject) -> dict[str, Any]:
    return {
        "data_base64": base64.b64encode(obj.data).decode("ascii"),
        "hash": obj.hash,
        "links": [
            {"hash": link.object.hash, "name": link.name, "size": link.object.size}
            for link in obj.links
        ],
        "size": obj.size,
    }


def _parse_link(spec: str) -> tuple[str, str]:
    name, sep, path = spec.partition("=")
    if not sep or not path:
        raise argparse.ArgumentTypeError(f"expected NAME=PATH, got '{spec}'")
    return name, path


def _read_data(args: argparse.Namespace) -> bytes:
    if args.input:
        with open(args.input, "rb") as f:
            return f.read()
    if args.data is not None:
        return str(args.data).encode("utf-8")
    return b""


def cmd_resolve(args: argparse.Namespace) -> int:
    _output_json({"path": resolve(args.path, recursive=args.recursive)})
    return 0


def cmd_stat(args: argparse.Namespace) -> int:
    _output_json(stat(args.path).model_dump())
    return 0


def cmd_lookup(args: argparse.Namespace) -> int:
    _output_json(_reference_to_dict(lookup(args.path)))
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    _output_json(_object_to_dict(get(args.path)))
    return 0


def cmd_put(args: argparse.Namespace) -> int:
    """Build a draft from data and links, then commit it."""
    links = [Link(name=name, object=lookup(path)) for name, path in args.link]
    committed = Object(data=_read_data(args), links=links).commit()
    _output_json(_reference_to_dict(committed.reference))
    return 0


def cmd_pin(args: argparse.Namespace) -> int:
    ref = lookup(args.path)
    if args.command == "pin":
        ref.pin(recursive=args.recursive)
    else:
        ref.unpin(recursive=args.recursive)
    _output_json({"hash": ref.hash, "pinned": args.command == "pin"})
    return 0


def cmd_publish(args: argparse.Namespace) -> int:
    ref = lookup(args.path)
    publish_for(ref, timedelta(seconds=args.lifetime))
    _output_json({"hash": ref.hash, "lifetime_seconds": args.lifetime})
    return 0


COMMAND_DISPATCH = {
    "resolve": cmd_resolve,
    "stat": cmd_stat,
    "lookup": cmd_lookup,
    "get": cmd_get,
    "put": cmd_put,
    "pin": cmd_pin,
    "unpin": cmd_pin,
    "publish": cmd_publish,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ipfs-api",
        description="IPFS object API client",
    )
    parser.add_argument(
        "--api",
        metavar="URL",
        help="API endpoint (default: $IPFS_API_URL or http://127.0.0.1:5001/api/v0/)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve an IPFS or IPNS path")
    resolve_parser.add_argument("path")
    resolve_parser.add_argument(
        "--recursive",
        action="store_true",
        default=False,
        help="Resolve until the result is an /ipfs/ path",
    )

    for name, description in [
        ("stat", "Show object stats without fetching the body"),
        ("lookup", "Show a reference (hash and cumulative size) to an object"),
        ("get", "Fetch an object"),
    ]:
        sub = subparsers.add_parser(name, help=description)
        sub.add_argument("path")

    put_parser = subparsers.add_parser("put", help="Commit a new object")
    source = put_parser.add_mutually_exclusive_group()
    source.add_argument("--data", help="Object data as UTF-8 text")
    source.add_argument("--input", metavar="FILE", help="Read object data from FILE")
    put_parser.add_argument(
        "--link",
        action="append",
        default=[],
        type=_parse_link,
        metavar="NAME=PATH",
        help="Add a link to the object at PATH (repeatable, order is kept)",
    )

    for name, description in [
        ("pin", "Pin an object"),
        ("unpin", "Unpin an object (succeeds if it was not pinned)"),
    ]:
        sub = subparsers.add_parser(name, help=description)
        sub.add_argument("path")
        sub.add_argument(
            "--no-recursive",
            dest="recursive",
            action="store_false",
            default=True,
            help="Only affect the object itself, not its descendants",
        )

    publish_parser = subparsers.add_parser(
        "publish", help="Publish an object under this node's identity"
    )
    publish_parser.add_argument("path")
    publish_parser.add_argument(
        "--lifetime",
        type=float,
        default=24 * 3600,
        metavar="SECONDS",
        help="Record lifetime in seconds (default: 86400)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success
        1: Internal error (unexpected)
        2: API error
    """
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            return 0

        if args.api:
            set_api_endpoint(args.api)

        return COMMAND_DISPATCH[args.command](args)

    except CommitError as e:
        _output_json(_make_error_result(type(e.error).__name__, e.message))
        return 2
    except IpfsApiError as e:
        _output_json(_make_error_result(type(e).__name__, e.message))
        return 2
    except (OSError, ValueError) as e:
        _output_json(_make_error_result("InvalidInputError", str(e)))
        return 2
    except Exception as e:
        # Unexpected errors return exit code 1
        _output_json(_make_error_result("InternalError", str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point: ``lnkrecord create`` / ``lnkrecord show``."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from ._constants import (
    ANSI_CODEPAGE,
    HOTKEY_MOD,
    SW_SHOWMAXIMIZED,
    SW_SHOWMINNOACTIVE,
    SW_SHOWNORMAL,
    VK_KEYS,
)
from ._util import _resolve_timestamp, from_filetime
from .codec import format_record, load_file, save_file
from .errors import LinkError
from .record import LinkRecord

SHOW_MAP = {
    "normal": SW_SHOWNORMAL,
    "maximized": SW_SHOWMAXIMIZED,
    "minimized": SW_SHOWMINNOACTIVE,
}

# Reverse lookups for --hotkey parsing
_MOD_NAMES = {v: k for k, v in HOTKEY_MOD.items()}
_VK_NAMES = {v.upper(): k for k, v in VK_KEYS.items()}

_TIME_KEYS = ("creation_time", "access_time", "write_time")


def _parse_timestamp(val) -> datetime | None:
    """Parse an ISO 8601 string or FILETIME tick count into a datetime."""
    try:
        ts = _resolve_timestamp(val)
    except ValueError:
        try:
            ts = int(val, 0)
        except ValueError:
            raise ValueError(
                f"Invalid timestamp: {val!r} (expected ISO 8601 or FILETIME ticks)"
            ) from None
    if isinstance(ts, int):
        return from_filetime(ts)
    return ts


def _parse_hotkey(val: str) -> int:
    """Parse a hotkey string like ``CTRL+C`` into the header hotkey word.

    Format: ``MOD[+MOD]+KEY`` where MOD is SHIFT/CTRL/ALT and KEY is a
    virtual key name (A-Z, 0-9, F1-F24, NUMLOCK, SCROLLLOCK).
    """
    *mods, key = [p.strip().upper() for p in val.split("+")]
    if not mods:
        raise argparse.ArgumentTypeError(f"Hotkey {val!r} needs a modifier (e.g. CTRL+C)")

    mask = 0
    for mod in mods:
        try:
            mask |= _MOD_NAMES[mod]
        except KeyError:
            raise argparse.ArgumentTypeError(
                f"Hotkey modifier {mod!r} is not SHIFT, CTRL or ALT"
            ) from None
    if key not in _VK_NAMES:
        raise argparse.ArgumentTypeError(f"Hotkey key {key!r} has no virtual key code")
    return (mask << 8) | _VK_NAMES[key]


def _apply_config(record: LinkRecord, cfg: dict) -> None:
    """Apply JSON/CLI settings (keys match LinkRecord fields) through the mutators."""
    setters = {
        "description": record.set_description,
        "working_dir": record.set_working_dir,
        "arguments": record.set_arguments,
        "relative_path": record.set_relative_path,
        "hotkey": record.set_hotkey,
        "show_command": record.set_show_command,
    }
    for key, setter in setters.items():
        if key in cfg:
            setter(cfg[key])
    if "icon_path" in cfg or "icon_index" in cfg:
        record.set_icon_location(
            cfg.get("icon_path", record.icon_path),
            cfg.get("icon_index", record.icon_index),
        )
    if "id_list" in cfg:
        record.set_id_list(bytes.fromhex(cfg["id_list"]))
    for key in ("file_attributes", "file_size"):
        if key in cfg:
            setattr(record, key, int(cfg[key]))
    for key in _TIME_KEYS:
        if key in cfg:
            setattr(record, key, _parse_timestamp(cfg[key]))


def _cmd_create(args: argparse.Namespace) -> None:
    # Load JSON config as base (keys match LinkRecord fields)
    cfg: dict = {}
    if args.from_json:
        cfg = json.loads(Path(args.from_json).read_text())

    # Map CLI attr -> record field; only override if explicitly set
    _cli_overrides = {
        "description": "description",
        "working_dir": "working_dir",
        "arguments": "arguments",
        "relative_path": "relative_path",
        "icon": "icon_path",
        "icon_index": "icon_index",
        "creation_time": "creation_time",
        "access_time": "access_time",
        "write_time": "write_time",
    }
    for attr, key in _cli_overrides.items():
        val = getattr(args, attr, None)
        if val is not None:
            cfg[key] = val
    if args.show is not None:
        cfg["show_command"] = SHOW_MAP[args.show]
    if args.hotkey is not None:
        cfg["hotkey"] = args.hotkey

    record = LinkRecord()
    found = record.set_path(args.target)
    if not found:
        print(f"[!] Target does not exist: {record.target_path}", file=sys.stderr)
    try:
        _apply_config(record, cfg)
        written = save_file(record, args.output, codepage=args.codepage)
    except (ValueError, TypeError) as exc:
        sys.exit(f"Error: {exc}\nCheck JSON keys against LinkRecord fields")
    except (LinkError, OSError) as exc:
        sys.exit(f"Error: cannot write {args.output}: {exc}")
    print(f"[+] Written {written} bytes -> {args.output}")


def _serialize_record(record: LinkRecord) -> dict:
    """Convert a LinkRecord to a JSON-friendly dict."""
    d = asdict(record)
    d.pop("dirty")
    if d["id_list"] is not None:
        d["id_list"] = d["id_list"].hex()
    for key in _TIME_KEYS:
        if d[key] is not None:
            d[key] = d[key].isoformat()
    d["volume"]["kind"] = record.volume.kind.name
    d["path"] = record.get_path()
    return d


def _cmd_show(args: argparse.Namespace) -> None:
    for path in args.files:
        try:
            record = load_file(path, resolve=not args.no_resolve, codepage=args.codepage)
        except (LinkError, OSError) as exc:
            sys.exit(f"Error: {path}: {exc}")
        if args.json:
            print(json.dumps(_serialize_record(record), indent=2))
        else:
            print(f"\n{'=' * 70}")
            print(f"FILE: {path}")
            print(f"{'=' * 70}")
            print(format_record(record))
            print()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="lnkrecord",
        description="Read and write Windows shell link (.lnk) records",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log decoding details"
    )
    parser.add_argument(
        "--codepage",
        default=ANSI_CODEPAGE,
        help=f"Code page for narrow strings (default {ANSI_CODEPAGE})",
    )
    sub = parser.add_subparsers(dest="command")

    # -- create --
    cp = sub.add_parser(
        "create",
        help="Create a .lnk file",
        epilog=(
            "TARGET may be a filesystem path or an advertised target such as "
            "'::{9db1186e-40df-11d1-aa8c-00c04fb67863}:Component::'. "
            "Other fields can be set via --from-json; keys match LinkRecord "
            "field names."
        ),
    )
    cp.add_argument("target", help="Target path or advertised-target string")
    cp.add_argument("-o", "--output", default="output.lnk", help="Output file path")
    cp.add_argument(
        "-j",
        "--from-json",
        default="",
        metavar="FILE",
        help="JSON config file (keys match LinkRecord fields)",
    )
    cp.add_argument("--description", default=None, help="Tooltip / comment text")
    cp.add_argument("--relative-path", default=None, help="Relative path to target")
    cp.add_argument("--working-dir", default=None, help="Start-in directory")
    cp.add_argument("--arguments", default=None, help="Command-line arguments")
    cp.add_argument("--icon", default=None, help="Icon source path")
    cp.add_argument("--icon-index", type=int, default=None, help="Icon resource index")
    cp.add_argument(
        "--show",
        choices=["normal", "maximized", "minimized"],
        default=None,
        help="Window show state",
    )
    cp.add_argument(
        "--hotkey",
        type=_parse_hotkey,
        default=None,
        help="Hotkey combo (e.g. CTRL+C, ALT+SHIFT+F5)",
    )
    cp.add_argument(
        "--creation-time", default=None, help="CreationTime (ISO 8601 or FILETIME ticks)"
    )
    cp.add_argument(
        "--access-time", default=None, help="AccessTime (ISO 8601 or FILETIME ticks)"
    )
    cp.add_argument(
        "--write-time", default=None, help="WriteTime (ISO 8601 or FILETIME ticks)"
    )

    # -- show --
    sp = sub.add_parser("show", help="Decode and display .lnk file(s)")
    sp.add_argument("files", nargs="+", help="LNK file(s) to decode")
    sp.add_argument("--json", action="store_true", help="Output as JSON")
    sp.add_argument(
        "--no-resolve",
        action="store_true",
        help="Do not reconcile the relative path with the filesystem",
    )

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "create":
        _cmd_create(args)
    elif args.command == "show":
        _cmd_show(args)


if __name__ == "__main__":
    main()

# bridge/cli/args.py
from __future__ import annotations

import argparse
from typing import Any, Dict, List, Optional

import yaml


def parse_call_args(pairs: Optional[List[str]]) -> Optional[Dict[str, Any]]:
    """
    Turn ["includeModel=false", "title=Hello"] into {"includeModel": False, "title": "Hello"}.

    Values are parsed as YAML scalars, so true/false/numbers keep their type.
    """
    if not pairs:
        return None

    out: Dict[str, Any] = {}
    for item in pairs:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Invalid --arg '{item}' (use key=value)")
        try:
            out[key] = yaml.safe_load(raw) if raw.strip() else ""
        except yaml.YAMLError:
            out[key] = raw
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="channel-bridge")
    parser.add_argument("--config", default=None, help="Path to bridge.yml (default: packaged config).")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug.")
    parser.add_argument("--log-file", action="store_true", help="Also write an application log under ./logs.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    pd = sub.add_parser("demo", help="Run host and client in-process over a loopback link.")
    pd.add_argument("--secs", type=float, default=5.0)
    pd.add_argument(
        "--virtual-sensor",
        action="store_true",
        help="Feed a virtual accelerometer so the real producer is used instead of simulation.",
    )

    uart = argparse.ArgumentParser(add_help=False)
    uart.add_argument("--port", required=True, help="Serial port of the local link.")
    uart.add_argument("--baudrate", type=int, default=115200)

    ps = sub.add_parser("serve", parents=[uart], help="Serve the platform side on a UART link.")
    ps.add_argument("--virtual-sensor", action="store_true")

    pc = sub.add_parser("call", parents=[uart], help="Invoke one method on a bridge served over UART.")
    pc.add_argument("method")
    pc.add_argument("--arg", action="append", default=None, metavar="KEY=VALUE")

    pl = sub.add_parser("listen", parents=[uart], help="Print the sample stream of a bridge served over UART.")
    pl.add_argument("--secs", type=float, default=5.0)

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)

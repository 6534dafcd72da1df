# bridge/cli/main.py
from __future__ import annotations

from typing import Optional

from bridge.core.context import Context
from bridge.core.errors import BridgeError
from bridge.transport.errors import TransportError
from bridge.common.logging_config import configure_console_logging, configure_file_logging, make_log_path

from bridge.cli.args import parse_args
from bridge.cli.commands import cmd_call, cmd_demo, cmd_listen, cmd_serve


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args = parse_args(argv)

        configure_console_logging(args.verbose)
        if args.log_file:
            configure_file_logging(make_log_path(suffix=args.cmd))

        ctx = Context.load(args.config)

        if args.cmd == "demo":
            return cmd_demo(args, ctx)
        if args.cmd == "serve":
            return cmd_serve(args, ctx)
        if args.cmd == "call":
            return cmd_call(args, ctx)
        if args.cmd == "listen":
            return cmd_listen(args, ctx)

        return 2
    except BridgeError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1
    except TransportError as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

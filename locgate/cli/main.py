# locgate/cli/main.py
from __future__ import annotations

from typing import Optional

from locgate.core.errors import LocGateError

from locgate.cli.args import parse_args
from locgate.cli.commands import (
    cmd_scenario,
    cmd_show_config,
    configure_console_logging,
)


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args = parse_args(argv)
        configure_console_logging(verbose=args.verbose)

        if args.cmd == "scenario":
            return cmd_scenario(
                scenario_path=args.file,
                config_path=args.config,
                log_file=args.log_file,
            )
        if args.cmd == "show-config":
            return cmd_show_config(config_path=args.config)

        return 2
    except LocGateError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1

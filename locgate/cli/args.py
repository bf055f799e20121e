# locgate/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="locgate")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="YAML config file (defaults apply when omitted).")

    ps = sub.add_parser("scenario", parents=[common], help="Play a scripted scenario against simulated providers.")
    ps.add_argument("file", help="Scenario YAML file.")
    ps.add_argument("--log-file", default=None, help="Also write the app log to this file.")

    sub.add_parser("show-config", parents=[common], help="Print the effective configuration.")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)

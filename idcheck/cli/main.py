from __future__ import annotations

import argparse
import logging
from typing import List

from idcheck import __version__
from idcheck.cli.documents_cmds import register_documents_commands
from idcheck.config import log_level_from_env


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    p = argparse.ArgumentParser(prog="idcheck", description="Identity-verification API client")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    register_documents_commands(sub)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())

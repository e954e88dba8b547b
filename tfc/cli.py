from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .errors import TfcError
from .models import Config, LeadingStyle, LineEnding
from .process import process, validate_config
from .rules import DEFAULT_TAB_SIZE, TAB_SIZES

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tfc",
        description="Analyzes the given file for consistent leading whitespace and line endings.",
        epilog="Without -s/-t/-d/-u a summary is produced instead of a rewritten file.",
    )

    src = p.add_mutually_exclusive_group()
    src.add_argument("-i", "--input", type=Path, metavar="FILE", help="input file name")
    src.add_argument("-r", "--replace", type=Path, metavar="FILE", help="file to rewrite in place")
    p.add_argument("-o", "--output", type=Path, metavar="FILE", help="output file name (default: console)")

    leading = p.add_mutually_exclusive_group()
    leading.add_argument("-s", "--space", dest="leading", action="store_const", const=LeadingStyle.space,
                         help="use leading spaces")
    leading.add_argument("-t", "--tab", dest="leading", action="store_const", const=LeadingStyle.tab,
                         help="use leading tabs")

    trailing = p.add_mutually_exclusive_group()
    trailing.add_argument("-d", "--dos", dest="trailing", action="store_const", const=LineEnding.dos,
                          help="DOS style end-of-line")
    trailing.add_argument("-u", "--unix", dest="trailing", action="store_const", const=LineEnding.unix,
                          help="Unix style end-of-line")

    p.add_argument("-w", "--tab-size", type=int, choices=TAB_SIZES, default=DEFAULT_TAB_SIZE,
                   help=f"tab stop width (default: {DEFAULT_TAB_SIZE})")
    p.add_argument("-g", "--debug", action="store_true", help="compact one-line summary")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="diagnostic verbosity on stderr (default: WARNING)")
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    p.set_defaults(leading=LeadingStyle.unset, trailing=LineEnding.unset)
    return p


def config_from_args(args: argparse.Namespace) -> Config:
    return Config(
        input_path=args.replace or args.input,
        output_path=args.output,
        replace=args.replace is not None,
        leading=args.leading,
        trailing=args.trailing,
        tab_size=args.tab_size,
        debug=args.debug,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(name)s: %(levelname)s: %(message)s", stream=sys.stderr)

    try:
        config = config_from_args(args)
        validate_config(config)
        return process(config)
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    except TfcError as exc:
        logger.error("%s", exc)
        return exc.exit_code

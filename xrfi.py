#!/usr/bin/env python3
"""
xrfi: XRF interpreter CLI

Usage:
    python xrfi.py <program.xrf> [--seed N] [--prime-zero] [--max-chunks N]
                                 [--trace] [--list] [--verbose] [--log-file PATH]

Program input is read from stdin, program output goes to stdout.
Diagnostics and logs go to stderr.

Exit codes:
    0  program halted (opcode B)
    1  load error or fatal runtime error
    2  usage error / internal error
    3  --max-chunks limit reached before halt

Examples:
    echo -n X | python xrfi.py echo.xrf
    python xrfi.py loop.xrf --trace --max-chunks 50
    python xrfi.py loop.xrf --list
"""

import argparse
import logging
import sys
import os

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from xrf import __version__
from xrf.engine import Engine, StopReason
from xrf.errors import XRFError
from xrf.loader import load_file
from xrf.log_setup import setup_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERNAL = 2
EXIT_TIMEOUT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xrfi",
        description="Interpreter for the XRF esoteric language",
    )
    parser.add_argument("program", help="XRF program file")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the shuffle opcode (default: time-based)")
    parser.add_argument("--prime-zero", action="store_true",
                        help="Start with a single 0 on the stack")
    parser.add_argument("--max-chunks", type=int, default=None, metavar="N",
                        help="Stop after N chunk executions (exit 3)")
    parser.add_argument("--trace", action="store_true",
                        help="Log one trace line per executed chunk")
    parser.add_argument("--list", action="store_true",
                        help="Print the chunk listing and exit")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Print run details to stderr")
    parser.add_argument("--log-file", default=None,
                        help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"xrfi {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.trace:
        console_level = logging.DEBUG
    elif args.verbose:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING
    log = setup_logging("xrf", console_level=console_level, log_file=args.log_file)

    try:
        store = load_file(args.program)

        if args.list:
            print(store.listing())
            return EXIT_OK

        engine = Engine(store, seed=args.seed,
                        initial_stack=(0,) if args.prime_zero else (),
                        trace=args.trace)
        reason = engine.run(max_chunks=args.max_chunks)

        if args.verbose:
            print(f"[xrfi] {reason.value}: {engine.chunks_executed} chunks, "
                  f"{engine.ops_executed} opcodes, seed {engine.seed}", file=sys.stderr)

        return EXIT_OK if reason is StopReason.HALT else EXIT_TIMEOUT

    except XRFError as e:
        print(f"Error! {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        print(f"Internal interpreter error: {e}", file=sys.stderr)
        if args.verbose:
            log.exception("Unhandled exception")
        return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Command line entry point for rendering instruction listings as debug traces.

    decompiler-trace listing.yaml
    decompiler-trace listing.json --format json --output trace.json
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

import structlog
import yaml

from decompiler.core.instruction_stream import InstructionStream
from decompiler.core.parameter import TypeMismatchError
from decompiler.formatting import TRACE_FORMATS, dump_trace
from decompiler.listing import LISTING_FORMATS, load_listing
from decompiler.log import configure_logging

logger = structlog.get_logger()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description="Render a disassembled instruction listing as a debug trace")
    parser.add_argument("listing", help="Path to a JSON or YAML instruction listing")
    parser.add_argument("--input-format", choices=LISTING_FORMATS, default=None, help="Listing format (default: detected from the file suffix)")
    parser.add_argument("--format", default=os.environ.get("DECOMPILER_TRACE_FORMAT", "text"), choices=TRACE_FORMATS, help="Trace output format (default: text)")
    parser.add_argument("--output", "-o", help="Write the trace to this file instead of stdout")
    parser.add_argument("--reverse", action="store_true", help="Emit instructions last to first")
    parser.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "INFO"), choices=LOG_LEVELS, help="Logging level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", default=os.environ.get("DECOMPILER_JSON_LOGS", "false").lower() == "true", help="Emit log records as JSON")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, json_output=args.json_logs)

    try:
        stream = load_listing(args.listing, fmt=args.input_format)

        duplicates = stream.duplicate_addresses()
        if duplicates:
            logger.warning(
                "Listing contains duplicate instruction addresses",
                addresses=[f"0x{address:08X}" for address in duplicates],
            )

        if args.reverse:
            stream = InstructionStream(reversed(stream))
        trace = dump_trace(stream, args.format)
    except (OSError, ValueError, TypeMismatchError, yaml.YAMLError) as e:
        logger.error("Failed to render listing", listing=args.listing, error=str(e))
        return 1

    if not args.output:
        sys.stdout.write(trace)
        return 0

    try:
        Path(args.output).write_text(trace, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to write trace", output=args.output, error=str(e))
        return 1
    logger.info("Trace written", output=args.output, instructions=len(stream), format=args.format)
    return 0


if __name__ == "__main__":
    sys.exit(main())

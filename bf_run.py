#!/usr/bin/env python3
"""
Brainfuck Interpreter - command line front end

Usage:
    bf-run [options] <file | ->

Examples:
    # Run Brainfuck code from a file
    bf-run program.bf

    # Provide Brainfuck code directly and output to file
    bf-run --code "++++[>++++<-]>+." --output out.txt

    # Run with no cell wrapping and 16-bit cells
    bf-run -c "++++++++[->++++++++<]>." --cell-wrapping off --cell-size 16

    # Read program from stdin, program input from a file
    echo ",[.,]" | bf-run - --input data.txt

Settings are layered: defaults, then BF_* environment variables (a .env file
is honoured), then --config, then the flags below.
"""

import argparse
import json
import sys
from typing import List, Optional

from dotenv import load_dotenv

from bfcore.bf_runner import read_source, run_source, stream_reader, stream_writer
from bfcore.config import EOF_POLICIES, build_config
from bfcore.errors import BrainfuckError
from bfcore.stats import format_report
from brainfuck import BrainfuckInterpreter, print_debug_record
from brainfuck_debugger import BrainfuckDebugger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bf-run",
        description="Brainfuck Programming Language Suite - Interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("file", nargs="?", help='Path to a file containing Brainfuck code, or "-" to read it from stdin')
    ap.add_argument("--code", "-c", help="Provide Brainfuck code directly as a string")
    ap.add_argument("--config", help="Path to a YAML or JSON config file")
    ap.add_argument("--cell-size", "-cs", type=int, dest="cell_bits", metavar="BITS",
                    help="Size of each memory cell in bits (1-64). Default: 8")
    ap.add_argument("--cell-wrapping", "-cw", metavar="on|off", help='Enable or disable cell wrapping. Default: "on"')
    ap.add_argument("--tape-size", "-ts", type=int, dest="initial_tape_size", metavar="CELLS",
                    help="Initial memory tape size (number of cells). Default: 1")
    ap.add_argument("--tape-wrapping", "-tw", metavar="on|off", help='Enable or disable tape wrapping. Default: "off"')
    ap.add_argument("--dynamic-tape", "-dt", metavar="on|off", help='Enable or disable dynamic tape resizing. Default: "on"')
    ap.add_argument("--eof", dest="eof_behavior", choices=EOF_POLICIES,
                    help='What "," does at end of input. Default: "unchanged"')
    ap.add_argument("--step-limit", type=int, help="Abort after this many executed instructions")
    ap.add_argument("--input", "-i", default="-", help='File to read program input from ("-" for stdin)')
    ap.add_argument("--output", "-o", default="-", help='File to write program output to ("-" for stdout)')
    ap.add_argument("--newline", "-n", action="store_true", help="Print a newline after output")
    ap.add_argument("--debug", "-d", action="store_true", default=None, dest="debug_enabled",
                    help='Enable the "#" debug instruction')
    ap.add_argument("--stats", "-s", action="store_true", help="Print run statistics to stderr")
    ap.add_argument("--stats-json", metavar="PATH", help="Write run statistics as JSON to PATH")
    ap.add_argument("--trace", action="store_true", help="Print the machine state after every step (stderr)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.file is not None and args.code is not None:
        ap.error('a program file and --code cannot be used together')

    load_dotenv()

    overrides = {
        "cell_bits": args.cell_bits,
        "cell_wrapping": args.cell_wrapping,
        "initial_tape_size": args.initial_tape_size,
        "tape_wrapping": args.tape_wrapping,
        "dynamic_tape": args.dynamic_tape,
        "debug_enabled": args.debug_enabled,
        "eof_behavior": args.eof_behavior,
        "step_limit": args.step_limit,
    }

    input_stream = None
    output_stream = None
    try:
        config = build_config(args.config, overrides)
        source = read_source(path=args.file, code=args.code)

        if args.input == "-":
            input_stream = sys.stdin.buffer
        else:
            input_stream = open(args.input, 'rb')
        if args.output == "-":
            output_stream = sys.stdout.buffer
        else:
            output_stream = open(args.output, 'wb')
    except BrainfuckError as e:
        print(f"Error: {e.describe()}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: IOFailure: {e}", file=sys.stderr)
        return 1

    try:
        interpreter = BrainfuckDebugger(config) if args.trace else BrainfuckInterpreter(config)
        result = run_source(
            source, config,
            stream_reader(input_stream),
            stream_writer(output_stream),
            program_path=None if args.file in (None, "-") else args.file,
            debug_fn=print_debug_record,
            interpreter=interpreter,
        )
        if args.newline:
            output_stream.write(b"\n")
        output_stream.flush()
    finally:
        if input_stream is not None and input_stream is not sys.stdin.buffer:
            input_stream.close()
        if output_stream is not None and output_stream is not sys.stdout.buffer:
            output_stream.close()

    if args.stats:
        print(format_report(result.statistics, config), file=sys.stderr)
    if result.error is not None:
        print(f"Error: {result.error.describe()}", file=sys.stderr)

    if args.stats_json:
        try:
            with open(args.stats_json, 'w') as f:
                json.dump({"exit_status": result.exit_status,
                           "error": result.error.kind if result.error else None,
                           "statistics": result.statistics.to_dict(),
                           "config": config.to_dict()}, f, indent=2)
        except OSError as e:
            print(f"Error: IOFailure: {e}", file=sys.stderr)
            return 1
    return result.exit_status


if __name__ == "__main__":
    sys.exit(main())

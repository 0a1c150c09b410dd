from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from collector.collect import run
from collector.config import load_options
from collector.errors import ConfigurationError, OutputWriteError
from collector.summarize import summarize_run


def _configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)


def cmd_collect(args: argparse.Namespace) -> int:
	overrides = {
		"source": args.source,
		"modules": args.modules,
		"destination": args.destination,
		"entry_markers": args.markers,
		"ignore_marker": args.ignore_marker,
		"verbose": args.verbose,
	}
	try:
		options = load_options(args.config, overrides)
	except ConfigurationError as e:
		print(f"Configuration error: {e}", file=sys.stderr)
		return 2

	_configure_logging(options.verbose)
	try:
		result = run(options)
	except OutputWriteError as e:
		print(f"Output error: {e}", file=sys.stderr)
		return 1

	for line in summarize_run(result, verbose=options.verbose):
		print(line)
	return 0


def cmd_serve(args: argparse.Namespace) -> int:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
	return 0


def main(argv: Optional[List[str]] = None) -> int:
	parser = argparse.ArgumentParser(prog="modelcollect")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pc = sub.add_parser("collect", help="Discover models reachable from entry types and write their schemas")
	pc.add_argument("--config", help="Path to a JSON options file")
	pc.add_argument("--source", help="Root directory of the python sources")
	pc.add_argument("--module", dest="modules", action="append", help="Glob pattern of modules to scan (repeatable)")
	pc.add_argument("--destination", help="Path of the schema document to write")
	pc.add_argument("--marker", dest="markers", action="append", help="Base class name marking entry types (repeatable)")
	pc.add_argument("--ignore-marker", help="Decorator name that excludes a type")
	pc.add_argument("--verbose", action="store_const", const=True, default=None)
	pc.set_defaults(func=cmd_collect)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args(argv)
	return args.func(args)


if __name__ == "__main__":
	sys.exit(main())

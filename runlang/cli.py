# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import List

from .config import SHELL_ENV_VAR, EngineConfig
from .core.diagnostics import Diagnostic, report_diagnostics
from .engine import invoke, list_names, metadata_for, prepare, resolve_function_name
from .errors import FunctionNotFoundError, ParseError
from .parser import parse
from .table import FunctionTable, load


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="run", description="Run functions declared in a Runfile")
	p.add_argument("--runfile", "-f", type=Path, default=Path("Runfile"), help="Path to the Runfile (default: ./Runfile)")
	p.add_argument(
		"--shell",
		type=str,
		default=None,
		help=f"Default interpreter for functions without @shell or a shebang (default: ${SHELL_ENV_VAR} or sh)",
	)
	p.add_argument("--list", "-l", action="store_true", help="List available functions")
	p.add_argument("--info", action="store_true", help="Print the function's metadata as JSON instead of running it")
	p.add_argument("--dry-run", action="store_true", help="Print the composed script instead of running it")
	p.add_argument("function", nargs="?", help="Function to run")
	p.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the function")
	return p


def _print_listing(table: FunctionTable) -> None:
	names = list_names(table)
	if not names:
		print("No functions defined.")
		return
	width = max(len(n) for n in names)
	for name in names:
		desc = metadata_for(table, name).description
		print(f"  {name.ljust(width)}  {desc}" if desc else f"  {name}")


def _info_json(table: FunctionTable, name: str) -> str:
	info = metadata_for(table, name)
	obj = {
		"name": info.name,
		"description": info.description,
		"interpreter": info.interpreter,
		"shebang": info.shebang,
		"params": [
			{
				"name": p.name,
				"type": p.declared_type.value,
				"default": p.default,
				"rest": p.is_rest,
			}
			for p in info.params
		],
		"args": [{"name": a.name, "description": a.description, "position": a.position} for a in info.args],
	}
	return json.dumps(obj, indent=2, sort_keys=True)


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)

	config = EngineConfig.from_environment()
	if args.shell:
		config = replace(config, default_shell=args.shell)

	runfile: Path = args.runfile
	try:
		source = runfile.read_text(encoding="utf-8")
	except OSError as err:
		p.error(f"cannot read {runfile}: {err.strerror or err}")
		return 2

	try:
		program = parse(source, filename=str(runfile))
	except ParseError as err:
		print(err.format_human(), file=sys.stderr)
		return 1

	diagnostics: List[Diagnostic] = []
	table = load(program, config.host_os, config.default_shell, diagnostics, filename=str(runfile))
	report_diagnostics(diagnostics, sys.stderr)
	diagnostics.clear()

	if args.list or not args.function:
		_print_listing(table)
		return 0

	try:
		if args.info:
			name, _ = resolve_function_name(table, args.function, args.args)
			print(_info_json(table, name))
			return 0
		if args.dry_run:
			prepared = prepare(table, args.function, args.args, diagnostics)
			report_diagnostics(diagnostics, sys.stderr)
			print(prepared.script)
			return 0
		# Warnings are printed by invoke before the script starts.
		return invoke(table, args.function, args.args)
	except FunctionNotFoundError as err:
		print(f"error: {err.message}", file=sys.stderr)
		return 1


if __name__ == "__main__":
	raise SystemExit(main())

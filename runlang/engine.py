# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Engine entry points used by hosts (the CLI, an editor integration, an agent
tool server): parse, load, inspect and invoke.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .compose import build_script
from .core.diagnostics import Diagnostic, report_diagnostics
from .errors import FunctionNotFoundError, ProcessSpawnError
from .executor import execute
from .interpreters import ResolvedInterpreter
from .parser import parse
from .parser.ast import ArgAttr, Parameter
from .table import FunctionTable, load

SPAWN_FAILURE_STATUS = 127


@dataclass(frozen=True)
class FunctionInfo:
	"""What a host needs to describe a function (help text, tool schemas)."""

	name: str
	description: Optional[str]
	params: Tuple[Parameter, ...]
	shebang: Optional[str]
	interpreter: str
	args: Tuple[ArgAttr, ...] = ()


@dataclass(frozen=True)
class PreparedScript:
	"""A composed script ready to hand to the executor."""

	function: str
	script: str
	interpreter: ResolvedInterpreter
	extra_args: Tuple[str, ...] = ()


def list_names(table: FunctionTable) -> List[str]:
	return sorted(table.functions)


def metadata_for(table: FunctionTable, name: str) -> FunctionInfo:
	entry = table.get(name)
	if entry is None:
		raise FunctionNotFoundError(message=f"function '{name}' not found", function=name)
	meta = entry.metadata
	return FunctionInfo(
		name=entry.name,
		description=meta.description,
		params=meta.params,
		shebang=meta.shebang,
		interpreter=entry.interpreter.binary,
		args=meta.arg_docs,
	)


def resolve_function_name(table: FunctionTable, name: str, args: Sequence[str]) -> Tuple[str, Tuple[str, ...]]:
	"""
	Find the function a command line refers to.

	Tried in order: the name as given, `name:first_arg` (so `run docker build`
	reaches `docker:build`), then the name with `_` read as `:`.
	"""
	if name in table:
		return name, tuple(args)
	if args:
		nested = f"{name}:{args[0]}"
		if nested in table:
			return nested, tuple(args[1:])
	colon_name = name.replace("_", ":")
	if colon_name != name and colon_name in table:
		return colon_name, tuple(args)
	raise FunctionNotFoundError(message=f"function '{name}' not found", function=name)


def prepare(
	table: FunctionTable,
	name: str,
	args: Sequence[str],
	diagnostics: Optional[List[Diagnostic]] = None,
) -> PreparedScript:
	resolved, call_args = resolve_function_name(table, name, args)
	entry = table.functions[resolved]
	script = build_script(resolved, call_args, table, diagnostics)
	extra = call_args if entry.interpreter.kind.is_polyglot else ()
	return PreparedScript(function=resolved, script=script, interpreter=entry.interpreter, extra_args=extra)


def invoke(
	table: FunctionTable,
	name: str,
	args: Sequence[str],
	diagnostics: Optional[List[Diagnostic]] = None,
) -> int:
	"""
	Compose and run one call; returns the script's exit status.

	Unknown names raise FunctionNotFoundError. When the interpreter cannot be
	started the failure is recorded as an error diagnostic and 127 is
	returned. Without a `diagnostics` list, findings are printed to stderr.
	"""
	sink: List[Diagnostic] = diagnostics if diagnostics is not None else []
	prepared = prepare(table, name, args, sink)
	if diagnostics is None:
		report_diagnostics(sink, sys.stderr)
		sink = []
	try:
		return execute(prepared.script, prepared.interpreter, prepared.extra_args)
	except ProcessSpawnError as err:
		sink.append(
			Diagnostic(
				message=err.message,
				code=err.reason_code,
				phase="execute",
				severity="error",
			)
		)
		if diagnostics is None:
			report_diagnostics(sink, sys.stderr)
		return SPAWN_FAILURE_STATUS


__all__ = [
	"FunctionInfo",
	"PreparedScript",
	"SPAWN_FAILURE_STATUS",
	"invoke",
	"list_names",
	"load",
	"metadata_for",
	"parse",
	"prepare",
	"resolve_function_name",
]

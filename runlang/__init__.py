# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
runlang: the language engine behind Runfiles.

	program = parse(source)
	table = load(program, host_os="linux", default_shell="sh")
	status = invoke(table, "build", ["--release"])
"""

from .engine import (
	FunctionInfo,
	PreparedScript,
	invoke,
	list_names,
	load,
	metadata_for,
	parse,
	prepare,
	resolve_function_name,
)
from .errors import FunctionNotFoundError, ParseError, ProcessSpawnError, RunError

__all__ = [
	"FunctionInfo",
	"FunctionNotFoundError",
	"ParseError",
	"PreparedScript",
	"ProcessSpawnError",
	"RunError",
	"invoke",
	"list_names",
	"load",
	"metadata_for",
	"parse",
	"prepare",
	"resolve_function_name",
]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Assembling the single script for one invocation.

    variable preamble + function preamble + target body

The function preamble holds every other function whose interpreter is
compatible with the target's, transpiled from its raw stored body. It is never
built from another function's composed script, so the preamble cannot expand
recursively; runtime call cycles are left to the shell.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence

from .core.diagnostics import Diagnostic
from .core.span import Span
from .errors import FunctionNotFoundError
from .interpreters import Interpreter, is_compatible
from .substitution import string_literal, substitute
from .table import FunctionEntry, FunctionTable
from .transpiler import escape_pwsh_value, escape_shell_value, find_references, rewrite_call_sites, transpile


def _lookup(table: FunctionTable, name: str) -> FunctionEntry:
	entry = table.get(name)
	if entry is None:
		raise FunctionNotFoundError(message=f"function '{name}' not found", function=name)
	return entry


def compatible_siblings(table: FunctionTable, target: FunctionEntry) -> List[FunctionEntry]:
	"""Every other function that may be inlined into the target's script, in table order."""
	return [
		entry
		for name, entry in table.functions.items()
		if name != target.name and is_compatible(entry.interpreter.kind, target.interpreter.kind)
	]


def incompatible_siblings(table: FunctionTable, target: FunctionEntry) -> List[FunctionEntry]:
	return [
		entry
		for name, entry in table.functions.items()
		if name != target.name and not is_compatible(entry.interpreter.kind, target.interpreter.kind)
	]


def build_variable_preamble(variables: Mapping[str, str], interpreter: Interpreter) -> str:
	"""Top-level assignments as declarations in the target's language."""
	lines: List[str] = []
	for name, value in variables.items():
		if interpreter is Interpreter.PWSH:
			lines.append(f'${name} = "{escape_pwsh_value(value)}"')
		elif interpreter is Interpreter.NODE:
			lines.append(f"const {name} = {string_literal(interpreter, value)};")
		elif interpreter in (Interpreter.PYTHON, Interpreter.RUBY):
			lines.append(f"{name} = {string_literal(interpreter, value)}")
		else:
			lines.append(f'{name}="{escape_shell_value(value)}"')
	return "\n".join(lines)


def build_function_preamble(
	siblings: Sequence[FunctionEntry],
	interpreter: Interpreter,
	callable_names: Iterable[str] = (),
) -> str:
	"""
	Sibling definitions in the target's dialect.

	Each body has its calls to `callable_names` (plus the siblings themselves)
	rewritten to the sanitized names the preamble defines.
	"""
	if not interpreter.has_function_syntax:
		return ""
	names = [entry.name for entry in siblings] + list(callable_names)
	return "\n".join(
		transpile(
			entry.name,
			rewrite_call_sites(entry.body, names),
			entry.is_block,
			interpreter,
			entry.metadata.params,
		)
		for entry in siblings
	)


def combine(variable_preamble: str, function_preamble: str, body: str) -> str:
	return "\n".join(part for part in (variable_preamble, function_preamble, body) if part)


def _warn_incompatible_references(
	table: FunctionTable,
	target: FunctionEntry,
	diagnostics: List[Diagnostic],
) -> None:
	others = {entry.name: entry for entry in incompatible_siblings(table, target)}
	for name in find_references(target.body, others):
		diagnostics.append(
			Diagnostic(
				message=(
					f"'{target.name}' ({target.interpreter.binary}) appears to call '{name}' "
					f"({others[name].interpreter.binary}), which cannot be composed into the same script"
				),
				code="incompatible-composition-reference",
				phase="compose",
				span=Span.from_loc(target.loc, file=table.filename),
			)
		)


def build_script(
	target_name: str,
	args: Sequence[str],
	table: FunctionTable,
	diagnostics: Optional[List[Diagnostic]] = None,
) -> str:
	"""
	The complete script text for calling `target_name` with `args`.

	Raises FunctionNotFoundError for names absent from the table.
	"""
	target = _lookup(table, target_name)
	kind = target.interpreter.kind

	siblings = compatible_siblings(table, target) if kind.has_function_syntax else []
	if diagnostics is not None and kind.has_function_syntax:
		_warn_incompatible_references(table, target, diagnostics)

	body = rewrite_call_sites(target.body, [s.name for s in siblings])
	body = substitute(body, target.metadata.params, args, kind, diagnostics, function=target.name)

	return combine(
		build_variable_preamble(table.variables, kind),
		build_function_preamble(siblings, kind, [target.name]),
		body,
	)


__all__ = [
	"build_function_preamble",
	"build_script",
	"build_variable_preamble",
	"combine",
	"compatible_siblings",
	"incompatible_siblings",
]

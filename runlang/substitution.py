# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Binding call arguments to declared parameters.

Shell dialects get the values spliced into the body text (`$env`, `${env}`,
`$1`, `$@`). Python, Node and Ruby bodies are left untouched; instead they get
a declaration preamble that reads the values from the interpreter's own
argument array, which the executor fills with the call arguments.
"""

from __future__ import annotations

import json
import re
from typing import Callable, Dict, List, Optional, Sequence

from .core.diagnostics import Diagnostic
from .interpreters import Interpreter
from .parser.ast import Parameter, ParamType

TRUTHY = ("true", "1", "yes")

_SHELL_REF = re.compile(
	r"""
	(?P<escaped>\\\$)
	| \$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*|\d+)(?::-(?P<fallback>[^}]*))?\}
	| \$(?P<all>@)
	| \$(?P<pos>[1-9])(?!\d)
	| \$(?P<name>[A-Za-z_][A-Za-z0-9_]*)
	""",
	re.VERBOSE,
)


def bind_arguments(
	params: Sequence[Parameter],
	args: Sequence[str],
	diagnostics: Optional[List[Diagnostic]] = None,
	function: Optional[str] = None,
) -> Dict[str, str]:
	"""
	Map call arguments onto parameters by position.

	Missing optional parameters take their default. A missing required
	parameter is reported and bound to the empty string. A rest parameter takes
	every remaining argument, joined by one space.
	"""
	bound: Dict[str, str] = {}
	for idx, param in enumerate(params):
		if param.is_rest:
			bound[param.name] = " ".join(args[idx:])
		elif idx < len(args):
			bound[param.name] = args[idx]
		elif param.default is not None:
			bound[param.name] = param.default
		else:
			if diagnostics is not None:
				where = f" of '{function}'" if function else ""
				diagnostics.append(
					Diagnostic(
						message=f"missing required argument '{param.name}'{where}, using an empty value",
						code="missing-required-argument",
						phase="substitute",
					)
				)
			bound[param.name] = ""
	return bound


def _substitute_shell(template: str, params: Sequence[Parameter], args: Sequence[str], bound: Dict[str, str]) -> str:
	rest = next((p for p in params if p.is_rest), None)

	def positional(index: int) -> Optional[str]:
		if index <= len(args):
			return args[index - 1]
		if index <= len(params):
			return bound[params[index - 1].name]
		return None

	def replace(match: "re.Match[str]") -> str:
		text = match.group(0)
		if match.group("escaped"):
			return text
		if match.group("all"):
			return bound[rest.name] if rest is not None else " ".join(args)
		if match.group("pos"):
			value = positional(int(match.group("pos")))
			return text if value is None else value
		if match.group("name"):
			return bound.get(match.group("name"), text)
		key = match.group("braced")
		if key.isdigit():
			value = positional(int(key)) if int(key) > 0 else None
		else:
			value = bound.get(key)
		if value is None:
			return text
		fallback = match.group("fallback")
		if fallback is not None and value == "":
			return fallback
		return value

	return _SHELL_REF.sub(replace, template)


# Polyglot declaration preambles.


def string_literal(kind: Interpreter, value: str) -> str:
	literal = json.dumps(value)
	if kind is Interpreter.RUBY:
		literal = literal.replace("#", "\\#")
	return literal


def _python_decls(params: Sequence[Parameter]) -> List[str]:
	lines = ["import sys"]
	if any(p.declared_type is ParamType.OBJECT for p in params):
		lines.append("import json")
	coerce: Dict[ParamType, Callable[[str], str]] = {
		ParamType.STR: lambda x: x,
		ParamType.INT: lambda x: f"int({x})",
		ParamType.FLOAT: lambda x: f"float({x})",
		ParamType.BOOL: lambda x: f"{x}.strip().lower() in {TRUTHY!r}",
		ParamType.OBJECT: lambda x: f"json.loads({x})",
	}
	for pos, param in enumerate(params, start=1):
		if param.is_rest:
			lines.append(f'{param.name} = " ".join(sys.argv[{pos}:])')
			continue
		conv = coerce[param.declared_type]
		fallback = "None" if param.default is None else conv(string_literal(Interpreter.PYTHON, param.default))
		lines.append(f"{param.name} = {conv(f'sys.argv[{pos}]')} if len(sys.argv) > {pos} else {fallback}")
	return lines


def _node_decls(params: Sequence[Parameter]) -> List[str]:
	truthy = json.dumps(list(TRUTHY))
	coerce: Dict[ParamType, Callable[[str], str]] = {
		ParamType.STR: lambda x: x,
		ParamType.INT: lambda x: f"parseInt({x}, 10)",
		ParamType.FLOAT: lambda x: f"parseFloat({x})",
		ParamType.BOOL: lambda x: f"{truthy}.includes(String({x}).trim().toLowerCase())",
		ParamType.OBJECT: lambda x: f"JSON.parse({x})",
	}
	lines: List[str] = []
	for pos, param in enumerate(params, start=1):
		if param.is_rest:
			lines.append(f'const {param.name} = process.argv.slice({pos}).join(" ");')
			continue
		conv = coerce[param.declared_type]
		fallback = "undefined" if param.default is None else conv(string_literal(Interpreter.NODE, param.default))
		lines.append(f"const {param.name} = process.argv.length > {pos} ? {conv(f'process.argv[{pos}]')} : {fallback};")
	return lines


def _ruby_decls(params: Sequence[Parameter]) -> List[str]:
	lines: List[str] = []
	if any(p.declared_type is ParamType.OBJECT for p in params):
		lines.append("require 'json'")
	coerce: Dict[ParamType, Callable[[str], str]] = {
		ParamType.STR: lambda x: x,
		ParamType.INT: lambda x: f"Integer({x}, 10)",
		ParamType.FLOAT: lambda x: f"Float({x})",
		ParamType.BOOL: lambda x: f"%w[{' '.join(TRUTHY)}].include?({x}.strip.downcase)",
		ParamType.OBJECT: lambda x: f"JSON.parse({x})",
	}
	for pos, param in enumerate(params, start=1):
		idx = pos - 1
		if param.is_rest:
			lines.append(f'{param.name} = ARGV.drop({idx}).join(" ")')
			continue
		conv = coerce[param.declared_type]
		fallback = "nil" if param.default is None else conv(string_literal(Interpreter.RUBY, param.default))
		lines.append(f"{param.name} = ARGV.length > {idx} ? {conv(f'ARGV[{idx}]')} : {fallback}")
	return lines


_DECLARATION_BUILDERS: Dict[Interpreter, Callable[[Sequence[Parameter]], List[str]]] = {
	Interpreter.PYTHON: _python_decls,
	Interpreter.NODE: _node_decls,
	Interpreter.RUBY: _ruby_decls,
}


def declaration_preamble(params: Sequence[Parameter], interpreter: Interpreter) -> str:
	"""Parameter declarations for a polyglot body; empty when there are no params."""
	if not params:
		return ""
	return "\n".join(_DECLARATION_BUILDERS[interpreter](params))


def substitute(
	template: str,
	params: Sequence[Parameter],
	args: Sequence[str],
	interpreter: Interpreter = Interpreter.SH,
	diagnostics: Optional[List[Diagnostic]] = None,
	function: Optional[str] = None,
) -> str:
	"""
	Produce the runnable body for one call.

	Pure: the same inputs always give the same text. Warnings (missing required
	arguments) are appended to `diagnostics` when given.
	"""
	bound = bind_arguments(params, args, diagnostics, function)
	if interpreter.is_polyglot:
		preamble = declaration_preamble(params, interpreter)
		return f"{preamble}\n{template}" if preamble else template
	return _substitute_shell(template, params, args, bound)


__all__ = ["TRUTHY", "bind_arguments", "declaration_preamble", "string_literal", "substitute"]

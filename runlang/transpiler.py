# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source-to-source rewriting of function bodies into shell function syntax.

Runfile names may contain `:` (`docker:build`), which no target shell accepts
in a function name. Definitions are emitted under the sanitized name and call
sites inside composed bodies are rewritten to match.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from .interpreters import Interpreter
from .parser.ast import Parameter

INDENT = "    "

# Characters that may appear in a Runfile function name.
_NAME_CHARS = "A-Za-z0-9_:"


def sanitize(name: str) -> str:
	return name.replace(":", "__")


def escape_shell_value(value: str) -> str:
	"""Escape text for use inside a double-quoted sh/bash string."""
	out = value.replace("\\", "\\\\")
	for ch in ('"', "$", "`", "!"):
		out = out.replace(ch, "\\" + ch)
	return out


def escape_pwsh_value(value: str) -> str:
	"""Escape text for use inside a double-quoted PowerShell string."""
	out = value.replace("`", "``")
	for ch in ('"', "$"):
		out = out.replace(ch, "`" + ch)
	return out


def _names_pattern(names: Iterable[str]) -> Optional[re.Pattern]:
	ordered = sorted(set(names), key=lambda n: (-len(n), n))
	if not ordered:
		return None
	alternation = "|".join(re.escape(n) for n in ordered)
	return re.compile(rf"(?<![{_NAME_CHARS}])(?:{alternation})(?![{_NAME_CHARS}])")


def rewrite_call_sites(body: str, sibling_names: Iterable[str]) -> str:
	"""
	Replace whole-word uses of namespaced sibling names with their sanitized
	form. Longer names win, so `db:migrate:all` is not rewritten as
	`db__migrate:all`.
	"""
	pattern = _names_pattern(n for n in sibling_names if ":" in n)
	if pattern is None:
		return body
	return pattern.sub(lambda m: sanitize(m.group(0)), body)


def find_references(body: str, names: Iterable[str]) -> List[str]:
	"""Names that occur in `body` as whole words, in first-occurrence order."""
	pattern = _names_pattern(names)
	if pattern is None:
		return []
	seen: List[str] = []
	for match in pattern.finditer(body):
		if match.group(0) not in seen:
			seen.append(match.group(0))
	return seen


def _sh_bindings(params: Sequence[Parameter], declare: str = "") -> List[str]:
	lines: List[str] = []
	for idx, param in enumerate(params, start=1):
		if param.is_rest:
			if idx == 1:
				value = '"$*"'
			else:
				value = f"\"$(shift {idx - 1}; printf '%s' \"$*\")\""
		elif param.default is not None:
			value = f'"${{{idx}:-{escape_shell_value(param.default)}}}"'
		else:
			value = f'"${{{idx}}}"'
		lines.append(f"{declare}{param.name}={value}")
	return lines


def _pwsh_bindings(params: Sequence[Parameter]) -> List[str]:
	decls: List[str] = []
	for param in params:
		if param.is_rest:
			decls.append(f"[Parameter(ValueFromRemainingArguments = $true)][string[]]${param.name}")
		elif param.default is not None:
			decls.append(f'${param.name} = "{escape_pwsh_value(param.default)}"')
		else:
			decls.append(f"${param.name}")
	return [f"param({', '.join(decls)})"] if decls else []


def transpile(
	name: str,
	body: str,
	is_block: bool,
	dialect: Interpreter,
	params: Sequence[Parameter] = (),
) -> str:
	"""
	Emit `body` as a function definition in `dialect`.

	sh/bash: `name() {...}`; PowerShell: `function name {...}`. Declared
	parameters are bound from the function's positional arguments first, so a
	sibling can use `$env` when called as `deploy staging`.

	Bindings never leak into the caller: bash declares them `local`, and a
	POSIX sh function with parameters gets a subshell body `name() (...)`.
	"""
	if not dialect.has_function_syntax:
		raise ValueError(f"cannot transpile into {dialect.value}: it has no shell function syntax")

	closing = "}"
	if dialect is Interpreter.PWSH:
		header = f"function {sanitize(name)} {{"
		prologue = _pwsh_bindings(params)
	elif dialect is Interpreter.BASH:
		header = f"{sanitize(name)}() {{"
		prologue = _sh_bindings(params, declare="local ")
	elif params:
		header = f"{sanitize(name)}() ("
		closing = ")"
		prologue = _sh_bindings(params)
	else:
		header = f"{sanitize(name)}() {{"
		prologue = []

	body_lines = body.split("\n") if is_block else [body.strip()]
	lines = prologue + body_lines
	if not any(line.strip() for line in lines) and dialect is not Interpreter.PWSH:
		lines = [":"]
	indented = [INDENT + line if line.strip() else "" for line in lines]
	return "\n".join([header, *indented, closing])


__all__ = [
	"escape_pwsh_value",
	"escape_shell_value",
	"find_references",
	"rewrite_call_sites",
	"sanitize",
	"transpile",
]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Interpreter kinds and the per-function resolution rules.

Everything an interpreter implies is looked up in the tables of this module:
which spellings name it, which binary and flag run a script with it, and which
other interpreters it may be composed with.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .core.diagnostics import Diagnostic
from .core.span import Span
from .parser.ast import Attribute, OsAttr, ShellAttr


class Interpreter(Enum):
	SH = "sh"
	BASH = "bash"
	PWSH = "pwsh"
	PYTHON = "python"
	NODE = "node"
	RUBY = "ruby"

	@property
	def has_function_syntax(self) -> bool:
		"""Whether sibling functions can be transpiled into this dialect."""
		return self in _SHELL_DIALECTS

	@property
	def is_polyglot(self) -> bool:
		return self not in _SHELL_DIALECTS


_SHELL_DIALECTS: FrozenSet[Interpreter] = frozenset({Interpreter.SH, Interpreter.BASH, Interpreter.PWSH})


@dataclass(frozen=True)
class ResolvedInterpreter:
	"""An interpreter kind plus the concrete binary that was asked for."""

	kind: Interpreter
	binary: str

	@property
	def flag(self) -> str:
		return COMMAND_FLAGS[self.kind]

	def __str__(self) -> str:
		return self.binary


# Accepted names (in `@shell`, shebangs and RUN_SHELL) -> (kind, binary).
INTERPRETER_NAMES: Dict[str, Tuple[Interpreter, str]] = {
	"sh": (Interpreter.SH, "sh"),
	"bash": (Interpreter.BASH, "bash"),
	"pwsh": (Interpreter.PWSH, "pwsh"),
	"powershell": (Interpreter.PWSH, "powershell"),
	"python": (Interpreter.PYTHON, "python"),
	"python3": (Interpreter.PYTHON, "python3"),
	"node": (Interpreter.NODE, "node"),
	"ruby": (Interpreter.RUBY, "ruby"),
}

# Single-shot command flag per kind.
COMMAND_FLAGS: Dict[Interpreter, str] = {
	Interpreter.SH: "-c",
	Interpreter.BASH: "-c",
	Interpreter.PWSH: "-Command",
	Interpreter.PYTHON: "-c",
	Interpreter.NODE: "-e",
	Interpreter.RUBY: "-e",
}

_COMPATIBILITY_CLASSES: Tuple[FrozenSet[Interpreter], ...] = (
	frozenset({Interpreter.SH, Interpreter.BASH}),
	frozenset({Interpreter.PWSH}),
	frozenset({Interpreter.PYTHON}),
	frozenset({Interpreter.NODE}),
	frozenset({Interpreter.RUBY}),
)

PLATFORMS: FrozenSet[str] = frozenset({"windows", "linux", "macos", "unix"})
_UNIX_HOSTS: FrozenSet[str] = frozenset({"linux", "macos"})

FALLBACK_SHELL = ResolvedInterpreter(Interpreter.SH, "sh")


def lookup_interpreter(name: str) -> Optional[ResolvedInterpreter]:
	entry = INTERPRETER_NAMES.get(name.strip().lower())
	if entry is None:
		return None
	return ResolvedInterpreter(*entry)


def compatibility_class(kind: Interpreter) -> FrozenSet[Interpreter]:
	for klass in _COMPATIBILITY_CLASSES:
		if kind in klass:
			return klass
	raise ValueError(f"interpreter {kind!r} has no compatibility class")


def is_compatible(a: Interpreter, b: Interpreter) -> bool:
	"""True when a body written for `a` may be inlined into a script run by `b`."""
	return compatibility_class(a) is compatibility_class(b)


def matches_platform(
	attrs: Iterable[Attribute],
	host_os: str,
	diagnostics: Optional[List[Diagnostic]] = None,
	span: Optional[Span] = None,
) -> bool:
	"""
	Whether a definition guarded by `@os` attributes is active on `host_os`.

	No `@os` means always active; several `@os` lines mean any of them.
	"""
	platforms = [a.platform for a in attrs if isinstance(a, OsAttr)]
	if not platforms:
		return True
	for platform in platforms:
		if platform not in PLATFORMS:
			if diagnostics is not None:
				diagnostics.append(
					Diagnostic(
						message=f"unknown platform '{platform}' in @os (expected one of: {', '.join(sorted(PLATFORMS))})",
						code="unknown-platform",
						phase="load",
						span=span or Span(),
					)
				)
			continue
		if platform == host_os:
			return True
		if platform == "unix" and host_os in _UNIX_HOSTS:
			return True
	return False


def shebang_interpreter_name(shebang: str) -> Optional[str]:
	"""
	Interpreter name from shebang text (with or without the leading `#!`).

	`/usr/bin/env python3 -u` gives `python3`; `/bin/bash -e` gives `bash`.
	"""
	text = shebang.strip()
	if text.startswith("#!"):
		text = text[2:].strip()
	if not text:
		return None
	if text.startswith("/usr/bin/env "):
		words = text[len("/usr/bin/env ") :].split()
		return words[0] if words else None
	first = text.split()[0]
	return first.rsplit("/", 1)[-1] or None


def _unknown(name: str, source: str, fallback: ResolvedInterpreter, span: Optional[Span]) -> Diagnostic:
	return Diagnostic(
		message=f"unknown interpreter '{name}' in {source}, using '{fallback.binary}'",
		code="unknown-interpreter",
		phase="load",
		span=span or Span(),
	)


def resolve_default_shell(
	default_shell: str,
	diagnostics: Optional[List[Diagnostic]] = None,
) -> ResolvedInterpreter:
	resolved = lookup_interpreter(default_shell)
	if resolved is not None:
		return resolved
	if diagnostics is not None:
		diagnostics.append(_unknown(default_shell, "the default shell setting", FALLBACK_SHELL, None))
	return FALLBACK_SHELL


def resolve_interpreter(
	attrs: Iterable[Attribute],
	shebang: Optional[str],
	default_shell: Union[str, ResolvedInterpreter],
	diagnostics: Optional[List[Diagnostic]] = None,
	span: Optional[Span] = None,
) -> ResolvedInterpreter:
	"""
	Interpreter governing a function body.

	Precedence: `@shell` attribute, then the body's shebang, then
	`default_shell`. An unrecognized name is reported and the default is used.
	`default_shell` may be given already resolved (see `resolve_default_shell`).
	"""
	if isinstance(default_shell, ResolvedInterpreter):
		default = default_shell
	else:
		default = resolve_default_shell(default_shell, diagnostics)

	shell_attr = next((a for a in attrs if isinstance(a, ShellAttr)), None)
	if shell_attr is not None:
		resolved = lookup_interpreter(shell_attr.interpreter_name)
		if resolved is not None:
			return resolved
		if diagnostics is not None:
			diagnostics.append(_unknown(shell_attr.interpreter_name, "@shell", default, span))
		return default

	if shebang:
		name = shebang_interpreter_name(shebang)
		resolved = lookup_interpreter(name) if name else None
		if resolved is not None:
			return resolved
		if diagnostics is not None:
			diagnostics.append(_unknown(name or shebang, "shebang", default, span))
		return default

	return default


__all__ = [
	"COMMAND_FLAGS",
	"FALLBACK_SHELL",
	"INTERPRETER_NAMES",
	"Interpreter",
	"PLATFORMS",
	"ResolvedInterpreter",
	"compatibility_class",
	"is_compatible",
	"lookup_interpreter",
	"matches_platform",
	"resolve_default_shell",
	"resolve_interpreter",
	"shebang_interpreter_name",
]

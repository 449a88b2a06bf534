# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The load pass: Program + host settings -> immutable FunctionTable.

Platform guards are applied here, once. A definition whose `@os` does not
match the host never enters the table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .core.diagnostics import Diagnostic
from .core.span import Span
from .interpreters import FALLBACK_SHELL, ResolvedInterpreter, matches_platform, resolve_default_shell, resolve_interpreter
from .parser.ast import ArgAttr, Attribute, DescAttr, FunctionCall, Located, Parameter, Program


@dataclass(frozen=True)
class FunctionMetadata:
	attributes: Tuple[Attribute, ...] = ()
	shebang: Optional[str] = None
	params: Tuple[Parameter, ...] = ()

	@property
	def description(self) -> Optional[str]:
		return next((a.text for a in self.attributes if isinstance(a, DescAttr)), None)

	@property
	def arg_docs(self) -> Tuple[ArgAttr, ...]:
		return tuple(a for a in self.attributes if isinstance(a, ArgAttr))


@dataclass(frozen=True)
class FunctionEntry:
	"""One active function: its raw body plus everything resolved at load."""

	name: str
	body: str
	is_block: bool
	metadata: FunctionMetadata
	interpreter: ResolvedInterpreter
	loc: Optional[Located] = None


@dataclass(frozen=True)
class FunctionTable:
	"""
	Read-only view of a loaded Runfile.

	`functions` and `variables` preserve source order. Top-level calls are kept
	in `calls` for hosts that want to run them; loading never executes anything.
	"""

	functions: Mapping[str, FunctionEntry] = field(default_factory=lambda: MappingProxyType({}))
	variables: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
	calls: Tuple[FunctionCall, ...] = ()
	host_os: str = "linux"
	default_shell: ResolvedInterpreter = FALLBACK_SHELL
	filename: Optional[str] = None

	def __contains__(self, name: object) -> bool:
		return name in self.functions

	def get(self, name: str) -> Optional[FunctionEntry]:
		return self.functions.get(name)

	def names(self) -> List[str]:
		return list(self.functions)


def load(
	program: Program,
	host_os: str,
	default_shell: Union[str, ResolvedInterpreter],
	diagnostics: Optional[List[Diagnostic]] = None,
	filename: Optional[str] = None,
) -> FunctionTable:
	"""
	Build the function table for `host_os`.

	The first definition of a name whose platform guard matches wins; later
	matching definitions are reported as duplicates and ignored.
	"""
	if isinstance(default_shell, ResolvedInterpreter):
		shell = default_shell
	else:
		shell = resolve_default_shell(default_shell, diagnostics)

	functions: Dict[str, FunctionEntry] = {}
	for fn in program.functions:
		span = Span.from_loc(fn.loc, file=filename)
		if not matches_platform(fn.attributes, host_os, diagnostics, span):
			continue
		if fn.name in functions:
			if diagnostics is not None:
				first = functions[fn.name].loc
				diagnostics.append(
					Diagnostic(
						message=f"function '{fn.name}' is defined more than once for {host_os}; keeping the first definition",
						code="duplicate-function",
						phase="load",
						span=span,
						notes=[f"first defined at line {first.line}"] if first is not None else [],
					)
				)
			continue
		interpreter = resolve_interpreter(fn.attributes, fn.shebang, shell, diagnostics, span)
		functions[fn.name] = FunctionEntry(
			name=fn.name,
			body=fn.body,
			is_block=fn.is_block,
			metadata=FunctionMetadata(attributes=fn.attributes, shebang=fn.shebang, params=fn.params),
			interpreter=interpreter,
			loc=fn.loc,
		)

	variables: Dict[str, str] = {}
	for assignment in program.assignments:
		variables[assignment.name] = assignment.value

	return FunctionTable(
		functions=MappingProxyType(functions),
		variables=MappingProxyType(variables),
		calls=program.calls,
		host_os=host_os,
		default_shell=shell,
		filename=filename,
	)


__all__ = ["FunctionEntry", "FunctionMetadata", "FunctionTable", "load"]

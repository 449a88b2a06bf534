# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Runfile syntax tree.

Every node is immutable; a parsed Program can be shared by any number of loads
and invocations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Located:
	"""Line/column in the original Runfile text (1-based)."""

	line: int
	column: int


class ParamType(Enum):
	STR = "str"
	INT = "int"
	BOOL = "bool"
	FLOAT = "float"
	OBJECT = "object"


# Spellings accepted after `name:` in a parameter list.
PARAM_TYPE_ALIASES = {
	"str": ParamType.STR,
	"string": ParamType.STR,
	"int": ParamType.INT,
	"integer": ParamType.INT,
	"bool": ParamType.BOOL,
	"boolean": ParamType.BOOL,
	"float": ParamType.FLOAT,
	"number": ParamType.FLOAT,
	"object": ParamType.OBJECT,
	"dict": ParamType.OBJECT,
}


@dataclass(frozen=True)
class Parameter:
	name: str
	declared_type: ParamType = ParamType.STR
	default: Optional[str] = None
	is_rest: bool = False

	@property
	def required(self) -> bool:
		return self.default is None and not self.is_rest


@dataclass(frozen=True)
class DescAttr:
	text: str


@dataclass(frozen=True)
class ArgAttr:
	"""
	`# @arg` documentation for one argument.

	`position` is 0 for the named form (`@arg env Target environment`) and the
	1-based index for the positional form (`@arg 1:env string Target`).
	"""

	name: str
	description: str
	position: int = 0
	arg_type: Optional[ParamType] = None


@dataclass(frozen=True)
class OsAttr:
	platform: str


@dataclass(frozen=True)
class ShellAttr:
	interpreter_name: str


Attribute = Union[DescAttr, ArgAttr, OsAttr, ShellAttr]


class Stmt:
	loc: Located


@dataclass(frozen=True)
class Assignment(Stmt):
	loc: Located
	name: str
	value: str


@dataclass(frozen=True)
class FunctionCall(Stmt):
	loc: Located
	name: str
	args: Tuple[str, ...] = ()


class FunctionDef(Stmt):
	"""Shared shape of the two definition forms."""

	name: str
	params: Tuple[Parameter, ...]
	attributes: Tuple[Attribute, ...]

	@property
	def is_block(self) -> bool:
		raise NotImplementedError

	@property
	def body(self) -> str:
		raise NotImplementedError

	@property
	def shebang(self) -> Optional[str]:
		return None


@dataclass(frozen=True)
class SimpleFunctionDef(FunctionDef):
	loc: Located
	name: str
	params: Tuple[Parameter, ...]
	command_template: str
	attributes: Tuple[Attribute, ...] = ()

	@property
	def is_block(self) -> bool:
		return False

	@property
	def body(self) -> str:
		return self.command_template


@dataclass(frozen=True)
class BlockFunctionDef(FunctionDef):
	"""
	A `{ ... }` definition.

	`commands` holds the dedented body with the shebang line (if any) removed;
	`shebang` keeps that line's text after `#!`.
	"""

	loc: Located
	name: str
	params: Tuple[Parameter, ...]
	commands: Tuple[str, ...]
	attributes: Tuple[Attribute, ...] = ()
	shebang: Optional[str] = None  # type: ignore[assignment]

	@property
	def is_block(self) -> bool:
		return True

	@property
	def body(self) -> str:
		return "\n".join(self.commands)


Statement = Union[Assignment, SimpleFunctionDef, BlockFunctionDef, FunctionCall]


@dataclass(frozen=True)
class Program:
	statements: Tuple[Statement, ...] = ()

	@property
	def functions(self) -> Tuple[FunctionDef, ...]:
		return tuple(s for s in self.statements if isinstance(s, FunctionDef))

	@property
	def assignments(self) -> Tuple[Assignment, ...]:
		return tuple(s for s in self.statements if isinstance(s, Assignment))

	@property
	def calls(self) -> Tuple[FunctionCall, ...]:
		return tuple(s for s in self.statements if isinstance(s, FunctionCall))


__all__ = [
	"ArgAttr",
	"Assignment",
	"Attribute",
	"BlockFunctionDef",
	"DescAttr",
	"FunctionCall",
	"FunctionDef",
	"Located",
	"OsAttr",
	"PARAM_TYPE_ALIASES",
	"ParamType",
	"Parameter",
	"Program",
	"ShellAttr",
	"SimpleFunctionDef",
	"Statement",
	"Stmt",
]

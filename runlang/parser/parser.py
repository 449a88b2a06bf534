# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from ..errors import ParseError
from .ast import (
	PARAM_TYPE_ALIASES,
	Assignment,
	Attribute,
	BlockFunctionDef,
	FunctionCall,
	Located,
	Parameter,
	ParamType,
	Program,
	ShellAttr,
	SimpleFunctionDef,
	Statement,
)
from .attributes import collect_attributes
from .text import Preprocessed, dedent_block, preprocess, split_block_commands, strip_shebang

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(_GRAMMAR_SRC, parser="lalr", propagate_positions=True, maybe_placeholders=False)

_ESCAPED = re.compile(r"\\([\"\\])")

IDENT_HINT = "function names may contain letters, digits, `_` and `:` and must not start with a digit"


def _name(node: Tree) -> str:
	return node.data if isinstance(node.data, str) else node.data.value


def _decode_string(tok: Token) -> str:
	"""Strip quotes; double-quoted strings also unescape `\\"` and `\\\\`."""
	raw = tok.value
	inner = raw[1:-1]
	if raw[0] == '"':
		return _ESCAPED.sub(r"\1", inner)
	return inner


class _Builder:
	"""Walks the lark tree of one Runfile and produces AST nodes."""

	def __init__(self, pre: Preprocessed, original_lines: List[str], filename: Optional[str]) -> None:
		self.pre = pre
		self.original_lines = original_lines
		self.filename = filename

	def loc(self, line: int, column: int) -> Located:
		return Located(line=self.pre.original_line(line), column=column)

	def error(self, message: str, line: int, column: int, hint: Optional[str] = None) -> ParseError:
		orig = self.pre.original_line(line)
		source_line = self.original_lines[orig - 1] if 0 < orig <= len(self.original_lines) else None
		return ParseError(
			message=message,
			line=orig,
			column=column,
			source_line=source_line,
			filename=self.filename,
			hint=hint,
		)

	def program(self, tree: Tree) -> Program:
		statements: List[Statement] = []
		for child in tree.children:
			if isinstance(child, Tree):
				statements.append(self.statement(child))
		return Program(statements=tuple(statements))

	def statement(self, node: Tree) -> Statement:
		kind = _name(node)
		if kind == "assignment":
			return self.assignment(node)
		if kind == "function_def":
			return self.function_def(node)
		if kind == "function_call":
			return self.function_call(node)
		raise self.error(f"unexpected statement '{kind}'", node.meta.line, node.meta.column)

	def assignment(self, node: Tree) -> Assignment:
		name_tok, value_tok = node.children[0], node.children[1]
		if value_tok.type == "STRING":
			value = _decode_string(value_tok)
		else:
			value = value_tok.value.strip()
		return Assignment(loc=self.loc(node.meta.line, node.meta.column), name=name_tok.value, value=value)

	def function_call(self, node: Tree) -> FunctionCall:
		name_tok = node.children[0]
		args: List[str] = []
		if len(node.children) > 1:
			for item in node.children[1].children:
				args.append(self.call_arg(item))
		return FunctionCall(loc=self.loc(node.meta.line, node.meta.column), name=name_tok.value, args=tuple(args))

	def call_arg(self, item: Tree) -> str:
		kind = _name(item)
		if kind == "literal":
			tok = item.children[0]
			return _decode_string(tok) if tok.type == "STRING" else tok.value
		if kind == "param" and len(item.children) == 1:
			# A bare word in a call is a literal argument.
			return item.children[0].value
		raise self.error(
			"call arguments must be plain values",
			item.meta.line,
			item.meta.column,
			hint="types, defaults and `...rest` are only allowed when defining a function",
		)

	def function_def(self, node: Tree) -> Statement:
		children = list(node.children)
		if isinstance(children[0], Token) and children[0].type == "FUNCTION":
			children.pop(0)
		name_tok, params_node, body = children[0], children[1], children[2]
		stmt_line = node.meta.line
		loc = self.loc(stmt_line, node.meta.column)
		name = name_tok.value
		params = self.params(params_node)
		attributes = collect_attributes(self.pre.lines, stmt_line)

		if isinstance(body, Token):
			return SimpleFunctionDef(
				loc=loc,
				name=name,
				params=params,
				command_template=body.value.strip(),
				attributes=attributes,
			)
		return self.block_def(loc, name, params, attributes, body)

	def block_def(
		self,
		loc: Located,
		name: str,
		params: Tuple[Parameter, ...],
		attributes: Tuple[Attribute, ...],
		body: Tree,
	) -> BlockFunctionDef:
		# Block meta spans the braces themselves.
		content = self.pre.text[body.meta.start_pos + 1 : body.meta.end_pos - 1]
		lines, shebang = strip_shebang(dedent_block(content))
		has_shell = any(isinstance(a, ShellAttr) for a in attributes)
		return BlockFunctionDef(
			loc=loc,
			name=name,
			params=params,
			commands=split_block_commands(lines, has_shell),
			attributes=attributes,
			shebang=shebang,
		)

	def params(self, node: Tree) -> Tuple[Parameter, ...]:
		params: List[Parameter] = []
		for idx, item in enumerate(node.children):
			kind = _name(item)
			if kind == "literal":
				raise self.error(
					"expected a parameter name",
					item.meta.line,
					item.meta.column,
					hint="quoted values and numbers can only be used as defaults, e.g. `name = \"value\"`",
				)
			if kind == "rest_param":
				if idx != len(node.children) - 1:
					raise self.error(
						f"rest parameter '...{item.children[0].value}' must be the last parameter",
						item.meta.line,
						item.meta.column,
					)
				params.append(Parameter(name=item.children[0].value, is_rest=True))
				continue
			params.append(self.param(item))
		return tuple(params)

	def param(self, item: Tree) -> Parameter:
		name = item.children[0].value
		declared = ParamType.STR
		default: Optional[str] = None
		for child in item.children[1:]:
			if isinstance(child, Token):
				spelled = child.value.lower()
				if spelled not in PARAM_TYPE_ALIASES:
					allowed = ", ".join(sorted(PARAM_TYPE_ALIASES))
					raise self.error(
						f"unknown parameter type '{child.value}'",
						child.line,
						child.column,
						hint=f"supported types: {allowed}",
					)
				declared = PARAM_TYPE_ALIASES[spelled]
			else:
				tok = child.children[0]
				default = _decode_string(tok) if tok.type == "STRING" else tok.value
		return Parameter(name=name, declared_type=declared, default=default)

	def from_lark(self, err: UnexpectedInput) -> ParseError:
		line = getattr(err, "line", None) or len(self.pre.lines) or 1
		column = getattr(err, "column", None) or 1
		if isinstance(err, UnexpectedToken):
			expected = set(err.expected or ())
			tok = err.token
			if tok.type == "$END":
				message = "unexpected end of input"
			elif tok.type == "_NL":
				message = "unexpected end of line"
			else:
				message = f"unexpected {_excerpt(tok.value)!r}"
			return self.error(message, line, column, _hint(expected, tok.type))
		if isinstance(err, UnexpectedCharacters):
			return self.error(f"unexpected character {err.char!r}", line, column, _hint(set(err.allowed or ()), None))
		if isinstance(err, UnexpectedEOF):
			return self.error("unexpected end of input", line, column, _hint(set(err.expected or ()), "$END"))
		return self.error(str(err), line, column)


def _excerpt(text: str, limit: int = 40) -> str:
	first = text.strip().split("\n", 1)[0]
	return first if len(first) <= limit else first[: limit - 3] + "..."


def _hint(expected: set, got: Optional[str]) -> Optional[str]:
	if "RBRACE" in expected and got == "$END":
		return "function body is missing a closing `}`"
	if "RPAR" in expected:
		return "parameter list is missing a closing `)`"
	if "LPAR" in expected:
		return "a function definition needs a parameter list, e.g. `name() command` or `name(arg) { ... }`"
	if "IDENT" in expected:
		return IDENT_HINT
	if "PARAM_NAME" in expected:
		return "parameter names may contain letters, digits and `_`"
	return None


def parse_runfile(source: str, filename: Optional[str] = None) -> Program:
	"""
	Parse Runfile text into a Program.

	Raises ParseError (with line/column in `source`) on grammar violations.
	"""
	pre = preprocess(source)
	original_lines = source.replace("\r\n", "\n").replace("\r", "\n").split("\n")
	builder = _Builder(pre, original_lines, filename)
	try:
		tree = _PARSER.parse(pre.text)
	except UnexpectedInput as err:
		raise builder.from_lark(err) from None
	return builder.program(tree)


__all__ = ["IDENT_HINT", "parse_runfile"]

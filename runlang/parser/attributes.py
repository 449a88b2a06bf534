# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`# @key value` comment attributes.

Attributes belong to the statement directly below a contiguous run of
attribute lines; a blank line or any other line (including a plain comment)
ends the run.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .ast import PARAM_TYPE_ALIASES, ArgAttr, Attribute, DescAttr, OsAttr, ShellAttr


def _attribute_payload(line: str) -> Optional[str]:
	stripped = line.strip()
	if stripped.startswith("# @"):
		return stripped[3:]
	if stripped.startswith("#@"):
		return stripped[2:]
	return None


def is_attribute_line(line: str) -> bool:
	return _attribute_payload(line) is not None


def _unquote(text: str) -> str:
	text = text.strip()
	if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
		return text[1:-1]
	return text


def _parse_arg(rest: str) -> Optional[ArgAttr]:
	parts = rest.split(None, 1)
	if not parts:
		return None
	head = parts[0]
	tail = parts[1] if len(parts) > 1 else ""

	# Positional form: `1:name [type] description`.
	pos_text, sep, name = head.partition(":")
	if sep and pos_text.isdigit() and name:
		arg_type = None
		words = tail.split(None, 1)
		if words and words[0].lower() in PARAM_TYPE_ALIASES:
			arg_type = PARAM_TYPE_ALIASES[words[0].lower()]
			tail = words[1] if len(words) > 1 else ""
		return ArgAttr(name=name, description=_unquote(tail), position=int(pos_text), arg_type=arg_type)

	return ArgAttr(name=head, description=_unquote(tail))


def parse_attribute(line: str) -> Optional[Attribute]:
	"""Parse one attribute line; unknown keys and malformed lines yield None."""
	payload = _attribute_payload(line)
	if payload is None:
		return None
	key, _, rest = payload.partition(" ")
	key = key.strip().lower()
	rest = rest.strip()
	if key == "desc":
		return DescAttr(text=_unquote(rest))
	if key == "arg":
		return _parse_arg(rest)
	if key == "os" and rest:
		return OsAttr(platform=rest.split()[0].lower())
	if key == "shell" and rest:
		return ShellAttr(interpreter_name=rest.split()[0])
	return None


def collect_attributes(lines: Sequence[str], stmt_line: int) -> Tuple[Attribute, ...]:
	"""
	Scan upward from the line above `stmt_line` (1-based) and return the
	attributes of the contiguous attribute block, in source order.
	"""
	found: List[Attribute] = []
	idx = stmt_line - 2
	while idx >= 0:
		line = lines[idx]
		if not is_attribute_line(line):
			break
		attr = parse_attribute(line)
		if attr is not None:
			found.append(attr)
		idx -= 1
	found.reverse()
	return tuple(found)


__all__ = ["collect_attributes", "is_attribute_line", "parse_attribute"]

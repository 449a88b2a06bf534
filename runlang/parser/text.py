# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Text-level passes around the grammar: line continuations, block bodies and
shebang lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Preprocessed:
	"""
	Source with backslash continuations joined.

	`line_map[i]` is the original 1-based line number of preprocessed line
	`i + 1`, so errors and statement locations can point at the file as written.
	"""

	text: str
	lines: Tuple[str, ...]
	line_map: Tuple[int, ...]

	def original_line(self, line: int) -> int:
		if 1 <= line <= len(self.line_map):
			return self.line_map[line - 1]
		return self.line_map[-1] if self.line_map else line


def preprocess(source: str) -> Preprocessed:
	"""
	Join lines ending in `\\` with the following line (separated by one space)
	and strip trailing whitespace. The result always ends with a newline.
	"""
	raw_lines = source.replace("\r\n", "\n").replace("\r", "\n").split("\n")
	if raw_lines and raw_lines[-1] == "":
		raw_lines.pop()

	out_lines: List[str] = []
	line_map: List[int] = []
	buffer = ""
	start: Optional[int] = None
	for idx, line in enumerate(raw_lines, start=1):
		if start is None:
			start = idx
		trimmed = line.rstrip()
		if buffer:
			trimmed = trimmed.lstrip()
		if trimmed.endswith("\\"):
			buffer += trimmed[:-1].rstrip() + " "
			continue
		buffer += trimmed
		out_lines.append(buffer.rstrip())
		line_map.append(start)
		buffer = ""
		start = None
	if start is not None:
		out_lines.append(buffer.rstrip())
		line_map.append(start)

	text = "".join(f"{line}\n" for line in out_lines)
	return Preprocessed(text=text, lines=tuple(out_lines), line_map=tuple(line_map))


def dedent_block(content: str) -> List[str]:
	"""Trim blank leading/trailing lines and remove the common indentation."""
	lines = content.split("\n")
	while lines and not lines[0].strip():
		lines.pop(0)
	while lines and not lines[-1].strip():
		lines.pop()
	if not lines:
		return []
	indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
	cut = min(indents) if indents else 0
	return [line[cut:].rstrip() if line.strip() else "" for line in lines]


def split_block_commands(lines: Sequence[str], has_shell_attr: bool) -> Tuple[str, ...]:
	"""
	Turn a dedented block into its command list.

	A one-line block such as `{ build; test }` is split on `;` into separate
	commands unless the function pins an interpreter with `@shell`; anything
	else is kept as a single script.
	"""
	if not lines:
		return ()
	if len(lines) == 1 and not has_shell_attr and ";" in lines[0]:
		return tuple(part.strip() for part in _split_unquoted(lines[0], ";") if part.strip())
	return ("\n".join(lines),)


def _split_unquoted(line: str, sep: str) -> List[str]:
	"""Split on `sep` outside single quotes, double quotes and backslash escapes."""
	parts: List[str] = []
	current: List[str] = []
	quote: Optional[str] = None
	escaped = False
	for ch in line:
		if escaped:
			escaped = False
		elif ch == "\\" and quote != "'":
			escaped = True
		elif quote:
			if ch == quote:
				quote = None
		elif ch in ("'", '"'):
			quote = ch
		elif ch == sep:
			parts.append("".join(current))
			current = []
			continue
		current.append(ch)
	parts.append("".join(current))
	return parts


def find_shebang(lines: Sequence[str]) -> Optional[int]:
	"""
	Index of the shebang line, if the first meaningful line is one.

	Leading blank lines and plain comments are skipped; any other line ends the
	search.
	"""
	for idx, line in enumerate(lines):
		stripped = line.strip()
		if not stripped:
			continue
		if stripped.startswith("#!"):
			return idx
		if stripped.startswith("#"):
			continue
		return None
	return None


def strip_shebang(lines: Sequence[str]) -> Tuple[List[str], Optional[str]]:
	"""Remove the shebang line and return `(remaining_lines, shebang_text)`."""
	idx = find_shebang(lines)
	if idx is None:
		return list(lines), None
	shebang = lines[idx].strip()[2:].strip()
	rest = list(lines[:idx]) + list(lines[idx + 1 :])
	while rest and not rest[0].strip():
		rest.pop(0)
	return rest, shebang


__all__ = ["Preprocessed", "dedent_block", "find_shebang", "preprocess", "split_block_commands", "strip_shebang"]

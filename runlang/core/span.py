# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source locations attached to diagnostics.

A Span points back into the original Runfile text (line numbers are those of
the file on disk, before line continuations were joined).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Best-effort file/line/column, plus whatever location object produced it."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, file: Optional[str] = None) -> "Span":
		"""
		Build a Span from an AST node (anything with `line`/`column`).

		Spans are returned unchanged.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			raw=loc,
		)

	def describe(self) -> str:
		if self.line is None:
			return self.file or ""
		where = f"{self.line}:{self.column}" if self.column is not None else str(self.line)
		return f"{self.file}:{where}" if self.file else f"line {where}"


__all__ = ["Span"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class RunError(Exception):
	"""
	A structured error raised by the engine.

	`reason_code` is stable and meant for programmatic callers; `message` is for
	humans. Only fatal conditions are raised; everything else is a Diagnostic.
	"""

	reason_code: str
	message: str
	function: str | None = None
	interpreter: str | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"function": self.function,
			"interpreter": self.interpreter,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.function:
			parts.append(f"function={self.function}")
		if self.interpreter:
			parts.append(f"interpreter={self.interpreter}")
		return " ".join(parts)


@dataclass(eq=False)
class ParseError(RunError):
	"""Grammar violation in a Runfile. Line and column refer to the original text."""

	reason_code: str = "parse-error"
	message: str = ""
	line: int = 0
	column: int = 0
	source_line: str | None = None
	filename: str | None = None
	hint: str | None = None

	def to_dict(self) -> dict[str, Any]:
		data = super().to_dict()
		data.update(
			{
				"line": self.line,
				"column": self.column,
				"filename": self.filename,
				"hint": self.hint,
			}
		)
		return data

	def format_human(self) -> str:
		where = f"{self.filename or '<input>'}:{self.line}:{self.column}"
		lines = [f"error: {self.message}", f"  --> {where}"]
		if self.source_line is not None:
			gutter = " " * len(str(self.line))
			lines.append(f" {gutter} |")
			lines.append(f" {self.line} | {self.source_line}")
			lines.append(f" {gutter} | {' ' * max(self.column - 1, 0)}^")
		if self.hint:
			lines.append(f"  = hint: {self.hint}")
		return "\n".join(lines)


@dataclass(eq=False)
class FunctionNotFoundError(RunError):
	reason_code: str = "function-not-found"
	message: str = ""


@dataclass(eq=False)
class ProcessSpawnError(RunError):
	"""The interpreter binary for a call could not be started."""

	reason_code: str = "process-spawn"
	message: str = ""
	binary: str | None = None

	def to_dict(self) -> dict[str, Any]:
		data = super().to_dict()
		data["binary"] = self.binary
		return data


__all__ = ["RunError", "ParseError", "FunctionNotFoundError", "ProcessSpawnError"]

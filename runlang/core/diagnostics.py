# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Non-fatal findings produced while loading and composing a Runfile.

Engine functions accept an optional `diagnostics` list and append to it rather
than printing; the CLI (or any other host) decides how to surface them.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterable, TextIO

from .span import Span


@dataclass
class Diagnostic:
	"""A warning or error with a stable code."""

	message: str
	code: str | None = None
	# Which engine stage produced it: "load", "compose", "substitute", "execute".
	phase: str | None = None
	severity: str = "warning"
	span: Span = field(default_factory=Span)
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


def format_diagnostic(diag: Diagnostic) -> str:
	head = f"{diag.severity}[{diag.code}]" if diag.code else diag.severity
	line = f"{head}: {diag.message}"
	where = diag.span.describe()
	if where:
		line += f" ({where})"
	for note in diag.notes:
		line += f"\n  note: {note}"
	return line


def report_diagnostics(diagnostics: Iterable[Diagnostic], stream: TextIO | None = None) -> None:
	out = stream if stream is not None else sys.stderr
	for diag in diagnostics:
		print(format_diagnostic(diag), file=out)


__all__ = ["Diagnostic", "format_diagnostic", "report_diagnostics"]

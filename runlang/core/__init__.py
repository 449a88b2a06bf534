# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .diagnostics import Diagnostic, format_diagnostic, report_diagnostics
from .span import Span

__all__ = ["Diagnostic", "Span", "format_diagnostic", "report_diagnostics"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from typing import Optional

from .ast import Program
from .parser import parse_runfile


def parse(source: str, filename: Optional[str] = None) -> Program:
	"""Parse Runfile text; raises ParseError on invalid input."""
	return parse_runfile(source, filename=filename)


__all__ = ["parse", "parse_runfile"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Running a composed script: one subprocess per call, stdio inherited.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Callable, List, Mapping, Optional, Sequence

from .errors import ProcessSpawnError
from .interpreters import ResolvedInterpreter

Which = Callable[[str], Optional[str]]


def resolve_binary(interpreter: ResolvedInterpreter, which: Which = shutil.which) -> str:
	"""Concrete executable name; a bare `python` prefers `python3` when it exists."""
	if interpreter.binary == "python" and which("python3"):
		return "python3"
	return interpreter.binary


def build_command(
	script: str,
	interpreter: ResolvedInterpreter,
	extra_args: Sequence[str] = (),
	which: Which = shutil.which,
) -> List[str]:
	"""
	argv for running `script`.

	Python, Node and Ruby receive `extra_args` after the script so the
	declaration preamble can read them from the interpreter's argument array.
	Shell dialects already have their arguments substituted into the text.
	"""
	argv = [resolve_binary(interpreter, which), interpreter.flag, script]
	if interpreter.kind.is_polyglot:
		argv.extend(extra_args)
	return argv


def execute(
	script: str,
	interpreter: ResolvedInterpreter,
	extra_args: Sequence[str] = (),
	cwd: Optional[str] = None,
	env: Optional[Mapping[str, str]] = None,
	which: Which = shutil.which,
) -> int:
	"""
	Run the script to completion and return its exit status.

	A child killed by signal N reports 128 + N, as shells do. Failing to start
	the interpreter raises ProcessSpawnError.
	"""
	argv = build_command(script, interpreter, extra_args, which)
	try:
		proc = subprocess.run(argv, cwd=cwd, env=dict(env) if env is not None else None)
	except OSError as err:
		raise ProcessSpawnError(
			message=f"failed to start '{argv[0]}': {err.strerror or err}",
			interpreter=interpreter.kind.value,
			binary=argv[0],
		) from err
	if proc.returncode < 0:
		return 128 - proc.returncode
	return proc.returncode


__all__ = ["build_command", "execute", "resolve_binary"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Mapping

HostOS = str  # "linux" | "macos" | "windows"

SHELL_ENV_VAR = "RUN_SHELL"


def host_os_from_platform(platform: str) -> HostOS:
	if platform.startswith("win"):
		return "windows"
	if platform == "darwin":
		return "macos"
	return "linux"


@dataclass(frozen=True)
class EngineConfig:
	"""
	Host-supplied settings threaded into `load`.

	Nothing under the engine reads the process environment; hosts construct one
	of these (usually via `from_environment`) and pass the values down.
	"""

	host_os: HostOS = "linux"
	default_shell: str = "sh"

	@classmethod
	def from_environment(
		cls,
		environ: Mapping[str, str] | None = None,
		platform: str | None = None,
	) -> "EngineConfig":
		env = os.environ if environ is None else environ
		host = host_os_from_platform(platform if platform is not None else sys.platform)
		shell = env.get(SHELL_ENV_VAR, "").strip()
		if not shell:
			shell = "pwsh" if host == "windows" else "sh"
		return cls(host_os=host, default_shell=shell)


__all__ = ["EngineConfig", "HostOS", "SHELL_ENV_VAR", "host_os_from_platform"]

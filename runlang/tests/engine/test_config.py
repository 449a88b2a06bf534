# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from runlang.config import EngineConfig, host_os_from_platform


def test_host_os_from_platform() -> None:
	assert host_os_from_platform("linux") == "linux"
	assert host_os_from_platform("darwin") == "macos"
	assert host_os_from_platform("win32") == "windows"


def test_default_shell_per_platform() -> None:
	assert EngineConfig.from_environment({}, "linux") == EngineConfig(host_os="linux", default_shell="sh")
	assert EngineConfig.from_environment({}, "win32") == EngineConfig(host_os="windows", default_shell="pwsh")


def test_run_shell_overrides_default() -> None:
	assert EngineConfig.from_environment({"RUN_SHELL": "bash"}, "darwin").default_shell == "bash"
	assert EngineConfig.from_environment({"RUN_SHELL": "  "}, "linux").default_shell == "sh"

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

import runlang
from runlang.core.diagnostics import Diagnostic
from runlang.engine import SPAWN_FAILURE_STATUS
from runlang.errors import FunctionNotFoundError
from runlang.interpreters import Interpreter

needs_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="requires sh")
needs_python3 = pytest.mark.skipif(shutil.which("python3") is None, reason="requires python3")

RUNFILE = """
VERSION="1.0.0"

# @desc Build the project
# @arg target Build target
build(target = debug) echo "build $target $VERSION"

docker:build(tag) echo docker $tag

docker:push() echo push

# @shell python3
stats(n: int) {
    print(n * 2)
}
"""


def _load(source: str = RUNFILE):
	return runlang.load(runlang.parse(source), host_os="linux", default_shell="sh")


def test_list_names_is_sorted() -> None:
	assert runlang.list_names(_load()) == ["build", "docker:build", "docker:push", "stats"]


def test_metadata_for() -> None:
	info = runlang.metadata_for(_load(), "build")
	assert info.name == "build"
	assert info.description == "Build the project"
	assert [(p.name, p.default) for p in info.params] == [("target", "debug")]
	assert info.shebang is None
	assert info.interpreter == "sh"
	assert [a.name for a in info.args] == ["target"]

	stats = runlang.metadata_for(_load(), "stats")
	assert stats.interpreter == "python3"
	assert stats.description is None


def test_metadata_for_unknown_name() -> None:
	with pytest.raises(FunctionNotFoundError):
		runlang.metadata_for(_load(), "deploy")


def test_resolve_function_name() -> None:
	table = _load()
	assert runlang.resolve_function_name(table, "build", ["x"]) == ("build", ("x",))
	assert runlang.resolve_function_name(table, "docker", ["build", "v1"]) == ("docker:build", ("v1",))
	assert runlang.resolve_function_name(table, "docker_push", []) == ("docker:push", ())
	with pytest.raises(FunctionNotFoundError) as excinfo:
		runlang.resolve_function_name(table, "docker", ["tag"])
	assert excinfo.value.function == "docker"


def test_prepare_shell_and_polyglot() -> None:
	table = _load()
	prepared = runlang.prepare(table, "docker", ["build", "v1"])
	assert prepared.function == "docker:build"
	assert prepared.script.endswith("echo docker v1")
	assert prepared.extra_args == ()

	prepared = runlang.prepare(table, "stats", ["21"])
	assert prepared.interpreter.kind is Interpreter.PYTHON
	assert prepared.extra_args == ("21",)
	assert "print(n * 2)" in prepared.script


def test_invoke_unknown_function() -> None:
	with pytest.raises(FunctionNotFoundError):
		runlang.invoke(_load(), "deploy", [])


@needs_sh
def test_invoke_runs_one_composed_script(tmp_path: Path) -> None:
	out = tmp_path / "log.txt"
	source = f"""
VERSION="2.1"
step(name) echo "$name $VERSION" >> "{out}"
ci() {{
    step one
    step two
}}
fail() {{
    step before
    false
}}
"""
	table = _load(source)
	assert runlang.invoke(table, "ci", []) == 0
	assert out.read_text().splitlines() == ["one 2.1", "two 2.1"]

	# No `set -e`: the block's exit status is that of its last command.
	assert runlang.invoke(table, "fail", []) == 1


@needs_python3
def test_invoke_python_function_with_typed_args(tmp_path: Path) -> None:
	out = tmp_path / "n.txt"
	source = f"""
# @shell python3
double(n: int, flag: bool = no) {{
    with open({str(out)!r}, "w") as fh:
        fh.write(f"{{n * 2}} {{flag}}")
}}
"""
	assert runlang.invoke(_load(source), "double", ["21", "yes"]) == 0
	assert out.read_text() == "42 True"


def test_invoke_reports_missing_argument(monkeypatch) -> None:
	monkeypatch.setattr(subprocess, "run", lambda argv, cwd=None, env=None: subprocess.CompletedProcess(argv, 0))
	diags: list[Diagnostic] = []
	assert runlang.invoke(_load(), "docker:build", [], diags) == 0
	assert [d.code for d in diags] == ["missing-required-argument"]


def test_invoke_spawn_failure_returns_127(monkeypatch) -> None:
	def fail(argv, cwd=None, env=None):
		raise FileNotFoundError(2, "No such file or directory", argv[0])

	monkeypatch.setattr(subprocess, "run", fail)
	diags: list[Diagnostic] = []
	assert runlang.invoke(_load(), "build", [], diags) == SPAWN_FAILURE_STATUS
	assert [(d.code, d.severity) for d in diags] == [("process-spawn", "error")]


def test_invoke_prints_warnings_without_a_diagnostics_list(monkeypatch, capsys) -> None:
	monkeypatch.setattr(subprocess, "run", lambda argv, cwd=None, env=None: subprocess.CompletedProcess(argv, 0))
	assert runlang.invoke(_load(), "docker:build", []) == 0
	assert "warning[missing-required-argument]" in capsys.readouterr().err


@needs_sh
def test_invoke_runs_namespaced_siblings_calling_each_other(capfd) -> None:
	source = """
docker:build() echo built
docker:all() docker:build
release() docker:all
"""
	assert runlang.invoke(_load(source), "release", []) == 0
	captured = capfd.readouterr()
	assert captured.out == "built\n"
	assert "not found" not in captured.err


@needs_sh
def test_invoke_keeps_caller_parameters_across_nested_calls(capfd) -> None:
	source = """
greet(name) echo hi $name
wrapper(name) greet other; echo $name
main() wrapper alice
"""
	assert runlang.invoke(_load(source), "main", []) == 0
	assert capfd.readouterr().out == "hi other\nalice\n"

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from runlang.core.diagnostics import Diagnostic
from runlang.interpreters import Interpreter, ResolvedInterpreter
from runlang.parser import parse
from runlang.table import load

CLEAN_VARIANTS = """
# @os windows
clean() Remove-Item -Recurse build

# @os unix
clean() rm -rf build
"""


def test_platform_variants_are_filtered_at_load() -> None:
	table = load(parse(CLEAN_VARIANTS), host_os="linux", default_shell="sh")
	assert list(table.functions) == ["clean"]
	assert table.functions["clean"].body == "rm -rf build"

	table = load(parse(CLEAN_VARIANTS), host_os="windows", default_shell="pwsh")
	assert table.functions["clean"].body == "Remove-Item -Recurse build"
	assert table.functions["clean"].interpreter == ResolvedInterpreter(Interpreter.PWSH, "pwsh")


def test_inactive_only_function_is_absent() -> None:
	table = load(parse("# @os macos\nsign() codesign app\n"), host_os="linux", default_shell="sh")
	assert "sign" not in table
	assert table.get("sign") is None


def test_first_active_definition_wins_and_duplicates_warn() -> None:
	source = "build() make\nbuild() make all\n"
	diags: list[Diagnostic] = []
	table = load(parse(source), "linux", "sh", diags)
	assert table.functions["build"].body == "make"
	assert [d.code for d in diags] == ["duplicate-function"]
	assert diags[0].span.line == 2


def test_variables_and_calls_are_recorded() -> None:
	source = 'VERSION="1.0"\nNAME=app\nbuild() make\nbuild\n'
	table = load(parse(source), "linux", "sh")
	assert dict(table.variables) == {"VERSION": "1.0", "NAME": "app"}
	assert [c.name for c in table.calls] == ["build"]


def test_interpreters_resolved_at_load() -> None:
	source = """
# @shell bash
a() echo a

b() {
    #!/usr/bin/env python3
    print("b")
}

c() echo c
"""
	table = load(parse(source), "linux", "sh")
	kinds = {name: entry.interpreter.kind for name, entry in table.functions.items()}
	assert kinds == {"a": Interpreter.BASH, "b": Interpreter.PYTHON, "c": Interpreter.SH}
	assert table.functions["b"].metadata.shebang == "/usr/bin/env python3"
	assert table.functions["b"].body == 'print("b")'


def test_table_is_read_only() -> None:
	table = load(parse("a() echo\n"), "linux", "sh")
	with pytest.raises(TypeError):
		table.functions["x"] = table.functions["a"]  # type: ignore[index]
	with pytest.raises(TypeError):
		table.variables["X"] = "1"  # type: ignore[index]


def test_metadata_description_and_arg_docs() -> None:
	source = "# @desc Deploy\n# @arg env Target\ndeploy(env) echo $env\n"
	meta = load(parse(source), "linux", "sh").functions["deploy"].metadata
	assert meta.description == "Deploy"
	assert [a.name for a in meta.arg_docs] == ["env"]
	assert [p.name for p in meta.params] == ["env"]

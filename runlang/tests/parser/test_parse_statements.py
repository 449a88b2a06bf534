# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from runlang.parser import parse
from runlang.parser.ast import (
	Assignment,
	BlockFunctionDef,
	DescAttr,
	FunctionCall,
	SimpleFunctionDef,
)


def test_parse_assignments_definitions_and_calls() -> None:
	source = """
VERSION="1.0.0"
TARGET=release build

# @desc Build the project
build() cargo build --release

ci() {
    build
    test
}

ci
"""
	prog = parse(source)

	kinds = [type(s) for s in prog.statements]
	assert kinds == [Assignment, Assignment, SimpleFunctionDef, BlockFunctionDef, FunctionCall]

	version, target = prog.assignments
	assert (version.name, version.value) == ("VERSION", "1.0.0")
	assert (target.name, target.value) == ("TARGET", "release build")

	build = prog.statements[2]
	assert build.name == "build"
	assert build.command_template == "cargo build --release"
	assert build.attributes == (DescAttr(text="Build the project"),)
	assert build.loc.line == 6

	ci = prog.statements[3]
	assert ci.commands == ("build\ntest",)
	assert ci.attributes == ()
	assert ci.shebang is None

	assert prog.calls[0].name == "ci"
	assert prog.calls[0].args == ()


def test_single_line_block_is_split_on_semicolons() -> None:
	prog = parse("ci(){ build; test }\n")
	ci = prog.functions[0]
	assert isinstance(ci, BlockFunctionDef)
	assert ci.commands == ("build", "test")
	assert ci.body == "build\ntest"


def test_single_line_block_with_shell_attribute_is_not_split() -> None:
	source = "# @shell python3\nhello() { import sys; print(sys.version) }\n"
	fn = parse(source).functions[0]
	assert fn.commands == ("import sys; print(sys.version)",)


def test_namespaced_names_and_function_keyword() -> None:
	source = """
docker:build() docker build -t app .
function docker:push() {
    docker push app
}
"""
	prog = parse(source)
	assert [fn.name for fn in prog.functions] == ["docker:build", "docker:push"]
	assert prog.functions[1].body == "docker push app"


def test_block_body_is_dedented_and_keeps_nested_braces() -> None:
	source = """
deploy(env) {
    if [ "$env" = prod ]; then
        echo "careful"
    fi
    for f in *.txt; do { echo "$f"; }; done
}
"""
	fn = parse(source).functions[0]
	assert fn.body.split("\n") == [
		'if [ "$env" = prod ]; then',
		'    echo "careful"',
		"fi",
		'for f in *.txt; do { echo "$f"; }; done',
	]


def test_shebang_is_extracted_and_stripped() -> None:
	source = """
analyze() {
    # leading comment
    #!/usr/bin/env python3
    import sys
    print(sys.argv)
}
"""
	fn = parse(source).functions[0]
	assert fn.shebang == "/usr/bin/env python3"
	assert fn.commands == ("# leading comment\nimport sys\nprint(sys.argv)",)


def test_shebang_after_code_is_not_a_shebang() -> None:
	source = "f() {\n    echo hi\n    #!/bin/bash\n}\n"
	fn = parse(source).functions[0]
	assert fn.shebang is None
	assert fn.body == "echo hi\n#!/bin/bash"


def test_line_continuations_are_joined_and_locations_kept() -> None:
	source = "# first\nbuild() cargo build \\\n    --release \\\n    --locked\ntest() cargo test\n"
	prog = parse(source)
	build, test = prog.functions
	assert build.command_template == "cargo build --release --locked"
	assert build.loc.line == 2
	assert test.loc.line == 5


def test_call_with_arguments() -> None:
	prog = parse('deploy("staging, eu", 3, fast)\n')
	call = prog.calls[0]
	assert call.name == "deploy"
	assert call.args == ("staging, eu", "3", "fast")


def test_crlf_input_and_missing_trailing_newline() -> None:
	prog = parse("A=1\r\nbuild() make\r\nbuild")
	assert prog.assignments[0].value == "1"
	assert prog.functions[0].command_template == "make"
	assert prog.calls[0].name == "build"


def test_comments_and_empty_input() -> None:
	assert parse("").statements == ()
	assert parse("# just a comment\n\n   \n").statements == ()


def test_blocks_followed_by_more_statements() -> None:
	source = """build() {
    echo hi
}
test() {
    for f in a b; do { echo "$f"; }; done
    echo done
}  # trailing comment
lint() cargo clippy
ci(){ build; test }
ci
"""
	prog = parse(source)
	kinds = [type(s) for s in prog.statements]
	assert kinds == [BlockFunctionDef, BlockFunctionDef, SimpleFunctionDef, BlockFunctionDef, FunctionCall]
	build, test, lint, ci = prog.functions
	assert build.body == "echo hi"
	assert test.body == 'for f in a b; do { echo "$f"; }; done\necho done'
	assert (lint.name, lint.loc.line) == ("lint", 8)
	assert ci.commands == ("build", "test")
	assert prog.calls[0].loc.line == 10

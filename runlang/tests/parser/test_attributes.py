# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from runlang.parser import parse
from runlang.parser.ast import ArgAttr, DescAttr, OsAttr, ParamType, ShellAttr
from runlang.parser.attributes import collect_attributes, parse_attribute


def test_parse_each_attribute_kind() -> None:
	assert parse_attribute("# @desc Deploy the app") == DescAttr(text="Deploy the app")
	assert parse_attribute('# @desc "Quoted text"') == DescAttr(text="Quoted text")
	assert parse_attribute("#@os unix") == OsAttr(platform="unix")
	assert parse_attribute("# @os Windows") == OsAttr(platform="windows")
	assert parse_attribute("# @shell python3") == ShellAttr(interpreter_name="python3")
	assert parse_attribute("# @arg env Target environment") == ArgAttr(name="env", description="Target environment")


def test_positional_arg_attribute() -> None:
	assert parse_attribute("# @arg 1:env string Target environment") == ArgAttr(
		name="env",
		description="Target environment",
		position=1,
		arg_type=ParamType.STR,
	)
	assert parse_attribute("# @arg 2:count How many runs") == ArgAttr(
		name="count", description="How many runs", position=2
	)


def test_unknown_and_non_attribute_lines() -> None:
	assert parse_attribute("# @author someone") is None
	assert parse_attribute("# plain comment") is None
	assert parse_attribute("echo hi") is None


def test_scan_stops_at_blank_and_plain_comment_lines() -> None:
	lines = [
		"# @desc not mine",
		"",
		"# @os linux",
		"# a plain comment",
		"# @desc mine",
		"# @shell bash",
		"f() echo",
	]
	assert collect_attributes(lines, 7) == (DescAttr(text="mine"), ShellAttr(interpreter_name="bash"))


def test_attributes_attach_only_to_following_statement() -> None:
	source = """
# @desc Build it
# @os linux
build() make

test() make test
"""
	build, test = parse(source).functions
	assert build.attributes == (DescAttr(text="Build it"), OsAttr(platform="linux"))
	assert test.attributes == ()

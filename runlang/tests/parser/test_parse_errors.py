# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from contextlib import contextmanager

import pytest

from runlang.errors import ParseError
from runlang.parser import parse


def test_error_location_points_at_original_line() -> None:
	source = "build() make \\\n    all\n\nbroken echo hi\n"
	with pytest.raises(ParseError) as excinfo:
		parse(source, filename="Runfile")
	err = excinfo.value
	assert err.line == 4
	assert err.source_line == "broken echo hi"
	assert err.filename == "Runfile"
	assert err.hint is not None and "parameter list" in err.hint


def test_unclosed_param_list() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse("build(env echo hi\n")
	assert excinfo.value.hint == "parameter list is missing a closing `)`"


def test_unclosed_block() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse("ci() {\n    build\n")
	assert excinfo.value.hint == "function body is missing a closing `}`"


def test_bad_identifier() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse("9build() echo\n")
	assert excinfo.value.line == 1
	assert "letters, digits" in (excinfo.value.hint or "")


def test_format_human_shows_caret_and_hint() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse("ok() echo\nbuild(env echo\n", filename="Runfile")
	text = excinfo.value.format_human()
	lines = text.split("\n")
	assert lines[0].startswith("error: ")
	assert lines[1].startswith("  --> Runfile:2:")
	assert " 2 | build(env echo" in text
	assert lines[-1] == "  = hint: parameter list is missing a closing `)`"
	assert str(excinfo.value) == text


def test_parse_error_to_dict() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse("build(\n")
	data = excinfo.value.to_dict()
	assert data["reason_code"] == "parse-error"
	assert data["line"] == 1


def test_parse_error_propagates_through_generator_context_managers() -> None:
	seen = []

	@contextmanager
	def tracking():
		try:
			yield
		finally:
			seen.append("closed")

	with pytest.raises(ParseError) as excinfo:
		with tracking():
			parse("build(env echo\n")
	assert seen == ["closed"]
	assert excinfo.value.__traceback__ is not None
	assert excinfo.value.reason_code == "parse-error"

"""
Turn raw type checker output into structured diagnostics.

The input is GHC's human readable report: one message per blank-line separated block, each
starting with `<file>:<line>:<column>:`, optionally followed by a `Warning:` marker, with
continuation lines indented by four spaces. There is no formal grammar behind this, so the
rules below follow that one layout and nothing else.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from playground.types import Diagnostic, Severity

WARNING_MARKER = "Warning:"
INDENT = "    "


def _after_colon(text: str) -> str:
	i = text.find(":")
	return "" if i < 0 else text[i + 1 :]


def _line_number(block: str) -> int:
	rest = _after_colon(block)
	digits = ""
	for ch in rest:
		if not ch.isdigit():
			break
		digits += ch
	return int(digits) if digits else 0


def _dedent(line: str) -> str:
	return line[len(INDENT) :] if line.startswith(INDENT) else line


def _message(block: str) -> str:
	rest = block
	for _ in range(3):  # path, line, column
		rest = _after_colon(rest)
	first, sep, tail = rest.partition("\n")
	rest = first.lstrip(" ") + sep + tail
	lines = [_dedent(line) for line in rest.split("\n")]
	return "\n".join(line for line in lines if line)


def _split_warning(text: str) -> Tuple[bool, str]:
	"""The marker followed by a space or a line break flags a warning; both are dropped."""
	if not text.startswith(WARNING_MARKER):
		return False, text
	rest = text[len(WARNING_MARKER) :]
	if rest == "":
		return True, rest
	if rest[0] in " \n":
		return True, rest[1:]
	return False, text


def parse_message(block: str, line_skip: int = 0) -> Optional[Diagnostic]:
	is_warning, text = _split_warning(_message(block))
	severity = Severity.WARNING if is_warning else Severity.ERROR
	line = _line_number(block) - line_skip
	if line < 1 and text == "":
		return None
	return Diagnostic(severity=severity, line=line, text=text)


def parse_messages(raw: str, line_skip: int = 0) -> List[Diagnostic]:
	"""Parse every message block in `raw`, keeping the toolchain's order.

	`line_skip` is the number of lines injected ahead of the user's source; it is subtracted
	from each reported line so numbers refer to what the user wrote.
	"""
	normalized = raw.replace("\r\n", "\n")
	out: List[Diagnostic] = []
	for block in normalized.split("\n\n"):
		diag = parse_message(block, line_skip)
		if diag is not None:
			out.append(diag)
	return out

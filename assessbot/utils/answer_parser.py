from __future__ import annotations

import re

# "<question number>-<choice>", choice a..d
_ANSWER_LINE_RE = re.compile(r"^\d+-[a-d]$", re.IGNORECASE)
_IDENTITY_RE = re.compile(r"^[+-]?\d+$")

ANSWER_FORMAT_HINT = "1-a\n2-b\n3-c\n..."


def is_answer_line(line: str) -> bool:
    return bool(_ANSWER_LINE_RE.match(line))


def parse_answer_lines(text: str) -> list[str]:
    """
    Splits on line breaks, trims and lower-cases every line and keeps only the
    ones shaped like "12-b". Order is preserved, lines that don't match are dropped.
    """
    lines = (line.strip().lower() for line in (text or "").splitlines())
    return [line for line in lines if is_answer_line(line)]


def parse_answer_key(text: str) -> list[str]:
    """
    Same as parse_answer_lines, but an answer key with no valid lines is an error.
    """
    answers = parse_answer_lines(text)
    if not answers:
        raise ValueError(f"No valid answers found. Send one per line, for example:\n{ANSWER_FORMAT_HINT}")
    return answers


def parse_identity(text: str) -> int:
    raw = (text or "").strip()
    if not _IDENTITY_RE.match(raw):
        raise ValueError(f"Invalid user ID: {raw!r}")
    return int(raw)

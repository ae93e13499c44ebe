from datetime import datetime

import pytest

from assessbot.utils.answer_parser import parse_answer_key, parse_answer_lines, parse_identity
from assessbot.utils.dates import TimeProvider


def test_parse_answer_lines_keeps_only_valid_lines():
    text = " 1-A \nhello\n2-b\n3-e\n\n4-d\n5 - c"
    assert parse_answer_lines(text) == ["1-a", "2-b", "4-d"]


def test_parse_answer_lines_is_repeatable():
    text = "1-a\n2-B\n3-c"
    assert parse_answer_lines(text) == parse_answer_lines(text) == ["1-a", "2-b", "3-c"]


def test_parse_answer_key_rejects_no_valid_lines():
    with pytest.raises(ValueError):
        parse_answer_key("a\nb\n1a\n")
    with pytest.raises(ValueError):
        parse_answer_key("")


def test_parse_identity():
    assert parse_identity(" 12345 ") == 12345
    with pytest.raises(ValueError):
        parse_identity("12a")
    with pytest.raises(ValueError):
        parse_identity("")


def test_parse_deadline_utc():
    clock = TimeProvider("UTC")
    assert clock.parse_deadline("05.03.2030 14:30") == datetime(2030, 3, 5, 14, 30)
    assert clock.format(datetime(2030, 3, 5, 14, 30)) == "05.03.2030 14:30"


def test_parse_deadline_local_zone_is_stored_as_utc():
    clock = TimeProvider("Asia/Tashkent")  # UTC+5, no DST
    value = clock.parse_deadline("05.03.2030 14:30")
    assert value == datetime(2030, 3, 5, 9, 30)
    assert value.tzinfo is None
    assert clock.format(value) == "05.03.2030 14:30"


@pytest.mark.parametrize("raw", ["", "2030-03-05 14:30", "32.01.2030 10:00", "05.03.2030", "tomorrow"])
def test_parse_deadline_rejects_bad_input(raw):
    with pytest.raises(ValueError):
        TimeProvider("UTC").parse_deadline(raw)

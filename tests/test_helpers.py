"""Helpers and validators."""

from datetime import datetime, timedelta, timezone

import pytest

from app.utils.helpers import escape_like, page_count, parse_list_field, round_average, to_naive_utc
from app.utils.validators import validate_github_url, validate_linkedin_url, validate_url


def test_parse_list_field():
    assert parse_list_field("React, CSS ,,Node") == ["React", "CSS", "Node"]
    assert parse_list_field(["React", " css ", ""], lowercase=True) == ["react", "css"]
    assert parse_list_field(None) == []
    assert parse_list_field("") == []
    with pytest.raises(ValueError):
        parse_list_field(42)
    with pytest.raises(ValueError):
        parse_list_field(["ok", 1])


def test_page_count():
    assert page_count(0, 10) == 0
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2


def test_round_average():
    assert round_average(0, 0) == 0
    assert round_average(1, 3) == 0.33
    assert round_average(2, 3) == 0.67


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_to_naive_utc():
    aware = datetime(2030, 1, 1, 12, tzinfo=timezone(timedelta(hours=2)))
    assert to_naive_utc(aware) == datetime(2030, 1, 1, 10)
    assert to_naive_utc(None) is None


def test_url_validators():
    assert validate_url("https://example.com/cv.pdf")
    assert not validate_url("example.com")
    assert validate_linkedin_url("https://linkedin.com/in/jane_doe/")
    assert not validate_linkedin_url("https://linkedin.com/company/acme")
    assert validate_github_url("https://www.github.com/jane")
    assert not validate_github_url("https://github.com/jane/repo")

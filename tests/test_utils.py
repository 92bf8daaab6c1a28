from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from nolanblog import utils


def test_slugify_strips_date():
    assert utils.slugify("2020-01-20-clean-code-enums") == "clean-code-enums"
    assert utils.slugify("Clean Code - Enums") == "clean-code-enums"
    assert utils.slugify("!!!") == "untitled"


def test_coerce_datetime():
    assert utils.coerce_datetime(date(2020, 1, 20)) == datetime(2020, 1, 20)
    stamp = datetime(2020, 1, 20, 8, 30)
    assert utils.coerce_datetime(stamp) is stamp
    assert utils.coerce_datetime("2020-01-20") == datetime(2020, 1, 20)
    assert utils.coerce_datetime("last tuesday") is None
    assert utils.coerce_datetime(20200120) is None
    assert utils.coerce_datetime(None) is None


def test_coerce_datetime_converts_offsets_to_naive_utc():
    plus_one = timezone(timedelta(hours=1))
    aware = datetime(2020, 1, 21, 10, 0, tzinfo=plus_one)
    assert utils.coerce_datetime(aware) == datetime(2020, 1, 21, 9, 0)
    assert utils.coerce_datetime(aware).tzinfo is None
    assert utils.coerce_datetime("2020-01-21T10:00:00+01:00") == datetime(2020, 1, 21, 9, 0)
    # naive and converted values compare without error
    assert utils.coerce_datetime(date(2020, 1, 20)) < utils.coerce_datetime(aware)


def test_first_paragraph_skips_headings_and_code():
    text = "# Title\n\n```java\nenum A {}\n```\n\nFirst   real\nparagraph.\n\nSecond."
    assert utils.first_paragraph(text) == "First real paragraph."
    assert utils.first_paragraph("word " * 100, limit=10) == "word word "
    assert utils.first_paragraph("") == ""


def test_split_tags():
    assert utils.split_tags(None) == []
    assert utils.split_tags("enums, clean-code, enums") == ["enums", "clean-code"]
    assert utils.split_tags(["java", 11, " "]) == ["java", "11"]
    with pytest.raises(ValueError, match="list or comma separated string"):
        utils.split_tags(5)
    with pytest.raises(ValueError):
        utils.split_tags({"java": True})


def test_is_markdown_and_urls():
    assert utils.is_markdown(Path("post.MD"))
    assert not utils.is_markdown(Path("post.txt"))

    assert utils.is_absolute_url("https://twitter.com/smnolan")
    assert utils.is_absolute_url("http://example.com")
    assert not utils.is_absolute_url("twitter.com/smnolan")
    assert not utils.is_absolute_url("ftp://example.com/file")
    assert not utils.is_absolute_url("https://")
    assert not utils.is_absolute_url(" https://github.com/shanenolan")
    assert not utils.is_absolute_url("")
    assert not utils.is_absolute_url(None)

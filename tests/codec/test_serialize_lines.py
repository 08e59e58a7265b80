from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import numpy as np
import pytest

from csvcodec.codec import CsvCodec, all_lines, csv_field, header_for, serialize, write_csv
from csvcodec.codec.serialize import escape


@dataclass
class Person:
    ID: int = 0
    Name: str = ""


@dataclass
class Mixed:
    ID: int = 0
    When: datetime = datetime(2024, 1, 2, 3, 4, 5)
    Day: date = date(2024, 1, 2)
    Clock: time = time(3, 4, 5)
    Count: Optional[int] = None
    Amount: Decimal = Decimal("1.10")
    Weight: np.float32 = np.float32(0.5)
    Hidden: str = csv_field(default="nope", ignore=True)


def test_comma_text_is_quoted():
    assert serialize(Person(ID=1, Name="Doe, Jane")) == '1,"Doe, Jane"'


def test_comma_free_text_is_never_quoted():
    assert serialize(Person(ID=2, Name="Smith")) == "2,Smith"


def test_embedded_quote_without_comma_is_left_alone():
    # known limitation of the wire format, kept on purpose
    assert serialize(Person(ID=3, Name='say "hi"')) == '3,say "hi"'


def test_escape():
    assert escape("a,b") == '"a,b"'
    assert escape("ab") == "ab"
    assert escape("") == ""


def test_none_becomes_empty_and_natural_text_is_used():
    line = serialize(Mixed())
    assert line == "0,2024-01-02T03:04:05,2024-01-02,03:04:05,,1.10,0.5"
    assert "nope" not in line


def test_all_lines_starts_with_header():
    people = [Person(1, "Ann"), Person(2, "Doe, Jane")]
    assert all_lines(people) == ["ID, Name", "1,Ann", '2,"Doe, Jane"']


def test_all_lines_empty_needs_record_type():
    assert all_lines([], Person) == ["ID, Name"]
    with pytest.raises(ValueError):
        all_lines([])


def test_write_csv(tmp_path):
    out = tmp_path / "nested" / "people.csv"
    path = write_csv([Person(1, "Ann")], out)
    assert path == out.resolve()
    assert out.read_text(encoding="utf-8") == "ID, Name\n1,Ann\n"


def test_write_csv_dry_run(tmp_path):
    text = write_csv([Person(1, "Ann")], tmp_path / "x.csv", dry_run=True)
    assert text == "ID, Name\n1,Ann\n"
    assert not (tmp_path / "x.csv").exists()


def test_injected_codec_matches_module_functions():
    codec = CsvCodec()
    assert codec.header_for(Person) == header_for(Person) == "ID, Name"
    assert codec.serialize(Person(1, "x")) == serialize(Person(1, "x"))

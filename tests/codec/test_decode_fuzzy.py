from dataclasses import dataclass
from typing import Optional

import pytest

from csvcodec.codec import CoercionError, CsvCodec, csv_field, decode_fuzzy, header_for, serialize


@dataclass
class Target:
    ID: int = 0
    Name: str = ""
    Score: Optional[int] = None


@dataclass
class Required:
    code: int
    label: str


@dataclass
class WithIgnored:
    ID: int = 0
    Secret: str = csv_field(default="default", ignore=True)


def test_extra_leading_and_missing_trailing_column():
    rec = decode_fuzzy(Target, "Extra,ID,Name", 'x,5,"Doe, Jane"')
    assert rec == Target(ID=5, Name="Doe, Jane", Score=None)


def test_reordered_columns():
    assert decode_fuzzy(Target, "Score,Name,ID", "9,Ann,1") == Target(1, "Ann", 9)


def test_comma_space_header_is_accepted():
    line = serialize(Target(3, "Bo", 4))
    assert decode_fuzzy(Target, header_for(Target), line) == Target(3, "Bo", 4)


def test_short_line_leaves_trailing_fields_at_default():
    assert decode_fuzzy(Target, "ID,Name,Score", "5") == Target(ID=5)


def test_names_match_case_sensitively():
    assert decode_fuzzy(Target, "id,name,score", "5,Ann,1") == Target()


def test_first_matching_column_wins():
    assert decode_fuzzy(Target, "ID,ID", "1,2").ID == 1


def test_fields_without_defaults_get_zero_values():
    assert decode_fuzzy(Required, "label", "x") == Required(code=0, label="x")


def test_ignored_column_in_file_is_not_applied():
    rec = decode_fuzzy(WithIgnored, "ID,Secret", "1,leaked")
    assert rec.Secret == "default"


def test_nullable_empty_cell():
    assert decode_fuzzy(Target, "ID,Score", "1,").Score is None


def test_coercion_errors_still_raise():
    with pytest.raises(CoercionError) as exc:
        decode_fuzzy(Target, "Name,Score", "Ann,lots")
    assert exc.value.field == "Score"


def test_fuzzy_with_private_cache():
    codec = CsvCodec()
    assert codec.decode_fuzzy(Target, "Name", "Zed") == Target(Name="Zed")
    assert Target in codec.cache

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import numpy as np
import pytest
from pydantic import BaseModel, Field

from csvcodec.codec import (
    CoercionError,
    CsvCodec,
    FieldCountError,
    FieldKind,
    HeaderMismatchError,
    csv_field,
    csv_meta,
    decode_fuzzy,
    decode_strict,
    header_for,
    serialize,
)


@dataclass
class Person:
    ID: int = 0
    Name: str = ""


@dataclass
class MasterRecord:
    ID: int = 1
    DateTime: datetime = csv_field(
        default=datetime(2024, 5, 6, 7, 8, 9, 123456),
        display_name="Formatted",
        format_hint="%Y.%m.%d",
    )
    DateOnly: date = date(2024, 5, 6)
    TimeOnly: time = time(7, 8, 9)
    Int32: Optional[int] = None
    Name: str = csv_field(default="MasterRecord 1", display_name="Test String")
    IgnoreMe: str = csv_field(default="IgnoreMe 1", ignore=True)
    Amount: Optional[Decimal] = None
    Ratio: Optional[float] = None
    Weight: Optional[np.float32] = None


@dataclass(frozen=True)
class Frozen:
    code: str = ""
    qty: int = 0


@dataclass
class Ticket:
    title: str = ""
    number: int = field(default=0, init=False)


class Reading(BaseModel):
    sensor: str = ""
    value: Optional[float] = None
    taken: date = date(2024, 1, 1)
    note: str = Field("keep", json_schema_extra=csv_meta(ignore=True))


class Account(BaseModel):
    user_id: int = Field(0, alias="userId")
    name: str = ""


class Stock(BaseModel):
    sku: str = ""
    qty: int = Field(0, ge=0, alias="Qty")
    price: Optional[Decimal] = Field(None, gt=0)


@dataclass
class Measurement:
    amount: Decimal = Decimal(0)
    ratio: float = 0.0
    weight: np.float32 = np.float32(0)
    stamp: datetime = datetime(2024, 1, 1)
    at: time = time(0)
    fee: Optional[Decimal] = None


def test_concrete_scenario():
    line = serialize(Person(ID=1, Name="Doe, Jane"))
    assert line == '1,"Doe, Jane"'
    assert decode_strict(Person, "ID, Name", line) == Person(ID=1, Name="Doe, Jane")


def test_round_trip_all_kinds():
    original = MasterRecord(
        ID=7,
        Int32=-42,
        Name="Red, Green, Yellow, Blue",
        Amount=Decimal("12.50"),
        Ratio=0.1,
        Weight=np.float32(2.25),
    )
    line = serialize(original)
    decoded = decode_strict(MasterRecord, header_for(MasterRecord), line)
    assert decoded == original
    assert isinstance(decoded.Weight, np.float32)
    assert isinstance(decoded.Amount, Decimal)


def test_nullable_empty_cells_decode_to_none():
    rec = MasterRecord()
    decoded = decode_strict(MasterRecord, header_for(MasterRecord), serialize(rec))
    assert decoded.Int32 is None
    assert decoded.Amount is None
    assert decoded.Weight is None


def test_ignored_field_keeps_its_default():
    rec = MasterRecord(IgnoreMe="changed")
    decoded = decode_strict(MasterRecord, header_for(MasterRecord), serialize(rec))
    assert decoded.IgnoreMe == "IgnoreMe 1"


def test_header_row_as_data_returns_none():
    assert decode_strict(Person, "ID, Name", "ID, Name") is None


@pytest.mark.parametrize("bad_header", ["ID,Name", "ID, name", "ID, Name ", "Name, ID", ""])
def test_header_must_match_exactly(bad_header):
    with pytest.raises(HeaderMismatchError) as exc:
        decode_strict(Person, bad_header, "1,Ann")
    assert exc.value.expected == "ID, Name"
    assert exc.value.actual == bad_header


def test_short_line_is_an_index_error():
    with pytest.raises(FieldCountError) as exc:
        decode_strict(Person, "ID, Name", "1")
    assert isinstance(exc.value, IndexError)
    assert (exc.value.expected, exc.value.actual) == (2, 1)


@pytest.mark.parametrize("text", ["abc", "1.5", "", " 1", "1_000"])
def test_bad_integer_is_a_coercion_error(text):
    with pytest.raises(CoercionError) as exc:
        decode_strict(Person, "ID, Name", f"{text},Ann")
    assert exc.value.field == "ID"
    assert isinstance(exc.value, ValueError)


def test_bad_date_is_a_coercion_error():
    line = serialize(MasterRecord()).replace("2024-05-06,", "06/05/2024,", 1)
    with pytest.raises(CoercionError) as exc:
        decode_strict(MasterRecord, header_for(MasterRecord), line)
    assert exc.value.field == "DateOnly"


@pytest.mark.parametrize(
    "column, text, kind",
    [
        ("amount", "1.2.3", FieldKind.DECIMAL),
        ("ratio", "abc", FieldKind.FLOAT),
        ("weight", "abc", FieldKind.SINGLE),
        ("stamp", "yesterday", FieldKind.DATETIME),
        ("at", "25:00", FieldKind.TIME),
        # nullable fields report the wrapped kind
        ("fee", "x", FieldKind.DECIMAL),
    ],
)
def test_bad_cell_of_each_kind_is_a_coercion_error(column, text, kind):
    with pytest.raises(CoercionError) as exc:
        decode_fuzzy(Measurement, column, text)
    assert exc.value.field == column
    assert exc.value.kind is kind
    assert exc.value.text == text


def test_unquoting_is_conditional():
    # quotes without a comma inside are data, not wrapping
    assert decode_strict(Person, "ID, Name", '1,"Jane"').Name == '"Jane"'
    assert decode_strict(Person, "ID, Name", '1,"Doe, Jane"').Name == "Doe, Jane"


def test_extra_trailing_cells_are_ignored():
    assert decode_strict(Person, "ID, Name", "1,Ann,extra") == Person(1, "Ann")


def test_negative_integer():
    assert decode_strict(Person, "ID, Name", "-3,x").ID == -3


def test_frozen_dataclass():
    rec = decode_strict(Frozen, "code, qty", "A-1,4")
    assert rec == Frozen(code="A-1", qty=4)


def test_non_init_field_is_assigned_after_construction():
    rec = decode_strict(Ticket, "title, number", "Printer jam,7")
    assert rec.title == "Printer jam"
    assert rec.number == 7


def test_pydantic_round_trip():
    original = Reading(sensor="t1, outdoor", value=21.5, taken=date(2023, 12, 21), note="dropped")
    codec = CsvCodec()
    line = codec.serialize(original)
    assert line == '"t1, outdoor",21.5,2023-12-21'
    decoded = codec.decode_strict(Reading, codec.header_for(Reading), line)
    assert decoded.sensor == "t1, outdoor"
    assert decoded.value == 21.5
    assert decoded.taken == date(2023, 12, 21)
    assert decoded.note == "keep"


def test_decode_dispatches_on_mode():
    codec = CsvCodec()
    assert codec.decode(Person, "ID, Name", "1,Ann", mode="strict") == Person(1, "Ann")
    assert codec.decode(Person, "Name,ID", "Ann,1", mode="fuzzy") == Person(1, "Ann")
    with pytest.raises(ValueError):
        codec.decode(Person, "ID, Name", "1,Ann", mode="loose")


def test_pydantic_alias_round_trip():
    original = Account(userId=5, name="Ann")
    line = serialize(original)
    assert header_for(Account) == "user_id, name"
    assert line == "5,Ann"
    decoded = decode_strict(Account, "user_id, name", line)
    assert decoded.user_id == 5
    assert decoded.name == "Ann"


def test_pydantic_alias_fuzzy():
    assert decode_fuzzy(Account, "name,user_id", "Bo,9").user_id == 9


@pytest.mark.parametrize(
    "line, field, kind",
    [
        ("A-1,-1,", "qty", FieldKind.INTEGER),
        ("A-1,3,0", "price", FieldKind.DECIMAL),
    ],
)
def test_pydantic_validation_names_the_field(line, field, kind):
    with pytest.raises(CoercionError) as exc:
        decode_strict(Stock, header_for(Stock), line)
    assert exc.value.field == field
    assert exc.value.kind is kind

"""Types shared by the avroinfer tests."""

from dataclasses import dataclass, field
from typing import Annotated, Dict, List, NamedTuple, Optional, TypedDict

from avroinfer.pytypes import Float32, Int16, UInt32, UInt64
from avroinfer.structtag import FieldTag


@dataclass
class E:
    F: str


@dataclass
class A:
    B: str = field(metadata={'avro': 'b'})
    C: int
    E: E


@dataclass
class Reading:
    sensor: str = field(metadata={'avro': 'sensorId', 'json': 'sensor_id'})
    count: UInt32
    offset: Int16
    level: Float32
    ok: bool
    note: str = field(metadata={'json': 'comment'})


@dataclass
class Tagged:
    values: List[complex] = field(metadata={'avro': 'values,items=string|null'})
    lookup: Dict[str, complex] = field(metadata={'tag': 'avro:"lookup,values=long"'})
    payload: E = field(metadata={'avro': 'payload,type=string|null'})
    counter: Annotated[UInt64, FieldTag('avro:"ctr" json:"counter_json"')]


@dataclass
class Nullable:
    maybe: Optional[int]
    either: int | None
    nested: Optional[E]


@dataclass
class Collections:
    names: List[str]
    grid: List[List[float]]
    index: Dict[str, E]
    blob: bytes


@dataclass
class BadKey:
    counts: Dict[int, str]


@dataclass
class Node:
    value: int
    next: Optional['Node'] = None


class Point(NamedTuple):
    x: float
    y: float


class Person(TypedDict):
    name: str
    age: int

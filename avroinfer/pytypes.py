"""
Type descriptors for Python type hints.

Records are dataclasses, ``typing.NamedTuple`` classes and ``TypedDict``
classes. ``Optional[T]`` (or ``T | None``) is the optional kind, lists, sets,
deques and homogeneous tuples are sequences, dicts and mappings are maps.
Python has a single ``int`` and ``float``; the ``NewType`` markers below pin
a signed, unsigned or floating point width where the schema should say so::

    @dataclass
    class Reading:
        sensor: str = field(metadata={"avro": "sensorId"})
        count: UInt32 = 0
        samples: Annotated[List[float], FieldTag('avro:",items=double|null"')] = ...
"""

import collections
import collections.abc
import dataclasses
import types
import typing
from functools import cached_property
from typing import (Annotated, Any, Dict, NewType, Optional, Tuple, Union,
                    get_args, get_origin, get_type_hints)

from avroinfer.constants import RAW_TAG_METADATA_KEY
from avroinfer.structtag import FieldTag
from avroinfer.typedescriptor import FieldDescriptor, Kind, TypeDescriptor

Int8 = NewType('Int8', int)
Int16 = NewType('Int16', int)
Int32 = NewType('Int32', int)
Int64 = NewType('Int64', int)
UInt = NewType('UInt', int)
UInt8 = NewType('UInt8', int)
UInt16 = NewType('UInt16', int)
UInt32 = NewType('UInt32', int)
UInt64 = NewType('UInt64', int)
Float32 = NewType('Float32', float)
Float64 = NewType('Float64', float)

WIDTH_KINDS = {
    Int8: Kind.INT8,
    Int16: Kind.INT16,
    Int32: Kind.INT32,
    Int64: Kind.INT64,
    UInt: Kind.UINT,
    UInt8: Kind.UINT8,
    UInt16: Kind.UINT16,
    UInt32: Kind.UINT32,
    UInt64: Kind.UINT64,
    Float32: Kind.FLOAT32,
    Float64: Kind.FLOAT64,
}

_SEQUENCE_TYPES = (
    list, set, frozenset, collections.deque,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.MutableSet,
    collections.abc.Collection, collections.abc.Iterable,
)

_MAP_TYPES = (
    dict, collections.defaultdict, collections.OrderedDict,
    collections.abc.Mapping, collections.abc.MutableMapping,
)

_Resolution = Tuple[Kind, Any, Any]


def _strip_annotated(tp):
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def _is_namedtuple(tp) -> bool:
    return isinstance(tp, type) and issubclass(tp, tuple) and hasattr(tp, '_fields')


def _is_record(tp) -> bool:
    return (isinstance(tp, type)
            and (dataclasses.is_dataclass(tp) or _is_namedtuple(tp) or typing.is_typeddict(tp)))


def _resolve_generic(tp, origin) -> _Resolution:
    args = get_args(tp)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) == 1 and len(members) < len(args):
            return Kind.OPTIONAL, members[0], None
        return Kind.UNION, None, None
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return Kind.SEQUENCE, args[0], None
        return Kind.TUPLE, None, None
    if origin in _SEQUENCE_TYPES:
        return Kind.SEQUENCE, args[0] if args else Any, None
    if origin in _MAP_TYPES:
        if len(args) == 2:
            return Kind.MAP, args[1], args[0]
        return Kind.MAP, Any, Any
    if origin is collections.abc.Callable:
        return Kind.CALLABLE, None, None
    if isinstance(origin, type) and _is_record(origin):
        return Kind.RECORD, None, None
    return Kind.OTHER, None, None


def _resolve_class(tp: type) -> _Resolution:
    if _is_record(tp):
        return Kind.RECORD, None, None
    if tp in (bytes, bytearray):
        return Kind.SEQUENCE, UInt8, None
    # bool before int, since bool subclasses int
    if issubclass(tp, bool):
        return Kind.BOOL, None, None
    if issubclass(tp, int):
        return Kind.INT, None, None
    if issubclass(tp, float):
        return Kind.FLOAT64, None, None
    if issubclass(tp, str):
        return Kind.STRING, None, None
    if issubclass(tp, complex):
        return Kind.COMPLEX, None, None
    if tp is tuple:
        return Kind.TUPLE, None, None
    if tp in _SEQUENCE_TYPES:
        return Kind.SEQUENCE, Any, None
    if tp in _MAP_TYPES:
        return Kind.MAP, Any, Any
    if tp is object:
        return Kind.ANY, None, None
    if tp is type(None):
        return Kind.NONE, None, None
    if issubclass(tp, (types.FunctionType, types.BuiltinFunctionType, types.MethodType)):
        return Kind.CALLABLE, None, None
    return Kind.OTHER, None, None


def _resolve(tp) -> _Resolution:
    if isinstance(tp, NewType):
        if tp in WIDTH_KINDS:
            return WIDTH_KINDS[tp], None, None
        return _resolve(_strip_annotated(tp.__supertype__))
    if tp is Any:
        return Kind.ANY, None, None
    if tp is None:
        return Kind.NONE, None, None
    origin = get_origin(tp)
    if origin is not None:
        return _resolve_generic(tp, origin)
    if isinstance(tp, type):
        return _resolve_class(tp)
    return Kind.OTHER, None, None


def _field_descriptor(name: str, hint, metadata) -> FieldDescriptor:
    raw_tags = []
    if get_origin(hint) is Annotated:
        raw_tags = [extra.text for extra in get_args(hint)[1:] if isinstance(extra, FieldTag)]
    entries: Dict[str, str] = {}
    for key, value in metadata.items():
        if key == RAW_TAG_METADATA_KEY:
            raw_tags.insert(0, value)
        elif isinstance(key, str) and isinstance(value, str):
            entries[key] = value
    return FieldDescriptor(name=name, type=PythonTypeDescriptor(hint), tag=' '.join(raw_tags), metadata=entries)


class PythonTypeDescriptor(TypeDescriptor):
    """Descriptor over a Python type hint. Resolution happens on first access."""

    def __init__(self, type_form):
        self.type_form = _strip_annotated(type_form)

    @cached_property
    def _resolution(self) -> _Resolution:
        return _resolve(self.type_form)

    @property
    def kind(self) -> Kind:
        return self._resolution[0]

    @property
    def name(self) -> str:
        tp = self.type_form
        if isinstance(tp, NewType) or (isinstance(tp, type) and get_origin(tp) is None):
            return tp.__name__
        origin = get_origin(tp)
        if isinstance(origin, type) and _is_record(origin):
            return origin.__name__
        return ''

    @cached_property
    def elem(self) -> Optional[TypeDescriptor]:
        elem_form = self._resolution[1]
        return PythonTypeDescriptor(elem_form) if elem_form is not None else None

    @cached_property
    def key(self) -> Optional[TypeDescriptor]:
        key_form = self._resolution[2]
        return PythonTypeDescriptor(key_form) if key_form is not None else None

    @cached_property
    def fields(self) -> Tuple[FieldDescriptor, ...]:
        if self.kind is not Kind.RECORD:
            return ()
        tp = self.type_form
        record_type = get_origin(tp) or tp
        hints = get_type_hints(record_type, include_extras=True)
        if dataclasses.is_dataclass(record_type):
            return tuple(_field_descriptor(f.name, hints.get(f.name, f.type), f.metadata)
                         for f in dataclasses.fields(record_type))
        names = record_type._fields if _is_namedtuple(record_type) else list(hints)
        return tuple(_field_descriptor(name, hints.get(name, Any), {}) for name in names)


def is_type_form(value) -> bool:
    """True if value is a type or a typing construct rather than an instance."""
    return (isinstance(value, (type, NewType, types.UnionType))
            or get_origin(value) is not None
            or value is Any)


def describe(value) -> TypeDescriptor:
    """
    Describe a value for inference.

    Descriptors are returned unchanged, type forms are described directly,
    any other value is described by its class.
    """
    if isinstance(value, TypeDescriptor):
        return value
    if is_type_form(value):
        return PythonTypeDescriptor(value)
    return PythonTypeDescriptor(type(value))

# coding: utf-8
"""
Type descriptors for Arrow schemas and data types.

Arrow carries explicit signed and unsigned widths, so it maps onto the full
primitive table. Struct fields (and schema fields) that are nullable are
described as optionals; list elements and map values are described as-is.
Field annotations are read from the field metadata, e.g.
``pa.field("b", pa.string(), metadata={"avro": "bee"})``.
"""

from typing import Dict, Optional, Tuple, Union

import pyarrow as pa

from avroinfer.constants import RAW_TAG_METADATA_KEY
from avroinfer.typedescriptor import FieldDescriptor, Kind, TypeDescriptor

_SCALAR_KINDS = (
    (pa.types.is_string, Kind.STRING),
    (pa.types.is_large_string, Kind.STRING),
    (pa.types.is_boolean, Kind.BOOL),
    (pa.types.is_int8, Kind.INT8),
    (pa.types.is_int16, Kind.INT16),
    (pa.types.is_int32, Kind.INT32),
    (pa.types.is_int64, Kind.INT64),
    (pa.types.is_uint8, Kind.UINT8),
    (pa.types.is_uint16, Kind.UINT16),
    (pa.types.is_uint32, Kind.UINT32),
    (pa.types.is_uint64, Kind.UINT64),
    (pa.types.is_float16, Kind.FLOAT16),
    (pa.types.is_float32, Kind.FLOAT32),
    (pa.types.is_float64, Kind.FLOAT64),
    (pa.types.is_null, Kind.NONE),
)


def _decode_metadata(metadata) -> Dict[str, str]:
    if not metadata:
        return {}
    return {key.decode('utf-8'): value.decode('utf-8') for key, value in metadata.items()}


def _field_descriptor(arrow_field: pa.Field) -> FieldDescriptor:
    metadata = _decode_metadata(arrow_field.metadata)
    tag = metadata.pop(RAW_TAG_METADATA_KEY, '')
    return FieldDescriptor(
        name=arrow_field.name,
        type=ArrowTypeDescriptor(arrow_field.type, nullable=arrow_field.nullable),
        tag=tag,
        metadata=metadata)


class ArrowTypeDescriptor(TypeDescriptor):
    """
    Descriptor over a ``pa.DataType`` or a ``pa.Schema``.

    :param data_type: The Arrow type, or a schema to be treated as a struct.
    :param name: Name for the type; Arrow types are otherwise anonymous.
    :param nullable: Describe the type as an optional of itself.
    """

    def __init__(self, data_type: Union[pa.DataType, pa.Schema], name: str = '', nullable: bool = False):
        self.data_type = data_type
        self.nullable = nullable
        self._name = name

    @property
    def kind(self) -> Kind:
        dt = self.data_type
        if self.nullable:
            return Kind.OPTIONAL
        if isinstance(dt, pa.Schema) or pa.types.is_struct(dt):
            return Kind.RECORD
        if pa.types.is_list(dt) or pa.types.is_large_list(dt) or pa.types.is_fixed_size_list(dt):
            return Kind.SEQUENCE
        if pa.types.is_map(dt):
            return Kind.MAP
        for predicate, kind in _SCALAR_KINDS:
            if predicate(dt):
                return kind
        return Kind.OTHER

    @property
    def name(self) -> str:
        if self._name:
            return self._name
        if self.kind in (Kind.OPTIONAL, Kind.RECORD, Kind.SEQUENCE, Kind.MAP):
            return ''
        return str(self.data_type)

    @property
    def elem(self) -> Optional[TypeDescriptor]:
        kind = self.kind
        if kind is Kind.OPTIONAL:
            return ArrowTypeDescriptor(self.data_type, name=self._name)
        if kind is Kind.SEQUENCE:
            return ArrowTypeDescriptor(self.data_type.value_type)
        if kind is Kind.MAP:
            return ArrowTypeDescriptor(self.data_type.item_type)
        return None

    @property
    def key(self) -> Optional[TypeDescriptor]:
        if self.kind is Kind.MAP:
            return ArrowTypeDescriptor(self.data_type.key_type)
        return None

    @property
    def fields(self) -> Tuple[FieldDescriptor, ...]:
        if self.kind is not Kind.RECORD:
            return ()
        dt = self.data_type
        if isinstance(dt, pa.Schema):
            return tuple(_field_descriptor(arrow_field) for arrow_field in dt)
        return tuple(_field_descriptor(dt.field(i)) for i in range(dt.num_fields))


def describe_arrow_schema(schema: pa.Schema, name: str) -> ArrowTypeDescriptor:
    """Describe an Arrow schema as a record named `name`."""
    return ArrowTypeDescriptor(schema, name=name)


def describe_arrow_type(data_type: pa.DataType, name: str = '') -> ArrowTypeDescriptor:
    """Describe a single Arrow data type."""
    return ArrowTypeDescriptor(data_type, name=name)

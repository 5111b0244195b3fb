"""
Type descriptors: the reflection capability the schema inferencer walks.

A descriptor exposes a type's structural kind and, depending on the kind,
its element/pointee type, its map key type and its ordered fields. The
inferencer never looks at host types directly, so Python typing
(``avroinfer.pytypes``) and Arrow types (``avroinfer.arrowtypes``) share the
same inference rules.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple


class Kind(Enum):
    """Structural kinds a descriptor can report."""
    STRING = 'string'
    BOOL = 'bool'
    INT = 'int'
    INT8 = 'int8'
    INT16 = 'int16'
    INT32 = 'int32'
    INT64 = 'int64'
    UINT = 'uint'
    UINT8 = 'uint8'
    UINT16 = 'uint16'
    UINT32 = 'uint32'
    UINT64 = 'uint64'
    FLOAT16 = 'float16'
    FLOAT32 = 'float32'
    FLOAT64 = 'float64'
    OPTIONAL = 'optional'
    RECORD = 'record'
    SEQUENCE = 'sequence'
    MAP = 'map'
    # kinds with no schema counterpart
    COMPLEX = 'complex'
    ANY = 'any'
    NONE = 'none'
    UNION = 'union'
    TUPLE = 'tuple'
    CALLABLE = 'callable'
    OTHER = 'other'


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One declared field of a record.

    :param name: Declared identifier of the field.
    :param type: Descriptor of the field's own type.
    :param tag: Raw struct-tag text, e.g. ``avro:"b,type=string|null" json:"bee"``.
    :param metadata: Annotation entries keyed by annotation key, e.g. ``{"avro": "b"}``.
    """
    name: str
    type: 'TypeDescriptor'
    tag: str = ''
    metadata: Mapping[str, str] = field(default_factory=dict)


class TypeDescriptor(ABC):
    """Abstract view of a host type."""

    @property
    @abstractmethod
    def kind(self) -> Kind:
        """Structural kind of the type."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Declared name of the type, empty for anonymous types."""

    @property
    def elem(self) -> Optional['TypeDescriptor']:
        """Pointee of an optional, element of a sequence or value of a map."""
        return None

    @property
    def key(self) -> Optional['TypeDescriptor']:
        """Key type of a map."""
        return None

    @property
    def fields(self) -> Tuple[FieldDescriptor, ...]:
        """Declared fields of a record, in declaration order."""
        return ()

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.kind.value}, {self.name!r})'

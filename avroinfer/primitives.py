"""
Mapping of scalar kinds to Avro primitive type names.
"""

from avroinfer.errors import UnsupportedKind
from avroinfer.typedescriptor import Kind

PRIMITIVE_TYPES = {
    Kind.STRING: 'string',
    Kind.BOOL: 'boolean',
    Kind.INT: 'int',
    Kind.INT8: 'int',
    Kind.INT16: 'int',
    Kind.INT32: 'int',
    Kind.INT64: 'int',
    Kind.UINT: 'long',
    Kind.UINT8: 'long',
    Kind.UINT16: 'long',
    Kind.UINT32: 'long',
    Kind.UINT64: 'long',
    Kind.FLOAT16: 'double',
    Kind.FLOAT32: 'double',
    Kind.FLOAT64: 'double',
}


def infer_primitive(kind: Kind) -> str:
    """Return the Avro primitive name for a scalar kind, or raise UnsupportedKind."""
    try:
        return PRIMITIVE_TYPES[kind]
    except KeyError:
        raise UnsupportedKind(kind) from None

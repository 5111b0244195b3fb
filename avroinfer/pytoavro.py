"""

Convert a Python type (dataclass, NamedTuple, TypedDict) to an Avro schema.

"""

import sys

from avroinfer.common import load_type, write_schema_text
from avroinfer.schemainference import infer_schema


def convert_python_type_to_avro(type_reference, avro_file_path, fallback_key='', import_path=None):
    """
    Infer the Avro schema of a Python type and save it to a file.

    :param type_reference: Type to load, as ``package.module:TypeName``.
    :param avro_file_path: Path to save the Avro schema file; stdout if empty.
    :param fallback_key: Annotation key used for field names when no ``avro`` annotation is present.
    :param import_path: Directory to put in front of the import path before loading the type.
    """
    if not type_reference:
        raise ValueError("Python type reference is required.")

    if import_path and import_path not in sys.path:
        sys.path.insert(0, import_path)
    python_type = load_type(type_reference)
    write_schema_text(infer_schema(fallback_key, python_type), avro_file_path)

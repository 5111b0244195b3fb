"""
Common utility functions for avroinfer.
"""

import importlib
import re


def avro_name(name):
    """Convert a name into an Avro name."""
    if isinstance(name, int):
        name = '_'+str(name)
    val = re.sub(r'[^a-zA-Z0-9_]', '_', name)
    if re.match(r'^[0-9]', val):
        val = '_' + val
    return val


def load_type(type_reference: str):
    """
    Load a type from a ``package.module:QualifiedName`` reference.

    Args:
        type_reference (str): Module path and attribute path separated by a colon.

    Returns:
        The object the reference names.
    """
    if ':' not in type_reference:
        raise ValueError(f"Type reference '{type_reference}' must have the form 'module:Type'")
    module_name, qualname = type_reference.split(':', 1)
    if not module_name or not qualname:
        raise ValueError(f"Type reference '{type_reference}' must have the form 'module:Type'")
    obj = importlib.import_module(module_name)
    for attr in qualname.split('.'):
        obj = getattr(obj, attr)
    return obj


def write_schema_text(schema_text: str, avro_file_path: str):
    """Write schema text to a file, or to stdout when no path is given."""
    if not avro_file_path:
        print(schema_text)
        return
    with open(avro_file_path, 'w', encoding='utf-8') as avro_file:
        avro_file.write(schema_text)

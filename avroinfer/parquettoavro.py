# coding: utf-8
"""
Module to infer an Avro schema from the schema of a Parquet file.
"""

import os
import pyarrow.parquet as pq

from avroinfer.arrowtypes import describe_arrow_schema
from avroinfer.common import avro_name, write_schema_text
from avroinfer.schemainference import infer_schema


def convert_parquet_to_avro(parquet_file_path, avro_file_path, fallback_key=''):
    """
    Convert the schema of a Parquet file to an Avro schema file.

    The record is named after the Parquet file. Field metadata in the
    Parquet schema is read as field annotations.

    :param parquet_file_path: Path to the Parquet file.
    :param avro_file_path: Path to save the Avro schema file; stdout if empty.
    :param fallback_key: Annotation key used for field names when no ``avro`` annotation is present.
    """
    if not os.path.exists(parquet_file_path):
        raise FileNotFoundError(f"Parquet file not found: {parquet_file_path}")

    schema = pq.read_schema(parquet_file_path)
    schema_name = avro_name(os.path.basename(parquet_file_path).split(".")[0])
    write_schema_text(infer_schema(fallback_key, describe_arrow_schema(schema, schema_name)), avro_file_path)

import json
import os
import sys
import tempfile
import unittest

import pyarrow as pa
import pyarrow.parquet as pq

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from avroinfer.arrowtypes import describe_arrow_schema, describe_arrow_type
from avroinfer.errors import InvalidMapKey, UnsupportedKind
from avroinfer.parquettoavro import convert_parquet_to_avro
from avroinfer.schemainference import infer_schema, infer_schema_node
from avroinfer.typedescriptor import Kind


def readings_schema():
    return pa.schema([
        pa.field('b', pa.string(), nullable=False, metadata={'avro': 'bee'}),
        pa.field('count', pa.uint32(), nullable=False),
        pa.field('offset', pa.int16(), nullable=False),
        pa.field('level', pa.float32(), nullable=False),
        pa.field('ok', pa.bool_(), nullable=False),
        pa.field('note', pa.string(), nullable=False, metadata={'tag': 'json:"comment"'}),
    ])


class TestArrowTypes(unittest.TestCase):

    def test_schema_as_record(self):
        expected = ('{"name":"Readings","type":"record","fields":['
                    '{"name":"bee","type":"string"},'
                    '{"name":"count","type":"long"},'
                    '{"name":"offset","type":"int"},'
                    '{"name":"level","type":"double"},'
                    '{"name":"ok","type":"boolean"},'
                    '{"name":"note","type":"string"}]}')
        self.assertEqual(infer_schema('', describe_arrow_schema(readings_schema(), 'Readings')), expected)

    def test_fallback_key_from_raw_tag(self):
        node = infer_schema_node(describe_arrow_schema(readings_schema(), 'Readings'), 'json')
        self.assertEqual(node.fields[-1].name, 'comment')

    def test_nullable_field_is_optional(self):
        schema = pa.schema([pa.field('opt', pa.int64())])
        self.assertEqual(
            infer_schema('', describe_arrow_schema(schema, 'Row')),
            '{"name":"Row","type":"record","fields":[{"name":"opt","type":[{"name":"int64","type":"int"},"null"]}]}')

    def test_nested_types(self):
        schema = pa.schema([
            pa.field('bytes', pa.list_(pa.uint8()), nullable=False),
            pa.field('lookup', pa.map_(pa.string(), pa.int32()), nullable=False),
            pa.field('inner', pa.struct([pa.field('x', pa.bool_(), nullable=False)]), nullable=False),
        ])
        node = infer_schema_node(describe_arrow_schema(schema, 'Row'))
        self.assertEqual([f.to_dict() for f in node.fields], [
            {'name': 'bytes', 'type': 'array', 'items': {'name': 'uint8', 'type': 'long'}},
            {'name': 'lookup', 'type': 'map', 'values': {'name': 'int32', 'type': 'int'}},
            {'name': 'inner', 'type': 'record', 'fields': [{'name': 'x', 'type': 'boolean'}]},
        ])

    def test_overrides_from_metadata(self):
        schema = pa.schema([
            pa.field('ts', pa.timestamp('ms'), nullable=False, metadata={'avro': 'ts,type=long'}),
            pa.field('xs', pa.list_(pa.binary()), nullable=False, metadata={'tag': 'avro:"xs,items=bytes|null"'}),
        ])
        node = infer_schema_node(describe_arrow_schema(schema, 'Row'))
        self.assertEqual([f.to_dict() for f in node.fields], [
            {'name': 'ts', 'type': 'long'},
            {'name': 'xs', 'type': 'array', 'items': ['bytes', 'null']},
        ])

    def test_non_string_map_key(self):
        schema = pa.schema([pa.field('m', pa.map_(pa.int32(), pa.string()), nullable=False)])
        with self.assertRaises(InvalidMapKey) as ctx:
            infer_schema('', describe_arrow_schema(schema, 'Row'))
        self.assertEqual(ctx.exception.path, ('struct', 'map'))
        self.assertEqual(ctx.exception.key_kind, Kind.INT32)

    def test_unsupported_type(self):
        with self.assertRaises(UnsupportedKind) as ctx:
            infer_schema('', describe_arrow_type(pa.timestamp('ms')))
        self.assertEqual(ctx.exception.path, ('default',))

    def test_type_names(self):
        self.assertEqual(describe_arrow_type(pa.float64()).name, 'double')
        self.assertEqual(describe_arrow_type(pa.list_(pa.string())).name, '')
        self.assertEqual(describe_arrow_type(pa.struct([]), name='Empty').name, 'Empty')


class TestParquetToAvro(unittest.TestCase):

    def test_convert_parquet_schema(self):
        out_dir = os.path.join(tempfile.gettempdir(), 'avroinfer')
        os.makedirs(out_dir, exist_ok=True)
        parquet_path = os.path.join(out_dir, 'readings.parquet')
        avro_path = os.path.join(out_dir, 'readings.avsc')
        table = pa.table({
            'b': ['x'], 'count': [1], 'offset': [2], 'level': [0.5], 'ok': [True], 'note': ['n'],
        }, schema=readings_schema())
        pq.write_table(table, parquet_path)

        convert_parquet_to_avro(parquet_path, avro_path)

        with open(avro_path, 'r', encoding='utf-8') as f:
            schema = json.load(f)
        self.assertEqual(schema['name'], 'readings')
        self.assertEqual(schema['type'], 'record')
        self.assertEqual([f['name'] for f in schema['fields']], ['bee', 'count', 'offset', 'level', 'ok', 'note'])
        self.assertEqual(schema['fields'][0]['type'], 'string')

    def test_missing_parquet_file(self):
        with self.assertRaises(FileNotFoundError):
            convert_parquet_to_avro(os.path.join(tempfile.gettempdir(), 'avroinfer', 'missing.parquet'), '')


if __name__ == '__main__':
    unittest.main()

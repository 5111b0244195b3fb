import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from avroinfer.errors import TagParseError
from avroinfer.structtag import (FieldAnnotation, Tag, Tags, parse_field_tags,
                                 parse_tags)
from avroinfer.typedescriptor import FieldDescriptor
from avroinfer.pytypes import PythonTypeDescriptor


class TestParseTags(unittest.TestCase):

    def test_multiple_keys(self):
        tags = parse_tags('avro:"b,type=string|null" json:"bee,omitempty"')
        self.assertEqual(tags.keys(), ['avro', 'json'])
        self.assertEqual(tags.get('avro'), Tag('avro', 'b', ('type=string|null',)))
        self.assertEqual(tags.get('json'), Tag('json', 'bee', ('omitempty',)))
        self.assertIsNone(tags.get('xml'))

    def test_first_occurrence_wins(self):
        tags = parse_tags('avro:"first" avro:"second"')
        self.assertEqual(tags.get('avro').name, 'first')

    def test_escaped_quote_in_value(self):
        tags = parse_tags(r'doc:"say \"hi\"" avro:"x"')
        self.assertEqual(tags.get('doc').name, 'say "hi"')
        self.assertEqual(tags.get('avro').name, 'x')

    def test_empty_and_blank_text(self):
        self.assertEqual(len(parse_tags('')), 0)
        self.assertEqual(len(parse_tags('   ')), 0)

    def test_go_string_escapes(self):
        tags = parse_tags(r'a:"\x41\102" b:"\a\v" c:"\u00e9\U0001F600" d:"\xc3\xa9" e:"tab\there"')
        self.assertEqual(tags.get('a').name, 'AB')
        self.assertEqual(tags.get('b').name, '\x07\x0b')
        self.assertEqual(tags.get('c').name, '\u00e9\U0001F600')
        self.assertEqual(tags.get('d').name, '\u00e9')
        self.assertEqual(tags.get('e').name, 'tab\there')

    def test_invalid_go_escapes(self):
        for text in (r'a:"\400"', r'a:"\x4"', r'a:"\uD800"', r'a:"\U00110000"', 'a:"\\\'"', 'a:"line\nbreak"'):
            with self.subTest(text=text):
                with self.assertRaises(TagParseError):
                    parse_tags(text)

    def test_empty_value(self):
        tags = parse_tags('avro:""')
        self.assertEqual(tags.get('avro'), Tag('avro', '', ()))

    def test_malformed(self):
        for text in (':"x"', 'avro', 'avro:', 'avro:x', 'avro:"x', 'avro "x"', 'avro:"\\q"'):
            with self.subTest(text=text):
                with self.assertRaises(TagParseError) as ctx:
                    parse_tags(text)
                self.assertEqual(ctx.exception.tag, text)

    def test_from_mapping_skips_non_strings(self):
        tags = Tags.from_mapping({'avro': 'b,items=int', 'json': 'bee', 'other': 42})
        self.assertEqual(tags.keys(), ['avro', 'json'])
        self.assertEqual(tags.get('avro').options, ('items=int',))

    def test_field_tags_put_metadata_first(self):
        descriptor = FieldDescriptor(
            name='b', type=PythonTypeDescriptor(str),
            tag='avro:"from_text" yaml:"y"', metadata={'avro': 'from_metadata'})
        tags = parse_field_tags(descriptor)
        self.assertEqual(tags.keys(), ['avro', 'avro', 'yaml'])
        self.assertEqual(tags.get('avro').name, 'from_metadata')


class TestFieldAnnotation(unittest.TestCase):

    def test_options(self):
        annotation = FieldAnnotation.from_tag(Tag.from_value('avro', 'b,omitempty,type=int|null,items=string,values=long|double'))
        self.assertEqual(annotation.name, 'b')
        self.assertEqual(annotation.type_override, ('int', 'null'))
        self.assertEqual(annotation.items_override, ('string',))
        self.assertEqual(annotation.values_override, ('long', 'double'))

    def test_no_options(self):
        annotation = FieldAnnotation.from_tag(Tag.from_value('avro', 'b'))
        self.assertIsNone(annotation.type_override)
        self.assertIsNone(annotation.items_override)
        self.assertIsNone(annotation.values_override)

    def test_last_items_option_wins(self):
        annotation = FieldAnnotation.from_tag(Tag.from_value('avro', 'b,items=int,items=string|null'))
        self.assertEqual(annotation.items_override, ('string', 'null'))

    def test_type_options_accumulate(self):
        annotation = FieldAnnotation.from_tag(Tag.from_value('avro', 'b,type=int,type=string|null'))
        self.assertEqual(annotation.type_override, ('int', 'string', 'null'))


if __name__ == '__main__':
    unittest.main()

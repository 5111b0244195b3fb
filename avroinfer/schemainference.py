"""
Infer Avro record schemas from type descriptors.

The inferencer walks a type depth first. Optionals become ``[T, "null"]``
unions, records become ``record`` nodes with one child per declared field,
sequences become ``array`` nodes and string-keyed maps become ``map`` nodes.
Scalars are looked up in the primitive table.

Field annotations steer the result. Under the canonical key (``avro``) an
annotation may rename the field and carry ``type=``, ``items=`` and
``values=`` options whose values are ``|`` separated type tokens::

    avro:"tags,items=string|null"

``type=`` replaces inference for the field entirely. ``items=`` and
``values=`` replace the element inference of the field's own array or map
and are not passed any further down. Under the fallback key only the name
is consulted.
"""

import logging
from typing import Optional, Sequence, Tuple

from avroinfer.constants import (ARRAY_TYPE, AVRO_TAG_KEY, DEFAULT_CASE,
                                 DEFAULT_MAX_DEPTH, MAP_CASE, MAP_TYPE,
                                 NULL_TYPE, POINTER_CASE, RECORD_TYPE,
                                 SLICE_CASE, STRUCT_CASE)
from avroinfer.errors import (InvalidMapKey, MaxDepthExceeded,
                              SchemaInferenceError)
from avroinfer.primitives import infer_primitive
from avroinfer.pytypes import describe
from avroinfer.schemanode import (SchemaNode, SingleRef, UnionRef, refs_of,
                                  render_schema)
from avroinfer.structtag import FieldAnnotation, parse_field_tags
from avroinfer.typedescriptor import FieldDescriptor, Kind, TypeDescriptor

logger = logging.getLogger(__name__)

Tokens = Optional[Sequence[str]]


class SchemaInferencer:
    """Converts type descriptors into SchemaNode trees."""

    def __init__(self, fallback_key: str = '', canonical_key: str = AVRO_TAG_KEY,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Args:
            fallback_key: Annotation key consulted for field names when the
                canonical key is absent. Empty means the canonical key.
            canonical_key: Annotation key carrying names and overrides.
            max_depth: Deepest nesting level inferred before giving up.
        """
        self.canonical_key = canonical_key
        self.fallback_key = fallback_key or canonical_key
        self.max_depth = max_depth

    def infer(self, descriptor: TypeDescriptor, items: Tokens = None, values: Tokens = None,
              depth: int = 0) -> SchemaNode:
        """
        Infer the schema node for a descriptor.

        Args:
            descriptor: The type to describe.
            items: Tokens replacing the element inference of an array.
            values: Tokens replacing the value inference of a map.
            depth: Current nesting level.

        Raises:
            SchemaInferenceError: With the structural path of the failure.
        """
        if depth > self.max_depth:
            logger.warning("Maximum inference depth %d exceeded at type '%s'", self.max_depth, descriptor.name)
            raise MaxDepthExceeded(self.max_depth, descriptor.name)

        kind = descriptor.kind
        if kind is Kind.OPTIONAL:
            return self._infer_optional(descriptor, depth)
        if kind is Kind.RECORD:
            return self._infer_record(descriptor, depth)
        if kind is Kind.SEQUENCE:
            return self._infer_sequence(descriptor, items, depth)
        if kind is Kind.MAP:
            return self._infer_map(descriptor, values, depth)
        return self._infer_scalar(descriptor)

    def _infer_optional(self, descriptor: TypeDescriptor, depth: int) -> SchemaNode:
        try:
            inner = self.infer(descriptor.elem, depth=depth + 1)
        except SchemaInferenceError as e:
            raise e.add_context(POINTER_CASE)
        return SchemaNode(name=descriptor.elem.name, type=UnionRef((inner, NULL_TYPE)))

    def _infer_record(self, descriptor: TypeDescriptor, depth: int) -> SchemaNode:
        fields = tuple(self._infer_field(f, depth) for f in descriptor.fields)
        return SchemaNode(name=descriptor.name, type=SingleRef(RECORD_TYPE), fields=fields)

    def _resolve_annotation(self, field: FieldDescriptor) -> Tuple[str, FieldAnnotation]:
        """Resolve a field's name and overrides from its annotations."""
        try:
            tags = parse_field_tags(field)
        except SchemaInferenceError as e:
            raise e.add_context(STRUCT_CASE, field.name)

        canonical = tags.get(self.canonical_key)
        if canonical is not None:
            # the canonical name is taken as written, even when empty
            annotation = FieldAnnotation.from_tag(canonical)
            return annotation.name, annotation
        fallback = tags.get(self.fallback_key)
        if fallback is not None:
            return fallback.name, FieldAnnotation()
        return field.name, FieldAnnotation()

    def _infer_field(self, field: FieldDescriptor, depth: int) -> SchemaNode:
        name, annotation = self._resolve_annotation(field)
        if annotation.type_override is not None:
            logger.debug("Field '%s' uses type override %s", name, annotation.type_override)
            return SchemaNode(name=name, type=refs_of(annotation.type_override))
        try:
            node = self.infer(field.type, annotation.items_override, annotation.values_override, depth + 1)
        except SchemaInferenceError as e:
            raise e.add_context(STRUCT_CASE, field.name)
        return node.renamed(name)

    def _infer_sequence(self, descriptor: TypeDescriptor, items: Tokens, depth: int) -> SchemaNode:
        if items is not None:
            logger.debug("Array '%s' uses items override %s", descriptor.name, items)
            return SchemaNode(name=descriptor.name, type=SingleRef(ARRAY_TYPE), items=refs_of(items))
        try:
            element = self.infer(descriptor.elem, depth=depth + 1)
        except SchemaInferenceError as e:
            raise e.add_context(SLICE_CASE)
        return SchemaNode(name=descriptor.name, type=SingleRef(ARRAY_TYPE), items=SingleRef(element))

    def _infer_map(self, descriptor: TypeDescriptor, values: Tokens, depth: int) -> SchemaNode:
        key_kind = descriptor.key.kind
        if key_kind is not Kind.STRING:
            raise InvalidMapKey(key_kind).add_context(MAP_CASE)
        if values is not None:
            logger.debug("Map '%s' uses values override %s", descriptor.name, values)
            return SchemaNode(name=descriptor.name, type=SingleRef(MAP_TYPE), values=refs_of(values))
        try:
            value = self.infer(descriptor.elem, depth=depth + 1)
        except SchemaInferenceError as e:
            raise e.add_context(MAP_CASE)
        return SchemaNode(name=descriptor.name, type=SingleRef(MAP_TYPE), values=SingleRef(value))

    def _infer_scalar(self, descriptor: TypeDescriptor) -> SchemaNode:
        try:
            primitive = infer_primitive(descriptor.kind)
        except SchemaInferenceError as e:
            raise e.add_context(DEFAULT_CASE)
        return SchemaNode(name=descriptor.name, type=SingleRef(primitive))


def infer_schema_node(value, fallback_key: str = '') -> SchemaNode:
    """Infer the schema tree of a type, type descriptor or instance."""
    return SchemaInferencer(fallback_key).infer(describe(value))


def infer_schema(fallback_key: str, value) -> str:
    """
    Infer the Avro schema of a value's type and render it as compact JSON.

    Args:
        fallback_key (str): Annotation key used for field names when no
            ``avro`` annotation is present; empty means ``avro``.
        value: A dataclass (or other supported type), a type descriptor, or
            an instance whose class is inferred.

    Returns:
        str: The schema text, e.g. ``{"name":"A","type":"record","fields":[...]}``.

    Raises:
        SchemaInferenceError: If the type cannot be described.
    """
    return render_schema(infer_schema_node(value, fallback_key))

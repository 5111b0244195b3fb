"""
Errors raised while inferring Avro schemas.

Every error carries the structural path it unwound through. The inferencer
prepends a case label (``pointer``, ``struct``, ``slice``, ``map`` or
``default``) at each level, so the final error names the subtree at fault
without a stack trace.
"""

from typing import Optional, Tuple


class SchemaInferenceError(Exception):
    """Base class for all inference failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.path: Tuple[str, ...] = ()
        self.fields: Tuple[str, ...] = ()

    def add_context(self, case: str, field_name: Optional[str] = None) -> 'SchemaInferenceError':
        """Prepend a structural case label (and the field crossed, if any)."""
        self.path = (case,) + self.path
        if field_name is not None:
            self.fields = (field_name,) + self.fields
        return self

    def __str__(self) -> str:
        return ': '.join(self.path + (self.message,))


class UnsupportedKind(SchemaInferenceError):
    """A scalar kind outside the primitive table was reached."""

    def __init__(self, kind):
        kind_name = getattr(kind, 'value', kind)
        super().__init__(f'unsupported type: {kind_name}')
        self.kind = kind


class InvalidMapKey(SchemaInferenceError):
    """A map-like type is keyed by something other than a string."""

    def __init__(self, key_kind):
        super().__init__('map key must be string')
        self.key_kind = key_kind


class TagParseError(SchemaInferenceError):
    """A field's annotation text is malformed."""

    def __init__(self, message: str, tag: str = ''):
        super().__init__(message)
        self.tag = tag


class EncodingError(SchemaInferenceError):
    """The finished schema tree could not be serialized."""


class MaxDepthExceeded(SchemaInferenceError):
    """The type nests deeper than the inferencer allows, usually a self-referential type."""

    def __init__(self, max_depth: int, type_name: str = ''):
        super().__init__(f'maximum nesting depth {max_depth} exceeded at {type_name or "<anonymous>"}')
        self.max_depth = max_depth

"""
Schema tree produced by inference, and its canonical JSON rendering.
"""

import json
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from avroinfer.errors import EncodingError

SchemaRef = Union[str, 'SchemaNode']

_HTML_SAFE_ESCAPES = str.maketrans({
    '<': '\\u003c',
    '>': '\\u003e',
    '&': '\\u0026',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
})


@dataclass(frozen=True)
class SingleRef:
    """Exactly one type reference."""
    ref: SchemaRef


@dataclass(frozen=True)
class UnionRef:
    """Two or more alternative type references, in order."""
    refs: Tuple[SchemaRef, ...]

    def __post_init__(self):
        if len(self.refs) < 2:
            raise ValueError('a union needs at least two members')


TypeRefs = Union[SingleRef, UnionRef]


def refs_of(refs: Iterable[SchemaRef]) -> TypeRefs:
    """Wrap a non-empty list of references as SingleRef or UnionRef."""
    refs = tuple(refs)
    if not refs:
        raise ValueError('cannot build a type reference from an empty list')
    if len(refs) == 1:
        return SingleRef(refs[0])
    return UnionRef(refs)


def _render_ref(ref: SchemaRef) -> Any:
    return ref.to_dict() if isinstance(ref, SchemaNode) else ref


def _render_refs(refs: TypeRefs) -> Any:
    # single members collapse to a bare value, unions render as lists
    if isinstance(refs, SingleRef):
        return _render_ref(refs.ref)
    return [_render_ref(ref) for ref in refs.refs]


@dataclass(frozen=True)
class SchemaNode:
    """
    One node of an inferred schema.

    `type` is always set; at most one of `items` (arrays), `values` (maps)
    and `fields` (records) is populated.
    """
    name: str
    type: TypeRefs
    items: Optional[TypeRefs] = None
    values: Optional[TypeRefs] = None
    fields: Tuple['SchemaNode', ...] = ()

    def __post_init__(self):
        populated = [attr for attr in ('items', 'values', 'fields') if getattr(self, attr)]
        if len(populated) > 1:
            raise ValueError(f'schema node {self.name!r} populates {", ".join(populated)}')

    def renamed(self, name: str) -> 'SchemaNode':
        """Return a copy of this node carrying another name."""
        return replace(self, name=name)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary in canonical attribute order: name, type, items, values, fields."""
        result: Dict[str, Any] = {'name': self.name, 'type': _render_refs(self.type)}
        if self.items is not None:
            result['items'] = _render_refs(self.items)
        if self.values is not None:
            result['values'] = _render_refs(self.values)
        if self.fields:
            result['fields'] = [f.to_dict() for f in self.fields]
        return result


def render_schema(node: SchemaNode, indent: Optional[int] = None) -> str:
    """
    Serialize a schema tree to JSON text.

    Without an indent the output is compact and byte-for-byte stable for a
    given tree. `<`, `>` and `&` are written as `\\u003c`, `\\u003e` and
    `\\u0026`, so names survive embedding in HTML.
    """
    separators = (',', ':') if indent is None else (',', ': ')
    try:
        text = json.dumps(node.to_dict(), indent=indent, separators=separators, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(f'marshal schema: {e}') from e
    # these characters only occur inside string literals of the output
    return text.translate(_HTML_SAFE_ESCAPES)

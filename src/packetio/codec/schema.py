"""Type introspection for the binary encoding.

This module turns Python type annotations, including the fields of pydantic
models, into a small tree of ``TypeSchema`` nodes that the binary encoder and
decoder walk.
"""

from __future__ import annotations

import collections.abc
import enum
import types
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any, Iterable, Optional, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError


class Kind(enum.Enum):
    """Wire shape of a type."""

    NONE = "none"
    BOOL = "bool"
    UINT = "uint"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    TUPLE = "tuple"
    MAPPING = "mapping"
    OPTIONAL = "optional"
    ENUM = "enum"
    MODEL = "model"


_SEQUENCE_ORIGINS = {
    list: list,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


@dataclass(frozen=True)
class TypeSchema:
    """Encoding-relevant description of one type.

    Attributes:
        kind: Wire shape
        python_type: Container or class used to rebuild decoded values
            (``list``, ``set``, the enum class, the model class, ...)
        args: Element schemas (one for sequences and optionals, two for
            mappings, one per position for fixed tuples)
        min_value: Lower integer bound, if any
        max_value: Upper integer bound, if any
    """

    kind: Kind
    python_type: Any = None
    args: tuple[TypeSchema, ...] = ()
    min_value: Optional[int] = None
    max_value: Optional[int] = None


@dataclass(frozen=True)
class FieldSchema:
    """A named model field and its type schema."""

    name: str
    schema: TypeSchema


def _bounds(metadata: Iterable[Any]) -> tuple[Optional[int], Optional[int]]:
    """Collect integer bounds from pydantic / annotated-types constraints."""
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    for constraint in metadata:
        if isinstance(constraint, FieldInfo):
            inner_min, inner_max = _bounds(constraint.metadata)
            min_value = inner_min if inner_min is not None else min_value
            max_value = inner_max if inner_max is not None else max_value
            continue

        if getattr(constraint, "ge", None) is not None:
            min_value = int(constraint.ge)
        if getattr(constraint, "gt", None) is not None:
            min_value = int(constraint.gt) + 1
        if getattr(constraint, "le", None) is not None:
            max_value = int(constraint.le)
        if getattr(constraint, "lt", None) is not None:
            max_value = int(constraint.lt) - 1

    if min_value is not None and max_value is not None and min_value > max_value:
        raise SchemaError(f"Invalid bounds: min={min_value} > max={max_value}")

    return min_value, max_value


def resolve(annotation: Any, metadata: Iterable[Any] = ()) -> TypeSchema:
    """Build the schema for a type annotation.

    Args:
        annotation: Type to describe (``int``, ``list[str]``, a model class, ...)
        metadata: Extra constraints attached to the annotation, such as the
            ``metadata`` of a pydantic ``FieldInfo``

    Returns:
        Schema tree for the annotation

    Raises:
        SchemaError: If the type (or any type nested inside it) is unsupported
    """
    metadata = tuple(metadata)
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return resolve(args[0], metadata + tuple(args[1:]))

    if annotation is None or annotation is type(None):
        return TypeSchema(Kind.NONE, type(None))

    # Optional[T] and T | None
    if origin is Union or origin is types.UnionType:
        non_none_args = [arg for arg in args if arg is not type(None)]
        if len(non_none_args) == 1 and len(args) == 2:
            inner = resolve(non_none_args[0], metadata)
            return TypeSchema(Kind.OPTIONAL, None, (inner,))
        raise SchemaError(f"Union types other than Optional[T] are not supported: {annotation}")

    if origin in _SEQUENCE_ORIGINS:
        container = _SEQUENCE_ORIGINS[origin]
        if container is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            if not args:
                raise SchemaError(f"Tuple type needs element types: {annotation}")
            return TypeSchema(Kind.TUPLE, tuple, tuple(resolve(arg) for arg in args))

        if len(args) < 1:
            raise SchemaError(f"Sequence type needs an element type: {annotation}")
        element = resolve(args[0])
        if element.kind is Kind.NONE:
            raise SchemaError(f"Sequences of None are not supported: {annotation}")
        return TypeSchema(Kind.SEQUENCE, container, (element,))

    if origin in _MAPPING_ORIGINS:
        if len(args) != 2:
            raise SchemaError(f"Mapping type needs key and value types: {annotation}")
        return TypeSchema(Kind.MAPPING, dict, (resolve(args[0]), resolve(args[1])))

    if not isinstance(annotation, type):
        raise SchemaError(f"Unsupported type annotation: {annotation!r}")

    # Enum before int/str: IntEnum and StrEnum subclass them
    if issubclass(annotation, enum.Enum):
        if len(annotation) == 0:
            raise SchemaError(f"Enum {annotation.__name__} has no values")
        return TypeSchema(Kind.ENUM, annotation)

    # bool before int: bool is an int subclass
    if issubclass(annotation, bool):
        return TypeSchema(Kind.BOOL, bool)

    if issubclass(annotation, int):
        min_value, max_value = _bounds(metadata)
        kind = Kind.UINT if min_value is not None and min_value >= 0 else Kind.INT
        return TypeSchema(kind, int, min_value=min_value, max_value=max_value)

    if issubclass(annotation, float):
        return TypeSchema(Kind.FLOAT, float)

    if issubclass(annotation, str):
        return TypeSchema(Kind.STR, str)

    if issubclass(annotation, (bytes, bytearray)):
        return TypeSchema(Kind.BYTES, bytes)

    if issubclass(annotation, BaseModel):
        return TypeSchema(Kind.MODEL, annotation)

    if annotation in (list, set, frozenset, tuple, dict):
        raise SchemaError(
            f"Bare {annotation.__name__} has no element type; "
            f"parametrize it, e.g. list[int] or dict[str, int]"
        )

    raise SchemaError(
        f"Unsupported type {annotation.__name__}. Supported: None, bool, int, float, str, "
        f"bytes, enums, pydantic models, Optional, list/set/tuple/dict of supported types."
    )


@lru_cache(maxsize=None)
def model_fields(model_class: type[BaseModel]) -> tuple[FieldSchema, ...]:
    """Return the field schemas of a pydantic model, in declaration order.

    Resolved lazily per model so self-referencing models do not recurse
    at schema time.

    Raises:
        SchemaError: If any field type is unsupported
    """
    fields = []
    for name, field_info in model_class.model_fields.items():
        if field_info.annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")
        try:
            schema = resolve(field_info.annotation, field_info.metadata)
        except SchemaError as e:
            raise SchemaError(f"{model_class.__name__}.{name}: {e}") from e
        fields.append(FieldSchema(name, schema))
    return tuple(fields)

"""Compact binary encoding modeled on bincode's standard configuration.

Values are laid out without field names or type tags; the decoder relies on
the ``expected`` type to know what comes next:

- bool: one byte, 0 or 1
- unsigned int (``ge >= 0``): varint; other ints: zigzag varint
- float: f64 little-endian
- str / bytes: varint length + bytes (UTF-8 for str)
- list, set, tuple[T, ...]: varint count + items; tuple[A, B]: items only
- dict: varint count + key/value pairs
- Optional: tag byte (0 = None, 1 = value follows) + value
- Enum: varint index of the member in declaration order
- pydantic model: fields in declaration order
- None: nothing (zero bytes)

Nesting is limited to ``MAX_NESTING_DEPTH`` levels on both sides.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import DecodingError, EncodingError, SchemaError
from .packing import BytePacker, ByteUnpacker
from .schema import Kind, TypeSchema, model_fields, resolve

T = TypeVar("T")

# Deepest chain of nested models and containers accepted in either direction
MAX_NESTING_DEPTH = 100

# Largest count accepted for a collection whose elements encode to zero bytes
MAX_EMPTY_ELEMENTS = 1 << 16


class BinaryEncoding:
    """Schema-driven binary encoding for typed values.

    Args:
        value_type: Type used to encode values. ``None`` (default) uses each
            value's runtime type, which covers models, scalars and enums but
            not bare containers (``dict``/``list`` carry no element types).

    Examples:
        ```python
        from packetio import BinaryEncoding, Packet, UInt

        class Reading(Packet):
            sensor: int = UInt(8)
            value: float

        encoding = BinaryEncoding()
        data = encoding.encode(Reading(sensor=3, value=1.5))
        reading = encoding.decode(data, Reading)

        # Containers need an explicit type
        encoding = BinaryEncoding(value_type=dict[str, int])
        data = encoding.encode({"a": 1})
        ```
    """

    def __init__(self, value_type: Optional[Any] = None) -> None:
        self.value_type = value_type

    def encode(self, value: Any) -> bytes:
        """Encode ``value`` to bytes.

        Raises:
            EncodingError: If the type is unsupported or the value does not fit it
        """
        tp = self.value_type if self.value_type is not None else type(value)
        try:
            schema = resolve(tp)
        except SchemaError as e:
            raise EncodingError(f"Cannot encode {type(value).__name__}: {e}") from e

        packer = BytePacker()
        try:
            _encode_value(packer, schema, value, "value")
        except SchemaError as e:
            raise EncodingError(str(e)) from e

        encoded = packer.to_bytes()

        max_bytes = getattr(type(value), "packet_max_bytes", None)
        if max_bytes is not None and len(encoded) > max_bytes:
            raise EncodingError(
                f"Encoded message size ({len(encoded)} bytes) exceeds "
                f"packet_max_bytes={max_bytes}"
            )

        return encoded

    def decode(self, data: bytes, expected: type[T]) -> T:
        """Decode bytes produced by ``encode`` back into ``expected``.

        Raises:
            DecodingError: If the bytes are truncated, corrupt, have trailing
                data, or do not match ``expected``
        """
        try:
            schema = resolve(expected)
        except SchemaError as e:
            raise DecodingError(f"Cannot decode into {expected!r}: {e}") from e

        unpacker = ByteUnpacker(data)
        try:
            value = _decode_value(unpacker, schema, "value")
        except IndexError as e:
            raise DecodingError(f"Truncated data at byte {unpacker.position()}: {e}") from e
        except (ValueError, TypeError, SchemaError) as e:
            raise DecodingError(f"Invalid data at byte {unpacker.position()}: {e}") from e

        if unpacker.remaining():
            raise DecodingError(
                f"{unpacker.remaining()} trailing bytes after decoding "
                f"{getattr(expected, '__name__', expected)}"
            )

        return value

    def __repr__(self) -> str:
        return f"BinaryEncoding(value_type={self.value_type!r})"


def _type_name(value: Any) -> str:
    return type(value).__name__


def _encode_value(
    packer: BytePacker, schema: TypeSchema, value: Any, path: str, depth: int = 0
) -> None:
    """Encode a single value according to its schema.

    Raises:
        EncodingError: If value does not match the schema or nests too deeply
    """
    if depth > MAX_NESTING_DEPTH:
        raise EncodingError(f"{path}: nesting deeper than {MAX_NESTING_DEPTH} levels")

    kind = schema.kind

    if kind is Kind.NONE:
        if value is not None:
            raise EncodingError(f"{path}: expected None, got {_type_name(value)}")
        return

    if kind is Kind.OPTIONAL:
        if value is None:
            packer.write_u8(0)
        else:
            packer.write_u8(1)
            _encode_value(packer, schema.args[0], value, path, depth)
        return

    if kind is Kind.BOOL:
        if not isinstance(value, bool):
            raise EncodingError(f"{path}: expected bool, got {_type_name(value)}")
        packer.write_u8(1 if value else 0)
        return

    if kind is Kind.UINT or kind is Kind.INT:
        if not isinstance(value, int) or isinstance(value, bool):
            raise EncodingError(f"{path}: expected int, got {_type_name(value)}")
        if schema.min_value is not None and value < schema.min_value:
            raise EncodingError(f"{path}: value {value} below minimum {schema.min_value}")
        if schema.max_value is not None and value > schema.max_value:
            raise EncodingError(f"{path}: value {value} above maximum {schema.max_value}")
        try:
            if kind is Kind.UINT:
                packer.write_varint(value)
            else:
                packer.write_signed(value)
        except ValueError as e:
            raise EncodingError(f"{path}: {e}") from e
        return

    if kind is Kind.FLOAT:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise EncodingError(f"{path}: expected float, got {_type_name(value)}")
        try:
            packer.write_f64(float(value))
        except OverflowError as e:
            raise EncodingError(f"{path}: {e}") from e
        return

    if kind is Kind.STR:
        if not isinstance(value, str):
            raise EncodingError(f"{path}: expected str, got {_type_name(value)}")
        try:
            packer.write_sized(value.encode("utf-8"))
        except UnicodeEncodeError as e:
            raise EncodingError(f"{path}: string is not valid UTF-8: {e}") from e
        return

    if kind is Kind.BYTES:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodingError(f"{path}: expected bytes, got {_type_name(value)}")
        packer.write_sized(bytes(value))
        return

    if kind is Kind.ENUM:
        if not isinstance(value, schema.python_type):
            raise EncodingError(
                f"{path}: expected {schema.python_type.__name__}, got {_type_name(value)}"
            )
        members = list(schema.python_type)
        if value not in members:
            raise EncodingError(
                f"{path}: {value!r} is not a single {schema.python_type.__name__} member"
            )
        packer.write_varint(members.index(value))
        return

    if kind is Kind.SEQUENCE:
        if isinstance(value, (str, bytes, bytearray)) or not _is_iterable(value):
            raise EncodingError(f"{path}: expected a sequence, got {_type_name(value)}")
        items = list(value)
        _check_empty_elements(len(items), schema.args, path, EncodingError)
        packer.write_varint(len(items))
        for index, item in enumerate(items):
            _encode_value(packer, schema.args[0], item, f"{path}[{index}]", depth + 1)
        return

    if kind is Kind.TUPLE:
        if not isinstance(value, (tuple, list)) or len(value) != len(schema.args):
            raise EncodingError(
                f"{path}: expected a {len(schema.args)}-tuple, got {_type_name(value)}"
            )
        for index, (item_schema, item) in enumerate(zip(schema.args, value)):
            _encode_value(packer, item_schema, item, f"{path}[{index}]", depth + 1)
        return

    if kind is Kind.MAPPING:
        if not isinstance(value, dict):
            raise EncodingError(f"{path}: expected a dict, got {_type_name(value)}")
        key_schema, value_schema = schema.args
        _check_empty_elements(len(value), schema.args, path, EncodingError)
        packer.write_varint(len(value))
        for key, item in value.items():
            _encode_value(packer, key_schema, key, f"{path} key", depth + 1)
            _encode_value(packer, value_schema, item, f"{path}[{key!r}]", depth + 1)
        return

    if kind is Kind.MODEL:
        if not isinstance(value, schema.python_type):
            raise EncodingError(
                f"{path}: expected {schema.python_type.__name__}, got {_type_name(value)}"
            )
        for field in model_fields(schema.python_type):
            _encode_value(
                packer, field.schema, getattr(value, field.name), field.name, depth + 1
            )
        return

    raise EncodingError(f"{path}: unsupported schema kind {kind}")


def _decode_value(
    unpacker: ByteUnpacker, schema: TypeSchema, path: str, depth: int = 0
) -> Any:
    """Decode a single value according to its schema.

    Raises:
        DecodingError: If data is invalid or nests too deeply
        IndexError: If data is truncated
    """
    if depth > MAX_NESTING_DEPTH:
        raise DecodingError(f"{path}: nesting deeper than {MAX_NESTING_DEPTH} levels")

    kind = schema.kind

    if kind is Kind.NONE:
        return None

    if kind is Kind.OPTIONAL:
        tag = unpacker.read_u8()
        if tag == 0:
            return None
        if tag != 1:
            raise DecodingError(f"{path}: invalid Optional tag {tag}")
        return _decode_value(unpacker, schema.args[0], path, depth)

    if kind is Kind.BOOL:
        raw = unpacker.read_u8()
        if raw > 1:
            raise DecodingError(f"{path}: invalid bool byte {raw}")
        return raw == 1

    if kind is Kind.UINT or kind is Kind.INT:
        value = unpacker.read_varint() if kind is Kind.UINT else unpacker.read_signed()
        if schema.min_value is not None and value < schema.min_value:
            raise DecodingError(f"{path}: decoded value {value} below minimum {schema.min_value}")
        if schema.max_value is not None and value > schema.max_value:
            raise DecodingError(f"{path}: decoded value {value} above maximum {schema.max_value}")
        return value

    if kind is Kind.FLOAT:
        return unpacker.read_f64()

    if kind is Kind.STR:
        raw_bytes = unpacker.read_sized()
        try:
            return raw_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"{path}: invalid UTF-8 encoding: {e}") from e

    if kind is Kind.BYTES:
        return unpacker.read_sized()

    if kind is Kind.ENUM:
        members = list(schema.python_type)
        index = unpacker.read_varint()
        if index >= len(members):
            raise DecodingError(
                f"{path}: invalid {schema.python_type.__name__} index {index} "
                f"(only {len(members)} values)"
            )
        return members[index]

    if kind is Kind.SEQUENCE:
        count = _read_count(unpacker, schema.args, path)
        items = [
            _decode_value(unpacker, schema.args[0], f"{path}[{i}]", depth + 1)
            for i in range(count)
        ]
        return schema.python_type(items)

    if kind is Kind.TUPLE:
        return tuple(
            _decode_value(unpacker, item_schema, f"{path}[{index}]", depth + 1)
            for index, item_schema in enumerate(schema.args)
        )

    if kind is Kind.MAPPING:
        key_schema, value_schema = schema.args
        count = _read_count(unpacker, schema.args, path)
        result = {}
        for _ in range(count):
            key = _decode_value(unpacker, key_schema, f"{path} key", depth + 1)
            result[key] = _decode_value(unpacker, value_schema, f"{path}[{key!r}]", depth + 1)
        return result

    if kind is Kind.MODEL:
        model_class: type[BaseModel] = schema.python_type
        field_values = {
            field.name: _decode_value(unpacker, field.schema, field.name, depth + 1)
            for field in model_fields(model_class)
        }
        try:
            return model_class(**field_values)
        except ValidationError as e:
            raise DecodingError(f"Failed to construct {model_class.__name__}: {e}") from e

    raise DecodingError(f"{path}: unsupported schema kind {kind}")


def _read_count(
    unpacker: ByteUnpacker, element_schemas: tuple[TypeSchema, ...], path: str
) -> int:
    """Read an element count, rejecting counts the remaining data cannot hold."""
    count = unpacker.read_varint()
    width = sum(_min_width(schema) for schema in element_schemas)
    if width and count * width > unpacker.remaining():
        raise DecodingError(
            f"{path}: element count {count} exceeds remaining {unpacker.remaining()} bytes"
        )
    _check_empty_elements(count, element_schemas, path, DecodingError)
    return count


def _check_empty_elements(
    count: int,
    element_schemas: tuple[TypeSchema, ...],
    path: str,
    error: type[Exception],
) -> None:
    """Bound collections whose elements occupy no bytes on the wire."""
    if count > MAX_EMPTY_ELEMENTS and not sum(_min_width(s) for s in element_schemas):
        raise error(
            f"{path}: {count} zero-size elements exceeds limit of {MAX_EMPTY_ELEMENTS}"
        )


def _min_width(schema: TypeSchema, seen: frozenset[type] = frozenset()) -> int:
    """Return the fewest bytes any value of ``schema`` encodes to."""
    kind = schema.kind

    if kind is Kind.NONE:
        return 0
    if kind is Kind.FLOAT:
        return 8
    if kind is Kind.TUPLE:
        return sum(_min_width(item, seen) for item in schema.args)
    if kind is Kind.MODEL:
        # A model reached again through its own fields adds nothing new
        if schema.python_type in seen:
            return 0
        seen = seen | {schema.python_type}
        return sum(_min_width(field.schema, seen) for field in model_fields(schema.python_type))
    return 1


def _is_iterable(value: Any) -> bool:
    try:
        iter(value)
    except TypeError:
        return False
    return True


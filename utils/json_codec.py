# utils/json_codec.py - generic JSON encode/decode on top of pydantic TypeAdapter
import dataclasses
import json
import types
from datetime import date, datetime
from typing import Annotated, Any, Optional, Union, get_args, get_origin, get_type_hints

from pydantic import AliasChoices, BaseModel, TypeAdapter
from pydantic.fields import FieldInfo

_SEQUENCE_ORIGINS = (list, set, frozenset)


def encode_json(body: Any) -> bytes:
    """
    Encode a request body as JSON bytes.

    bytes pass through untouched, str is utf-8 encoded, anything else
    (dict, list, dataclass, pydantic model) is dumped by alias. None-valued
    model and dataclass fields are left out; None values inside plain
    dicts are sent as null.
    """
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return TypeAdapter(type(body)).dump_json(body, by_alias=True, exclude_none=True)


def to_plain(obj: Any) -> Any:
    """Encodable object -> plain python (dict/list/str...) using aliases."""
    return TypeAdapter(type(obj)).dump_python(obj, mode="json", by_alias=True, exclude_none=True)


class JsonDecoder:
    """
    Decodes JSON payloads into `result_type`.

    Dates are ISO 8601 unless a strptime `date_format` is given, in which
    case every string sitting at a date/datetime position of the target
    type is parsed with it first.
    """

    def __init__(self, date_format: Optional[str] = None):
        self.date_format = date_format

    def decode(self, result_type: Any, data: bytes) -> Any:
        adapter = TypeAdapter(result_type)
        if self.date_format is None:
            return adapter.validate_json(data)
        payload = json.loads(data)
        return adapter.validate_python(coerce_dates(payload, result_type, self.date_format))


def coerce_dates(value: Any, annotation: Any, date_format: str) -> Any:
    if value is None or annotation is Any:
        return value

    if annotation is datetime:
        return datetime.strptime(value, date_format) if isinstance(value, str) else value
    if annotation is date:
        return datetime.strptime(value, date_format).date() if isinstance(value, str) else value

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return coerce_dates(value, args[0], date_format)

    if origin is Union or origin is types.UnionType:
        candidates = [a for a in args if a is not type(None)]
        if len(candidates) == 1:
            return coerce_dates(value, candidates[0], date_format)
        # ambiguous unions are left for pydantic to sort out
        return value

    if origin in _SEQUENCE_ORIGINS and isinstance(value, list):
        item_type = args[0] if args else Any
        return [coerce_dates(v, item_type, date_format) for v in value]

    if origin is tuple and isinstance(value, list):
        if len(args) == 2 and args[1] is Ellipsis:
            return [coerce_dates(v, args[0], date_format) for v in value]
        if len(args) == len(value):
            return [coerce_dates(v, a, date_format) for v, a in zip(value, args)]
        return value

    if origin is dict and isinstance(value, dict):
        value_type = args[1] if len(args) == 2 else Any
        return {k: coerce_dates(v, value_type, date_format) for k, v in value.items()}

    if isinstance(value, dict) and isinstance(annotation, type):
        if issubclass(annotation, BaseModel):
            fields = {}
            for name, f in annotation.model_fields.items():
                for key in _accepted_keys(name, f):
                    fields[key] = f.annotation
            return _coerce_fields(value, fields, date_format)
        if dataclasses.is_dataclass(annotation):
            return _coerce_fields(value, get_type_hints(annotation, include_extras=True), date_format)

    return value


def _accepted_keys(name: str, field: FieldInfo) -> list:
    """Every plain input key pydantic may read `field` from."""
    keys = [name]
    if field.alias:
        keys.append(field.alias)
    validation_alias = field.validation_alias
    if isinstance(validation_alias, str):
        keys.append(validation_alias)
    elif isinstance(validation_alias, AliasChoices):
        keys.extend(c for c in validation_alias.choices if isinstance(c, str))
    return keys


def _coerce_fields(value: dict, fields: dict, date_format: str) -> dict:
    out = dict(value)
    for key, field_type in fields.items():
        if key in out:
            out[key] = coerce_dates(out[key], field_type, date_format)
    return out

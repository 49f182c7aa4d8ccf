"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional, Union

from strong_typing.core import Schema

from .specification import SchemaRef


@dataclass(frozen=True)
class ExampleValue:
    """
    A concrete sample of a parameter bag or payload.

    The schema is derived from the type of the value, and the value itself is recorded as an example.

    :param value: An instance of a class, or a JSON-compatible structure (dict, list, str, int, etc.).
    """

    value: Any


@dataclass(frozen=True)
class TypeValue:
    """
    A type whose properties describe a parameter bag or payload.

    :param type: A class (typically a data class) to introspect.
    """

    type: type


@dataclass(frozen=True)
class SchemaValue:
    """
    A JSON schema supplied verbatim.

    :param schema: A JSON schema object or a reference to a schema in the registry.
    """

    schema: Union[Schema, SchemaRef]


@dataclass(frozen=True)
class AllOf:
    "A combination of several values, e.g. headers collected from more than one header bag."

    values: tuple["OpenAPIValue", ...]


OpenAPIValue = Union[ExampleValue, TypeValue, SchemaValue, AllOf]


def is_value(obj: object) -> bool:
    return isinstance(obj, (ExampleValue, TypeValue, SchemaValue, AllOf))


def to_value(obj: Any) -> OpenAPIValue:
    """
    Adapts a loosely-typed object to a documentation value.

    Types become `TypeValue`, schema references become `SchemaValue`, and anything else is treated as an example.
    Pass raw JSON schema objects wrapped in `SchemaValue` since a plain dictionary is an example.
    """

    if is_value(obj):
        return obj
    if isinstance(obj, type):
        return TypeValue(obj)
    if isinstance(obj, SchemaRef):
        return SchemaValue(obj)
    return ExampleValue(obj)


def params(objs: Iterable[Any]) -> Optional[OpenAPIValue]:
    "Adapts a sequence of loosely-typed objects to a single value, or `None` if the sequence is empty."

    return all_of(*(to_value(obj) for obj in objs if obj is not None))


def all_of(*values: Optional[OpenAPIValue]) -> Optional[OpenAPIValue]:
    "Combines values into one, skipping missing values."

    items = tuple(value for value in values if value is not None)
    if not items:
        return None
    if len(items) == 1:
        return items[0]
    return AllOf(items)

"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

import dataclasses
import keyword
import re
import typing
from typing import Any, Iterable, Optional, Union

from strong_typing.core import JsonType, Schema
from strong_typing.docstring import parse_type
from strong_typing.inspection import get_class_properties, is_type_optional, unwrap_optional_type
from strong_typing.name import python_type_to_name
from strong_typing.schema import JsonSchemaGenerator, SchemaOptions, get_schema_identifier
from strong_typing.serialization import object_to_json

from .headers import HeadersType, is_headers_type
from .specification import Example, ExampleRef, Header, MediaType, Parameter, ParameterLocation, SchemaRef
from .values import AllOf, ExampleValue, OpenAPIValue, SchemaValue, TypeValue

SchemaOrRef = Union[Schema, SchemaRef]

DEFAULT_MEDIA_TYPE = "application/json"

_INLINE_TYPES = (str, int, float, bool)
_PLACEHOLDER = re.compile(r"^\{(?P<name>[^{}]+)\}$")


def make_schema_generator() -> JsonSchemaGenerator:
    return JsonSchemaGenerator(
        SchemaOptions(
            definitions_path="#/components/schemas/",
        )
    )


class SchemaBuilder:
    """
    Converts types to JSON schemas, and registers named types in a schema registry.

    The registry is shared by reference, and an identifier never changes once a type is registered.
    """

    schema_generator: JsonSchemaGenerator
    schemas: dict[str, Schema]

    def __init__(self, schemas: dict[str, Schema], schema_generator: Optional[JsonSchemaGenerator] = None) -> None:
        self.schema_generator = schema_generator or make_schema_generator()
        self.schemas = schemas

    def classdef_to_schema(self, typ: type) -> Schema:
        """
        Converts a type to a JSON schema.
        For nested types found in the type hierarchy, adds the type to the schema registry.
        """

        type_schema, type_definitions = self.schema_generator.classdef_to_schema(typ)

        for ref, schema in type_definitions.items():
            self._add_ref(ref, schema)

        return type_schema

    def classdef_to_ref(self, typ: type) -> SchemaOrRef:
        """
        Converts a type to a JSON schema, and if possible, returns a schema reference.
        For composite types (such as classes and enumerations), adds the type to the schema registry.
        """

        type_schema = self.classdef_to_schema(typ)
        if typ in _INLINE_TYPES:
            # represent simple types as themselves
            return type_schema

        type_name = get_schema_identifier(typ)
        if type_name is not None:
            return self._build_ref(type_name, type_schema)

        # dates, identifiers and generic containers stay inline
        if "properties" not in type_schema and "enum" not in type_schema:
            return type_schema

        try:
            type_name = python_type_to_name(typ)
            return self._build_ref(type_name, type_schema)
        except TypeError:
            pass

        return type_schema

    def resolve(self, schema: SchemaOrRef) -> Schema:
        "Looks up the schema a reference points to."

        if isinstance(schema, SchemaRef):
            resolved = self.schemas.get(schema.id)
            if resolved is None:
                raise ValueError(f"schema reference not found in registry: {schema.id}")
            return resolved
        return schema

    def _build_ref(self, type_name: str, type_schema: Schema) -> SchemaRef:
        self._add_ref(type_name, type_schema)
        return SchemaRef(type_name)

    def _add_ref(self, type_name: str, type_schema: Schema) -> None:
        if type_name not in self.schemas:
            self.schemas[type_name] = type_schema


class ExampleBuilder:
    "Registers examples of named types in an example registry shared by reference."

    examples: dict[str, Example]

    def __init__(self, examples: dict[str, Example]) -> None:
        self.examples = examples

    def build_ref(self, name: str, value: JsonType) -> ExampleRef:
        return ExampleRef(self.register(name, Example(value=value)))

    def register(self, name: str, example: Example) -> str:
        """
        Adds an example to the registry, and returns the key it is registered under.

        A key identifies exactly one example. An example equal to one already registered under the key reuses the key;
        a different example gets the first free key of the form `Name_2`, `Name_3`, etc.
        """

        key = name
        counter = 1
        while key in self.examples and self.examples[key] != example:
            counter += 1
            key = f"{name}_{counter}"
        self.examples.setdefault(key, example)
        return key


def infer_schema(value: JsonType) -> Schema:
    "Derives a JSON schema from the structure of a JSON value."

    if value is None:
        return {"type": "null"}
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        return {"type": "integer"}
    if isinstance(value, float):
        return {"type": "number"}
    if isinstance(value, str):
        return {"type": "string"}
    if isinstance(value, list):
        if value:
            return {"type": "array", "items": infer_schema(value[0])}
        return {"type": "array", "items": {}}
    if isinstance(value, dict):
        return {
            "type": "object",
            "properties": {key: infer_schema(item) for key, item in value.items()},
            "required": [key for key, item in value.items() if item is not None],
        }
    raise TypeError(f"not a JSON value: {type(value)}")


def _json_name(name: str) -> str:
    # trailing underscore escapes a Python keyword, e.g. `from_` maps to `from`
    if name.endswith("_") and keyword.iskeyword(name[:-1]):
        return name[:-1]
    return name


def _class_properties(typ: type) -> Iterable[tuple[str, Any]]:
    for name, property_type in get_class_properties(typ):
        if name.startswith("_") or typing.get_origin(property_type) is typing.ClassVar:
            continue
        yield name, property_type


def _is_anonymous(value: Any) -> bool:
    return value is None or isinstance(value, (dict, list, tuple, str, int, float, bool))


class ContentBuilder:
    """
    Builds parameters, media types, request and response content, and response headers from documentation values.
    """

    schema_builder: SchemaBuilder
    example_builder: ExampleBuilder

    def __init__(self, schema_builder: SchemaBuilder, example_builder: ExampleBuilder) -> None:
        self.schema_builder = schema_builder
        self.example_builder = example_builder

    def parameters(self, value: OpenAPIValue, location: ParameterLocation) -> list[Parameter]:
        """
        Converts a value to a list of parameters in the given location, one parameter per property.

        :param value: A type, an example or a schema of an object whose properties are parameters.
        :param location: Where the parameters are passed in the HTTP request.
        """

        if isinstance(value, AllOf):
            parameters: list[Parameter] = []
            for item in value.values:
                parameters.extend(self.parameters(item, location))
            return parameters
        if isinstance(value, TypeValue):
            return self._type_parameters(value.type, location)
        if isinstance(value, ExampleValue):
            return self._example_parameters(value.value, location)
        if isinstance(value, SchemaValue):
            return self._schema_parameters(value.schema, location)
        raise TypeError(f"unsupported documentation value: {value!r}")

    def _type_parameters(
        self, typ: type, location: ParameterLocation, sample: Optional[dict[str, JsonType]] = None
    ) -> list[Parameter]:
        doc_string = parse_type(typ)
        doc_params = {param.name: param.description for param in doc_string.params.values()}

        parameters: list[Parameter] = []
        for property_name, property_type in _class_properties(typ):
            if is_type_optional(property_type):
                inner_type = unwrap_optional_type(property_type)
                required = False
            else:
                inner_type = property_type
                required = True

            json_name = _json_name(property_name)
            parameters.append(
                Parameter(
                    name=self._parameter_name(typ, json_name, location),
                    in_=location,
                    description=doc_params.get(property_name),
                    required=required,
                    schema=self.schema_builder.classdef_to_ref(inner_type),
                    example=sample.get(json_name) if sample is not None else None,
                )
            )
        return parameters

    def _example_parameters(self, sample: Any, location: ParameterLocation) -> list[Parameter]:
        json_sample = object_to_json(sample)
        if not isinstance(json_sample, dict):
            raise TypeError(f"example is not an object with properties: {sample!r}")

        if not _is_anonymous(sample):
            return self._type_parameters(type(sample), location, json_sample)

        return [
            Parameter(
                name=name,
                in_=location,
                required=item is not None,
                schema=infer_schema(item),
                example=item,
            )
            for name, item in json_sample.items()
        ]

    def _schema_parameters(self, schema: SchemaOrRef, location: ParameterLocation) -> list[Parameter]:
        object_schema = self.schema_builder.resolve(schema)
        properties = object_schema.get("properties")
        if not isinstance(properties, dict):
            raise TypeError("schema does not describe an object with properties")
        required = object_schema.get("required") or []

        parameters: list[Parameter] = []
        for name, property_schema in properties.items():
            description = property_schema.get("description") if isinstance(property_schema, dict) else None
            parameters.append(
                Parameter(
                    name=name,
                    in_=location,
                    description=description,
                    required=name in required,
                    schema=property_schema,
                )
            )
        return parameters

    @staticmethod
    def _parameter_name(typ: type, name: str, location: ParameterLocation) -> str:
        if location is ParameterLocation.Header and is_headers_type(typ):
            headers_type: type[HeadersType] = typ
            return headers_type.header_name(name)
        return name

    def headers(self, value: OpenAPIValue) -> dict[str, Header]:
        "Converts a value to a map of response headers."

        return {
            parameter.name: Header(
                description=parameter.description,
                required=parameter.required,
                schema=parameter.schema,
                example=parameter.example,
            )
            for parameter in self.parameters(value, ParameterLocation.Header)
        }

    def media_type(self, value: OpenAPIValue) -> MediaType:
        "Creates the media type object (schema and examples) of a request or response payload."

        if isinstance(value, TypeValue):
            return MediaType(schema=self.schema_builder.classdef_to_ref(value.type))
        if isinstance(value, SchemaValue):
            return MediaType(schema=value.schema)
        if isinstance(value, ExampleValue):
            return self._example_media_type(value.value)
        if isinstance(value, AllOf):
            schemas = [self.media_type(item).schema for item in value.values]
            return MediaType(schema={"allOf": [schema.to_json() if isinstance(schema, SchemaRef) else schema for schema in schemas]})
        raise TypeError(f"unsupported documentation value: {value!r}")

    def _example_media_type(self, sample: Any) -> MediaType:
        json_sample = object_to_json(sample)
        if _is_anonymous(sample):
            return MediaType(schema=infer_schema(json_sample), example=json_sample)

        schema = self.schema_builder.classdef_to_ref(type(sample))
        if isinstance(schema, SchemaRef):
            ref = self.example_builder.build_ref(schema.id, json_sample)
            return MediaType(schema=schema, examples={ref.id: ref})
        return MediaType(schema=schema, example=json_sample)

    def content(self, value: OpenAPIValue, media_types: Iterable[str]) -> dict[str, MediaType]:
        "Creates the content map of a request or response, with each media type carrying the same schema and examples."

        media_type = self.media_type(value)
        return {
            name: dataclasses.replace(
                media_type, examples=dict(media_type.examples) if media_type.examples is not None else None
            )
            for name in (list(media_types) or [DEFAULT_MEDIA_TYPE])
        }


def cookies_of(value: Optional[OpenAPIValue]) -> Optional[OpenAPIValue]:
    "Returns the cookies declared alongside a bag of headers, if any."

    if isinstance(value, TypeValue) and is_headers_type(value.type):
        headers_type: type[HeadersType] = value.type
    elif isinstance(value, ExampleValue) and isinstance(value.value, HeadersType):
        headers_type = type(value.value)
    else:
        return None

    if headers_type.Cookies is None:
        return None
    return TypeValue(headers_type.Cookies)


def placeholder_name(segment: str) -> Optional[str]:
    "Returns the parameter name if a path segment is a placeholder such as `{id}`."

    match = _PLACEHOLDER.match(segment)
    if match is None:
        return None
    return match.group("name")


def path_parameters(segments: Iterable[str]) -> list[Parameter]:
    "Derives a required string parameter for each placeholder in a path."

    parameters: list[Parameter] = []
    for segment in segments:
        name = placeholder_name(segment)
        if name is not None:
            parameters.append(Parameter(name=name, in_=ParameterLocation.Path, required=True, schema={"type": "string"}))
    return parameters

"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

import copy
import dataclasses
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from http import HTTPStatus
from typing import Callable, Optional, TypeVar, Union

from strong_typing.core import Schema

from .builder import DEFAULT_MEDIA_TYPE, ContentBuilder, ExampleBuilder, SchemaBuilder, cookies_of, path_parameters
from .specification import (
    Callback,
    Example,
    ExampleRef,
    ExternalDocumentation,
    Header,
    MediaType,
    Operation,
    Parameter,
    ParameterLocation,
    ParameterRef,
    RequestBody,
    Response,
    ResponseRef,
    Server,
    Tag,
)
from .values import OpenAPIValue

logger = logging.getLogger(__name__)

T = TypeVar("T")

HTTPStatusCode = Union[HTTPStatus, int, str]

DEFAULT_RESPONSE_DESCRIPTION = ""

_STATUS_RANGE = re.compile(r"^[1-5]XX$")


def status_key(code: HTTPStatusCode) -> str:
    "Normalizes a status code to a key in the responses object: a three-digit code, a range such as `4XX`, or `default`."

    if isinstance(code, int):
        if not 100 <= int(code) <= 599:
            raise ValueError(f"HTTP status code out of range: {int(code)}")
        return str(int(code))
    if code == "default":
        return code
    if code.isdigit() and len(code) == 3:
        return status_key(int(code))
    if _STATUS_RANGE.match(code.upper()):
        return code.upper()
    raise ValueError(f"not a status code or `default`: {code!r}")


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def segment_name(segment: str) -> str:
    "The name of a path segment, with placeholder braces and wildcards removed."

    return segment.strip("{}*")


def operation_id(method: str, segments: Iterable[str]) -> str:
    """
    Derives an operation identifier from the HTTP method and the path, e.g. `GET /users/{id}` becomes `getUsersId`.

    Operations on distinct paths that differ only in their placeholders yield the same identifier.
    """

    return method.lower() + "".join(upper_first(segment_name(segment)) for segment in segments)


def operation_ref(method: str, path: str) -> str:
    "A JSON pointer to the operation in the generated document, e.g. `#paths/~1users~1{id}/post`."

    escaped = path.replace("~", "~0").replace("/", "~1")
    return f"#paths/{escaped}/{method.lower()}"


def merge_tags(existing: Sequence[Tag], tags: Iterable[Union[Tag, str]], segments: Sequence[str]) -> list[Tag]:
    """
    Appends new tags to existing tags, dropping tags whose name is already taken.

    If there are no tags at all, the route is tagged with its first path segment.
    """

    merged: list[Tag] = []
    names: set[str] = set()
    for tag in [*existing, *(Tag(name=tag) if isinstance(tag, str) else tag for tag in tags)]:
        if tag.name not in names:
            names.add(tag.name)
            merged.append(tag)

    if not merged and segments:
        merged.append(Tag(name=segments[0]))
    return merged


def _unique_parameters(parameters: Iterable[Union[Parameter, ParameterRef]]) -> list[Union[Parameter, ParameterRef]]:
    # a later parameter with the same location and name replaces an earlier one
    unique: dict[object, Union[Parameter, ParameterRef]] = {}
    for parameter in parameters:
        key = parameter.key if isinstance(parameter, Parameter) else parameter.id
        unique.pop(key, None)
        unique[key] = parameter
    return list(unique.values())


def _best_effort(fn: Callable[[], T], default: T, what: str, value: object) -> T:
    try:
        return fn()
    except (TypeError, ValueError) as e:
        logger.debug("omitting %s from documentation, cannot introspect %r: %s", what, value, e)
        return default


def build_operation(
    current: Operation,
    *,
    method: str,
    segments: Sequence[str],
    schemas: dict[str, Schema],
    examples: dict[str, Example],
    tags: Sequence[Tag] = (),
    summary: Optional[str] = None,
    description: str = "",
    operation_id_: Optional[str] = None,
    external_docs: Optional[ExternalDocumentation] = None,
    query: Optional[OpenAPIValue] = None,
    headers: Optional[OpenAPIValue] = None,
    path: Optional[OpenAPIValue] = None,
    cookies: Optional[OpenAPIValue] = None,
    body: Optional[OpenAPIValue] = None,
    body_types: Sequence[str] = (),
    callbacks: Optional[dict[str, Callback]] = None,
    deprecated: Optional[bool] = None,
    servers: Optional[list[Server]] = None,
) -> Operation:
    """
    Builds the operation object of a route from newly supplied documentation arguments.

    Responses and security requirements are carried over from the current operation; all other fields are replaced.

    :param current: The operation object accumulated so far.
    :param method: HTTP method used for deriving the operation identifier.
    :param segments: Path segments of the route, e.g. `["users", "{id}"]`.
    :param schemas: Schema registry, updated in place.
    :param examples: Example registry, updated in place.
    :param tags: Tags of the route after merging.
    :param query: Query parameters.
    :param headers: Request headers.
    :param path: Path parameters. When absent or empty, parameters are derived from the path placeholders.
    :param cookies: Cookie parameters. When absent, cookies declared by the headers type apply.
    :param body: Request body.
    :param body_types: Media types of the request body.
    """

    builder = ContentBuilder(SchemaBuilder(schemas), ExampleBuilder(examples))

    def location_parameters(value: Optional[OpenAPIValue], location: ParameterLocation) -> list[Parameter]:
        if value is None:
            return []
        return _best_effort(lambda: builder.parameters(value, location), [], f"{location.value} parameters", value)

    explicit_path = location_parameters(path, ParameterLocation.Path)
    parameters = _unique_parameters(
        [
            *location_parameters(query, ParameterLocation.Query),
            *location_parameters(headers, ParameterLocation.Header),
            *(explicit_path or path_parameters(segments)),
            *location_parameters(cookies or cookies_of(headers), ParameterLocation.Cookie),
        ]
    )

    request_body: Optional[RequestBody] = None
    if body is not None:
        content = _best_effort(lambda: builder.content(body, body_types), None, "request body", body)
        if content is not None:
            request_body = RequestBody(content=content, required=True)

    return Operation(
        tags=[tag.name for tag in tags] or None,
        summary=summary,
        description=description,
        externalDocs=external_docs,
        operationId=operation_id_ or operation_id(method, segments),
        parameters=parameters or None,
        requestBody=request_body,
        responses=current.responses,
        callbacks=callbacks,
        deprecated=deprecated,
        security=current.security,
        servers=servers,
    )


def merge_responses(
    current: Mapping[str, Union[Response, ResponseRef]],
    *,
    schemas: dict[str, Schema],
    examples: dict[str, Example],
    bodies: Optional[Mapping[HTTPStatusCode, OpenAPIValue]] = None,
    descriptions: Optional[Mapping[HTTPStatusCode, str]] = None,
    media_types: Optional[Mapping[HTTPStatusCode, Sequence[str]]] = None,
    headers: Optional[Mapping[HTTPStatusCode, OpenAPIValue]] = None,
) -> dict[str, Union[Response, ResponseRef]]:
    """
    Merges response descriptors into the responses object of an operation.

    Every status key that occurs in any of the mappings gets a response entry. For an entry that already exists, the
    body, headers and description supplied in this call replace the existing ones, and anything not supplied is kept.
    Entries for other status keys are left untouched.

    :param current: Responses accumulated so far, keyed by status key.
    :param bodies: Maps status keys to response payloads.
    :param descriptions: Maps status keys to textual descriptions.
    :param media_types: Maps status keys to payload media types (defaults to JSON).
    :param headers: Maps status keys to response headers.
    """

    bodies = bodies or {}
    descriptions = descriptions or {}
    media_types = media_types or {}
    headers = headers or {}

    builder = ContentBuilder(SchemaBuilder(schemas), ExampleBuilder(examples))
    responses = dict(current)

    keys: dict[str, None] = {}
    for mapping in (bodies, descriptions, media_types, headers):
        keys.update(dict.fromkeys(status_key(key) for key in mapping.keys()))

    def lookup(mapping: Mapping[HTTPStatusCode, T], key: str) -> Optional[T]:
        for code, value in mapping.items():
            if status_key(code) == key:
                return value
        return None

    for key in keys:
        previous = responses.get(key)
        if isinstance(previous, ResponseRef):
            logger.debug("replacing response reference %s for status %s", previous.id, key)
            previous = None

        content: Optional[dict[str, MediaType]] = previous.content if previous is not None else None
        body = lookup(bodies, key)
        if body is not None:
            types = lookup(media_types, key) or [DEFAULT_MEDIA_TYPE]
            content = _best_effort(lambda: builder.content(body, types), content, f"{key} response body", body)

        response_headers: Optional[dict[str, Header]] = previous.headers if previous is not None else None
        header_value = lookup(headers, key)
        if header_value is not None:
            response_headers = _best_effort(
                lambda: builder.headers(header_value) or None, response_headers, f"{key} response headers", header_value
            )

        description = lookup(descriptions, key)
        if description is None:
            description = previous.description if previous is not None else DEFAULT_RESPONSE_DESCRIPTION

        responses[key] = Response(description=description, headers=response_headers, content=content)

    return responses


def customize(current: Operation, mutator: Callable[[Operation], None]) -> Operation:
    "Applies a user-supplied mutator to a deep copy of an operation object, leaving the original intact."

    operation = copy.deepcopy(current)
    mutator(operation)
    return operation


def _rename_content(content: Optional[dict[str, MediaType]], renames: Mapping[str, str]) -> Optional[dict[str, MediaType]]:
    if content is None:
        return None

    renamed: dict[str, MediaType] = {}
    for name, media_type in content.items():
        if media_type.examples is not None:
            examples: dict[str, Union[Example, ExampleRef]] = {}
            for key, example in media_type.examples.items():
                if isinstance(example, ExampleRef) and example.id in renames:
                    examples[renames[example.id]] = ExampleRef(renames[example.id])
                else:
                    examples[key] = example
            media_type = dataclasses.replace(media_type, examples=examples)
        renamed[name] = media_type
    return renamed


def rename_examples(current: Operation, renames: Mapping[str, str]) -> Operation:
    """
    Points example references of an operation to new registry keys.

    :param current: The operation object, not modified.
    :param renames: Maps old example keys to new example keys.
    """

    if not renames:
        return current

    request_body = current.requestBody
    if request_body is not None:
        request_body = dataclasses.replace(request_body, content=_rename_content(request_body.content, renames) or {})

    responses: dict[str, Union[Response, ResponseRef]] = {}
    for key, response in current.responses.items():
        if isinstance(response, Response):
            response = dataclasses.replace(response, content=_rename_content(response.content, renames))
        responses[key] = response

    return dataclasses.replace(current, requestBody=request_body, responses=responses)

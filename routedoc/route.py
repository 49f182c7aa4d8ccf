"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

import enum
import warnings
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Callable, Optional, Union

from .builder import path_parameters
from .metadata import AuthScheme, RouteDocumentation
from .operation import (
    HTTPStatusCode,
    build_operation,
    customize,
    merge_responses,
    merge_tags,
    operation_id,
    operation_ref,
    status_key,
)
from .specification import Callback, ExternalDocumentation, Operation, Parameter, Server, Tag
from .values import OpenAPIValue, is_value, params, to_value


@enum.unique
class HTTPMethod(enum.Enum):
    "HTTP method used to invoke an endpoint operation."

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, method: Union["HTTPMethod", str]) -> "HTTPMethod":
        if isinstance(method, HTTPMethod):
            return method
        try:
            return cls(method.upper())
        except ValueError:
            raise ValueError(f"unknown HTTP method: {method}") from None


MediaTypes = Union[str, Sequence[str]]


def _media_types(media_types: MediaTypes) -> list[str]:
    if isinstance(media_types, str):
        return [media_types]
    return list(media_types)


def _checked(value: Optional[OpenAPIValue], name: str) -> Optional[OpenAPIValue]:
    if value is not None and not is_value(value):
        raise TypeError(
            f"`{name}` expects `ExampleValue`, `TypeValue`, `SchemaValue` or `AllOf` but got: {type(value).__name__}"
        )
    return value


def split_path(path: Union[str, Sequence[str]]) -> list[str]:
    if isinstance(path, str):
        return [segment for segment in path.split("/") if segment]
    return list(path)


class Route:
    """
    A route of a web application with the OpenAPI documentation attached to it.

    Documentation methods return the route itself such that calls can be chained:

    ```
    route.openapi(summary="Get user", path=TypeValue(UserID)).response(404, description="User not found")
    ```

    :param method: HTTP method the route is registered with.
    :param path: Path segments, e.g. `["users", "{id}"]`.
    :param description: Human-readable description of the route.
    :param docs: OpenAPI documentation accumulated on the route.
    """

    method: HTTPMethod
    path: list[str]
    description: Optional[str]
    docs: RouteDocumentation

    def __init__(
        self, method: Union[HTTPMethod, str], path: Union[str, Sequence[str]], description: Optional[str] = None
    ) -> None:
        self.method = HTTPMethod.parse(method)
        self.path = split_path(path)
        self.description = description
        self.docs = RouteDocumentation()
        self.docs.operation.description = description

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.method.value} {self.path_string})"

    @property
    def path_string(self) -> str:
        return "/" + "/".join(self.path)

    @property
    def operation_id(self) -> str:
        "OpenAPI operation identifier, e.g. `getUsersId` for `GET /users/{id}`."

        return operation_id(self.method.value, self.path)

    @property
    def operation_ref(self) -> str:
        "OpenAPI operation reference, e.g. `#paths/~1users~1{id}/get`."

        return operation_ref(self.method.value, self.path_string)

    @property
    def path_parameters(self) -> list[Parameter]:
        return path_parameters(self.path)

    @property
    def effective_method(self) -> str:
        "HTTP method (lowercase) under which the operation appears in the document."

        return (self.docs.openapi_method or self.method.value).lower()

    @property
    def operation(self) -> Operation:
        return self.docs.operation

    def openapi(
        self,
        *,
        custom_method: Union[HTTPMethod, str, None] = None,
        spec: Optional[str] = None,
        tags: Sequence[Union[Tag, str]] = (),
        summary: Optional[str] = None,
        description: str = "",
        operation_id: Optional[str] = None,
        external_docs: Optional[ExternalDocumentation] = None,
        query: Optional[OpenAPIValue] = None,
        headers: Optional[OpenAPIValue] = None,
        path: Optional[OpenAPIValue] = None,
        cookies: Optional[OpenAPIValue] = None,
        body: Optional[OpenAPIValue] = None,
        content_type: MediaTypes = (),
        response: Optional[OpenAPIValue] = None,
        response_content_type: MediaTypes = (),
        response_headers: Optional[OpenAPIValue] = None,
        response_description: Optional[str] = None,
        status_code: HTTPStatusCode = 200,
        links: Optional[Mapping[str, type]] = None,
        callbacks: Optional[dict[str, Callback]] = None,
        deprecated: Optional[bool] = None,
        auth: Sequence[AuthScheme] = (),
        servers: Optional[list[Server]] = None,
    ) -> "Route":
        """
        Documents the route as an OpenAPI operation.

        :param custom_method: HTTP method to document instead of the method the route is registered with. Each call
            replaces the method set by an earlier call.
        :param spec: Specification identifier, used to group routes into separate documents. Kept from an earlier call if
            not given.
        :param tags: Tags for logical grouping of operations by resources or any other qualifier.
        :param summary: A short summary of what the operation does.
        :param description: A verbose explanation of the operation behavior. CommonMark syntax may be used.
        :param operation_id: Unique identifier of the operation. Derived from the method and path if not given.
        :param external_docs: Additional external documentation for this operation.
        :param query: Query parameters.
        :param headers: Request headers.
        :param path: Path parameters. Derived from the path placeholders if not given.
        :param cookies: Cookie parameters.
        :param body: Request body.
        :param content_type: Request body media types.
        :param response: Response body.
        :param response_content_type: Response body media types.
        :param response_headers: Response headers.
        :param response_description: Response description.
        :param status_code: Status code of the response.
        :param links: Maps logical link names to the types that identify the linked values. Each call replaces the links
            set by an earlier call.
        :param callbacks: Out-of-band callbacks related to the operation, keyed by a unique identifier.
        :param deprecated: Declares this operation to be deprecated.
        :param auth: Security schemes that protect the operation.
        :param servers: Alternative servers to service this operation.
        """

        return self._openapi(
            method=custom_method,
            spec=spec,
            tags=tags,
            summary=summary,
            description=description,
            operation_id=operation_id,
            external_docs=external_docs,
            query=_checked(query, "query"),
            headers=_checked(headers, "headers"),
            path=_checked(path, "path"),
            cookies=_checked(cookies, "cookies"),
            body=_checked(body, "body"),
            body_types=_media_types(content_type),
            links=links,
            callbacks=callbacks,
            deprecated=deprecated,
            auth=auth,
            servers=servers,
        )._response(
            status_code=status_code,
            body=_checked(response, "response"),
            media_types=_media_types(response_content_type),
            headers=_checked(response_headers, "response_headers"),
            description=response_description,
        )

    def response(
        self,
        status_code: HTTPStatusCode = 200,
        *,
        body: Optional[OpenAPIValue] = None,
        content_type: MediaTypes = (),
        headers: Optional[OpenAPIValue] = None,
        description: Optional[str] = None,
    ) -> "Route":
        """
        Documents an additional response of the OpenAPI operation.

        Responses for other status codes are left intact. For the same status code, only the supplied fields change.

        :param status_code: Response status code.
        :param body: Response body.
        :param content_type: Response body media types.
        :param headers: Response headers.
        :param description: Response description.
        """

        return self._response(
            status_code=status_code,
            body=_checked(body, "body"),
            media_types=_media_types(content_type),
            headers=_checked(headers, "headers"),
            description=description,
        )

    def openapi_legacy(
        self,
        *,
        custom_method: Union[HTTPMethod, str, None] = None,
        spec: Optional[str] = None,
        tags: Sequence[Union[Tag, str]] = (),
        summary: Optional[str] = None,
        description: str = "",
        operation_id: Optional[str] = None,
        external_docs: Optional[ExternalDocumentation] = None,
        query: Sequence[Any] = (),
        headers: Sequence[Any] = (),
        path: Sequence[Any] = (),
        cookies: Sequence[Any] = (),
        body: Any = None,
        body_type: MediaTypes = (),
        response: Any = None,
        response_type: MediaTypes = (),
        response_headers: Sequence[Any] = (),
        success_status_code: HTTPStatusCode = 200,
        error_responses: Optional[Mapping[int, Any]] = None,
        error_descriptions: Optional[Mapping[int, str]] = None,
        error_type: MediaTypes = (),
        error_headers: Sequence[Any] = (),
        links: Optional[Mapping[str, type]] = None,
        callbacks: Optional[dict[str, Callback]] = None,
        deprecated: Optional[bool] = None,
        auth: Sequence[AuthScheme] = (),
        servers: Optional[list[Server]] = None,
    ) -> "Route":
        """
        Documents the route from loosely-typed values.

        Types are introspected, schema references are used verbatim, and any other value is an example.

        :param success_status_code: Status code of the successful response.
        :param error_responses: Maps error status codes to error payloads.
        :param error_descriptions: Maps status codes to response descriptions.
        :param error_type: Media types of error payloads.
        :param error_headers: Headers of every error response.

        :deprecated: Use `openapi` and `response` instead.
        """

        warnings.warn("`openapi_legacy` is deprecated, use `openapi` and `response`", DeprecationWarning, stacklevel=2)

        error_responses = error_responses or {}
        error_descriptions = error_descriptions or {}
        error_types = _media_types(error_type)
        shared_error_headers = params(error_headers)

        success_description: Optional[str] = None
        success_key = status_key(success_status_code)
        for code, text in error_descriptions.items():
            if status_key(code) == success_key:
                success_description = text

        self._openapi(
            method=custom_method,
            spec=spec,
            tags=tags,
            summary=summary,
            description=description,
            operation_id=operation_id,
            external_docs=external_docs,
            query=params(query),
            headers=params(headers),
            path=params(path),
            cookies=params(cookies),
            body=to_value(body) if body is not None else None,
            body_types=_media_types(body_type),
            links=links,
            callbacks=callbacks,
            deprecated=deprecated,
            auth=auth,
            servers=servers,
        )._response(
            status_code=success_status_code,
            body=to_value(response) if response is not None else None,
            media_types=_media_types(response_type),
            headers=params(response_headers),
            description=success_description,
        )

        docs = self.docs
        docs.operation.responses = merge_responses(
            docs.operation.responses,
            schemas=docs.schemas,
            examples=docs.examples,
            bodies={code: to_value(value) for code, value in error_responses.items()},
            descriptions=error_descriptions,
            media_types={code: error_types for code in error_responses},
            headers=(
                {code: shared_error_headers for code in error_responses} if shared_error_headers is not None else None
            ),
        )
        return self

    def exclude_from_openapi(self) -> "Route":
        "Omits the route from the generated document."

        self.docs.exclude = True
        return self

    def openapi_no_auth(self) -> "Route":
        "Declares that the operation requires no authentication, overriding any default security scheme."

        self.docs.set_no_auth()
        return self

    def openapi_custom(self, mutator: Callable[[Operation], None]) -> "Route":
        """
        Customizes fields of the OpenAPI operation not covered by other methods.

        :param mutator: Receives the operation object, and modifies it in place.
        """

        self.docs.operation = customize(self.docs.operation, mutator)
        return self

    def _openapi(
        self,
        *,
        method: Union[HTTPMethod, str, None],
        spec: Optional[str],
        tags: Sequence[Union[Tag, str]],
        summary: Optional[str],
        description: str,
        operation_id: Optional[str],
        external_docs: Optional[ExternalDocumentation],
        query: Optional[OpenAPIValue],
        headers: Optional[OpenAPIValue],
        path: Optional[OpenAPIValue],
        cookies: Optional[OpenAPIValue],
        body: Optional[OpenAPIValue],
        body_types: list[str],
        links: Optional[Mapping[str, type]],
        callbacks: Optional[dict[str, Callback]],
        deprecated: Optional[bool],
        auth: Sequence[AuthScheme],
        servers: Optional[list[Server]],
    ) -> "Route":
        docs = self.docs
        docs.tags = merge_tags(docs.tags, tags, self.path)
        docs.operation = build_operation(
            docs.operation,
            method=self.method.value,
            segments=self.path,
            schemas=docs.schemas,
            examples=docs.examples,
            tags=docs.tags,
            summary=summary,
            description=description,
            operation_id_=operation_id,
            external_docs=external_docs,
            query=query,
            headers=headers,
            path=path,
            cookies=cookies,
            body=body,
            body_types=body_types,
            callbacks=callbacks,
            deprecated=deprecated,
            servers=servers,
        )
        self.description = description

        if auth:
            docs.set_auths(list(auth))
        if spec is not None:
            docs.spec_id = spec
        docs.links = dict(links or {})
        docs.openapi_method = HTTPMethod.parse(method).value if method is not None else None
        return self

    def _response(
        self,
        *,
        status_code: HTTPStatusCode,
        body: Optional[OpenAPIValue],
        media_types: list[str],
        headers: Optional[OpenAPIValue],
        description: Optional[str],
    ) -> "Route":
        docs = self.docs
        docs.operation.responses = merge_responses(
            docs.operation.responses,
            schemas=docs.schemas,
            examples=docs.examples,
            bodies={status_code: body} if body is not None else None,
            descriptions={status_code: description} if description is not None else None,
            media_types={status_code: media_types},
            headers={status_code: headers} if headers is not None else None,
        )
        return self


class Routes:
    """
    An ordered collection of routes, as registered with a web application.

    Routes are only recorded for documentation purposes; requests are not dispatched.
    """

    routes: list[Route]

    def __init__(self) -> None:
        self.routes = []

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    def add(self, method: Union[HTTPMethod, str], path: Union[str, Sequence[str]], description: Optional[str] = None) -> Route:
        route = Route(method, path, description)
        self.routes.append(route)
        return route

    def get(self, path: Union[str, Sequence[str]], description: Optional[str] = None) -> Route:
        return self.add(HTTPMethod.GET, path, description)

    def post(self, path: Union[str, Sequence[str]], description: Optional[str] = None) -> Route:
        return self.add(HTTPMethod.POST, path, description)

    def put(self, path: Union[str, Sequence[str]], description: Optional[str] = None) -> Route:
        return self.add(HTTPMethod.PUT, path, description)

    def patch(self, path: Union[str, Sequence[str]], description: Optional[str] = None) -> Route:
        return self.add(HTTPMethod.PATCH, path, description)

    def delete(self, path: Union[str, Sequence[str]], description: Optional[str] = None) -> Route:
        return self.add(HTTPMethod.DELETE, path, description)

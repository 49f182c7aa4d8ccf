"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional

from strong_typing.core import Schema

from .specification import Example, Operation, SecurityRequirement, SecurityScheme, Tag


@dataclass
class AuthScheme:
    """
    A named security scheme together with the scopes an operation requires.

    :param id: Key of the security scheme in the components section of the document.
    :param scheme: The security scheme definition.
    :param scopes: Scopes required by the operation (relevant for OAuth2 and OpenID Connect).
    """

    id: str
    scheme: SecurityScheme
    scopes: list[str] = dataclasses.field(default_factory=list)

    def requirement(self) -> SecurityRequirement:
        return {self.id: list(self.scopes)}


@dataclass
class RouteDocumentation:
    """
    OpenAPI documentation accumulated on a route across decoration calls.

    :param operation: The operation object of the route.
    :param schemas: Schemas referenced from the operation, keyed by type name.
    :param examples: Examples referenced from the operation, keyed by type name.
    :param tags: Tags of the route, unique by name.
    :param auths: Security schemes. `None` inherits the default, an empty list means no authentication.
    :param links: Maps logical link names to the types that identify the linked values.
    :param spec_id: Identifies the specification (group of routes) the route belongs to.
    :param exclude: True if the route is omitted from the generated document.
    :param openapi_method: HTTP method to document instead of the method the route is registered with.
    """

    operation: Operation = dataclasses.field(default_factory=Operation)
    schemas: dict[str, Schema] = dataclasses.field(default_factory=dict)
    examples: dict[str, Example] = dataclasses.field(default_factory=dict)
    tags: list[Tag] = dataclasses.field(default_factory=list)
    auths: Optional[list[AuthScheme]] = None
    links: dict[str, type] = dataclasses.field(default_factory=dict)
    spec_id: Optional[str] = None
    exclude: bool = False
    openapi_method: Optional[str] = None

    def set_auths(self, auths: list[AuthScheme]) -> None:
        "Adds security schemes (unique by identifier), and updates the security requirements of the operation."

        merged = {auth.id: auth for auth in self.auths or []}
        merged.update((auth.id, auth) for auth in auths)
        self.auths = list(merged.values())
        self.operation.security = [auth.requirement() for auth in self.auths]

    def set_no_auth(self) -> None:
        self.auths = []
        self.operation.security = []

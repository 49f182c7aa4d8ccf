"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

import dataclasses
import logging
from typing import Iterable, Optional

from strong_typing.core import Schema

from .builder import ExampleBuilder
from .metadata import AuthScheme
from .operation import rename_examples
from .options import Options
from .route import Route
from .specification import Components, Document, Example, Operation, PathItem, SecurityScheme, Tag, TagGroup

logger = logging.getLogger(__name__)


class Generator:
    """
    Assembles an OpenAPI document from the documentation accumulated on routes.

    :param routes: Routes of the web application.
    :param options: Options that apply to the entire document.
    """

    routes: list[Route]
    options: Options

    def __init__(self, routes: Iterable[Route], options: Options) -> None:
        self.routes = list(routes)
        self.options = options

    def spec_ids(self) -> list[Optional[str]]:
        "Lists the distinct specification identifiers that routes are grouped by, in order of first occurrence."

        return list(dict.fromkeys(route.docs.spec_id for route in self.routes if not route.docs.exclude))

    def _included_routes(self, spec_id: Optional[str]) -> Iterable[Route]:
        for route in self.routes:
            if route.docs.exclude:
                logger.debug("route %r is excluded from OpenAPI documentation", route)
                continue
            if spec_id is not None and route.docs.spec_id != spec_id:
                continue
            yield route

    def _route_auths(self, route: Route) -> list[AuthScheme]:
        if route.docs.auths is not None:
            return route.docs.auths
        return self.options.default_security or []

    def _build_operation(self, route: Route, renames: dict[str, str]) -> Operation:
        operation = rename_examples(route.docs.operation, renames)
        if operation.operationId is None:
            operation = dataclasses.replace(operation, operationId=route.operation_id)
        if route.docs.auths is None and self.options.default_security:
            operation = dataclasses.replace(
                operation, security=[auth.requirement() for auth in self.options.default_security]
            )
        return operation

    def generate(self, spec_id: Optional[str] = None) -> Document:
        """
        Generates the OpenAPI document.

        :param spec_id: Includes only routes that belong to this specification, or all routes if `None`.
        """

        paths: dict[str, PathItem] = {}
        schemas: dict[str, Schema] = {}
        examples: dict[str, Example] = {}
        example_builder = ExampleBuilder(examples)
        security_schemes: dict[str, SecurityScheme] = {}
        operation_tags: dict[str, Tag] = {}

        for route in self._included_routes(spec_id):
            docs = route.docs

            for name, schema in docs.schemas.items():
                schemas.setdefault(name, schema)

            # examples of different routes may share a key but differ in value
            renames: dict[str, str] = {}
            for name, example in docs.examples.items():
                key = example_builder.register(name, example)
                if key != name:
                    renames[name] = key

            path_item = paths.setdefault(route.path_string, PathItem())
            path_item.set_operation(route.effective_method, self._build_operation(route, renames))

            for auth in self._route_auths(route):
                security_schemes.setdefault(auth.id, auth.scheme)
            for tag in docs.tags:
                operation_tags.setdefault(tag.name, tag)

        tags = list(operation_tags.values())
        tag_groups: list[TagGroup] = []
        if tags:
            tag_groups.append(TagGroup(name=self.options.map("Operations"), tags=sorted(tag.name for tag in tags)))

        return Document(
            openapi=".".join(str(part) for part in self.options.version),
            info=self.options.info,
            servers=self.options.servers,
            paths=paths,
            components=Components(
                schemas=schemas or None,
                examples=examples or None,
                securitySchemes=security_schemes or None,
            ),
            tags=tags or None,
            tagGroups=tag_groups or None,
        )

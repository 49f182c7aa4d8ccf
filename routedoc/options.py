"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

import dataclasses
from dataclasses import dataclass
from typing import ClassVar, Optional

from .metadata import AuthScheme as AuthScheme
from .specification import Info, Server
from .specification import SecuritySchemeAPI as SecuritySchemeAPI
from .specification import SecuritySchemeHTTP as SecuritySchemeHTTP
from .specification import SecuritySchemeOAuth2 as SecuritySchemeOAuth2
from .specification import SecuritySchemeOpenIDConnect as SecuritySchemeOpenIDConnect


@dataclass
class Options:
    """
    :param info: Meta-information for the endpoint specification.
    :param servers: Base URLs for the API endpoint.
    :param version: OpenAPI specification version as a tuple of major, minor, revision.
    :param default_security: Security schemes to apply to operations, unless overridden on a per-route basis.
    :param captions: User-defined captions for sections such as "Operations".
    """

    info: Info
    servers: list[Server] = dataclasses.field(default_factory=list)
    version: tuple[int, int, int] = (3, 1, 0)
    default_security: Optional[list[AuthScheme]] = None
    captions: Optional[dict[str, str]] = None

    default_captions: ClassVar[dict[str, str]] = {
        "Operations": "Operations",
    }

    def map(self, id: str) -> str:
        "Maps a language-neutral placeholder string to language-dependent text."

        if self.captions is not None:
            caption = self.captions.get(id)
            if caption is not None:
                return caption

        caption = self.__class__.default_captions.get(id)
        if caption is not None:
            return caption

        raise KeyError(f"no caption found for ID: {id}")

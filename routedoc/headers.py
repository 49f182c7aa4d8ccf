"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

from typing import ClassVar, Optional


class HeadersType:
    """
    Base class for a bag of HTTP headers declared as class properties.

    Property names are mapped to header names by capitalizing each underscore-separated word and joining them with a
    hyphen, e.g. `content_type` becomes `Content-Type`. Use `header_names` to supply names that do not follow this rule.

    Assign a class to `Cookies` to declare the cookies that accompany these headers.
    """

    header_names: ClassVar[dict[str, str]] = {}
    Cookies: ClassVar[Optional[type]] = None

    @classmethod
    def header_name(cls, field_name: str) -> str:
        "Maps a Python property name to the name of the HTTP header it represents."

        name = cls.header_names.get(field_name)
        if name is not None:
            return name
        return "-".join(word.capitalize() for word in field_name.split("_") if word)


def is_headers_type(typ: object) -> bool:
    return isinstance(typ, type) and issubclass(typ, HeadersType)

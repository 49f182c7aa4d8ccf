"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

import json
from typing import Iterable, Optional, TextIO

from strong_typing.core import StrictJsonType
from strong_typing.serialization import object_to_json

from .generator import Generator
from .options import Options
from .route import Route
from .specification import Document


class Specification:
    """
    An OpenAPI document generated from documented routes.

    :param routes: Routes of the web application.
    :param options: Options that apply to the entire document.
    :param spec_id: Includes only routes that belong to this specification, or all routes if `None`.
    """

    document: Document

    def __init__(self, routes: Iterable[Route], options: Options, spec_id: Optional[str] = None) -> None:
        generator = Generator(routes, options)
        self.document = generator.generate(spec_id)

    def get_json(self) -> StrictJsonType:
        """
        Returns the OpenAPI specification as a Python data type (e.g. `dict` for an object, `list` for an array).

        The result can be serialized to a JSON string with `json.dump` or `json.dumps`.
        """

        json_doc: dict[str, StrictJsonType] = object_to_json(self.document)  # type: ignore[assignment]

        if self.document.tagGroups:
            # rename vendor-specific properties
            json_doc["x-tagGroups"] = json_doc.pop("tagGroups")

        return json_doc

    def get_json_string(self, pretty_print: bool = False) -> str:
        """
        Returns the OpenAPI specification as a JSON string.

        :param pretty_print: Whether to use line indents to beautify the output.
        """

        json_doc = self.get_json()
        if pretty_print:
            return json.dumps(json_doc, check_circular=False, ensure_ascii=False, indent=4)
        else:
            return json.dumps(json_doc, check_circular=False, ensure_ascii=False, separators=(",", ":"))

    def write_json(self, f: TextIO, pretty_print: bool = False) -> None:
        """
        Writes the OpenAPI specification to a file as a JSON string.

        :param pretty_print: Whether to use line indents to beautify the output.
        """

        f.write(self.get_json_string(pretty_print))

    def write_yaml(self, f: TextIO) -> None:
        "Writes the OpenAPI specification to a file in YAML format. Requires the package PyYAML."

        import yaml

        yaml.dump(self.get_json(), f, allow_unicode=True, sort_keys=False)

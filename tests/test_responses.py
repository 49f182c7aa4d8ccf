import unittest

from endpoint import ErrorMessage, RateLimitHeaders, User

from routedoc.operation import merge_responses
from routedoc.specification import ExampleRef, Response, ResponseRef, SchemaRef
from routedoc.values import ExampleValue, TypeValue


class TestMergeResponses(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.schemas: dict = {}
        self.examples: dict = {}

    def merge(self, current: dict, **kwargs) -> dict:  # type: ignore[no-untyped-def]
        return merge_responses(current, schemas=self.schemas, examples=self.examples, **kwargs)

    def test_disjoint_status_codes(self) -> None:
        responses = self.merge({}, bodies={200: TypeValue(User)}, descriptions={200: "The user."})
        responses = self.merge(responses, bodies={404: TypeValue(ErrorMessage)}, descriptions={404: "Not found."})
        responses = self.merge(responses, headers={429: TypeValue(RateLimitHeaders)}, descriptions={429: "Slow down."})

        self.assertEqual(list(responses), ["200", "404", "429"])

        ok = responses["200"]
        assert isinstance(ok, Response) and ok.content is not None
        self.assertEqual(ok.description, "The user.")
        self.assertEqual(ok.content["application/json"].schema, SchemaRef("User"))
        self.assertIsNone(ok.headers)

        not_found = responses["404"]
        assert isinstance(not_found, Response) and not_found.content is not None
        self.assertEqual(not_found.description, "Not found.")
        self.assertEqual(not_found.content["application/json"].schema, SchemaRef("ErrorMessage"))
        self.assertIsNone(not_found.headers)

        too_many = responses["429"]
        assert isinstance(too_many, Response) and too_many.headers is not None
        self.assertIsNone(too_many.content)
        self.assertEqual(list(too_many.headers), ["X-RateLimit-Remaining"])

    def test_same_status_code(self) -> None:
        responses = self.merge({}, bodies={200: TypeValue(User)}, descriptions={200: "The user."})
        responses = self.merge(responses, headers={200: TypeValue(RateLimitHeaders)})

        response = responses["200"]
        assert isinstance(response, Response) and response.content is not None and response.headers is not None
        self.assertEqual(response.description, "The user.")
        self.assertEqual(response.content["application/json"].schema, SchemaRef("User"))
        self.assertIn("X-RateLimit-Remaining", response.headers)

    def test_overwrite_supplied_fields(self) -> None:
        responses = self.merge({}, bodies={"200": TypeValue(User)}, descriptions={"200": "first"})
        responses = self.merge(
            responses, bodies={200: TypeValue(ErrorMessage)}, media_types={200: ["application/problem+json"]}
        )

        response = responses["200"]
        assert isinstance(response, Response) and response.content is not None
        self.assertEqual(response.description, "first")
        self.assertEqual(list(response.content), ["application/problem+json"])
        self.assertEqual(response.content["application/problem+json"].schema, SchemaRef("ErrorMessage"))

    def test_input_not_modified(self) -> None:
        current = {"200": Response(description="OK")}
        responses = self.merge(current, descriptions={201: "Created"})
        self.assertEqual(list(current), ["200"])
        self.assertEqual(list(responses), ["200", "201"])
        self.assertIs(responses["200"], current["200"])

    def test_default_description(self) -> None:
        responses = self.merge({}, media_types={"default": ["text/plain"]})
        self.assertEqual(responses["default"], Response(description=""))

    def test_media_type_fan_out(self) -> None:
        responses = self.merge(
            {}, bodies={200: ExampleValue({"id": 1})}, media_types={200: ["application/json", "application/yaml"]}
        )
        response = responses["200"]
        assert isinstance(response, Response) and response.content is not None
        self.assertEqual(list(response.content), ["application/json", "application/yaml"])
        for media_type in response.content.values():
            self.assertEqual(media_type.example, {"id": 1})
            self.assertEqual(media_type.schema, {"type": "object", "properties": {"id": {"type": "integer"}}, "required": ["id"]})

    def test_replace_reference(self) -> None:
        responses = self.merge({"404": ResponseRef("NotFound")}, descriptions={404: "Missing"})
        self.assertEqual(responses["404"], Response(description="Missing"))

    def test_named_example(self) -> None:
        sample = ErrorMessage(code=404, message="User not found.")
        responses = self.merge({}, bodies={404: ExampleValue(sample)})
        response = responses["404"]
        assert isinstance(response, Response) and response.content is not None
        media_type = response.content["application/json"]
        self.assertEqual(media_type.schema, SchemaRef("ErrorMessage"))
        assert media_type.examples is not None
        self.assertEqual(list(media_type.examples), ["ErrorMessage"])
        self.assertEqual(self.examples["ErrorMessage"].value, {"code": 404, "message": "User not found."})

    def test_distinct_examples_of_same_type(self) -> None:
        responses = self.merge({}, bodies={400: ExampleValue(ErrorMessage(400, "Bad request."))})
        responses = self.merge(responses, bodies={500: ExampleValue(ErrorMessage(500, "Internal error."))})

        for key, code in (("400", 400), ("500", 500)):
            response = responses[key]
            assert isinstance(response, Response) and response.content is not None
            examples = response.content["application/json"].examples
            assert examples is not None
            (ref,) = examples.values()
            assert isinstance(ref, ExampleRef)
            self.assertEqual(self.examples[ref.id].value["code"], code)

        self.assertEqual(list(self.examples), ["ErrorMessage", "ErrorMessage_2"])

    def test_shared_registry(self) -> None:
        self.merge({}, bodies={200: TypeValue(User), 201: TypeValue(User)})
        self.assertEqual(list(self.schemas).count("User"), 1)


if __name__ == "__main__":
    unittest.main()

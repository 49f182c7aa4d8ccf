import unittest

from endpoint import ErrorMessage, RateLimitHeaders, RequestHeaders, Session, Status, User

from routedoc.builder import (
    ContentBuilder,
    ExampleBuilder,
    SchemaBuilder,
    cookies_of,
    infer_schema,
    path_parameters,
    placeholder_name,
)
from routedoc.headers import HeadersType
from routedoc.specification import Example, ExampleRef, ParameterLocation, SchemaRef
from routedoc.values import AllOf, ExampleValue, SchemaValue, TypeValue, all_of, params, to_value


class TestValues(unittest.TestCase):
    def test_to_value(self) -> None:
        self.assertEqual(to_value(User), TypeValue(User))
        self.assertEqual(to_value(SchemaRef("User")), SchemaValue(SchemaRef("User")))
        self.assertEqual(to_value(TypeValue(User)), TypeValue(User))
        self.assertIsInstance(to_value({"type": "object"}), ExampleValue)
        self.assertEqual(to_value(42), ExampleValue(42))

    def test_params(self) -> None:
        self.assertIsNone(params([]))
        self.assertIsNone(params([None]))
        self.assertEqual(params([User]), TypeValue(User))
        self.assertEqual(params([User, {"a": 1}]), AllOf((TypeValue(User), ExampleValue({"a": 1}))))

    def test_all_of(self) -> None:
        self.assertIsNone(all_of(None, None))
        self.assertEqual(all_of(None, TypeValue(User)), TypeValue(User))
        self.assertEqual(all_of(TypeValue(User), TypeValue(Session)), AllOf((TypeValue(User), TypeValue(Session))))


class TestHeaders(unittest.TestCase):
    def test_header_name(self) -> None:
        self.assertEqual(HeadersType.header_name("content_type"), "Content-Type")
        self.assertEqual(RequestHeaders.header_name("x_request_id"), "X-Request-Id")
        self.assertEqual(RateLimitHeaders.header_name("x_rate_limit_remaining"), "X-RateLimit-Remaining")

    def test_cookies(self) -> None:
        self.assertEqual(cookies_of(TypeValue(RequestHeaders)), TypeValue(Session))
        self.assertEqual(cookies_of(ExampleValue(RequestHeaders("Bearer abc"))), TypeValue(Session))
        self.assertIsNone(cookies_of(TypeValue(RateLimitHeaders)))
        self.assertIsNone(cookies_of(TypeValue(User)))
        self.assertIsNone(cookies_of(None))


class TestSchemaBuilder(unittest.TestCase):
    def test_simple_types(self) -> None:
        builder = SchemaBuilder({})
        self.assertEqual(builder.classdef_to_ref(str), {"type": "string"})
        self.assertEqual(builder.schemas, {})

    def test_named_types(self) -> None:
        schemas: dict = {}
        builder = SchemaBuilder(schemas)
        self.assertEqual(builder.classdef_to_ref(User), SchemaRef("User"))
        self.assertEqual(builder.classdef_to_ref(ErrorMessage), SchemaRef("ErrorMessage"))
        self.assertIn("properties", schemas["User"])
        self.assertIn("properties", schemas["ErrorMessage"])

        first = schemas["User"]
        SchemaBuilder(schemas).classdef_to_ref(User)
        self.assertIs(schemas["User"], first)

    def test_resolve(self) -> None:
        builder = SchemaBuilder({"Thing": {"type": "object"}})
        self.assertEqual(builder.resolve(SchemaRef("Thing")), {"type": "object"})
        self.assertEqual(builder.resolve({"type": "string"}), {"type": "string"})
        with self.assertRaises(ValueError):
            builder.resolve(SchemaRef("Missing"))


class TestExampleBuilder(unittest.TestCase):
    def test_register(self) -> None:
        examples: dict = {}
        builder = ExampleBuilder(examples)
        self.assertEqual(builder.register("ErrorMessage", Example(value={"code": 400})), "ErrorMessage")
        self.assertEqual(builder.register("ErrorMessage", Example(value={"code": 500})), "ErrorMessage_2")
        self.assertEqual(builder.register("ErrorMessage", Example(value={"code": 409})), "ErrorMessage_3")
        self.assertEqual(builder.register("ErrorMessage", Example(value={"code": 500})), "ErrorMessage_2")
        self.assertEqual(builder.build_ref("ErrorMessage", {"code": 400}), ExampleRef("ErrorMessage"))
        self.assertEqual(
            [example.value["code"] for example in examples.values()],
            [400, 500, 409],
        )


class TestContentBuilder(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.schemas: dict = {}
        self.examples: dict = {}
        self.builder = ContentBuilder(SchemaBuilder(self.schemas), ExampleBuilder(self.examples))

    def test_example_parameters(self) -> None:
        parameters = self.builder.parameters(ExampleValue(RequestHeaders("Bearer abc")), ParameterLocation.Header)
        self.assertEqual([p.name for p in parameters], ["Authorization", "X-Request-Id"])
        self.assertEqual(parameters[0].example, "Bearer abc")
        self.assertTrue(parameters[0].required)

    def test_anonymous_example_parameters(self) -> None:
        parameters = self.builder.parameters(ExampleValue({"page": 2, "sort": None}), ParameterLocation.Query)
        self.assertEqual([(p.name, p.required, p.example) for p in parameters], [("page", True, 2), ("sort", False, None)])
        self.assertEqual(parameters[0].schema, {"type": "integer"})

    def test_not_an_object(self) -> None:
        with self.assertRaises(TypeError):
            self.builder.parameters(ExampleValue([1, 2]), ParameterLocation.Query)
        with self.assertRaises(TypeError):
            self.builder.parameters(SchemaValue({"type": "string"}), ParameterLocation.Query)

    def test_keyword_property(self) -> None:
        schema = {"type": "object", "properties": {"from": {"type": "string"}}, "required": ["from"]}
        parameters = self.builder.parameters(SchemaValue(schema), ParameterLocation.Query)
        self.assertEqual(parameters[0].name, "from")

    def test_headers(self) -> None:
        headers = self.builder.headers(TypeValue(RateLimitHeaders))
        self.assertEqual(list(headers), ["X-RateLimit-Remaining"])
        self.assertTrue(headers["X-RateLimit-Remaining"].required)

    def test_media_type(self) -> None:
        media_type = self.builder.media_type(ExampleValue(Status.Suspended))
        self.assertEqual(media_type.schema, SchemaRef("Status"))
        self.assertEqual(media_type.examples, {"Status": ExampleRef("Status")})
        self.assertEqual(self.examples, {"Status": Example(value="suspended")})

        # an equal example reuses the key, a different example gets a key of its own
        self.assertEqual(self.builder.media_type(ExampleValue(Status.Suspended)).examples, {"Status": ExampleRef("Status")})
        other = self.builder.media_type(ExampleValue(Status.Active))
        self.assertEqual(other.examples, {"Status_2": ExampleRef("Status_2")})
        self.assertEqual(self.examples, {"Status": Example(value="suspended"), "Status_2": Example(value="active")})

    def test_content_examples_not_shared(self) -> None:
        content = self.builder.content(ExampleValue(Status.Active), ["application/json", "text/yaml"])
        json_examples = content["application/json"].examples
        yaml_examples = content["text/yaml"].examples
        assert json_examples is not None and yaml_examples is not None
        self.assertEqual(json_examples, yaml_examples)
        self.assertIsNot(json_examples, yaml_examples)

    def test_all_of(self) -> None:
        media_type = self.builder.media_type(AllOf((TypeValue(User), SchemaValue({"type": "object"}))))
        self.assertEqual(
            media_type.schema,
            {"allOf": [{"$ref": "#/components/schemas/User"}, {"type": "object"}]},
        )

    def test_content(self) -> None:
        content = self.builder.content(TypeValue(User), ["application/json", "text/yaml"])
        self.assertEqual(list(content), ["application/json", "text/yaml"])
        self.assertIsNot(content["application/json"], content["text/yaml"])
        self.assertEqual(content["application/json"], content["text/yaml"])
        self.assertEqual(list(self.builder.content(TypeValue(User), [])), ["application/json"])


class TestPath(unittest.TestCase):
    def test_placeholder(self) -> None:
        self.assertEqual(placeholder_name("{id}"), "id")
        self.assertIsNone(placeholder_name("users"))
        self.assertIsNone(placeholder_name("**"))

    def test_path_parameters(self) -> None:
        parameters = path_parameters(["users", "{user_id}", "posts", "{post_id}"])
        self.assertEqual([p.name for p in parameters], ["user_id", "post_id"])
        for parameter in parameters:
            self.assertIs(parameter.in_, ParameterLocation.Path)
            self.assertTrue(parameter.required)
            self.assertEqual(parameter.schema, {"type": "string"})


class TestInferSchema(unittest.TestCase):
    def test_primitives(self) -> None:
        self.assertEqual(infer_schema(None), {"type": "null"})
        self.assertEqual(infer_schema(True), {"type": "boolean"})
        self.assertEqual(infer_schema(1), {"type": "integer"})
        self.assertEqual(infer_schema(1.5), {"type": "number"})
        self.assertEqual(infer_schema("a"), {"type": "string"})

    def test_nested(self) -> None:
        self.assertEqual(
            infer_schema({"tags": ["a"], "owner": {"id": 7}, "note": None}),
            {
                "type": "object",
                "properties": {
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "owner": {"type": "object", "properties": {"id": {"type": "integer"}}, "required": ["id"]},
                    "note": {"type": "null"},
                },
                "required": ["tags", "owner"],
            },
        )
        self.assertEqual(infer_schema([]), {"type": "array", "items": {}})


if __name__ == "__main__":
    unittest.main()

from typing import Any, Optional

import pytest
from pydantic import BaseModel, Field

from declarest import (
    Config,
    HttpMethod,
    JsonDeserializer,
    MissingArgumentError,
    OperationDescriptor,
    ParameterBinding,
    ParameterRole,
    SerializationError,
    compile_request,
)
from declarest._compiler import MISSING


def binding(
    role: ParameterRole,
    key: Optional[str],
    position: int,
    omit_if_empty: bool = True,
) -> ParameterBinding:
    return ParameterBinding(
        role=role, key=key, position=position, omit_if_empty=omit_if_empty
    )


def operation(
    *bindings: ParameterBinding,
    method: HttpMethod = HttpMethod.GET,
    url_template: str = "/items",
    static_headers: Optional[dict] = None,
) -> OperationDescriptor:
    return OperationDescriptor(
        operation_id="tests.op",
        method=method,
        url_template=url_template,
        static_headers=static_headers or {},
        bindings=bindings,
    )


class Filter(BaseModel):
    min_price: int = Field(alias="minPrice")


class TestCompileRequest:
    def test_user_lookup_scenario(self):
        op = operation(
            binding(ParameterRole.PATH, "id", 0),
            binding(ParameterRole.QUERY, "active", 1),
            url_template="/users/{id}",
        )

        request = compile_request(
            op, Config(base_url="https://api.test"), ["42", True]
        )

        assert request.method == "GET"
        assert request.url == "https://api.test/users/42"
        assert request.query == {"active": "true"}
        assert request.body is None
        assert request.full_url == "https://api.test/users/42?active=true"

    def test_absent_config_resolves_to_neutral_defaults(self):
        request = compile_request(operation(url_template="/ping"), None, [])

        assert request.url == "/ping"
        assert request.headers == {}

    def test_url_concatenation_is_literal(self):
        request = compile_request(
            operation(url_template="/users"), Config(base_url="https://api.test/"), []
        )

        assert request.url == "https://api.test//users"

    def test_compiling_twice_gives_equal_but_distinct_requests(self):
        op = operation(
            binding(ParameterRole.BODY, None, 0),
            binding(ParameterRole.HEADER, "X-Trace", 1),
            method=HttpMethod.POST,
        )
        arguments = [{"x": 1}, "abc"]

        first = compile_request(op, Config(), arguments)
        second = compile_request(op, Config(), arguments)

        assert first == second
        assert first is not second
        assert first.headers is not second.headers
        assert first.query is not second.query

    def test_result_does_not_alias_arguments(self):
        op = operation(binding(ParameterRole.BODY, None, 0), method=HttpMethod.PUT)
        arguments: list[Any] = [{"x": 1}]

        request = compile_request(op, Config(), arguments)
        arguments[0]["x"] = 2
        arguments.clear()

        assert request.body == '{"x":1}'

    class TestBody:
        def test_body_is_compact_json(self):
            op = operation(binding(ParameterRole.BODY, None, 0), method=HttpMethod.POST)

            request = compile_request(op, Config(), [{"x": 1}])

            assert request.body == '{"x":1}'
            assert JsonDeserializer()(request.body) == {"x": 1}

        def test_no_body_binding_means_no_body(self):
            request = compile_request(operation(method=HttpMethod.POST), Config(), [1])

            assert request.body is None

        def test_none_body_value_means_no_body(self):
            op = operation(binding(ParameterRole.BODY, None, 0), method=HttpMethod.POST)

            assert compile_request(op, Config(), [None]).body is None
            assert compile_request(op, Config(), []).body is None

        def test_string_body_is_json_encoded(self):
            op = operation(binding(ParameterRole.BODY, None, 0), method=HttpMethod.POST)

            assert compile_request(op, Config(), ["hi"]).body == '"hi"'

        def test_pydantic_body_uses_aliases(self):
            op = operation(binding(ParameterRole.BODY, None, 0), method=HttpMethod.POST)

            request = compile_request(op, Config(), [{"filter": Filter(minPrice=5)}])

            assert request.body == '{"filter":{"minPrice":5}}'

        def test_unserializable_body_raises(self):
            op = operation(binding(ParameterRole.BODY, None, 0), method=HttpMethod.POST)

            with pytest.raises(SerializationError):
                compile_request(op, Config(), [{"when": object()}])

        def test_nan_body_raises(self):
            op = operation(binding(ParameterRole.BODY, None, 0), method=HttpMethod.POST)

            with pytest.raises(SerializationError):
                compile_request(op, Config(), [float("nan")])

    class TestPath:
        @pytest.mark.parametrize(
            "value, expected",
            [
                ("42", "/users/42"),
                (42, "/users/42"),
                (False, "/users/false"),
                (None, "/users/"),
            ],
        )
        def test_placeholder_replaced_with_string_form(self, value, expected):
            op = operation(
                binding(ParameterRole.PATH, "id", 0), url_template="/users/{id}"
            )

            assert compile_request(op, Config(), [value]).url == expected

        def test_substituted_value_can_match_later_placeholder(self):
            op = operation(
                binding(ParameterRole.PATH, "a", 0),
                binding(ParameterRole.PATH, "b", 1),
                url_template="/{a}/{b}",
            )

            request = compile_request(op, Config(), ["{b}", "x"])

            # "{b}" inserted for a is replaced by the b binding, which searches first
            assert request.url == "/x/{b}"

        def test_value_equal_to_own_placeholder(self):
            op = operation(binding(ParameterRole.PATH, "id", 0), url_template="/u/{id}")

            assert compile_request(op, Config(), ["{id}"]).url == "/u/{id}"

        def test_only_first_occurrence_is_replaced(self):
            op = operation(
                binding(ParameterRole.PATH, "id", 0), url_template="/{id}/copy/{id}"
            )

            assert compile_request(op, Config(), ["7"]).url == "/7/copy/{id}"

        def test_missing_argument_is_absent(self):
            op = operation(binding(ParameterRole.PATH, "id", 3), url_template="/u/{id}")

            assert compile_request(op, Config(), []).url == "/u/"

        def test_composite_value_is_json_encoded(self):
            op = operation(
                binding(ParameterRole.PATH, "ids", 0), url_template="/items/{ids}"
            )

            assert compile_request(op, Config(), [[1, 2]]).url == "/items/[1,2]"

        def test_missing_slot_is_absent(self):
            op = operation(binding(ParameterRole.PATH, "id", 0), url_template="/u/{id}")

            assert compile_request(op, Config(), [MISSING]).url == "/u/"

        def test_missing_slot_in_strict_mode(self):
            op = operation(binding(ParameterRole.PATH, "id", 0), url_template="/u/{id}")

            with pytest.raises(MissingArgumentError):
                compile_request(op, Config(), [MISSING], strict=True)

        def test_missing_argument_in_strict_mode(self):
            op = operation(binding(ParameterRole.PATH, "id", 3), url_template="/u/{id}")

            with pytest.raises(MissingArgumentError) as exc_info:
                compile_request(op, Config(), ["a"], strict=True)

            assert exc_info.value.position == 3

    class TestQuery:
        @pytest.mark.parametrize("value", [0, 0.0, "", False, None, float("nan")])
        def test_empty_values_are_omitted(self, value):
            op = operation(binding(ParameterRole.QUERY, "page", 0))

            request = compile_request(op, Config(), [value])

            assert "page" not in request.query
            assert request.full_url == "/items"

        def test_omit_if_empty_disabled_keeps_falsy_values(self):
            op = operation(
                binding(ParameterRole.QUERY, "page", 0, omit_if_empty=False),
                binding(ParameterRole.QUERY, "draft", 1, omit_if_empty=False),
                binding(ParameterRole.QUERY, "q", 2, omit_if_empty=False),
                binding(ParameterRole.QUERY, "tag", 3, omit_if_empty=False),
            )

            request = compile_request(op, Config(), [0, False, "", None])

            assert request.query == {"page": "0", "draft": "false", "q": ""}

        def test_empty_collections_are_kept(self):
            op = operation(binding(ParameterRole.QUERY, "ids", 0))

            assert compile_request(op, Config(), [[]]).query == {"ids": "%5B%5D"}

        def test_composite_value_is_encoded_json(self):
            value = {"name": "a b", "tags": [1, 2]}
            op = operation(binding(ParameterRole.QUERY, "filter", 0))

            request = compile_request(op, Config(), [value])

            assert request.query == {
                "filter": "%7B%22name%22%3A%22a%20b%22%2C%22tags%22%3A%5B1%2C2%5D%7D"
            }

        def test_key_and_value_are_percent_encoded(self):
            op = operation(binding(ParameterRole.QUERY, "search term", 0))

            request = compile_request(op, Config(), ["café & co/1"])

            assert request.query == {"search%20term": "caf%C3%A9%20%26%20co%2F1"}

        def test_uri_component_safe_characters_are_kept(self):
            op = operation(binding(ParameterRole.QUERY, "q", 0))

            assert compile_request(op, Config(), ["a-b_c.d!e~f*g"]).query == {
                "q": "a-b_c.d!e~f*g"
            }

        def test_last_write_wins(self):
            op = operation(
                binding(ParameterRole.QUERY, "q", 0),
                binding(ParameterRole.QUERY, "q", 1),
            )

            assert compile_request(op, Config(), ["a", "b"]).query == {"q": "b"}

        def test_query_appended_to_template_query(self):
            op = operation(
                binding(ParameterRole.QUERY, "page", 0), url_template="/items?sort=asc"
            )

            request = compile_request(op, Config(), [2])

            assert request.full_url == "/items?sort=asc&page=2"

        def test_unserializable_composite_raises(self):
            op = operation(binding(ParameterRole.QUERY, "q", 0))

            with pytest.raises(SerializationError):
                compile_request(op, Config(), [{"bad": object()}])

    class TestHeaders:
        def test_layers_override_by_key(self):
            op = operation(
                binding(ParameterRole.HEADER, "A", 0),
                static_headers={"A": "2", "B": "3"},
            )

            request = compile_request(op, Config(default_headers={"A": "1"}), ["4"])

            assert request.headers == {"A": "4", "B": "3"}

        def test_earlier_layers_persist(self):
            op = operation(static_headers={"Accept": "application/json"})

            request = compile_request(
                op, Config(default_headers={"User-Agent": "declarest"}), []
            )

            assert request.headers == {
                "User-Agent": "declarest",
                "Accept": "application/json",
            }

        def test_override_is_case_insensitive(self):
            op = operation(static_headers={"content-type": "text/plain"})

            request = compile_request(
                op, Config(default_headers={"Content-Type": "application/json"}), []
            )

            assert request.headers == {"content-type": "text/plain"}

        def test_override_keeps_original_position(self):
            op = operation(
                binding(ParameterRole.HEADER, "accept", 0),
                static_headers={"X-Trace": "t"},
            )

            request = compile_request(
                op,
                Config(default_headers={"Accept": "text/plain", "User-Agent": "u"}),
                ["application/json"],
            )

            assert list(request.headers.items()) == [
                ("accept", "application/json"),
                ("User-Agent", "u"),
                ("X-Trace", "t"),
            ]

        def test_composite_header_value_is_json_encoded(self):
            op = operation(binding(ParameterRole.HEADER, "X-Filter", 0))

            request = compile_request(op, Config(), [Filter(minPrice=5)])

            assert request.headers == {"X-Filter": '{"minPrice":5}'}

        def test_none_header_value_is_skipped(self):
            op = operation(
                binding(ParameterRole.HEADER, "X-Token", 0),
                static_headers={"X-Token": "s"},
            )

            assert compile_request(op, Config(), [None]).headers == {"X-Token": "s"}

        def test_header_values_use_string_form(self):
            op = operation(
                binding(ParameterRole.HEADER, "X-Dry-Run", 0),
                binding(ParameterRole.HEADER, "X-Count", 1),
            )

            request = compile_request(op, Config(), [True, 3])

            assert request.headers == {"X-Dry-Run": "true", "X-Count": "3"}

    def test_failure_aborts_before_other_steps(self):
        op = operation(
            binding(ParameterRole.BODY, None, 0),
            binding(ParameterRole.PATH, "id", 1),
            method=HttpMethod.POST,
            url_template="/{id}",
        )

        with pytest.raises(SerializationError) as exc_info:
            compile_request(op, Config(), [object(), "x"])

        assert isinstance(exc_info.value.__cause__, TypeError)

import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from fluenthttp import Collection, ImmutableAccessError, RequestError, Response


@pytest.fixture
def user_response() -> Response:
    body = json.dumps({"name": "Ada", "tags": ["x", "y"], "age": 36, "nick": None})
    return Response(200, {"Content-Type": "application/json"}, body.encode())


class TestBodyAccess:
    def test_body_is_returned_verbatim(self):
        assert Response(200, {}, "plain text").body() == "plain text"
        assert Response(200, {}, b"bytes").content == b"bytes"

    def test_json_full_document_and_key(self, user_response: Response):
        assert user_response.json()["name"] == "Ada"
        assert user_response.json("age") == 36
        assert user_response.json("missing", "fallback") == "fallback"

    def test_null_value_falls_back_to_default(self, user_response: Response):
        assert user_response.json("nick", "none") == "none"

    def test_invalid_json_decodes_to_empty_document(self):
        response = Response(200, {}, b"<html>")
        assert response.json() == {}
        assert response.json("a", 1) == 1

    def test_json_is_decoded_once(self, monkeypatch: pytest.MonkeyPatch):
        loads = Mock(side_effect=ValueError("not json"))
        monkeypatch.setattr("fluenthttp._response.json.loads", loads)
        response = Response(200, {}, b"{oops")

        first = response.json()
        second = response.json()

        assert first == second == {}
        assert loads.call_count == 1

    def test_top_level_list(self):
        response = Response(200, {}, b"[1, 2, 3]")
        assert response.json() == [1, 2, 3]
        assert response.json(1) == 2
        assert response.has(2)
        assert not response.has(3)

    def test_object_view_is_independent_of_cache(self):
        response = Response(200, {}, b'{"user": {"name": "Ada"}}')
        view = response.object()
        assert view.user.name == "Ada"
        assert response.json() == {"user": {"name": "Ada"}}

    def test_object_view_of_invalid_body_is_empty(self):
        assert Response(200, {}, b"nope").object() == SimpleNamespace()

    def test_collect_whole_document(self, user_response: Response):
        collection = user_response.collect()
        assert isinstance(collection, Collection)
        assert collection.get("name") == "Ada"

    def test_collect_key_wraps_scalars(self, user_response: Response):
        assert user_response.collect("tags").to_list() == ["x", "y"]
        assert user_response.collect("name").to_list() == ["Ada"]

    def test_collect_missing_key_uses_whole_document(self, user_response: Response):
        assert user_response.collect("missing").has("name")

    def test_resource_is_readable_from_start(self):
        stream = Response(200, {}, b"payload").resource()
        assert stream.tell() == 0
        assert stream.read() == b"payload"


class TestHeaders:
    def test_header_lookup_is_case_insensitive(self, user_response: Response):
        assert user_response.header("content-type") == "application/json"
        assert user_response.header("CONTENT-TYPE") == "application/json"

    def test_missing_header_is_empty_string(self, user_response: Response):
        assert user_response.header("X-Missing") == ""

    def test_headers_keep_case(self, user_response: Response):
        assert user_response.headers() == {"Content-Type": "application/json"}


class TestStatusClassification:
    @pytest.mark.parametrize("status", range(0, 600))
    def test_classes_are_exclusive(self, status: int):
        response = Response(status)
        classes = [
            response.successful(),
            response.redirect(),
            response.client_error(),
            response.server_error(),
        ]
        assert sum(classes) == (1 if status >= 200 else 0)
        assert response.failed() == (response.client_error() or response.server_error())

    @pytest.mark.parametrize(
        "status, successful, redirect, failed, client_error, server_error",
        [
            (199, False, False, False, False, False),
            (200, True, False, False, False, False),
            (299, True, False, False, False, False),
            (300, False, True, False, False, False),
            (399, False, True, False, False, False),
            (400, False, False, True, True, False),
            (499, False, False, True, True, False),
            (500, False, False, True, False, True),
            (503, False, False, True, False, True),
        ],
    )
    def test_boundaries(
        self, status, successful, redirect, failed, client_error, server_error
    ):
        response = Response(status)
        assert response.successful() is successful
        assert response.redirect() is redirect
        assert response.failed() is failed
        assert response.client_error() is client_error
        assert response.server_error() is server_error

    @pytest.mark.parametrize(
        "method, status",
        [
            ("ok", 200),
            ("created", 201),
            ("accepted", 202),
            ("no_content", 204),
            ("moved_permanently", 301),
            ("found", 302),
            ("bad_request", 400),
            ("unauthorized", 401),
            ("payment_required", 402),
            ("forbidden", 403),
            ("not_found", 404),
            ("request_timeout", 408),
            ("conflict", 409),
            ("unprocessable_entity", 422),
            ("too_many_requests", 429),
            ("internal_server_error", 500),
        ],
    )
    def test_exact_status_predicates(self, method: str, status: int):
        assert getattr(Response(status), method)() is True
        assert getattr(Response(status + 1), method)() is False


class TestErrorHelpers:
    def test_on_error_only_calls_back_on_failure(self):
        callback = Mock()
        ok = Response(200)
        failed = Response(502)

        assert ok.on_error(callback) is ok
        callback.assert_not_called()

        assert failed.on_error(callback) is failed
        callback.assert_called_once_with(failed)

    def test_throw_raises_with_status_and_response(self):
        response = Response(404)
        callback = Mock()

        with pytest.raises(RequestError) as exc_info:
            response.throw(callback)

        callback.assert_called_once_with(response)
        assert exc_info.value.status_code == 404
        assert exc_info.value.response is response

    def test_throw_returns_self_when_not_failed(self):
        response = Response(302)
        assert response.throw() is response

    def test_throw_if_with_bool_and_callable(self):
        response = Response(500)
        assert response.throw_if(False) is response
        assert response.throw_if(lambda r: r.status() == 404) is response
        with pytest.raises(RequestError):
            response.throw_if(True)
        with pytest.raises(RequestError):
            response.throw_if(lambda r: r.server_error())

    def test_throw_if_ignores_successful_responses(self):
        assert Response(200).throw_if(True).status() == 200

    def test_throw_unless(self):
        response = Response(422)
        assert response.throw_unless(True) is response
        with pytest.raises(RequestError):
            response.throw_unless(lambda r: False)
        assert Response(201).throw_unless(False).status() == 201

    def test_callable_condition_is_evaluated_on_success(self):
        response = Response(200)
        throw_if_condition = Mock(return_value=True)
        throw_unless_condition = Mock(return_value=False)

        assert response.throw_if(throw_if_condition) is response
        assert response.throw_unless(throw_unless_condition) is response

        throw_if_condition.assert_called_once_with(response)
        throw_unless_condition.assert_called_once_with(response)

    def test_throw_if_status(self):
        with pytest.raises(RequestError) as exc_info:
            Response(404).throw_if_status(404)
        assert exc_info.value.status_code == 404
        assert Response(200).throw_if_status(404).status() == 200

    def test_throw_unless_status(self):
        with pytest.raises(RequestError) as exc_info:
            Response(404).throw_unless_status(200)
        assert exc_info.value.status_code == 404
        assert "Expected status 200 but received 404" in str(exc_info.value)
        assert Response(200).throw_unless_status(200).status() == 200

    def test_status_helpers_chain(self):
        response = Response(201, {}, b'{"id": 7}')
        assert response.throw().throw_unless_status(201).json("id") == 7


class TestKeyedAccess:
    def test_reads_delegate_to_decoded_document(self, user_response: Response):
        assert user_response["name"] == "Ada"
        assert user_response.get("age") == 36
        assert user_response["missing"] is None
        assert "tags" in user_response
        assert "missing" not in user_response
        assert user_response.has("nick")

    def test_writes_are_rejected(self, user_response: Response):
        before = user_response.json()
        snapshot = dict(before)

        with pytest.raises(ImmutableAccessError):
            user_response["name"] = "Grace"
        with pytest.raises(ImmutableAccessError):
            del user_response["name"]

        assert user_response.json() == snapshot

    def test_immutable_error_is_a_type_error(self):
        with pytest.raises(TypeError):
            Response(200, {}, b"{}")["a"] = 1

"""Tests for the whitespace-trimming pipe.

Tests cover:
- Strings in JSON bodies, query strings and form bodies
- Raw body capture keeping the untrimmed bytes
"""

import pytest
from fastapi.testclient import TestClient

from series_lounge.pipes import trim_strings
from series_lounge.pipes.trim import is_json_content_type, trim_urlencoded
from tests.helpers import valid_user


class TestTrimStrings:
    """Tests for trim_strings helper."""

    def test_trims_plain_string(self):
        assert trim_strings("  abc  ") == "abc"

    def test_trims_nested_values(self):
        payload = {"a": " x ", "b": [" y", {"c": "z\t\n"}], "d": 3, "e": None, "f": True}

        assert trim_strings(payload) == {"a": "x", "b": ["y", {"c": "z"}], "d": 3, "e": None, "f": True}

    def test_keys_untouched(self):
        assert trim_strings({" key ": " v "}) == {" key ": "v"}

    def test_inner_whitespace_kept(self):
        assert trim_strings("  two words  ") == "two words"


class TestTrimUrlencoded:
    """Tests for trim_urlencoded helper."""

    def test_trims_values(self):
        assert trim_urlencoded(b"name=%20%20abc%20%20&tag=+x+") == b"name=abc&tag=x"

    def test_unchanged_input_returned_as_is(self):
        raw = b"a=1&b=two+words&c="
        assert trim_urlencoded(raw) is raw

    def test_repeated_keys_kept_in_order(self):
        assert trim_urlencoded(b"t=+a&t=b+") == b"t=a&t=b"


class TestJsonContentType:
    @pytest.mark.parametrize(
        "value",
        ["application/json", "application/json; charset=utf-8", "application/merge-patch+json"],
    )
    def test_json_types(self, value):
        assert is_json_content_type(value)

    @pytest.mark.parametrize("value", [None, "", "text/plain", "multipart/form-data"])
    def test_non_json_types(self, value):
        assert not is_json_content_type(value)


class TestTrimPipe:
    """Tests for trimming through the configured app."""

    def test_trimmed_value_reaches_handler(self, client: TestClient):
        response = client.post(
            "/echo/users",
            json=valid_user(login="  abc  ", email=" viewer@example.com "),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["login"] == "abc"
        assert data["email"] == "viewer@example.com"

    def test_trim_happens_before_validation(self, client: TestClient):
        """'  ab  ' is only two characters once trimmed."""
        response = client.post("/echo/users", json=valid_user(login="  ab  "))

        assert response.status_code == 400
        assert response.json()[0]["field"] == "login"

    def test_whitespace_only_becomes_empty(self, client: TestClient):
        response = client.post("/echo/users", json=valid_user(password="      "))

        assert response.status_code == 400
        assert response.json()[0]["field"] == "password"

    def test_nested_strings_trimmed(self, client: TestClient):
        response = client.post("/echo/tags", json={"tags": [" a ", "b "], "meta": {"k": " v "}})

        assert response.status_code == 200
        assert response.json()["data"] == {"tags": ["a", "b"], "meta": {"k": "v"}}

    def test_raw_body_keeps_original_bytes(self, client: TestClient):
        raw = '{"tags": ["  spaced  "]}'
        response = client.post(
            "/echo/raw", content=raw, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["raw"] == raw
        assert data["parsed"] == ["spaced"]

    def test_query_values_trimmed(self, client: TestClient):
        response = client.get("/echo/search?name=%20%20abc%20%20")

        assert response.status_code == 200
        assert response.json()["data"] == {"name": "abc"}

    def test_form_values_trimmed(self, client: TestClient):
        response = client.post("/echo/form", data={"login": "  abc  ", "note": " two words "})

        assert response.status_code == 200
        assert response.json()["data"] == {"login": "abc", "note": "two words"}

    def test_other_content_types_untouched(self, client: TestClient):
        response = client.post(
            "/echo/form", content=b"login=  abc  ", headers={"Content-Type": "text/plain"}
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"login": "  abc  "}

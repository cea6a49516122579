"""Tests for the verification request builder."""

from __future__ import annotations

import pytest

from authweb import __version__
from authweb.exceptions import ConfigError
from authweb.models import Credentials, VerificationConfig
from authweb.request import (
    FORM_CONTENT_TYPE,
    USER_AGENT,
    VerificationRequest,
    build_request,
    expected_body_length,
)


def _config(**kwargs: object) -> VerificationConfig:
    defaults: dict[str, object] = {
        "url": "https://login.example.com/check?src=ftp",
        "username_param": "u",
        "password_param": "p",
        "failed_string": "Invalid",
    }
    defaults.update(kwargs)
    return VerificationConfig(**defaults)  # type: ignore[arg-type]


class TestBuildRequest:
    def test_body_encodes_values(self, bob: Credentials) -> None:
        request = build_request(_config(), bob)
        assert request.body == "u=bob&p=s+p%26ace"

    def test_url_is_unmodified(self, bob: Credentials) -> None:
        request = build_request(_config(), bob)
        assert request.url == "https://login.example.com/check?src=ftp"

    def test_method_is_post(self, bob: Credentials) -> None:
        assert build_request(_config(), bob).method == "POST"

    def test_headers(self, bob: Credentials) -> None:
        headers = build_request(_config(), bob).headers
        assert headers["User-Agent"] == USER_AGENT == f"authweb/{__version__}"
        assert headers["Content-Type"] == FORM_CONTENT_TYPE

    def test_field_names_are_not_encoded(self) -> None:
        config = _config(username_param="login[name]", password_param="login[pw]")
        request = build_request(config, Credentials(username="a", password="b"))
        assert request.body == "login[name]=a&login[pw]=b"

    def test_body_length_formula(self, bob: Credentials) -> None:
        config = _config(username_param="username", password_param="password")
        request = build_request(config, bob)
        assert len(request.body) == expected_body_length(config, bob)
        assert len(request.body) == len("username") + 1 + 3 + 1 + len("password") + 1 + 9

    def test_required_headers_alone_are_enough(self, bob: Credentials) -> None:
        config = _config(failed_string=None, required_headers=["X-Auth: ok"])
        assert build_request(config, bob).body == "u=bob&p=s+p%26ace"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"url": None},
            {"url": ""},
            {"username_param": None},
            {"password_param": ""},
            {"failed_string": None, "required_headers": []},
        ],
    )
    def test_incomplete_config_raises(self, bob: Credentials, overrides: dict) -> None:
        with pytest.raises(ConfigError, match="Incomplete verification config"):
            build_request(_config(**overrides), bob)


class TestRedaction:
    def test_password_is_masked(self, bob: Credentials) -> None:
        request = build_request(_config(), bob)
        assert request.redacted_body() == "u=bob&p=***"
        assert "ace" not in request.redacted_body()

    def test_username_containing_param_name_is_kept(self) -> None:
        request = build_request(_config(), Credentials(username="&p=x", password="pw"))
        assert request.redacted_body() == "u=%26p%3dx&p=***"

    def test_without_password_param_body_is_returned(self) -> None:
        request = VerificationRequest(url="https://x", body="a=b")
        assert request.redacted_body() == "a=b"

"""CLI tests for the verify, profile, and config commands."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from authweb import __version__
from authweb.app import app
from authweb.client.transport import HttpxTransport
from authweb.config import load_global_config, load_profile, profile_exists, save_profile
from authweb.models import Profile, VerificationConfig


def _save_intranet(**overrides: object) -> None:
    settings: dict[str, object] = {
        "url": "https://login.example.com/check",
        "username_param": "u",
        "password_param": "p",
        "failed_string": "Invalid",
    }
    settings.update(overrides)
    save_profile(Profile(name="intranet", verification=VerificationConfig(**settings)))  # type: ignore[arg-type]


@pytest.fixture
def endpoint(monkeypatch: pytest.MonkeyPatch) -> list[httpx.Request]:
    """Route verification requests to a fake endpoint that knows bob/s p&ace."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.content == b"u=bob&p=s+p%26ace":
            return httpx.Response(200, text="Welcome", headers={"X-Auth": "ok"})
        return httpx.Response(200, text="Invalid login")

    def factory(config=None, transport=None):
        return HttpxTransport(config, transport=httpx.MockTransport(handler))

    monkeypatch.setattr("authweb.client.transport.HttpxTransport", factory)
    return seen


class TestVersion:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"authweb {__version__}" in result.output


class TestVerifyCommand:
    def test_allow(self, cli_runner, isolated_config: Path, endpoint, monkeypatch) -> None:
        _save_intranet()
        monkeypatch.setenv("BOB_PW", "s p&ace")
        result = cli_runner.invoke(app, ["--json", "verify", "bob", "-s", "env:BOB_PW"])
        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record == {"profile": "intranet", "username": "bob", "kind": "allow", "reason": ""}
        assert len(endpoint) == 1

    def test_deny_exit_code(self, cli_runner, isolated_config: Path, endpoint, monkeypatch) -> None:
        _save_intranet()
        monkeypatch.setenv("BOB_PW", "wrong")
        result = cli_runner.invoke(app, ["--json", "verify", "bob", "-s", "env:BOB_PW"])
        assert result.exit_code == 3
        assert json.loads(result.stdout)["kind"] == "deny"

    def test_not_applicable_exit_code(self, cli_runner, isolated_config: Path, endpoint, monkeypatch) -> None:
        _save_intranet(user_regex="^admin")
        monkeypatch.setenv("BOB_PW", "s p&ace")
        result = cli_runner.invoke(app, ["--json", "verify", "bob", "-s", "env:BOB_PW"])
        assert result.exit_code == 8
        assert endpoint == []

    def test_transport_error_exit_code(self, cli_runner, isolated_config: Path, monkeypatch) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        monkeypatch.setattr(
            "authweb.client.transport.HttpxTransport",
            lambda config=None, transport=None: HttpxTransport(config, transport=httpx.MockTransport(handler)),
        )
        _save_intranet()
        monkeypatch.setenv("BOB_PW", "x")
        result = cli_runner.invoke(app, ["verify", "bob", "-s", "env:BOB_PW"])
        assert result.exit_code == 6

    def test_identity_included_on_allow(self, cli_runner, isolated_config: Path, endpoint, monkeypatch) -> None:
        import pwd

        monkeypatch.setattr(
            "authweb.identity.pwd.getpwnam",
            lambda name: pwd.struct_passwd(("ftp", "x", 14, 50, "", "/srv/ftp", "/bin/false")),
        )
        _save_intranet(local_user="ftp")
        monkeypatch.setenv("BOB_PW", "s p&ace")
        result = cli_runner.invoke(app, ["--json", "verify", "bob", "-s", "env:BOB_PW"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["identity"]["name"] == "bob"
        assert json.loads(result.stdout)["identity"]["uid"] == 14

    def test_profile_flag(self, cli_runner, isolated_config: Path, endpoint, monkeypatch) -> None:
        _save_intranet()
        save_profile(Profile(name="other"))
        monkeypatch.setenv("BOB_PW", "s p&ace")
        result = cli_runner.invoke(app, ["--json", "-p", "other", "verify", "bob", "-s", "env:BOB_PW"])
        assert result.exit_code == 8
        assert json.loads(result.stdout)["profile"] == "other"

    def test_missing_password_env_raises_config_error(self, cli_runner, isolated_config: Path) -> None:
        from authweb.exceptions import ConfigError

        _save_intranet()
        result = cli_runner.invoke(app, ["verify", "bob", "-s", "env:AUTHWEB_TEST_UNSET"])
        assert isinstance(result.exception, ConfigError)


class TestProfileCommands:
    def test_create(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "profile", "create", "intranet",
                "--url", "https://login.example.com/check",
                "--username-param", "user",
                "--password-param", "pass",
                "--require-header", "X-Auth: ok",
                "--require-header", "X-Realm: ftp",
                "--user-regex", "^web-",
                "--timeout", "5",
            ],
        )
        assert result.exit_code == 0, result.output
        profile = load_profile("intranet")
        assert profile.verification.required_headers == ["X-Auth: ok", "X-Realm: ftp"]
        assert profile.verification.failed_string is None
        assert profile.verification.user_regex == "^web-"
        assert profile.request.timeout == 5

    def test_create_rejects_bad_regex(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "profile", "create", "bad",
                "--url", "https://x",
                "--username-param", "u",
                "--password-param", "p",
                "--failed-string", "no",
                "--user-regex", "(oops",
            ],
        )
        assert result.exit_code == 2
        assert not profile_exists("bad")

    def test_create_rejects_bad_url(self, cli_runner, isolated_config: Path) -> None:
        args = ["profile", "create", "bad", "--url", "https://[::1/login", "--username-param", "u", "--password-param", "p"]
        assert cli_runner.invoke(app, args).exit_code == 2
        assert not profile_exists("bad")

    def test_create_refuses_overwrite(self, cli_runner, isolated_config: Path) -> None:
        _save_intranet()
        args = ["profile", "create", "intranet", "--url", "https://new", "--username-param", "u", "--password-param", "p"]
        assert cli_runner.invoke(app, args).exit_code == 2
        assert cli_runner.invoke(app, [*args, "--force"]).exit_code == 0
        assert load_profile("intranet").verification.url == "https://new"

    def test_list(self, cli_runner, isolated_config: Path) -> None:
        _save_intranet()
        result = cli_runner.invoke(app, ["--json", "profile", "list"])
        assert json.loads(result.stdout) == [{"name": "intranet", "url": "https://login.example.com/check"}]

    def test_show(self, cli_runner, isolated_config: Path) -> None:
        _save_intranet()
        result = cli_runner.invoke(app, ["--json", "profile", "show", "intranet"])
        assert json.loads(result.stdout)["verification"]["failed_string"] == "Invalid"

    def test_check(self, cli_runner, isolated_config: Path) -> None:
        _save_intranet()
        assert cli_runner.invoke(app, ["profile", "check", "intranet"]).exit_code == 0
        _save_intranet(failed_string=None)
        assert cli_runner.invoke(app, ["profile", "check", "intranet"]).exit_code == 1

    def test_delete(self, cli_runner, isolated_config: Path) -> None:
        _save_intranet()
        result = cli_runner.invoke(app, ["profile", "delete", "intranet", "--force"])
        assert result.exit_code == 0
        assert not profile_exists("intranet")


class TestConfigCommands:
    def test_set_and_show(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "default_profile", "intranet"])
        assert result.exit_code == 0, result.output
        assert load_global_config().default_profile == "intranet"

        result = cli_runner.invoke(app, ["--json", "-q", "config", "show"])
        assert json.loads(result.stdout)["default_profile"] == "intranet"

    def test_set_bool(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "auto_select_single_profile", "false"])
        assert load_global_config().auto_select_single_profile is False

    def test_set_unknown_key(self, cli_runner, isolated_config: Path) -> None:
        assert cli_runner.invoke(app, ["config", "set", "nope", "1"]).exit_code == 2

    def test_set_output_format(self, cli_runner, isolated_config: Path) -> None:
        assert cli_runner.invoke(app, ["config", "set", "output.format", "JSON"]).exit_code == 0
        assert load_global_config().output.format == "json"

    @pytest.mark.parametrize(
        ("key", "value"),
        [("output.format", "yaml"), ("auto_select_single_profile", "maybe")],
    )
    def test_set_bad_value(self, cli_runner, isolated_config: Path, key: str, value: str) -> None:
        assert cli_runner.invoke(app, ["config", "set", key, value]).exit_code == 2

    def test_empty_value_clears_default_profile(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "default_profile", "intranet"])
        assert cli_runner.invoke(app, ["config", "set", "default_profile", ""]).exit_code == 0
        assert load_global_config().default_profile is None

    def test_reset(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "default_profile", "intranet"])
        result = cli_runner.invoke(app, ["config", "reset", "--force"])
        assert result.exit_code == 0
        assert load_global_config().default_profile is None

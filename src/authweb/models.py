"""Canonical Pydantic models shared across all authweb modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`VerificationConfig`, :class:`RequestConfig`, :class:`Profile`,
    :class:`OutputConfig`, and :class:`GlobalConfig`.

**Attempt models** -- created for a single verification attempt and never
persisted:
    :class:`Credentials`, :class:`VerdictKind`, :class:`Verdict`, and
    :class:`LocalIdentity`.

All models use Pydantic v2. Attempt models are frozen: once a verdict is
produced it is never mutated.
"""

from __future__ import annotations

import enum
import re
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


# --- Verification config ---


class VerificationConfig(BaseModel):
    """Settings for delegating a credential check to a remote login endpoint.

    Every field is optional at construction time: an incomplete
    configuration is a legitimate state that makes the web mechanism
    *decline* an attempt (so the next mechanism can try), rather than a
    load-time error. Use :meth:`missing_fields` to find out why a config
    would be declined.

    Example::

        VerificationConfig(
            url="https://intranet.example.com/login",
            username_param="user",
            password_param="pass",
            failed_string="Invalid login",
            required_headers=["X-Auth-Result: ok"],
        )
    """

    url: Optional[str] = Field(default=None, description="Login endpoint to POST credentials to")
    username_param: Optional[str] = Field(
        default=None, description="Form field name carrying the username"
    )
    password_param: Optional[str] = Field(
        default=None, description="Form field name carrying the password"
    )
    user_regex: Optional[str] = Field(
        default=None,
        description="Case-insensitive pattern usernames must match for this mechanism to apply",
    )
    failed_string: Optional[str] = Field(
        default=None, description="Non-empty body substring that marks a failed login"
    )
    required_headers: list[str] = Field(
        default_factory=list,
        description="Full header lines that must all appear in the response",
    )
    local_user: Optional[str] = Field(
        default=None,
        description="Local account used as the template for authenticated users",
    )

    @field_validator("url")
    @classmethod
    def _parse_url(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid url '{value}': {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"invalid url '{value}': expected an http or https address")
        return value

    @field_validator("failed_string")
    @classmethod
    def _reject_empty_failed_string(cls, value: Optional[str]) -> Optional[str]:
        if value == "":
            raise ValueError("failed_string must not be empty; leave it unset instead")
        return value

    @field_validator("user_regex")
    @classmethod
    def _compile_user_regex(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            re.compile(value, re.IGNORECASE)
        except re.error as exc:
            raise ValueError(f"unable to compile regex '{value}': {exc}") from exc
        return value

    def missing_fields(self) -> list[str]:
        """Return the reasons this configuration cannot be used.

        Returns:
            Human-readable problems. An empty list means the configuration
            is complete.
        """
        problems: list[str] = []
        if not self.url:
            problems.append("url is not set")
        if not self.username_param:
            problems.append("username_param is not set")
        if not self.password_param:
            problems.append("password_param is not set")
        if self.failed_string is None and not self.required_headers:
            problems.append("neither failed_string nor required_headers is set")
        return problems

    def is_complete(self) -> bool:
        """Whether the configuration has everything needed to issue a request."""
        return not self.missing_fields()

    def user_matches(self, username: str) -> bool:
        """Test *username* against :attr:`user_regex` (case-insensitive search).

        Returns ``True`` when no pattern is configured.
        """
        if self.user_regex is None:
            return True
        return re.search(self.user_regex, username, re.IGNORECASE) is not None


class RequestConfig(BaseModel):
    """HTTP transport settings applied to the verification request."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(
        default=False, description="Follow 3xx responses instead of evaluating them"
    )


class Profile(BaseModel):
    """A named verification context persisted as one JSON file.

    Loaded and saved by :func:`~authweb.config.load_profile` and
    :func:`~authweb.config.save_profile`. A profile is read-only once
    loaded and may be shared by concurrent attempts.
    """

    name: str = Field(description="Profile name (also the file stem on disk)")
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Global config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/authweb/config.json``.

    Fields here have the lowest precedence and can be overridden by
    environment variables or CLI flags. See
    :func:`~authweb.config.resolve_profile` for the full precedence chain.
    """

    default_profile: Optional[str] = Field(
        default=None, description="Profile used when none is given"
    )
    auto_select_single_profile: bool = Field(
        default=True, description="Use the only profile when exactly one exists"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Attempt models ---


class Credentials(BaseModel):
    """The username/password pair of one verification attempt. Never persisted."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr


class VerdictKind(str, enum.Enum):
    """Outcome of one verification attempt."""

    ALLOW = "allow"
    DENY = "deny"
    ERROR = "error"
    NOT_APPLICABLE = "not_applicable"


class Verdict(BaseModel):
    """Terminal, immutable result of one verification attempt.

    ``DENY`` means the endpoint was consulted and the policy rejected the
    credentials. ``ERROR`` means the endpoint could not be consulted, and
    ``NOT_APPLICABLE`` means this mechanism does not handle the attempt at
    all. Callers treat both of the latter as "defer to the next mechanism".
    The ``reason`` is diagnostic detail for logs only.
    """

    model_config = ConfigDict(frozen=True)

    kind: VerdictKind
    reason: str = ""

    @classmethod
    def allow(cls) -> Verdict:
        return cls(kind=VerdictKind.ALLOW)

    @classmethod
    def deny(cls, reason: str) -> Verdict:
        return cls(kind=VerdictKind.DENY, reason=reason)

    @classmethod
    def error(cls, reason: str) -> Verdict:
        return cls(kind=VerdictKind.ERROR, reason=reason)

    @classmethod
    def not_applicable(cls, reason: str) -> Verdict:
        return cls(kind=VerdictKind.NOT_APPLICABLE, reason=reason)

    @property
    def is_allowed(self) -> bool:
        return self.kind is VerdictKind.ALLOW

    @property
    def is_denied(self) -> bool:
        return self.kind is VerdictKind.DENY

    @property
    def should_defer(self) -> bool:
        """Whether the host should fall through to its next mechanism."""
        return self.kind in (VerdictKind.ERROR, VerdictKind.NOT_APPLICABLE)


class LocalIdentity(BaseModel):
    """A local system identity record for an authenticated remote user.

    Built from the passwd entry of the configured ``local_user`` with the
    name replaced by the authenticated username.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    uid: int
    gid: int
    gecos: str = ""
    home: str
    shell: str

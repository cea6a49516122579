"""Pluggable authentication mechanisms for authweb.

- :class:`Authenticator` -- abstract base class for a mechanism.
- :class:`WebAuthenticator` -- the web endpoint mechanism, backed by
  :func:`~authweb.verify.verify_credentials`.
- :class:`AuthChain` -- consults mechanisms in order until one allows or
  denies.

Typical usage::

    from authweb.auth import AuthChain, WebAuthenticator

    chain = AuthChain()
    chain.register(WebAuthenticator(profile))
    result = chain.authenticate(credentials)
"""

from authweb.auth.base import Authenticator
from authweb.auth.chain import AuthChain, ChainResult
from authweb.auth.web import WebAuthenticator

__all__ = ["Authenticator", "AuthChain", "ChainResult", "WebAuthenticator"]

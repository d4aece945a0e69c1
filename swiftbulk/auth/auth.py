# Copyright 2018-2023 Descartes Labs.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import threading

import requests.auth

from swiftbulk.exceptions import AuthError

AUTH_TOKEN_HEADER = "X-Auth-Token"


class Auth(requests.auth.AuthBase):
    """Attaches the storage token to every outgoing request.

    The token itself is obtained elsewhere (e.g. from a Keystone or TempAuth
    login); this class only applies it.  It is installed as the ``auth`` of
    every :py:class:`~swiftbulk.common.http.Session`, so no client code needs
    to deal with authorization.

    Parameters
    ----------
    token : str, optional
        A static token.  If neither ``token`` nor ``token_provider`` is given,
        the ``auth_token`` setting of the current configuration is used.
    token_provider : callable, optional
        Called without arguments for every request and must return the current
        token.  Use this to plug in token refresh logic.

    Example
    -------
    >>> from swiftbulk.auth import Auth
    >>> auth = Auth(token="AUTH_tk0123456789")  # doctest: +SKIP
    """

    _default_auth = None
    _lock = threading.Lock()

    def __init__(self, token=None, token_provider=None):
        if token is not None and token_provider is not None:
            raise ValueError("Specify either a token or a token provider, not both")

        if token is None and token_provider is None:
            from swiftbulk.config import get_settings

            token = get_settings().auth_token or None

        self._token = token
        self._token_provider = token_provider

    @property
    def token(self):
        """str: The token sent in the ``X-Auth-Token`` header.

        Raises
        ------
        AuthError
            If no token is configured or the provider returned none.
        """
        if self._token_provider is not None:
            token = self._token_provider()
        else:
            token = self._token

        if not token:
            raise AuthError(
                "No storage token available. Set SWIFTBULK_AUTH_TOKEN or pass "
                "a token to Auth()."
            )

        return token

    def __call__(self, request):
        request.headers[AUTH_TOKEN_HEADER] = self.token
        return request

    def __eq__(self, other):
        return (
            isinstance(other, Auth)
            and self._token == other._token
            and self._token_provider == other._token_provider
        )

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        if self._token_provider is not None:
            source = "provider"
        elif self._token:
            source = "static"
        else:
            source = "none"
        return f"{self.__class__.__name__}(token={source})"

    @staticmethod
    def get_default_auth():
        """Retrieve the default authentication.

        This is used whenever no explicit auth is given to a client.
        """
        with Auth._lock:
            if Auth._default_auth is None:
                Auth._default_auth = Auth()

            return Auth._default_auth

    @staticmethod
    def set_default_auth(auth):
        """Change the default authentication to the given instance, or ``None``."""
        if auth is not None and not isinstance(auth, Auth):
            raise ValueError("auth must be an instance of Auth")

        with Auth._lock:
            Auth._default_auth = auth

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

import os
import threading

from urllib3.util.retry import Retry

from swiftbulk.auth import Auth
from swiftbulk.config import get_settings
from swiftbulk.exceptions import ConfigError
from swiftbulk.version import __version__

from .session import HttpHeaderKeys, HttpHeaderValues, Session


class DefaultClientMixin:
    """
    Provides the default client instance to the service classes.
    """

    @classmethod
    def get_default_client(cls):
        """Retrieve the default client.

        This client is used whenever you don't explicitly set the client.
        """

        instance = getattr(cls, "_instance", None)

        if not isinstance(instance, cls):
            instance = cls()
            cls._instance = instance

        return instance

    @classmethod
    def set_default_client(cls, client):
        """Change the default client to the given client.

        This is the client that will be used whenever you don't explicitly set the
        client
        """

        if not isinstance(client, cls):
            raise ValueError(f"client must be an instance of {cls.__name__}")

        cls._instance = client

    @classmethod
    def clear_all_default_clients(cls):
        """Clear all default clients of this class and all its subclasses."""

        cls._instance = None

        for subclass in cls.__subclasses__():
            subclass.clear_all_default_clients()


class _PerThreadSession:
    # Lazily creates one session per thread of every process; a session's
    # connection pool can be shared neither across threads nor after a fork.
    def __init__(self, factory):
        self._factory = factory
        self._pid = os.getpid()
        self._local = threading.local()

    def get(self):
        pid = os.getpid()
        if pid != self._pid:
            self._pid = pid
            self._local = threading.local()

        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = self._factory()
        return session


class Service(DefaultClientMixin):
    """The HTTP service used to communicate with the object store.

    The service owns the timeout and retry policy of its sessions and installs
    the :py:class:`~swiftbulk.auth.Auth` hook so every request is authorized.

    Timeouts default to the ``connect_timeout`` and ``read_timeout`` settings.
    Bulk operations are processed serially by the server, so the read timeout
    is much larger than for ordinary requests.

    The default retry policy only retries establishing a connection, which is
    safe because the request never reached the server.  Reads and error
    statuses are never retried: repeating a bulk request that was already
    (partially) processed would report different per-item outcomes.

    Parameters
    ----------
    url: str, optional
        The storage URL of the account.  Defaults to the ``storage_url`` setting.
    auth: Auth, optional
        A :py:class:`~swiftbulk.auth.Auth` instance.  If not provided, the
        default one is used.
    timeout: float or tuple(float, float), optional
        The (connect, read) timeout.  See `requests timeouts
        <https://requests.readthedocs.io/en/master/user/advanced/#timeouts>`_.
    retries: int or urllib3.util.retry.Retry, optional
        A custom retry policy.
    session_class: class, optional
        The session class to use.  Must be derived from :py:class:`Session`.

    Raises
    ------
    ConfigError
        If no storage URL is given or configured.
    TypeError
        If you try to use a session class that is not derived from :py:class:`Session`.
    """

    _session_class = Session

    def __init__(
        self, url=None, auth=None, timeout=None, retries=None, session_class=None
    ):
        settings = get_settings()

        if url is None:
            url = settings.storage_url

        if not url:
            raise ConfigError(
                "No storage URL configured. Set SWIFTBULK_STORAGE_URL or pass a url."
            )

        if auth is None:
            auth = Auth.get_default_auth()

        if timeout is None:
            timeout = (
                float(settings.connect_timeout),
                float(settings.read_timeout),
            )

        if retries is None:
            retries = self.default_retries(int(settings.connect_retries))

        if session_class is not None:
            if not issubclass(session_class, Session):
                raise TypeError(
                    "The session class must be a subclass of {}.".format(Session)
                )

            self._session_class = session_class

        self.base_url = url
        self.auth = auth
        self.timeout = timeout
        self.retries = retries
        self._session = _PerThreadSession(self._build_session)

    @staticmethod
    def default_retries(connect_retries):
        """The retry policy used when none is given: connection attempts only."""
        return Retry(
            total=connect_retries,
            connect=connect_retries,
            read=0,
            status=0,
            other=0,
            redirect=0,
            raise_on_status=False,
        )

    @property
    def session(self):
        """Session: The session instance used by this service in this thread."""
        return self._session.get()

    def _build_session(self):
        session = self._session_class(
            self.base_url, timeout=self.timeout, retries=self.retries
        )
        session.initialize()
        session.auth = self.auth
        session.headers.update(
            {
                HttpHeaderKeys.Accept: HttpHeaderValues.ApplicationJson,
                HttpHeaderKeys.UserAgent: "{}/{}".format(
                    HttpHeaderValues.SwiftBulk, __version__
                ),
            }
        )
        return session

    def __getstate__(self):
        return {
            "base_url": self.base_url,
            "auth": self.auth,
            "timeout": self.timeout,
            "retries": self.retries,
            "_session_class": self._session_class,
        }

    def __setstate__(self, state):
        for name, value in state.items():
            setattr(self, name, value)

        self._session = _PerThreadSession(self._build_session)

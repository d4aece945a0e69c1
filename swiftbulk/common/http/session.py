# Copyright 2018-2024 Descartes Labs.
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

import logging
from http import HTTPStatus

import requests
import requests.adapters

from swiftbulk.exceptions import (
    BadGatewayError,
    BadRequestError,
    ClientError,
    ConflictError,
    ConnectionFailedError,
    ForbiddenError,
    GatewayTimeoutError,
    MethodNotAllowedError,
    NotFoundError,
    ProxyAuthenticationRequiredError,
    RateLimitError,
    RequestEntityTooLargeError,
    ServerError,
    UnauthorizedError,
)

# Disable warnings for retries etc
logging.getLogger("urllib3").setLevel(logging.ERROR)
logging.getLogger("urllib3").propagate = False

logger = logging.getLogger(__name__)


class HttpMountProtocol:
    HTTP = "http://"
    HTTPS = "https://"


class HttpRequestMethod:
    DELETE = "DELETE"
    PUT = "PUT"


class HttpHeaderKeys:
    Accept = "Accept"
    ContentType = "Content-Type"
    DetectContentType = "X-Detect-Content-Type"
    ProxyAuthenticate = "Proxy-Authenticate"
    RetryAfter = "Retry-After"
    UserAgent = "User-Agent"


class HttpHeaderValues:
    ApplicationJson = "application/json"
    TextPlain = "text/plain"
    SwiftBulk = "swiftbulk"


_ERRORS_BY_STATUS = {
    HTTPStatus.BAD_REQUEST: BadRequestError,
    HTTPStatus.UNAUTHORIZED: UnauthorizedError,
    HTTPStatus.FORBIDDEN: ForbiddenError,
    HTTPStatus.METHOD_NOT_ALLOWED: MethodNotAllowedError,
    HTTPStatus.CONFLICT: ConflictError,
    HTTPStatus.REQUEST_ENTITY_TOO_LARGE: RequestEntityTooLargeError,
}


class Session(requests.Session):
    """The HTTP Session that performs the actual HTTP request.

    This is the base session that is used for all bulk HTTP calls which
    itself is derived from `requests.Session
    <https://requests.readthedocs.io/en/master/api/#requests.Session>`_.

    You cannot control its instantiation, but you can derive from this class
    and pass it as the class to use when you instantiate a
    :py:class:`~swiftbulk.common.http.Service`.

    Notes
    =====
    Session is not thread safe due to the Adapter and the connection pool which it uses.
    Instead, you should ensure that each thread is using it's own session instead of
    trying to share one.

    Parameters
    ----------
    base_url: str
        The URL prefix for all requests, normally the storage URL of the account.
    timeout: int or tuple(int, int)
        See `requests timeouts
        <https://requests.readthedocs.io/en/master/user/advanced/#timeouts>`_.
    retries: int or urllib3.util.retry.Retry
        The retry policy of the mounted adapters.
    """

    ATTR_BASE_URL = "base_url"
    ATTR_TIMEOUT = "timeout"

    # Adapts the custom pickling protocol of requests.Session
    __attrs__ = requests.Session.__attrs__ + [ATTR_BASE_URL, ATTR_TIMEOUT]

    def __init__(self, base_url="", timeout=None, retries=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        super(Session, self).__init__()

        if retries is not None:
            self.mount(
                HttpMountProtocol.HTTP, requests.adapters.HTTPAdapter(max_retries=retries)
            )
            self.mount(
                HttpMountProtocol.HTTPS,
                requests.adapters.HTTPAdapter(max_retries=retries),
            )

    def initialize(self):
        """Initialize the :py:class:`Session` instance

        You can override this method in a derived class to add your own initialization.
        This method does nothing in the base class.
        """

        pass

    def request(self, method, url, headers=None, **kwargs):
        """Sends an HTTP request and emits typed errors.

        Parameters
        ----------
        method: str
            The HTTP method to use.
        url: str
            The URL to send the request to, relative to :py:attr:`base_url`.
        headers: dict
            The Headers to set on the request.
        kwargs: dict
            Additional arguments.  See `requests.request
            <https://requests.readthedocs.io/en/master/api/#requests.request>`_.

        Returns
        -------
        Response
            A :py:class:`request.Response` object.

        Raises
        ------
        ConnectionFailedError
            The connection could not be established or the request timed out.
        BadRequestError
            A 400 HTTP response status code was encountered.
        UnauthorizedError
            A 401 HTTP response status code was encountered.
        ForbiddenError
            A 403 HTTP response status code was encountered.
        NotFoundError
            A 404 HTTP response status code was encountered.
        MethodNotAllowedError
            A 405 HTTP response status code was encountered.
        ProxyAuthenticationRequiredError
            A 407 HTTP response status code was encountered.
        ConflictError
            A 409 HTTP response status code was encountered.
        RequestEntityTooLargeError
            A 413 HTTP response status code was encountered.
        RateLimitError
            A 429 HTTP response status code was encountered.
        BadGatewayError
            A 502 HTTP response status code was encountered.
        GatewayTimeoutError
            A 504 HTTP response status code was encountered.
        ~swiftbulk.exceptions.ServerError
            Any HTTP response status code of 500 or larger that was not covered
            above.  The original HTTP response status code can be found in the
            attribute :py:attr:`original_status`.

        Every error raised for an HTTP response carries that response in its
        ``response`` attribute.
        """

        if self.timeout and self.ATTR_TIMEOUT not in kwargs:
            kwargs[self.ATTR_TIMEOUT] = self.timeout

        request_url = self.base_url + url

        try:
            resp = super(Session, self).request(
                method,
                request_url,
                headers=headers,
                **kwargs,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ConnectionFailedError(
                "{} {} failed: {}".format(method, request_url, e)
            ) from e

        logger.debug("%s %s returned %s", method, request_url, resp.status_code)
        self.raise_for_status(resp, method, url)
        return resp

    @staticmethod
    def raise_for_status(resp, method="", url=""):
        """Raise the typed error corresponding to a response status, if any."""
        status = resp.status_code

        if HTTPStatus.OK <= status < HTTPStatus.BAD_REQUEST:
            return
        elif status in _ERRORS_BY_STATUS:
            raise _ERRORS_BY_STATUS[status](resp.text, response=resp)
        elif status == HTTPStatus.NOT_FOUND:
            text = resp.text
            if not text:
                text = "{} {} {}".format(HTTPStatus.NOT_FOUND.value, method, url)
            raise NotFoundError(text, response=resp)
        elif status == HTTPStatus.PROXY_AUTHENTICATION_REQUIRED:
            raise ProxyAuthenticationRequiredError(
                resp.text,
                response=resp,
                proxy_authenticate=resp.headers.get(HttpHeaderKeys.ProxyAuthenticate),
            )
        elif status == HTTPStatus.TOO_MANY_REQUESTS:
            raise RateLimitError(
                resp.text,
                response=resp,
                retry_after=resp.headers.get(HttpHeaderKeys.RetryAfter),
            )
        elif status < HTTPStatus.INTERNAL_SERVER_ERROR:
            ex = ClientError(resp.text, response=resp)
            ex.status = status
            raise ex
        elif status == HTTPStatus.BAD_GATEWAY:
            raise BadGatewayError(resp.text, response=resp)
        elif status == HTTPStatus.GATEWAY_TIMEOUT:
            raise GatewayTimeoutError(
                "Your request timed out on the server. "
                "Consider sending smaller batches or raising the read timeout.",
                response=resp,
            )
        else:
            raise ServerError(resp.text, response=resp, original_status=status)

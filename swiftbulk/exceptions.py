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


"""Exceptions raised by the bulk client.

Partial failure of a bulk operation is never raised; it is returned as a
:py:class:`~swiftbulk.bulk.BulkOperationOutcome` with a non-empty
``errors`` list.
"""


class ConfigError(Exception):
    """Configuration error during initial configuration of the library."""

    pass


class AuthError(Exception):
    """Authentication error, improperly supplied credentials."""

    pass


class EncodingError(ValueError):
    """The caller supplied a request that cannot be encoded.

    Raised before any network call, e.g. for an unknown archive format or an
    empty path in a bulk delete.
    """

    pass


class ResponseDecodeError(Exception):
    """A response body was present but not in the expected outcome shape.

    The request may have partially succeeded on the server; there is no way
    to know which items were processed.

    Attributes
    ==========
    status : int
        The HTTP status code of the response.
    body : str
        The undecodable response body.
    """

    def __init__(self, message, status=None, body=None):
        super(ResponseDecodeError, self).__init__(message)
        self.status = status
        self.body = body


class TransportError(Exception):
    """The request could not be completed or was rejected by the service.

    Attributes
    ==========
    status : int
        The status code of the error response, if a response was received.
    response : Optional[requests.Response]
        The response that caused the error, if any.
    """

    status = None

    def __init__(self, message="", response=None):
        super(TransportError, self).__init__(message)
        self.response = response


class ConnectionFailedError(TransportError):
    """No response was received, e.g. connection refused or timed out."""

    pass


class ClientError(TransportError):
    """Base class for requests rejected because of the request itself."""

    status = 400


class BadRequestError(ClientError):
    """Client request with incorrect parameters."""

    status = 400


class UnauthorizedError(ClientError):
    """Client request lacks a valid authentication token."""

    status = 401


class ForbiddenError(ClientError):
    """Client request is not permitted for this token."""

    status = 403


class NotFoundError(ClientError):
    """Resource not found."""

    status = 404


class MethodNotAllowedError(ClientError):
    """Client request used an HTTP method the endpoint does not support.

    Usually means the bulk middleware is not enabled on the service.
    """

    status = 405


class ProxyAuthenticationRequiredError(ClientError):
    """Client request needs proxy authentication.

    Attributes
    ==========
    proxy_authenticate : Optional[str]
        A `ProxyAuthenticate <https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Proxy-Authenticate>`_
        header if found in the response.
    """

    status = 407

    def __init__(self, message="", response=None, proxy_authenticate=None):
        super(ProxyAuthenticationRequiredError, self).__init__(
            message, response=response
        )
        self.proxy_authenticate = proxy_authenticate


class ConflictError(ClientError):
    """Client request conflicts with existing state."""

    status = 409


class RequestEntityTooLargeError(ClientError):
    """Client request body exceeds what the service accepts."""

    status = 413


class RateLimitError(ClientError):
    """
    Client request exceeds rate limits.

    The retry_after member will contain any time limit returned
    in the response.
    """

    status = 429

    def __init__(self, message="", response=None, retry_after=None):
        """
        Construct a new instance.

        :param str message: The error message.
        :param requests.Response response: The response, if any.
        :type retry_after: str or None
        :param retry_after: An indication of a
            ``retry-after`` timeout specified by the error response.
        """
        super(RateLimitError, self).__init__(message, response=response)
        self.retry_after = retry_after


class ServerError(TransportError):
    """Server or service failure.

    The original HTTP response status code can be found in
    :py:attr:`original_status`.
    """

    status = 500

    def __init__(self, message="", response=None, original_status=None):
        super(ServerError, self).__init__(message, response=response)
        self.original_status = original_status or self.status


class BadGatewayError(ServerError):
    """A gateway or the bulk middleware reported failed subrequests."""

    status = 502


class GatewayTimeoutError(ServerError):
    """Timeout from the gateway after failing to route request to destination service."""

    status = 504

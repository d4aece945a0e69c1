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

"""Turns bulk middleware responses into :py:class:`BulkOperationOutcome` values.

The HTTP status of a bulk response says little about the outcome.  The
middleware starts streaming its response (usually ``200 OK``) before the batch
is processed, and reports the actual result inside the JSON body::

    {"Number Deleted": 2,
     "Number Not Found": 0,
     "Response Status": "400 Bad Request",
     "Response Body": "",
     "Errors": [["c3", "404 Not Found"]]}

Gateways in front of the service may also replace the status with a ``5xx``
while passing the body through.  Therefore:

* responses rejected for authorization, a missing endpoint or rate limiting
  are always errors;
* any other response whose body parses into the outcome shape is
  authoritative, whatever its status;
* a non-``2xx`` response without such a body is a transport error;
* a ``2xx`` response without such a body is a :py:class:`ResponseDecodeError`.
"""

import logging
from http import HTTPStatus

from pydantic import ValidationError

from swiftbulk.common.http import Session
from swiftbulk.exceptions import ResponseDecodeError, TransportError

from .models import BulkOperationOutcome

logger = logging.getLogger(__name__)

# A response with one of these statuses was rejected before any item was
# processed, so its body is never an outcome.
REJECTION_STATUSES = frozenset(
    [
        HTTPStatus.UNAUTHORIZED,
        HTTPStatus.FORBIDDEN,
        HTTPStatus.NOT_FOUND,
        HTTPStatus.METHOD_NOT_ALLOWED,
        HTTPStatus.PROXY_AUTHENTICATION_REQUIRED,
        HTTPStatus.TOO_MANY_REQUESTS,
    ]
)


def is_rejection(status):
    """Whether a response status means the whole request was rejected."""
    return status in REJECTION_STATUSES


def parse_outcome(body, body_model, target=""):
    """Parse a response body into an outcome.

    Parameters
    ----------
    body : str or bytes
        The response body.  Leading whitespace, which the server sends to keep
        the connection alive while processing, is ignored.
    body_model : type
        The :py:class:`~swiftbulk.bulk.models.BulkResponseBody` subclass
        describing the body of the operation.
    target : str
        The request target, used as identifier when the server failed the
        request as a whole without naming an item.

    Returns
    -------
    BulkOperationOutcome

    Raises
    ------
    ResponseDecodeError
        If the body is empty or not in the expected shape.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ResponseDecodeError(
                "Bulk response body is not valid UTF-8", body=body
            ) from e

    body = (body or "").strip()

    if not body:
        raise ResponseDecodeError("Bulk response body is empty", body=body)

    try:
        parsed = body_model.model_validate_json(body)
    except ValidationError as e:
        raise ResponseDecodeError(
            "Bulk response body could not be decoded: {}".format(e), body=body
        ) from e

    errors = list(parsed.errors)

    if not errors and not _is_success_status(parsed.response_status):
        # The whole request failed, e.g. "Max delete failures exceeded".
        reason = parsed.response_status
        if parsed.response_body:
            reason = "{}: {}".format(reason, parsed.response_body)
        errors.append((target, reason))

    return BulkOperationOutcome.from_results(
        parsed.processed,
        errors,
        not_found=parsed.not_found,
        response_status=parsed.response_status or None,
        response_body=parsed.response_body,
    )


def interpret_response(send, body_model, target=""):
    """Send a bulk request and interpret its response.

    Parameters
    ----------
    send : callable
        Sends the request and returns the :py:class:`requests.Response`.  It
        raises a :py:class:`~swiftbulk.exceptions.TransportError` for an
        unsuccessful status, as :py:class:`~swiftbulk.common.http.Session` does.
    body_model : type
        The :py:class:`~swiftbulk.bulk.models.BulkResponseBody` subclass
        describing the body of the operation.
    target : str
        The request target, see :py:func:`parse_outcome`.

    Returns
    -------
    BulkOperationOutcome

    Raises
    ------
    TransportError
        If the request failed or was rejected and no outcome was reported.
    ResponseDecodeError
        If a successful response didn't contain a decodable outcome.
    """
    try:
        response = send()
    except TransportError as error:
        response = error.response

        if response is None or is_rejection(response.status_code):
            raise

        try:
            outcome = parse_outcome(response.content, body_model, target=target)
        except ResponseDecodeError:
            raise error from None

        logger.debug(
            "Using the outcome reported with HTTP status %s", response.status_code
        )
        return outcome

    try:
        return parse_outcome(response.content, body_model, target=target)
    except ResponseDecodeError as e:
        e.status = response.status_code
        raise


def interpret(response, body_model, target=""):
    """Interpret an already received response.

    Same as :py:func:`interpret_response` for a response that was obtained
    without status checking, e.g. from a plain :py:class:`requests.Session`.
    """

    def send():
        Session.raise_for_status(response)
        return response

    return interpret_response(send, body_model, target=target)


def _is_success_status(status_line):
    # An absent status line is treated as success; the errors decide.
    if not status_line:
        return True

    try:
        code = int(status_line.split(None, 1)[0])
    except ValueError:
        return False

    return HTTPStatus.OK <= code < HTTPStatus.MULTIPLE_CHOICES

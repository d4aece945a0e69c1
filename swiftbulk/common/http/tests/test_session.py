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

import unittest

import pytest
import requests
import responses

from swiftbulk.exceptions import (
    BadGatewayError,
    BadRequestError,
    ClientError,
    ConflictError,
    ConnectionFailedError,
    GatewayTimeoutError,
    NotFoundError,
    ProxyAuthenticationRequiredError,
    RateLimitError,
    RequestEntityTooLargeError,
    ServerError,
)

from ..session import HttpHeaderKeys, Session


def make_response(status, text="", headers=None):
    response = requests.Response()
    response.status_code = status
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


class TestRaiseForStatus(unittest.TestCase):
    def test_success(self):
        for status in (200, 201, 204, 302):
            Session.raise_for_status(make_response(status))

    def test_client_errors(self):
        for status, error in [
            (400, BadRequestError),
            (409, ConflictError),
            (413, RequestEntityTooLargeError),
        ]:
            response = make_response(status, "bad")
            with pytest.raises(error) as info:
                Session.raise_for_status(response)
            assert info.value.response is response
            assert str(info.value) == "bad"

    def test_unknown_client_error(self):
        with pytest.raises(ClientError) as info:
            Session.raise_for_status(make_response(411))
        assert info.value.status == 411

    def test_not_found_message(self):
        with pytest.raises(NotFoundError) as info:
            Session.raise_for_status(make_response(404), "DELETE", "/?bulk-delete")
        assert str(info.value) == "404 DELETE /?bulk-delete"

    def test_rate_limit(self):
        with pytest.raises(RateLimitError) as info:
            Session.raise_for_status(
                make_response(429, headers={HttpHeaderKeys.RetryAfter: "30"})
            )
        assert info.value.retry_after == "30"

    def test_proxy_authentication(self):
        with pytest.raises(ProxyAuthenticationRequiredError) as info:
            Session.raise_for_status(
                make_response(
                    407, headers={HttpHeaderKeys.ProxyAuthenticate: "Basic"}
                )
            )
        assert info.value.proxy_authenticate == "Basic"

    def test_server_errors(self):
        with pytest.raises(BadGatewayError):
            Session.raise_for_status(make_response(502))

        with pytest.raises(GatewayTimeoutError):
            Session.raise_for_status(make_response(504))

        with pytest.raises(ServerError) as info:
            Session.raise_for_status(make_response(503))
        assert info.value.status == 500
        assert info.value.original_status == 503


class TestSession(unittest.TestCase):
    url = "http://localhost:8080/v1/AUTH_test"

    @responses.activate
    def test_base_url(self):
        responses.add(responses.GET, self.url + "/cont", body="")
        session = Session(self.url + "/")

        session.request("GET", "/cont")

        assert responses.calls[0].request.url == self.url + "/cont"

    @responses.activate
    def test_caller_headers_are_not_modified(self):
        responses.add(responses.PUT, self.url + "/cont", body="")
        session = Session(self.url)
        headers = {"X-Object-Meta-Color": "blue"}

        session.request("PUT", "/cont", headers=headers)

        assert headers == {"X-Object-Meta-Color": "blue"}
        assert responses.calls[0].request.headers["X-Object-Meta-Color"] == "blue"

    @responses.activate
    def test_error_status(self):
        responses.add(responses.DELETE, self.url + "/", status=409, body="busy")
        session = Session(self.url)

        with pytest.raises(ConflictError) as info:
            session.request("DELETE", "/")
        assert info.value.response.status_code == 409

    @responses.activate
    def test_connection_failure(self):
        responses.add(
            responses.GET, self.url + "/", body=requests.ConnectionError("refused")
        )
        session = Session(self.url)

        with pytest.raises(ConnectionFailedError) as info:
            session.request("GET", "/")
        assert info.value.response is None
        assert isinstance(info.value.__cause__, requests.ConnectionError)

    @responses.activate
    def test_timeout_failure(self):
        responses.add(responses.GET, self.url + "/", body=requests.ReadTimeout())
        session = Session(self.url, timeout=(1, 2))

        with pytest.raises(ConnectionFailedError):
            session.request("GET", "/")

    def test_retries_are_mounted(self):
        session = Session(self.url, retries=3)

        adapter = session.get_adapter(self.url)
        assert adapter.max_retries.total == 3

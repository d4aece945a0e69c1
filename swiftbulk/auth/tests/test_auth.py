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

import pickle
import threading
import unittest

import pytest
import requests
import responses

from swiftbulk.exceptions import AuthError

from ..auth import AUTH_TOKEN_HEADER, Auth


class TestAuth(unittest.TestCase):
    def tearDown(self):
        Auth.set_default_auth(None)

    def test_static_token(self):
        auth = Auth(token="AUTH_tk1")
        assert auth.token == "AUTH_tk1"

    def test_token_from_settings(self):
        auth = Auth()
        assert auth.token == "testing-token"

    def test_token_provider(self):
        tokens = iter(["first", "second"])
        auth = Auth(token_provider=lambda: next(tokens))

        assert auth.token == "first"
        assert auth.token == "second"

    def test_token_and_provider(self):
        with pytest.raises(ValueError):
            Auth(token="t", token_provider=lambda: "t")

    def test_missing_token(self):
        with pytest.raises(AuthError):
            Auth(token="").token

        with pytest.raises(AuthError):
            Auth(token_provider=lambda: None).token

    @responses.activate
    def test_header(self):
        url = "http://localhost:8080/v1/AUTH_test/cont"
        responses.add(responses.GET, url, body="")

        requests.get(url, auth=Auth(token="AUTH_tk1"))

        assert responses.calls[0].request.headers[AUTH_TOKEN_HEADER] == "AUTH_tk1"

    def test_equality(self):
        assert Auth(token="a") == Auth(token="a")
        assert Auth(token="a") != Auth(token="b")
        assert Auth(token="a") != "a"

    def test_repr_hides_token(self):
        assert "secret" not in repr(Auth(token="secret"))
        assert repr(Auth(token="secret")) == "Auth(token=static)"
        assert repr(Auth(token_provider=lambda: "x")) == "Auth(token=provider)"

    def test_pickle(self):
        auth = pickle.loads(pickle.dumps(Auth(token="AUTH_tk1")))
        assert auth.token == "AUTH_tk1"

    def test_default_auth(self):
        auth = Auth.get_default_auth()
        assert auth is Auth.get_default_auth()

        custom = Auth(token="custom")
        Auth.set_default_auth(custom)
        assert Auth.get_default_auth() is custom

        with pytest.raises(ValueError):
            Auth.set_default_auth("custom")

    def test_default_auth_threads(self):
        results = []

        def get():
            results.append(Auth.get_default_auth())

        threads = [threading.Thread(target=get) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(auth is results[0] for auth in results)

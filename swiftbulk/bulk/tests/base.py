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

import re
import unittest

import responses

from swiftbulk.auth import Auth

from ..bulk_client import BulkClient

token = "AUTH_tk0123456789"


class ClientTestCase(unittest.TestCase):
    def setUp(self):
        self.url = "http://localhost:8080/v1/AUTH_test"
        self.client = BulkClient(url=self.url, auth=Auth(token=token))
        self.match_url = re.compile(re.escape(self.url))

    def mock_response(self, method, json=None, status=200, **kwargs):
        responses.add(method, self.match_url, json=json, status=status, **kwargs)

    def get_request(self, index):
        return responses.calls[index].request

    def get_request_body(self, index):
        body = responses.calls[index].request.body
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        return body

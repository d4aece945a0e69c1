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

from ..encoding import encode_path_list, escape_path


class TestEscapePath(unittest.TestCase):
    def test_keeps_fragment_characters(self):
        assert escape_path("container/object") == "container/object"
        assert escape_path("a-b_c.d~e") == "a-b_c.d~e"
        assert escape_path("a:b@c!$'()*,;=+?") == "a:b@c!$'()*,;=+?"

    def test_escapes_other_characters(self):
        assert escape_path("c2 space") == "c2%20space"
        assert escape_path("a&b") == "a%26b"
        assert escape_path("a#b") == "a%23b"
        assert escape_path("100%") == "100%25"
        assert escape_path('a"b<c>') == "a%22b%3Cc%3E"

    def test_escapes_control_characters(self):
        assert escape_path("a\nb") == "a%0Ab"
        assert escape_path("a\r\tb") == "a%0D%09b"

    def test_escapes_non_ascii_as_utf8(self):
        assert escape_path("café/menü") == "caf%C3%A9/men%C3%BC"


class TestEncodePathList(unittest.TestCase):
    def test_example(self):
        body = encode_path_list(["c1", "c1/o1", "c2 space"])
        assert body == "c1\nc1/o1\nc2%20space"

    def test_empty(self):
        assert encode_path_list([]) == ""

    def test_single_path_has_no_separator(self):
        body = encode_path_list(["container/object"])
        assert "\n" not in body
        assert body == "container/object"

    def test_split_yields_escaped_paths_in_order(self):
        paths = ["z", "a b", "m/n&o", "a b", "line\nbreak", "über"]
        segments = encode_path_list(paths).split("\n")

        assert len(segments) == len(paths)
        assert segments == [escape_path(path) for path in paths]

    def test_newline_in_path_does_not_break_framing(self):
        body = encode_path_list(["one\ntwo", "three"])
        assert body.split("\n") == ["one%0Atwo", "three"]

    def test_no_trimming_or_dedup(self):
        body = encode_path_list([" c ", " c "])
        assert body == "%20c%20\n%20c%20"

    def test_accepts_any_iterable(self):
        assert encode_path_list(p for p in ("a", "b")) == "a\nb"

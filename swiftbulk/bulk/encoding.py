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

from typing import Iterable
from urllib.parse import quote

PATH_SEPARATOR = "\n"

# Characters allowed unescaped in a URL fragment besides the ones ``quote``
# never escapes (letters, digits and ``-._~``).  ``&`` is escaped as well.
FRAGMENT_SAFE_CHARS = "!$'()*,;=:@+/?"


def escape_path(path: str) -> str:
    """Percent-escape a single path using URL fragment escaping rules.

    Characters valid in a URL fragment, including ``/``, are kept; all others,
    including space, ``&``, ``%``, newlines and other control characters, are
    escaped.  Non-ASCII characters are escaped as their UTF-8 octets.

    >>> escape_path("c2 space")
    'c2%20space'
    >>> escape_path("container/object")
    'container/object'
    """
    return quote(path, safe=FRAGMENT_SAFE_CHARS)


def encode_path_list(paths: Iterable[str]) -> str:
    """Encode paths into the body of a bulk delete request.

    Every path is escaped with :py:func:`escape_path` and the results are
    joined by a single newline, in the given order.  There is no trailing
    newline; an empty sequence yields an empty body.  Entries are never
    reordered, deduplicated or trimmed.

    Parameters
    ----------
    paths : iterable(str)
        Paths of the form ``container`` or ``container/object``.

    Returns
    -------
    str
        The ``text/plain`` request body.
    """
    return PATH_SEPARATOR.join(escape_path(path) for path in paths)

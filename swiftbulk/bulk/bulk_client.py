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

import logging
from urllib.parse import quote

from swiftbulk.common.http import (
    HttpHeaderKeys,
    HttpHeaderValues,
    HttpRequestMethod,
    Service,
)
from swiftbulk.config import get_settings
from swiftbulk.exceptions import EncodingError

from .encoding import encode_path_list
from .interpreter import interpret_response
from .models import (
    ArchiveFormat,
    BulkDeleteResponseBody,
    BulkOperationOutcome,
    ExtractArchiveResponseBody,
)

logger = logging.getLogger(__name__)

BULK_DELETE_QUERY = "bulk-delete"
EXTRACT_ARCHIVE_QUERY = "extract-archive"


class BulkClient(Service):
    """Client for the Bulk Operations middleware of a Swift object store.

    Both operations send a single request that the server processes item by
    item, serially.  A batch may therefore take a long time, and it is not
    atomic: when the server fails halfway, earlier items are processed and
    later ones are not.  The outcome of every item is reported in the returned
    :py:class:`~swiftbulk.bulk.BulkOperationOutcome`; a partial failure is not
    an exception.

    Requests are never retried, since a repeated batch would report different
    per-item outcomes.

    Parameters
    ----------
    url : str, optional
        The storage URL of the account, e.g.
        ``https://swift.example.com/v1/AUTH_account``.  Defaults to the
        ``storage_url`` setting.
    auth : Auth, optional
        The :py:class:`~swiftbulk.auth.Auth` attaching the storage token.
    max_deletes_per_request : int, optional
        The largest batch :py:meth:`bulk_delete` sends.  Defaults to the
        ``max_deletes_per_request`` setting, which matches the server default.
    kwargs : dict
        Additional arguments for :py:class:`~swiftbulk.common.http.Service`,
        e.g. ``timeout``.

    Example
    -------
    >>> from swiftbulk.bulk import BulkClient
    >>> client = BulkClient("https://swift.example.com/v1/AUTH_acc")  # doctest: +SKIP
    >>> outcome = client.bulk_delete(["photos/cat.jpg", "photos"])  # doctest: +SKIP
    >>> for identifier, reason in outcome.errors:  # doctest: +SKIP
    ...     print(identifier, reason)
    """

    def __init__(self, url=None, auth=None, max_deletes_per_request=None, **kwargs):
        if max_deletes_per_request is None:
            max_deletes_per_request = int(get_settings().max_deletes_per_request)

        self.max_deletes_per_request = max_deletes_per_request

        super(BulkClient, self).__init__(url, auth=auth, **kwargs)

    def bulk_delete(self, paths, timeout=None):
        """Delete many objects or containers in a single request.

        Parameters
        ----------
        paths : iterable(str)
            Paths of the form ``container/object`` for an object, or
            ``container`` for a container, which must be empty by the time it
            is deleted.  The order is preserved.  Items that don't exist are
            counted in :py:attr:`~BulkOperationOutcome.not_found` and are not
            errors.
        timeout : float or tuple(float, float), optional
            Overrides the timeout of the client for this request.

        Returns
        -------
        BulkOperationOutcome
            :py:attr:`~BulkOperationOutcome.processed` is the number of items
            deleted.  An empty ``paths`` returns a successful outcome without
            contacting the server.

        Raises
        ------
        EncodingError
            If a path is empty or there are more paths than
            ``max_deletes_per_request``.
        ~swiftbulk.exceptions.TransportError
            If the request failed or was rejected.
        ~swiftbulk.exceptions.ResponseDecodeError
            If the response didn't contain a decodable outcome.
        """
        if isinstance(paths, (str, bytes)):
            raise TypeError("paths must be an iterable of paths, not a single path")

        paths = list(paths)

        for index, path in enumerate(paths):
            if not isinstance(path, str):
                raise TypeError(
                    "path at position {} is not a string: {!r}".format(index, path)
                )
            if not path:
                raise EncodingError("path at position {} is empty".format(index))

        if not paths:
            return BulkOperationOutcome.from_results(0, not_found=0)

        if len(paths) > self.max_deletes_per_request:
            raise EncodingError(
                "Too many paths to delete in one request: {} > {}".format(
                    len(paths), self.max_deletes_per_request
                )
            )

        body = encode_path_list(paths).encode("utf-8")
        logger.debug("Deleting %d paths in bulk", len(paths))

        def send():
            return self.session.request(
                HttpRequestMethod.DELETE,
                "/?{}".format(BULK_DELETE_QUERY),
                data=body,
                headers={HttpHeaderKeys.ContentType: HttpHeaderValues.TextPlain},
                **self._timeout_kwargs(timeout),
            )

        outcome = interpret_response(send, BulkDeleteResponseBody)
        self._log_outcome("Bulk delete", outcome)
        return outcome

    def extract_archive(
        self,
        path,
        archive,
        format=ArchiveFormat.TAR,
        content_type=None,
        detect_content_type=False,
        headers=None,
        timeout=None,
    ):
        """Upload an archive that the server expands into objects.

        Every regular file in the archive becomes the object
        ``{path}/{member path}``.  If ``path`` is empty, the first component of
        every member path names the container, which is created if needed;
        files at the top level of the archive are ignored.

        Parameters
        ----------
        path : str
            The container, or pseudo-directory within a container, to extract
            into.  An empty string extracts at the root of the account.
        archive : bytes or file-like
            The archive.  It is sent as is; its structure is not validated.
        format : ArchiveFormat or str
            One of ``tar``, ``tar.gz`` or ``tar.bz2``.
        content_type : str, optional
            The content type assigned to every extracted object.  By default
            no content type is sent.
        detect_content_type : bool
            Ask the server to derive the content type of each object from its
            file extension.
        headers : dict, optional
            Additional headers copied onto every extracted object, e.g.
            ``X-Object-Meta-*`` or ``X-Delete-After``.
        timeout : float or tuple(float, float), optional
            Overrides the timeout of the client for this request.

        Returns
        -------
        BulkOperationOutcome
            :py:attr:`~BulkOperationOutcome.processed` is the number of files
            created; error identifiers are the paths of the archive members.

        Raises
        ------
        EncodingError
            If the format is not supported.
        ~swiftbulk.exceptions.TransportError
            If the request failed or was rejected.
        ~swiftbulk.exceptions.ResponseDecodeError
            If the response didn't contain a decodable outcome.
        """
        try:
            format = ArchiveFormat(format)
        except ValueError:
            raise EncodingError(
                "Unsupported archive format {!r}, must be one of: {}".format(
                    format, ", ".join(f.value for f in ArchiveFormat)
                )
            ) from None

        path = (path or "").lstrip("/")
        request_headers = dict(headers or {})

        if content_type is not None:
            request_headers[HttpHeaderKeys.ContentType] = content_type

        if detect_content_type:
            request_headers[HttpHeaderKeys.DetectContentType] = "true"

        logger.debug("Extracting %s archive to '%s'", format, path)

        def send():
            return self.session.request(
                HttpRequestMethod.PUT,
                "/{}".format(quote(path)),
                params={EXTRACT_ARCHIVE_QUERY: format.value},
                data=archive,
                headers=request_headers,
                **self._timeout_kwargs(timeout),
            )

        outcome = interpret_response(send, ExtractArchiveResponseBody, target=path)
        self._log_outcome("Archive extraction", outcome)
        return outcome

    @staticmethod
    def _timeout_kwargs(timeout):
        return {} if timeout is None else {"timeout": timeout}

    @staticmethod
    def _log_outcome(operation, outcome):
        if outcome.succeeded:
            logger.debug("%s: %s", operation, outcome)
        else:
            logger.warning("%s: %s", operation, outcome)

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

from typing import List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from strenum import StrEnum


class ArchiveFormat(StrEnum):
    """The archive formats the server can extract.

    Attributes
    ----------
    TAR : enum
        An uncompressed tar archive.
    TAR_GZ : enum
        A gzip compressed tar archive.
    TAR_BZ2 : enum
        A bzip2 compressed tar archive.
    """

    TAR = "tar"
    TAR_GZ = "tar.gz"
    TAR_BZ2 = "tar.bz2"

    @classmethod
    def from_filename(cls, filename):
        """Guess the format from a file name, or return ``None``.

        >>> ArchiveFormat.from_filename("backup.tgz")
        <ArchiveFormat.TAR_GZ: 'tar.gz'>
        """
        name = filename.lower()

        for suffixes, archive_format in _SUFFIXES:
            if name.endswith(suffixes):
                return archive_format

        return None


_SUFFIXES = [
    ((".tar.gz", ".tgz"), ArchiveFormat.TAR_GZ),
    ((".tar.bz2", ".tbz2", ".tbz"), ArchiveFormat.TAR_BZ2),
    ((".tar",), ArchiveFormat.TAR),
]


class BulkOperationStatus(StrEnum):
    """The overall result of a bulk operation.

    Attributes
    ----------
    SUCCESS : enum
        Every item was processed; there are no errors.
    PARTIAL_FAILURE : enum
        Some items were processed and some failed.
    FAILURE : enum
        No item was processed and at least one failed.
    """

    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILURE = "failure"


class BulkItemError(NamedTuple):
    """A single item that failed, as reported by the server.

    For a bulk delete the identifier is the path of the container or object;
    for an archive extraction it is the path of the archive member.
    """

    identifier: str
    reason: str


class BulkOperationOutcome(BaseModel):
    """The result of a bulk delete or an archive extraction.

    A partial failure is not an exception: check :py:attr:`errors` (or
    :py:attr:`status`) to learn which items failed.  :py:attr:`errors` is empty
    if and only if :py:attr:`status` is
    :py:attr:`BulkOperationStatus.SUCCESS`.

    Outcomes are immutable.

    Attributes
    ----------
    processed : int
        The number of items deleted, or of files created by an extraction.
    errors : tuple(BulkItemError)
        The failed items in the order the server reported them.
    status : BulkOperationStatus
        The overall result.
    not_found : int or None
        For a bulk delete, the number of items that did not exist.  These are
        not errors.  ``None`` for an extraction.
    response_status : str or None
        The status line the server embedded in the response body, e.g.
        ``"400 Bad Request"``.
    response_body : str
        The message the server embedded in the response body, if any.
    """

    model_config = ConfigDict(frozen=True)

    processed: int = Field(0, ge=0)
    errors: Tuple[BulkItemError, ...] = ()
    status: BulkOperationStatus = BulkOperationStatus.SUCCESS
    not_found: Optional[int] = None
    response_status: Optional[str] = None
    response_body: str = ""

    @model_validator(mode="after")
    def _check_status(self):
        if (self.status == BulkOperationStatus.SUCCESS) == bool(self.errors):
            raise ValueError(
                f"An outcome with {len(self.errors)} errors can't have status "
                f"'{self.status}'"
            )
        return self

    @classmethod
    def from_results(cls, processed, errors=(), **kwargs):
        """Build an outcome, deriving the status from the count and the errors."""
        errors = tuple(BulkItemError(*error) for error in errors)

        if not errors:
            status = BulkOperationStatus.SUCCESS
        elif processed > 0:
            status = BulkOperationStatus.PARTIAL_FAILURE
        else:
            status = BulkOperationStatus.FAILURE

        return cls(processed=processed, errors=errors, status=status, **kwargs)

    @property
    def succeeded(self):
        """bool: Whether every item was processed."""
        return self.status == BulkOperationStatus.SUCCESS

    @property
    def failed_identifiers(self):
        """list(str): The identifiers of the failed items, in order."""
        return [error.identifier for error in self.errors]

    def __str__(self):
        text = f"{self.status}: {self.processed} processed"
        if self.not_found:
            text += f", {self.not_found} not found"
        if self.errors:
            text += f", {len(self.errors)} failed"
        return text


class BulkResponseBody(BaseModel):
    """The JSON document the bulk middleware returns.

    The server embeds its own status line in the document because the HTTP
    status is sent before the batch has been processed.  Subclasses describe the body of
    one operation and expose its item count as ``processed``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    response_status: str = Field("", alias="Response Status")
    response_body: str = Field("", alias="Response Body")
    errors: List[Tuple[str, str]] = Field(default_factory=list, alias="Errors")

    @property
    def not_found(self):
        return None


class BulkDeleteResponseBody(BulkResponseBody):
    number_deleted: int = Field(ge=0, alias="Number Deleted")
    number_not_found: int = Field(0, ge=0, alias="Number Not Found")

    @property
    def processed(self):
        return self.number_deleted

    @property
    def not_found(self):
        return self.number_not_found


class ExtractArchiveResponseBody(BulkResponseBody):
    number_files_created: int = Field(ge=0, alias="Number Files Created")

    @property
    def processed(self):
        return self.number_files_created

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

import pydantic
import pytest

from ..models import (
    ArchiveFormat,
    BulkDeleteResponseBody,
    BulkItemError,
    BulkOperationOutcome,
    BulkOperationStatus,
    BulkResponseBody,
    ExtractArchiveResponseBody,
)


class TestArchiveFormat(unittest.TestCase):
    def test_values(self):
        assert [f.value for f in ArchiveFormat] == ["tar", "tar.gz", "tar.bz2"]
        assert ArchiveFormat("tar.gz") == ArchiveFormat.TAR_GZ
        assert ArchiveFormat.TAR_BZ2 == "tar.bz2"

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            ArchiveFormat("zip")

    def test_from_filename(self):
        assert ArchiveFormat.from_filename("a.tar") == ArchiveFormat.TAR
        assert ArchiveFormat.from_filename("a.tar.gz") == ArchiveFormat.TAR_GZ
        assert ArchiveFormat.from_filename("A.TGZ") == ArchiveFormat.TAR_GZ
        assert ArchiveFormat.from_filename("a.tar.bz2") == ArchiveFormat.TAR_BZ2
        assert ArchiveFormat.from_filename("a.tbz") == ArchiveFormat.TAR_BZ2
        assert ArchiveFormat.from_filename("a.zip") is None


class TestBulkOperationOutcome(unittest.TestCase):
    def test_success(self):
        outcome = BulkOperationOutcome.from_results(3)
        assert outcome.status == BulkOperationStatus.SUCCESS
        assert outcome.errors == ()
        assert outcome.succeeded

    def test_partial_failure(self):
        outcome = BulkOperationOutcome.from_results(2, [("c3", "not found")])
        assert outcome.status == BulkOperationStatus.PARTIAL_FAILURE
        assert outcome.errors == (BulkItemError("c3", "not found"),)
        assert list(outcome.errors) == [("c3", "not found")]
        assert not outcome.succeeded

    def test_failure(self):
        outcome = BulkOperationOutcome.from_results(0, [("c3", "409 Conflict")])
        assert outcome.status == BulkOperationStatus.FAILURE
        assert outcome.failed_identifiers == ["c3"]

    def test_error_fields(self):
        error = BulkOperationOutcome.from_results(0, [("a/b", "403 Forbidden")]).errors[0]
        assert error.identifier == "a/b"
        assert error.reason == "403 Forbidden"

    def test_immutable(self):
        outcome = BulkOperationOutcome.from_results(1)
        with pytest.raises(pydantic.ValidationError):
            outcome.processed = 5

    def test_status_must_match_errors(self):
        with pytest.raises(pydantic.ValidationError):
            BulkOperationOutcome(
                processed=1,
                errors=[("a", "b")],
                status=BulkOperationStatus.SUCCESS,
            )

        with pytest.raises(pydantic.ValidationError):
            BulkOperationOutcome(processed=1, status=BulkOperationStatus.FAILURE)

    def test_str(self):
        outcome = BulkOperationOutcome.from_results(
            2, [("c3", "409 Conflict")], not_found=1
        )
        assert str(outcome) == "partial_failure: 2 processed, 1 not found, 1 failed"


class TestResponseBodies(unittest.TestCase):
    def test_bulk_delete_body(self):
        body = BulkDeleteResponseBody.model_validate(
            {
                "Number Not Found": 1,
                "Response Status": "400 Bad Request",
                "Response Body": "",
                "Errors": [["c1", "409 Conflict"]],
                "Number Deleted": 6,
            }
        )
        assert body.processed == 6
        assert body.not_found == 1
        assert body.errors == [("c1", "409 Conflict")]
        assert body.response_status == "400 Bad Request"

    def test_extract_body(self):
        body = ExtractArchiveResponseBody.model_validate(
            {
                "Response Status": "201 Created",
                "Response Body": "",
                "Errors": [],
                "Number Files Created": 10,
            }
        )
        assert body.processed == 10
        assert body.not_found is None
        assert body.errors == []

    def test_count_is_required(self):
        with pytest.raises(pydantic.ValidationError):
            BulkDeleteResponseBody.model_validate({"Errors": []})

        with pytest.raises(pydantic.ValidationError):
            ExtractArchiveResponseBody.model_validate({"Number Deleted": 1})

    def test_counts_are_not_negative(self):
        with pytest.raises(pydantic.ValidationError):
            BulkDeleteResponseBody.model_validate({"Number Deleted": -1})

        with pytest.raises(pydantic.ValidationError):
            BulkDeleteResponseBody.model_validate(
                {"Number Deleted": 1, "Number Not Found": -1}
            )

        with pytest.raises(pydantic.ValidationError):
            ExtractArchiveResponseBody.model_validate({"Number Files Created": -1})

    def test_only_operation_bodies_have_a_count(self):
        body = BulkResponseBody.model_validate({"Errors": []})
        assert not hasattr(body, "processed")
        assert body.not_found is None

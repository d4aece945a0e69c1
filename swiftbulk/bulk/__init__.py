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

from .bulk_client import BulkClient
from .encoding import encode_path_list, escape_path
from .interpreter import interpret, interpret_response, parse_outcome
from .models import (
    ArchiveFormat,
    BulkDeleteResponseBody,
    BulkItemError,
    BulkOperationOutcome,
    BulkOperationStatus,
    ExtractArchiveResponseBody,
)

__all__ = [
    "ArchiveFormat",
    "BulkClient",
    "BulkDeleteResponseBody",
    "BulkItemError",
    "BulkOperationOutcome",
    "BulkOperationStatus",
    "ExtractArchiveResponseBody",
    "encode_path_list",
    "escape_path",
    "interpret",
    "interpret_response",
    "parse_outcome",
]

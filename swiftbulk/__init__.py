"""Swift Bulk Operations Python Client

.. code-block:: bash

    pip install swiftbulk

Deletes many containers and objects, or extracts an uploaded archive into many
objects, with a single request to an OpenStack Swift object store running the
``bulk`` middleware.

The server processes a batch item by item and can fail some items while
succeeding with others.  Every call returns a
:py:class:`~swiftbulk.bulk.BulkOperationOutcome` listing the failed items;
only errors affecting the request as a whole are raised.
"""

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

from swiftbulk import config
from swiftbulk import exceptions
from swiftbulk.version import __version__

from swiftbulk.auth import Auth
from swiftbulk.bulk import (
    ArchiveFormat,
    BulkClient,
    BulkItemError,
    BulkOperationOutcome,
    BulkOperationStatus,
)

select_env = config.select_env
get_settings = config.get_settings


def clear_client_state():
    """Clear all cached client state."""
    from swiftbulk.common.http import DefaultClientMixin

    Auth.set_default_auth(None)
    DefaultClientMixin.clear_all_default_clients()


__all__ = [
    "__version__",
    "ArchiveFormat",
    "Auth",
    "BulkClient",
    "BulkItemError",
    "BulkOperationOutcome",
    "BulkOperationStatus",
    "clear_client_state",
    "config",
    "exceptions",
    "get_settings",
    "select_env",
]

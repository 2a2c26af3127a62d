# Copyright The Volcano Authors.
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

from lxdprov.exceptions import (
    AuthError,
    InvalidInputError,
    NetworkError,
    OperationTimeoutError,
    ProtocolError,
    ProvisioningError,
    RemoteRejectedError,
)
from lxdprov.models import (
    ApiResult,
    CallLogRecord,
    InstanceSpec,
    LifecycleAction,
    RemoteRequest,
    ServerEndpoint,
    TransportOutcome,
)
from lxdprov.provisioning import ProvisioningClient
from lxdprov.routes import RequestTemplate, RouteTable

__all__ = [
    "ApiResult",
    "AuthError",
    "CallLogRecord",
    "InstanceSpec",
    "InvalidInputError",
    "LifecycleAction",
    "NetworkError",
    "OperationTimeoutError",
    "ProtocolError",
    "ProvisioningClient",
    "ProvisioningError",
    "RemoteRejectedError",
    "RemoteRequest",
    "RequestTemplate",
    "RouteTable",
    "ServerEndpoint",
    "TransportOutcome",
]

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

from typing import Any, Dict, Optional


class ProvisioningError(Exception):
    """Base exception for all provisioning operations"""
    kind = "internal_error"
    code = 500
    retryable = False
    default_reason = "The container provisioning request failed"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    @property
    def reason(self) -> str:
        """Short description that is safe to show to a billing admin"""
        return self.default_reason


class InvalidInputError(ProvisioningError):
    """Raised when the host parameters are missing a field or hold an unsupported value"""
    kind = "invalid_input"
    code = 400

    @property
    def reason(self) -> str:
        return self.message


class AuthError(ProvisioningError):
    """Raised when the container API refuses the configured credential"""
    kind = "auth_error"
    code = 401
    default_reason = "Authentication with the container API failed, check the server credentials"


class OperationTimeoutError(ProvisioningError):
    """Raised when the container API does not answer within the request timeout"""
    kind = "timeout"
    code = 504
    retryable = True
    default_reason = "The container API did not respond in time, the request can be retried"


class NetworkError(ProvisioningError):
    """Raised when the container API cannot be reached (DNS, refused connection, TLS)"""
    kind = "network_error"
    code = 502
    retryable = True
    default_reason = "Could not connect to the container API, the request can be retried"


class RemoteRejectedError(ProvisioningError):
    """Raised when the container API answers with a non-2xx status"""
    kind = "remote_rejected"

    def __init__(self, code: int, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"Container API returned {code}: {message}", context)
        self.code = code
        self.remote_message = message
        self.retryable = code >= 500

    @property
    def reason(self) -> str:
        return f"The container API rejected the request ({self.code}): {self.remote_message}"


class ProtocolError(ProvisioningError):
    """Raised when a successful response does not match the expected payload shape"""
    kind = "protocol_error"
    code = 502
    default_reason = "The container API returned an unexpected response"

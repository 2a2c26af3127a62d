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

import traceback
from typing import Any, Dict, Optional

from lxdprov.exceptions import ProvisioningError
from lxdprov.models import ApiResult, TransportOutcome

SUCCESS = "success"

INTERNAL_ERROR_REASON = "Internal error in the provisioning module, see the module log"


def _detail(error: BaseException, status_code: Optional[int], trace: str) -> str:
    kind = getattr(error, "kind", type(error).__name__)
    parts = [f"kind={kind}"]
    if status_code is not None:
        parts.append(f"status={status_code}")
    parts.append(f"error={error}")
    detail = " | ".join(parts)
    if trace:
        detail = f"{detail}\n{trace}"
    return detail


class ResultTranslator:
    """Single point where transport outcomes and errors become caller-facing results"""

    def translate(self, outcome: TransportOutcome) -> ApiResult:
        if outcome.ok:
            return ApiResult.ok(outcome.payload)
        if outcome.error is None:
            return ApiResult.failed(
                kind=ProvisioningError.kind,
                reason=INTERNAL_ERROR_REASON,
                detail=f"Transport reported failure without an error (status={outcome.status_code})",
                retryable=False,
            )
        return self.translate_error(outcome.error, outcome.status_code, outcome.trace)

    def translate_error(
        self,
        error: BaseException,
        status_code: Optional[int] = None,
        trace: str = "",
    ) -> ApiResult:
        """Convert any exception into a Failed result

        ProvisioningErrors keep their own reason and retry flag; anything else
        is reported as an internal error so it never reaches the billing host.
        """
        if not trace:
            trace = "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()

        if isinstance(error, ProvisioningError):
            return ApiResult.failed(
                kind=error.kind,
                reason=error.reason or error.default_reason,
                detail=_detail(error, status_code, trace),
                retryable=error.retryable,
            )

        return ApiResult.failed(
            kind=ProvisioningError.kind,
            reason=INTERNAL_ERROR_REASON,
            detail=_detail(error, status_code, trace),
            retryable=False,
        )

    @staticmethod
    def to_host_string(result: ApiResult) -> str:
        """Lifecycle calls report the literal 'success' or the short reason"""
        if result.success:
            return SUCCESS
        return result.reason

    @staticmethod
    def to_connection_result(result: ApiResult) -> Dict[str, Any]:
        """Connection tests report a boolean flag and an error string"""
        return {
            "success": result.success,
            "error": "" if result.success else result.reason,
        }

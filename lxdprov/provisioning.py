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

import logging
from typing import Any, Dict, Mapping, Optional

import lxdprov.constants as constants
from lxdprov.call_log import CallLogger, LoggingCallLogger, emit
from lxdprov.clients.transport import ApiTransport
from lxdprov.config import Settings, load_settings
from lxdprov.exceptions import InvalidInputError
from lxdprov.models import (
    ApiResult,
    CallLogRecord,
    InstanceSpec,
    LifecycleAction,
    ServerEndpoint,
)
from lxdprov.resolver import ActionResolver
from lxdprov.routes import RouteTable
from lxdprov.translator import ResultTranslator
from lxdprov.utils.log import get_logger


def _snapshot(params: Any) -> Dict[str, Any]:
    """Copy of the host parameters for the call log; non-mappings are kept as their repr"""
    if isinstance(params, Mapping):
        return dict(params)
    return {"params": repr(params)}


class ProvisioningClient:
    """Container provisioning client used by the billing host.

    Every public method returns a value; errors are translated into ApiResult
    failures and recorded through the call logger instead of being raised.
    """

    def __init__(
        self,
        routes: Optional[RouteTable] = None,
        settings: Optional[Settings] = None,
        call_logger: Optional[CallLogger] = None,
        transport: Optional[ApiTransport] = None,
        verbose: bool = False,
    ):
        """Initialize the provisioning client.

        Args:
            routes: Request templates per action; loaded from settings.routes_file when omitted.
            settings: Client settings; read from the environment when omitted.
            call_logger: Sink for failure records (default: logging based sink).
            transport: HTTP transport (default: ApiTransport built from settings).
            verbose: Enable debug logging.
        """
        self.settings = settings or load_settings()

        level = logging.DEBUG if verbose else self.settings.log_level
        self.logger = get_logger(__name__, level=level)

        if routes is None:
            if not self.settings.routes_file:
                raise ValueError(
                    "Request routes must be provided via the 'routes' argument "
                    f"or the '{constants.ROUTES_FILE_ENV}' environment variable."
                )
            routes = RouteTable.from_file(self.settings.routes_file)

        self.resolver = ActionResolver(routes)
        self.transport = transport or ApiTransport(self.settings)
        self.translator = ResultTranslator()
        self.call_logger = call_logger or LoggingCallLogger()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def execute(self, action: Any, params: Mapping[str, Any]) -> ApiResult:
        """Run one lifecycle action against the container API.

        Args:
            action: LifecycleAction or host verb (create, suspend, conn_test, ...)
            params: Flat parameter map supplied by the billing host

        Returns:
            ApiResult; exactly one per call
        """
        action_name = getattr(action, "value", str(action))
        try:
            lifecycle = LifecycleAction.parse(action)
            action_name = lifecycle.value
            result = self._execute(lifecycle, params)
        except Exception as e:
            result = self.translator.translate_error(e)

        if result.success:
            self.logger.info(f"{action_name} succeeded")
        else:
            self.logger.warning(f"{action_name} failed: {result.reason}")
            emit(self.call_logger, CallLogRecord(
                component=constants.MODULE_NAME,
                action=action_name,
                input_snapshot=_snapshot(params),
                outcome_summary=result.reason,
                raw_trace=result.detail,
            ))
        return result

    def _execute(self, action: LifecycleAction, params: Mapping[str, Any]) -> ApiResult:
        if action is LifecycleAction.RENEW:
            return ApiResult.ok()

        if not isinstance(params, Mapping):
            raise InvalidInputError("Host parameters must be a key/value map")

        spec = InstanceSpec.from_params(params)
        request = self.resolver.resolve(action, spec)
        if request is None:
            return ApiResult.ok()

        endpoint = ServerEndpoint.from_params(params, self.settings)
        outcome = self.transport.send(endpoint, request)
        return self.translator.translate(outcome)

    def _lifecycle(self, action: LifecycleAction, params: Mapping[str, Any]) -> str:
        return self.translator.to_host_string(self.execute(action, params))

    def create_account(self, params: Mapping[str, Any]) -> str:
        """Provision a new container; returns "success" or an error message"""
        return self._lifecycle(LifecycleAction.CREATE, params)

    def suspend_account(self, params: Mapping[str, Any]) -> str:
        return self._lifecycle(LifecycleAction.SUSPEND, params)

    def unsuspend_account(self, params: Mapping[str, Any]) -> str:
        return self._lifecycle(LifecycleAction.UNSUSPEND, params)

    def terminate_account(self, params: Mapping[str, Any]) -> str:
        return self._lifecycle(LifecycleAction.TERMINATE, params)

    def change_package(self, params: Mapping[str, Any]) -> str:
        """Resize the container to the plan in params"""
        return self._lifecycle(LifecycleAction.CHANGE_PLAN, params)

    def change_password(self, params: Mapping[str, Any]) -> str:
        return self._lifecycle(LifecycleAction.CHANGE_PASSWORD, params)

    def renew(self, params: Mapping[str, Any]) -> str:
        """Billing renewal is not a container event; always succeeds locally"""
        return self._lifecycle(LifecycleAction.RENEW, params)

    def test_connection(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Check the server credentials; returns {"success": bool, "error": str}"""
        return self.translator.to_connection_result(
            self.execute(LifecycleAction.TEST_CONNECTION, params)
        )

    def get_usage(self, params: Mapping[str, Any]) -> ApiResult:
        return self.execute(LifecycleAction.GET_USAGE, params)

    def get_stats(self, params: Mapping[str, Any]) -> ApiResult:
        return self.execute(LifecycleAction.GET_STATS, params)

    def close(self) -> None:
        """Release pooled HTTP sessions."""
        self.transport.close()

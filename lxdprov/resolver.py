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

import re
from typing import Dict, Mapping, Optional, Tuple

import lxdprov.constants as constants
from lxdprov.exceptions import InvalidInputError
from lxdprov.models import InstanceSpec, LifecycleAction, RemoteRequest
from lxdprov.routes import RequestBuilder, RouteTable
from lxdprov.utils.log import get_logger

SIZING_FIELDS = ("hostname", "cpu_cores", "memory_gb", "storage_gb")

REQUIRED_FIELDS: Dict[LifecycleAction, Tuple[str, ...]] = {
    LifecycleAction.CREATE: SIZING_FIELDS,
    LifecycleAction.CHANGE_PLAN: SIZING_FIELDS,
    LifecycleAction.CHANGE_PASSWORD: ("hostname", "password"),
    LifecycleAction.SUSPEND: ("hostname",),
    LifecycleAction.UNSUSPEND: ("hostname",),
    LifecycleAction.TERMINATE: ("hostname",),
    LifecycleAction.GET_USAGE: ("hostname",),
    LifecycleAction.GET_STATS: ("hostname",),
    LifecycleAction.TEST_CONNECTION: (),
    LifecycleAction.RENEW: (),
}

OPTION_SETS = {
    "cpu_cores": constants.CPU_CORE_OPTIONS,
    "memory_gb": constants.MEMORY_GB_OPTIONS,
    "storage_gb": constants.STORAGE_GB_OPTIONS,
}

_HOSTNAME_RE = re.compile(r"^[A-Za-z](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")


def validate_hostname(hostname: str) -> None:
    if len(hostname) > constants.MAX_HOSTNAME_LENGTH or not _HOSTNAME_RE.match(hostname):
        raise InvalidInputError(
            f"Invalid hostname '{hostname}': use letters, digits and hyphens, "
            f"start with a letter and keep it under {constants.MAX_HOSTNAME_LENGTH + 1} characters"
        )


class ActionResolver:
    """Maps a lifecycle action and instance spec to the request the container API expects.

    The resolver never performs I/O; it only validates and builds.
    """

    def __init__(self, builders: Optional[Mapping[LifecycleAction, RequestBuilder]] = None):
        if isinstance(builders, RouteTable):
            builders = builders.builders()
        self._builders: Dict[LifecycleAction, RequestBuilder] = dict(builders or {})
        self.logger = get_logger(f"{__name__}.ActionResolver")

    def register(self, action: LifecycleAction, builder: RequestBuilder) -> None:
        """Install a custom request builder for an action"""
        if action is LifecycleAction.RENEW:
            raise InvalidInputError("Renew is handled locally and takes no request builder")
        self._builders[action] = builder

    def validate(self, action: LifecycleAction, spec: InstanceSpec) -> None:
        """Check that spec carries every field the action needs, within the published options

        Raises:
            InvalidInputError: On the first missing or out-of-range field
        """
        for name in REQUIRED_FIELDS[action]:
            value = getattr(spec, name)
            if value is None or value == "":
                raise InvalidInputError(f"Missing required field '{name}' for action '{action.value}'")

        if "hostname" in REQUIRED_FIELDS[action]:
            validate_hostname(spec.hostname)

        # Sizing is only checked where the action consumes it
        for name, options in OPTION_SETS.items():
            if name not in REQUIRED_FIELDS[action]:
                continue
            value = getattr(spec, name)
            if value not in options:
                allowed = ", ".join(str(o) for o in options)
                raise InvalidInputError(f"Invalid value {value} for '{name}', allowed values: {allowed}")

    def resolve(self, action: LifecycleAction, spec: InstanceSpec) -> Optional[RemoteRequest]:
        """Validate spec for action and build the remote request

        Args:
            action: Lifecycle action to perform
            spec: Instance parameters supplied by the host

        Returns:
            The RemoteRequest to send, or None for Renew which needs no remote call

        Raises:
            InvalidInputError: If spec is incomplete or no builder is configured for action
        """
        action = LifecycleAction.parse(action)
        self.validate(action, spec)

        if action is LifecycleAction.RENEW:
            self.logger.debug("Renew needs no remote call")
            return None

        builder = self._builders.get(action)
        if builder is None:
            raise InvalidInputError(f"No request route configured for action '{action.value}'")

        request = builder(spec)
        if not isinstance(request, RemoteRequest):
            raise InvalidInputError(f"Request builder for '{action.value}' did not return a RemoteRequest")
        self.logger.debug(f"Resolved {action.value} to {request.method} {request.path}")
        return request

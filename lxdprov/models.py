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

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import lxdprov.constants as constants
from lxdprov.config import Settings
from lxdprov.exceptions import InvalidInputError, ProvisioningError
from lxdprov.utils.utils import parse_bool


class LifecycleAction(Enum):
    """Closed set of lifecycle actions the billing host can request"""
    CREATE = "create"
    SUSPEND = "suspend"
    UNSUSPEND = "unsuspend"
    TERMINATE = "terminate"
    CHANGE_PLAN = "change"
    CHANGE_PASSWORD = "password"
    RENEW = "renew"
    TEST_CONNECTION = "conn_test"
    GET_USAGE = "get_usage"
    GET_STATS = "get_stats"

    @classmethod
    def parse(cls, name: Any) -> "LifecycleAction":
        if isinstance(name, cls):
            return name
        key = str(name or "").strip().lower()
        for action in cls:
            if key in (action.value, action.name.lower()):
                return action
        raise InvalidInputError(f"Unsupported lifecycle action: {name!r}")


class PayloadShape(Enum):
    """What a successful response body must look like"""
    NONE = "none"      # body is ignored
    ANY = "any"        # empty or any JSON document
    OBJECT = "object"  # a JSON object


@dataclass(frozen=True)
class ServerEndpoint:
    host: str
    port: int
    secure: bool = True
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    client_cert: Optional[str] = None
    client_key: Optional[str] = None
    verify: bool = True

    @property
    def base_url(self) -> str:
        scheme = "https" if self.secure else "http"
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{scheme}://{host}:{self.port}"

    @property
    def cert_pair(self):
        if self.client_cert and self.client_key:
            return (self.client_cert, self.client_key)
        return None

    @property
    def pool_key(self) -> tuple:
        """Identity used to share one HTTP session between calls"""
        return (self.base_url, self.token, self.username, self.password, self.cert_pair, self.verify)

    def __repr__(self) -> str:
        return f"ServerEndpoint(base_url={self.base_url!r}, auth={self.auth_scheme!r})"

    @property
    def auth_scheme(self) -> str:
        if self.token:
            return "bearer"
        if self.username:
            return "basic"
        if self.cert_pair:
            return "tls-client-cert"
        return "none"

    @classmethod
    def from_params(cls, params: Mapping[str, Any], settings: Optional[Settings] = None) -> "ServerEndpoint":
        """
        Build the endpoint from the server fields the billing host passes with every call

        Args:
            params: Host parameter map (serverhostname/serverip, serverport, serversecure,
                serveraccesshash, serverusername, serverpassword)
            settings: Optional Settings supplying fallback credential and TLS options

        Raises:
            InvalidInputError: If no server address is present or the port is malformed
        """
        host = str(params.get("serverhostname") or params.get("serverip") or "").strip()
        if not host:
            raise InvalidInputError("No server hostname or IP address configured")

        try:
            secure = parse_bool(params.get("serversecure", True))
        except ValueError:
            raise InvalidInputError(f"Invalid serversecure value: {params.get('serversecure')!r}")

        raw_port = str(params.get("serverport") or "").strip()
        if raw_port:
            try:
                port = int(raw_port)
            except ValueError:
                raise InvalidInputError(f"Invalid server port: {raw_port!r}")
            if not 0 < port < 65536:
                raise InvalidInputError(f"Invalid server port: {raw_port!r}")
        else:
            port = constants.DEFAULT_SSL_PORT if secure else constants.DEFAULT_PORT

        token = str(params.get("serveraccesshash") or "").strip() or None
        username = str(params.get("serverusername") or "").strip() or None
        password = params.get("serverpassword") or None

        client_cert = client_key = None
        verify = True
        if settings is not None:
            if not token and not username:
                token = settings.token
            client_cert = settings.client_cert
            client_key = settings.client_key
            verify = settings.verify_tls

        return cls(
            host=host,
            port=port,
            secure=secure,
            token=token,
            username=username,
            password=password,
            client_cert=client_cert,
            client_key=client_key,
            verify=verify,
        )


# Host parameter names accepted for each InstanceSpec field, in lookup order
FIELD_ALIASES = {
    "hostname": ("hostname", "name", "configoption1"),
    "cpu_cores": ("cores", "cpu", "cpu_cores", "configoption2"),
    "memory_gb": ("memory", "memory_gb", "configoption3"),
    "storage_gb": ("storage", "storage_gb", "disk", "configoption4"),
    "password": ("password",),
    "username": ("username",),
    "service_id": ("serviceid", "service_id"),
}

# Display names used by the host's nested "configoptions" map
CONFIG_OPTION_NAMES = {
    "hostname": "Hostname",
    "cpu_cores": "CPU Cores",
    "memory_gb": "Memory",
    "storage_gb": "Storage",
}

INTEGER_FIELDS = ("cpu_cores", "memory_gb", "storage_gb")

# Host bookkeeping keys that never reach a request template
SERVER_KEYS = frozenset({
    "serverhostname", "serverip", "serverport", "serversecure",
    "serveraccesshash", "serverusername", "serverpassword", "configoptions",
})


def _lookup(params: Mapping[str, Any], field_name: str) -> Optional[str]:
    nested = params.get("configoptions")
    if isinstance(nested, Mapping):
        value = nested.get(CONFIG_OPTION_NAMES.get(field_name, ""))
        if value not in (None, ""):
            return str(value).strip()
    for alias in FIELD_ALIASES[field_name]:
        value = params.get(alias)
        if value not in (None, ""):
            return str(value).strip()
    return None


@dataclass(frozen=True)
class InstanceSpec:
    hostname: Optional[str] = None
    cpu_cores: Optional[int] = None
    memory_gb: Optional[int] = None
    storage_gb: Optional[int] = None
    password: Optional[str] = None
    username: Optional[str] = None
    service_id: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "InstanceSpec":
        """
        Convert the untyped host parameter map into an InstanceSpec

        Raises:
            InvalidInputError: If a sizing field is present but is not an integer
        """
        values: Dict[str, Any] = {}
        for field_name in FIELD_ALIASES:
            raw = _lookup(params, field_name)
            if raw is not None and field_name in INTEGER_FIELDS:
                try:
                    values[field_name] = int(raw)
                except ValueError:
                    raise InvalidInputError(f"Field '{field_name}' must be an integer, got {raw!r}")
            else:
                values[field_name] = raw

        consumed = {alias for aliases in FIELD_ALIASES.values() for alias in aliases}
        extra = {
            str(k): str(v) for k, v in params.items()
            if k not in consumed and k not in SERVER_KEYS and v is not None and not isinstance(v, Mapping)
        }
        return cls(extra=extra, **values)

    def template_fields(self) -> Dict[str, Any]:
        """Values available to request templates; extra fields never shadow typed ones"""
        fields = dict(self.extra)
        for name in FIELD_ALIASES:
            value = getattr(self, name)
            if value is not None:
                fields[name] = value
        return fields


@dataclass(frozen=True)
class RemoteRequest:
    action: LifecycleAction
    method: str
    path: str
    body: Optional[str] = None
    query: Dict[str, str] = field(default_factory=dict)
    expect: PayloadShape = PayloadShape.ANY


@dataclass
class TransportOutcome:
    ok: bool
    status_code: Optional[int] = None
    payload: Any = None
    error: Optional[ProvisioningError] = None
    trace: str = ""

    @classmethod
    def success(cls, status_code: int, payload: Any = None) -> "TransportOutcome":
        return cls(ok=True, status_code=status_code, payload=payload)

    @classmethod
    def failure(cls, error: ProvisioningError, status_code: Optional[int] = None, trace: str = "") -> "TransportOutcome":
        return cls(ok=False, status_code=status_code, error=error, trace=trace)


@dataclass(frozen=True)
class ApiResult:
    success: bool
    payload: Any = None
    kind: Optional[str] = None
    reason: str = ""
    detail: str = ""
    retryable: bool = False

    @classmethod
    def ok(cls, payload: Any = None) -> "ApiResult":
        return cls(success=True, payload=payload)

    @classmethod
    def failed(cls, kind: str, reason: str, detail: str, retryable: bool) -> "ApiResult":
        return cls(success=False, kind=kind, reason=reason, detail=detail, retryable=retryable)


@dataclass(frozen=True)
class CallLogRecord:
    component: str
    action: str
    input_snapshot: Dict[str, Any]
    outcome_summary: str
    raw_trace: str

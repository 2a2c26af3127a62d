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

"""
Configuration-driven request templates.

The wire format of the container API differs between deployments, so the
paths and bodies sent for each lifecycle action are read from a route table
instead of being hardcoded. A routes file is a JSON object keyed by action
name::

    {
      "create": {
        "method": "POST",
        "path": "/1.0/instances",
        "body": {"name": "{hostname}", "config": {"limits.cpu": "{cpu_cores}"}}
      },
      "get_usage": {"method": "GET", "path": "/1.0/instances/{hostname}/state", "expect": "object"}
    }

String values may reference InstanceSpec fields with ``{field}`` placeholders.
A value that is exactly one placeholder keeps the field's native type, so
``"{cpu_cores}"`` renders as the integer ``2`` while ``"{memory_gb}GB"``
renders as the string ``"4GB"``. Use ``"{cpu_cores!s}"`` when the API wants the
number as a string.
"""
import json
import re
import string
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import quote

from lxdprov.exceptions import InvalidInputError
from lxdprov.models import InstanceSpec, LifecycleAction, PayloadShape, RemoteRequest

RequestBuilder = Callable[[InstanceSpec], RemoteRequest]

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SINGLE_PLACEHOLDER = re.compile(r"^\{([A-Za-z_][A-Za-z0-9_]*)\}$")
_FORMATTER = string.Formatter()


def _placeholders(text: str):
    return [name for _, name, _, _ in _FORMATTER.parse(text) if name]


def _render_string(text: str, fields: Mapping[str, Any], quote_values: bool = False) -> Any:
    match = _SINGLE_PLACEHOLDER.match(text)
    if match and not quote_values:
        name = match.group(1)
        if name not in fields:
            raise InvalidInputError(f"Request template references unknown field '{name}'")
        return fields[name]

    missing = [name for name in _placeholders(text) if name not in fields]
    if missing:
        raise InvalidInputError(f"Request template references unknown field '{missing[0]}'")
    if quote_values:
        fields = {k: quote(str(v), safe="") for k, v in fields.items()}
    try:
        return text.format_map(fields)
    except (ValueError, IndexError, KeyError) as e:
        raise InvalidInputError(f"Cannot render request template '{text}': {e}")


def _check_placeholders(value: Any, where: str) -> None:
    """Reject malformed format strings and non-field placeholders anywhere in value"""
    if isinstance(value, str):
        try:
            parsed = list(_FORMATTER.parse(value))
        except ValueError as e:
            raise InvalidInputError(f"Malformed template '{value}' in {where}: {e}")
        for _, name, _, _ in parsed:
            if name is not None and not _FIELD_NAME.match(name):
                raise InvalidInputError(f"Invalid placeholder '{{{name}}}' in {where}")
    elif isinstance(value, list):
        for item in value:
            _check_placeholders(item, where)
    elif isinstance(value, dict):
        for item in value.values():
            _check_placeholders(item, where)


def _render(value: Any, fields: Mapping[str, Any]) -> Any:
    if isinstance(value, str):
        return _render_string(value, fields)
    if isinstance(value, list):
        return [_render(item, fields) for item in value]
    if isinstance(value, dict):
        return {key: _render(item, fields) for key, item in value.items()}
    return value


class RequestTemplate:
    """Builds the RemoteRequest for one action from a declarative description"""

    def __init__(
        self,
        action: LifecycleAction,
        method: str,
        path: str,
        body: Any = None,
        query: Optional[Dict[str, str]] = None,
        expect: str = PayloadShape.ANY.value,
    ):
        method = str(method).upper()
        if method not in ALLOWED_METHODS:
            raise InvalidInputError(f"Unsupported HTTP method '{method}' for action '{action.value}'")
        if not isinstance(path, str) or not path.startswith("/"):
            raise InvalidInputError(f"Path for action '{action.value}' must start with '/'")
        try:
            shape = PayloadShape(expect)
        except ValueError:
            raise InvalidInputError(f"Unknown payload shape '{expect}' for action '{action.value}'")
        if query is not None and not isinstance(query, Mapping):
            raise InvalidInputError(f"Query for action '{action.value}' must be an object")
        _check_placeholders(path, f"path for '{action.value}'")
        _check_placeholders(body, f"body for '{action.value}'")
        _check_placeholders(dict(query or {}), f"query for '{action.value}'")

        self.action = action
        self.method = method
        self.path = path
        self.body = body
        self.query = dict(query or {})
        self.expect = shape

    def __call__(self, spec: InstanceSpec) -> RemoteRequest:
        return self.build(spec)

    def build(self, spec: InstanceSpec) -> RemoteRequest:
        fields = spec.template_fields()
        path = _render_string(self.path, fields, quote_values=True)
        body = None
        if self.body is not None:
            body = json.dumps(_render(self.body, fields))
        query = {key: str(_render(value, fields)) for key, value in self.query.items()}
        return RemoteRequest(
            action=self.action,
            method=self.method,
            path=path,
            body=body,
            query=query,
            expect=self.expect,
        )

    @classmethod
    def from_dict(cls, action: LifecycleAction, data: Mapping[str, Any]) -> "RequestTemplate":
        if not isinstance(data, Mapping):
            raise InvalidInputError(f"Route for action '{action.value}' must be an object")
        unknown = set(data) - {"method", "path", "body", "query", "expect"}
        if unknown:
            raise InvalidInputError(f"Unknown keys {sorted(unknown)} in route for '{action.value}'")
        if "method" not in data or "path" not in data:
            raise InvalidInputError(f"Route for action '{action.value}' needs 'method' and 'path'")
        return cls(
            action=action,
            method=data["method"],
            path=data["path"],
            body=data.get("body"),
            query=data.get("query"),
            expect=data.get("expect", PayloadShape.ANY.value),
        )


class RouteTable:
    """Per-action request builders loaded from deployment configuration"""

    def __init__(self, builders: Optional[Mapping[LifecycleAction, RequestBuilder]] = None):
        self._builders: Dict[LifecycleAction, RequestBuilder] = dict(builders or {})

    def __contains__(self, action: LifecycleAction) -> bool:
        return action in self._builders

    def __len__(self) -> int:
        return len(self._builders)

    def builders(self) -> Dict[LifecycleAction, RequestBuilder]:
        return dict(self._builders)

    def register(self, action: LifecycleAction, builder: RequestBuilder) -> None:
        if action is LifecycleAction.RENEW:
            raise InvalidInputError("Renew is handled locally and takes no request builder")
        self._builders[action] = builder

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RouteTable":
        """
        Build a route table from a mapping of action name to route description

        Raises:
            InvalidInputError: If an action name or route description is invalid
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError("Route table must be a JSON object keyed by action name")
        table = cls()
        for name, route in data.items():
            action = LifecycleAction.parse(name)
            table.register(action, RequestTemplate.from_dict(action, route))
        return table

    @classmethod
    def from_file(cls, path: str) -> "RouteTable":
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidInputError(f"Routes file {path} is not valid JSON: {e}")
        return cls.from_dict(data)

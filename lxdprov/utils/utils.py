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

import os
from typing import Any, Dict, Mapping, Optional

REDACTED = "********"

SENSITIVE_KEYS = frozenset({
    "password",
    "serverpassword",
    "serveraccesshash",
    "token",
    "auth_token",
})


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an environment variable, treating empty values as unset"""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def read_token_from_file(file_path: str) -> str:
    """Read token from a file

    Args:
        file_path: Path to the token file

    Returns:
        Token string if file exists, else empty string
    """
    try:
        with open(file_path, 'r') as file:
            return file.read().strip()
    except FileNotFoundError:
        return ""


def parse_bool(value: Any) -> bool:
    """Parse the loose boolean spellings billing hosts and env files use"""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("", "0", "false", "no", "off"):
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


def redact(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of params with credentials masked, recursing into nested maps"""
    snapshot = {}
    for key, value in params.items():
        if str(key).lower() in SENSITIVE_KEYS and value:
            snapshot[key] = REDACTED
        elif isinstance(value, Mapping):
            snapshot[key] = redact(value)
        else:
            snapshot[key] = value
    return snapshot

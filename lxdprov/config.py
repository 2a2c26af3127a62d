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
Configuration for the provisioning client.

Values come from the process environment, optionally seeded from a ``.env``
file next to the host installation.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

import lxdprov.constants as constants
from lxdprov.utils.utils import get_env, parse_bool, read_token_from_file


@dataclass(frozen=True)
class Settings:
    timeout: float = constants.DEFAULT_TIMEOUT
    connect_timeout: float = constants.DEFAULT_CONNECT_TIMEOUT
    verify_tls: bool = True
    routes_file: Optional[str] = None
    client_cert: Optional[str] = None
    client_key: Optional[str] = None
    token: Optional[str] = None
    log_level: str = constants.DEFAULT_LOG_LEVEL
    pool_maxsize: int = constants.DEFAULT_POOL_MAXSIZE

    def __post_init__(self):
        if self.timeout <= 0 or self.connect_timeout <= 0:
            raise ValueError("Timeouts must be positive")
        if self.pool_maxsize < 1:
            raise ValueError("Pool size must be at least 1")
        if bool(self.client_cert) != bool(self.client_key):
            raise ValueError("Client certificate and key must be configured together")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def client_cert_pair(self) -> Optional[Tuple[str, str]]:
        if self.client_cert and self.client_key:
            return (self.client_cert, self.client_key)
        return None

    @property
    def request_timeout(self) -> Tuple[float, float]:
        """(connect, read) tuple in the shape requests expects"""
        return (self.connect_timeout, self.timeout)


def _float_env(name: str, default: float) -> float:
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _int_env(name: str, default: int) -> int:
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment

    Args:
        dotenv_path: Optional explicit .env file; by default the nearest one is used

    Returns:
        Settings instance

    Raises:
        ValueError: If a variable holds a malformed value
    """
    load_dotenv(dotenv_path)

    token = get_env(constants.TOKEN_ENV)
    if not token:
        token_file = get_env(constants.TOKEN_FILE_ENV)
        if token_file:
            token = read_token_from_file(token_file) or None

    return Settings(
        timeout=_float_env(constants.TIMEOUT_ENV, constants.DEFAULT_TIMEOUT),
        connect_timeout=_float_env(constants.CONNECT_TIMEOUT_ENV, constants.DEFAULT_CONNECT_TIMEOUT),
        verify_tls=parse_bool(get_env(constants.VERIFY_TLS_ENV, "true")),
        routes_file=get_env(constants.ROUTES_FILE_ENV),
        client_cert=get_env(constants.CLIENT_CERT_ENV),
        client_key=get_env(constants.CLIENT_KEY_ENV),
        token=token,
        log_level=get_env(constants.LOG_LEVEL_ENV, constants.DEFAULT_LOG_LEVEL).upper(),
        pool_maxsize=_int_env(constants.POOL_MAXSIZE_ENV, constants.DEFAULT_POOL_MAXSIZE),
    )

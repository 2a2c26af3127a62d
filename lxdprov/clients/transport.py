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

import json
import threading
import traceback
from typing import Any, Dict, Optional

import requests

import lxdprov.constants as constants
from lxdprov.config import Settings
from lxdprov.exceptions import (
    AuthError,
    NetworkError,
    OperationTimeoutError,
    ProtocolError,
    ProvisioningError,
    RemoteRejectedError,
)
from lxdprov.models import PayloadShape, RemoteRequest, ServerEndpoint, TransportOutcome
from lxdprov.utils.http import create_session
from lxdprov.utils.log import format_context, get_logger

AUTH_STATUS_CODES = (401, 403)


def _truncate(text: str, limit: int = constants.MAX_REMOTE_MESSAGE_LENGTH) -> str:
    text = (text or "").strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def extract_error_message(response: requests.Response) -> str:
    """Pull a human readable message out of an error response body"""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for key in ("error", "message", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return _truncate(value)
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return _truncate(value["message"])

    return _truncate(response.text) or response.reason or "no response body"


class ApiTransport:
    """Sends RemoteRequests to the container API and classifies the outcome.

    Exactly one attempt is made per call. One pooled requests.Session is kept
    per endpoint; the pool is guarded by a lock so concurrent calls for
    different instances can share the transport.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.logger = get_logger(f"{__name__}.ApiTransport", level=self.settings.log_level)
        self._sessions: Dict[tuple, requests.Session] = {}
        self._lock = threading.Lock()

    def _session_for(self, endpoint: ServerEndpoint) -> requests.Session:
        key = endpoint.pool_key
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                session = create_session(
                    pool_connections=1,
                    pool_maxsize=self.settings.pool_maxsize,
                    retry_total=0,
                    verify=endpoint.verify,
                    cert=endpoint.cert_pair,
                )
                session.headers.update({
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                })
                if endpoint.token:
                    session.headers["Authorization"] = f"Bearer {endpoint.token}"
                elif endpoint.username:
                    session.auth = (endpoint.username, endpoint.password or "")
                self._sessions[key] = session
            return session

    def send(self, endpoint: ServerEndpoint, request: RemoteRequest) -> TransportOutcome:
        """Perform one HTTP call and classify the result

        Args:
            endpoint: Container API address and credential
            request: Fully built request from the ActionResolver

        Returns:
            TransportOutcome; failures carry a ProvisioningError, never raise
        """
        url = f"{endpoint.base_url}{request.path}"
        context = {"action": request.action.value, "method": request.method, "url": url}
        self.logger.debug(f"Sending request | {format_context(context)}")

        try:
            response = self._session_for(endpoint).request(
                request.method,
                url,
                data=request.body,
                params=request.query or None,
                timeout=self.settings.request_timeout,
            )
            payload = self._classify(request, response)
        except ProvisioningError as e:
            status = e.context.get("status_code")
            self.logger.error(f"Request failed: {e} | {format_context(context)}")
            return TransportOutcome.failure(e, status_code=status, trace=self._trace(e, context))
        except requests.exceptions.Timeout as e:
            error = OperationTimeoutError(
                f"Timed out after {self.settings.timeout}s waiting for {url}: {e}", context
            )
            self.logger.error(f"Request timed out | {format_context(context)}")
            return TransportOutcome.failure(error, trace=self._trace(e, context))
        except requests.exceptions.RequestException as e:
            # ConnectionError also covers SSLError, DNS failures and refused connections
            error = NetworkError(f"Could not reach {endpoint.base_url}: {e}", context)
            self.logger.error(f"Request failed: {e} | {format_context(context)}")
            return TransportOutcome.failure(error, trace=self._trace(e, context))

        self.logger.debug(f"Request succeeded ({response.status_code}) | {format_context(context)}")
        return TransportOutcome.success(response.status_code, payload)

    def _classify(self, request: RemoteRequest, response: requests.Response) -> Any:
        status = response.status_code
        context = {"status_code": status, "action": request.action.value}

        if status in AUTH_STATUS_CODES:
            raise AuthError(
                f"Container API refused the credential ({status}): {extract_error_message(response)}",
                context,
            )
        if not 200 <= status < 300:
            message = extract_error_message(response)
            context["body"] = _truncate(response.text)
            raise RemoteRejectedError(status, message, context)

        return self._parse_payload(request, response, context)

    def _parse_payload(self, request: RemoteRequest, response: requests.Response, context: Dict[str, Any]) -> Any:
        if request.expect is PayloadShape.NONE:
            return None

        text = response.text or ""
        if not text.strip():
            if request.expect is PayloadShape.OBJECT:
                context["body"] = ""
                raise ProtocolError(
                    f"Expected a JSON object for '{request.action.value}' but the response body was empty",
                    context,
                )
            return None

        try:
            payload = json.loads(text)
        except ValueError as e:
            context["body"] = _truncate(text)
            raise ProtocolError(f"Response for '{request.action.value}' is not valid JSON: {e}", context)

        if request.expect is PayloadShape.OBJECT and not isinstance(payload, dict):
            context["body"] = _truncate(text)
            raise ProtocolError(
                f"Expected a JSON object for '{request.action.value}', got {type(payload).__name__}",
                context,
            )
        return payload

    @staticmethod
    def _trace(error: BaseException, context: Dict[str, Any]) -> str:
        lines = [format_context(context)]
        if isinstance(error, ProvisioningError) and error.context:
            lines.append(format_context(error.context))
        lines.extend(traceback.format_exception(type(error), error, error.__traceback__))
        return "\n".join(line.rstrip("\n") for line in lines)

    def close(self) -> None:
        """Close every pooled session and release connection pool resources."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()

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

import unittest

from lxdprov.exceptions import (
    AuthError,
    InvalidInputError,
    NetworkError,
    OperationTimeoutError,
    ProtocolError,
    RemoteRejectedError,
)
from lxdprov.models import ApiResult, TransportOutcome
from lxdprov.translator import INTERNAL_ERROR_REASON, ResultTranslator

FAILURES = [
    InvalidInputError("Missing required field 'hostname' for action 'create'"),
    AuthError("refused"),
    OperationTimeoutError("timed out"),
    NetworkError("connection refused"),
    RemoteRejectedError(404, "Instance not found"),
    ProtocolError("not json"),
]


class TestResultTranslator(unittest.TestCase):
    def setUp(self):
        self.translator = ResultTranslator()

    def test_success(self):
        result = self.translator.translate(TransportOutcome.success(200, {"cpu": 1}))
        self.assertTrue(result.success)
        self.assertEqual(result.payload, {"cpu": 1})
        self.assertEqual(self.translator.to_host_string(result), "success")

    def test_every_failure_kind_translates(self):
        kinds = set()
        for error in FAILURES:
            with self.subTest(error=type(error).__name__):
                result = self.translator.translate(TransportOutcome.failure(error, trace="trace-line"))
                self.assertIsInstance(result, ApiResult)
                self.assertFalse(result.success)
                self.assertTrue(result.reason)
                self.assertIn("trace-line", result.detail)
                self.assertEqual(result.kind, error.kind)
                kinds.add(result.kind)
        self.assertEqual(len(kinds), 6)

    def test_retryable_flags(self):
        retryable = {
            type(e).__name__: self.translator.translate(TransportOutcome.failure(e)).retryable
            for e in FAILURES
        }
        self.assertEqual(retryable, {
            "InvalidInputError": False,
            "AuthError": False,
            "OperationTimeoutError": True,
            "NetworkError": True,
            "RemoteRejectedError": False,
            "ProtocolError": False,
        })
        server_error = self.translator.translate(TransportOutcome.failure(RemoteRejectedError(500, "boom")))
        self.assertTrue(server_error.retryable)

    def test_invalid_input_reason_is_the_message(self):
        error = FAILURES[0]
        result = self.translator.translate_error(error)
        self.assertEqual(self.translator.to_host_string(result), str(error))

    def test_reason_hides_transport_detail(self):
        error = NetworkError("Could not reach https://10.0.0.5:8443: Max retries exceeded")
        result = self.translator.translate(TransportOutcome.failure(error))
        self.assertNotIn("10.0.0.5", result.reason)
        self.assertIn("10.0.0.5", result.detail)

    def test_timeout_reason_mentions_retry(self):
        result = self.translator.translate(TransportOutcome.failure(OperationTimeoutError("slow")))
        self.assertIn("retried", self.translator.to_host_string(result))

    def test_remote_rejected_reason_includes_code(self):
        result = self.translator.translate(TransportOutcome.failure(RemoteRejectedError(409, "already exists")))
        self.assertIn("409", result.reason)
        self.assertIn("already exists", result.reason)

    def test_unexpected_exception(self):
        try:
            raise KeyError("boom")
        except KeyError as e:
            result = self.translator.translate_error(e)
        self.assertFalse(result.success)
        self.assertEqual(result.reason, INTERNAL_ERROR_REASON)
        self.assertIn("KeyError", result.detail)

    def test_failure_without_error(self):
        result = self.translator.translate(TransportOutcome(ok=False, status_code=500))
        self.assertFalse(result.success)
        self.assertTrue(result.reason)

    def test_connection_result(self):
        ok = self.translator.to_connection_result(ApiResult.ok())
        self.assertEqual(ok, {"success": True, "error": ""})

        failed = self.translator.translate(TransportOutcome.failure(AuthError("bad token")))
        self.assertEqual(
            self.translator.to_connection_result(failed),
            {"success": False, "error": AuthError.default_reason},
        )


if __name__ == '__main__':
    unittest.main()

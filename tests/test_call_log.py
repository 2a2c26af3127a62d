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
from unittest.mock import Mock, patch

from lxdprov.call_log import LoggingCallLogger, RecordingCallLogger, emit
from lxdprov.models import CallLogRecord
from lxdprov.utils.utils import REDACTED, parse_bool, redact

RECORD = CallLogRecord(
    component="lxd",
    action="create",
    input_snapshot={"hostname": "cloud1", "password": "pw", "configoptions": {"token": "t"}},
    outcome_summary="Could not connect",
    raw_trace="Traceback ...",
)


class TestCallLog(unittest.TestCase):
    def test_emit_redacts_secrets(self):
        sink = RecordingCallLogger()
        emit(sink, RECORD)
        snapshot = sink.records[0].input_snapshot
        self.assertEqual(snapshot["hostname"], "cloud1")
        self.assertEqual(snapshot["password"], REDACTED)
        self.assertEqual(snapshot["configoptions"]["token"], REDACTED)

    def test_emit_swallows_sink_errors(self):
        sink = Mock()
        sink.log_call.side_effect = RuntimeError("sink down")
        emit(sink, RECORD)
        sink.log_call.assert_called_once()

    def test_logging_sink(self):
        sink = LoggingCallLogger()
        with patch.object(sink, "logger") as mock_logger:
            sink.log_call("lxd", "create", {"hostname": "cloud1"}, "Could not connect", "trace")
        message = mock_logger.error.call_args.args[0]
        self.assertIn("Could not connect", message)
        self.assertIn("action=create", message)
        mock_logger.debug.assert_called_once_with("trace")


class TestUtils(unittest.TestCase):
    def test_parse_bool(self):
        self.assertTrue(parse_bool("on"))
        self.assertTrue(parse_bool(True))
        self.assertFalse(parse_bool(""))
        with self.assertRaises(ValueError):
            parse_bool("sometimes")

    def test_redact_leaves_empty_secrets(self):
        self.assertEqual(redact({"password": ""}), {"password": ""})


if __name__ == '__main__':
    unittest.main()

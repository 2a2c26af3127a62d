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

from typing import Any, Mapping, Protocol

from lxdprov.models import CallLogRecord
from lxdprov.utils.log import format_context, get_logger
from lxdprov.utils.utils import redact


class CallLogger(Protocol):
    """Sink for the module call log kept by the billing host"""

    def log_call(
        self,
        component: str,
        action: str,
        input_snapshot: Mapping[str, Any],
        outcome_summary: str,
        raw_trace: str,
    ) -> None:
        ...


class LoggingCallLogger:
    """Default sink that writes call records through the logging module"""

    def __init__(self, name: str = "lxdprov.calls"):
        self.logger = get_logger(name)

    def log_call(self, component, action, input_snapshot, outcome_summary, raw_trace):
        context = {"component": component, "action": action, "input": dict(input_snapshot)}
        self.logger.error(f"{outcome_summary} | {format_context(context)}")
        if raw_trace:
            self.logger.debug(raw_trace)


class RecordingCallLogger:
    """Keeps CallLogRecords in memory, for hosts that batch their audit trail"""

    def __init__(self):
        self.records = []

    def log_call(self, component, action, input_snapshot, outcome_summary, raw_trace):
        self.records.append(CallLogRecord(
            component=component,
            action=action,
            input_snapshot=dict(input_snapshot),
            outcome_summary=outcome_summary,
            raw_trace=raw_trace,
        ))


def emit(sink: CallLogger, record: CallLogRecord) -> None:
    """Hand a record to the sink; a failing sink is logged and otherwise ignored"""
    try:
        sink.log_call(
            record.component,
            record.action,
            redact(record.input_snapshot),
            record.outcome_summary,
            record.raw_trace,
        )
    except Exception as e:
        get_logger(__name__).warning(f"Call log sink failed for {record.action}: {e}")

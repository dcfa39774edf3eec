import copy
import datetime
import logging
from typing import Final, Optional

from sfnmock.aws.api.stepfunctions import (
    Arn,
    DescribeExecutionOutput,
    DescribeStateMachineForExecutionOutput,
    ExecutionAbortedEventDetails,
    ExecutionFailedEventDetails,
    ExecutionListItem,
    ExecutionRedriveFilter,
    ExecutionRedrivenEventDetails,
    ExecutionRedriveStatus,
    ExecutionStartedEventDetails,
    ExecutionStatus,
    ExecutionSucceededEventDetails,
    ExecutionTimedOutEventDetails,
    HistoryEvent,
    HistoryEventExecutionDataDetails,
    HistoryEventList,
    HistoryEventType,
    MapRunFailedEventDetails,
    MapRunLabel,
    MapRunStartedEventDetails,
    Name,
    SensitiveCause,
    SensitiveData,
    SensitiveError,
    StartExecutionOutput,
    StateMachineType,
    TraceHeader,
)
from sfnmock.services.stepfunctions.backend.state_machine import (
    StateMachineInstance,
    StateMachineVersion,
)
from sfnmock.services.stepfunctions.backend.transitions import (
    REDRIVABLE_EXECUTION_STATUSES,
    ExecutionRedriveNotPermitted,
    assert_execution_redrivable,
    assert_execution_transition,
)

LOG = logging.getLogger(__name__)

# the history event closing an execution, and the name of its details field
_TERMINAL_EVENTS: Final[dict[ExecutionStatus, tuple[HistoryEventType, str]]] = {
    ExecutionStatus.SUCCEEDED: (
        HistoryEventType.ExecutionSucceeded,
        "executionSucceededEventDetails",
    ),
    ExecutionStatus.FAILED: (HistoryEventType.ExecutionFailed, "executionFailedEventDetails"),
    ExecutionStatus.TIMED_OUT: (
        HistoryEventType.ExecutionTimedOut,
        "executionTimedOutEventDetails",
    ),
    ExecutionStatus.ABORTED: (HistoryEventType.ExecutionAborted, "executionAbortedEventDetails"),
}

_EXECUTION_DATA_FIELDS: Final[tuple[str, ...]] = ("input", "output")


class Execution:
    """
    A mocked execution. Executions never run their definition: they stay RUNNING until they are stopped, or completed
    through the synthetic completion hook of the mock backend.
    """

    name: Final[Name]
    exec_arn: Final[Arn]
    state_machine: Final[StateMachineInstance]
    state_machine_arn: Final[Arn]
    state_machine_version_arn: Final[Optional[Arn]]
    state_machine_alias_arn: Final[Optional[Arn]]
    map_run_arn: Final[Optional[Arn]]
    map_run_label: Final[Optional[MapRunLabel]]
    start_date: Final[datetime.datetime]
    input: Final[SensitiveData]
    trace_header: Final[Optional[TraceHeader]]

    exec_status: ExecutionStatus
    stop_date: Optional[datetime.datetime]
    output: Optional[SensitiveData]
    error: Optional[SensitiveError]
    cause: Optional[SensitiveCause]
    redrive_dates: list[datetime.datetime]
    events: HistoryEventList

    def __init__(
        self,
        name: Name,
        exec_arn: Arn,
        state_machine: StateMachineInstance,
        start_date: datetime.datetime,
        input: SensitiveData,
        trace_header: Optional[TraceHeader] = None,
        state_machine_alias_arn: Optional[Arn] = None,
        map_run_arn: Optional[Arn] = None,
        map_run_label: Optional[MapRunLabel] = None,
    ):
        self.name = name
        self.exec_arn = exec_arn
        self.state_machine = state_machine
        self.state_machine_arn = state_machine.source_arn
        self.state_machine_version_arn = (
            state_machine.arn if isinstance(state_machine, StateMachineVersion) else None
        )
        self.state_machine_alias_arn = state_machine_alias_arn
        self.map_run_arn = map_run_arn
        self.map_run_label = map_run_label
        self.start_date = start_date
        self.input = input
        self.trace_header = trace_header

        self.exec_status = ExecutionStatus.RUNNING
        self.stop_date = None
        self.output = None
        self.error = None
        self.cause = None
        self.redrive_dates = []
        self.events = []

        started_details = ExecutionStartedEventDetails(
            input=self.input,
            inputDetails=HistoryEventExecutionDataDetails(truncated=False),
            roleArn=state_machine.role_arn,
        )
        if self.state_machine_version_arn:
            started_details["stateMachineVersionArn"] = self.state_machine_version_arn
        if self.state_machine_alias_arn:
            started_details["stateMachineAliasArn"] = self.state_machine_alias_arn
        self.add_event(
            timestamp=start_date,
            event_type=HistoryEventType.ExecutionStarted,
            details_field="executionStartedEventDetails",
            details=started_details,
        )

    @property
    def redrive_count(self) -> int:
        return len(self.redrive_dates)

    @property
    def redrive_date(self) -> Optional[datetime.datetime]:
        return self.redrive_dates[-1] if self.redrive_dates else None

    @property
    def redrive_status(self) -> ExecutionRedriveStatus:
        if self.state_machine.sm_type == StateMachineType.EXPRESS:
            return ExecutionRedriveStatus.NOT_REDRIVABLE
        if self.exec_status not in REDRIVABLE_EXECUTION_STATUSES:
            return ExecutionRedriveStatus.NOT_REDRIVABLE
        if self.map_run_arn:
            return ExecutionRedriveStatus.REDRIVABLE_BY_MAP_RUN
        return ExecutionRedriveStatus.REDRIVABLE

    def add_event(
        self,
        timestamp: datetime.datetime,
        event_type: HistoryEventType,
        details_field: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> HistoryEvent:
        event = HistoryEvent(
            timestamp=timestamp,
            type=event_type,
            id=len(self.events) + 1,
            previousEventId=len(self.events),
        )
        if details_field:
            event[details_field] = details or {}
        self.events.append(event)
        return event

    def complete(
        self,
        status: ExecutionStatus,
        stop_date: datetime.datetime,
        output: Optional[SensitiveData] = None,
        error: Optional[SensitiveError] = None,
        cause: Optional[SensitiveCause] = None,
    ) -> None:
        """
        Moves the execution into the given terminal status. The output is only kept for SUCCEEDED executions, error
        and cause only for the failure-like ones.
        """
        status = ExecutionStatus(status)
        assert_execution_transition(self.exec_arn, self.exec_status, status)

        self.exec_status = status
        self.stop_date = stop_date
        event_type, details_field = _TERMINAL_EVENTS[status]
        if status == ExecutionStatus.SUCCEEDED:
            self.output = output
            details = ExecutionSucceededEventDetails(
                output=output,
                outputDetails=HistoryEventExecutionDataDetails(truncated=False),
            )
        else:
            self.error = error
            self.cause = cause
            details_type = {
                ExecutionStatus.FAILED: ExecutionFailedEventDetails,
                ExecutionStatus.TIMED_OUT: ExecutionTimedOutEventDetails,
                ExecutionStatus.ABORTED: ExecutionAbortedEventDetails,
            }[status]
            details = details_type()
            if error is not None:
                details["error"] = error
            if cause is not None:
                details["cause"] = cause
        self.add_event(stop_date, event_type, details_field, details)
        LOG.debug("Execution '%s' completed with status %s", self.exec_arn, status.value)

    def stop(
        self,
        stop_date: datetime.datetime,
        error: Optional[SensitiveError] = None,
        cause: Optional[SensitiveCause] = None,
    ) -> datetime.datetime:
        """Aborts a running execution. Returns the stop date, which is the original one if it already terminated."""
        if self.exec_status != ExecutionStatus.RUNNING:
            return self.stop_date
        self.complete(ExecutionStatus.ABORTED, stop_date=stop_date, error=error, cause=cause)
        return self.stop_date

    def redrive(self, redrive_date: datetime.datetime) -> None:
        if self.state_machine.sm_type == StateMachineType.EXPRESS:
            raise ExecutionRedriveNotPermitted(
                f"Execution '{self.exec_arn}' cannot be redriven: executions of EXPRESS state machines are not "
                f"redrivable",
                resource_name=self.exec_arn,
            )
        if self.map_run_arn:
            raise ExecutionRedriveNotPermitted(
                f"Execution '{self.exec_arn}' cannot be redriven: child executions are redriven through their "
                f"map run '{self.map_run_arn}'",
                resource_name=self.exec_arn,
            )
        assert_execution_redrivable(self.exec_arn, self.exec_status)

        self.exec_status = ExecutionStatus.RUNNING
        self.stop_date = None
        self.error = None
        self.cause = None
        self.redrive_dates.append(redrive_date)
        self.add_event(
            timestamp=redrive_date,
            event_type=HistoryEventType.ExecutionRedriven,
            details_field="executionRedrivenEventDetails",
            details=ExecutionRedrivenEventDetails(redriveCount=self.redrive_count),
        )

    def record_map_run_started(self, timestamp: datetime.datetime, map_run_arn: Arn) -> None:
        self.add_event(
            timestamp=timestamp,
            event_type=HistoryEventType.MapRunStarted,
            details_field="mapRunStartedEventDetails",
            details=MapRunStartedEventDetails(mapRunArn=map_run_arn),
        )

    def record_map_run_completed(
        self,
        timestamp: datetime.datetime,
        event_type: HistoryEventType,
        error: Optional[SensitiveError] = None,
        cause: Optional[SensitiveCause] = None,
    ) -> None:
        if event_type == HistoryEventType.MapRunFailed:
            details = MapRunFailedEventDetails()
            if error is not None:
                details["error"] = error
            if cause is not None:
                details["cause"] = cause
            self.add_event(timestamp, event_type, "mapRunFailedEventDetails", details)
        else:
            self.add_event(timestamp, event_type)

    def matches_redrive_filter(self, redrive_filter: Optional[ExecutionRedriveFilter]) -> bool:
        if redrive_filter == ExecutionRedriveFilter.REDRIVEN:
            return self.redrive_count > 0
        if redrive_filter == ExecutionRedriveFilter.NOT_REDRIVEN:
            return self.redrive_count == 0
        return True

    def to_start_output(self) -> StartExecutionOutput:
        return StartExecutionOutput(executionArn=self.exec_arn, startDate=self.start_date)

    def to_describe_output(self) -> DescribeExecutionOutput:
        describe_output = DescribeExecutionOutput(
            executionArn=self.exec_arn,
            stateMachineArn=self.state_machine_arn,
            name=self.name,
            status=self.exec_status,
            startDate=self.start_date,
            input=self.input,
            redriveCount=self.redrive_count,
            redriveStatus=self.redrive_status,
        )
        optional_fields = {
            "stopDate": self.stop_date,
            "output": self.output,
            "error": self.error,
            "cause": self.cause,
            "mapRunArn": self.map_run_arn,
            "stateMachineVersionArn": self.state_machine_version_arn,
            "stateMachineAliasArn": self.state_machine_alias_arn,
            "redriveDate": self.redrive_date,
            "traceHeader": self.trace_header,
        }
        for field, value in optional_fields.items():
            if value is not None:
                describe_output[field] = value
        return describe_output

    def to_execution_list_item(self) -> ExecutionListItem:
        item = ExecutionListItem(
            executionArn=self.exec_arn,
            stateMachineArn=self.state_machine_arn,
            name=self.name,
            status=self.exec_status,
            startDate=self.start_date,
            redriveCount=self.redrive_count,
        )
        optional_fields = {
            "stopDate": self.stop_date,
            "mapRunArn": self.map_run_arn,
            "stateMachineVersionArn": self.state_machine_version_arn,
            "stateMachineAliasArn": self.state_machine_alias_arn,
            "redriveDate": self.redrive_date,
        }
        for field, value in optional_fields.items():
            if value is not None:
                item[field] = value
        return item

    def to_describe_state_machine_for_execution_output(
        self,
    ) -> DescribeStateMachineForExecutionOutput:
        describe_output = self.state_machine.describe_for_execution()
        if self.map_run_arn:
            describe_output["mapRunArn"] = self.map_run_arn
            describe_output["label"] = self.map_run_label
        return describe_output

    def to_history_events(self, include_execution_data: bool = True) -> HistoryEventList:
        events = copy.deepcopy(self.events)
        if include_execution_data:
            return events
        for event in events:
            for details_field in ("executionStartedEventDetails", "executionSucceededEventDetails"):
                details = event.get(details_field)
                if details is None:
                    continue
                for data_field in _EXECUTION_DATA_FIELDS:
                    details.pop(data_field, None)
        return events

import datetime
from collections import Counter
from typing import Final, Iterable, Optional

from sfnmock.aws.api.stepfunctions import (
    Arn,
    DescribeMapRunOutput,
    ExecutionStatus,
    MapRunExecutionCounts,
    MapRunItemCounts,
    MapRunLabel,
    MapRunListItem,
    MapRunStatus,
    MaxConcurrency,
    ToleratedFailureCount,
    ToleratedFailurePercentage,
)
from sfnmock.services.stepfunctions.backend.execution import Execution
from sfnmock.services.stepfunctions.backend.transitions import (
    assert_map_run_mutable,
    assert_map_run_transition,
)


class MapRun:
    """
    A distributed map run of an execution. Every item of the run is processed by one child execution, so item and
    execution counts are derived from the status of the child executions.
    """

    arn: Final[Arn]
    execution_arn: Final[Arn]
    state_machine_arn: Final[Arn]
    label: Final[MapRunLabel]
    start_date: Final[datetime.datetime]

    status: MapRunStatus
    stop_date: Optional[datetime.datetime]
    max_concurrency: MaxConcurrency
    tolerated_failure_count: ToleratedFailureCount
    tolerated_failure_percentage: ToleratedFailurePercentage
    execution_arns: list[Arn]

    def __init__(
        self,
        arn: Arn,
        execution_arn: Arn,
        state_machine_arn: Arn,
        label: MapRunLabel,
        start_date: datetime.datetime,
        max_concurrency: MaxConcurrency = 0,
        tolerated_failure_count: ToleratedFailureCount = 0,
        tolerated_failure_percentage: ToleratedFailurePercentage = 0.0,
    ):
        self.arn = arn
        self.execution_arn = execution_arn
        self.state_machine_arn = state_machine_arn
        self.label = label
        self.start_date = start_date
        self.status = MapRunStatus.RUNNING
        self.stop_date = None
        self.max_concurrency = max_concurrency
        self.tolerated_failure_count = tolerated_failure_count
        self.tolerated_failure_percentage = tolerated_failure_percentage
        self.execution_arns = []

    def update(
        self,
        max_concurrency: Optional[MaxConcurrency] = None,
        tolerated_failure_count: Optional[ToleratedFailureCount] = None,
        tolerated_failure_percentage: Optional[ToleratedFailurePercentage] = None,
    ) -> None:
        assert_map_run_mutable(self.arn, self.status)
        if max_concurrency is not None:
            self.max_concurrency = max_concurrency
        if tolerated_failure_count is not None:
            self.tolerated_failure_count = tolerated_failure_count
        if tolerated_failure_percentage is not None:
            self.tolerated_failure_percentage = tolerated_failure_percentage

    def complete(self, status: MapRunStatus, stop_date: datetime.datetime) -> None:
        status = MapRunStatus(status)
        assert_map_run_transition(self.arn, self.status, status)
        self.status = status
        self.stop_date = stop_date

    def _counts(self, executions: Iterable[Execution]) -> dict:
        statuses = Counter(execution.exec_status for execution in executions)
        return dict(
            pending=0,
            running=statuses[ExecutionStatus.RUNNING],
            succeeded=statuses[ExecutionStatus.SUCCEEDED],
            failed=statuses[ExecutionStatus.FAILED],
            timedOut=statuses[ExecutionStatus.TIMED_OUT],
            aborted=statuses[ExecutionStatus.ABORTED],
            total=sum(statuses.values()),
            resultsWritten=0,
        )

    def to_describe_output(self, executions: Iterable[Execution]) -> DescribeMapRunOutput:
        counts = self._counts(executions)
        describe_output = DescribeMapRunOutput(
            mapRunArn=self.arn,
            executionArn=self.execution_arn,
            status=self.status,
            startDate=self.start_date,
            maxConcurrency=self.max_concurrency,
            toleratedFailurePercentage=self.tolerated_failure_percentage,
            toleratedFailureCount=self.tolerated_failure_count,
            itemCounts=MapRunItemCounts(**counts),
            executionCounts=MapRunExecutionCounts(**counts),
            redriveCount=0,
        )
        if self.stop_date is not None:
            describe_output["stopDate"] = self.stop_date
        return describe_output

    def to_map_run_list_item(self) -> MapRunListItem:
        item = MapRunListItem(
            executionArn=self.execution_arn,
            mapRunArn=self.arn,
            stateMachineArn=self.state_machine_arn,
            startDate=self.start_date,
        )
        if self.stop_date is not None:
            item["stopDate"] = self.stop_date
        return item

"""
Status transition tables of executions and map runs. Every status change of a mocked entity is checked against these
tables.
"""

from typing import Final, Optional

from sfnmock.aws.api.stepfunctions import (
    ExecutionNotRedrivable,
    ExecutionStatus,
    MapRunStatus,
    ValidationException,
    ValidationExceptionReason,
)

# statuses from which a redrive restarts the execution
REDRIVABLE_EXECUTION_STATUSES: Final[frozenset[ExecutionStatus]] = frozenset(
    {ExecutionStatus.FAILED, ExecutionStatus.TIMED_OUT, ExecutionStatus.ABORTED}
)

EXECUTION_TRANSITIONS: Final[dict[ExecutionStatus, frozenset[ExecutionStatus]]] = {
    ExecutionStatus.RUNNING: frozenset(
        {
            ExecutionStatus.SUCCEEDED,
            ExecutionStatus.FAILED,
            ExecutionStatus.TIMED_OUT,
            ExecutionStatus.ABORTED,
        }
    ),
    ExecutionStatus.SUCCEEDED: frozenset(),
    ExecutionStatus.FAILED: frozenset({ExecutionStatus.RUNNING}),
    ExecutionStatus.TIMED_OUT: frozenset({ExecutionStatus.RUNNING}),
    ExecutionStatus.ABORTED: frozenset({ExecutionStatus.RUNNING}),
    ExecutionStatus.PENDING_REDRIVE: frozenset({ExecutionStatus.RUNNING}),
}

MAP_RUN_TRANSITIONS: Final[dict[MapRunStatus, frozenset[MapRunStatus]]] = {
    MapRunStatus.RUNNING: frozenset(
        {MapRunStatus.SUCCEEDED, MapRunStatus.FAILED, MapRunStatus.ABORTED}
    ),
    MapRunStatus.SUCCEEDED: frozenset(),
    MapRunStatus.FAILED: frozenset(),
    MapRunStatus.ABORTED: frozenset(),
}

# statuses in which the mutable fields of a map run can be updated
MAP_RUN_MUTABLE_STATUSES: Final[frozenset[MapRunStatus]] = frozenset({MapRunStatus.RUNNING})


class InvalidTransition(ValidationException):
    """The requested operation is not permitted in the current status of the entity."""

    def __init__(self, message: str, resource_name: str = None, reason: Optional[str] = None):
        super().__init__(message, resourceName=resource_name, reason=reason)


class ExecutionRedriveNotPermitted(InvalidTransition, ExecutionNotRedrivable):
    """An execution cannot be redriven from its current status. Reported with the ExecutionNotRedrivable code."""

    code: str = "ExecutionNotRedrivable"


def can_transition_execution(current: ExecutionStatus, target: ExecutionStatus) -> bool:
    return target in EXECUTION_TRANSITIONS[current]


def can_transition_map_run(current: MapRunStatus, target: MapRunStatus) -> bool:
    return target in MAP_RUN_TRANSITIONS[current]


def assert_execution_transition(
    execution_arn: str, current: ExecutionStatus, target: ExecutionStatus
) -> None:
    if not can_transition_execution(current, target):
        raise InvalidTransition(
            f"Execution '{execution_arn}' cannot transition from {current.value} to {target.value}",
            resource_name=execution_arn,
        )


def assert_map_run_transition(map_run_arn: str, current: MapRunStatus, target: MapRunStatus) -> None:
    if not can_transition_map_run(current, target):
        raise InvalidTransition(
            f"Map Run '{map_run_arn}' cannot transition from {current.value} to {target.value}",
            resource_name=map_run_arn,
            reason=ValidationExceptionReason.CANNOT_UPDATE_COMPLETED_MAP_RUN,
        )


def assert_map_run_mutable(map_run_arn: str, status: MapRunStatus) -> None:
    if status not in MAP_RUN_MUTABLE_STATUSES:
        raise InvalidTransition(
            f"Map Run '{map_run_arn}' is not in RUNNING state and cannot be updated: {status.value}",
            resource_name=map_run_arn,
            reason=ValidationExceptionReason.CANNOT_UPDATE_COMPLETED_MAP_RUN,
        )


def assert_execution_redrivable(execution_arn: str, status: ExecutionStatus) -> None:
    if status not in REDRIVABLE_EXECUTION_STATUSES or not can_transition_execution(
        status, ExecutionStatus.RUNNING
    ):
        raise ExecutionRedriveNotPermitted(
            f"Execution '{execution_arn}' cannot be redriven as it is in {status.value} status",
            resource_name=execution_arn,
        )

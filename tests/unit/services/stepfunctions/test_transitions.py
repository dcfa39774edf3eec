import pytest

from sfnmock.aws.api.stepfunctions import (
    ExecutionNotRedrivable,
    ExecutionStatus,
    MapRunStatus,
    ValidationException,
    ValidationExceptionReason,
)
from sfnmock.services.stepfunctions.backend.transitions import (
    InvalidTransition,
    assert_execution_redrivable,
    assert_execution_transition,
    assert_map_run_mutable,
    assert_map_run_transition,
    can_transition_execution,
    can_transition_map_run,
)

EXECUTION_ARN = "arn:aws:states:us-east-1:000000000000:execution:test-machine:exec-1"
MAP_RUN_ARN = "arn:aws:states:us-east-1:000000000000:mapRun:test-machine/Map:run-1"


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        (ExecutionStatus.RUNNING, ExecutionStatus.SUCCEEDED, True),
        (ExecutionStatus.RUNNING, ExecutionStatus.ABORTED, True),
        (ExecutionStatus.RUNNING, ExecutionStatus.RUNNING, False),
        (ExecutionStatus.FAILED, ExecutionStatus.RUNNING, True),
        (ExecutionStatus.TIMED_OUT, ExecutionStatus.RUNNING, True),
        (ExecutionStatus.ABORTED, ExecutionStatus.RUNNING, True),
        (ExecutionStatus.PENDING_REDRIVE, ExecutionStatus.RUNNING, True),
        (ExecutionStatus.SUCCEEDED, ExecutionStatus.RUNNING, False),
        (ExecutionStatus.FAILED, ExecutionStatus.SUCCEEDED, False),
    ],
)
def test_execution_transitions(current, target, allowed):
    assert can_transition_execution(current, target) is allowed


def test_succeeded_executions_are_final():
    for target in ExecutionStatus:
        assert not can_transition_execution(ExecutionStatus.SUCCEEDED, target)


def test_map_run_transitions():
    for target in (MapRunStatus.SUCCEEDED, MapRunStatus.FAILED, MapRunStatus.ABORTED):
        assert can_transition_map_run(MapRunStatus.RUNNING, target)
    for current in (MapRunStatus.SUCCEEDED, MapRunStatus.FAILED, MapRunStatus.ABORTED):
        for target in MapRunStatus:
            assert not can_transition_map_run(current, target)


def test_assert_execution_transition():
    assert_execution_transition(EXECUTION_ARN, ExecutionStatus.RUNNING, ExecutionStatus.FAILED)

    with pytest.raises(InvalidTransition) as exc:
        assert_execution_transition(
            EXECUTION_ARN, ExecutionStatus.SUCCEEDED, ExecutionStatus.ABORTED
        )
    assert isinstance(exc.value, ValidationException)
    assert exc.value.resourceName == EXECUTION_ARN
    assert exc.value.message == (
        f"Execution '{EXECUTION_ARN}' cannot transition from SUCCEEDED to ABORTED"
    )


def test_assert_map_run_transition():
    with pytest.raises(InvalidTransition) as exc:
        assert_map_run_transition(MAP_RUN_ARN, MapRunStatus.ABORTED, MapRunStatus.SUCCEEDED)
    assert exc.value.reason == ValidationExceptionReason.CANNOT_UPDATE_COMPLETED_MAP_RUN


def test_assert_map_run_mutable():
    assert_map_run_mutable(MAP_RUN_ARN, MapRunStatus.RUNNING)

    with pytest.raises(InvalidTransition) as exc:
        assert_map_run_mutable(MAP_RUN_ARN, MapRunStatus.SUCCEEDED)
    assert exc.value.code == "ValidationException"
    assert exc.value.reason == ValidationExceptionReason.CANNOT_UPDATE_COMPLETED_MAP_RUN


@pytest.mark.parametrize("status", ["FAILED", "TIMED_OUT", "ABORTED"])
def test_assert_execution_redrivable(status):
    assert_execution_redrivable(EXECUTION_ARN, ExecutionStatus(status))


@pytest.mark.parametrize("status", ["RUNNING", "SUCCEEDED", "PENDING_REDRIVE"])
def test_assert_execution_not_redrivable(status):
    with pytest.raises(InvalidTransition) as exc:
        assert_execution_redrivable(EXECUTION_ARN, ExecutionStatus(status))
    assert isinstance(exc.value, ExecutionNotRedrivable)
    assert exc.value.code == "ExecutionNotRedrivable"
    assert exc.value.message == f"Execution '{EXECUTION_ARN}' cannot be redriven as it is in {status} status"

import datetime

import pytest

from sfnmock.aws.api.stepfunctions import (
    ActivityAlreadyExists,
    ActivityDoesNotExist,
    ConflictException,
    ExecutionDoesNotExist,
    MapRunStatus,
    ResourceNotFound,
    StateMachineDoesNotExist,
)
from sfnmock.services.stepfunctions.backend.activity import Activity
from sfnmock.services.stepfunctions.backend.alias import Alias
from sfnmock.services.stepfunctions.backend.execution import Execution
from sfnmock.services.stepfunctions.backend.map_run import MapRun
from sfnmock.services.stepfunctions.backend.state_machine import StateMachineRevision
from sfnmock.services.stepfunctions.backend.store import EntityKind, SFNStore
from sfnmock.services.stepfunctions.backend.transitions import InvalidTransition

DEFINITION = '{"StartAt": "Start", "States": {"Start": {"Type": "Succeed"}}}'
ROLE_ARN = "arn:aws:iam::000000000000:role/sfn-role"
NOW = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
STATE_MACHINE_ARN = "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine"
EXECUTION_ARN = "arn:aws:states:us-east-1:000000000000:execution:test-machine:exec-1"


def _activity(name: str) -> Activity:
    return Activity(
        arn=f"arn:aws:states:us-east-1:000000000000:activity:{name}", name=name, creation_date=NOW
    )


def _state_machine() -> StateMachineRevision:
    return StateMachineRevision(
        name="test-machine",
        arn=STATE_MACHINE_ARN,
        definition=DEFINITION,
        role_arn=ROLE_ARN,
        create_date=NOW,
        revision_id="revision-1",
    )


class TestSFNStore:
    def test_create_and_get(self, store: SFNStore):
        activity = store.create(EntityKind.ACTIVITY, _activity("a1"))

        assert store.exists(EntityKind.ACTIVITY, activity.arn)
        assert store.get(EntityKind.ACTIVITY, activity.arn) is activity
        assert store.find(EntityKind.ACTIVITY, activity.arn) is activity
        assert store.find(EntityKind.ACTIVITY, activity.arn + "-other") is None

    def test_create_duplicate(self, store: SFNStore):
        store.create(EntityKind.ACTIVITY, _activity("a1"))
        with pytest.raises(ActivityAlreadyExists):
            store.create(EntityKind.ACTIVITY, _activity("a1"))

    def test_create_wrong_entity_type(self, store: SFNStore):
        with pytest.raises(TypeError):
            store.create(EntityKind.STATE_MACHINE, _activity("a1"))

    @pytest.mark.parametrize(
        "kind, exception",
        [
            (EntityKind.STATE_MACHINE, StateMachineDoesNotExist),
            (EntityKind.VERSION, StateMachineDoesNotExist),
            (EntityKind.EXECUTION, ExecutionDoesNotExist),
            (EntityKind.ACTIVITY, ActivityDoesNotExist),
            (EntityKind.MAP_RUN, ResourceNotFound),
            (EntityKind.ALIAS, ResourceNotFound),
        ],
    )
    def test_get_missing_entity(self, store: SFNStore, kind, exception):
        with pytest.raises(exception):
            store.get(kind, "arn:aws:states:us-east-1:000000000000:stateMachine:missing")

    def test_list_keeps_insertion_order(self, store: SFNStore):
        for name in ["c", "a", "b"]:
            store.create(EntityKind.ACTIVITY, _activity(name))

        assert [activity.name for activity in store.list(EntityKind.ACTIVITY)] == ["c", "a", "b"]
        assert [
            activity.name
            for activity in store.list(EntityKind.ACTIVITY, lambda activity: activity.name != "a")
        ] == ["c", "b"]

    def test_delete_activity_removes_tags(self, store: SFNStore):
        activity = store.create(EntityKind.ACTIVITY, _activity("a1"))
        store.tags.tag_resource(activity.arn, [{"key": "k", "value": "v"}])

        store.delete(EntityKind.ACTIVITY, activity.arn)

        assert not store.exists(EntityKind.ACTIVITY, activity.arn)
        assert activity.arn not in store.tags.tags

    def test_delete_state_machine_cascades(self, store: SFNStore):
        state_machine = store.create(EntityKind.STATE_MACHINE, _state_machine())
        version = store.create(EntityKind.VERSION, state_machine.create_version(create_date=NOW))
        alias = store.create(
            EntityKind.ALIAS,
            Alias(
                state_machine_arn=state_machine.arn,
                name="prod",
                routing_configuration=[{"stateMachineVersionArn": version.arn, "weight": 100}],
                create_date=NOW,
            ),
        )
        execution = store.create(
            EntityKind.EXECUTION,
            Execution(
                name="exec-1",
                exec_arn=EXECUTION_ARN,
                state_machine=state_machine,
                start_date=NOW,
                input="{}",
            ),
        )
        store.tags.tag_resource(state_machine.arn, [{"key": "k", "value": "v"}])

        store.delete(EntityKind.STATE_MACHINE, state_machine.arn)

        assert not store.exists(EntityKind.STATE_MACHINE, state_machine.arn)
        assert not store.exists(EntityKind.VERSION, version.arn)
        assert not store.exists(EntityKind.ALIAS, alias.arn)
        assert state_machine.arn not in store.tags.tags
        # executions outlive their state machine
        assert store.get(EntityKind.EXECUTION, execution.exec_arn) is execution

    def test_delete_version_referenced_by_alias(self, store: SFNStore):
        state_machine = store.create(EntityKind.STATE_MACHINE, _state_machine())
        version = store.create(EntityKind.VERSION, state_machine.create_version(create_date=NOW))
        store.create(
            EntityKind.ALIAS,
            Alias(
                state_machine_arn=state_machine.arn,
                name="prod",
                routing_configuration=[{"stateMachineVersionArn": version.arn, "weight": 100}],
                create_date=NOW,
            ),
        )

        with pytest.raises(ConflictException):
            store.delete(EntityKind.VERSION, version.arn)
        assert store.exists(EntityKind.VERSION, version.arn)

    def test_delete_version_unlinks_revision(self, store: SFNStore):
        state_machine = store.create(EntityKind.STATE_MACHINE, _state_machine())
        version = store.create(EntityKind.VERSION, state_machine.create_version(create_date=NOW))

        store.delete(EntityKind.VERSION, version.arn)

        assert state_machine.versions == {}
        # the current revision can be published again, with the next version number
        assert state_machine.create_version(create_date=NOW).version == 2

    def test_update_map_run_only_while_running(self, store: SFNStore):
        map_run = store.create(
            EntityKind.MAP_RUN,
            MapRun(
                arn="arn:aws:states:us-east-1:000000000000:mapRun:test-machine/Map:run-1",
                execution_arn=EXECUTION_ARN,
                state_machine_arn=STATE_MACHINE_ARN,
                label="Map",
                start_date=NOW,
            ),
        )
        store.update(EntityKind.MAP_RUN, map_run.arn, lambda entity: entity.update(max_concurrency=5))
        assert map_run.max_concurrency == 5

        map_run.complete(MapRunStatus.SUCCEEDED, stop_date=NOW)
        with pytest.raises(InvalidTransition):
            store.update(
                EntityKind.MAP_RUN, map_run.arn, lambda entity: entity.update(max_concurrency=10)
            )
        assert map_run.max_concurrency == 5


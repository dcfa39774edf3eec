import pytest

from sfnmock.aws.api.stepfunctions import (
    ConflictException,
    InvalidArn,
    InvalidName,
    MissingRequiredParameter,
    ResourceNotFound,
    StateMachineDoesNotExist,
    ValidationExceptionReason,
)
from sfnmock.services.stepfunctions.validation import InvalidRouting

from tests.unit.conftest import WAIT_DEFINITION

STATE_MACHINE_ARN = "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine"
VERSION_1_ARN = f"{STATE_MACHINE_ARN}:1"
VERSION_2_ARN = f"{STATE_MACHINE_ARN}:2"
ALIAS_ARN = f"{STATE_MACHINE_ARN}:prod"


@pytest.fixture
def two_versions(provider, context, create_state_machine):
    create_state_machine(publish=True)
    provider.update_state_machine(
        context, STATE_MACHINE_ARN, definition=WAIT_DEFINITION, publish=True
    )
    return VERSION_1_ARN, VERSION_2_ARN


class TestVersions:
    def test_publish(self, provider, context, create_state_machine):
        create_state_machine()

        result = provider.publish_state_machine_version(context, STATE_MACHINE_ARN, description="v1")

        assert result["stateMachineVersionArn"] == VERSION_1_ARN
        assert provider.describe_state_machine(context, VERSION_1_ARN)["description"] == "v1"

    def test_publish_unchanged_revision_returns_existing_version(
        self, provider, context, create_state_machine
    ):
        create_state_machine()

        first = provider.publish_state_machine_version(context, STATE_MACHINE_ARN)
        second = provider.publish_state_machine_version(context, STATE_MACHINE_ARN)

        assert second == first
        assert len(
            provider.list_state_machine_versions(context, STATE_MACHINE_ARN)["stateMachineVersions"]
        ) == 1

    def test_publish_with_revision_id(self, provider, context, create_state_machine):
        create_state_machine()

        result = provider.publish_state_machine_version(context, STATE_MACHINE_ARN, revision_id="uid-1")
        assert result["stateMachineVersionArn"] == VERSION_1_ARN

        with pytest.raises(ConflictException):
            provider.publish_state_machine_version(context, STATE_MACHINE_ARN, revision_id="outdated")

    def test_publish_unknown_state_machine(self, provider, context):
        with pytest.raises(StateMachineDoesNotExist):
            provider.publish_state_machine_version(context, STATE_MACHINE_ARN)

    def test_list_versions_newest_first(self, provider, context, two_versions):
        result = provider.list_state_machine_versions(context, STATE_MACHINE_ARN)

        assert [item["stateMachineVersionArn"] for item in result["stateMachineVersions"]] == [
            VERSION_2_ARN,
            VERSION_1_ARN,
        ]
        assert "nextToken" not in result

    def test_paginate_versions(self, provider, context, two_versions):
        page = provider.list_state_machine_versions(context, STATE_MACHINE_ARN, max_results=1)
        assert [item["stateMachineVersionArn"] for item in page["stateMachineVersions"]] == [
            VERSION_2_ARN
        ]

        page = provider.list_state_machine_versions(
            context, STATE_MACHINE_ARN, max_results=1, next_token=page["nextToken"]
        )
        assert [item["stateMachineVersionArn"] for item in page["stateMachineVersions"]] == [
            VERSION_1_ARN
        ]
        assert "nextToken" not in page

    def test_delete_version(self, provider, context, two_versions):
        provider.delete_state_machine_version(context, VERSION_1_ARN)

        versions = provider.list_state_machine_versions(context, STATE_MACHINE_ARN)
        assert [item["stateMachineVersionArn"] for item in versions["stateMachineVersions"]] == [
            VERSION_2_ARN
        ]
        with pytest.raises(StateMachineDoesNotExist):
            provider.describe_state_machine(context, VERSION_1_ARN)
        # deleting is idempotent
        provider.delete_state_machine_version(context, VERSION_1_ARN)

    def test_version_numbers_are_not_reused(self, provider, context, two_versions):
        provider.delete_state_machine_version(context, VERSION_2_ARN)

        result = provider.update_state_machine(
            context, STATE_MACHINE_ARN, definition='{"StartAt": "S", "States": {"S": {"Type": "Succeed"}}}',
            publish=True,
        )
        assert result["stateMachineVersionArn"] == f"{STATE_MACHINE_ARN}:3"

    def test_delete_version_requires_version_arn(self, provider, context, two_versions):
        with pytest.raises(InvalidArn):
            provider.delete_state_machine_version(context, STATE_MACHINE_ARN)

    def test_delete_state_machine_deletes_versions(self, provider, context, two_versions):
        provider.delete_state_machine(context, STATE_MACHINE_ARN)

        with pytest.raises(StateMachineDoesNotExist):
            provider.describe_state_machine(context, VERSION_2_ARN)


class TestAliases:
    def test_create_and_describe(self, provider, context, two_versions):
        routing = [{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}]

        result = provider.create_state_machine_alias(
            context, name="prod", routing_configuration=routing, description="production"
        )

        assert result["stateMachineAliasArn"] == ALIAS_ARN
        assert provider.describe_state_machine_alias(context, ALIAS_ARN) == {
            "stateMachineAliasArn": ALIAS_ARN,
            "name": "prod",
            "description": "production",
            "routingConfiguration": routing,
            "creationDate": result["creationDate"],
            "updateDate": result["creationDate"],
        }

    def test_create_is_idempotent(self, provider, context, two_versions):
        routing = [{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}]

        first = provider.create_state_machine_alias(context, name="prod", routing_configuration=routing)
        second = provider.create_state_machine_alias(context, name="prod", routing_configuration=routing)
        assert second == first

        with pytest.raises(ConflictException):
            provider.create_state_machine_alias(
                context,
                name="prod",
                routing_configuration=[{"stateMachineVersionArn": VERSION_2_ARN, "weight": 100}],
            )

    def test_weights_must_sum_to_100(self, provider, context, two_versions):
        with pytest.raises(InvalidRouting) as exc:
            provider.create_state_machine_alias(
                context,
                name="prod",
                routing_configuration=[
                    {"stateMachineVersionArn": VERSION_1_ARN, "weight": 60},
                    {"stateMachineVersionArn": VERSION_2_ARN, "weight": 30},
                ],
            )
        assert exc.value.reason == ValidationExceptionReason.INVALID_ROUTING_CONFIGURATION
        assert provider.list_state_machine_aliases(context, STATE_MACHINE_ARN) == {
            "stateMachineAliases": []
        }

    def test_routing_to_unknown_version(self, provider, context, two_versions):
        with pytest.raises(ResourceNotFound):
            provider.create_state_machine_alias(
                context,
                name="prod",
                routing_configuration=[{"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:9", "weight": 100}],
            )

    def test_alias_of_unknown_state_machine(self, provider, context):
        with pytest.raises(StateMachineDoesNotExist):
            provider.create_state_machine_alias(
                context,
                name="prod",
                routing_configuration=[{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}],
            )

    @pytest.mark.parametrize("name", ["1", "bad name", ""])
    def test_invalid_alias_name(self, provider, context, two_versions, name):
        with pytest.raises(InvalidName):
            provider.create_state_machine_alias(
                context,
                name=name,
                routing_configuration=[{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}],
            )

    def test_update(self, provider, context, two_versions):
        created = provider.create_state_machine_alias(
            context,
            name="prod",
            routing_configuration=[{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}],
        )
        routing = [
            {"stateMachineVersionArn": VERSION_1_ARN, "weight": 20},
            {"stateMachineVersionArn": VERSION_2_ARN, "weight": 80},
        ]

        result = provider.update_state_machine_alias(
            context, ALIAS_ARN, description="canary", routing_configuration=routing
        )

        describe = provider.describe_state_machine_alias(context, ALIAS_ARN)
        assert describe["description"] == "canary"
        assert describe["routingConfiguration"] == routing
        assert describe["creationDate"] == created["creationDate"]
        assert describe["updateDate"] == result["updateDate"]
        assert result["updateDate"] > created["creationDate"]

    def test_update_requires_a_field(self, provider, context, two_versions):
        provider.create_state_machine_alias(
            context,
            name="prod",
            routing_configuration=[{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}],
        )
        with pytest.raises(MissingRequiredParameter):
            provider.update_state_machine_alias(context, ALIAS_ARN)

    def test_list_and_delete(self, provider, context, two_versions):
        provider.create_state_machine_alias(
            context,
            name="prod",
            routing_configuration=[{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}],
        )

        aliases = provider.list_state_machine_aliases(context, STATE_MACHINE_ARN)
        assert [item["stateMachineAliasArn"] for item in aliases["stateMachineAliases"]] == [ALIAS_ARN]

        provider.delete_state_machine_alias(context, ALIAS_ARN)

        with pytest.raises(ResourceNotFound):
            provider.describe_state_machine_alias(context, ALIAS_ARN)
        assert provider.list_state_machine_aliases(context, STATE_MACHINE_ARN) == {
            "stateMachineAliases": []
        }

    def test_alias_arn_required(self, provider, context):
        with pytest.raises(InvalidArn):
            provider.describe_state_machine_alias(context, VERSION_1_ARN)
        with pytest.raises(InvalidArn):
            provider.delete_state_machine_alias(context, STATE_MACHINE_ARN)

    def test_version_referenced_by_alias_cannot_be_deleted(self, provider, context, two_versions):
        provider.create_state_machine_alias(
            context,
            name="prod",
            routing_configuration=[{"stateMachineVersionArn": VERSION_1_ARN, "weight": 100}],
        )

        with pytest.raises(ConflictException):
            provider.delete_state_machine_version(context, VERSION_1_ARN)

        provider.delete_state_machine_version(context, VERSION_2_ARN)

    def test_executions_through_alias_follow_the_routing(
        self, provider, context, two_versions, start_execution
    ):
        provider.create_state_machine_alias(
            context,
            name="prod",
            routing_configuration=[
                {"stateMachineVersionArn": VERSION_1_ARN, "weight": 50},
                {"stateMachineVersionArn": VERSION_2_ARN, "weight": 50},
            ],
        )

        versions = set()
        for i in range(20):
            execution_arn = start_execution(ALIAS_ARN, name=f"exec-{i}")["executionArn"]
            describe = provider.describe_execution(context, execution_arn)
            assert describe["stateMachineArn"] == STATE_MACHINE_ARN
            assert describe["stateMachineAliasArn"] == ALIAS_ARN
            versions.add(describe["stateMachineVersionArn"])

        assert versions == {VERSION_1_ARN, VERSION_2_ARN}
        executions = provider.list_executions(context, state_machine_arn=ALIAS_ARN)["executions"]
        assert len(executions) == 20

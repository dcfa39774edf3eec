import pytest

from sfnmock.aws.api.stepfunctions import (
    ExecutionRedriveFilter,
    ExecutionStatus,
    InspectionLevel,
    InvalidArn,
    InvalidName,
    LogLevel,
    StateMachineType,
    ValidationException,
    ValidationExceptionReason,
)
from sfnmock.services.stepfunctions.validation import (
    InvalidEnum,
    InvalidRange,
    InvalidRouting,
    InvalidTagKey,
    InvalidTagValue,
    validate_alias_name,
    validate_inspection_level,
    validate_log_level,
    validate_max_concurrency,
    validate_max_results,
    validate_name,
    validate_next_token,
    validate_redrive_filter,
    validate_routing_configuration,
    validate_state_machine_type,
    validate_status_filter,
    validate_tag_keys,
    validate_tags,
    validate_tolerated_failure_count,
    validate_tolerated_failure_percentage,
)

STATE_MACHINE_ARN = "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine"


class TestMaxResults:
    @pytest.mark.parametrize("value", [1, 500, 1000])
    def test_in_range(self, value):
        assert validate_max_results(value) == value

    def test_below_range(self):
        with pytest.raises(InvalidRange) as exc:
            validate_max_results(0)
        assert exc.value.code == "ValidationException"
        assert exc.value.field == "maxResults"
        assert exc.value.message == (
            "1 validation error detected: Value '0' at 'maxResults' failed to satisfy constraint: "
            "Member must have value greater than or equal to 1"
        )

    def test_above_range(self):
        with pytest.raises(InvalidRange) as exc:
            validate_max_results(1001)
        assert "less than or equal to 1000" in exc.value.message

    @pytest.mark.parametrize("value", [True, "10", 1.5])
    def test_not_an_integer(self, value):
        with pytest.raises(InvalidRange):
            validate_max_results(value)


def test_validate_next_token():
    assert validate_next_token("abc") == "abc"
    with pytest.raises(InvalidRange) as exc:
        validate_next_token("a" * 1025)
    assert exc.value.field == "nextToken"


class TestEnums:
    def test_valid_values(self):
        assert validate_status_filter("RUNNING") == ExecutionStatus.RUNNING
        assert validate_redrive_filter("NOT_REDRIVEN") == ExecutionRedriveFilter.NOT_REDRIVEN
        assert validate_state_machine_type("EXPRESS") == StateMachineType.EXPRESS
        assert validate_inspection_level(InspectionLevel.TRACE) == InspectionLevel.TRACE
        assert validate_log_level("ERROR") == LogLevel.ERROR

    def test_invalid_value(self):
        with pytest.raises(InvalidEnum) as exc:
            validate_status_filter("DONE")
        assert isinstance(exc.value, ValidationException)
        assert exc.value.field == "statusFilter"
        assert (
            "Member must satisfy enum value set: "
            "[RUNNING, SUCCEEDED, FAILED, TIMED_OUT, ABORTED, PENDING_REDRIVE]" in exc.value.message
        )

    def test_none_is_invalid(self):
        with pytest.raises(InvalidEnum):
            validate_state_machine_type(None)


class TestMapRunFields:
    def test_non_negative_integers(self):
        assert validate_max_concurrency(0) == 0
        assert validate_tolerated_failure_count(10) == 10
        with pytest.raises(InvalidRange) as exc:
            validate_max_concurrency(-1)
        assert exc.value.field == "maxConcurrency"
        with pytest.raises(InvalidRange):
            validate_tolerated_failure_count("1")

    @pytest.mark.parametrize("value", [0, 12.5, 100])
    def test_percentage_in_range(self, value):
        assert validate_tolerated_failure_percentage(value) == value

    @pytest.mark.parametrize("value", [-0.1, 100.5, None, False])
    def test_percentage_out_of_range(self, value):
        with pytest.raises(InvalidRange) as exc:
            validate_tolerated_failure_percentage(value)
        assert exc.value.field == "toleratedFailurePercentage"


class TestNames:
    @pytest.mark.parametrize("name", ["test-machine", "a", "a" * 80, "my_machine.v2"])
    def test_valid_names(self, name):
        assert validate_name(name) == name

    @pytest.mark.parametrize(
        "name",
        ["", None, "a" * 81, "with space", "a/b", "a:b", "a*b", "{a}", "tab\tname", "ctrl\x7fname"],
    )
    def test_invalid_names(self, name):
        with pytest.raises(InvalidName) as exc:
            validate_name(name)
        assert exc.value.code == "InvalidName"

    def test_numeric_alias_name(self):
        assert validate_alias_name("prod") == "prod"
        assert validate_alias_name("v1") == "v1"
        with pytest.raises(InvalidName):
            validate_alias_name("1")


class TestTags:
    def test_missing_value_is_normalised(self):
        assert validate_tags([{"key": "team"}, {"key": "env", "value": "dev"}]) == [
            {"key": "team", "value": ""},
            {"key": "env", "value": "dev"},
        ]
        assert validate_tags(None) == []

    def test_invalid_key(self):
        with pytest.raises(InvalidTagKey) as exc:
            validate_tags([{"key": "", "value": "v"}])
        assert exc.value.field == "tags.member.key"
        with pytest.raises(InvalidTagKey):
            validate_tags([{"key": "k" * 129, "value": "v"}])
        with pytest.raises(InvalidTagKey):
            validate_tag_keys(["ok", ""])

    def test_invalid_value(self):
        with pytest.raises(InvalidTagValue) as exc:
            validate_tags([{"key": "k", "value": "v" * 257}])
        assert exc.value.field == "tags.member.value"

    def test_tag_keys(self):
        assert validate_tag_keys(["a", "b"]) == ["a", "b"]
        assert validate_tag_keys(None) == []


class TestRoutingConfiguration:
    def test_single_version(self):
        validate_routing_configuration(
            [{"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": 100}]
        )

    def test_two_versions(self):
        validate_routing_configuration(
            [
                {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": 60},
                {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:2", "weight": 40},
            ]
        )

    def test_weights_must_sum_to_100(self):
        with pytest.raises(InvalidRouting) as exc:
            validate_routing_configuration(
                [
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": 60},
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:2", "weight": 30},
                ]
            )
        assert exc.value.code == "ValidationException"
        assert exc.value.reason == ValidationExceptionReason.INVALID_ROUTING_CONFIGURATION
        assert "got 90" in exc.value.message

    @pytest.mark.parametrize("routing_configuration", [[], None, "x"])
    def test_empty_routing(self, routing_configuration):
        with pytest.raises(InvalidRouting):
            validate_routing_configuration(routing_configuration)

    def test_too_many_entries(self):
        with pytest.raises(InvalidRouting):
            validate_routing_configuration(
                [
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": 50},
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:2", "weight": 25},
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:3", "weight": 25},
                ]
            )

    def test_duplicate_versions(self):
        with pytest.raises(InvalidRouting):
            validate_routing_configuration(
                [
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": 50},
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": 50},
                ]
            )

    def test_versions_of_different_state_machines(self):
        with pytest.raises(InvalidRouting):
            validate_routing_configuration(
                [
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": 50},
                    {"stateMachineVersionArn": f"{STATE_MACHINE_ARN}-other:1", "weight": 50},
                ]
            )

    @pytest.mark.parametrize("weight", [-1, 101, "50", None])
    def test_invalid_weight(self, weight):
        with pytest.raises(InvalidRouting) as exc:
            validate_routing_configuration(
                [{"stateMachineVersionArn": f"{STATE_MACHINE_ARN}:1", "weight": weight}]
            )
        assert exc.value.field == "routingConfiguration.member.weight"

    @pytest.mark.parametrize(
        "version_arn", [STATE_MACHINE_ARN, f"{STATE_MACHINE_ARN}:prod", "not-an-arn"]
    )
    def test_entries_must_be_version_arns(self, version_arn):
        with pytest.raises(InvalidArn):
            validate_routing_configuration([{"stateMachineVersionArn": version_arn, "weight": 100}])

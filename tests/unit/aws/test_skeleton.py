import pytest

from sfnmock.aws.api import CommonServiceException, RequestContext
from sfnmock.aws.api.stepfunctions import (
    ActivityDoesNotExist,
    MissingRequiredParameter,
    StepfunctionsApi,
    ValidationException,
)
from sfnmock.aws.skeleton import Skeleton, create_skeleton, get_handler_attributes
from sfnmock.aws.spec import load_service

from tests.unit.conftest import PASS_DEFINITION, TEST_ROLE_ARN


@pytest.fixture
def skeleton(provider):
    return create_skeleton("stepfunctions", provider)


def test_invoke_expanded_handler(skeleton, context):
    result = skeleton.invoke(context, "CreateActivity", {"name": "test-activity"})

    assert result["activityArn"] == "arn:aws:states:us-east-1:000000000000:activity:test-activity"
    assert context.operation == "CreateActivity"
    assert context.request_id


def test_invoke_request_handler(skeleton, context):
    request = {"name": "test-machine", "definition": PASS_DEFINITION, "roleArn": TEST_ROLE_ARN}

    result = skeleton.invoke(context, "CreateStateMachine", request)

    assert result["stateMachineArn"] == "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine"
    listed = skeleton.invoke(RequestContext(), "ListStateMachines")
    assert [item["name"] for item in listed["stateMachines"]] == ["test-machine"]


def test_unknown_field(skeleton, context):
    with pytest.raises(ValidationException) as exc:
        skeleton.invoke(context, "CreateActivity", {"name": "test-activity", "bogus": 1})
    assert '"bogus"' in exc.value.message


@pytest.mark.parametrize(
    "operation, request_record, location",
    [
        ("CreateActivity", {"name": "act", "tags": [{"key": "a", "value": "b", "bogus": "x"}]}, "tags[0]"),
        (
            "UpdateStateMachineAlias",
            {
                "stateMachineAliasArn": "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine:live",
                "routingConfiguration": [
                    {
                        "stateMachineVersionArn": "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine:1",
                        "weight": 100,
                        "bogus": "x",
                    }
                ],
            },
            "routingConfiguration[0]",
        ),
        (
            "UpdateStateMachine",
            {
                "stateMachineArn": "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine",
                "tracingConfiguration": {"enabled": True, "bogus": "x"},
            },
            "tracingConfiguration",
        ),
        (
            "UpdateStateMachine",
            {
                "stateMachineArn": "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine",
                "loggingConfiguration": {"level": "ALL", "destinations": [{"bogus": "x"}]},
            },
            "loggingConfiguration.destinations[0]",
        ),
    ],
)
def test_unknown_nested_field(skeleton, context, provider, operation, request_record, location):
    with pytest.raises(ValidationException) as exc:
        skeleton.invoke(context, operation, request_record)
    assert exc.value.message.startswith(f'Unknown parameter in {location}: "bogus", must be one of: ')
    assert provider.list_activities(context)["activities"] == []


def test_missing_nested_field(skeleton, context):
    request = {
        "stateMachineAliasArn": "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine:live",
        "routingConfiguration": [
            {"stateMachineVersionArn": "arn:aws:states:us-east-1:000000000000:stateMachine:test-machine:1"}
        ],
    }

    with pytest.raises(MissingRequiredParameter) as exc:
        skeleton.invoke(context, "UpdateStateMachineAlias", request)
    assert exc.value.message == 'Missing required parameter in routingConfiguration[0]: "weight"'


@pytest.mark.parametrize(
    "tags, location",
    [({"key": "a", "value": "b"}, "tags"), (["a"], "tags[0]")],
)
def test_nested_field_of_the_wrong_type(skeleton, context, tags, location):
    with pytest.raises(ValidationException) as exc:
        skeleton.invoke(context, "CreateActivity", {"name": "act", "tags": tags})
    assert exc.value.message.startswith(f"Invalid type for parameter {location}, ")


def test_missing_required_field(skeleton, context):
    with pytest.raises(MissingRequiredParameter) as exc:
        skeleton.invoke(context, "DescribeActivity", {})
    assert exc.value.message == 'Missing required parameter in input: "activityArn"'


def test_typed_failures_are_raised(skeleton, context):
    with pytest.raises(ActivityDoesNotExist):
        skeleton.invoke(
            context,
            "DescribeActivity",
            {"activityArn": "arn:aws:states:us-east-1:000000000000:activity:missing"},
        )


@pytest.mark.parametrize("operation", ["SendTaskSuccess", "GetActivityTask", "NoSuchOperation"])
def test_unimplemented_operations(skeleton, context, operation):
    with pytest.raises(CommonServiceException) as exc:
        skeleton.invoke(context, operation, {})
    assert exc.value.code == "InternalFailure"
    assert exc.value.status_code == 501


def test_dispatch_table(context):
    calls = []

    def _list_activities(ctx, request):
        calls.append((ctx, request))

    skeleton = Skeleton(load_service("stepfunctions"), {"ListActivities": _list_activities})

    assert skeleton.invoke(context, "ListActivities", {"maxResults": 5}) == {}
    assert calls == [(context, {"maxResults": 5})]


def test_get_handler_attributes():
    handlers = get_handler_attributes(StepfunctionsApi)

    assert handlers["CreateStateMachine"].function_name == "create_state_machine"
    assert not handlers["CreateStateMachine"].expand_parameters
    assert handlers["StartExecution"].function_name == "start_execution"
    assert handlers["StartExecution"].expand_parameters
    assert handlers["StartExecution"].pass_context
    assert "SendTaskSuccess" not in handlers

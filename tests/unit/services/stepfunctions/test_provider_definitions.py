import json

import pytest

from sfnmock.aws.api.stepfunctions import (
    InvalidArn,
    InvalidDefinition,
    TestExecutionStatus,
    ValidateStateMachineDefinitionResultCode,
)
from sfnmock.services.stepfunctions.asl import MISSING_TRANSITION_TARGET
from sfnmock.services.stepfunctions.validation import InvalidEnum

from tests.unit.conftest import PASS_DEFINITION, TEST_ROLE_ARN

EXPRESS_INCOMPATIBLE_DEFINITION = json.dumps(
    {
        "StartAt": "Run",
        "States": {"Run": {"Type": "Task", "Resource": "arn:aws:states:::ecs:runTask.sync", "End": True}},
    }
)


class TestValidateStateMachineDefinition:
    def test_valid(self, provider, context):
        result = provider.validate_state_machine_definition(context, PASS_DEFINITION)

        assert result == {"result": ValidateStateMachineDefinitionResultCode.OK, "diagnostics": []}

    def test_invalid(self, provider, context):
        definition = json.dumps({"StartAt": "Start", "States": {"Start": {"Type": "Pass", "Next": "Gone"}}})

        result = provider.validate_state_machine_definition(context, definition)

        assert result["result"] == ValidateStateMachineDefinitionResultCode.FAIL
        assert [diagnostic["code"] for diagnostic in result["diagnostics"]] == [MISSING_TRANSITION_TARGET]

    def test_type_is_taken_into_account(self, provider, context):
        standard = provider.validate_state_machine_definition(context, EXPRESS_INCOMPATIBLE_DEFINITION)
        express = provider.validate_state_machine_definition(
            context, EXPRESS_INCOMPATIBLE_DEFINITION, type="EXPRESS"
        )

        assert standard["result"] == ValidateStateMachineDefinitionResultCode.OK
        assert express["result"] == ValidateStateMachineDefinitionResultCode.FAIL

    def test_invalid_type(self, provider, context):
        with pytest.raises(InvalidEnum):
            provider.validate_state_machine_definition(context, PASS_DEFINITION, type="BATCH")

    def test_does_not_create_anything(self, provider, context):
        provider.validate_state_machine_definition(context, PASS_DEFINITION)

        assert provider.list_state_machines(context) == {"stateMachines": []}


class TestTestState:
    def test_pass_state(self, provider, context):
        result = provider.test_state(
            context,
            json.dumps({"Type": "Pass", "Result": {"x": 1}, "ResultPath": "$.r", "Next": "Next"}),
            role_arn=TEST_ROLE_ARN,
            input=json.dumps({"a": 1}),
        )

        assert result["status"] == TestExecutionStatus.SUCCEEDED
        assert json.loads(result["output"]) == {"a": 1, "r": {"x": 1}}
        assert result["nextState"] == "Next"
        assert "inspectionData" not in result

    def test_inspection_level(self, provider, context):
        result = provider.test_state(
            context, json.dumps({"Type": "Pass", "End": True}), inspection_level="TRACE"
        )

        assert result["inspectionData"]["input"] == "{}"

    def test_fail_state(self, provider, context):
        result = provider.test_state(
            context, json.dumps({"Type": "Fail", "Error": "Boom", "Cause": "because"})
        )

        assert result["status"] == TestExecutionStatus.FAILED
        assert result["error"] == "Boom"

    def test_invalid_role(self, provider, context):
        with pytest.raises(InvalidArn):
            provider.test_state(context, json.dumps({"Type": "Succeed"}), role_arn="not-a-role")

    def test_invalid_inspection_level(self, provider, context):
        with pytest.raises(InvalidEnum):
            provider.test_state(context, json.dumps({"Type": "Succeed"}), inspection_level="VERBOSE")

    def test_invalid_state(self, provider, context):
        with pytest.raises(InvalidDefinition):
            provider.test_state(context, "{not json")

    def test_choice_operand_of_the_wrong_type(self, provider, context):
        definition = json.dumps(
            {
                "Type": "Choice",
                "Choices": [{"Variable": "$.x", "NumericGreaterThan": "5", "Next": "A"}],
                "Default": "B",
            }
        )

        with pytest.raises(InvalidDefinition) as exc:
            provider.test_state(context, definition, input=json.dumps({"x": 1}))
        assert exc.value.code == "InvalidDefinition"

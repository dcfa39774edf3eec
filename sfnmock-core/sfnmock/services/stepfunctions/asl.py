"""
Amazon States Language support: static analysis of state machine definitions, and the evaluator behind TestState.

The evaluator runs a single state against an input without touching any store. It supports the Pass, Succeed, Fail,
Wait and Choice states, input and output processing through InputPath, Parameters, ResultPath and OutputPath, and
reports every other state type as a States.Runtime failure.
"""

import copy
import json
import logging
from typing import Any, Callable, Final, Optional

import jsonpath_ng
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.jsonpath import JSONPath

from sfnmock.aws.api.stepfunctions import (
    InspectionData,
    InspectionLevel,
    InvalidDefinition,
    InvalidExecutionInput,
    StateMachineType,
    TestExecutionStatus,
    TestStateOutput,
    ValidateStateMachineDefinitionDiagnostic,
    ValidateStateMachineDefinitionDiagnosticList,
    ValidateStateMachineDefinitionSeverity,
)

LOG = logging.getLogger(__name__)

STATE_TYPES: Final[tuple[str, ...]] = (
    "Pass",
    "Task",
    "Choice",
    "Wait",
    "Succeed",
    "Fail",
    "Parallel",
    "Map",
)
TERMINAL_STATE_TYPES: Final[tuple[str, ...]] = ("Succeed", "Fail")
TESTABLE_STATE_TYPES: Final[tuple[str, ...]] = ("Pass", "Succeed", "Fail", "Wait", "Choice")

# diagnostic codes
INVALID_JSON_DESCRIPTION: Final[str] = "INVALID_JSON_DESCRIPTION"
SCHEMA_VALIDATION_FAILED: Final[str] = "SCHEMA_VALIDATION_FAILED"
MISSING_TRANSITION_TARGET: Final[str] = "MISSING_TRANSITION_TARGET"

# error names reported by the evaluator
STATES_RUNTIME: Final[str] = "States.Runtime"
STATES_NO_CHOICE_MATCHED: Final[str] = "States.NoChoiceMatched"

_EXPRESS_UNSUPPORTED_RESOURCE_SUFFIXES: Final[tuple[str, ...]] = (".sync", ".sync:2", ".waitForTaskToken")


#
# Static analysis
#


def _diagnostic(code: str, message: str, location: str = None) -> ValidateStateMachineDefinitionDiagnostic:
    diagnostic = ValidateStateMachineDefinitionDiagnostic(
        severity=ValidateStateMachineDefinitionSeverity.ERROR, code=code, message=message
    )
    if location is not None:
        diagnostic["location"] = location
    return diagnostic


def _analyse_program(
    program: Any,
    location: str,
    state_machine_type: StateMachineType,
    diagnostics: ValidateStateMachineDefinitionDiagnosticList,
) -> None:
    if not isinstance(program, dict):
        diagnostics.append(
            _diagnostic(SCHEMA_VALIDATION_FAILED, "The definition must be a JSON object.", location or "/")
        )
        return

    states = program.get("States")
    if not isinstance(states, dict) or not states:
        diagnostics.append(
            _diagnostic(
                SCHEMA_VALIDATION_FAILED,
                "The field 'States' should be a non-empty object.",
                f"{location}/States",
            )
        )
        return

    start_at = program.get("StartAt")
    if not isinstance(start_at, str):
        diagnostics.append(
            _diagnostic(SCHEMA_VALIDATION_FAILED, "The field 'StartAt' is required.", f"{location}/StartAt")
        )
    elif start_at not in states:
        diagnostics.append(
            _diagnostic(
                MISSING_TRANSITION_TARGET,
                f"Missing 'Next' target: {start_at}",
                f"{location}/StartAt",
            )
        )

    for state_name, state in states.items():
        state_location = f"{location}/States/{state_name}"
        if not isinstance(state, dict):
            diagnostics.append(
                _diagnostic(SCHEMA_VALIDATION_FAILED, "A state must be a JSON object.", state_location)
            )
            continue
        _analyse_state(state, state_location, states, state_machine_type, diagnostics)


def _analyse_state(
    state: dict,
    location: str,
    states: dict,
    state_machine_type: StateMachineType,
    diagnostics: ValidateStateMachineDefinitionDiagnosticList,
) -> None:
    state_type = state.get("Type")
    if state_type not in STATE_TYPES:
        diagnostics.append(
            _diagnostic(
                SCHEMA_VALIDATION_FAILED,
                f"The field 'Type' should have one of these values: [{', '.join(STATE_TYPES)}]",
                f"{location}/Type",
            )
        )
        return

    transitions = []
    if state_type == "Choice":
        for index, choice in enumerate(state.get("Choices") or []):
            if isinstance(choice, dict) and "Next" in choice:
                transitions.append((choice["Next"], f"{location}/Choices[{index}]/Next"))
        if not state.get("Choices"):
            diagnostics.append(
                _diagnostic(
                    SCHEMA_VALIDATION_FAILED,
                    "The field 'Choices' should be a non-empty array.",
                    f"{location}/Choices",
                )
            )
        if "Default" in state:
            transitions.append((state["Default"], f"{location}/Default"))
    elif state_type not in TERMINAL_STATE_TYPES:
        if "Next" in state:
            transitions.append((state["Next"], f"{location}/Next"))
        elif state.get("End") is not True:
            diagnostics.append(
                _diagnostic(
                    SCHEMA_VALIDATION_FAILED,
                    "This state should have either a 'Next' or an 'End' field.",
                    location,
                )
            )

    for target, target_location in transitions:
        if not isinstance(target, str):
            diagnostics.append(
                _diagnostic(SCHEMA_VALIDATION_FAILED, "A transition target should be a string.", target_location)
            )
        elif target not in states:
            diagnostics.append(
                _diagnostic(MISSING_TRANSITION_TARGET, f"Missing 'Next' target: {target}", target_location)
            )

    if state_type == "Task" and state_machine_type == StateMachineType.EXPRESS:
        resource = state.get("Resource") or ""
        if isinstance(resource, str) and resource.endswith(_EXPRESS_UNSUPPORTED_RESOURCE_SUFFIXES):
            diagnostics.append(
                _diagnostic(
                    SCHEMA_VALIDATION_FAILED,
                    f"Express state machine does not support the service integration pattern of '{resource}'",
                    f"{location}/Resource",
                )
            )
    elif state_type == "Parallel":
        for index, branch in enumerate(state.get("Branches") or []):
            _analyse_program(branch, f"{location}/Branches[{index}]", state_machine_type, diagnostics)
    elif state_type == "Map":
        processor_field = "ItemProcessor" if "ItemProcessor" in state else "Iterator"
        _analyse_program(
            state.get(processor_field), f"{location}/{processor_field}", state_machine_type, diagnostics
        )


def analyse_definition(
    definition: str, state_machine_type: StateMachineType = StateMachineType.STANDARD
) -> ValidateStateMachineDefinitionDiagnosticList:
    """
    Runs the static checks on a state machine definition.

    :returns: the list of error diagnostics, empty if the definition is valid
    """
    try:
        program = json.loads(definition)
    except (TypeError, ValueError) as ex:
        return [_diagnostic(INVALID_JSON_DESCRIPTION, f"Invalid JSON: {ex}")]

    diagnostics: ValidateStateMachineDefinitionDiagnosticList = []
    _analyse_program(program, "", state_machine_type, diagnostics)
    return diagnostics


def validate_definition(
    definition: str, state_machine_type: StateMachineType = StateMachineType.STANDARD
) -> None:
    """
    :raises InvalidDefinition: describing the first problem found in the definition
    """
    diagnostics = analyse_definition(definition, state_machine_type)
    if diagnostics:
        first = diagnostics[0]
        location = f" at {first['location']}" if first.get("location") else ""
        raise InvalidDefinition(
            f"Invalid State Machine Definition: '{first['code']}{location}: {first['message']}'"
        )


#
# TestState evaluator
#


class StatesRuntimeError(Exception):
    """A failure of the state under test, reported back as a FAILED test result."""

    def __init__(self, error: str, cause: str):
        super().__init__(cause)
        self.error = error
        self.cause = cause


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _parse_path(path: str) -> JSONPath:
    if not isinstance(path, str):
        raise StatesRuntimeError(STATES_RUNTIME, f"Invalid path {_to_json(path)}: a path must be a string")
    try:
        return jsonpath_ng.parse(path)
    except (JsonPathLexerError, JsonPathParserError) as ex:
        raise StatesRuntimeError(STATES_RUNTIME, f"Invalid path '{path}': {ex}")


def select_path(path: Optional[str], data: Any) -> Any:
    """Applies an InputPath or OutputPath; a null path yields an empty object."""
    if path is None:
        return {}
    if path == "$":
        return data
    matches = _parse_path(path).find(data)
    if not matches:
        raise StatesRuntimeError(STATES_RUNTIME, f"Invalid path '{path}' : No results for path: {path}")
    if len(matches) == 1:
        return matches[0].value
    return [match.value for match in matches]


def apply_result_path(path: Optional[str], state_input: Any, result: Any) -> Any:
    """Places the result into the raw state input; a null path discards the result."""
    if path is None:
        return state_input
    if path == "$":
        return result
    if not isinstance(state_input, dict):
        raise StatesRuntimeError(
            STATES_RUNTIME,
            f"Invalid path '{path}': The input must be an object to apply a ResultPath",
        )
    try:
        return _parse_path(path).update_or_create(copy.deepcopy(state_input), result)
    except (AttributeError, IndexError, KeyError, TypeError) as ex:
        raise StatesRuntimeError(STATES_RUNTIME, f"Invalid path '{path}': Unable to apply the ResultPath: {ex}")


def resolve_payload_template(template: Any, data: Any) -> Any:
    """Resolves the Parameters of a state: fields ending in '.$' are paths into the effective input."""
    if isinstance(template, dict):
        resolved = {}
        for key, value in template.items():
            if key.endswith(".$"):
                if not isinstance(value, str) or not value.startswith("$"):
                    raise StatesRuntimeError(
                        STATES_RUNTIME, f"The value for the field '{key}' must be a valid JSONPath"
                    )
                resolved[key[:-2]] = select_path(value, data)
            else:
                resolved[key] = resolve_payload_template(value, data)
        return resolved
    if isinstance(template, list):
        return [resolve_payload_template(item, data) for item in template]
    return template


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _variable_value(rule: dict, data: Any) -> Any:
    if not isinstance(rule.get("Variable"), str):
        raise StatesRuntimeError(STATES_RUNTIME, f"The choice rule {_to_json(rule)} has no Variable")
    return select_path(rule.get("Variable"), data)


def _is_present(rule: dict, data: Any) -> bool:
    try:
        _variable_value(rule, data)
        return True
    except StatesRuntimeError:
        return False


def evaluate_choice_rule(rule: dict, data: Any) -> bool:
    if "And" in rule:
        return all(evaluate_choice_rule(sub_rule, data) for sub_rule in rule["And"])
    if "Or" in rule:
        return any(evaluate_choice_rule(sub_rule, data) for sub_rule in rule["Or"])
    if "Not" in rule:
        return not evaluate_choice_rule(rule["Not"], data)
    if "IsPresent" in rule:
        return _is_present(rule, data) == rule["IsPresent"]

    value = _variable_value(rule, data)
    if "StringEquals" in rule:
        return isinstance(value, str) and value == rule["StringEquals"]
    if "NumericEquals" in rule:
        return _is_number(value) and value == rule["NumericEquals"]
    if "NumericGreaterThan" in rule:
        return _is_number(value) and value > rule["NumericGreaterThan"]
    if "NumericGreaterThanEquals" in rule:
        return _is_number(value) and value >= rule["NumericGreaterThanEquals"]
    if "NumericLessThan" in rule:
        return _is_number(value) and value < rule["NumericLessThan"]
    if "NumericLessThanEquals" in rule:
        return _is_number(value) and value <= rule["NumericLessThanEquals"]
    if "BooleanEquals" in rule:
        return isinstance(value, bool) and value == rule["BooleanEquals"]
    if "IsNull" in rule:
        return (value is None) == rule["IsNull"]
    raise StatesRuntimeError(STATES_RUNTIME, f"Unsupported choice rule: {_to_json(rule)}")


class StateEvaluation:
    """Runs a single state definition against its input, recording the intermediate data for inspection."""

    def __init__(self, state: dict, state_input: Any):
        self.state = state
        self.state_input = state_input
        self.inspection_data = InspectionData(input=_to_json(state_input))
        self.next_state: Optional[str] = None

    def _record(self, field: str, value: Any) -> None:
        self.inspection_data[field] = _to_json(value)

    def run(self) -> Any:
        state_type = self.state.get("Type")
        if state_type == "Fail":
            raise StatesRuntimeError(self.state.get("Error") or "", self.state.get("Cause") or "")

        effective_input = select_path(self.state.get("InputPath", "$"), self.state_input)
        self._record("afterInputPath", effective_input)

        if state_type == "Succeed":
            return select_path(self.state.get("OutputPath", "$"), effective_input)

        if state_type == "Choice":
            self.next_state = self._choose(effective_input)
            return select_path(self.state.get("OutputPath", "$"), effective_input)

        if state_type == "Wait":
            self.next_state = self.state.get("Next")
            return select_path(self.state.get("OutputPath", "$"), effective_input)

        # Pass
        if "Parameters" in self.state:
            effective_input = resolve_payload_template(self.state["Parameters"], effective_input)
            self._record("afterParameters", effective_input)
        result = self.state["Result"] if "Result" in self.state else effective_input
        self._record("result", result)
        state_output = apply_result_path(self.state.get("ResultPath", "$"), self.state_input, result)
        self._record("afterResultPath", state_output)
        self.next_state = self.state.get("Next")
        return select_path(self.state.get("OutputPath", "$"), state_output)

    def _choose(self, data: Any) -> str:
        for choice in self.state.get("Choices") or []:
            if evaluate_choice_rule(choice, data):
                return choice.get("Next")
        if "Default" in self.state:
            return self.state["Default"]
        raise StatesRuntimeError(STATES_NO_CHOICE_MATCHED, "No Matches!")


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


# operand type of every comparison operator the evaluator supports
CHOICE_COMPARATORS: Final[dict[str, Callable[[Any], bool]]] = {
    "StringEquals": _is_string,
    "NumericEquals": _is_number,
    "NumericGreaterThan": _is_number,
    "NumericGreaterThanEquals": _is_number,
    "NumericLessThan": _is_number,
    "NumericLessThanEquals": _is_number,
    "BooleanEquals": _is_boolean,
    "IsNull": _is_boolean,
    "IsPresent": _is_boolean,
}

_PATH_FIELDS: Final[tuple[str, ...]] = ("InputPath", "OutputPath", "ResultPath")


def _invalid_state(message: str, location: str) -> InvalidDefinition:
    return InvalidDefinition(f"Invalid State Definition: '{SCHEMA_VALIDATION_FAILED}: {message} at {location}'")


def _check_choice_rule(rule: Any, location: str) -> None:
    if not isinstance(rule, dict):
        raise _invalid_state("A choice rule must be a JSON object", location)
    for operator in ("And", "Or"):
        if operator in rule:
            sub_rules = rule[operator]
            if not isinstance(sub_rules, list) or not sub_rules:
                raise _invalid_state(f"The field '{operator}' should be a non-empty array", f"{location}/{operator}")
            for index, sub_rule in enumerate(sub_rules):
                _check_choice_rule(sub_rule, f"{location}/{operator}[{index}]")
            return
    if "Not" in rule:
        _check_choice_rule(rule["Not"], f"{location}/Not")
        return

    if not isinstance(rule.get("Variable"), str):
        raise _invalid_state("The field 'Variable' should be a string", f"{location}/Variable")
    comparators = [name for name in CHOICE_COMPARATORS if name in rule]
    if len(comparators) != 1:
        raise _invalid_state(
            f"A choice rule should have exactly one of these fields: [{', '.join(CHOICE_COMPARATORS)}]", location
        )
    comparator = comparators[0]
    if not CHOICE_COMPARATORS[comparator](rule[comparator]):
        raise _invalid_state(
            f"The field '{comparator}' has an operand of the wrong type: {_to_json(rule[comparator])}",
            f"{location}/{comparator}",
        )


def check_state(state: dict) -> None:
    """
    Checks the fields of a single state that the evaluator relies on.

    :raises InvalidDefinition: naming the location of the first malformed field
    """
    for field in _PATH_FIELDS:
        if field in state and state[field] is not None and not isinstance(state[field], str):
            raise _invalid_state(f"The field '{field}' should be a string or null", f"/{field}")
    for field in ("Next", "Default", "Error", "Cause"):
        if field in state and not isinstance(state[field], str):
            raise _invalid_state(f"The field '{field}' should be a string", f"/{field}")

    if state["Type"] == "Choice":
        choices = state.get("Choices")
        if not isinstance(choices, list) or not choices:
            raise _invalid_state("The field 'Choices' should be a non-empty array", "/Choices")
        for index, choice in enumerate(choices):
            _check_choice_rule(choice, f"/Choices[{index}]")
            if not isinstance(choice.get("Next"), str):
                raise _invalid_state("The field 'Next' should be a string", f"/Choices[{index}]/Next")


def parse_state_definition(definition: str) -> dict:
    try:
        state = json.loads(definition)
    except (TypeError, ValueError) as ex:
        raise InvalidDefinition(f"Invalid State Definition: 'Invalid JSON: {ex}'")
    if not isinstance(state, dict) or state.get("Type") not in STATE_TYPES:
        raise InvalidDefinition(
            f"Invalid State Definition: 'The field 'Type' should have one of these values: "
            f"[{', '.join(STATE_TYPES)}]'"
        )
    if state["Type"] in TESTABLE_STATE_TYPES:
        check_state(state)
    return state


def parse_state_input(state_input: Optional[str]) -> Any:
    if state_input is None:
        return {}
    try:
        return json.loads(state_input)
    except (TypeError, ValueError) as ex:
        raise InvalidExecutionInput(f"Invalid State Input: '{ex}'")


def evaluate_state(
    definition: str,
    state_input: Optional[str] = None,
    inspection_level: InspectionLevel = InspectionLevel.INFO,
) -> TestStateOutput:
    """
    Evaluates a single state definition against the given input.

    :param definition: the JSON definition of the state under test
    :param state_input: the JSON input of the state, an empty object if omitted
    :param inspection_level: ``DEBUG`` and ``TRACE`` add the intermediate data to the result
    :raises InvalidDefinition: if the definition is not a state definition
    :raises InvalidExecutionInput: if the input is not valid JSON
    """
    state = parse_state_definition(definition)
    data = parse_state_input(state_input)

    evaluation = StateEvaluation(state, data)
    state_type = state["Type"]
    if state_type not in TESTABLE_STATE_TYPES:
        output = TestStateOutput(
            status=TestExecutionStatus.FAILED,
            error=STATES_RUNTIME,
            cause=f"The state type '{state_type}' is not supported by the test state evaluator.",
        )
    else:
        try:
            result = evaluation.run()
        except StatesRuntimeError as ex:
            LOG.debug("State under test failed with %s: %s", ex.error, ex.cause)
            output = TestStateOutput(status=TestExecutionStatus.FAILED, error=ex.error, cause=ex.cause)
        else:
            output = TestStateOutput(status=TestExecutionStatus.SUCCEEDED, output=_to_json(result))
            if evaluation.next_state is not None:
                output["nextState"] = evaluation.next_state

    if inspection_level in (InspectionLevel.DEBUG, InspectionLevel.TRACE):
        output["inspectionData"] = evaluation.inspection_data
    return output

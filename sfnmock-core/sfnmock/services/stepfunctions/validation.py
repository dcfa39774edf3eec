"""
Field validators for scalar request members.

Every validator raises a ``ValidationException`` subclass naming the offending wire field, with the message shape
used by the AWS API::

    1 validation error detected: Value '1001' at 'maxResults' failed to satisfy constraint: Member must have value
    less than or equal to 1000
"""

from enum import Enum
from typing import Final, Optional, Type, TypeVar

from sfnmock.aws.api.stepfunctions import (
    ExecutionRedriveFilter,
    ExecutionStatus,
    InspectionLevel,
    InvalidName,
    LogLevel,
    RoutingConfigurationList,
    StateMachineType,
    Tag,
    TagList,
    ValidationException,
    ValidationExceptionReason,
)
from sfnmock.utils.aws.arns import unqualified_state_machine_arn, validate_state_machine_version_arn

MAX_RESULTS_LOWER_LIMIT: Final[int] = 1
MAX_RESULTS_UPPER_LIMIT: Final[int] = 1000
NEXT_TOKEN_LENGTH_LIMIT: Final[int] = 1024
NAME_LENGTH_LIMIT: Final[int] = 80
TAG_KEY_LENGTH_LIMIT: Final[int] = 128
TAG_VALUE_LENGTH_LIMIT: Final[int] = 256
ROUTING_CONFIGURATION_MAX_ENTRIES: Final[int] = 2
ROUTING_WEIGHT_TOTAL: Final[int] = 100

# The name should not contain:
# - white space
# - brackets < > { } [ ]
# - wildcard characters ? *
# - special characters " # % \ ^ | ~ ` $ & , ; : /
# - control characters (U+0000-001F, U+007F-009F)
_INVALID_NAME_CHARS: Final[frozenset] = frozenset(' <>{}[]?*"#%\\^|~`$&,;:/').union(
    {chr(i) for i in range(32)}, {chr(i) for i in range(127, 160)}
)

EnumType = TypeVar("EnumType", bound=Enum)


def _validation_message(value, field: str, constraint: str) -> str:
    return (
        f"1 validation error detected: Value '{value}' at '{field}' failed to satisfy constraint: "
        f"{constraint}"
    )


class FieldValidationException(ValidationException):
    """A validation error raised for a single request member."""

    field: str

    def __init__(self, message: str, field: str, **kwargs):
        super().__init__(message, field=field, **kwargs)


class InvalidRange(FieldValidationException):
    pass


class InvalidEnum(FieldValidationException):
    pass


class InvalidTagKey(FieldValidationException):
    def __init__(self, message: str, field: str = "tags.member.key", **kwargs):
        super().__init__(message, field=field, **kwargs)


class InvalidTagValue(FieldValidationException):
    def __init__(self, message: str, field: str = "tags.member.value", **kwargs):
        super().__init__(message, field=field, **kwargs)


class InvalidRouting(FieldValidationException):
    def __init__(self, message: str, field: str = "routingConfiguration", **kwargs):
        kwargs.setdefault("reason", ValidationExceptionReason.INVALID_ROUTING_CONFIGURATION)
        super().__init__(message, field=field, **kwargs)


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_enum(value, enum_type: Type[EnumType], field: str) -> EnumType:
    try:
        return enum_type(value)
    except (TypeError, ValueError):
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidEnum(
            _validation_message(
                getattr(value, "value", value),
                field,
                f"Member must satisfy enum value set: [{allowed}]",
            ),
            field=field,
        )


def validate_max_results(max_results: int) -> int:
    field = "maxResults"
    if not _is_integer(max_results):
        raise InvalidRange(
            _validation_message(max_results, field, "Member must be an integer"), field=field
        )
    if max_results < MAX_RESULTS_LOWER_LIMIT:
        raise InvalidRange(
            _validation_message(
                max_results,
                field,
                f"Member must have value greater than or equal to {MAX_RESULTS_LOWER_LIMIT}",
            ),
            field=field,
        )
    if max_results > MAX_RESULTS_UPPER_LIMIT:
        raise InvalidRange(
            _validation_message(
                max_results,
                field,
                f"Member must have value less than or equal to {MAX_RESULTS_UPPER_LIMIT}",
            ),
            field=field,
        )
    return max_results


def validate_next_token(next_token: str) -> str:
    field = "nextToken"
    if not isinstance(next_token, str) or len(next_token) > NEXT_TOKEN_LENGTH_LIMIT:
        raise InvalidRange(
            _validation_message(
                next_token,
                field,
                f"Member must have length less than or equal to {NEXT_TOKEN_LENGTH_LIMIT}",
            ),
            field=field,
        )
    return next_token


def validate_status_filter(status_filter) -> ExecutionStatus:
    return _validate_enum(status_filter, ExecutionStatus, "statusFilter")


def validate_redrive_filter(redrive_filter) -> ExecutionRedriveFilter:
    return _validate_enum(redrive_filter, ExecutionRedriveFilter, "redriveFilter")


def validate_state_machine_type(state_machine_type) -> StateMachineType:
    return _validate_enum(state_machine_type, StateMachineType, "type")


def validate_inspection_level(inspection_level) -> InspectionLevel:
    return _validate_enum(inspection_level, InspectionLevel, "inspectionLevel")


def validate_log_level(level) -> LogLevel:
    return _validate_enum(level, LogLevel, "loggingConfiguration.level")


def _validate_non_negative_integer(value, field: str) -> int:
    if not _is_integer(value) or value < 0:
        raise InvalidRange(
            _validation_message(value, field, "Member must have value greater than or equal to 0"),
            field=field,
        )
    return value


def validate_max_concurrency(max_concurrency: int) -> int:
    return _validate_non_negative_integer(max_concurrency, "maxConcurrency")


def validate_tolerated_failure_count(tolerated_failure_count: int) -> int:
    return _validate_non_negative_integer(tolerated_failure_count, "toleratedFailureCount")


def validate_tolerated_failure_percentage(tolerated_failure_percentage: float) -> float:
    field = "toleratedFailurePercentage"
    if not _is_number(tolerated_failure_percentage) or not 0 <= tolerated_failure_percentage <= 100:
        raise InvalidRange(
            _validation_message(
                tolerated_failure_percentage,
                field,
                "Member must have value between 0 and 100",
            ),
            field=field,
        )
    return tolerated_failure_percentage


def validate_name(name: str) -> str:
    if not isinstance(name, str) or not name or len(name) > NAME_LENGTH_LIMIT:
        raise InvalidName(f"Invalid Name: '{name}'")
    for char in name:
        if char in _INVALID_NAME_CHARS:
            raise InvalidName(f"Invalid Name: '{name}'")
    return name


def validate_alias_name(name: str) -> str:
    # a numeric alias name would be indistinguishable from a version qualifier
    validate_name(name)
    if name.isdigit():
        raise InvalidName(f"Invalid Name: '{name}'")
    return name


def validate_tag_key(key: str) -> str:
    if not isinstance(key, str) or not key:
        raise InvalidTagKey(
            _validation_message(key, "tags.member.key", "Member must have length greater than or equal to 1")
        )
    if len(key) > TAG_KEY_LENGTH_LIMIT:
        raise InvalidTagKey(
            _validation_message(
                key,
                "tags.member.key",
                f"Member must have length less than or equal to {TAG_KEY_LENGTH_LIMIT}",
            )
        )
    return key


def validate_tag_value(value: Optional[str]) -> str:
    value = "" if value is None else value
    if not isinstance(value, str) or len(value) > TAG_VALUE_LENGTH_LIMIT:
        raise InvalidTagValue(
            _validation_message(
                value,
                "tags.member.value",
                f"Member must have length less than or equal to {TAG_VALUE_LENGTH_LIMIT}",
            )
        )
    return value


def validate_tags(tags: Optional[TagList]) -> TagList:
    """Validates every tag and returns the list normalised to a non-null value per key."""
    validated = []
    for tag in tags or []:
        validated.append(
            Tag(key=validate_tag_key(tag.get("key")), value=validate_tag_value(tag.get("value")))
        )
    return validated


def validate_tag_keys(tag_keys: Optional[list]) -> list:
    for key in tag_keys or []:
        validate_tag_key(key)
    return list(tag_keys or [])


def validate_routing_configuration(routing_configuration: RoutingConfigurationList) -> None:
    """
    Validates an alias routing configuration: one or two entries, each naming a distinct version of the same state
    machine with a non-negative integer weight, the weights summing to exactly 100.

    :raises InvalidRouting: if the routing configuration is not acceptable
    :raises InvalidArn: if an entry does not name a state machine version
    """
    if not isinstance(routing_configuration, list) or not (
        1 <= len(routing_configuration) <= ROUTING_CONFIGURATION_MAX_ENTRIES
    ):
        size = len(routing_configuration) if isinstance(routing_configuration, list) else 0
        raise InvalidRouting(
            _validation_message(
                routing_configuration,
                "routingConfiguration",
                f"Member must have length between 1 and {ROUTING_CONFIGURATION_MAX_ENTRIES}, got {size}",
            )
        )

    version_arns = []
    total_weight = 0
    for entry in routing_configuration:
        version_arn = entry.get("stateMachineVersionArn")
        validate_state_machine_version_arn(version_arn)
        weight = entry.get("weight")
        if not _is_integer(weight) or not 0 <= weight <= ROUTING_WEIGHT_TOTAL:
            raise InvalidRouting(
                _validation_message(
                    weight,
                    "routingConfiguration.member.weight",
                    f"Member must have value between 0 and {ROUTING_WEIGHT_TOTAL}",
                ),
                field="routingConfiguration.member.weight",
            )
        version_arns.append(version_arn)
        total_weight += weight

    if len(set(version_arns)) != len(version_arns):
        raise InvalidRouting("Routing configuration must contain distinct state machine version ARNs.")

    if len({unqualified_state_machine_arn(arn) for arn in version_arns}) > 1:
        raise InvalidRouting(
            "Routing configuration must contain state machine version ARNs of the same state machine."
        )

    if total_weight != ROUTING_WEIGHT_TOTAL:
        raise InvalidRouting(
            f"Sum of routing configuration weights must equal {ROUTING_WEIGHT_TOTAL}, got {total_weight}."
        )

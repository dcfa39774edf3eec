import re
from typing import Final, Optional, TypedDict

from botocore.utils import ArnParser

from sfnmock.aws.api.stepfunctions import InvalidArn

#
# Partition Utilities
#

DEFAULT_PARTITION = "aws"
REGION_PREFIX_TO_PARTITION = {
    # (region prefix, aws partition)
    "cn-": "aws-cn",
    "us-gov-": "aws-us-gov",
    "us-iso-": "aws-iso",
    "us-isob-": "aws-iso-b",
}
PARTITION_NAMES = list(REGION_PREFIX_TO_PARTITION.values()) + [DEFAULT_PARTITION]


def get_partition(region: Optional[str]) -> str:
    if not region:
        return DEFAULT_PARTITION
    if region in PARTITION_NAMES:
        return region
    for prefix in REGION_PREFIX_TO_PARTITION:
        if region.startswith(prefix):
            return REGION_PREFIX_TO_PARTITION[prefix]
    return DEFAULT_PARTITION


#
# ARN parsing utilities
#


class ArnData(TypedDict):
    partition: str
    service: str
    region: str
    account: str
    resource: str


_arn_parser = ArnParser()


def parse_arn(arn: str) -> ArnData:
    """
    Uses a botocore ArnParser to parse an arn.

    :param arn: the arn string to parse
    :returns: a dictionary containing the ARN components
    :raises InvalidArnException: if the arn is invalid
    """
    return _arn_parser.parse_arn(arn)


#
# Step Functions identifiers
#
# arn:<partition>:states:<region>:<account>:<resourceType>:<resourceId>[:<qualifier>]
#

STATES_SERVICE: Final[str] = "states"


class ResourceType:
    STATE_MACHINE: Final[str] = "stateMachine"
    EXECUTION: Final[str] = "execution"
    ACTIVITY: Final[str] = "activity"
    MAP_RUN: Final[str] = "mapRun"


RESOURCE_TYPES: Final[tuple[str, ...]] = (
    ResourceType.STATE_MACHINE,
    ResourceType.EXECUTION,
    ResourceType.ACTIVITY,
    ResourceType.MAP_RUN,
)

# whether the qualifier token is required (True), forbidden (False) or optional (None)
_QUALIFIER_RULES: Final[dict[str, Optional[bool]]] = {
    ResourceType.STATE_MACHINE: None,
    ResourceType.EXECUTION: True,
    ResourceType.ACTIVITY: False,
    ResourceType.MAP_RUN: True,
}

_REGION_REGEX: Final[re.Pattern] = re.compile(r"^[a-z0-9-]+$")
_ACCOUNT_REGEX: Final[re.Pattern] = re.compile(r"^[0-9]{12}$")
_RESOURCE_ID_REGEX: Final[re.Pattern] = re.compile(r"^[^\s:/]+$")
_MAP_RUN_ID_REGEX: Final[re.Pattern] = re.compile(r"^[^\s:/]+/[^\s:/]+$")
# executions started by a map run are named after the map run: <stateMachineName>/<label>
_EXECUTION_ID_REGEX: Final[re.Pattern] = re.compile(r"^[^\s:/]+(/[^\s:/]+)?$")
_QUALIFIER_REGEX: Final[re.Pattern] = re.compile(r"^[^\s:/]+$")
_VERSION_REGEX: Final[re.Pattern] = re.compile(r"^[1-9][0-9]*$")
_ROLE_ARN_REGEX: Final[re.Pattern] = re.compile(
    r"^arn:(" + "|".join(sorted(PARTITION_NAMES)) + r"):iam::[0-9]{12}:role/[\w+=,.@/-]{1,512}$"
)


class StatesArnData(TypedDict):
    partition: str
    region: str
    account: str
    resource_type: str
    resource_id: str
    qualifier: Optional[str]


def _invalid_arn(value, reason: str) -> InvalidArn:
    return InvalidArn(f"Invalid Arn: '{reason}: {value}'", resourceName=value)


def validate_identifier(value: str, expected_resource_type: Optional[str] = None) -> StatesArnData:
    """
    Validates a Step Functions resource identifier for syntactic and semantic correctness. This never consults any
    store, so it can (and must) be called before any lookup.

    :param value: the identifier to validate
    :param expected_resource_type: if given, the resource type token must match it
    :returns: the identifier's components
    :raises InvalidArn: if the identifier is malformed or of an unexpected resource type
    """
    if not isinstance(value, str) or not value:
        raise _invalid_arn(value, "Resource name is empty")

    tokens = value.split(":")
    if len(tokens) not in (7, 8):
        raise _invalid_arn(value, "Unexpected number of segments")

    prefix, partition, service, region, account, resource_type, resource_id = tokens[:7]
    qualifier = tokens[7] if len(tokens) == 8 else None

    if prefix != "arn":
        raise _invalid_arn(value, "Identifier must start with 'arn'")
    if partition not in PARTITION_NAMES:
        raise _invalid_arn(value, "Unknown partition")
    if service != STATES_SERVICE:
        raise _invalid_arn(value, "Service not valid in this context")
    if not _REGION_REGEX.match(region):
        raise _invalid_arn(value, "Invalid region")
    if not _ACCOUNT_REGEX.match(account):
        raise _invalid_arn(value, "Invalid account id")
    if resource_type not in RESOURCE_TYPES:
        raise _invalid_arn(value, "Resource type not valid")
    if expected_resource_type and resource_type != expected_resource_type:
        raise _invalid_arn(value, "Resource type not valid in this context")

    if resource_type == ResourceType.MAP_RUN:
        id_regex = _MAP_RUN_ID_REGEX
    elif resource_type == ResourceType.EXECUTION:
        id_regex = _EXECUTION_ID_REGEX
    else:
        id_regex = _RESOURCE_ID_REGEX
    if not id_regex.match(resource_id):
        raise _invalid_arn(value, "Invalid resource id")

    qualifier_rule = _QUALIFIER_RULES[resource_type]
    if qualifier_rule is True and qualifier is None:
        raise _invalid_arn(value, "Missing qualifier")
    if qualifier_rule is False and qualifier is not None:
        raise _invalid_arn(value, "Qualifier not valid in this context")
    if qualifier is not None and not _QUALIFIER_REGEX.match(qualifier):
        raise _invalid_arn(value, "Invalid qualifier")

    return StatesArnData(
        partition=partition,
        region=region,
        account=account,
        resource_type=resource_type,
        resource_id=resource_id,
        qualifier=qualifier,
    )


def validate_state_machine_arn(value: str) -> StatesArnData:
    """Accepts plain state machine ARNs as well as version and alias ARNs."""
    return validate_identifier(value, ResourceType.STATE_MACHINE)


def validate_unqualified_state_machine_arn(value: str) -> StatesArnData:
    arn_data = validate_state_machine_arn(value)
    if arn_data["qualifier"] is not None:
        raise _invalid_arn(value, "Qualified ARN not valid in this context")
    return arn_data


def validate_state_machine_version_arn(value: str) -> StatesArnData:
    arn_data = validate_state_machine_arn(value)
    if not is_version_qualifier(arn_data["qualifier"]):
        raise _invalid_arn(value, "Not a state machine version ARN")
    return arn_data


def validate_state_machine_alias_arn(value: str) -> StatesArnData:
    arn_data = validate_state_machine_arn(value)
    if arn_data["qualifier"] is None or is_version_qualifier(arn_data["qualifier"]):
        raise _invalid_arn(value, "Not a state machine alias ARN")
    return arn_data


def validate_execution_arn(value: str) -> StatesArnData:
    return validate_identifier(value, ResourceType.EXECUTION)


def validate_activity_arn(value: str) -> StatesArnData:
    return validate_identifier(value, ResourceType.ACTIVITY)


def validate_map_run_arn(value: str) -> StatesArnData:
    return validate_identifier(value, ResourceType.MAP_RUN)


def validate_role_arn(value: str) -> None:
    if not isinstance(value, str) or not _ROLE_ARN_REGEX.match(value):
        raise InvalidArn(f"Invalid Arn: 'Invalid role arn: {value}'", resourceName=value)


def is_version_qualifier(qualifier: Optional[str]) -> bool:
    return qualifier is not None and bool(_VERSION_REGEX.match(qualifier))


def get_qualifier(arn: str) -> Optional[str]:
    """Returns the version or alias qualifier of a state machine ARN, if any."""
    tokens = arn.split(":")
    return tokens[7] if len(tokens) == 8 else None


def unqualified_state_machine_arn(state_machine_arn: str) -> str:
    """Strips the version or alias qualifier from a state machine ARN."""
    return ":".join(state_machine_arn.split(":")[:7])


#
# ARN builders
#


def _resource_arn(name: str, pattern: str, account_id: str, region_name: str) -> str:
    if ":" in name:
        return name
    return pattern % (get_partition(region_name), region_name, account_id, name)


def stepfunctions_state_machine_arn(name: str, account_id: str, region_name: str) -> str:
    pattern = "arn:%s:states:%s:%s:stateMachine:%s"
    return _resource_arn(name, pattern, account_id=account_id, region_name=region_name)


def stepfunctions_activity_arn(name: str, account_id: str, region_name: str) -> str:
    pattern = "arn:%s:states:%s:%s:activity:%s"
    return _resource_arn(name, pattern, account_id=account_id, region_name=region_name)


def stepfunctions_execution_arn(state_machine_arn: str, execution_name: str) -> str:
    arn_data: ArnData = parse_arn(unqualified_state_machine_arn(state_machine_arn))
    return ":".join(
        [
            "arn",
            arn_data["partition"],
            arn_data["service"],
            arn_data["region"],
            arn_data["account"],
            ResourceType.EXECUTION,
            arn_data["resource"].split(":")[1],
            execution_name,
        ]
    )


def stepfunctions_map_run_arn(execution_arn: str, label: str, map_run_id: str) -> str:
    arn_data: ArnData = parse_arn(execution_arn)
    state_machine_name = arn_data["resource"].split(":")[1]
    return ":".join(
        [
            "arn",
            arn_data["partition"],
            arn_data["service"],
            arn_data["region"],
            arn_data["account"],
            ResourceType.MAP_RUN,
            f"{state_machine_name}/{label}",
            map_run_id,
        ]
    )


def stepfunctions_version_arn(state_machine_arn: str, version: int) -> str:
    return f"{state_machine_arn}:{version}"


def stepfunctions_alias_arn(state_machine_arn: str, alias_name: str) -> str:
    return f"{state_machine_arn}:{alias_name}"


def stepfunctions_map_run_execution_arn(map_run_arn: str, execution_name: str) -> str:
    arn_data: ArnData = parse_arn(map_run_arn)
    return ":".join(
        [
            "arn",
            arn_data["partition"],
            arn_data["service"],
            arn_data["region"],
            arn_data["account"],
            ResourceType.EXECUTION,
            arn_data["resource"].split(":")[1],
            execution_name,
        ]
    )

import json
import logging
from typing import Optional

from sfnmock.aws.api import RequestContext
from sfnmock.aws.api.stepfunctions import (
    AliasDescription,
    Arn,
    CharacterRestrictedName,
    CreateActivityOutput,
    CreateStateMachineAliasOutput,
    CreateStateMachineInput,
    CreateStateMachineOutput,
    Definition,
    DeleteActivityOutput,
    DeleteStateMachineAliasOutput,
    DeleteStateMachineOutput,
    DeleteStateMachineVersionOutput,
    DescribeActivityOutput,
    DescribeExecutionOutput,
    DescribeMapRunOutput,
    DescribeStateMachineAliasOutput,
    DescribeStateMachineForExecutionOutput,
    DescribeStateMachineOutput,
    ExecutionRedriveFilter,
    ExecutionStatus,
    GetExecutionHistoryOutput,
    IncludeExecutionDataGetExecutionHistory,
    InspectionLevel,
    InvalidExecutionInput,
    ListActivitiesOutput,
    ListExecutionsOutput,
    ListExecutionsPageToken,
    ListMapRunsOutput,
    ListStateMachineAliasesOutput,
    ListStateMachinesOutput,
    ListStateMachineVersionsOutput,
    ListTagsForResourceOutput,
    LoggingConfiguration,
    LongArn,
    MaxConcurrency,
    MissingRequiredParameter,
    Name,
    PageSize,
    PageToken,
    Publish,
    PublishStateMachineVersionOutput,
    RedriveExecutionOutput,
    RevealSecrets,
    ReverseOrder,
    RevisionId,
    RoutingConfigurationList,
    SensitiveCause,
    SensitiveData,
    SensitiveError,
    StartExecutionOutput,
    StateMachineType,
    StepfunctionsApi,
    StopExecutionOutput,
    TagKeyList,
    TagList,
    TagResourceOutput,
    TestStateOutput,
    ToleratedFailureCount,
    ToleratedFailurePercentage,
    TraceHeader,
    TracingConfiguration,
    UntagResourceOutput,
    UpdateMapRunOutput,
    UpdateStateMachineAliasOutput,
    UpdateStateMachineOutput,
    ValidateStateMachineDefinitionOutput,
    ValidationException,
    ValidationExceptionReason,
    VersionDescription,
)
from sfnmock.services.stepfunctions import asl
from sfnmock.services.stepfunctions.backend.base import StepFunctionsBackend
from sfnmock.services.stepfunctions.validation import (
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
from sfnmock.utils.aws.arns import (
    validate_activity_arn,
    validate_execution_arn,
    validate_identifier,
    validate_map_run_arn,
    validate_role_arn,
    validate_state_machine_alias_arn,
    validate_state_machine_arn,
    validate_state_machine_version_arn,
    validate_unqualified_state_machine_arn,
)

LOG = logging.getLogger(__name__)


class StepFunctionsProvider(StepfunctionsApi):
    """
    Validates the identifiers and fields of every operation, and hands the request over to the backend. A request
    that fails validation never reaches the backend, so no store is mutated by it.
    """

    backend: StepFunctionsBackend

    def __init__(self, backend: StepFunctionsBackend):
        self.backend = backend

    def __repr__(self):
        return f"<StepFunctionsProvider backend={self.backend!r}>"

    @staticmethod
    def _validate_page(max_results: PageSize, next_token: PageToken) -> None:
        if max_results is not None:
            validate_max_results(max_results)
        if next_token is not None:
            validate_next_token(next_token)

    @staticmethod
    def _validate_logging_configuration(
        logging_configuration: LoggingConfiguration,
    ) -> Optional[LoggingConfiguration]:
        if logging_configuration is None:
            return None
        normalised = LoggingConfiguration(**logging_configuration)
        if "level" in normalised:
            normalised["level"] = validate_log_level(normalised["level"])
        return normalised

    #
    # State machines
    #

    def create_state_machine(
        self, context: RequestContext, request: CreateStateMachineInput, **kwargs
    ) -> CreateStateMachineOutput:
        if not request.get("publish", False) and request.get("versionDescription"):
            raise ValidationException("Version description can only be set when publish is true")

        validate_name(request["name"])
        validate_role_arn(request["roleArn"])
        state_machine_type = validate_state_machine_type(
            request.get("type") or StateMachineType.STANDARD
        )
        asl.validate_definition(request["definition"], state_machine_type)
        logging_configuration = self._validate_logging_configuration(request.get("loggingConfiguration"))

        normalised_request = CreateStateMachineInput(**request)
        if logging_configuration is not None:
            normalised_request["loggingConfiguration"] = logging_configuration
        normalised_request["type"] = state_machine_type
        normalised_request["tags"] = validate_tags(request.get("tags"))
        return self.backend.create_state_machine(context, normalised_request)

    def describe_state_machine(
        self, context: RequestContext, state_machine_arn: Arn, **kwargs
    ) -> DescribeStateMachineOutput:
        arn_data = validate_state_machine_arn(state_machine_arn)
        if arn_data["qualifier"] is not None:
            validate_state_machine_version_arn(state_machine_arn)
        return self.backend.describe_state_machine(context, state_machine_arn)

    def describe_state_machine_for_execution(
        self, context: RequestContext, execution_arn: Arn, **kwargs
    ) -> DescribeStateMachineForExecutionOutput:
        validate_execution_arn(execution_arn)
        return self.backend.describe_state_machine_for_execution(context, execution_arn)

    def update_state_machine(
        self,
        context: RequestContext,
        state_machine_arn: Arn,
        definition: Definition = None,
        role_arn: Arn = None,
        logging_configuration: LoggingConfiguration = None,
        tracing_configuration: TracingConfiguration = None,
        publish: Publish = None,
        version_description: VersionDescription = None,
        **kwargs,
    ) -> UpdateStateMachineOutput:
        validate_unqualified_state_machine_arn(state_machine_arn)
        if not any(
            field is not None
            for field in (definition, role_arn, logging_configuration, tracing_configuration)
        ):
            raise MissingRequiredParameter(
                "Either the definition, the role ARN, the LoggingConfiguration, "
                "or the TracingConfiguration must be specified"
            )
        if not publish and version_description:
            raise ValidationException("Version description can only be set when publish is true")
        if definition is not None:
            asl.validate_definition(definition)
        if role_arn is not None:
            validate_role_arn(role_arn)
        logging_configuration = self._validate_logging_configuration(logging_configuration)

        return self.backend.update_state_machine(
            context,
            state_machine_arn,
            definition=definition,
            role_arn=role_arn,
            logging_configuration=logging_configuration,
            tracing_configuration=tracing_configuration,
            publish=publish,
            version_description=version_description,
        )

    def delete_state_machine(
        self, context: RequestContext, state_machine_arn: Arn, **kwargs
    ) -> DeleteStateMachineOutput:
        validate_unqualified_state_machine_arn(state_machine_arn)
        return self.backend.delete_state_machine(context, state_machine_arn)

    def list_state_machines(
        self,
        context: RequestContext,
        max_results: PageSize = None,
        next_token: PageToken = None,
        **kwargs,
    ) -> ListStateMachinesOutput:
        self._validate_page(max_results, next_token)
        return self.backend.list_state_machines(
            context, max_results=max_results, next_token=next_token
        )

    #
    # Versions
    #

    def publish_state_machine_version(
        self,
        context: RequestContext,
        state_machine_arn: Arn,
        revision_id: RevisionId = None,
        description: VersionDescription = None,
        **kwargs,
    ) -> PublishStateMachineVersionOutput:
        validate_unqualified_state_machine_arn(state_machine_arn)
        return self.backend.publish_state_machine_version(
            context, state_machine_arn, revision_id=revision_id, description=description
        )

    def list_state_machine_versions(
        self,
        context: RequestContext,
        state_machine_arn: Arn,
        next_token: PageToken = None,
        max_results: PageSize = None,
        **kwargs,
    ) -> ListStateMachineVersionsOutput:
        validate_unqualified_state_machine_arn(state_machine_arn)
        self._validate_page(max_results, next_token)
        return self.backend.list_state_machine_versions(
            context, state_machine_arn, next_token=next_token, max_results=max_results
        )

    def delete_state_machine_version(
        self, context: RequestContext, state_machine_version_arn: LongArn, **kwargs
    ) -> DeleteStateMachineVersionOutput:
        validate_state_machine_version_arn(state_machine_version_arn)
        return self.backend.delete_state_machine_version(context, state_machine_version_arn)

    #
    # Aliases
    #

    def create_state_machine_alias(
        self,
        context: RequestContext,
        name: CharacterRestrictedName,
        routing_configuration: RoutingConfigurationList,
        description: AliasDescription = None,
        **kwargs,
    ) -> CreateStateMachineAliasOutput:
        validate_alias_name(name)
        validate_routing_configuration(routing_configuration)
        return self.backend.create_state_machine_alias(
            context, name, routing_configuration, description=description
        )

    def describe_state_machine_alias(
        self, context: RequestContext, state_machine_alias_arn: Arn, **kwargs
    ) -> DescribeStateMachineAliasOutput:
        validate_state_machine_alias_arn(state_machine_alias_arn)
        return self.backend.describe_state_machine_alias(context, state_machine_alias_arn)

    def update_state_machine_alias(
        self,
        context: RequestContext,
        state_machine_alias_arn: Arn,
        description: AliasDescription = None,
        routing_configuration: RoutingConfigurationList = None,
        **kwargs,
    ) -> UpdateStateMachineAliasOutput:
        validate_state_machine_alias_arn(state_machine_alias_arn)
        if description is None and routing_configuration is None:
            raise MissingRequiredParameter(
                "Either the description or the RoutingConfiguration must be specified"
            )
        if routing_configuration is not None:
            validate_routing_configuration(routing_configuration)
        return self.backend.update_state_machine_alias(
            context,
            state_machine_alias_arn,
            description=description,
            routing_configuration=routing_configuration,
        )

    def delete_state_machine_alias(
        self, context: RequestContext, state_machine_alias_arn: Arn, **kwargs
    ) -> DeleteStateMachineAliasOutput:
        validate_state_machine_alias_arn(state_machine_alias_arn)
        return self.backend.delete_state_machine_alias(context, state_machine_alias_arn)

    def list_state_machine_aliases(
        self,
        context: RequestContext,
        state_machine_arn: Arn,
        next_token: PageToken = None,
        max_results: PageSize = None,
        **kwargs,
    ) -> ListStateMachineAliasesOutput:
        validate_unqualified_state_machine_arn(state_machine_arn)
        self._validate_page(max_results, next_token)
        return self.backend.list_state_machine_aliases(
            context, state_machine_arn, next_token=next_token, max_results=max_results
        )

    #
    # Executions
    #

    def start_execution(
        self,
        context: RequestContext,
        state_machine_arn: Arn,
        name: Name = None,
        input: SensitiveData = None,
        trace_header: TraceHeader = None,
        **kwargs,
    ) -> StartExecutionOutput:
        validate_state_machine_arn(state_machine_arn)
        if name is not None:
            validate_name(name)
        if input is not None:
            try:
                json.loads(input)
            except (TypeError, ValueError) as ex:
                raise InvalidExecutionInput(f"Invalid State Machine Execution Input: '{ex}'")
        return self.backend.start_execution(
            context, state_machine_arn, name=name, input=input, trace_header=trace_header
        )

    def describe_execution(
        self, context: RequestContext, execution_arn: Arn, **kwargs
    ) -> DescribeExecutionOutput:
        validate_execution_arn(execution_arn)
        return self.backend.describe_execution(context, execution_arn)

    def stop_execution(
        self,
        context: RequestContext,
        execution_arn: Arn,
        error: SensitiveError = None,
        cause: SensitiveCause = None,
        **kwargs,
    ) -> StopExecutionOutput:
        validate_execution_arn(execution_arn)
        return self.backend.stop_execution(context, execution_arn, error=error, cause=cause)

    def redrive_execution(
        self, context: RequestContext, execution_arn: Arn, client_token: str = None, **kwargs
    ) -> RedriveExecutionOutput:
        validate_execution_arn(execution_arn)
        return self.backend.redrive_execution(context, execution_arn, client_token=client_token)

    def list_executions(
        self,
        context: RequestContext,
        state_machine_arn: Arn = None,
        status_filter: ExecutionStatus = None,
        max_results: PageSize = None,
        next_token: ListExecutionsPageToken = None,
        map_run_arn: LongArn = None,
        redrive_filter: ExecutionRedriveFilter = None,
        **kwargs,
    ) -> ListExecutionsOutput:
        if not state_machine_arn and not map_run_arn:
            raise ValidationException("Must provide a StateMachine ARN or MapRun ARN")
        if state_machine_arn and map_run_arn:
            raise ValidationException("Must provide either a StateMachine ARN or a MapRun ARN, not both")
        if state_machine_arn:
            validate_state_machine_arn(state_machine_arn)
        else:
            validate_map_run_arn(map_run_arn)
        if status_filter is not None:
            status_filter = validate_status_filter(status_filter)
        if redrive_filter is not None:
            redrive_filter = validate_redrive_filter(redrive_filter)
        self._validate_page(max_results, next_token)

        return self.backend.list_executions(
            context,
            state_machine_arn=state_machine_arn,
            status_filter=status_filter,
            max_results=max_results,
            next_token=next_token,
            map_run_arn=map_run_arn,
            redrive_filter=redrive_filter,
        )

    def get_execution_history(
        self,
        context: RequestContext,
        execution_arn: Arn,
        max_results: PageSize = None,
        reverse_order: ReverseOrder = None,
        next_token: PageToken = None,
        include_execution_data: IncludeExecutionDataGetExecutionHistory = None,
        **kwargs,
    ) -> GetExecutionHistoryOutput:
        validate_execution_arn(execution_arn)
        self._validate_page(max_results, next_token)
        return self.backend.get_execution_history(
            context,
            execution_arn,
            max_results=max_results,
            reverse_order=reverse_order,
            next_token=next_token,
            include_execution_data=include_execution_data,
        )

    #
    # Activities
    #

    def create_activity(
        self, context: RequestContext, name: Name, tags: TagList = None, **kwargs
    ) -> CreateActivityOutput:
        validate_name(name)
        return self.backend.create_activity(context, name, tags=validate_tags(tags))

    def describe_activity(
        self, context: RequestContext, activity_arn: Arn, **kwargs
    ) -> DescribeActivityOutput:
        validate_activity_arn(activity_arn)
        return self.backend.describe_activity(context, activity_arn)

    def delete_activity(
        self, context: RequestContext, activity_arn: Arn, **kwargs
    ) -> DeleteActivityOutput:
        validate_activity_arn(activity_arn)
        return self.backend.delete_activity(context, activity_arn)

    def list_activities(
        self,
        context: RequestContext,
        max_results: PageSize = None,
        next_token: PageToken = None,
        **kwargs,
    ) -> ListActivitiesOutput:
        self._validate_page(max_results, next_token)
        return self.backend.list_activities(context, max_results=max_results, next_token=next_token)

    #
    # Map runs
    #

    def describe_map_run(
        self, context: RequestContext, map_run_arn: LongArn, **kwargs
    ) -> DescribeMapRunOutput:
        validate_map_run_arn(map_run_arn)
        return self.backend.describe_map_run(context, map_run_arn)

    def list_map_runs(
        self,
        context: RequestContext,
        execution_arn: Arn,
        max_results: PageSize = None,
        next_token: PageToken = None,
        **kwargs,
    ) -> ListMapRunsOutput:
        validate_execution_arn(execution_arn)
        self._validate_page(max_results, next_token)
        return self.backend.list_map_runs(
            context, execution_arn, max_results=max_results, next_token=next_token
        )

    def update_map_run(
        self,
        context: RequestContext,
        map_run_arn: LongArn,
        max_concurrency: MaxConcurrency = None,
        tolerated_failure_percentage: ToleratedFailurePercentage = None,
        tolerated_failure_count: ToleratedFailureCount = None,
        **kwargs,
    ) -> UpdateMapRunOutput:
        validate_map_run_arn(map_run_arn)
        if max_concurrency is None and tolerated_failure_percentage is None and tolerated_failure_count is None:
            raise ValidationException(
                "Must provide at least one of maxConcurrency, toleratedFailurePercentage or "
                "toleratedFailureCount",
                reason=ValidationExceptionReason.MISSING_REQUIRED_PARAMETER,
            )
        if max_concurrency is not None:
            validate_max_concurrency(max_concurrency)
        if tolerated_failure_count is not None:
            validate_tolerated_failure_count(tolerated_failure_count)
        if tolerated_failure_percentage is not None:
            validate_tolerated_failure_percentage(tolerated_failure_percentage)

        return self.backend.update_map_run(
            context,
            map_run_arn,
            max_concurrency=max_concurrency,
            tolerated_failure_percentage=tolerated_failure_percentage,
            tolerated_failure_count=tolerated_failure_count,
        )

    #
    # Tags
    #

    def tag_resource(
        self, context: RequestContext, resource_arn: Arn, tags: TagList, **kwargs
    ) -> TagResourceOutput:
        validate_identifier(resource_arn)
        return self.backend.tag_resource(context, resource_arn, validate_tags(tags))

    def untag_resource(
        self, context: RequestContext, resource_arn: Arn, tag_keys: TagKeyList, **kwargs
    ) -> UntagResourceOutput:
        validate_identifier(resource_arn)
        return self.backend.untag_resource(context, resource_arn, validate_tag_keys(tag_keys))

    def list_tags_for_resource(
        self, context: RequestContext, resource_arn: Arn, **kwargs
    ) -> ListTagsForResourceOutput:
        validate_identifier(resource_arn)
        return self.backend.list_tags_for_resource(context, resource_arn)

    #
    # Definitions
    #

    def test_state(
        self,
        context: RequestContext,
        definition: Definition,
        role_arn: Arn = None,
        input: SensitiveData = None,
        inspection_level: InspectionLevel = None,
        reveal_secrets: RevealSecrets = None,
        **kwargs,
    ) -> TestStateOutput:
        if role_arn is not None:
            validate_role_arn(role_arn)
        if inspection_level is not None:
            inspection_level = validate_inspection_level(inspection_level)
        return self.backend.test_state(
            context,
            definition,
            role_arn=role_arn,
            input=input,
            inspection_level=inspection_level,
            reveal_secrets=reveal_secrets,
        )

    def validate_state_machine_definition(
        self,
        context: RequestContext,
        definition: Definition,
        type: StateMachineType = None,
        **kwargs,
    ) -> ValidateStateMachineDefinitionOutput:
        if type is not None:
            type = validate_state_machine_type(type)
        return self.backend.validate_state_machine_definition(context, definition, type=type)

import copy
import logging
import random
from typing import Callable, Final, Optional

from sfnmock.aws.api import RequestContext
from sfnmock.aws.api.stepfunctions import (
    ActivityAlreadyExists,
    AliasDescription,
    Arn,
    CharacterRestrictedName,
    ConflictException,
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
    HistoryEventType,
    IncludeExecutionDataGetExecutionHistory,
    InspectionLevel,
    ListActivitiesOutput,
    ListExecutionsOutput,
    ListMapRunsOutput,
    ListStateMachineAliasesOutput,
    ListStateMachinesOutput,
    ListStateMachineVersionsOutput,
    ListTagsForResourceOutput,
    LoggingConfiguration,
    LogLevel,
    LongArn,
    MapRunLabel,
    MapRunStatus,
    MaxConcurrency,
    Name,
    PageSize,
    PageToken,
    Publish,
    PublishStateMachineVersionOutput,
    RedriveExecutionOutput,
    ResourceNotFound,
    ReverseOrder,
    RevisionId,
    RoutingConfigurationList,
    SensitiveCause,
    SensitiveData,
    SensitiveError,
    StartExecutionOutput,
    StateMachineAlreadyExists,
    StateMachineType,
    StopExecutionOutput,
    TagKeyList,
    TagList,
    TagResourceOutput,
    TestStateOutput,
    TooManyTags,
    ToleratedFailureCount,
    ToleratedFailurePercentage,
    TraceHeader,
    TracingConfiguration,
    UntagResourceOutput,
    UpdateMapRunOutput,
    UpdateStateMachineAliasOutput,
    UpdateStateMachineOutput,
    ValidateStateMachineDefinitionOutput,
    ValidateStateMachineDefinitionResultCode,
    ValidationException,
    VersionDescription,
)
from sfnmock.services.stepfunctions import asl
from sfnmock.services.stepfunctions.backend.activity import Activity
from sfnmock.services.stepfunctions.backend.alias import Alias
from sfnmock.services.stepfunctions.backend.base import StepFunctionsBackend
from sfnmock.services.stepfunctions.backend.execution import Execution
from sfnmock.services.stepfunctions.backend.map_run import MapRun
from sfnmock.services.stepfunctions.backend.state_machine import (
    StateMachineInstance,
    StateMachineRevision,
)
from sfnmock.services.stepfunctions.backend.store import EntityKind, SFNStore, sfn_stores
from sfnmock.services.stepfunctions.backend.transitions import InvalidTransition
from sfnmock.services.stepfunctions.pagination import DEFAULT_PAGE_SIZE, Page, paginate
from sfnmock.services.stepfunctions.validation import (
    InvalidRouting,
    validate_max_concurrency,
    validate_name,
    validate_tolerated_failure_count,
    validate_tolerated_failure_percentage,
)
from sfnmock.services.stores import AccountRegionBundle
from sfnmock.utils.aws.arns import (
    get_qualifier,
    is_version_qualifier,
    stepfunctions_activity_arn,
    stepfunctions_alias_arn,
    stepfunctions_execution_arn,
    stepfunctions_map_run_arn,
    stepfunctions_map_run_execution_arn,
    stepfunctions_state_machine_arn,
    unqualified_state_machine_arn,
    validate_execution_arn,
    validate_map_run_arn,
)
from sfnmock.utils.strings import long_uid
from sfnmock.utils.time import Clock, now_utc_datetime

LOG = logging.getLogger(__name__)

MAX_TAGS_PER_RESOURCE: Final[int] = 50

DEFAULT_MAP_RUN_LABEL: Final[str] = "Map"

_MAP_RUN_COMPLETION_EVENTS: Final[dict[MapRunStatus, HistoryEventType]] = {
    MapRunStatus.SUCCEEDED: HistoryEventType.MapRunSucceeded,
    MapRunStatus.FAILED: HistoryEventType.MapRunFailed,
    MapRunStatus.ABORTED: HistoryEventType.MapRunAborted,
}


def _default_logging_configuration() -> LoggingConfiguration:
    return LoggingConfiguration(level=LogLevel.OFF, includeExecutionData=False)


def _default_tracing_configuration() -> TracingConfiguration:
    return TracingConfiguration(enabled=False)


class MockBackend(StepFunctionsBackend):
    """
    Serves every operation from the in-memory entity store. Requests are expected to be validated by the provider;
    the backend checks what can only be checked against the store: existence, uniqueness and status transitions.
    """

    name = "mock"

    def __init__(
        self,
        stores: AccountRegionBundle = None,
        clock: Clock = None,
        uid: Callable[[], str] = None,
        rng: random.Random = None,
        strict_page_tokens: bool = True,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """
        :param stores: the store bundle to serve from, the process-wide ``sfn_stores`` by default
        :param clock: source of the timestamps of created and updated entities
        :param uid: source of unique ids for revisions, execution names and map runs
        :param rng: random source of the alias routing
        :param strict_page_tokens: whether page tokens are bound to the query that issued them
        :param default_page_size: page size of listings that do not specify maxResults
        """
        self.stores = stores if stores is not None else sfn_stores
        self.clock = clock or now_utc_datetime
        self.uid = uid or long_uid
        self.rng = rng or random.Random()
        self.strict_page_tokens = strict_page_tokens
        self.default_page_size = default_page_size

    def get_store(self, context: RequestContext) -> SFNStore:
        return self.stores[context.account_id][context.region]

    def _paginate(
        self, items: list, max_results: Optional[int], next_token: Optional[str], **query
    ) -> Page:
        return paginate(
            items,
            max_results=max_results,
            next_token=next_token,
            query=query,
            strict=self.strict_page_tokens,
            default_page_size=self.default_page_size,
        )

    @staticmethod
    def _get_state_machine_instance(store: SFNStore, state_machine_arn: Arn) -> StateMachineInstance:
        if is_version_qualifier(get_qualifier(state_machine_arn)):
            return store.get(EntityKind.VERSION, state_machine_arn)
        return store.get(EntityKind.STATE_MACHINE, state_machine_arn)

    @staticmethod
    def _assert_taggable(store: SFNStore, resource_arn: Arn) -> None:
        if not (
            store.exists(EntityKind.STATE_MACHINE, resource_arn)
            or store.exists(EntityKind.ACTIVITY, resource_arn)
        ):
            raise ResourceNotFound(f"Resource not found: '{resource_arn}'", resourceName=resource_arn)

    @staticmethod
    def _assert_tag_limit(store: SFNStore, resource_arn: Arn, tags: Optional[TagList]) -> None:
        if store.tags.count_tags(resource_arn, tags) > MAX_TAGS_PER_RESOURCE:
            raise TooManyTags(
                f"Too many tags: resources can carry at most {MAX_TAGS_PER_RESOURCE} tags",
                resourceName=resource_arn,
            )

    #
    # State machines
    #

    def create_state_machine(
        self, context: RequestContext, request: CreateStateMachineInput, **kwargs
    ) -> CreateStateMachineOutput:
        name = request["name"]
        definition = request["definition"]
        sm_type = StateMachineType(request.get("type") or StateMachineType.STANDARD)
        logging_configuration = (
            request.get("loggingConfiguration") or _default_logging_configuration()
        )
        tracing_configuration = (
            request.get("tracingConfiguration") or _default_tracing_configuration()
        )
        tags = request.get("tags") or []

        store = self.get_store(context)
        state_machine_arn = stepfunctions_state_machine_arn(
            name=name, account_id=context.account_id, region_name=context.region
        )
        with store.lock:
            existing: Optional[StateMachineRevision] = store.find(
                EntityKind.STATE_MACHINE, state_machine_arn
            )
            if existing is not None:
                # The idempotency check is based on the name, definition, type, logging and tracing configuration.
                # Different role arns or tags of a repeated request are ignored.
                idempotent = all(
                    [
                        existing.definition == definition,
                        existing.sm_type == sm_type,
                        existing.logging_config == logging_configuration,
                        existing.tracing_config == tracing_configuration,
                    ]
                )
                if not idempotent:
                    raise StateMachineAlreadyExists(
                        f"State Machine Already Exists: '{state_machine_arn}'"
                    )
                return CreateStateMachineOutput(
                    stateMachineArn=existing.arn, creationDate=existing.create_date
                )

            self._assert_tag_limit(store, state_machine_arn, tags)
            state_machine = StateMachineRevision(
                name=name,
                arn=state_machine_arn,
                definition=definition,
                role_arn=request["roleArn"],
                create_date=self.clock(),
                revision_id=self.uid(),
                sm_type=sm_type,
                logging_config=logging_configuration,
                tracing_config=tracing_configuration,
            )
            store.create(EntityKind.STATE_MACHINE, state_machine)
            store.tags.tag_resource(state_machine_arn, tags)

            create_output = CreateStateMachineOutput(
                stateMachineArn=state_machine.arn, creationDate=state_machine.create_date
            )
            if request.get("publish", False):
                version = state_machine.create_version(
                    create_date=state_machine.create_date,
                    description=request.get("versionDescription"),
                )
                store.create(EntityKind.VERSION, version)
                create_output["stateMachineVersionArn"] = version.arn
        return create_output

    def describe_state_machine(
        self, context: RequestContext, state_machine_arn: Arn, **kwargs
    ) -> DescribeStateMachineOutput:
        store = self.get_store(context)
        return self._get_state_machine_instance(store, state_machine_arn).describe()

    def describe_state_machine_for_execution(
        self, context: RequestContext, execution_arn: Arn, **kwargs
    ) -> DescribeStateMachineForExecutionOutput:
        execution: Execution = self.get_store(context).get(EntityKind.EXECUTION, execution_arn)
        return execution.to_describe_state_machine_for_execution_output()

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
        store = self.get_store(context)
        with store.lock:
            state_machine: StateMachineRevision = store.get(
                EntityKind.STATE_MACHINE, state_machine_arn
            )
            if definition is not None and state_machine.sm_type == StateMachineType.EXPRESS:
                asl.validate_definition(definition, StateMachineType.EXPRESS)

            update_date = self.clock()
            revision_id = state_machine.create_revision(
                revision_id=self.uid(),
                update_date=update_date,
                definition=definition,
                role_arn=role_arn,
                logging_configuration=logging_configuration,
                tracing_configuration=tracing_configuration,
            )

            version_arn = None
            if publish:
                version = state_machine.create_version(
                    create_date=update_date, description=version_description
                )
                if version is not None:
                    store.create(EntityKind.VERSION, version)
                    version_arn = version.arn
                else:
                    version_arn = state_machine.versions[state_machine.revision_id]

        update_output = UpdateStateMachineOutput(updateDate=update_date)
        if revision_id is not None:
            update_output["revisionId"] = revision_id
        if version_arn is not None:
            update_output["stateMachineVersionArn"] = version_arn
        return update_output

    def delete_state_machine(
        self, context: RequestContext, state_machine_arn: Arn, **kwargs
    ) -> DeleteStateMachineOutput:
        store = self.get_store(context)
        with store.lock:
            if store.exists(EntityKind.STATE_MACHINE, state_machine_arn):
                store.delete(EntityKind.STATE_MACHINE, state_machine_arn)
        return DeleteStateMachineOutput()

    def list_state_machines(
        self,
        context: RequestContext,
        max_results: PageSize = None,
        next_token: PageToken = None,
        **kwargs,
    ) -> ListStateMachinesOutput:
        state_machines = self.get_store(context).list(EntityKind.STATE_MACHINE)
        page = self._paginate(
            [state_machine.itemise() for state_machine in state_machines],
            max_results,
            next_token,
            operation="ListStateMachines",
        )
        list_output = ListStateMachinesOutput(stateMachines=page.items)
        if page.next_token:
            list_output["nextToken"] = page.next_token
        return list_output

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
        store = self.get_store(context)
        with store.lock:
            state_machine: StateMachineRevision = store.get(
                EntityKind.STATE_MACHINE, state_machine_arn
            )
            if revision_id is not None and state_machine.revision_id != revision_id:
                raise ConflictException(
                    f"Failed to publish the State Machine version for revision {revision_id}. "
                    f"The current State Machine revision is {state_machine.revision_id}."
                )
            version = state_machine.create_version(create_date=self.clock(), description=description)
            if version is not None:
                store.create(EntityKind.VERSION, version)
            else:
                version = store.get(
                    EntityKind.VERSION, state_machine.versions[state_machine.revision_id]
                )
        return PublishStateMachineVersionOutput(
            creationDate=version.create_date, stateMachineVersionArn=version.arn
        )

    def list_state_machine_versions(
        self,
        context: RequestContext,
        state_machine_arn: Arn,
        next_token: PageToken = None,
        max_results: PageSize = None,
        **kwargs,
    ) -> ListStateMachineVersionsOutput:
        store = self.get_store(context)
        store.get(EntityKind.STATE_MACHINE, state_machine_arn)
        versions = store.list(
            EntityKind.VERSION, lambda version: version.source_arn == state_machine_arn
        )
        versions.sort(key=lambda version: version.version, reverse=True)
        page = self._paginate(
            [version.itemise() for version in versions],
            max_results,
            next_token,
            operation="ListStateMachineVersions",
            stateMachineArn=state_machine_arn,
        )
        list_output = ListStateMachineVersionsOutput(stateMachineVersions=page.items)
        if page.next_token:
            list_output["nextToken"] = page.next_token
        return list_output

    def delete_state_machine_version(
        self, context: RequestContext, state_machine_version_arn: LongArn, **kwargs
    ) -> DeleteStateMachineVersionOutput:
        store = self.get_store(context)
        with store.lock:
            if store.exists(EntityKind.VERSION, state_machine_version_arn):
                store.delete(EntityKind.VERSION, state_machine_version_arn)
        return DeleteStateMachineVersionOutput()

    #
    # Aliases
    #

    @staticmethod
    def _assert_routing_targets(
        store: SFNStore, state_machine_arn: Arn, routing_configuration: RoutingConfigurationList
    ) -> None:
        for entry in routing_configuration:
            version_arn = entry["stateMachineVersionArn"]
            if unqualified_state_machine_arn(version_arn) != state_machine_arn:
                raise InvalidRouting(
                    f"Routing configuration must contain state machine version ARNs of '{state_machine_arn}'."
                )
            if not store.exists(EntityKind.VERSION, version_arn):
                raise ResourceNotFound(
                    f"Resource not found: '{version_arn}'", resourceName=version_arn
                )

    def create_state_machine_alias(
        self,
        context: RequestContext,
        name: CharacterRestrictedName,
        routing_configuration: RoutingConfigurationList,
        description: AliasDescription = None,
        **kwargs,
    ) -> CreateStateMachineAliasOutput:
        store = self.get_store(context)
        state_machine_arn = unqualified_state_machine_arn(
            routing_configuration[0]["stateMachineVersionArn"]
        )
        with store.lock:
            store.get(EntityKind.STATE_MACHINE, state_machine_arn)
            self._assert_routing_targets(store, state_machine_arn, routing_configuration)

            alias_arn = stepfunctions_alias_arn(state_machine_arn, name)
            existing: Optional[Alias] = store.find(EntityKind.ALIAS, alias_arn)
            if existing is not None:
                if (
                    existing.routing_configuration == routing_configuration
                    and existing.description == description
                ):
                    return CreateStateMachineAliasOutput(
                        stateMachineAliasArn=existing.arn, creationDate=existing.create_date
                    )
                raise ConflictException(
                    f"Failed to create alias because an alias with the same name and a different routing "
                    f"configuration already exists: '{alias_arn}'"
                )

            alias = Alias(
                state_machine_arn=state_machine_arn,
                name=name,
                routing_configuration=routing_configuration,
                create_date=self.clock(),
                description=description,
            )
            store.create(EntityKind.ALIAS, alias)
        return CreateStateMachineAliasOutput(
            stateMachineAliasArn=alias.arn, creationDate=alias.create_date
        )

    def describe_state_machine_alias(
        self, context: RequestContext, state_machine_alias_arn: Arn, **kwargs
    ) -> DescribeStateMachineAliasOutput:
        alias: Alias = self.get_store(context).get(EntityKind.ALIAS, state_machine_alias_arn)
        return alias.describe()

    def update_state_machine_alias(
        self,
        context: RequestContext,
        state_machine_alias_arn: Arn,
        description: AliasDescription = None,
        routing_configuration: RoutingConfigurationList = None,
        **kwargs,
    ) -> UpdateStateMachineAliasOutput:
        store = self.get_store(context)
        with store.lock:
            alias: Alias = store.get(EntityKind.ALIAS, state_machine_alias_arn)
            if routing_configuration is not None:
                self._assert_routing_targets(store, alias.state_machine_arn, routing_configuration)
            update_date = self.clock()
            store.update(
                EntityKind.ALIAS,
                state_machine_alias_arn,
                lambda entity: entity.update(
                    update_date=update_date,
                    description=description,
                    routing_configuration=routing_configuration,
                ),
            )
        return UpdateStateMachineAliasOutput(updateDate=update_date)

    def delete_state_machine_alias(
        self, context: RequestContext, state_machine_alias_arn: Arn, **kwargs
    ) -> DeleteStateMachineAliasOutput:
        self.get_store(context).delete(EntityKind.ALIAS, state_machine_alias_arn)
        return DeleteStateMachineAliasOutput()

    def list_state_machine_aliases(
        self,
        context: RequestContext,
        state_machine_arn: Arn,
        next_token: PageToken = None,
        max_results: PageSize = None,
        **kwargs,
    ) -> ListStateMachineAliasesOutput:
        store = self.get_store(context)
        store.get(EntityKind.STATE_MACHINE, state_machine_arn)
        aliases = store.list(
            EntityKind.ALIAS, lambda alias: alias.state_machine_arn == state_machine_arn
        )
        page = self._paginate(
            [alias.itemise() for alias in aliases],
            max_results,
            next_token,
            operation="ListStateMachineAliases",
            stateMachineArn=state_machine_arn,
        )
        list_output = ListStateMachineAliasesOutput(stateMachineAliases=page.items)
        if page.next_token:
            list_output["nextToken"] = page.next_token
        return list_output

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
        store = self.get_store(context)
        with store.lock:
            qualifier = get_qualifier(state_machine_arn)
            alias_arn = None
            if qualifier is None or is_version_qualifier(qualifier):
                state_machine = self._get_state_machine_instance(store, state_machine_arn)
            else:
                alias: Alias = store.get(EntityKind.ALIAS, state_machine_arn)
                alias_arn = alias.arn
                state_machine = store.get(EntityKind.VERSION, alias.pick_version(self.rng))

            exec_name = name or self.uid()
            execution = Execution(
                name=exec_name,
                exec_arn=stepfunctions_execution_arn(state_machine.source_arn, exec_name),
                # later updates of the state machine must not affect this execution
                state_machine=copy.deepcopy(state_machine),
                start_date=self.clock(),
                input=input if input is not None else "{}",
                trace_header=trace_header,
                state_machine_alias_arn=alias_arn,
            )
            store.create(EntityKind.EXECUTION, execution)
        LOG.debug("Started execution '%s'", execution.exec_arn)
        return execution.to_start_output()

    def describe_execution(
        self, context: RequestContext, execution_arn: Arn, **kwargs
    ) -> DescribeExecutionOutput:
        execution: Execution = self.get_store(context).get(EntityKind.EXECUTION, execution_arn)
        return execution.to_describe_output()

    def stop_execution(
        self,
        context: RequestContext,
        execution_arn: Arn,
        error: SensitiveError = None,
        cause: SensitiveCause = None,
        **kwargs,
    ) -> StopExecutionOutput:
        stop_date = self.clock()
        execution: Execution = self.get_store(context).update(
            EntityKind.EXECUTION,
            execution_arn,
            lambda entity: entity.stop(stop_date=stop_date, error=error, cause=cause),
        )
        return StopExecutionOutput(stopDate=execution.stop_date)

    def redrive_execution(
        self, context: RequestContext, execution_arn: Arn, client_token: str = None, **kwargs
    ) -> RedriveExecutionOutput:
        redrive_date = self.clock()
        execution: Execution = self.get_store(context).update(
            EntityKind.EXECUTION,
            execution_arn,
            lambda entity: entity.redrive(redrive_date=redrive_date),
        )
        return RedriveExecutionOutput(redriveDate=execution.redrive_date)

    def list_executions(
        self,
        context: RequestContext,
        state_machine_arn: Arn = None,
        status_filter: ExecutionStatus = None,
        max_results: PageSize = None,
        next_token: PageToken = None,
        map_run_arn: LongArn = None,
        redrive_filter: ExecutionRedriveFilter = None,
        **kwargs,
    ) -> ListExecutionsOutput:
        store = self.get_store(context)

        if map_run_arn:
            store.get(EntityKind.MAP_RUN, map_run_arn)

            def _parent_filter(execution: Execution) -> bool:
                return execution.map_run_arn == map_run_arn

        else:
            qualifier = get_qualifier(state_machine_arn)
            if qualifier is None:
                store.get(EntityKind.STATE_MACHINE, state_machine_arn)

                def _parent_filter(execution: Execution) -> bool:
                    return (
                        execution.state_machine_arn == state_machine_arn
                        and execution.map_run_arn is None
                    )

            elif is_version_qualifier(qualifier):
                store.get(EntityKind.VERSION, state_machine_arn)

                def _parent_filter(execution: Execution) -> bool:
                    return execution.state_machine_version_arn == state_machine_arn

            else:
                store.get(EntityKind.ALIAS, state_machine_arn)

                def _parent_filter(execution: Execution) -> bool:
                    return execution.state_machine_alias_arn == state_machine_arn

        def _filter(execution: Execution) -> bool:
            if not _parent_filter(execution):
                return False
            if status_filter and execution.exec_status != status_filter:
                return False
            return execution.matches_redrive_filter(redrive_filter)

        executions = store.list(EntityKind.EXECUTION, _filter)
        page = self._paginate(
            [execution.to_execution_list_item() for execution in executions],
            max_results,
            next_token,
            operation="ListExecutions",
            stateMachineArn=state_machine_arn,
            mapRunArn=map_run_arn,
            statusFilter=status_filter,
            redriveFilter=redrive_filter,
        )
        list_output = ListExecutionsOutput(executions=page.items)
        if page.next_token:
            list_output["nextToken"] = page.next_token
        return list_output

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
        store = self.get_store(context)
        with store.lock:
            execution: Execution = store.get(EntityKind.EXECUTION, execution_arn)
            events = execution.to_history_events(
                include_execution_data=include_execution_data is not False
            )
        if reverse_order:
            events.reverse()
        page = self._paginate(
            events,
            max_results,
            next_token,
            operation="GetExecutionHistory",
            executionArn=execution_arn,
            reverseOrder=bool(reverse_order),
            includeExecutionData=include_execution_data is not False,
        )
        history_output = GetExecutionHistoryOutput(events=page.items)
        if page.next_token:
            history_output["nextToken"] = page.next_token
        return history_output

    #
    # Activities
    #

    def create_activity(
        self, context: RequestContext, name: Name, tags: TagList = None, **kwargs
    ) -> CreateActivityOutput:
        store = self.get_store(context)
        activity_arn = stepfunctions_activity_arn(
            name=name, account_id=context.account_id, region_name=context.region
        )
        with store.lock:
            activity: Optional[Activity] = store.find(EntityKind.ACTIVITY, activity_arn)
            if activity is not None:
                # repeated requests are idempotent, unless they carry tags the activity does not have
                current_tags = {
                    tag["key"]: tag["value"]
                    for tag in store.tags.list_tags_for_resource(activity_arn, "tags")["tags"]
                }
                if tags and {tag["key"]: tag["value"] for tag in tags} != current_tags:
                    raise ActivityAlreadyExists(f"Activity already exists: '{activity_arn}'")
                return activity.to_create_output()

            self._assert_tag_limit(store, activity_arn, tags)
            activity = Activity(arn=activity_arn, name=name, creation_date=self.clock())
            store.create(EntityKind.ACTIVITY, activity)
            store.tags.tag_resource(activity_arn, tags or [])
        return activity.to_create_output()

    def describe_activity(
        self, context: RequestContext, activity_arn: Arn, **kwargs
    ) -> DescribeActivityOutput:
        activity: Activity = self.get_store(context).get(EntityKind.ACTIVITY, activity_arn)
        return activity.to_describe_output()

    def delete_activity(
        self, context: RequestContext, activity_arn: Arn, **kwargs
    ) -> DeleteActivityOutput:
        store = self.get_store(context)
        with store.lock:
            if store.exists(EntityKind.ACTIVITY, activity_arn):
                store.delete(EntityKind.ACTIVITY, activity_arn)
        return DeleteActivityOutput()

    def list_activities(
        self,
        context: RequestContext,
        max_results: PageSize = None,
        next_token: PageToken = None,
        **kwargs,
    ) -> ListActivitiesOutput:
        activities = self.get_store(context).list(EntityKind.ACTIVITY)
        page = self._paginate(
            [activity.to_activity_list_item() for activity in activities],
            max_results,
            next_token,
            operation="ListActivities",
        )
        list_output = ListActivitiesOutput(activities=page.items)
        if page.next_token:
            list_output["nextToken"] = page.next_token
        return list_output

    #
    # Map runs
    #

    def _map_run_executions(self, store: SFNStore, map_run: MapRun) -> list[Execution]:
        return store.list(EntityKind.EXECUTION, lambda execution: execution.map_run_arn == map_run.arn)

    def describe_map_run(
        self, context: RequestContext, map_run_arn: LongArn, **kwargs
    ) -> DescribeMapRunOutput:
        store = self.get_store(context)
        with store.lock:
            map_run: MapRun = store.get(EntityKind.MAP_RUN, map_run_arn)
            return map_run.to_describe_output(self._map_run_executions(store, map_run))

    def list_map_runs(
        self,
        context: RequestContext,
        execution_arn: Arn,
        max_results: PageSize = None,
        next_token: PageToken = None,
        **kwargs,
    ) -> ListMapRunsOutput:
        store = self.get_store(context)
        store.get(EntityKind.EXECUTION, execution_arn)
        map_runs = store.list(
            EntityKind.MAP_RUN, lambda map_run: map_run.execution_arn == execution_arn
        )
        page = self._paginate(
            [map_run.to_map_run_list_item() for map_run in map_runs],
            max_results,
            next_token,
            operation="ListMapRuns",
            executionArn=execution_arn,
        )
        list_output = ListMapRunsOutput(mapRuns=page.items)
        if page.next_token:
            list_output["nextToken"] = page.next_token
        return list_output

    def update_map_run(
        self,
        context: RequestContext,
        map_run_arn: LongArn,
        max_concurrency: MaxConcurrency = None,
        tolerated_failure_percentage: ToleratedFailurePercentage = None,
        tolerated_failure_count: ToleratedFailureCount = None,
        **kwargs,
    ) -> UpdateMapRunOutput:
        self.get_store(context).update(
            EntityKind.MAP_RUN,
            map_run_arn,
            lambda map_run: map_run.update(
                max_concurrency=max_concurrency,
                tolerated_failure_count=tolerated_failure_count,
                tolerated_failure_percentage=tolerated_failure_percentage,
            ),
        )
        return UpdateMapRunOutput()

    #
    # Tags
    #

    def tag_resource(
        self, context: RequestContext, resource_arn: Arn, tags: TagList, **kwargs
    ) -> TagResourceOutput:
        store = self.get_store(context)
        with store.lock:
            self._assert_taggable(store, resource_arn)
            self._assert_tag_limit(store, resource_arn, tags)
            store.tags.tag_resource(resource_arn, tags)
        return TagResourceOutput()

    def untag_resource(
        self, context: RequestContext, resource_arn: Arn, tag_keys: TagKeyList, **kwargs
    ) -> UntagResourceOutput:
        store = self.get_store(context)
        with store.lock:
            self._assert_taggable(store, resource_arn)
            store.tags.untag_resource(resource_arn, tag_keys)
        return UntagResourceOutput()

    def list_tags_for_resource(
        self, context: RequestContext, resource_arn: Arn, **kwargs
    ) -> ListTagsForResourceOutput:
        store = self.get_store(context)
        with store.lock:
            self._assert_taggable(store, resource_arn)
            tags = store.tags.list_tags_for_resource(resource_arn, "tags")["tags"]
        return ListTagsForResourceOutput(tags=tags)

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
        reveal_secrets: bool = None,
        **kwargs,
    ) -> TestStateOutput:
        return asl.evaluate_state(
            definition=definition,
            state_input=input,
            inspection_level=inspection_level or InspectionLevel.INFO,
        )

    def validate_state_machine_definition(
        self,
        context: RequestContext,
        definition: Definition,
        type: StateMachineType = None,
        **kwargs,
    ) -> ValidateStateMachineDefinitionOutput:
        diagnostics = asl.analyse_definition(definition, type or StateMachineType.STANDARD)
        result = (
            ValidateStateMachineDefinitionResultCode.FAIL
            if diagnostics
            else ValidateStateMachineDefinitionResultCode.OK
        )
        return ValidateStateMachineDefinitionOutput(result=result, diagnostics=diagnostics)

    #
    # Synthetic completion, not part of the service API
    #

    def complete_execution(
        self,
        context: RequestContext,
        execution_arn: Arn,
        status: ExecutionStatus,
        output: SensitiveData = None,
        error: SensitiveError = None,
        cause: SensitiveCause = None,
    ) -> DescribeExecutionOutput:
        """
        Completes a running execution with the given terminal status, as if its workflow had finished.

        :raises InvalidTransition: if the execution is not RUNNING, or the status is not terminal
        """
        validate_execution_arn(execution_arn)
        try:
            status = ExecutionStatus(status)
        except ValueError:
            raise InvalidTransition(
                f"Unknown execution status: '{status}'", resource_name=execution_arn
            )
        if output is not None:
            asl.parse_state_input(output)
        stop_date = self.clock()
        execution: Execution = self.get_store(context).update(
            EntityKind.EXECUTION,
            execution_arn,
            lambda entity: entity.complete(
                status, stop_date=stop_date, output=output, error=error, cause=cause
            ),
        )
        return execution.to_describe_output()

    def create_map_run(
        self,
        context: RequestContext,
        execution_arn: Arn,
        label: MapRunLabel = None,
        max_concurrency: MaxConcurrency = 0,
        tolerated_failure_count: ToleratedFailureCount = 0,
        tolerated_failure_percentage: ToleratedFailurePercentage = 0.0,
        item_count: int = 0,
    ) -> DescribeMapRunOutput:
        """
        Starts a map run of the given execution, with one RUNNING child execution per item.

        :raises ExecutionDoesNotExist: if the parent execution does not exist
        """
        validate_execution_arn(execution_arn)
        label = validate_name(label or DEFAULT_MAP_RUN_LABEL)
        validate_max_concurrency(max_concurrency)
        validate_tolerated_failure_count(tolerated_failure_count)
        validate_tolerated_failure_percentage(tolerated_failure_percentage)
        if not isinstance(item_count, int) or item_count < 0:
            raise ValidationException(f"Invalid item count: '{item_count}'")

        store = self.get_store(context)
        with store.lock:
            parent: Execution = store.get(EntityKind.EXECUTION, execution_arn)
            start_date = self.clock()
            map_run = MapRun(
                arn=stepfunctions_map_run_arn(execution_arn, label, self.uid()),
                execution_arn=execution_arn,
                state_machine_arn=parent.state_machine_arn,
                label=label,
                start_date=start_date,
                max_concurrency=max_concurrency,
                tolerated_failure_count=tolerated_failure_count,
                tolerated_failure_percentage=tolerated_failure_percentage,
            )
            store.create(EntityKind.MAP_RUN, map_run)
            parent.record_map_run_started(start_date, map_run.arn)

            for _ in range(item_count):
                child_name = self.uid()
                child = Execution(
                    name=child_name,
                    exec_arn=stepfunctions_map_run_execution_arn(map_run.arn, child_name),
                    state_machine=copy.deepcopy(parent.state_machine),
                    start_date=start_date,
                    input="{}",
                    map_run_arn=map_run.arn,
                    map_run_label=label,
                )
                store.create(EntityKind.EXECUTION, child)
                map_run.execution_arns.append(child.exec_arn)
            LOG.debug("Started map run '%s' with %s items", map_run.arn, item_count)
            return map_run.to_describe_output(self._map_run_executions(store, map_run))

    def complete_map_run(
        self,
        context: RequestContext,
        map_run_arn: LongArn,
        status: MapRunStatus,
        error: SensitiveError = None,
        cause: SensitiveCause = None,
    ) -> DescribeMapRunOutput:
        """
        Completes a running map run. Aborting a map run aborts its running child executions.

        :raises InvalidTransition: if the map run is not RUNNING, or the status is not terminal
        """
        validate_map_run_arn(map_run_arn)
        try:
            status = MapRunStatus(status)
        except ValueError:
            raise InvalidTransition(f"Unknown map run status: '{status}'", resource_name=map_run_arn)

        store = self.get_store(context)
        with store.lock:
            map_run: MapRun = store.get(EntityKind.MAP_RUN, map_run_arn)
            stop_date = self.clock()
            map_run.complete(status, stop_date=stop_date)

            children = self._map_run_executions(store, map_run)
            if status == MapRunStatus.ABORTED:
                for child in children:
                    child.stop(stop_date=stop_date)

            parent: Optional[Execution] = store.find(EntityKind.EXECUTION, map_run.execution_arn)
            if parent is not None:
                parent.record_map_run_completed(
                    stop_date, _MAP_RUN_COMPLETION_EVENTS[status], error=error, cause=cause
                )
            return map_run.to_describe_output(children)

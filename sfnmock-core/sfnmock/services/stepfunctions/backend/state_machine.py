import abc
import datetime
from typing import Final, Optional

from sfnmock.aws.api.stepfunctions import (
    Arn,
    Definition,
    DescribeStateMachineForExecutionOutput,
    DescribeStateMachineOutput,
    LoggingConfiguration,
    LogLevel,
    RevisionId,
    StateMachineListItem,
    StateMachineStatus,
    StateMachineType,
    StateMachineVersionListItem,
    TracingConfiguration,
)
from sfnmock.utils.aws.arns import stepfunctions_version_arn


class StateMachineInstance:
    """Common shape of state machines and their published versions."""

    name: str
    arn: Arn
    definition: Definition
    role_arn: Arn
    sm_type: StateMachineType
    create_date: datetime.datetime
    revision_id: Optional[RevisionId]
    logging_config: LoggingConfiguration
    tracing_config: TracingConfiguration

    def __init__(
        self,
        name: str,
        arn: Arn,
        definition: Definition,
        role_arn: Arn,
        create_date: datetime.datetime,
        sm_type: StateMachineType = StateMachineType.STANDARD,
        logging_config: Optional[LoggingConfiguration] = None,
        tracing_config: Optional[TracingConfiguration] = None,
        revision_id: Optional[RevisionId] = None,
    ):
        self.name = name
        self.arn = arn
        self.definition = definition
        self.role_arn = role_arn
        self.sm_type = sm_type
        self.create_date = create_date
        self.revision_id = revision_id
        self.logging_config = logging_config or LoggingConfiguration(
            level=LogLevel.OFF, includeExecutionData=False
        )
        self.tracing_config = tracing_config or TracingConfiguration(enabled=False)

    def describe(self) -> DescribeStateMachineOutput:
        describe_output = DescribeStateMachineOutput(
            stateMachineArn=self.arn,
            name=self.name,
            status=StateMachineStatus.ACTIVE,
            definition=self.definition,
            roleArn=self.role_arn,
            type=self.sm_type,
            creationDate=self.create_date,
            loggingConfiguration=self.logging_config,
            tracingConfiguration=self.tracing_config,
        )
        if self.revision_id:
            describe_output["revisionId"] = self.revision_id
        return describe_output

    def describe_for_execution(self) -> DescribeStateMachineForExecutionOutput:
        describe_output = DescribeStateMachineForExecutionOutput(
            stateMachineArn=self.arn,
            name=self.name,
            definition=self.definition,
            roleArn=self.role_arn,
            updateDate=self.update_date,
            loggingConfiguration=self.logging_config,
            tracingConfiguration=self.tracing_config,
        )
        if self.revision_id:
            describe_output["revisionId"] = self.revision_id
        return describe_output

    @property
    @abc.abstractmethod
    def update_date(self) -> datetime.datetime: ...

    @property
    @abc.abstractmethod
    def source_arn(self) -> Arn: ...


class StateMachineRevision(StateMachineInstance):
    """The current, mutable revision of a state machine. Every effective update produces a new revision id."""

    _next_version_number: int
    # maps revision ids to the arn of the version published from them
    versions: Final[dict[RevisionId, Arn]]
    _update_date: datetime.datetime

    def __init__(
        self,
        name: str,
        arn: Arn,
        definition: Definition,
        role_arn: Arn,
        create_date: datetime.datetime,
        revision_id: RevisionId,
        sm_type: StateMachineType = StateMachineType.STANDARD,
        logging_config: Optional[LoggingConfiguration] = None,
        tracing_config: Optional[TracingConfiguration] = None,
    ):
        super().__init__(
            name=name,
            arn=arn,
            definition=definition,
            role_arn=role_arn,
            create_date=create_date,
            sm_type=sm_type,
            logging_config=logging_config,
            tracing_config=tracing_config,
            revision_id=revision_id,
        )
        self.versions = dict()
        self._next_version_number = 0
        self._update_date = create_date

    @property
    def update_date(self) -> datetime.datetime:
        return self._update_date

    @property
    def source_arn(self) -> Arn:
        return self.arn

    def create_revision(
        self,
        revision_id: RevisionId,
        update_date: datetime.datetime,
        definition: Optional[Definition] = None,
        role_arn: Optional[Arn] = None,
        logging_configuration: Optional[LoggingConfiguration] = None,
        tracing_configuration: Optional[TracingConfiguration] = None,
    ) -> Optional[RevisionId]:
        """
        Applies the given changes. Returns the new revision id, or None if nothing changed.
        """
        update_definition = definition is not None and definition != self.definition
        update_role_arn = role_arn is not None and role_arn != self.role_arn
        update_logging = (
            logging_configuration is not None and logging_configuration != self.logging_config
        )
        update_tracing = (
            tracing_configuration is not None and tracing_configuration != self.tracing_config
        )
        if not any([update_definition, update_role_arn, update_logging, update_tracing]):
            return None

        if update_definition:
            self.definition = definition
        if update_role_arn:
            self.role_arn = role_arn
        if update_logging:
            self.logging_config = logging_configuration
        if update_tracing:
            self.tracing_config = tracing_configuration
        self.revision_id = revision_id
        self._update_date = update_date
        return revision_id

    def create_version(
        self, create_date: datetime.datetime, description: Optional[str] = None
    ) -> Optional["StateMachineVersion"]:
        """
        Publishes the current revision. Returns None if a version of the current revision exists already.
        """
        if self.revision_id in self.versions:
            return None
        self._next_version_number += 1
        version = StateMachineVersion(
            source=self,
            version=self._next_version_number,
            create_date=create_date,
            description=description,
        )
        self.versions[self.revision_id] = version.arn
        return version

    def delete_version(self, version_arn: Arn) -> None:
        for revision_id, arn in list(self.versions.items()):
            if arn == version_arn:
                del self.versions[revision_id]

    def itemise(self) -> StateMachineListItem:
        return StateMachineListItem(
            stateMachineArn=self.arn,
            name=self.name,
            type=self.sm_type,
            creationDate=self.create_date,
        )


class StateMachineVersion(StateMachineInstance):
    """An immutable snapshot of a state machine revision."""

    version: Final[int]
    description: Final[Optional[str]]
    _source_arn: Final[Arn]

    def __init__(
        self,
        source: StateMachineRevision,
        version: int,
        create_date: datetime.datetime,
        description: Optional[str] = None,
    ):
        super().__init__(
            name=source.name,
            arn=stepfunctions_version_arn(source.arn, version),
            definition=source.definition,
            role_arn=source.role_arn,
            create_date=create_date,
            sm_type=source.sm_type,
            logging_config=source.logging_config,
            tracing_config=source.tracing_config,
            revision_id=source.revision_id,
        )
        self._source_arn = source.arn
        self.version = version
        self.description = description

    @property
    def update_date(self) -> datetime.datetime:
        return self.create_date

    @property
    def source_arn(self) -> Arn:
        return self._source_arn

    def describe(self) -> DescribeStateMachineOutput:
        describe_output = super().describe()
        if self.description:
            describe_output["description"] = self.description
        return describe_output

    def itemise(self) -> StateMachineVersionListItem:
        return StateMachineVersionListItem(
            stateMachineVersionArn=self.arn, creationDate=self.create_date
        )

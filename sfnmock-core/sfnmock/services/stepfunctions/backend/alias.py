import copy
import datetime
import random
from typing import Final, Optional

from sfnmock.aws.api.stepfunctions import (
    AliasDescription,
    Arn,
    CharacterRestrictedName,
    DescribeStateMachineAliasOutput,
    RoutingConfigurationList,
    StateMachineAliasListItem,
)
from sfnmock.utils.aws.arns import stepfunctions_alias_arn


class Alias:
    name: Final[CharacterRestrictedName]
    state_machine_arn: Final[Arn]
    arn: Final[Arn]
    description: Optional[AliasDescription]
    routing_configuration: RoutingConfigurationList
    create_date: Final[datetime.datetime]
    update_date: datetime.datetime

    def __init__(
        self,
        state_machine_arn: Arn,
        name: CharacterRestrictedName,
        routing_configuration: RoutingConfigurationList,
        create_date: datetime.datetime,
        description: Optional[AliasDescription] = None,
    ):
        self.name = name
        self.state_machine_arn = state_machine_arn
        self.arn = stepfunctions_alias_arn(state_machine_arn, name)
        self.description = description
        self.routing_configuration = copy.deepcopy(routing_configuration)
        self.create_date = create_date
        self.update_date = create_date

    def update(
        self,
        update_date: datetime.datetime,
        description: Optional[AliasDescription] = None,
        routing_configuration: Optional[RoutingConfigurationList] = None,
    ) -> None:
        if description is not None:
            self.description = description
        if routing_configuration is not None:
            self.routing_configuration = copy.deepcopy(routing_configuration)
        self.update_date = update_date

    def is_routing_to(self, state_machine_version_arn: Arn) -> bool:
        return any(
            entry["stateMachineVersionArn"] == state_machine_version_arn
            for entry in self.routing_configuration
        )

    def pick_version(self, rng: random.Random) -> Arn:
        """
        Picks the version arn an execution started through this alias runs, weighted by the routing configuration.
        """
        draw = rng.randrange(100)
        threshold = 0
        for entry in self.routing_configuration:
            threshold += entry["weight"]
            if draw < threshold:
                return entry["stateMachineVersionArn"]
        return self.routing_configuration[-1]["stateMachineVersionArn"]

    def describe(self) -> DescribeStateMachineAliasOutput:
        describe_output = DescribeStateMachineAliasOutput(
            stateMachineAliasArn=self.arn,
            name=self.name,
            routingConfiguration=copy.deepcopy(self.routing_configuration),
            creationDate=self.create_date,
            updateDate=self.update_date,
        )
        if self.description is not None:
            describe_output["description"] = self.description
        return describe_output

    def itemise(self) -> StateMachineAliasListItem:
        return StateMachineAliasListItem(stateMachineAliasArn=self.arn, creationDate=self.create_date)

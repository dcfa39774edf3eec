import datetime
from typing import Final

from sfnmock.aws.api.stepfunctions import (
    ActivityListItem,
    Arn,
    CreateActivityOutput,
    DescribeActivityOutput,
    Name,
)


class Activity:
    arn: Final[Arn]
    name: Final[Name]
    creation_date: Final[datetime.datetime]

    def __init__(self, arn: Arn, name: Name, creation_date: datetime.datetime):
        self.arn = arn
        self.name = name
        self.creation_date = creation_date

    def to_create_output(self) -> CreateActivityOutput:
        return CreateActivityOutput(activityArn=self.arn, creationDate=self.creation_date)

    def to_describe_output(self) -> DescribeActivityOutput:
        return DescribeActivityOutput(
            activityArn=self.arn, name=self.name, creationDate=self.creation_date
        )

    def to_activity_list_item(self) -> ActivityListItem:
        return ActivityListItem(
            activityArn=self.arn, name=self.name, creationDate=self.creation_date
        )

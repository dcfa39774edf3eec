import datetime
import itertools
import json
import random

import pytest

from sfnmock.aws.api import RequestContext
from sfnmock.services.stepfunctions.backend.mock import MockBackend
from sfnmock.services.stepfunctions.backend.store import SFNStore
from sfnmock.services.stepfunctions.provider import StepFunctionsProvider
from sfnmock.services.stores import AccountRegionBundle

TEST_AWS_ACCESS_KEY_ID = "test"
TEST_AWS_SECRET_ACCESS_KEY = "test"
TEST_AWS_ACCOUNT_ID = "000000000000"
TEST_AWS_REGION_NAME = "us-east-1"

TEST_ROLE_ARN = f"arn:aws:iam::{TEST_AWS_ACCOUNT_ID}:role/sfn-role"

PASS_DEFINITION = json.dumps(
    {
        "Comment": "A single pass state",
        "StartAt": "Start",
        "States": {"Start": {"Type": "Pass", "Result": {"hello": "world"}, "End": True}},
    }
)

WAIT_DEFINITION = json.dumps(
    {
        "StartAt": "Wait",
        "States": {"Wait": {"Type": "Wait", "Seconds": 10, "End": True}},
    }
)


@pytest.fixture(autouse=True)
def set_boto_test_credentials_and_region(monkeypatch):
    """
    Automatically sets the default credentials and region for all unit tests.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", TEST_AWS_ACCESS_KEY_ID)
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", TEST_AWS_SECRET_ACCESS_KEY)
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_AWS_REGION_NAME)


@pytest.fixture
def clock():
    """A clock that advances by one second on every reading."""
    start = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
    ticks = itertools.count()

    def _now() -> datetime.datetime:
        return start + datetime.timedelta(seconds=next(ticks))

    return _now


@pytest.fixture
def uid():
    counter = itertools.count(1)

    def _uid() -> str:
        return f"uid-{next(counter)}"

    return _uid


@pytest.fixture
def stores():
    bundle = AccountRegionBundle("stepfunctions", SFNStore)
    yield bundle
    bundle.reset()


@pytest.fixture
def context():
    return RequestContext(account_id=TEST_AWS_ACCOUNT_ID, region=TEST_AWS_REGION_NAME)


@pytest.fixture
def backend(stores, clock, uid):
    return MockBackend(stores=stores, clock=clock, uid=uid, rng=random.Random(42))


@pytest.fixture
def provider(backend):
    return StepFunctionsProvider(backend)


@pytest.fixture
def store(stores, context):
    return stores[context.account_id][context.region]


@pytest.fixture
def create_state_machine(provider, context):
    def _create(name: str = "test-machine", definition: str = PASS_DEFINITION, **kwargs):
        request = {"name": name, "definition": definition, "roleArn": TEST_ROLE_ARN}
        request.update(kwargs)
        return provider.create_state_machine(context, request)

    return _create


@pytest.fixture
def start_execution(provider, context):
    def _start(state_machine_arn: str, name: str = None, input: str = None):
        return provider.start_execution(context, state_machine_arn, name=name, input=input)

    return _start

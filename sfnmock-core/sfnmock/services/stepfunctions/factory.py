"""
Construction helpers that pick the backend from the configuration. This is the only place where the engine meets
``sfnmock.config``, everything below it receives its settings as arguments.
"""

import logging

from sfnmock import config
from sfnmock.aws.skeleton import Skeleton, create_skeleton
from sfnmock.constants import BACKEND_LIVE, BACKEND_MOCK, SERVICE_NAME
from sfnmock.logging.setup import setup_logging_from_config
from sfnmock.services.stepfunctions.backend.base import StepFunctionsBackend
from sfnmock.services.stepfunctions.provider import StepFunctionsProvider

LOG = logging.getLogger(__name__)


def create_backend(backend: str = None) -> StepFunctionsBackend:
    """
    Creates the backend named by ``backend``, or by ``SFN_BACKEND`` if omitted.

    :raises ValueError: if the backend name is unknown
    """
    backend = backend or config.SFN_BACKEND
    if backend == BACKEND_MOCK:
        from sfnmock.services.stepfunctions.backend.mock import MockBackend

        return MockBackend(
            strict_page_tokens=config.SFN_STRICT_PAGE_TOKENS,
            default_page_size=config.SFN_DEFAULT_PAGE_SIZE,
        )
    if backend == BACKEND_LIVE:
        from sfnmock.services.stepfunctions.backend.live import LiveBackend

        return LiveBackend()
    raise ValueError(f"Unknown backend '{backend}'")


def create_provider(backend: StepFunctionsBackend = None) -> StepFunctionsProvider:
    provider = StepFunctionsProvider(backend or create_backend())
    LOG.debug("Created %s", provider)
    return provider


def create_service(backend: StepFunctionsBackend = None, configure_logging: bool = True) -> Skeleton:
    """
    Creates the request boundary of the service, dispatching to a provider with the configured backend.

    :param backend: the backend to use, the one named by ``SFN_BACKEND`` if omitted
    :param configure_logging: whether to set up logging from ``SFN_LOG`` and ``DEBUG`` first
    """
    if configure_logging:
        setup_logging_from_config()
    return create_skeleton(SERVICE_NAME, create_provider(backend))

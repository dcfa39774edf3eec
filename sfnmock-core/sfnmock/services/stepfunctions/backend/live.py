"""
Backend that forwards every operation to a real Step Functions endpoint through boto3. Requests are validated by the
provider before they get here, and failures of the remote service are handed back as ``ServiceException``.
"""

import inspect
import logging
import threading
from typing import Any, Callable, Dict

import boto3
from botocore import xform_name
from botocore.client import BaseClient
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from sfnmock import config
from sfnmock.aws.api import CommonServiceException, RequestContext, ServiceException
from sfnmock.aws.api.core import ServiceRequest, ServiceResponse
from sfnmock.aws.api.stepfunctions import StepfunctionsApi
from sfnmock.aws.skeleton import HandlerAttributes, get_handler_attributes
from sfnmock.aws.spec import load_service
from sfnmock.constants import SERVICE_NAME
from sfnmock.services.stepfunctions.backend.base import StepFunctionsBackend

LOG = logging.getLogger(__name__)

ClientFactory = Callable[[str], BaseClient]


def create_client(region_name: str) -> BaseClient:
    return boto3.client(
        SERVICE_NAME,
        region_name=region_name,
        endpoint_url=config.AWS_ENDPOINT_URL,
        config=BotoConfig(retries={"max_attempts": 3, "mode": "standard"}),
    )


def parse_client_error(error: ClientError) -> ServiceException:
    """
    Creates a ServiceException from the error response of a botocore client. Additional fields of the error response,
    like ``resourceName``, are added as members of the exception.
    """
    response = error.response
    error_details = response.get("Error", {})
    status_code = response.get("ResponseMetadata", {}).get("HTTPStatusCode", 400)
    service_exception = CommonServiceException(
        code=error_details.get("Code", f"'{status_code}'"),
        status_code=status_code,
        message=error_details.get("Message", ""),
        sender_fault=error_details.get("Type") == "Sender",
    )
    for key, value in response.items():
        if key.lower() not in ["code", "message", "type", "error", "responsemetadata"] and not hasattr(
            service_exception, key
        ):
            setattr(service_exception, key, value)
    return service_exception


class LiveBackend(StepFunctionsBackend):
    """
    Forwards the operations to AWS (or to the endpoint in ``AWS_ENDPOINT_URL``), using one client per region. The
    operation methods are generated from the handlers of ``StepfunctionsApi``.
    """

    name = "live"

    def __init__(self, client_factory: ClientFactory = None, client: BaseClient = None):
        """
        :param client_factory: creates the client of a region, boto3 clients by default
        :param client: a single client used for every region, f.e. a stubbed one
        """
        self.client_factory = client_factory or create_client
        self._clients: Dict[str, BaseClient] = {}
        self._mutex = threading.Lock()
        if client is not None:
            self.client_factory = lambda _region_name: client

    def get_client(self, context: RequestContext) -> BaseClient:
        with self._mutex:
            if context.region not in self._clients:
                self._clients[context.region] = self.client_factory(context.region)
            return self._clients[context.region]

    def forward(
        self, context: RequestContext, operation: str, request: ServiceRequest
    ) -> ServiceResponse:
        """
        Calls the given operation on the client of the context's region.

        :param context: the request context, its region selects the client
        :param operation: the name of the operation, f.e. "DescribeExecution"
        :param request: the request record, with the field names of the botocore service model
        :return: the response of the remote service without its response metadata
        :raises ServiceException: if the remote service returned an error
        """
        client = self.get_client(context)
        LOG.debug("Forwarding %s to %s", operation, client.meta.endpoint_url)
        try:
            response = getattr(client, xform_name(operation))(**request)
        except ClientError as e:
            raise parse_client_error(e) from e
        response.pop("ResponseMetadata", None)
        return response


def _to_request(operation: str, kwargs: Dict[str, Any]) -> ServiceRequest:
    members = load_service(SERVICE_NAME).operation_model(operation).input_shape.members
    wire_names = {xform_name(member): member for member in members}
    return {
        wire_names[key]: value
        for key, value in kwargs.items()
        if value is not None and key in wire_names
    }


def _create_forwarding_method(handler: HandlerAttributes) -> Callable:
    operation = handler.operation
    signature = inspect.signature(getattr(StepfunctionsApi, handler.function_name))

    if handler.expand_parameters:

        def _forward(self: LiveBackend, context: RequestContext, *args, **kwargs) -> ServiceResponse:
            arguments = signature.bind(self, context, *args, **kwargs).arguments
            parameters = dict(arguments.pop("kwargs", {}))
            parameters.update(
                {key: value for key, value in arguments.items() if key not in ("self", "context")}
            )
            return self.forward(context, operation, _to_request(operation, parameters))

    else:

        def _forward(
            self: LiveBackend, context: RequestContext, request: ServiceRequest, **kwargs
        ) -> ServiceResponse:
            return self.forward(context, operation, request)

    _forward.__name__ = handler.function_name
    _forward.__qualname__ = f"LiveBackend.{handler.function_name}"
    return _forward


for _handler in get_handler_attributes(StepfunctionsApi).values():
    setattr(LiveBackend, _handler.function_name, _create_forwarding_method(_handler))

import functools
from typing import Any, Optional, Protocol, TypedDict

from sfnmock import config


class ServiceRequest(TypedDict):
    pass


ServiceResponse = Any


class ServiceException(Exception):
    """
    An exception that indicates that a service error occurred.
    These exceptions, when raised during the execution of a service function, are handed back to the caller as the
    typed failure of the operation.
    Do not use this exception directly (use the generated subclasses or CommonServiceException instead).
    """

    code: str
    status_code: int
    sender_fault: bool
    message: str

    def __init__(self, *args, **kwargs):
        super().__init__(*args)

        if len(args) >= 1:
            self.message = args[0]
        else:
            self.message = ""
        for key, value in kwargs.items():
            setattr(self, key, value)


class CommonServiceException(ServiceException):
    """
    An exception which can be raised within a service during its execution, even if it is not specified (i.e. it's not
    generated from the botocore service model).
    In the AWS API references, this kind of errors are usually referred to as "Common Errors", f.e.:
    https://docs.aws.amazon.com/step-functions/latest/apireference/CommonErrors.html
    """

    def __init__(self, code: str, message: str, status_code: int = 400, sender_fault: bool = False):
        self.code = code
        self.status_code = status_code
        self.sender_fault = sender_fault
        self.message = message
        super().__init__(self.message)


class RequestContext:
    """
    The caller's identity for a single operation call. Stores are partitioned by account and region.
    """

    region: Optional[str]
    account_id: Optional[str]
    operation: Optional[str]
    request_id: Optional[str]

    def __init__(self, account_id: str = None, region: str = None) -> None:
        super().__init__()
        self.account_id = account_id or config.DEFAULT_ACCOUNT_ID
        self.region = region or config.DEFAULT_REGION
        self.operation = None
        self.request_id = None

    def __repr__(self):
        return f"<RequestContext account_id={self.account_id} region={self.region} operation={self.operation}>"


class ServiceRequestHandler(Protocol):
    def __call__(self, context: RequestContext, request: ServiceRequest) -> Optional[ServiceResponse]:
        raise NotImplementedError


def handler(operation: str = None, context: bool = True, expand: bool = True):
    """
    Decorator that indicates that the given function is a handler
    """

    def wrapper(fn):
        @functools.wraps(fn)
        def operation_marker(*args, **kwargs):
            return fn(*args, **kwargs)

        operation_marker.operation = operation
        operation_marker.expand_parameters = expand
        operation_marker.pass_context = context

        return operation_marker

    return wrapper

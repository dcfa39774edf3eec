import inspect
import logging
from typing import Any, Callable, Dict, NamedTuple, Optional, Union

from botocore import xform_name
from botocore.model import ServiceModel, Shape, StructureShape

from sfnmock.aws.api import (
    CommonServiceException,
    RequestContext,
    ServiceException,
)
from sfnmock.aws.api.core import ServiceRequest, ServiceRequestHandler, ServiceResponse
from sfnmock.aws.api.stepfunctions import MissingRequiredParameter, ValidationException
from sfnmock.aws.spec import load_service
from sfnmock.utils.strings import long_uid

LOG = logging.getLogger(__name__)

DispatchTable = Dict[str, ServiceRequestHandler]


def _invalid_type(name: str, value: Any, valid_types: str) -> ValidationException:
    return ValidationException(
        f"Invalid type for parameter {name or 'input'}, value: {value!r}, type: {type(value).__name__}, "
        f"valid types: {valid_types}"
    )


def create_skeleton(service: Union[str, ServiceModel], delegate: Any):
    if isinstance(service, str):
        service = load_service(service)

    return Skeleton(service, create_dispatch_table(delegate))


class HandlerAttributes(NamedTuple):
    """
    Holder object of the attributes added to a function by the @handler decorator.
    """

    function_name: str
    operation: str
    pass_context: bool
    expand_parameters: bool


def get_handler_attributes(cls: type) -> Dict[str, HandlerAttributes]:
    """
    Scans the class tree of the given class for functions decorated with @handler, and returns their attributes
    indexed by operation name. Inherited functions are overwritten by the ones of subclasses.
    """
    handlers: Dict[str, HandlerAttributes] = {}
    for klass in reversed(inspect.getmro(cls)):
        if klass == object:
            continue

        for name, fn in inspect.getmembers(klass, inspect.isfunction):
            try:
                # attributes come from operation_marker in @handler wrapper
                handlers[fn.operation] = HandlerAttributes(
                    fn.__name__, fn.operation, fn.pass_context, fn.expand_parameters
                )
            except AttributeError:
                pass
    return handlers


def create_dispatch_table(delegate: object) -> DispatchTable:
    """
    Creates a dispatch table for a given object. First, the entire class tree of the object is scanned to find any
    functions that are decorated with @handler. It then resolves those functions on the delegate.
    """
    dispatch_table: DispatchTable = {}
    for handler in get_handler_attributes(delegate.__class__).values():
        # resolve the bound function of the delegate
        bound_function = getattr(delegate, handler.function_name)
        # create a dispatcher
        dispatch_table[handler.operation] = ServiceRequestDispatcher(
            bound_function,
            operation=handler.operation,
            pass_context=handler.pass_context,
            expand_parameters=handler.expand_parameters,
        )

    return dispatch_table


class ServiceRequestDispatcher:
    fn: Callable
    operation: str
    expand_parameters: bool = True
    pass_context: bool = True

    def __init__(
        self,
        fn: Callable,
        operation: str,
        pass_context: bool = True,
        expand_parameters: bool = True,
    ):
        self.fn = fn
        self.operation = operation
        self.pass_context = pass_context
        self.expand_parameters = expand_parameters

    def __call__(
        self, context: RequestContext, request: ServiceRequest
    ) -> Optional[ServiceResponse]:
        args = []
        kwargs = {}

        if not self.expand_parameters:
            if self.pass_context:
                args.append(context)
            args.append(request)
        else:
            if request is None:
                kwargs = {}
            else:
                kwargs = {xform_name(k): v for k, v in request.items()}
            kwargs["context"] = context

        return self.fn(*args, **kwargs)


class Skeleton:
    """
    The request boundary of a service. It checks an already-parsed request record against the botocore
    operation model, and dispatches it to the handler of the operation.
    """

    service: ServiceModel
    dispatch_table: DispatchTable

    def __init__(self, service: ServiceModel, implementation: Union[Any, DispatchTable]):
        self.service = service

        if isinstance(implementation, dict):
            self.dispatch_table = implementation
        else:
            self.dispatch_table = create_dispatch_table(implementation)

    def invoke(
        self, context: RequestContext, operation: str, request: Optional[ServiceRequest] = None
    ) -> ServiceResponse:
        """
        Invokes the handler of the given operation.

        :param context: the request context
        :param operation: the name of the operation, f.e. "ListStateMachines"
        :param request: the request record, with the field names of the botocore service model
        :return: the response record of the operation
        :raises ServiceException: if the request is invalid or the handler raised a typed failure
        """
        context.operation = operation
        context.request_id = context.request_id or long_uid()
        request = request or {}

        try:
            # Find the operation's handler in the dispatch table
            if operation not in self.dispatch_table:
                LOG.warning(
                    "missing entry in dispatch table for %s.%s",
                    self.service.service_name,
                    operation,
                )
                raise NotImplementedError

            self.validate_request(operation, request)
            return self.dispatch_request(context, request)
        except ServiceException as e:
            return self.on_service_exception(context, e)
        except NotImplementedError as e:
            return self.on_not_implemented_error(context, e)

    def validate_request(self, operation: str, request: ServiceRequest) -> None:
        """
        Rejects fields that are unknown to the operation, and required fields that are missing. Nested structures,
        lists and maps are walked along the botocore input shape, so unknown fields are rejected at any depth.
        """
        if operation not in self.service.operation_names:
            raise NotImplementedError(
                f"Operation {operation} is not defined by {self.service.service_name}"
            )
        input_shape = self.service.operation_model(operation).input_shape
        if input_shape is None:
            if request:
                raise ValidationException(
                    f'Unknown parameter in input: "{next(iter(request))}", must be one of: '
                )
            return
        self._validate_structure(input_shape, request, "")

    def _validate_shape(self, shape: Shape, value: Any, name: str) -> None:
        if value is None:
            return
        if shape.type_name == "structure":
            self._validate_structure(shape, value, name)
        elif shape.type_name == "list":
            if not isinstance(value, (list, tuple)):
                raise _invalid_type(name, value, "list, tuple")
            for index, item in enumerate(value):
                self._validate_shape(shape.member, item, f"{name}[{index}]")
        elif shape.type_name == "map":
            if not isinstance(value, dict):
                raise _invalid_type(name, value, "dict")
            for key, item in value.items():
                self._validate_shape(shape.value, item, f"{name}.{key}")

    def _validate_structure(self, shape: StructureShape, value: Any, name: str) -> None:
        if not isinstance(value, dict):
            raise _invalid_type(name, value, "dict")
        location = name or "input"
        members = shape.members

        unknown_fields = [field for field in value if field not in members]
        if unknown_fields:
            raise ValidationException(
                f'Unknown parameter in {location}: "{unknown_fields[0]}", must be one of: '
                f"{', '.join(members)}"
            )

        for member in shape.required_members:
            if value.get(member) is None:
                raise MissingRequiredParameter(f'Missing required parameter in {location}: "{member}"')

        for member, member_value in value.items():
            self._validate_shape(members[member], member_value, f"{name}.{member}" if name else member)

    def dispatch_request(self, context: RequestContext, request: ServiceRequest) -> ServiceResponse:
        handler = self.dispatch_table[context.operation]
        # Call the appropriate handler
        result = handler(context, request) or {}
        LOG.debug("%s.%s returned %s", self.service.service_name, context.operation, result)
        return result

    def on_service_exception(self, context: RequestContext, exception: ServiceException):
        """
        Called by invoke if the handler of the operation raised a ServiceException. The exception is handed back to
        the caller.

        :param context: the request context
        :param exception: the exception that was raised
        """
        LOG.debug(
            "%s.%s raised %s: %s",
            self.service.service_name,
            context.operation,
            exception.code,
            exception.message,
        )
        raise exception

    def on_not_implemented_error(self, context: RequestContext, exception: NotImplementedError):
        """
        Called by invoke if either the dispatch table did not contain an entry for the operation, or the service
        provider raised a NotImplementedError.

        :param context: the request context
        :param exception: the NotImplementedError that was raised
        :raises CommonServiceException: an InternalFailure with status code 501
        """
        exception_message: Optional[str] = exception.args[0] if exception.args else None
        message = (
            exception_message
            or f"API action '{context.operation}' for service '{self.service.service_name}' not yet implemented"
        )
        LOG.info(message)
        raise CommonServiceException("InternalFailure", message, status_code=501) from exception

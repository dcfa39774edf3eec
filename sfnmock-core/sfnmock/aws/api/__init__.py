from .core import (
    CommonServiceException,
    RequestContext,
    ServiceException,
    ServiceRequest,
    ServiceResponse,
    handler,
)

__all__ = [
    "RequestContext",
    "ServiceException",
    "CommonServiceException",
    "ServiceRequest",
    "ServiceResponse",
    "handler",
]

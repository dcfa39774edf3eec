import logging
from functools import lru_cache
from typing import Optional

from botocore.loaders import Loader
from botocore.model import ServiceModel

LOG = logging.getLogger(__name__)

ServiceName = str

loader = Loader()


@lru_cache()
def load_service(service: ServiceName, version: Optional[str] = None) -> ServiceModel:
    """
    Loads a service model from the specs shipped with botocore.

    :param service: to load, f.e. "stepfunctions"
    :param version: of the service to load, f.e. "2016-11-23", by default the latest version will be used
    :return: Loaded service model of the service
    :raises: UnknownServiceError if the service cannot be found
    """
    service_description = loader.load_service_model(service, "service-2", version)
    return ServiceModel(service_description, service)

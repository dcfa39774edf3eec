"""
Base class and utilities for service stores.

Stores hold the in-memory state of a service, partitioned by account and region.
Attributes are declared as descriptors on the store class

    class SFNStore(BaseStore):
        state_machines = LocalAttribute(default=dict)  # type: Dict[str, StateMachineRevision]

Stores are then wrapped in AccountRegionBundle

    sfn_stores = AccountRegionBundle('stepfunctions', SFNStore)

Access patterns are as follows

    account_id = '001122334455'
    sfn_stores[account_id]  # -> RegionBundle
    sfn_stores[account_id]['ap-south-1']  # -> SFNStore
    sfn_stores[account_id]['ap-south-1'].state_machines  # -> {}

Every store of a bundle shares the bundle's re-entrant lock (``store.lock``), which serializes mutations.
"""

import re
from collections.abc import Callable
from threading import RLock
from typing import Any, Type, TypeVar, Union

from boto3 import Session

from sfnmock import config

LOCAL_ATTR_PREFIX = "attr_"

BaseStoreType = TypeVar("BaseStoreType", bound="BaseStore")


#
# Descriptor protocol classes
#


class LocalAttribute:
    """
    Descriptor protocol for marking store attributes as local to a region.
    """

    def __init__(self, default: Union[Callable, int, float, str, bool, None]):
        """
        :param default: Default value assigned to the local attribute. Must be a scalar
            or a callable.
        """
        self.default = default

    def __set_name__(self, owner, name):
        self.name = LOCAL_ATTR_PREFIX + name

    def __get__(self, obj: BaseStoreType, objtype=None) -> Any:
        if not hasattr(obj, self.name):
            if isinstance(self.default, Callable):
                value = self.default()
            else:
                value = self.default
            setattr(obj, self.name, value)

        return getattr(obj, self.name)

    def __set__(self, obj: BaseStoreType, value: Any):
        setattr(obj, self.name, value)


#
# Base models
#


class BaseStore:
    """
    Base class for defining stores.
    """

    lock: RLock

    def __repr__(self):
        try:
            repr_templ = "<{name} object for {service_name} at {account_id}/{region_name}>"
            return repr_templ.format(
                name=self.__class__.__name__,
                service_name=self._service_name,
                account_id=self._account_id,
                region_name=self._region_name,
            )
        except AttributeError:
            return super().__repr__()


#
# Encapsulations
#


class RegionBundle(dict):
    """
    Encapsulation for stores across all regions for a specific AWS account ID.
    """

    def __init__(
        self,
        service_name: str,
        store: Type[BaseStoreType],
        account_id: str,
        validate: bool = True,
        lock: RLock = None,
    ):
        self.store = store
        self.account_id = account_id
        self.service_name = service_name
        self.validate = validate
        self.lock = lock or RLock()

        self.valid_regions = Session().get_available_regions(service_name)

    def __getitem__(self, region_name) -> BaseStoreType:
        if region_name in self.keys():
            return super().__getitem__(region_name)

        if (
            not config.SFN_ALLOW_NONSTANDARD_REGIONS
            and self.validate
            and region_name not in self.valid_regions
        ):
            # Tip: Try using a valid region or valid service name
            raise ValueError(
                f"'{region_name}' is not a valid AWS region name for {self.service_name}"
            )

        with self.lock:
            if region_name not in self.keys():
                store_obj = self.store()

                store_obj._service_name = self.service_name
                store_obj._account_id = self.account_id
                store_obj._region_name = region_name
                store_obj.lock = self.lock

                self[region_name] = store_obj

        return super().__getitem__(region_name)

    def reset(self):
        """Clear all store data."""
        with self.lock:
            for store_inst in self.values():
                attrs = list(store_inst.__dict__.keys())
                for attr in attrs:
                    if attr.startswith(LOCAL_ATTR_PREFIX):
                        delattr(store_inst, attr)


class AccountRegionBundle(dict):
    """
    Encapsulation for all stores for all AWS account IDs.
    """

    def __init__(self, service_name: str, store: Type[BaseStoreType], validate: bool = True):
        """
        :param service_name: Name of the service. Must be a valid service defined in botocore.
        :param store: Class definition of the Store
        :param validate: Whether to raise if invalid region names or account IDs are used during subscription
        """
        self.service_name = service_name
        self.store = store
        self.validate = validate
        self.lock = RLock()

    def __getitem__(self, account_id: str) -> RegionBundle:
        if self.validate and not re.match(r"\d{12}", account_id):
            raise ValueError(f"'{account_id}' is not a valid AWS account ID")

        with self.lock:
            if account_id not in self.keys():
                self[account_id] = RegionBundle(
                    service_name=self.service_name,
                    store=self.store,
                    account_id=account_id,
                    validate=self.validate,
                    lock=self.lock,
                )
        return super().__getitem__(account_id)

    def reset(self):
        """Clear all store data."""
        with self.lock:
            for region_bundle in self.values():
                region_bundle.reset()

"""
The in-memory entity store of the mock backend.

Entities are held in one insertion-ordered dict per kind, keyed by ARN. Every mutation runs under the store lock,
which is shared by all stores of the bundle.
"""

import logging
from collections import OrderedDict
from enum import Enum
from typing import Any, Callable, Optional, Type

from sfnmock.aws.api import ServiceException
from sfnmock.aws.api.stepfunctions import (
    ActivityAlreadyExists,
    ActivityDoesNotExist,
    ConflictException,
    ExecutionAlreadyExists,
    ExecutionDoesNotExist,
    ResourceNotFound,
    StateMachineAlreadyExists,
    StateMachineDoesNotExist,
)
from sfnmock.services.stepfunctions.backend.activity import Activity
from sfnmock.services.stepfunctions.backend.alias import Alias
from sfnmock.services.stepfunctions.backend.execution import Execution
from sfnmock.services.stepfunctions.backend.map_run import MapRun
from sfnmock.services.stepfunctions.backend.state_machine import (
    StateMachineRevision,
    StateMachineVersion,
)
from sfnmock.services.stepfunctions.backend.transitions import assert_map_run_mutable
from sfnmock.services.stores import AccountRegionBundle, BaseStore, LocalAttribute
from sfnmock.utils.tagging import TaggingService

LOG = logging.getLogger(__name__)


class EntityKind(str, Enum):
    STATE_MACHINE = "state_machines"
    VERSION = "versions"
    ALIAS = "aliases"
    EXECUTION = "executions"
    ACTIVITY = "activities"
    MAP_RUN = "map_runs"


def _not_found(kind: EntityKind, arn: str) -> ServiceException:
    if kind in (EntityKind.STATE_MACHINE, EntityKind.VERSION):
        return StateMachineDoesNotExist(f"State Machine Does Not Exist: '{arn}'")
    if kind == EntityKind.EXECUTION:
        return ExecutionDoesNotExist(f"Execution Does Not Exist: '{arn}'")
    if kind == EntityKind.ACTIVITY:
        return ActivityDoesNotExist(f"Activity Does Not Exist: '{arn}'")
    if kind == EntityKind.MAP_RUN:
        return ResourceNotFound(f"MapRun '{arn}' does not exist", resourceName=arn)
    return ResourceNotFound(f"Resource not found: '{arn}'", resourceName=arn)


def _already_exists(kind: EntityKind, arn: str) -> ServiceException:
    if kind == EntityKind.STATE_MACHINE:
        return StateMachineAlreadyExists(f"State Machine Already Exists: '{arn}'")
    if kind == EntityKind.EXECUTION:
        return ExecutionAlreadyExists(f"Execution Already Exists: '{arn}'")
    if kind == EntityKind.ACTIVITY:
        return ActivityAlreadyExists(f"Activity Already Exists: '{arn}'")
    return ConflictException(f"Resource already exists: '{arn}'")


_ENTITY_TYPES: dict[EntityKind, Type] = {
    EntityKind.STATE_MACHINE: StateMachineRevision,
    EntityKind.VERSION: StateMachineVersion,
    EntityKind.ALIAS: Alias,
    EntityKind.EXECUTION: Execution,
    EntityKind.ACTIVITY: Activity,
    EntityKind.MAP_RUN: MapRun,
}


def _entity_arn(entity: Any) -> str:
    if isinstance(entity, Execution):
        return entity.exec_arn
    return entity.arn


class SFNStore(BaseStore):
    # Maps ARNs to the current revision of state machines.
    state_machines: dict[str, StateMachineRevision] = LocalAttribute(default=OrderedDict)
    # Maps ARNs to published state machine versions.
    versions: dict[str, StateMachineVersion] = LocalAttribute(default=OrderedDict)
    # Maps ARNs to state machine aliases.
    aliases: dict[str, Alias] = LocalAttribute(default=OrderedDict)
    # Maps Execution-ARNs to state machines executions.
    executions: dict[str, Execution] = LocalAttribute(default=OrderedDict)
    # Maps ActivityARN to Activity.
    activities: dict[str, Activity] = LocalAttribute(default=OrderedDict)
    # Maps MapRun-ARNs to map runs.
    map_runs: dict[str, MapRun] = LocalAttribute(default=OrderedDict)
    # Tags of state machines and activities.
    tags: TaggingService = LocalAttribute(default=lambda: TaggingService("key", "value"))

    def _entities(self, kind: EntityKind) -> dict:
        return getattr(self, EntityKind(kind).value)

    def exists(self, kind: EntityKind, arn: str) -> bool:
        return arn in self._entities(kind)

    def find(self, kind: EntityKind, arn: str) -> Optional[Any]:
        return self._entities(kind).get(arn)

    def create(self, kind: EntityKind, entity: Any) -> Any:
        if not isinstance(entity, _ENTITY_TYPES[kind]):
            raise TypeError(f"Expected a {_ENTITY_TYPES[kind].__name__}, got {type(entity).__name__}")
        arn = _entity_arn(entity)
        with self.lock:
            entities = self._entities(kind)
            if arn in entities:
                raise _already_exists(kind, arn)
            entities[arn] = entity
        LOG.debug("Created %s '%s'", kind.name.lower(), arn)
        return entity

    def get(self, kind: EntityKind, arn: str) -> Any:
        entity = self._entities(kind).get(arn)
        if entity is None:
            raise _not_found(kind, arn)
        return entity

    def update(self, kind: EntityKind, arn: str, mutator: Callable[[Any], None]) -> Any:
        """
        Applies the mutator to the entity with the given arn. Map runs are only mutable while RUNNING.
        """
        with self.lock:
            entity = self.get(kind, arn)
            if kind == EntityKind.MAP_RUN:
                assert_map_run_mutable(arn, entity.status)
            mutator(entity)
            return entity

    def delete(self, kind: EntityKind, arn: str) -> Any:
        """
        Removes the entity with the given arn. Deleting a state machine removes its versions, aliases and tags, but
        leaves its executions and map runs in place.
        """
        with self.lock:
            entity = self.get(kind, arn)
            if kind == EntityKind.STATE_MACHINE:
                for version_arn in list(entity.versions.values()):
                    self.versions.pop(version_arn, None)
                for alias_arn in [
                    alias.arn for alias in self.aliases.values() if alias.state_machine_arn == arn
                ]:
                    del self.aliases[alias_arn]
                self.tags.del_resource(arn)
            elif kind == EntityKind.VERSION:
                routing_aliases = [
                    alias.arn for alias in self.aliases.values() if alias.is_routing_to(arn)
                ]
                if routing_aliases:
                    raise ConflictException(
                        f"Version to be deleted must not be referenced by an alias. "
                        f"Current list of aliases referencing this version: {routing_aliases}"
                    )
                revision = self.state_machines.get(entity.source_arn)
                if revision is not None:
                    revision.delete_version(arn)
            elif kind == EntityKind.ACTIVITY:
                self.tags.del_resource(arn)
            del self._entities(kind)[arn]
        LOG.debug("Deleted %s '%s'", kind.name.lower(), arn)
        return entity

    def list(self, kind: EntityKind, filter_function: Callable[[Any], bool] = None) -> list:
        with self.lock:
            entities = list(self._entities(kind).values())
        if filter_function is None:
            return entities
        return [entity for entity in entities if filter_function(entity)]


sfn_stores = AccountRegionBundle("stepfunctions", SFNStore)

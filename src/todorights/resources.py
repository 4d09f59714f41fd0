"""Capability contract implemented by every resource type.

Each resource answers ``can_read / can_create / can_update / can_delete``
for a principal by building its own reference (or its container's, for
create) and asking the engine. None of them resolves grants itself.

The engine is injected at construction; resources are cheap value objects
an API handler builds from request parameters::

    task = Task(engine, id=42)
    if not task.can_update(principal):
        raise Forbidden()

    new_task = Task(engine, project_id=7)
    new_task.can_create(principal)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .engine import RightsEngine
from .exceptions import NotFound
from .models import EntityRef, Grantee
from .permissions.constants import Capability, EntityKind, PermissionLevel
from .principals import Principal, RegisteredUser


class Resource(ABC):
    """Base for every resource type."""

    def __init__(self, engine: RightsEngine) -> None:
        self._engine = engine

    @abstractmethod
    def can_read(self, principal: Principal) -> bool:
        raise NotImplementedError

    @abstractmethod
    def can_create(self, principal: Principal) -> bool:
        raise NotImplementedError

    @abstractmethod
    def can_update(self, principal: Principal) -> bool:
        raise NotImplementedError

    @abstractmethod
    def can_delete(self, principal: Principal) -> bool:
        raise NotImplementedError

    def can(self, principal: Principal, capability: Capability | str) -> bool:
        """Dispatch on a capability value."""
        capability = Capability(capability)
        if capability is Capability.READ:
            return self.can_read(principal)
        if capability is Capability.CREATE:
            return self.can_create(principal)
        if capability is Capability.UPDATE:
            return self.can_update(principal)
        return self.can_delete(principal)


class TreeResource(Resource):
    """Resource that lives in the namespace → project → task tree.

    Subclasses set ``kind`` and ``container_kind`` and store the id of
    their container; the rules are the engine's.
    """

    kind: EntityKind
    container_kind: Optional[EntityKind] = None

    def __init__(self, engine: RightsEngine, id: Optional[int] = None, container_id: Optional[int] = None) -> None:
        super().__init__(engine)
        self.id = id
        self.container_id = container_id

    @property
    def ref(self) -> EntityRef:
        if self.id is None:
            raise ValueError(f"{type(self).__name__} has no id yet")
        return EntityRef(self.kind, self.id)

    def container_ref(self) -> Optional[EntityRef]:
        """Container the entity lives in (or will be created in)."""
        if self.container_kind is None:
            return None
        if self.container_id is None and self.id is not None:
            try:
                parent, _ = self._engine.hierarchy.parent_of(self.ref)
            except NotFound:
                return None
            return parent
        if self.container_id is None:
            return None
        return EntityRef(self.container_kind, self.container_id)

    def can_read(self, principal: Principal) -> bool:
        return self.id is not None and self._engine.can_read(principal, self.ref)

    def can_create(self, principal: Principal) -> bool:
        container = self.container_ref()
        return container is not None and self._engine.can_create(principal, container)

    def can_update(self, principal: Principal) -> bool:
        return self.id is not None and self._engine.can_update(principal, self.ref)

    def can_delete(self, principal: Principal) -> bool:
        return self.id is not None and self._engine.can_delete(principal, self.ref)

    def max_level(self, principal: Principal) -> PermissionLevel:
        """Effective level, for clients deciding what to offer."""
        if self.id is None:
            return PermissionLevel.NONE
        return self._engine.effective_level(principal, self.ref)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, container_id={self.container_id!r})"


class Namespace(TreeResource):
    kind = EntityKind.NAMESPACE

    def __init__(self, engine: RightsEngine, id: Optional[int] = None) -> None:
        super().__init__(engine, id=id)

    def can_create(self, principal: Principal) -> bool:
        return self._engine.can_create_namespace(principal)


class Project(TreeResource):
    kind = EntityKind.PROJECT
    container_kind = EntityKind.NAMESPACE

    def __init__(self, engine: RightsEngine, id: Optional[int] = None, namespace_id: Optional[int] = None) -> None:
        super().__init__(engine, id=id, container_id=namespace_id)


class Task(TreeResource):
    kind = EntityKind.TASK
    container_kind = EntityKind.PROJECT

    def __init__(self, engine: RightsEngine, id: Optional[int] = None, project_id: Optional[int] = None) -> None:
        super().__init__(engine, id=id, container_id=project_id)


class TaskLeaf(TreeResource):
    """Entity attached to a task: read needs task read, the rest task write."""

    container_kind = EntityKind.TASK

    def __init__(self, engine: RightsEngine, id: Optional[int] = None, task_id: Optional[int] = None) -> None:
        super().__init__(engine, id=id, container_id=task_id)


class Comment(TaskLeaf):
    kind = EntityKind.COMMENT


class Attachment(TaskLeaf):
    kind = EntityKind.ATTACHMENT


class Reminder(TaskLeaf):
    kind = EntityKind.REMINDER


class Relation(TaskLeaf):
    """Relation from one task to another.

    Creating it needs write on the owning task and read on the other one;
    a user must not link to tasks they can't see.
    """

    kind = EntityKind.RELATION

    def __init__(
        self,
        engine: RightsEngine,
        id: Optional[int] = None,
        task_id: Optional[int] = None,
        other_task_id: Optional[int] = None,
    ) -> None:
        super().__init__(engine, id=id, task_id=task_id)
        self.other_task_id = other_task_id

    def can_create(self, principal: Principal) -> bool:
        if self.other_task_id is None or not super().can_create(principal):
            return False
        return self._engine.can_read(principal, EntityRef.task(self.other_task_id))


class Label(Resource):
    """Label: shared laterally, owned by its creator."""

    def __init__(self, engine: RightsEngine, id: Optional[int] = None) -> None:
        super().__init__(engine)
        self.id = id

    def can_read(self, principal: Principal) -> bool:
        return self.id is not None and self._engine.can_read_label(principal, self.id)

    def can_create(self, principal: Principal) -> bool:
        return self._engine.can_create_label(principal)

    def can_update(self, principal: Principal) -> bool:
        return self.id is not None and self._engine.can_update_label(principal, self.id)

    def can_delete(self, principal: Principal) -> bool:
        return self.id is not None and self._engine.can_delete_label(principal, self.id)


class LabelTask(Resource):
    """Association of a label with a task."""

    def __init__(self, engine: RightsEngine, label_id: int, task_id: int) -> None:
        super().__init__(engine)
        self.label_id = label_id
        self.task_id = task_id

    @property
    def task_ref(self) -> EntityRef:
        return EntityRef.task(self.task_id)

    def can_read(self, principal: Principal) -> bool:
        return self._engine.can_read(principal, self.task_ref)

    def can_create(self, principal: Principal) -> bool:
        return self._can_change(principal)

    def can_update(self, principal: Principal) -> bool:
        return self._engine.can_update(principal, self.task_ref)

    def can_delete(self, principal: Principal) -> bool:
        return self._can_change(principal)

    def _can_change(self, principal: Principal) -> bool:
        if not self._engine.can_read_label(principal, self.label_id):
            return False
        return self._engine.can_update(principal, self.task_ref)


class Share(Resource):
    """A user or team grant on a namespace or project.

    Managing shares needs ADMIN on the entity and a registered user;
    anyone who can read the entity can see its shares.
    """

    def __init__(self, engine: RightsEngine, entity: EntityRef, grantee: Grantee) -> None:
        super().__init__(engine)
        self.entity = entity
        self.grantee = grantee

    def can_read(self, principal: Principal) -> bool:
        return self._engine.can_read(principal, self.entity)

    def can_create(self, principal: Principal) -> bool:
        return self._can_manage(principal)

    def can_update(self, principal: Principal) -> bool:
        return self._can_manage(principal)

    def can_delete(self, principal: Principal) -> bool:
        return self._can_manage(principal)

    def _can_manage(self, principal: Principal) -> bool:
        if not isinstance(principal, RegisteredUser):
            return False
        return self._engine.effective_level(principal, self.entity) >= PermissionLevel.ADMIN


class ProjectLinkShare(Resource):
    """A link share on a project.

    Creating or removing one needs write on the project, or admin when the
    share itself carries admin. Link shares can't mint further link shares.
    """

    def __init__(self, engine: RightsEngine, project_id: int, level: PermissionLevel = PermissionLevel.READ) -> None:
        super().__init__(engine)
        self.project_id = project_id
        self.level = PermissionLevel.parse(level)

    @property
    def project_ref(self) -> EntityRef:
        return EntityRef.project(self.project_id)

    def can_read(self, principal: Principal) -> bool:
        return self._engine.can_read(principal, self.project_ref)

    def can_create(self, principal: Principal) -> bool:
        return self._can_manage(principal)

    def can_update(self, principal: Principal) -> bool:
        return self._can_manage(principal)

    def can_delete(self, principal: Principal) -> bool:
        return self._can_manage(principal)

    def _can_manage(self, principal: Principal) -> bool:
        if not isinstance(principal, RegisteredUser):
            return False
        if self.level is PermissionLevel.ADMIN:
            return self._engine.effective_level(principal, self.project_ref) >= PermissionLevel.ADMIN
        return self._engine.can_update(principal, self.project_ref)


__all__ = [
    "Attachment",
    "Comment",
    "Label",
    "LabelTask",
    "Namespace",
    "Project",
    "ProjectLinkShare",
    "Reminder",
    "Relation",
    "Resource",
    "Share",
    "Task",
    "TaskLeaf",
    "TreeResource",
]

from typing import Any, Callable, Dict, List, Tuple

from app.auth.schemas import Principal
from app.core.exceptions import NotFoundError
from app.core.models import Classroom
from app.core.operations import load_authorized, require_valid, service_operation
from app.core.responses import ServiceResult, created, deleted, success_single
from app.core.validation import SchemaValidator
from app.db.store import EntityStore, build_update_object, parse_id

from .schemas import ResourceItem
from .service import new_resource_item

RESOURCE_FIELDS = ("type", "name", "quantity")

ResourceEdit = Callable[[List[Dict[str, Any]]], Dict[str, Any]]


def _index_of(resources: List[Dict[str, Any]], resource_id: Any) -> int:
    wanted = parse_id(resource_id)
    for index, item in enumerate(resources):
        if wanted is not None and parse_id(item.get("id")) == wanted:
            return index
    raise NotFoundError("Resource not found")


class ClassroomResourceLedger:
    """In-place edits of the resource list stored on a classroom."""

    def __init__(self, store: EntityStore, validator: SchemaValidator) -> None:
        self.store = store
        self.validator = validator

    async def _apply(
        self,
        principal: Principal,
        classroom_id: Any,
        edit: ResourceEdit,
    ) -> Tuple[Classroom, Dict[str, Any]]:
        """Fetch and authorize the classroom, run edit on a copy of its resources, write the list back."""
        classroom = await load_authorized(self.store, Classroom, classroom_id, principal, "Classroom not found")
        resources = [dict(item) for item in classroom.resources or []]
        touched = edit(resources)

        updated = await self.store.update_active_by_id(Classroom, classroom.id, {"resources": resources})
        if updated is None:
            raise NotFoundError("Classroom not found")
        await self.store.commit()
        return updated, touched

    @service_operation("updating resources")
    async def update_resource(
        self,
        principal: Principal,
        classroom_id: Any,
        resource_id: Any,
        fields: Dict[str, Any],
    ) -> ServiceResult:
        require_valid(self.validator, "classroom.update_resource", {**fields, "resource_id": resource_id})

        def edit(resources: List[Dict[str, Any]]) -> Dict[str, Any]:
            item = resources[_index_of(resources, resource_id)]
            updates = build_update_object(fields, RESOURCE_FIELDS)
            item.update({k: v.strip() if isinstance(v, str) else v for k, v in updates.items()})
            return item

        _, resource = await self._apply(principal, classroom_id, edit)
        return success_single(ResourceItem(**resource), "resource", "Classroom resource updated successfully")

    @service_operation("adding resource")
    async def add_resource(self, principal: Principal, classroom_id: Any, fields: Dict[str, Any]) -> ServiceResult:
        require_valid(self.validator, "classroom.add_resource", fields)

        def edit(resources: List[Dict[str, Any]]) -> Dict[str, Any]:
            item = new_resource_item(fields)
            resources.append(item)
            return item

        _, resource = await self._apply(principal, classroom_id, edit)
        return created(ResourceItem(**resource), "resource", "Classroom resource added successfully")

    @service_operation("removing resource")
    async def remove_resource(self, principal: Principal, classroom_id: Any, resource_id: Any) -> ServiceResult:
        def edit(resources: List[Dict[str, Any]]) -> Dict[str, Any]:
            return resources.pop(_index_of(resources, resource_id))

        _, resource = await self._apply(principal, classroom_id, edit)
        return deleted(resource["id"], "Classroom resource removed successfully")

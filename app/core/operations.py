"""
Shared plumbing for service operations.

service_operation turns every outcome of an orchestration method into a
ServiceResult; load_authorized is the fetch -> authorize step every
entity-scoped read or mutation starts with.
"""
import functools
import inspect
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Type, TypeVar
from uuid import UUID

from fastapi import status
from sqlalchemy.exc import IntegrityError

from app.auth.schemas import Principal
from app.core.authorization import authorize
from app.core.enums import Role
from app.core.exceptions import NotFoundError, ServiceError, ValidationError
from app.core.logging import get_logger
from app.core.responses import ServiceResult, error_result
from app.core.validation import SchemaValidator
from app.db.store import EntityStore

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[ServiceResult]])

_REDACTED = "***"
_NOT_LOGGED = ("self", "principal")


def _loggable_payload(bound: inspect.BoundArguments) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for name, value in bound.arguments.items():
        if name in _NOT_LOGGED:
            continue
        if isinstance(value, dict):
            value = {k: (_REDACTED if "password" in k else v) for k, v in value.items()}
        elif "password" in name:
            value = _REDACTED
        payload[name] = value
    return payload


def service_operation(action: str) -> Callable[[F], F]:
    """
    Catch everything at the service boundary.

    ServiceError keeps its own status and message. A unique-constraint race maps to 409.
    Anything else is logged with the call's arguments and answered with a generic 500.
    The session is rolled back on every failure so no partial write survives.
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(self, *args: Any, **kwargs: Any) -> ServiceResult:
            try:
                return await func(self, *args, **kwargs)
            except ServiceError as exc:
                await self.store.rollback()
                logger.info("Service operation rejected", action=action, status_code=exc.status_code, reason=exc.message)
                return error_result(exc.message, exc.status_code)
            except IntegrityError:
                await self.store.rollback()
                logger.warning("Integrity conflict", action=action)
                return error_result("Resource already exists", status.HTTP_409_CONFLICT)
            except Exception:
                await self.store.rollback()
                bound = signature.bind_partial(self, *args, **kwargs)
                logger.exception(f"Error {action}", payload=_loggable_payload(bound))
                return error_result(f"An error occurred while {action}", status.HTTP_500_INTERNAL_SERVER_ERROR)

        return wrapper  # type: ignore[return-value]

    return decorator


def require_valid(validator: SchemaValidator, rule_set_name: str, payload: Dict[str, Any]) -> None:
    """Raise ValidationError carrying the first offending field's message."""
    errors = validator.validate(rule_set_name, payload)
    if errors:
        raise ValidationError(errors[0].message)


async def load_authorized(
    store: EntityStore,
    model: Type[Any],
    entity_id: Any,
    principal: Principal,
    not_found_message: str,
    allowed_roles: Iterable[Role] = (Role.SUPERADMIN, Role.ADMIN),
    tenant_of: Optional[Callable[[Any], Optional[UUID]]] = None,
) -> Any:
    """
    Fetch an active entity and authorize the principal against the entity's own school.
    tenant_of extracts the owning school id; defaults to entity.school_id.
    """
    entity = await store.find_active_by_id(model, entity_id)
    if entity is None:
        raise NotFoundError(not_found_message)
    tenant_id = tenant_of(entity) if tenant_of else getattr(entity, "school_id", None)
    authorize(principal, allowed_roles, tenant_id)
    return entity

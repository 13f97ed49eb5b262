"""Outbound result envelope shared by every service operation and route."""
from typing import Any, List, Optional

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class ServiceResult(BaseModel):
    ok: bool
    code: int
    data: Optional[Any] = None
    errors: List[str] = Field(default_factory=list)
    message: str = ""

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.code, content=self.model_dump(mode="json"))


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value


def success(data: Any, message: str, code: int = status.HTTP_200_OK) -> ServiceResult:
    return ServiceResult(ok=True, code=code, data=_dump(data), errors=[], message=message)


def success_single(entity: Any, entity_name: str, message: str, code: int = status.HTTP_200_OK) -> ServiceResult:
    return success({entity_name: entity}, message, code)


def success_list(entities: List[Any], entity_name: str, message: str) -> ServiceResult:
    """Plural key is the entity name with an 's' suffix, e.g. student -> students."""
    return success({f"{entity_name}s": entities}, message)


def created(entity: Any, entity_name: str, message: str) -> ServiceResult:
    return success_single(entity, entity_name, message, status.HTTP_201_CREATED)


def deleted(entity_id: Any, message: str) -> ServiceResult:
    return success({"id": str(entity_id)}, message)


def error_result(message: str, code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> ServiceResult:
    return ServiceResult(ok=False, code=code, data=None, errors=[message], message=message)

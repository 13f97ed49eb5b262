"""
Declarative payload validation.

Rule sets are plain data: a list of FieldRule per operation name. A FieldRule may
name a shared field model (SCHEMA_MODELS) for its type/length/regex defaults and
override any of them. SchemaValidator interprets the tables; no per-field code.
"""
import re
from datetime import date
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel

from app.db.store import parse_id


@dataclass(frozen=True)
class Length:
    min: Optional[int] = None
    max: Optional[int] = None


@dataclass(frozen=True)
class FieldRule:
    label: str
    model: Optional[str] = None
    # Payload key; defaults to label
    path: Optional[str] = None
    required: bool = False
    type: Optional[str] = None
    length: Optional[Length] = None
    one_of: Optional[Tuple[str, ...]] = None
    regex: Optional[str] = None
    custom: Optional[str] = None
    custom_error: Optional[str] = None
    # Rules applied to each dict element of an array field
    items: Tuple["FieldRule", ...] = field(default_factory=tuple)


class FieldError(BaseModel):
    field: str
    message: str


EMAIL_REGEX = r"^[^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*@([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}$"
WEBSITE_REGEX = r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)*/?$"
DATE_REGEX = r"^\d{4}-\d{2}-\d{2}$"


SCHEMA_MODELS: Dict[str, FieldRule] = {
    "id": FieldRule("id", type="string", custom="is_valid_id", custom_error="id must be a valid Id"),
    "name": FieldRule("name", type="string", length=Length(min=1, max=255)),
    "email": FieldRule("email", type="string", length=Length(min=3, max=100), regex=EMAIL_REGEX),
    "phone": FieldRule("phone", type="string", length=Length(min=10, max=13)),
    "password": FieldRule("password", type="string", length=Length(min=8, max=100)),
    "role": FieldRule("role", type="string", one_of=("admin", "superadmin")),
    "address": FieldRule("address", type="string", length=Length(min=1, max=500)),
    "website": FieldRule("website", type="string", length=Length(min=3, max=100), regex=WEBSITE_REGEX),
    "logo": FieldRule("logo", type="string"),
    "capacity": FieldRule("capacity", type="integer", length=Length(min=1)),
    "quantity": FieldRule("quantity", type="integer", length=Length(min=0)),
    "date_of_birth": FieldRule("date_of_birth", type="string", regex=DATE_REGEX, custom="is_valid_date"),
    "gender": FieldRule("gender", type="string", one_of=("male", "female", "other")),
    "resources": FieldRule(
        "resources",
        type="array",
        items=(
            FieldRule("type", type="string", required=True),
            FieldRule("name", type="string", required=True),
            FieldRule("quantity", model="quantity", required=True),
        ),
    ),
}


def _is_valid_date(value: Any) -> bool:
    try:
        date.fromisoformat(str(value))
    except ValueError:
        return False
    return True


CUSTOM_VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    "is_valid_id": lambda value: parse_id(value) is not None,
    "is_valid_date": _is_valid_date,
}


_TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "array": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
}


class SchemaValidator:
    def __init__(
        self,
        rule_sets: Mapping[str, Sequence[FieldRule]],
        models: Mapping[str, FieldRule] = SCHEMA_MODELS,
        custom_validators: Mapping[str, Callable[[Any], bool]] = CUSTOM_VALIDATORS,
    ) -> None:
        self.rule_sets = dict(rule_sets)
        self.models = models
        self.custom_validators = custom_validators

    def validate(self, rule_set_name: str, payload: Mapping[str, Any]) -> Optional[List[FieldError]]:
        """All errors for payload under the named rule set, or None when it is valid."""
        if rule_set_name not in self.rule_sets:
            raise KeyError(f"Unknown validation rule set: {rule_set_name}")
        errors: List[FieldError] = []
        for rule in self.rule_sets[rule_set_name]:
            self._check(self._resolve(rule), payload, rule.label, errors)
        return errors or None

    def _resolve(self, rule: FieldRule) -> FieldRule:
        """Fill unset attributes of rule from its field model."""
        if rule.model is None:
            return rule
        base = self.models.get(rule.model)
        if base is None:
            raise KeyError(f"Unknown field model: {rule.model}")
        base = self._resolve(base)
        overrides = {}
        for f in fields(FieldRule):
            if f.name in ("label", "model", "path", "required"):
                continue
            value = getattr(rule, f.name)
            if value is None or value == ():
                overrides[f.name] = getattr(base, f.name)
        return replace(rule, model=None, **overrides)

    def _check(self, rule: FieldRule, payload: Mapping[str, Any], label: str, errors: List[FieldError]) -> None:
        value = payload.get(rule.path or rule.label)
        if value is None or (isinstance(value, str) and value.strip() == ""):
            if rule.required:
                errors.append(FieldError(field=label, message=f"{label} is required"))
            return

        kind = (rule.type or "").lower()
        if kind and kind in _TYPE_CHECKS and not _TYPE_CHECKS[kind](value):
            errors.append(FieldError(field=label, message=f"{label} must be of type {kind}"))
            return

        if rule.length is not None:
            message = self._length_error(label, value, rule.length)
            if message:
                errors.append(FieldError(field=label, message=message))
                return

        if rule.one_of is not None and value not in rule.one_of:
            errors.append(FieldError(field=label, message=f"{label} must be one of: {', '.join(rule.one_of)}"))
            return

        if rule.regex is not None and not re.match(rule.regex, str(value)):
            errors.append(FieldError(field=label, message=f"{label} is not valid"))
            return

        if rule.custom is not None:
            predicate = self.custom_validators.get(rule.custom)
            if predicate is None:
                raise KeyError(f"Unknown custom validator: {rule.custom}")
            if not predicate(value):
                errors.append(FieldError(field=label, message=rule.custom_error or f"{label} is not valid"))
                return

        if rule.items and isinstance(value, list):
            for index, item in enumerate(value):
                item_label = f"{label}[{index}]"
                if not isinstance(item, dict):
                    errors.append(FieldError(field=item_label, message=f"{item_label} must be of type object"))
                    continue
                for item_rule in rule.items:
                    resolved = self._resolve(item_rule)
                    self._check(resolved, item, f"{item_label}.{item_rule.label}", errors)

    @staticmethod
    def _length_error(label: str, value: Any, length: Length) -> Optional[str]:
        if isinstance(value, (int, float)):
            measured, unit = value, ""
        else:
            measured, unit = len(value), " characters" if isinstance(value, str) else " items"
        if length.min is not None and measured < length.min:
            return f"{label} must be at least {length.min}{unit}"
        if length.max is not None and measured > length.max:
            return f"{label} must be at most {length.max}{unit}"
        return None

# backend/utils/crud.py
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from sqlalchemy.orm import Session

from database import Base
from utils.errors import NotFound, ValidationError
from utils.gateway import TableGateway


@dataclass(frozen=True)
class EntitySpec:
    """Everything the generic operations need to know about one table."""
    name: str
    model: Type[Base]
    out: Type[BaseModel]
    create: Type[BaseModel]
    required: Sequence[str]

    def gateway(self, db: Session) -> TableGateway:
        return TableGateway(db, self.model)


# ---- HELPERS ----
def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def require_fields(values: Dict[str, Any], required: Iterable[str]) -> None:
    missing = [f for f in required if _is_blank(values.get(f))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing=missing)


def validate_input(schema: Type[BaseModel], values: Dict[str, Any], message: Optional[str] = None) -> Dict[str, Any]:
    """Coerce raw form/query values through a schema, 400 on failure."""
    try:
        return schema.model_validate(values).model_dump()
    except SchemaError as e:
        if message is None:
            parts = []
            for err in e.errors():
                loc = ".".join(str(p) for p in err["loc"])
                parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
            message = "; ".join(parts)
        raise ValidationError(message) from e


def parse_id(raw: Any, label: str) -> int:
    """Numeric id or a 400 raised before any store call."""
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} ID")


def serialize(schema: Type[BaseModel], row: Any) -> Dict[str, Any]:
    return schema.model_validate(row).model_dump(mode="json", by_alias=True)


def ok(data: Any = None, message: Optional[str] = None, **extra) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


# ---- OPERATIONS ----
def prepare_create(spec: EntitySpec, values: Dict[str, Any]) -> Dict[str, Any]:
    """Presence check on every required field, then schema coercion."""
    require_fields(values, spec.required)
    return validate_input(spec.create, values)


def validated_create(db: Session, spec: EntitySpec, values: Dict[str, Any]) -> Base:
    return spec.gateway(db).insert(prepare_create(spec, values))


def filtered_fetch(db: Session, spec: EntitySpec, title: Optional[str] = None, **filters) -> List[Base]:
    ilike = {"title": title} if title else None
    return spec.gateway(db).select(ilike=ilike, **filters)


def fetch_one(db: Session, spec: EntitySpec, raw_id: Any) -> Base:
    try:
        row_id = parse_id(raw_id, spec.name.lower())
    except ValidationError:
        # A non-numeric id can never match a row
        raise NotFound(f"{spec.name} not found")
    row = spec.gateway(db).select_one(id=row_id)
    if row is None:
        raise NotFound(f"{spec.name} not found")
    return row


def partial_update(db: Session, spec: EntitySpec, row_id: int, values: Dict[str, Any]) -> List[Base]:
    return spec.gateway(db).update(values, id=row_id)

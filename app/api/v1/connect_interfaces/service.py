import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth.schemas import CurrentUser
from app.core.enums import InterfaceStatus
from app.core.exceptions import NotFoundError, ValidationError
from app.core.models import ConnectInterface
from app.core.pagination import Page, paginate
from app.core.schemas import PersonSummary

from .schemas import ConnectInterfaceCreate, ConnectInterfaceResponse, ConnectInterfaceUpdate

logger = logging.getLogger(__name__)


def _to_response(ci: ConnectInterface) -> ConnectInterfaceResponse:
    return ConnectInterfaceResponse(
        id=ci.id,
        name=ci.name,
        description=ci.description,
        endpoint=ci.endpoint,
        method=ci.method,
        parameters=ci.parameters,
        response_schema=ci.response_schema,
        status=ci.status,
        created_by=ci.created_by,
        created_at=ci.created_at,
        updated_at=ci.updated_at,
        creator=PersonSummary.from_user(ci.creator),
    )


def _select():
    return select(ConnectInterface).options(selectinload(ConnectInterface.creator))


def _newest_first(stmt):
    return stmt.order_by(ConnectInterface.created_at.desc(), ConnectInterface.id.desc())


async def _load(db: AsyncSession, interface_id: int) -> Optional[ConnectInterface]:
    result = await db.execute(
        _select().where(ConnectInterface.id == interface_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_interfaces(db: AsyncSession) -> List[ConnectInterfaceResponse]:
    """Active interfaces with their creator, newest first."""
    result = await db.execute(
        _newest_first(_select().where(ConnectInterface.status == InterfaceStatus.ACTIVE.value))
    )
    return [_to_response(ci) for ci in result.scalars().all()]


async def search_interfaces(db: AsyncSession, keyword: Optional[str], page: int = 1, limit: int = 10) -> Page:
    term = (keyword or "").strip()
    if not term:
        raise ValidationError.for_field("keyword", "Search keyword cannot be empty")
    pattern = f"%{term}%"
    stmt = _newest_first(
        _select().where(
            ConnectInterface.status == InterfaceStatus.ACTIVE.value,
            or_(
                ConnectInterface.name.ilike(pattern),
                ConnectInterface.description.ilike(pattern),
                ConnectInterface.endpoint.ilike(pattern),
            ),
        )
    )
    result = await paginate(db, stmt, page=page, limit=limit)
    result.items = [_to_response(ci) for ci in result.items]
    return result


async def get_interface(db: AsyncSession, interface_id: int) -> ConnectInterfaceResponse:
    ci = await _load(db, interface_id)
    if not ci:
        raise NotFoundError("Interface", interface_id)
    return _to_response(ci)


async def create_interface(
    db: AsyncSession,
    payload: ConnectInterfaceCreate,
    current_user: CurrentUser,
) -> ConnectInterfaceResponse:
    ci = ConnectInterface(
        name=payload.name,
        description=payload.description,
        endpoint=payload.endpoint,
        method=payload.method.value,
        parameters=payload.parameters,
        response_schema=payload.response_schema,
        status=payload.status.value,
        created_by=current_user.staff_id,
    )
    db.add(ci)
    await db.commit()
    logger.info("Connect interface %s created by %s", ci.id, current_user.staff_id)
    return _to_response(await _load(db, ci.id))


async def update_interface(
    db: AsyncSession,
    interface_id: int,
    payload: ConnectInterfaceUpdate,
) -> ConnectInterfaceResponse:
    ci = await _load(db, interface_id)
    if not ci:
        raise NotFoundError("Interface", interface_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "endpoint", "method", "status"):
            continue
        if field in ("method", "status"):
            value = value.value
        setattr(ci, field, value)
    await db.commit()
    logger.info("Connect interface %s updated", interface_id)
    return _to_response(await _load(db, interface_id))


async def delete_interface(db: AsyncSession, interface_id: int) -> None:
    """Soft delete: the row stays, marked inactive, so it drops out of listings and search."""
    ci = await _load(db, interface_id)
    if not ci:
        raise NotFoundError("Interface", interface_id)
    ci.status = InterfaceStatus.INACTIVE.value
    await db.commit()
    logger.info("Connect interface %s deactivated", interface_id)

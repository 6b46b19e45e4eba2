"""Role catalogue endpoints: public reads, SUPER_ADMIN-only writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from rawa.api.v1.auth import require_roles
from rawa.core.database import commit_or_conflict, get_db
from rawa.core.exceptions import Conflict, to_http_exception
from rawa.models import Role
from rawa.schemas.auth import CurrentUser, MessageResponse
from rawa.schemas.role import RoleCreateRequest, RoleOut, RoleResponse, RolesListResponse, RoleUpdateRequest
from rawa.services.access_control import SUPER_ADMIN_ONLY

router = APIRouter()

require_super_admin = require_roles(*SUPER_ADMIN_ONLY)

_NAME_TAKEN = "Role already exists"


def _get_role_or_404(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    return role


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    query = db.query(Role.id).filter(Role.name == name)
    if exclude_id is not None:
        query = query.filter(Role.id != exclude_id)
    return query.first() is not None


def _commit_or_409(db: Session) -> None:
    try:
        commit_or_conflict(db, _NAME_TAKEN)
    except Conflict as e:
        raise to_http_exception(e) from e


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    body: RoleCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_super_admin)],
) -> RoleResponse:
    if _name_taken(db, body.name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
    role = Role(name=body.name)
    db.add(role)
    _commit_or_409(db)
    db.refresh(role)
    return RoleResponse(role=RoleOut.model_validate(role))


@router.get("", response_model=RolesListResponse)
def list_roles(db: Annotated[Session, Depends(get_db)]) -> RolesListResponse:
    roles = db.query(Role).order_by(Role.name).all()
    return RolesListResponse(roles=[RoleOut.model_validate(r) for r in roles])


@router.get("/{role_id}", response_model=RoleResponse)
def get_role(role_id: int, db: Annotated[Session, Depends(get_db)]) -> RoleResponse:
    return RoleResponse(role=RoleOut.model_validate(_get_role_or_404(db, role_id)))


@router.put("/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: int,
    body: RoleUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_super_admin)],
) -> RoleResponse:
    role = _get_role_or_404(db, role_id)
    if body.name is not None and body.name != role.name:
        if _name_taken(db, body.name, exclude_id=role_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
        role.name = body.name
    _commit_or_409(db)
    db.refresh(role)
    return RoleResponse(role=RoleOut.model_validate(role))


@router.delete("/{role_id}", response_model=MessageResponse)
def delete_role(
    role_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_super_admin)],
) -> MessageResponse:
    role = _get_role_or_404(db, role_id)
    db.delete(role)
    db.commit()
    return MessageResponse(message="Role deleted successfully")

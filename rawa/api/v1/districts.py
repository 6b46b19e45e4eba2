"""District endpoints. Names are unique within their province."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from rawa.api.v1.auth import require_roles
from rawa.api.v1.provinces import get_province_or_404
from rawa.core.database import commit_or_conflict, get_db
from rawa.core.exceptions import Conflict, to_http_exception
from rawa.models import District
from rawa.schemas.auth import CurrentUser, MessageResponse
from rawa.schemas.location import (
    DistrictCreateRequest,
    DistrictOut,
    DistrictResponse,
    DistrictsListResponse,
    DistrictUpdateRequest,
)
from rawa.services.access_control import STAFF_ROLES

router = APIRouter()

require_staff = require_roles(*STAFF_ROLES)

_NAME_TAKEN = "District already exists in this province"


def _get_district_or_404(db: Session, district_id: int) -> District:
    district = db.get(District, district_id)
    if district is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="District not found")
    return district


def _name_taken(
    db: Session, province_id: int, eng_name: str, ar_name: str, exclude_id: int | None = None
) -> bool:
    query = db.query(District.id).filter(
        District.province_id == province_id,
        or_(District.eng_name == eng_name, District.ar_name == ar_name),
    )
    if exclude_id is not None:
        query = query.filter(District.id != exclude_id)
    return query.first() is not None


def _commit_or_409(db: Session) -> None:
    try:
        commit_or_conflict(db, _NAME_TAKEN)
    except Conflict as e:
        raise to_http_exception(e) from e


@router.post("", response_model=DistrictResponse, status_code=status.HTTP_201_CREATED)
def create_district(
    body: DistrictCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> DistrictResponse:
    get_province_or_404(db, body.province_id)
    eng_name, ar_name = body.eng_name.strip(), body.ar_name.strip()
    if _name_taken(db, body.province_id, eng_name, ar_name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
    district = District(eng_name=eng_name, ar_name=ar_name, province_id=body.province_id)
    db.add(district)
    _commit_or_409(db)
    db.refresh(district)
    return DistrictResponse(district=DistrictOut.model_validate(district))


@router.get("", response_model=DistrictsListResponse)
def list_districts(
    db: Annotated[Session, Depends(get_db)],
    province_id: int | None = None,
) -> DistrictsListResponse:
    query = db.query(District)
    if province_id is not None:
        query = query.filter(District.province_id == province_id)
    districts = query.order_by(District.id).all()
    return DistrictsListResponse(districts=[DistrictOut.model_validate(d) for d in districts])


@router.get("/{district_id}", response_model=DistrictResponse)
def get_district(district_id: int, db: Annotated[Session, Depends(get_db)]) -> DistrictResponse:
    return DistrictResponse(district=DistrictOut.model_validate(_get_district_or_404(db, district_id)))


@router.put("/{district_id}", response_model=DistrictResponse)
def update_district(
    district_id: int,
    body: DistrictUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> DistrictResponse:
    district = _get_district_or_404(db, district_id)
    province_id = body.province_id if body.province_id is not None else district.province_id
    if province_id != district.province_id:
        get_province_or_404(db, province_id)
    eng_name = body.eng_name.strip() if body.eng_name is not None else district.eng_name
    ar_name = body.ar_name.strip() if body.ar_name is not None else district.ar_name
    if _name_taken(db, province_id, eng_name, ar_name, exclude_id=district_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
    district.province_id = province_id
    district.eng_name = eng_name
    district.ar_name = ar_name
    _commit_or_409(db)
    db.refresh(district)
    return DistrictResponse(district=DistrictOut.model_validate(district))


@router.delete("/{district_id}", response_model=MessageResponse)
def delete_district(
    district_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> MessageResponse:
    district = _get_district_or_404(db, district_id)
    db.delete(district)
    db.commit()
    return MessageResponse(message="District deleted successfully")

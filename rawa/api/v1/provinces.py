"""Province endpoints. Names are unique within their country; a province with districts stays."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from rawa.api.v1.auth import require_roles
from rawa.api.v1.countries import get_country_or_404
from rawa.core.database import commit_or_conflict, get_db
from rawa.core.exceptions import Conflict, to_http_exception
from rawa.models import District, Province
from rawa.schemas.auth import CurrentUser, MessageResponse
from rawa.schemas.location import (
    ProvinceCreateRequest,
    ProvinceOut,
    ProvinceResponse,
    ProvincesListResponse,
    ProvinceUpdateRequest,
)
from rawa.services.access_control import STAFF_ROLES

router = APIRouter()

require_staff = require_roles(*STAFF_ROLES)

_NAME_TAKEN = "Province already exists in this country"
_HAS_DISTRICTS = "Province still has districts"


def get_province_or_404(db: Session, province_id: int) -> Province:
    province = db.get(Province, province_id)
    if province is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Province not found")
    return province


def _name_taken(
    db: Session, country_id: int, eng_name: str, ar_name: str, exclude_id: int | None = None
) -> bool:
    query = db.query(Province.id).filter(
        Province.country_id == country_id,
        or_(Province.eng_name == eng_name, Province.ar_name == ar_name),
    )
    if exclude_id is not None:
        query = query.filter(Province.id != exclude_id)
    return query.first() is not None


def _has_districts(db: Session, province_id: int) -> bool:
    return db.query(District.id).filter(District.province_id == province_id).first() is not None


def _commit_or_409(db: Session, message: str = _NAME_TAKEN) -> None:
    try:
        commit_or_conflict(db, message)
    except Conflict as e:
        raise to_http_exception(e) from e


@router.post("", response_model=ProvinceResponse, status_code=status.HTTP_201_CREATED)
def create_province(
    body: ProvinceCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> ProvinceResponse:
    get_country_or_404(db, body.country_id)
    eng_name, ar_name = body.eng_name.strip(), body.ar_name.strip()
    if _name_taken(db, body.country_id, eng_name, ar_name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
    province = Province(eng_name=eng_name, ar_name=ar_name, country_id=body.country_id)
    db.add(province)
    _commit_or_409(db)
    db.refresh(province)
    return ProvinceResponse(province=ProvinceOut.model_validate(province))


@router.get("", response_model=ProvincesListResponse)
def list_provinces(
    db: Annotated[Session, Depends(get_db)],
    country_id: int | None = None,
) -> ProvincesListResponse:
    query = db.query(Province)
    if country_id is not None:
        query = query.filter(Province.country_id == country_id)
    provinces = query.order_by(Province.id).all()
    return ProvincesListResponse(provinces=[ProvinceOut.model_validate(p) for p in provinces])


@router.get("/{province_id}", response_model=ProvinceResponse)
def get_province(province_id: int, db: Annotated[Session, Depends(get_db)]) -> ProvinceResponse:
    return ProvinceResponse(province=ProvinceOut.model_validate(get_province_or_404(db, province_id)))


@router.put("/{province_id}", response_model=ProvinceResponse)
def update_province(
    province_id: int,
    body: ProvinceUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> ProvinceResponse:
    province = get_province_or_404(db, province_id)
    country_id = body.country_id if body.country_id is not None else province.country_id
    if country_id != province.country_id:
        get_country_or_404(db, country_id)
    eng_name = body.eng_name.strip() if body.eng_name is not None else province.eng_name
    ar_name = body.ar_name.strip() if body.ar_name is not None else province.ar_name
    if _name_taken(db, country_id, eng_name, ar_name, exclude_id=province_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
    province.country_id = country_id
    province.eng_name = eng_name
    province.ar_name = ar_name
    _commit_or_409(db)
    db.refresh(province)
    return ProvinceResponse(province=ProvinceOut.model_validate(province))


@router.delete("/{province_id}", response_model=MessageResponse)
def delete_province(
    province_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> MessageResponse:
    province = get_province_or_404(db, province_id)
    if _has_districts(db, province_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_HAS_DISTRICTS)
    db.delete(province)
    _commit_or_409(db, _HAS_DISTRICTS)
    return MessageResponse(message="Province deleted successfully")

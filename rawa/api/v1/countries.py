"""Country endpoints: public reads, staff-only writes. English and Arabic names are each unique."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from rawa.api.v1.auth import require_roles
from rawa.core.database import commit_or_conflict, get_db
from rawa.core.exceptions import Conflict, to_http_exception
from rawa.models import Country, Currency, Province
from rawa.schemas.auth import CurrentUser, MessageResponse
from rawa.schemas.currency import CurrencyCreateRequest
from rawa.schemas.location import (
    CountriesListResponse,
    CountryCreateRequest,
    CountryOut,
    CountryResponse,
    CountryUpdateRequest,
)
from rawa.services.access_control import STAFF_ROLES

router = APIRouter()

require_staff = require_roles(*STAFF_ROLES)

_NAME_TAKEN = "Country English or Arabic name already exists"
_HAS_PROVINCES = "Country still has provinces"


def get_country_or_404(db: Session, country_id: int) -> Country:
    country = db.get(Country, country_id)
    if country is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Country not found")
    return country


def _name_taken(db: Session, eng_name: str, ar_name: str, exclude_id: int | None = None) -> bool:
    query = db.query(Country.id).filter(or_(Country.eng_name == eng_name, Country.ar_name == ar_name))
    if exclude_id is not None:
        query = query.filter(Country.id != exclude_id)
    return query.first() is not None


def _has_provinces(db: Session, country_id: int) -> bool:
    return db.query(Province.id).filter(Province.country_id == country_id).first() is not None


def _currency_for(db: Session, body: CurrencyCreateRequest) -> Currency:
    """Existing currency with this code, or a new one staged in the session."""
    code = body.code.strip().upper()
    currency = db.query(Currency).filter(Currency.code == code).first()
    if currency is None:
        currency = Currency(code=code, symbol=body.symbol, exchange_rate=body.exchange_rate)
        db.add(currency)
    return currency


def _commit_or_409(db: Session, message: str = _NAME_TAKEN) -> None:
    try:
        commit_or_conflict(db, message)
    except Conflict as e:
        raise to_http_exception(e) from e


@router.post("", response_model=CountryResponse, status_code=status.HTTP_201_CREATED)
def create_country(
    body: CountryCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> CountryResponse:
    eng_name, ar_name = body.eng_name.strip(), body.ar_name.strip()
    if _name_taken(db, eng_name, ar_name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
    country = Country(eng_name=eng_name, ar_name=ar_name, currency=_currency_for(db, body.currency))
    db.add(country)
    _commit_or_409(db)
    db.refresh(country)
    return CountryResponse(country=CountryOut.model_validate(country))


@router.get("", response_model=CountriesListResponse)
def list_countries(db: Annotated[Session, Depends(get_db)]) -> CountriesListResponse:
    countries = db.query(Country).order_by(Country.eng_name).all()
    return CountriesListResponse(countries=[CountryOut.model_validate(c) for c in countries])


@router.get("/{country_id}", response_model=CountryResponse)
def get_country(country_id: int, db: Annotated[Session, Depends(get_db)]) -> CountryResponse:
    return CountryResponse(country=CountryOut.model_validate(get_country_or_404(db, country_id)))


@router.put("/{country_id}", response_model=CountryResponse)
def update_country(
    country_id: int,
    body: CountryUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> CountryResponse:
    country = get_country_or_404(db, country_id)
    eng_name = body.eng_name.strip() if body.eng_name is not None else country.eng_name
    ar_name = body.ar_name.strip() if body.ar_name is not None else country.ar_name
    if _name_taken(db, eng_name, ar_name, exclude_id=country_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_NAME_TAKEN)
    country.eng_name = eng_name
    country.ar_name = ar_name
    if body.currency is not None:
        country.currency = _currency_for(db, body.currency)
    _commit_or_409(db)
    db.refresh(country)
    return CountryResponse(country=CountryOut.model_validate(country))


@router.delete("/{country_id}", response_model=MessageResponse)
def delete_country(
    country_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> MessageResponse:
    country = get_country_or_404(db, country_id)
    if _has_provinces(db, country_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_HAS_PROVINCES)
    db.delete(country)
    _commit_or_409(db, _HAS_PROVINCES)
    return MessageResponse(message="Country deleted successfully")

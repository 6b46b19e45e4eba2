"""Currency endpoints: public reads, staff-only writes. Currency codes are unique."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from rawa.api.v1.auth import require_roles
from rawa.core.database import commit_or_conflict, get_db
from rawa.core.exceptions import Conflict, to_http_exception
from rawa.models import Currency
from rawa.schemas.auth import CurrentUser, MessageResponse
from rawa.schemas.currency import (
    CurrenciesListResponse,
    CurrencyCreateRequest,
    CurrencyOut,
    CurrencyResponse,
    CurrencyUpdateRequest,
)
from rawa.services.access_control import STAFF_ROLES

router = APIRouter()

require_staff = require_roles(*STAFF_ROLES)

_CODE_TAKEN = "Currency code already exists"


def _get_currency_or_404(db: Session, currency_id: int) -> Currency:
    currency = db.get(Currency, currency_id)
    if currency is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Currency not found")
    return currency


def _code_taken(db: Session, code: str, exclude_id: int | None = None) -> bool:
    query = db.query(Currency.id).filter(Currency.code == code)
    if exclude_id is not None:
        query = query.filter(Currency.id != exclude_id)
    return query.first() is not None


def _commit_or_409(db: Session) -> None:
    try:
        commit_or_conflict(db, _CODE_TAKEN)
    except Conflict as e:
        raise to_http_exception(e) from e


@router.post("", response_model=CurrencyResponse, status_code=status.HTTP_201_CREATED)
def create_currency(
    body: CurrencyCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> CurrencyResponse:
    code = body.code.strip().upper()
    if _code_taken(db, code):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_CODE_TAKEN)
    currency = Currency(code=code, symbol=body.symbol, exchange_rate=body.exchange_rate)
    db.add(currency)
    _commit_or_409(db)
    db.refresh(currency)
    return CurrencyResponse(currency=CurrencyOut.model_validate(currency))


@router.get("", response_model=CurrenciesListResponse)
def list_currencies(db: Annotated[Session, Depends(get_db)]) -> CurrenciesListResponse:
    currencies = db.query(Currency).order_by(Currency.code).all()
    return CurrenciesListResponse(currencies=[CurrencyOut.model_validate(c) for c in currencies])


@router.get("/{currency_id}", response_model=CurrencyResponse)
def get_currency(currency_id: int, db: Annotated[Session, Depends(get_db)]) -> CurrencyResponse:
    return CurrencyResponse(currency=CurrencyOut.model_validate(_get_currency_or_404(db, currency_id)))


@router.put("/{currency_id}", response_model=CurrencyResponse)
def update_currency(
    currency_id: int,
    body: CurrencyUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> CurrencyResponse:
    currency = _get_currency_or_404(db, currency_id)
    if body.code is not None:
        code = body.code.strip().upper()
        if _code_taken(db, code, exclude_id=currency_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_CODE_TAKEN)
        currency.code = code
    if body.symbol is not None:
        currency.symbol = body.symbol
    if body.exchange_rate is not None:
        currency.exchange_rate = body.exchange_rate
    _commit_or_409(db)
    db.refresh(currency)
    return CurrencyResponse(currency=CurrencyOut.model_validate(currency))


@router.delete("/{currency_id}", response_model=MessageResponse)
def delete_currency(
    currency_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> MessageResponse:
    currency = _get_currency_or_404(db, currency_id)
    db.delete(currency)
    db.commit()
    return MessageResponse(message="Currency deleted successfully")

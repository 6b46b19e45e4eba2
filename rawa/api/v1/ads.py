"""Ad endpoints: staff-managed ads plus the public list of ads currently on show."""

from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from rawa.api.v1.auth import require_roles
from rawa.core.config import get_settings
from rawa.core.database import get_db
from rawa.models import Ad
from rawa.schemas.ad import AdCreateRequest, AdOut, AdResponse, AdsListResponse, AdUpdateRequest
from rawa.schemas.auth import CurrentUser, MessageResponse
from rawa.services.access_control import STAFF_ROLES
from rawa.services.ad_expiry import hide_expired_ads

router = APIRouter()

require_staff = require_roles(*STAFF_ROLES)


def _get_ad_or_404(db: Session, ad_id: int) -> Ad:
    ad = db.get(Ad, ad_id)
    if ad is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad not found")
    return ad


def _ad_response(db: Session, ad: Ad) -> AdResponse:
    db.commit()
    db.refresh(ad)
    return AdResponse(ad=AdOut.model_validate(ad))


@router.get("/active/showing", response_model=AdsListResponse)
def list_showing_ads(db: Annotated[Session, Depends(get_db)]) -> AdsListResponse:
    """Public: hide anything that has expired, then list ads on show, newest first."""
    now = datetime.now(timezone.utc)
    hide_expired_ads(db, now=now)
    ads = (
        db.query(Ad)
        .filter(Ad.in_show.is_(True), Ad.expires_at > now)
        .order_by(Ad.created_at.desc(), Ad.id.desc())
        .all()
    )
    return AdsListResponse(ads=[AdOut.model_validate(a) for a in ads])


@router.post("", response_model=AdResponse, status_code=status.HTTP_201_CREATED)
def create_ad(
    body: AdCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> AdResponse:
    """Create a hidden ad; expires_at defaults to now + AD_DEFAULT_TTL_DAYS."""
    expires_at = body.expires_at or (
        datetime.now(timezone.utc) + timedelta(days=get_settings().AD_DEFAULT_TTL_DAYS)
    )
    ad = Ad(title=body.title, expires_at=expires_at, in_show=False)
    db.add(ad)
    return _ad_response(db, ad)


@router.get("", response_model=AdsListResponse)
def list_ads(
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> AdsListResponse:
    ads = db.query(Ad).order_by(Ad.created_at.desc(), Ad.id.desc()).all()
    return AdsListResponse(ads=[AdOut.model_validate(a) for a in ads])


@router.get("/{ad_id}", response_model=AdResponse)
def get_ad(
    ad_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> AdResponse:
    return AdResponse(ad=AdOut.model_validate(_get_ad_or_404(db, ad_id)))


@router.put("/{ad_id}", response_model=AdResponse)
def update_ad(
    ad_id: int,
    body: AdUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> AdResponse:
    ad = _get_ad_or_404(db, ad_id)
    if body.title is not None:
        ad.title = body.title
    if body.expires_at is not None:
        ad.expires_at = body.expires_at
    if body.in_show is not None:
        ad.in_show = body.in_show
    return _ad_response(db, ad)


@router.patch("/{ad_id}/show", response_model=AdResponse)
def show_ad(
    ad_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> AdResponse:
    ad = _get_ad_or_404(db, ad_id)
    ad.in_show = True
    return _ad_response(db, ad)


@router.patch("/{ad_id}/hide", response_model=AdResponse)
def hide_ad(
    ad_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> AdResponse:
    ad = _get_ad_or_404(db, ad_id)
    ad.in_show = False
    return _ad_response(db, ad)


@router.delete("/{ad_id}", response_model=MessageResponse)
def delete_ad(
    ad_id: int,
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> MessageResponse:
    ad = _get_ad_or_404(db, ad_id)
    db.delete(ad)
    db.commit()
    return MessageResponse(message="Ad deleted successfully")

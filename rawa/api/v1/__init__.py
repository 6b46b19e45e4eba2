"""API v1 routes."""

from fastapi import APIRouter

from rawa.api.v1 import ads, auth, countries, currencies, districts, health, provinces, roles, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(roles.router, prefix="/roles", tags=["roles"])
router.include_router(currencies.router, prefix="/currencies", tags=["currencies"])
router.include_router(countries.router, prefix="/countries", tags=["countries"])
router.include_router(provinces.router, prefix="/provinces", tags=["provinces"])
router.include_router(districts.router, prefix="/districts", tags=["districts"])
router.include_router(ads.router, prefix="/ads", tags=["ads"])

"""Authentication router package: signup, activation, login, refresh, codes and reset."""

from fastapi import APIRouter

from .routes import activate as activate_route
from .routes import login as login_route
from .routes import otp as otp_route
from .routes import refresh as refresh_route
from .routes import reset_password as reset_password_route
from .routes import signup as signup_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(signup_route.router, prefix="/signup")
router.include_router(activate_route.router, prefix="/activate")
router.include_router(login_route.router, prefix="/login")
router.include_router(refresh_route.router, prefix="/refresh")
router.include_router(otp_route.router, prefix="/otp")
router.include_router(reset_password_route.router, prefix="/reset-password")

__all__ = ["router"]

"""
Account and session routes.
"""

from fastapi import APIRouter, Depends

from barter_exchange.models import LoginData, ProfileUpdate, SignupData, User
from barter_exchange.api.dependencies import ExchangeServices, get_current_user, get_services

router = APIRouter()


@router.post("/auth/signup", response_model=User)
async def signup(data: SignupData, services: ExchangeServices = Depends(get_services)):
    return services.users.signup(data)


@router.post("/auth/login", response_model=User)
async def login(data: LoginData, services: ExchangeServices = Depends(get_services)):
    return services.users.login(data)


@router.post("/auth/logout", status_code=204)
async def logout(services: ExchangeServices = Depends(get_services)):
    services.users.logout()


@router.get("/auth/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
    return user


@router.put("/auth/profile", response_model=User)
async def complete_profile(
    profile: ProfileUpdate,
    user: User = Depends(get_current_user),
    services: ExchangeServices = Depends(get_services)
):
    """Complete the current user's profile; phone and address count as verifications."""
    return services.users.complete_profile(user.id, profile)

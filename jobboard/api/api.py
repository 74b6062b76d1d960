"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from jobboard.api.endpoints import auth, profiles

api_router = APIRouter()

# Signup, login, refresh, logout for both namespaces
api_router.include_router(auth.router)

# Protected user / company profiles
api_router.include_router(profiles.router)

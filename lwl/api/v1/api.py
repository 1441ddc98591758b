"""Aggregate API router for version 1."""
from fastapi import APIRouter

from lwl.api.v1.endpoints import (
    admin,
    auth,
    bidirectional,
    billing,
    exercises,
    mastery,
    messaging,
    progress,
    sentence_mining,
    users,
    utilities,
    vocabulary,
)

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(admin.router)
api_router.include_router(exercises.router)
api_router.include_router(vocabulary.router)
api_router.include_router(mastery.router)
api_router.include_router(sentence_mining.router)
api_router.include_router(bidirectional.router)
api_router.include_router(progress.router)
api_router.include_router(billing.router)
api_router.include_router(messaging.router)
api_router.include_router(utilities.router)

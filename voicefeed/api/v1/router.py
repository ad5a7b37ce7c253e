from fastapi import APIRouter

from voicefeed.api.v1.discovery import router as discovery_router
from voicefeed.api.v1.interactions import router as interactions_router
from voicefeed.api.v1.shares import router as shares_router
from voicefeed.api.v1.users import router as users_router
from voicefeed.api.v1.voice_notes import router as voice_notes_router

api_router = APIRouter()
api_router.include_router(voice_notes_router)
api_router.include_router(discovery_router)
api_router.include_router(shares_router)
api_router.include_router(interactions_router)
api_router.include_router(users_router)

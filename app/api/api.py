from fastapi import APIRouter
from app.api.routes.bookings import router as bookings_router

api_router = APIRouter(prefix="/api")
api_router.include_router(bookings_router)

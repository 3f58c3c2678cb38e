from fastapi import APIRouter

# Auth
from campus_cinema.api.v1.public.auth import router as auth_router

# Public: catalogue and showings
from campus_cinema.api.v1.public.movies import router as public_movies_router
from campus_cinema.api.v1.public.schedules import router as public_schedules_router

# Public: reservations
from campus_cinema.api.v1.public.reservations import router as reservations_router

# Admin
from campus_cinema.api.v1.admin.halls import router as halls_router
from campus_cinema.api.v1.admin.movies import router as admin_movies_router
from campus_cinema.api.v1.admin.schedules import router as admin_schedules_router
from campus_cinema.api.v1.admin.students import router as students_router
from campus_cinema.api.v1.admin.reservations import router as admin_reservations_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public: catalogue & showings ---
api_router.include_router(public_movies_router)
api_router.include_router(public_schedules_router)

# --- Public: reservations ---
api_router.include_router(reservations_router)

# --- Admin ---
api_router.include_router(halls_router)
api_router.include_router(admin_movies_router)
api_router.include_router(admin_schedules_router)
api_router.include_router(students_router)
api_router.include_router(admin_reservations_router)

from __future__ import annotations

from fastapi import APIRouter

from api.routes import school, solver, substitutions, teachers, timetable


api_router = APIRouter()
api_router.include_router(school.router, prefix="/school", tags=["school"])
api_router.include_router(teachers.router, prefix="/teachers", tags=["teachers"])
api_router.include_router(solver.router, prefix="/solver", tags=["solver"])
api_router.include_router(timetable.router, prefix="/timetable", tags=["timetable"])
api_router.include_router(substitutions.router, prefix="/substitutions", tags=["substitutions"])

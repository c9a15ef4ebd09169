from fastapi import APIRouter

from src.ticprojects.api.routes import auth, projects, system

api_router = APIRouter()
api_router.include_router(system.router)
api_router.include_router(auth.router)
api_router.include_router(projects.router)

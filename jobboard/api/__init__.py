from fastapi import APIRouter
from jobboard.api.routes import auth, users, jobs, applications

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(jobs.router)
api_router.include_router(applications.router)

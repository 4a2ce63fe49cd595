from fastapi import APIRouter

from src.api.v1.endpoints import (
    auth_controller,
    checkout_controller,
    course_controller,
    instructor_controller,
    me_controller,
    player_controller,
)

api_router = APIRouter()

api_router.include_router(auth_controller.router)
api_router.include_router(course_controller.router)
api_router.include_router(instructor_controller.router)
api_router.include_router(player_controller.router)
api_router.include_router(checkout_controller.router)
api_router.include_router(me_controller.router)

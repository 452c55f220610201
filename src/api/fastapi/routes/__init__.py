from fastapi import APIRouter
from . import collection, github, health


def register_routes(router: APIRouter):
    router.include_router(health.router)
    router.include_router(github.router)
    router.include_router(collection.router)

from fastapi import APIRouter
from app.core.responses import respond

router = APIRouter(prefix="/api/v1/healthcheck", tags=["healthcheck"])


@router.get("")
def healthcheck():
    return respond({"status": "OK"}, "Service is healthy")

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from auth import schemas, services

logger = logging.getLogger("auth.routes")

router = APIRouter(tags=["auth"])

@router.post("/login")
async def login(request: Request):
    try:
        data = schemas.LoginRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return JSONResponse({"success": False, "message": "Invalid request"}, status_code=400)

    if not services.check_credentials(data.username, data.password):
        logger.warning("Failed login attempt for username=%r", data.username)
        return {"success": False, "message": "Invalid username or password"}
    return {"success": True, "message": "Login successful"}

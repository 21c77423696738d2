import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from emails import services
from emails.dispatcher import DispatchError, OutboundRequest, get_provider_client, send_email
from emails.schemas import EmailRead, SendRequest

logger = logging.getLogger("emails.router")

router = APIRouter(prefix="/api", tags=["emails"])

# browser consumers may call the API from any origin
CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def _json(payload: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)


@router.get("/emails")
async def list_emails(db: AsyncSession = Depends(get_db)):
    try:
        rows = await services.select_recent(db, limit=settings.EMAIL_LIST_LIMIT)
    except SQLAlchemyError as exc:
        logger.error("Failed to fetch emails: %s", exc)
        return _json({"success": False, "message": f"Failed to fetch emails: {exc}"}, 500)

    emails = [EmailRead.model_validate(row).model_dump() for row in rows]
    return _json({"success": True, "emails": emails})


@router.post("/send")
async def send(request: Request, client: httpx.AsyncClient = Depends(get_provider_client)):
    try:
        body = SendRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return _json({"success": False, "message": "Invalid request"}, 400)

    outbound = OutboundRequest(to=body.to, subject=body.subject, text=body.text)
    try:
        message_id = await send_email(client, outbound)
    except DispatchError as exc:
        return _json({"success": False, "message": str(exc)}, exc.status_code)

    return _json({"success": True, "message": "Email sent", "id": message_id})

import logging

from fastapi import FastAPI
from auth.routes import router as auth_router
from console.routes import router as console_router
from core.config import settings
from core.database import engine, init_db
from emails.listener import start_listener, stop_listener
from emails.router import router as email_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# no docs routes: every unmatched path belongs to the admin console
app = FastAPI(title=settings.PROJECT_NAME, docs_url=None, redoc_url=None, openapi_url=None)

@app.on_event("startup")
async def startup():
    await init_db()
    if settings.IMAP_HOST:
        start_listener()

@app.on_event("shutdown")
async def shutdown():
    await stop_listener()
    await engine.dispose()

app.include_router(auth_router)
app.include_router(email_router)
app.include_router(console_router)

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from core.config import settings

Base = declarative_base()
engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def get_db():
    async with async_session() as session:
        yield session

async def init_db(bind=engine):
    # models must be imported so their tables are registered on Base.metadata
    import emails.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

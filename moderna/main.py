import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import inspect

from moderna.config.settings import settings
from moderna.config.database import Base, SessionLocal, engine
from moderna.core.errors import setup_exception_handlers
from moderna.core.middleware import setup_middleware
from moderna.api.v1.router import api_router
from moderna.modules.ledger import LedgerService
from moderna.shared.database.models import Ledger

logger = logging.getLogger("moderna")


def setup_logging():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


def initialize_ledger(session_factory=SessionLocal, base_balance=settings.ledger_base_balance):
    """Crear el saldo de caja si falta. Falla con un mensaje claro si no hay esquema."""
    with session_factory() as db:
        if not inspect(db.get_bind()).has_table(Ledger.__tablename__):
            logger.error(
                "❌ Esquema de base de datos no inicializado: falta la tabla "
                f"'{Ledger.__tablename__}'. Aplica el esquema o usa AUTO_CREATE_SCHEMA=true"
            )
            raise RuntimeError("Esquema de base de datos no inicializado")
        return LedgerService(db).initialize(base_balance)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info(f"🚀 {settings.app_name} starting - version {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")

    if settings.auto_create_schema:
        Base.metadata.create_all(bind=engine)
        logger.info("Esquema de base de datos verificado")

    initialize_ledger(SessionLocal, settings.ledger_base_balance)

    yield

    # Shutdown
    engine.dispose()
    logger.info(f"🛑 {settings.app_name} shutting down")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="API de ventas, inventario, caja y pedidos",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware and error handlers
setup_middleware(app)
setup_exception_handlers(app)

# Include routers
app.include_router(api_router)

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": settings.app_name,
        "version": settings.version,
        "status": "running",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "api": "/api/v1"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "moderna.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware.exceptions import register_exception_handlers
from app.routers import custos, dashboard, fazendas, fretes, frota, health, motoristas, pagamentos
from app.utils.cache import close_redis

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("fretes")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting API ({settings.environment})")
    yield
    await close_redis()
    logger.info("API stopped")


app = FastAPI(
    title="Caramello Fretes",
    description="Freight logistics back office: shipments, costs, farms, drivers and payments",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(fretes.router, prefix="/fretes", tags=["fretes"])
app.include_router(custos.router, prefix="/custos", tags=["custos"])
app.include_router(fazendas.router, prefix="/fazendas", tags=["fazendas"])
app.include_router(motoristas.router, prefix="/motoristas", tags=["motoristas"])
app.include_router(frota.router, prefix="/frota", tags=["frota"])
app.include_router(pagamentos.router, prefix="/pagamentos", tags=["pagamentos"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])

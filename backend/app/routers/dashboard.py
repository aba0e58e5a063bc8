"""Dashboard routes (Redis-cached aggregates)."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import ApiResponse
from app.services import dashboard as service

router = APIRouter()


def _message(base: str, from_cache: bool) -> str:
    return f"{base} (cache)" if from_cache else base


@router.get("/kpis", response_model=ApiResponse[dict[str, Any]])
async def get_kpis(db: AsyncSession = Depends(get_db)):
    data, from_cache = await service.get_kpis(db)
    return ApiResponse(message=_message("KPIs carregados com sucesso", from_cache), data=data)


@router.get("/estatisticas-rotas", response_model=ApiResponse[list[dict[str, Any]]])
async def get_estatisticas_rotas(db: AsyncSession = Depends(get_db)):
    data, from_cache = await service.get_estatisticas_rotas(db)
    return ApiResponse(
        message=_message("Estatisticas por rota carregadas com sucesso", from_cache),
        data=data,
    )

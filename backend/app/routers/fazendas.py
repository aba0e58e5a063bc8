"""Farm (fazenda) routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.fazenda import FazendaCreate, FazendaOut, FazendaUpdate
from app.services import fazendas as service
from app.utils.pagination import Pagination, get_pagination

router = APIRouter()


@router.get("", response_model=ApiResponse[list[FazendaOut]])
async def list_fazendas(
    estado: str | None = Query(None),
    mercadoria: str | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    rows, total = await service.list_fazendas(db, pagination, estado=estado, mercadoria=mercadoria)
    return ApiResponse(
        message="Fazendas listadas com sucesso",
        data=rows,
        meta=pagination.meta(total),
    )


@router.get("/{fazenda_id}", response_model=ApiResponse[FazendaOut])
async def get_fazenda(fazenda_id: int, db: AsyncSession = Depends(get_db)):
    fazenda = await service.get_fazenda(db, fazenda_id)
    return ApiResponse(message="Fazenda carregada com sucesso", data=fazenda)


@router.post("", response_model=ApiResponse[FazendaOut], status_code=status.HTTP_201_CREATED)
async def create_fazenda(body: FazendaCreate, db: AsyncSession = Depends(get_db)):
    fazenda = await service.create_fazenda(db, body)
    return ApiResponse(message="Fazenda criada com sucesso", data=fazenda)


@router.put("/{fazenda_id}", response_model=ApiResponse[FazendaOut])
async def update_fazenda(fazenda_id: int, body: FazendaUpdate, db: AsyncSession = Depends(get_db)):
    fazenda = await service.update_fazenda(db, fazenda_id, body)
    return ApiResponse(message="Fazenda atualizada com sucesso", data=fazenda)


@router.delete("/{fazenda_id}", response_model=ApiResponse[None])
async def delete_fazenda(fazenda_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_fazenda(db, fazenda_id)
    return ApiResponse(message="Fazenda removida com sucesso")

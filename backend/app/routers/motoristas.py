"""Driver / owner-operator (motorista) routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.motorista import MotoristaCreate, MotoristaOut, MotoristaUpdate
from app.services import motoristas as service
from app.utils.pagination import Pagination, get_pagination

router = APIRouter()


@router.get("", response_model=ApiResponse[list[MotoristaOut]])
async def list_motoristas(
    status_: str | None = Query(None, alias="status"),
    tipo: str | None = Query(None),
    busca: str | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    rows, total = await service.list_motoristas(
        db, pagination, status=status_, tipo=tipo, busca=busca
    )
    return ApiResponse(
        message="Motoristas listados com sucesso",
        data=rows,
        meta=pagination.meta(total),
    )


@router.get("/{motorista_id}", response_model=ApiResponse[MotoristaOut])
async def get_motorista(motorista_id: int, db: AsyncSession = Depends(get_db)):
    motorista = await service.get_motorista(db, motorista_id)
    return ApiResponse(message="Motorista carregado com sucesso", data=motorista)


@router.post("", response_model=ApiResponse[MotoristaOut], status_code=status.HTTP_201_CREATED)
async def create_motorista(body: MotoristaCreate, db: AsyncSession = Depends(get_db)):
    motorista = await service.create_motorista(db, body)
    return ApiResponse(message="Motorista criado com sucesso", data=motorista)


@router.put("/{motorista_id}", response_model=ApiResponse[MotoristaOut])
async def update_motorista(
    motorista_id: int,
    body: MotoristaUpdate,
    db: AsyncSession = Depends(get_db),
):
    motorista = await service.update_motorista(db, motorista_id, body)
    return ApiResponse(message="Motorista atualizado com sucesso", data=motorista)


@router.delete("/{motorista_id}", response_model=ApiResponse[None])
async def delete_motorista(motorista_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_motorista(db, motorista_id)
    return ApiResponse(message="Motorista removido com sucesso")

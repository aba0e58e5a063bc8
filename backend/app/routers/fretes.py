"""Shipment (frete) routes.

Endpoints:
    GET    /fretes              List shipments (filters: data_inicio, data_fim,
                                motorista_id | proprietario_id, fazenda_id)
    GET    /fretes/pendentes    Unpaid shipments grouped by owner-operator
    GET    /fretes/{id}         Shipment detail
    POST   /fretes              Create shipment
    PUT    /fretes/{id}         Update shipment
    DELETE /fretes/{id}         Delete shipment and its cost entries
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.middleware.exceptions import BusinessRuleError
from app.schemas.common import ApiResponse
from app.schemas.frete import FreteCreate, FreteOut, FreteUpdate, GrupoPendente
from app.services import fretes as service
from app.utils.pagination import Pagination, get_pagination

router = APIRouter()


@router.get("", response_model=ApiResponse[list[FreteOut]])
async def list_fretes(
    data_inicio: date | None = Query(None),
    data_fim: date | None = Query(None),
    motorista_id: int | None = Query(None),
    proprietario_id: int | None = Query(None),
    fazenda_id: int | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    rows, total = await service.list_fretes(
        db,
        pagination,
        data_inicio=data_inicio,
        data_fim=data_fim,
        motorista_id=motorista_id if motorista_id is not None else proprietario_id,
        fazenda_id=fazenda_id,
    )
    return ApiResponse(
        message="Fretes listados com sucesso",
        data=rows,
        meta=pagination.meta(total),
    )


# Declared before /{frete_id} so "pendentes" is not parsed as an id
@router.get("/pendentes", response_model=ApiResponse[list[GrupoPendente]])
async def list_pendentes(
    motorista_id: str | None = Query(None),
    proprietario_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    raw = motorista_id or proprietario_id
    filtro = None
    if raw:
        if not raw.strip().isdigit():
            raise BusinessRuleError("motorista_id invalido")
        filtro = int(raw)

    grupos = await service.list_pendentes(db, motorista_id=filtro)
    return ApiResponse(message="Fretes pendentes agrupados por proprietario", data=grupos)


@router.get("/{frete_id}", response_model=ApiResponse[FreteOut])
async def get_frete(frete_id: int, db: AsyncSession = Depends(get_db)):
    frete = await service.get_frete(db, frete_id)
    return ApiResponse(message="Frete carregado com sucesso", data=frete)


@router.post("", response_model=ApiResponse[FreteOut], status_code=status.HTTP_201_CREATED)
async def create_frete(body: FreteCreate, db: AsyncSession = Depends(get_db)):
    frete = await service.create_frete(db, body)
    return ApiResponse(message="Frete criado com sucesso", data=frete)


@router.put("/{frete_id}", response_model=ApiResponse[FreteOut])
async def update_frete(frete_id: int, body: FreteUpdate, db: AsyncSession = Depends(get_db)):
    frete = await service.update_frete(db, frete_id, body)
    return ApiResponse(message="Frete atualizado com sucesso", data=frete)


@router.delete("/{frete_id}", response_model=ApiResponse[None])
async def delete_frete(frete_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_frete(db, frete_id)
    return ApiResponse(message="Frete removido com sucesso")

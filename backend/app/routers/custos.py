"""Cost entry (custo) routes.

POST accepts either one entry or a batch for a single shipment:

    {"frete_id": 1, "tipo": "pedagio", "descricao": "...", "valor": 45.9, "data": "2026-03-01"}
    {"frete_id": 1, "custos": [{...}, {...}]}
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.custo import CustoOut, CustosCriados, CustoUpdate
from app.services import custos as service
from app.utils.pagination import Pagination, get_pagination

router = APIRouter()


@router.get("", response_model=ApiResponse[list[CustoOut]])
async def list_custos(
    frete_id: int | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    rows, total = await service.list_custos(db, pagination, frete_id=frete_id)
    return ApiResponse(
        message="Custos listados com sucesso",
        data=rows,
        meta=pagination.meta(total),
    )


@router.get("/{custo_id}", response_model=ApiResponse[CustoOut])
async def get_custo(custo_id: int, db: AsyncSession = Depends(get_db)):
    custo = await service.get_custo(db, custo_id)
    return ApiResponse(message="Custo carregado com sucesso", data=custo)


@router.post(
    "",
    response_model=ApiResponse[CustoOut | CustosCriados],
    status_code=status.HTTP_201_CREATED,
)
async def create_custos(
    body: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    payloads = service.parse_custos_payload(body)
    result = await service.create_custos(db, payloads)
    if isinstance(result, CustosCriados):
        return ApiResponse(message="Custos criados com sucesso", data=result)
    return ApiResponse(message="Custo criado com sucesso", data=result)


@router.put("/{custo_id}", response_model=ApiResponse[CustoOut])
async def update_custo(custo_id: int, body: CustoUpdate, db: AsyncSession = Depends(get_db)):
    custo = await service.update_custo(db, custo_id, body)
    return ApiResponse(message="Custo atualizado com sucesso", data=custo)


@router.delete("/{custo_id}", response_model=ApiResponse[None])
async def delete_custo(custo_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_custo(db, custo_id)
    return ApiResponse(message="Custo removido com sucesso")

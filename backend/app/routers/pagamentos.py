"""Payment (pagamento) routes.

``{ref}`` accepts the numeric id or the display code (PAG-2026-001).
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.pagamento import PagamentoCreate, PagamentoOut, PagamentoUpdate, ResumoProprietario
from app.services import pagamentos as service
from app.utils.pagination import Pagination, get_pagination

router = APIRouter()


class PagamentoListResponse(ApiResponse[list[PagamentoOut]]):
    resumo_fretes_por_proprietario: list[ResumoProprietario] = []


@router.get("", response_model=PagamentoListResponse)
async def list_pagamentos(
    status_: str | None = Query(None, alias="status"),
    motorista_id: int | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    rows, total, resumo = await service.list_pagamentos(
        db, pagination, status=status_, motorista_id=motorista_id
    )
    return PagamentoListResponse(
        message="Pagamentos listados com sucesso",
        data=rows,
        meta=pagination.meta(total),
        resumo_fretes_por_proprietario=resumo,
    )


@router.get("/{ref}", response_model=ApiResponse[PagamentoOut])
async def get_pagamento(ref: str, db: AsyncSession = Depends(get_db)):
    pagamento = await service.get_pagamento(db, ref)
    return ApiResponse(message="Pagamento carregado com sucesso", data=pagamento)


@router.post("", response_model=ApiResponse[PagamentoOut], status_code=status.HTTP_201_CREATED)
async def create_pagamento(body: PagamentoCreate, db: AsyncSession = Depends(get_db)):
    pagamento = await service.create_pagamento(db, body)
    return ApiResponse(message="Pagamento criado com sucesso", data=pagamento)


@router.put("/{ref}", response_model=ApiResponse[PagamentoOut])
async def update_pagamento(ref: str, body: PagamentoUpdate, db: AsyncSession = Depends(get_db)):
    pagamento = await service.update_pagamento(db, ref, body)
    return ApiResponse(message="Pagamento atualizado com sucesso", data=pagamento)


@router.delete("/{ref}", response_model=ApiResponse[None])
async def delete_pagamento(ref: str, db: AsyncSession = Depends(get_db)):
    await service.delete_pagamento(db, ref)
    return ApiResponse(message="Pagamento removido com sucesso")

"""Fleet vehicle (frota) routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.frota import VeiculoCreate, VeiculoOut, VeiculoUpdate
from app.services import frota as service
from app.utils.pagination import Pagination, get_pagination

router = APIRouter()


@router.get("", response_model=ApiResponse[list[VeiculoOut]])
async def list_veiculos(
    status_: str | None = Query(None, alias="status"),
    tipo_veiculo: str | None = Query(None),
    busca: str | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
):
    rows, total = await service.list_veiculos(
        db, pagination, status=status_, tipo_veiculo=tipo_veiculo, busca=busca
    )
    return ApiResponse(
        message="Frota listada com sucesso",
        data=rows,
        meta=pagination.meta(total),
    )


@router.get("/{veiculo_id}", response_model=ApiResponse[VeiculoOut])
async def get_veiculo(veiculo_id: int, db: AsyncSession = Depends(get_db)):
    veiculo = await service.get_veiculo(db, veiculo_id)
    return ApiResponse(message="Veiculo carregado com sucesso", data=veiculo)


@router.post("", response_model=ApiResponse[VeiculoOut], status_code=status.HTTP_201_CREATED)
async def create_veiculo(body: VeiculoCreate, db: AsyncSession = Depends(get_db)):
    veiculo = await service.create_veiculo(db, body)
    return ApiResponse(message="Veiculo criado com sucesso", data=veiculo)


@router.put("/{veiculo_id}", response_model=ApiResponse[VeiculoOut])
async def update_veiculo(veiculo_id: int, body: VeiculoUpdate, db: AsyncSession = Depends(get_db)):
    veiculo = await service.update_veiculo(db, veiculo_id, body)
    return ApiResponse(message="Veiculo atualizado com sucesso", data=veiculo)


@router.delete("/{veiculo_id}", response_model=ApiResponse[None])
async def delete_veiculo(veiculo_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_veiculo(db, veiculo_id)
    return ApiResponse(message="Veiculo removido com sucesso")

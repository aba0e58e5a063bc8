"""Fleet vehicle (frota) CRUD.

Payloads arrive already normalised by the schema validators (plates
formatted, decimal commas parsed, trailer plate cleared on light trucks).
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.middleware.exceptions import (
    BusinessRuleError,
    ReferenceNotFoundError,
    ResourceNotFoundError,
)
from app.models.frete import Frete
from app.models.frota import Veiculo
from app.schemas.frota import VeiculoCreate, VeiculoOut, VeiculoUpdate
from app.services.validation import exists
from app.utils.cache import invalidate_cache
from app.utils.numbering import assign_code
from app.utils.pagination import Pagination
from app.utils.veiculos import HEAVY_TYPES

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("placa", "modelo", "tipo_veiculo", "status", "proprietario_tipo")


async def _check_placa_livre(db: AsyncSession, placa: str, ignore_id: int | None = None) -> None:
    stmt = select(Veiculo.id).where(Veiculo.placa == placa)
    if ignore_id is not None:
        stmt = stmt.where(Veiculo.id != ignore_id)
    if (await db.execute(stmt.limit(1))).scalar_one_or_none() is not None:
        raise BusinessRuleError(f"Ja existe um veiculo com a placa {placa}", error_code="DUPLICATE_RECORD")


async def list_veiculos(
    db: AsyncSession,
    pagination: Pagination,
    status: str | None = None,
    tipo_veiculo: str | None = None,
    busca: str | None = None,
) -> tuple[list[VeiculoOut], int]:
    filters = []
    if status:
        filters.append(Veiculo.status == status)
    if tipo_veiculo:
        filters.append(Veiculo.tipo_veiculo == tipo_veiculo.upper())
    if busca:
        like = f"%{busca}%"
        filters.append(or_(Veiculo.placa.ilike(like), Veiculo.modelo.ilike(like)))

    total = await db.scalar(select(func.count(Veiculo.id)).where(*filters)) or 0
    result = await db.execute(
        select(Veiculo)
        .where(*filters)
        .order_by(Veiculo.placa)
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    return [VeiculoOut.model_validate(v) for v in result.scalars().all()], total


async def get_veiculo(db: AsyncSession, veiculo_id: int) -> VeiculoOut:
    veiculo = await db.get(Veiculo, veiculo_id)
    if veiculo is None:
        raise ResourceNotFoundError("Veiculo nao encontrado")
    return VeiculoOut.model_validate(veiculo)


async def create_veiculo(db: AsyncSession, body: VeiculoCreate) -> VeiculoOut:
    data = body.model_dump()

    async with transaction(db):
        await _check_placa_livre(db, data["placa"])
        if data.get("motorista_fixo_id") is not None and not await exists(
            db, "motoristas", data["motorista_fixo_id"]
        ):
            raise ReferenceNotFoundError("Motorista nao encontrado", field="motorista_fixo_id")

        veiculo = Veiculo(**data)
        db.add(veiculo)
        await assign_code(db, veiculo, "veiculo")

    logger.info(f"Veiculo {veiculo.placa} created", extra={"veiculo_id": veiculo.id})
    await invalidate_cache("dashboard:*")
    return VeiculoOut.model_validate(veiculo)


async def update_veiculo(db: AsyncSession, veiculo_id: int, body: VeiculoUpdate) -> VeiculoOut:
    updates = {k: v for k, v in body.model_dump(exclude_unset=True).items()
               if v is not None or k not in REQUIRED_FIELDS}

    async with transaction(db):
        veiculo = await db.get(Veiculo, veiculo_id)
        if veiculo is None:
            raise ResourceNotFoundError("Veiculo nao encontrado")
        if not updates:
            raise BusinessRuleError("Nenhum campo valido para atualizar")

        if "placa" in updates and updates["placa"] != veiculo.placa:
            await _check_placa_livre(db, updates["placa"], ignore_id=veiculo_id)
        if updates.get("motorista_fixo_id") is not None and not await exists(
            db, "motoristas", updates["motorista_fixo_id"]
        ):
            raise ReferenceNotFoundError("Motorista nao encontrado", field="motorista_fixo_id")

        for key, value in updates.items():
            setattr(veiculo, key, value)
        if veiculo.tipo_veiculo not in HEAVY_TYPES:
            veiculo.placa_carreta = None

    logger.info(f"Veiculo {veiculo_id} updated", extra={"fields": sorted(updates)})
    await invalidate_cache("dashboard:*")
    return VeiculoOut.model_validate(veiculo)


async def delete_veiculo(db: AsyncSession, veiculo_id: int) -> None:
    async with transaction(db):
        veiculo = await db.get(Veiculo, veiculo_id)
        if veiculo is None:
            raise ResourceNotFoundError("Veiculo nao encontrado")

        fretes = await db.scalar(select(func.count(Frete.id)).where(Frete.caminhao_id == veiculo_id))
        if fretes:
            raise BusinessRuleError(
                f"Veiculo possui {fretes} frete(s) registrado(s) e nao pode ser removido"
            )
        await db.delete(veiculo)

    logger.info(f"Veiculo {veiculo_id} deleted")
    await invalidate_cache("dashboard:*")

"""Driver / owner-operator (motorista) CRUD."""

import logging

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.middleware.exceptions import (
    BusinessRuleError,
    ReferenceNotFoundError,
    ResourceNotFoundError,
)
from app.models.frete import Frete
from app.models.frota import Veiculo
from app.models.motorista import Motorista
from app.models.pagamento import Pagamento
from app.schemas.motorista import MotoristaCreate, MotoristaOut, MotoristaUpdate, VeiculoVinculado
from app.utils.cache import invalidate_cache
from app.utils.numbering import assign_code
from app.utils.pagination import Pagination

logger = logging.getLogger(__name__)

# Columns that may not be cleared with an explicit null
REQUIRED_FIELDS = ("nome", "telefone", "status", "tipo", "tipo_pagamento")


async def _to_out(db: AsyncSession, motorista: Motorista) -> dict:
    out = MotoristaOut.model_validate(motorista)
    veiculo = (await db.execute(
        select(Veiculo).where(Veiculo.motorista_fixo_id == motorista.id).order_by(Veiculo.id).limit(1)
    )).scalar_one_or_none()
    if veiculo is not None:
        out.veiculo_vinculado = VeiculoVinculado.model_validate(veiculo)
    return out.model_dump()


async def list_motoristas(
    db: AsyncSession,
    pagination: Pagination,
    status: str | None = None,
    tipo: str | None = None,
    busca: str | None = None,
) -> tuple[list[MotoristaOut], int]:
    filters = []
    if status:
        filters.append(Motorista.status == status)
    if tipo:
        filters.append(Motorista.tipo == tipo)
    if busca:
        like = f"%{busca}%"
        filters.append(or_(Motorista.nome.ilike(like), Motorista.cpf.ilike(like)))

    total = await db.scalar(select(func.count(Motorista.id)).where(*filters)) or 0
    result = await db.execute(
        select(Motorista)
        .where(*filters)
        .order_by(Motorista.nome)
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    return [MotoristaOut.model_validate(m) for m in result.scalars().all()], total


async def get_motorista(db: AsyncSession, motorista_id: int) -> dict:
    motorista = await db.get(Motorista, motorista_id)
    if motorista is None:
        raise ResourceNotFoundError("Motorista nao encontrado")
    return await _to_out(db, motorista)


async def create_motorista(db: AsyncSession, body: MotoristaCreate) -> dict:
    async with transaction(db):
        motorista = Motorista(**body.model_dump(), receita_gerada=0.0, viagens_realizadas=0)
        db.add(motorista)
        await assign_code(db, motorista, "motorista")

    logger.info(
        f"Motorista {motorista.codigo_motorista} created",
        extra={"motorista_id": motorista.id, "tipo": motorista.tipo},
    )
    await invalidate_cache("dashboard:*")
    return await _to_out(db, motorista)


async def update_motorista(db: AsyncSession, motorista_id: int, body: MotoristaUpdate) -> dict:
    updates = body.model_dump(exclude_unset=True)
    veiculo_id = updates.pop("veiculo_id", None)
    updates = {k: v for k, v in updates.items() if v is not None or k not in REQUIRED_FIELDS}

    async with transaction(db):
        motorista = await db.get(Motorista, motorista_id)
        if motorista is None:
            raise ResourceNotFoundError("Motorista nao encontrado")
        if not updates and veiculo_id is None:
            raise BusinessRuleError("Nenhum campo valido para atualizar")

        for key, value in updates.items():
            setattr(motorista, key, value)

        if veiculo_id is not None:
            veiculo = await db.get(Veiculo, veiculo_id)
            if veiculo is None:
                raise ReferenceNotFoundError("Veiculo nao encontrado", field="veiculo_id")
            # One bound vehicle per driver
            await db.execute(
                update(Veiculo)
                .where(Veiculo.motorista_fixo_id == motorista_id, Veiculo.id != veiculo_id)
                .values(motorista_fixo_id=None)
            )
            veiculo.motorista_fixo_id = motorista_id

    logger.info(
        f"Motorista {motorista_id} updated",
        extra={"fields": sorted(updates), "veiculo_id": veiculo_id},
    )
    await invalidate_cache("dashboard:*")
    return await _to_out(db, motorista)


async def delete_motorista(db: AsyncSession, motorista_id: int) -> None:
    async with transaction(db):
        motorista = await db.get(Motorista, motorista_id)
        if motorista is None:
            raise ResourceNotFoundError("Motorista nao encontrado")

        fretes = await db.scalar(select(func.count(Frete.id)).where(Frete.motorista_id == motorista_id))
        pagamentos = await db.scalar(
            select(func.count(Pagamento.id)).where(Pagamento.motorista_id == motorista_id)
        )
        if fretes or pagamentos:
            raise BusinessRuleError(
                "Motorista possui fretes ou pagamentos registrados e nao pode ser removido"
            )

        await db.execute(
            update(Veiculo)
            .where(Veiculo.motorista_fixo_id == motorista_id)
            .values(motorista_fixo_id=None)
        )
        await db.delete(motorista)

    logger.info(f"Motorista {motorista_id} deleted")
    await invalidate_cache("dashboard:*")

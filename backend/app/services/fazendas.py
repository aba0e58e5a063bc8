"""Farm (fazenda) CRUD plus per-farm shipment aggregates.

The stored harvest totals are owned by the totals reconciler; this module
only writes descriptive fields.  Reads add aggregates computed on the fly
from the linked shipments and their cost entries.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.middleware.exceptions import BusinessRuleError, ResourceNotFoundError
from app.models.custo import Custo
from app.models.fazenda import Fazenda
from app.models.frete import Frete
from app.schemas.fazenda import FazendaCreate, FazendaOut, FazendaUpdate
from app.utils.cache import invalidate_cache
from app.utils.numbering import assign_code
from app.utils.pagination import Pagination

logger = logging.getLogger(__name__)


async def _with_aggregates(db: AsyncSession, fazenda: Fazenda) -> dict:
    out = FazendaOut.model_validate(fazenda)

    out.total_fretes_realizados = await db.scalar(
        select(func.count(Frete.id)).where(Frete.fazenda_id == fazenda.id)
    ) or 0
    out.total_custos_operacionais = float(await db.scalar(
        select(func.coalesce(func.sum(Custo.valor), 0.0))
        .join(Frete, Frete.id == Custo.frete_id)
        .where(Frete.fazenda_id == fazenda.id)
    ) or 0.0)
    out.lucro_liquido = (fazenda.faturamento_total or 0.0) - out.total_custos_operacionais

    ultimo = (await db.execute(
        select(Frete)
        .where(Frete.fazenda_id == fazenda.id)
        .order_by(Frete.data_frete.desc(), Frete.id.desc())
        .limit(1)
    )).scalar_one_or_none()
    if ultimo is not None:
        out.ultimo_frete_id = ultimo.id
        out.ultimo_frete_motorista = ultimo.motorista_nome
        out.ultimo_frete_placa = ultimo.caminhao_placa
        out.ultimo_frete_origem = ultimo.origem
        out.ultimo_frete_destino = ultimo.destino
        out.ultimo_frete_data = ultimo.data_frete

    return out.model_dump()


async def list_fazendas(
    db: AsyncSession,
    pagination: Pagination,
    estado: str | None = None,
    mercadoria: str | None = None,
) -> tuple[list[dict], int]:
    filters = []
    if estado:
        filters.append(Fazenda.estado == estado.upper())
    if mercadoria:
        filters.append(Fazenda.mercadoria == mercadoria)

    total = await db.scalar(select(func.count(Fazenda.id)).where(*filters)) or 0
    result = await db.execute(
        select(Fazenda)
        .where(*filters)
        .order_by(Fazenda.created_at.desc(), Fazenda.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    return [await _with_aggregates(db, f) for f in result.scalars().all()], total


async def get_fazenda(db: AsyncSession, fazenda_id: int) -> dict:
    fazenda = await db.get(Fazenda, fazenda_id)
    if fazenda is None:
        raise ResourceNotFoundError("Fazenda nao encontrada")
    return await _with_aggregates(db, fazenda)


async def create_fazenda(db: AsyncSession, body: FazendaCreate) -> dict:
    data = body.model_dump()
    data["estado"] = data["estado"].upper()

    async with transaction(db):
        fazenda = Fazenda(
            **data,
            total_sacas_carregadas=0.0,
            total_toneladas=0.0,
            faturamento_total=0.0,
        )
        db.add(fazenda)
        await assign_code(db, fazenda, "fazenda")

    logger.info(f"Fazenda {fazenda.codigo_fazenda} created", extra={"fazenda_id": fazenda.id})
    await invalidate_cache("dashboard:*")
    return await _with_aggregates(db, fazenda)


async def update_fazenda(db: AsyncSession, fazenda_id: int, body: FazendaUpdate) -> dict:
    updates = {k: v for k, v in body.model_dump(exclude_unset=True).items()
               if v is not None or k == "variedade"}
    if "estado" in updates:
        updates["estado"] = updates["estado"].upper()

    async with transaction(db):
        fazenda = await db.get(Fazenda, fazenda_id)
        if fazenda is None:
            raise ResourceNotFoundError("Fazenda nao encontrada")
        if not updates:
            raise BusinessRuleError("Nenhum campo valido para atualizar")

        for key, value in updates.items():
            setattr(fazenda, key, value)

    logger.info(f"Fazenda {fazenda_id} updated", extra={"fields": sorted(updates)})
    await invalidate_cache("dashboard:*")
    return await _with_aggregates(db, fazenda)


async def delete_fazenda(db: AsyncSession, fazenda_id: int) -> None:
    async with transaction(db):
        fazenda = await db.get(Fazenda, fazenda_id)
        if fazenda is None:
            raise ResourceNotFoundError("Fazenda nao encontrada")

        linked = await db.scalar(
            select(func.count(Frete.id)).where(Frete.fazenda_id == fazenda_id)
        )
        if linked:
            raise BusinessRuleError(
                f"Fazenda possui {linked} frete(s) vinculado(s) e nao pode ser removida"
            )
        await db.delete(fazenda)

    logger.info(f"Fazenda {fazenda_id} deleted")
    await invalidate_cache("dashboard:*")

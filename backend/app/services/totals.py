"""Totals reconciler: rebuilds derived aggregates from their source rows.

Two families of stored aggregates exist:

    fretes.custos / fretes.resultado
        custos    = Σ custos.valor for the shipment (0 when none)
        resultado = receita − custos

    fazendas.total_toneladas / total_sacas_carregadas / faturamento_total / ultimo_frete
        sums of toneladas, quantidade_sacas and receita over the shipments
        currently linked to the farm, and the latest data_frete

Every function is a full recompute, never a delta, so running it twice
gives the same row and running it after a partial failure repairs drift.
They execute inside the caller's transaction (pending rows are flushed
first by autoflush) and let errors propagate so the enclosing write rolls
back as a whole.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.custo import Custo
from app.models.fazenda import Fazenda
from app.models.frete import Frete

logger = logging.getLogger(__name__)


async def recompute_shipment_totals(db: AsyncSession, frete_id: int) -> Frete | None:
    """Set ``custos`` and ``resultado`` of one shipment from its cost entries.

    Returns the shipment, or None when it no longer exists.
    """
    frete = await db.get(Frete, frete_id)
    if frete is None:
        return None

    total = await db.scalar(
        select(func.coalesce(func.sum(Custo.valor), 0.0)).where(Custo.frete_id == frete_id)
    )

    frete.custos = float(total or 0.0)
    frete.resultado = float(frete.receita or 0.0) - frete.custos
    await db.flush()
    return frete


async def recompute_farm_totals(db: AsyncSession, fazenda_id: int | None) -> Fazenda | None:
    """Set the harvest totals of one farm from its linked shipments.

    A ``None`` id is accepted and ignored so callers can pass a shipment's
    optional ``fazenda_id`` straight through.
    """
    if fazenda_id is None:
        return None

    fazenda = await db.get(Fazenda, fazenda_id)
    if fazenda is None:
        return None

    row = (
        await db.execute(
            select(
                func.coalesce(func.sum(Frete.toneladas), 0.0),
                func.coalesce(func.sum(Frete.quantidade_sacas), 0.0),
                func.coalesce(func.sum(Frete.receita), 0.0),
                func.max(Frete.data_frete),
            ).where(Frete.fazenda_id == fazenda_id)
        )
    ).one()

    fazenda.total_toneladas = float(row[0])
    fazenda.total_sacas_carregadas = float(row[1])
    fazenda.faturamento_total = float(row[2])
    fazenda.ultimo_frete = row[3]
    await db.flush()
    return fazenda


async def recompute_all(db: AsyncSession) -> dict:
    """Recompute every shipment, then every farm.  Used for repairs."""
    frete_ids = (await db.execute(select(Frete.id).order_by(Frete.id))).scalars().all()
    for frete_id in frete_ids:
        await recompute_shipment_totals(db, frete_id)

    fazenda_ids = (await db.execute(select(Fazenda.id).order_by(Fazenda.id))).scalars().all()
    for fazenda_id in fazenda_ids:
        await recompute_farm_totals(db, fazenda_id)

    logger.info(
        f"Recomputed totals for {len(frete_ids)} fretes and {len(fazenda_ids)} fazendas"
    )
    return {"fretes": len(frete_ids), "fazendas": len(fazenda_ids)}

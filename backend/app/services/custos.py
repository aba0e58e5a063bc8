"""Cost entry (custo) orchestrator.

A cost entry always belongs to exactly one shipment, and adding, moving or
removing one re-derives that shipment's ``custos``/``resultado`` inside the
same transaction.  Shipments that already belong to a payment are frozen.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.middleware.exceptions import (
    BusinessRuleError,
    PaymentLockedError,
    ResourceNotFoundError,
)
from app.models.custo import Custo
from app.models.frete import Frete
from app.models.motorista import Motorista
from app.schemas.custo import CustoCreate, CustoOut, CustosCriados, CustoUpdate
from app.services.totals import recompute_shipment_totals
from app.utils.cache import invalidate_cache
from app.utils.pagination import Pagination

logger = logging.getLogger(__name__)


def parse_custos_payload(raw: dict) -> list[CustoCreate]:
    """Accept one entry or a batch ``{"frete_id": .., "custos": [..]}``.

    Items of a batch inherit the outer ``frete_id`` unless they carry one.
    Pydantic ``ValidationError`` propagates to the 400 handler.
    """
    if isinstance(raw, dict) and isinstance(raw.get("custos"), list):
        if not raw["custos"]:
            raise BusinessRuleError("Informe ao menos um custo para criar")
        payloads = []
        for item in raw["custos"]:
            item = dict(item) if isinstance(item, dict) else {}
            if item.get("frete_id") is None:
                item["frete_id"] = raw.get("frete_id")
            payloads.append(CustoCreate.model_validate(item))
        return payloads

    return [CustoCreate.model_validate(raw)]


async def _get_frete(db: AsyncSession, frete_id: int) -> Frete:
    frete = await db.get(Frete, frete_id)
    if frete is None:
        raise ResourceNotFoundError("Frete nao encontrado")
    return frete


# ── Reads ────────────────────────────────────────────────────

async def list_custos(
    db: AsyncSession,
    pagination: Pagination,
    frete_id: int | None = None,
) -> tuple[list[CustoOut], int]:
    filters = []
    if frete_id is not None:
        filters.append(Custo.frete_id == frete_id)

    total = await db.scalar(select(func.count(Custo.id)).where(*filters)) or 0
    result = await db.execute(
        select(Custo)
        .where(*filters)
        .order_by(Custo.data.desc(), Custo.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    return [CustoOut.model_validate(c) for c in result.scalars().all()], total


async def get_custo(db: AsyncSession, custo_id: int) -> CustoOut:
    custo = await db.get(Custo, custo_id)
    if custo is None:
        raise ResourceNotFoundError("Custo nao encontrado")
    return CustoOut.model_validate(custo)


# ── Writes ───────────────────────────────────────────────────

async def create_custos(db: AsyncSession, payloads: list[CustoCreate]) -> CustoOut | CustosCriados:
    """Insert one or more cost entries for a single shipment.

    Returns the created entry for a single payload, or the batch summary.
    """
    frete_ids = {p.frete_id for p in payloads}
    if len(frete_ids) != 1:
        raise BusinessRuleError("Para criacao em lote, todos os custos devem ser do mesmo frete")
    frete_id = frete_ids.pop()

    async with transaction(db):
        frete = await _get_frete(db, frete_id)
        if frete.pagamento_id is not None:
            raise PaymentLockedError("Nao e permitido vincular custo a frete ja pago")

        motorista_nome = frete.motorista_nome
        if not motorista_nome:
            motorista = await db.get(Motorista, frete.motorista_id)
            motorista_nome = motorista.nome if motorista else None
        rota = f"{frete.origem} → {frete.destino}" if frete.origem and frete.destino else None

        created = []
        for payload in payloads:
            data = payload.model_dump()
            data["motorista"] = data["motorista"] or motorista_nome
            data["caminhao"] = data["caminhao"] or frete.caminhao_placa
            data["rota"] = data["rota"] or rota
            custo = Custo(**data)
            db.add(custo)
            created.append(custo)
        await db.flush()

        await recompute_shipment_totals(db, frete_id)

    logger.info(
        f"Created {len(created)} custo(s) for frete {frete_id}",
        extra={"frete_id": frete_id, "custo_ids": [c.id for c in created]},
    )
    await invalidate_cache("dashboard:*")

    if len(created) == 1:
        return CustoOut.model_validate(created[0])
    return CustosCriados(
        ids=[c.id for c in created],
        totalCriados=len(created),
        frete_id=frete_id,
    )


async def update_custo(db: AsyncSession, custo_id: int, body: CustoUpdate) -> CustoOut:
    updates = {k: v for k, v in body.model_dump(exclude_unset=True).items()
               if v is not None or k in ("observacoes", "litros", "tipo_combustivel")}

    async with transaction(db):
        custo = await db.get(Custo, custo_id)
        if custo is None:
            raise ResourceNotFoundError("Custo nao encontrado")

        frete_atual = await _get_frete(db, custo.frete_id)
        if frete_atual.pagamento_id is not None:
            raise PaymentLockedError("Nao e permitido alterar custo de frete ja pago")

        if not updates:
            raise BusinessRuleError("Nenhum campo valido para atualizar")

        frete_antigo_id = custo.frete_id
        novo_frete_id = updates.get("frete_id", frete_antigo_id)
        if novo_frete_id != frete_antigo_id:
            novo_frete = await _get_frete(db, novo_frete_id)
            if novo_frete.pagamento_id is not None:
                raise PaymentLockedError("Nao e permitido vincular custo a frete ja pago")

        for key, value in updates.items():
            setattr(custo, key, value)
        await db.flush()

        await recompute_shipment_totals(db, frete_antigo_id)
        if novo_frete_id != frete_antigo_id:
            await recompute_shipment_totals(db, novo_frete_id)

    logger.info(
        f"Custo {custo_id} updated",
        extra={"frete_id": custo.frete_id, "fields": sorted(updates)},
    )
    await invalidate_cache("dashboard:*")
    return CustoOut.model_validate(custo)


async def delete_custo(db: AsyncSession, custo_id: int) -> None:
    async with transaction(db):
        custo = await db.get(Custo, custo_id)
        if custo is None:
            raise ResourceNotFoundError("Custo nao encontrado")

        frete = await _get_frete(db, custo.frete_id)
        if frete.pagamento_id is not None:
            raise PaymentLockedError("Nao e permitido remover custo de frete ja pago")

        frete_id = custo.frete_id
        await db.delete(custo)
        await db.flush()

        await recompute_shipment_totals(db, frete_id)

    logger.info(f"Custo {custo_id} deleted", extra={"frete_id": frete_id})
    await invalidate_cache("dashboard:*")

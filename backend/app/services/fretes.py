"""Shipment (frete) write orchestrator and read queries.

Every write runs as one unit inside ``transaction(db)``:

    guard (exists / payment lock) → referential checks → mutate
    → reconcile derived totals → commit

Shipment ``custos``/``resultado`` and farm totals are never patched with
deltas; the reconciler recomputes them from source rows in the same
transaction, so a failure anywhere leaves every aggregate untouched.
"""

import logging
from datetime import date

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.middleware.exceptions import (
    BusinessRuleError,
    PaymentLockedError,
    ReferenceNotFoundError,
    ResourceNotFoundError,
)
from app.models.custo import Custo
from app.models.fazenda import Fazenda
from app.models.frete import Frete
from app.models.frota import Veiculo
from app.models.motorista import Motorista
from app.schemas.frete import FreteCreate, FreteOut, FretePendente, FreteUpdate
from app.services.totals import recompute_farm_totals, recompute_shipment_totals
from app.services.validation import exists
from app.utils.cache import invalidate_cache
from app.utils.numbering import assign_code, normalize_client_code
from app.utils.pagination import Pagination

logger = logging.getLogger(__name__)

GUIA_INTERNA = "GUIA_INTERNA"
PAGAMENTO_TERCEIRO = "PAGAMENTO_TERCEIRO"


def tipo_relatorio(tipo_motorista: str | None) -> str:
    """Company drivers get an internal guide; everyone else a carrier payment."""
    return GUIA_INTERNA if tipo_motorista == "proprio" else PAGAMENTO_TERCEIRO


def _joined_select():
    return (
        select(
            Frete,
            Motorista.nome,
            Motorista.tipo,
            Veiculo.placa,
            Veiculo.modelo,
        )
        .outerjoin(Motorista, Motorista.id == Frete.motorista_id)
        .outerjoin(Veiculo, Veiculo.id == Frete.caminhao_id)
    )


def _to_out(row) -> dict:
    frete, m_nome, m_tipo, v_placa, v_modelo = row
    out = FreteOut.model_validate(frete)
    nome = frete.motorista_nome or m_nome
    out.motorista_nome = nome
    out.proprietario_id = frete.motorista_id
    out.proprietario_nome = nome
    out.motorista_tipo = m_tipo
    out.proprietario_tipo = m_tipo
    out.caminhao_placa = frete.caminhao_placa or v_placa
    out.caminhao_modelo = v_modelo
    return out.model_dump()


async def _check_references(db: AsyncSession, data: dict) -> None:
    if data.get("motorista_id") is not None and not await exists(db, "motoristas", data["motorista_id"]):
        raise ReferenceNotFoundError(
            "Proprietario nao encontrado. Verifique se o ID esta correto.", field="motorista_id"
        )
    if data.get("caminhao_id") is not None and not await exists(db, "frota", data["caminhao_id"]):
        raise ReferenceNotFoundError(
            "Caminhao nao encontrado. Verifique se o ID esta correto.", field="caminhao_id"
        )
    if data.get("fazenda_id") is not None and not await exists(db, "fazendas", data["fazenda_id"]):
        raise ReferenceNotFoundError(
            "Fazenda nao encontrada. Verifique se o ID esta correto.", field="fazenda_id"
        )


def _ensure_unpaid(frete: Frete) -> None:
    if frete.pagamento_id is not None:
        raise PaymentLockedError("Frete ja vinculado a um pagamento nao pode ser alterado")


# ── Reads ────────────────────────────────────────────────────

async def list_fretes(
    db: AsyncSession,
    pagination: Pagination,
    data_inicio: date | None = None,
    data_fim: date | None = None,
    motorista_id: int | None = None,
    fazenda_id: int | None = None,
) -> tuple[list[dict], int]:
    filters = []
    if data_inicio:
        filters.append(Frete.data_frete >= data_inicio)
    if data_fim:
        filters.append(Frete.data_frete <= data_fim)
    if motorista_id is not None:
        filters.append(Frete.motorista_id == motorista_id)
    if fazenda_id is not None:
        filters.append(Frete.fazenda_id == fazenda_id)

    total = await db.scalar(select(func.count(Frete.id)).where(*filters)) or 0

    stmt = (
        _joined_select()
        .where(*filters)
        .order_by(Frete.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    rows = (await db.execute(stmt)).all()
    return [_to_out(row) for row in rows], total


async def get_frete(db: AsyncSession, frete_id: int) -> dict:
    row = (await db.execute(_joined_select().where(Frete.id == frete_id))).first()
    if row is None:
        raise ResourceNotFoundError("Frete nao encontrado")
    return _to_out(row)


async def list_pendentes(db: AsyncSession, motorista_id: int | None = None) -> list[dict]:
    """Unpaid shipments grouped by owner-operator, for building payment runs."""
    stmt = (
        select(Frete, Motorista.nome, Motorista.tipo)
        .outerjoin(Motorista, Motorista.id == Frete.motorista_id)
        .where(Frete.pagamento_id.is_(None))
        .order_by(Frete.motorista_id, Frete.data_frete, Frete.id)
    )
    if motorista_id is not None:
        stmt = stmt.where(Frete.motorista_id == motorista_id)

    grupos: dict[int, dict] = {}
    for frete, m_nome, m_tipo in (await db.execute(stmt)).all():
        grupo = grupos.get(frete.motorista_id)
        if grupo is None:
            grupo = grupos[frete.motorista_id] = {
                "proprietario_id": frete.motorista_id,
                "proprietario_nome": frete.motorista_nome or m_nome,
                "proprietario_tipo": m_tipo,
                "tipo_relatorio": tipo_relatorio(m_tipo),
                "quantidade_fretes": 0,
                "total_toneladas": 0.0,
                "valor_total": 0.0,
                "total_custos": 0.0,
                "resultado_total": 0.0,
                "caminhao_ids": [],
                "caminhao_placas": [],
                "fretes": [],
            }

        grupo["quantidade_fretes"] += 1
        grupo["total_toneladas"] += frete.toneladas or 0.0
        grupo["valor_total"] += frete.receita or 0.0
        grupo["total_custos"] += frete.custos or 0.0
        grupo["resultado_total"] += frete.resultado or 0.0
        if frete.caminhao_id not in grupo["caminhao_ids"]:
            grupo["caminhao_ids"].append(frete.caminhao_id)
        if frete.caminhao_placa and frete.caminhao_placa not in grupo["caminhao_placas"]:
            grupo["caminhao_placas"].append(frete.caminhao_placa)
        grupo["fretes"].append(FretePendente.model_validate(frete).model_dump())

    return sorted(grupos.values(), key=lambda g: (g["proprietario_nome"] or "").lower())


# ── Writes ───────────────────────────────────────────────────

async def create_frete(db: AsyncSession, body: FreteCreate) -> dict:
    data = body.model_dump(exclude={"id"})
    codigo = normalize_client_code("frete", body.id)

    async with transaction(db):
        await _check_references(db, data)

        if not data.get("motorista_nome"):
            data["motorista_nome"] = (await db.get(Motorista, data["motorista_id"])).nome
        if not data.get("caminhao_placa"):
            data["caminhao_placa"] = (await db.get(Veiculo, data["caminhao_id"])).placa
        if data.get("fazenda_id") is not None and not data.get("fazenda_nome"):
            data["fazenda_nome"] = (await db.get(Fazenda, data["fazenda_id"])).fazenda

        if data.get("receita") is None:
            data["receita"] = data["toneladas"] * data["valor_por_tonelada"]

        frete = Frete(**data, custos=0.0, resultado=data["receita"], codigo_frete=codigo)
        db.add(frete)
        await assign_code(db, frete, "frete")

        await recompute_farm_totals(db, frete.fazenda_id)

    logger.info(
        f"Frete {frete.codigo_frete} created",
        extra={"frete_id": frete.id, "fazenda_id": frete.fazenda_id},
    )
    await invalidate_cache("dashboard:*")
    return await get_frete(db, frete.id)


async def update_frete(db: AsyncSession, frete_id: int, body: FreteUpdate) -> dict:
    updates = body.model_dump(exclude_unset=True)

    async with transaction(db):
        frete = await db.get(Frete, frete_id)
        if frete is None:
            raise ResourceNotFoundError("Frete nao encontrado")
        _ensure_unpaid(frete)

        # Explicit nulls on required columns are not updates
        updates = {
            k: v for k, v in updates.items()
            if v is not None or k in ("fazenda_id", "fazenda_nome", "ticket",
                                      "numero_nota_fiscal", "variedade",
                                      "motorista_nome", "caminhao_placa")
        }
        if not updates:
            raise BusinessRuleError("Nenhum campo valido para atualizar")

        await _check_references(db, updates)

        # Denormalised names follow a changed reference unless sent explicitly
        def changed(key: str) -> bool:
            return key in updates and updates[key] != getattr(frete, key)

        if changed("motorista_id") and "motorista_nome" not in updates:
            updates["motorista_nome"] = (await db.get(Motorista, updates["motorista_id"])).nome
        if changed("caminhao_id") and "caminhao_placa" not in updates:
            updates["caminhao_placa"] = (await db.get(Veiculo, updates["caminhao_id"])).placa
        if changed("fazenda_id") and "fazenda_nome" not in updates:
            fazenda_id = updates["fazenda_id"]
            fazenda = await db.get(Fazenda, fazenda_id) if fazenda_id is not None else None
            updates["fazenda_nome"] = fazenda.fazenda if fazenda else None

        if "receita" not in updates and (
            "toneladas" in updates or "valor_por_tonelada" in updates
        ):
            toneladas = updates.get("toneladas", frete.toneladas)
            valor = updates.get("valor_por_tonelada", frete.valor_por_tonelada)
            updates["receita"] = toneladas * valor

        fazenda_antiga = frete.fazenda_id
        for key, value in updates.items():
            setattr(frete, key, value)
        await db.flush()

        await recompute_shipment_totals(db, frete.id)
        await recompute_farm_totals(db, fazenda_antiga)
        if frete.fazenda_id != fazenda_antiga:
            await recompute_farm_totals(db, frete.fazenda_id)

    logger.info(
        f"Frete {frete.codigo_frete} updated",
        extra={"frete_id": frete.id, "fields": sorted(updates)},
    )
    await invalidate_cache("dashboard:*")
    return await get_frete(db, frete.id)


async def delete_frete(db: AsyncSession, frete_id: int) -> None:
    """Delete a shipment with its cost entries and re-derive its farm."""
    async with transaction(db):
        frete = await db.get(Frete, frete_id)
        if frete is None:
            raise ResourceNotFoundError("Frete nao encontrado")
        _ensure_unpaid(frete)

        fazenda_id = frete.fazenda_id
        await db.execute(delete(Custo).where(Custo.frete_id == frete.id))
        await db.delete(frete)
        await db.flush()

        await recompute_farm_totals(db, fazenda_id)

    logger.info(f"Frete {frete_id} deleted", extra={"fazenda_id": fazenda_id})
    await invalidate_cache("dashboard:*")

"""Payment (pagamento) orchestrator.

Creating a payment links the covered shipments (``fretes.pagamento_id``)
in the same transaction, which payment-locks them.  Deleting the payment
unlinks them again.  The payment method is always copied from the driver's
registration and cannot be edited afterwards.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.middleware.exceptions import (
    BusinessRuleError,
    ReferenceNotFoundError,
    ResourceNotFoundError,
)
from app.models.frete import Frete
from app.models.motorista import Motorista
from app.models.pagamento import Pagamento
from app.schemas.pagamento import (
    DadosBancarios,
    DadosPix,
    Favorecido,
    PagamentoCreate,
    PagamentoOut,
    PagamentoUpdate,
    ResumoProprietario,
)
from app.services.fretes import tipo_relatorio
from app.utils.cache import invalidate_cache
from app.utils.numbering import assign_code, normalize_client_code
from app.utils.pagination import Pagination

logger = logging.getLogger(__name__)


def build_favorecido(motorista: Motorista) -> Favorecido:
    """Payee block: PIX data or bank data depending on the driver's method."""
    dados_pix = None
    dados_bancarios = None
    if motorista.tipo_pagamento == "pix":
        dados_pix = DadosPix(tipo_chave=motorista.chave_pix_tipo, chave=motorista.chave_pix)
    elif motorista.tipo_pagamento == "transferencia_bancaria":
        dados_bancarios = DadosBancarios(
            banco=motorista.banco,
            agencia=motorista.agencia,
            conta=motorista.conta,
            tipo_conta=motorista.tipo_conta,
        )
    return Favorecido(
        id=motorista.id,
        nome=motorista.nome,
        documento=motorista.documento or motorista.cpf,
        metodo_pagamento=motorista.tipo_pagamento,
        dados_pix=dados_pix,
        dados_bancarios=dados_bancarios,
    )


async def _to_out(db: AsyncSession, pagamento: Pagamento) -> dict:
    out = PagamentoOut.model_validate(pagamento)
    out.proprietario_id = pagamento.motorista_id
    out.proprietario_nome = pagamento.motorista_nome

    motorista = await db.get(Motorista, pagamento.motorista_id)
    if motorista is not None:
        out.proprietario_tipo = motorista.tipo
        out.tipo_relatorio = tipo_relatorio(motorista.tipo)
        out.favorecido = build_favorecido(motorista)
        out.metodo_pagamento = motorista.tipo_pagamento
    return out.model_dump()


async def resolve_pagamento(db: AsyncSession, ref: str) -> Pagamento:
    """Look a payment up by numeric id or by ``codigo_pagamento``."""
    pagamento = None
    if ref.isdigit():
        pagamento = await db.get(Pagamento, int(ref))
    if pagamento is None:
        pagamento = (await db.execute(
            select(Pagamento).where(Pagamento.codigo_pagamento == ref.strip().upper()).limit(1)
        )).scalar_one_or_none()
    if pagamento is None:
        raise ResourceNotFoundError("Pagamento nao encontrado")
    return pagamento


# ── Reads ────────────────────────────────────────────────────

async def resumo_fretes_por_proprietario(db: AsyncSession) -> list[dict]:
    """Paid shipments summed per owner-operator."""
    stmt = (
        select(
            Frete.motorista_id,
            func.coalesce(func.max(Frete.motorista_nome), func.max(Motorista.nome)),
            func.max(Motorista.tipo),
            func.count(Frete.id),
            func.coalesce(func.sum(Frete.toneladas), 0.0),
            func.coalesce(func.sum(Frete.receita), 0.0),
            func.coalesce(func.sum(Frete.custos), 0.0),
            func.coalesce(func.sum(Frete.resultado), 0.0),
        )
        .outerjoin(Motorista, Motorista.id == Frete.motorista_id)
        .where(Frete.pagamento_id.is_not(None))
        .group_by(Frete.motorista_id)
    )
    resumo = [
        ResumoProprietario(
            proprietario_id=row[0],
            proprietario_nome=row[1],
            proprietario_tipo=row[2],
            tipo_relatorio=tipo_relatorio(row[2]),
            quantidade_fretes=row[3],
            total_toneladas=float(row[4]),
            valor_total=float(row[5]),
            total_custos=float(row[6]),
            resultado_total=float(row[7]),
        ).model_dump()
        for row in (await db.execute(stmt)).all()
    ]
    return sorted(resumo, key=lambda r: (r["proprietario_nome"] or "").lower())


async def list_pagamentos(
    db: AsyncSession,
    pagination: Pagination,
    status: str | None = None,
    motorista_id: int | None = None,
) -> tuple[list[dict], int, list[dict]]:
    filters = []
    if status:
        filters.append(Pagamento.status == status)
    if motorista_id is not None:
        filters.append(Pagamento.motorista_id == motorista_id)

    total = await db.scalar(select(func.count(Pagamento.id)).where(*filters)) or 0
    result = await db.execute(
        select(Pagamento)
        .where(*filters)
        .order_by(Pagamento.created_at.desc(), Pagamento.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    rows = [await _to_out(db, p) for p in result.scalars().all()]
    return rows, total, await resumo_fretes_por_proprietario(db)


async def get_pagamento(db: AsyncSession, ref: str) -> dict:
    return await _to_out(db, await resolve_pagamento(db, ref))


# ── Writes ───────────────────────────────────────────────────

async def create_pagamento(db: AsyncSession, body: PagamentoCreate) -> dict:
    frete_ids = body.frete_ids

    async with transaction(db):
        motorista = await db.get(Motorista, body.motorista_id)
        if motorista is None:
            raise ReferenceNotFoundError("Proprietario nao encontrado", field="motorista_id")

        fretes = []
        if frete_ids:
            fretes = (await db.execute(
                select(Frete).where(Frete.id.in_(frete_ids)).order_by(Frete.id)
            )).scalars().all()

            encontrados = {f.id for f in fretes}
            faltando = [i for i in frete_ids if i not in encontrados]
            if faltando:
                raise BusinessRuleError(
                    f"Fretes nao encontrados: {','.join(map(str, faltando))}",
                    error_code="REFERENCE_NOT_FOUND",
                )

            pagos = [f.id for f in fretes if f.pagamento_id is not None]
            if pagos:
                raise BusinessRuleError(
                    f"Alguns fretes ja estao pagos: {','.join(map(str, pagos))}"
                )

            outros = [f.id for f in fretes if f.motorista_id != motorista.id]
            if outros:
                raise BusinessRuleError(
                    f"Fretes de outro proprietario: {','.join(map(str, outros))}"
                )

        valor_total = body.valor_total
        if valor_total is None:
            if not fretes:
                raise BusinessRuleError("Informe valor_total ou os fretes incluidos")
            valor_total = sum(f.receita or 0.0 for f in fretes)

        codigo = normalize_client_code("pagamento", body.id)
        pagamento = Pagamento(
            codigo_pagamento=codigo,
            motorista_id=motorista.id,
            motorista_nome=body.motorista_nome or motorista.nome,
            periodo_fretes=body.periodo_fretes,
            quantidade_fretes=(
                body.quantidade_fretes if body.quantidade_fretes is not None else len(fretes)
            ),
            fretes_incluidos=",".join(map(str, frete_ids)) or None,
            total_toneladas=(
                body.total_toneladas if body.total_toneladas is not None
                else sum(f.toneladas or 0.0 for f in fretes)
            ),
            valor_por_tonelada=body.valor_por_tonelada,
            valor_total=valor_total,
            data_pagamento=body.data_pagamento,
            status=body.status,
            metodo_pagamento=motorista.tipo_pagamento,
            comprovante_nome=body.comprovante_nome,
            comprovante_url=body.comprovante_url,
            comprovante_data_upload=body.comprovante_data_upload,
            observacoes=body.observacoes,
        )
        db.add(pagamento)
        await assign_code(db, pagamento, "pagamento")

        for frete in fretes:
            frete.pagamento_id = pagamento.id
        await db.flush()

    logger.info(
        f"Pagamento {pagamento.codigo_pagamento} created",
        extra={"pagamento_id": pagamento.id, "fretes": frete_ids},
    )
    await invalidate_cache("dashboard:*")
    return await _to_out(db, pagamento)


async def update_pagamento(db: AsyncSession, ref: str, body: PagamentoUpdate) -> dict:
    sent = body.model_dump(exclude_unset=True)
    updates = {k: v for k, v in sent.items()
               if v is not None or k in ("observacoes", "comprovante_nome",
                                         "comprovante_url", "comprovante_data_upload")}

    async with transaction(db):
        pagamento = await resolve_pagamento(db, ref)
        if "metodo_pagamento" in sent:
            raise BusinessRuleError(
                "metodo_pagamento nao pode ser alterado; ele segue o cadastro do proprietario"
            )
        if not updates:
            raise BusinessRuleError("Nenhum campo valido para atualizar")

        for key, value in updates.items():
            setattr(pagamento, key, value)

    logger.info(
        f"Pagamento {pagamento.codigo_pagamento} updated",
        extra={"pagamento_id": pagamento.id, "fields": sorted(updates)},
    )
    await invalidate_cache("dashboard:*")
    return await _to_out(db, pagamento)


async def delete_pagamento(db: AsyncSession, ref: str) -> None:
    """Delete a payment and return its shipments to the pending pool."""
    async with transaction(db):
        pagamento = await resolve_pagamento(db, ref)
        pagamento_id = pagamento.id

        await db.execute(
            update(Frete).where(Frete.pagamento_id == pagamento_id).values(pagamento_id=None)
        )
        await db.delete(pagamento)

    logger.info(f"Pagamento {pagamento_id} deleted; fretes unlinked")
    await invalidate_cache("dashboard:*")

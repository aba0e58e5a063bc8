"""Dashboard aggregates, cached in Redis for ``settings.redis_ttl`` seconds.

Each function returns ``(data, from_cache)`` so the router can flag cached
answers.  Writes that change the inputs call
``invalidate_cache("dashboard:*")``.
"""

from datetime import date

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.fazenda import Fazenda
from app.models.frete import Frete
from app.models.frota import Veiculo
from app.models.motorista import Motorista
from app.models.pagamento import Pagamento
from app.utils.cache import get_cache, set_cache

KPIS_KEY = "dashboard:kpis"
ROTAS_KEY = "dashboard:estatisticas-rotas"


def _pct(part: float, whole: float, default: float = 0.0) -> float:
    return (part / whole) * 100 if whole else default


async def compute_kpis(db: AsyncSession) -> dict:
    hoje = date.today()

    receita, custos, total_fretes = (await db.execute(
        select(
            func.coalesce(func.sum(Frete.receita), 0.0),
            func.coalesce(func.sum(Frete.custos), 0.0),
            func.count(Frete.id),
        )
    )).one()
    lucro = float(receita) - float(custos)

    ativos, regulares = (await db.execute(
        select(
            func.coalesce(func.sum(case((Motorista.status == "ativo", 1), else_=0)), 0),
            func.coalesce(func.sum(case(
                (
                    (Motorista.status == "ativo")
                    & or_(Motorista.cnh_validade.is_(None), Motorista.cnh_validade >= hoje),
                    1,
                ),
                else_=0,
            )), 0),
        )
    )).one()

    frota_total, disponiveis, frota_regular = (await db.execute(
        select(
            func.count(Veiculo.id),
            func.coalesce(func.sum(case((Veiculo.status == "disponivel", 1), else_=0)), 0),
            func.coalesce(func.sum(case(
                (
                    or_(Veiculo.validade_licenciamento.is_(None), Veiculo.validade_licenciamento >= hoje)
                    & or_(Veiculo.validade_seguro.is_(None), Veiculo.validade_seguro >= hoje),
                    1,
                ),
                else_=0,
            )), 0),
        )
    )).one()

    pendente, pago = (await db.execute(
        select(
            func.coalesce(func.sum(case((Pagamento.status == "pendente", Pagamento.valor_total), else_=0.0)), 0.0),
            func.coalesce(func.sum(case((Pagamento.status == "pago", Pagamento.valor_total), else_=0.0)), 0.0),
        )
    )).one()

    volume = await db.scalar(select(func.coalesce(func.sum(Fazenda.total_toneladas), 0.0)))

    # Compliance: share of active drivers with a valid licence and of
    # vehicles with valid registration and insurance, averaged
    saude_motoristas = _pct(regulares, ativos, default=100.0)
    saude_frota = _pct(frota_regular, frota_total, default=100.0)

    return {
        "receitaTotal": float(receita),
        "custosTotal": float(custos),
        "lucroTotal": lucro,
        "margemLucro": round(_pct(lucro, float(receita)), 2),
        "totalFretes": int(total_fretes),
        "motoristasAtivos": int(ativos),
        "caminhoesDisponiveis": int(disponiveis),
        "saudeNormativa": round((saude_motoristas + saude_frota) / 2, 2),
        "pagamentosPendentes": float(pendente),
        "pagamentosPagos": float(pago),
        "volumeColheitaTotal": float(volume or 0.0),
    }


async def compute_estatisticas_rotas(db: AsyncSession) -> list[dict]:
    lucro = func.coalesce(func.sum(Frete.receita - Frete.custos), 0.0)
    rows = (await db.execute(
        select(
            Frete.origem,
            Frete.destino,
            func.count(Frete.id),
            func.coalesce(func.sum(Frete.receita), 0.0),
            func.coalesce(func.sum(Frete.custos), 0.0),
            lucro.label("lucro_total"),
        )
        .group_by(Frete.origem, Frete.destino)
        .order_by(lucro.desc())
    )).all()

    return [
        {
            "origem": origem,
            "destino": destino,
            "total_fretes": int(total),
            "receita_total": float(receita),
            "custos_total": float(custos),
            "lucro_total": float(lucro_total),
        }
        for origem, destino, total, receita, custos, lucro_total in rows
    ]


async def get_kpis(db: AsyncSession) -> tuple[dict, bool]:
    cached = await get_cache(KPIS_KEY)
    if cached is not None:
        return cached, True

    data = await compute_kpis(db)
    await set_cache(KPIS_KEY, data, settings.redis_ttl)
    return data, False


async def get_estatisticas_rotas(db: AsyncSession) -> tuple[list[dict], bool]:
    cached = await get_cache(ROTAS_KEY)
    if cached is not None:
        return cached, True

    data = await compute_estatisticas_rotas(db)
    await set_cache(ROTAS_KEY, data, settings.redis_ttl)
    return data, False

"""Totals reconciler tests (service level, no HTTP)."""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.custo import Custo
from app.models.fazenda import Fazenda
from app.models.frete import Frete
from app.services.totals import recompute_all, recompute_farm_totals, recompute_shipment_totals


async def _frete(db: AsyncSession, motorista, caminhao, fazenda, **overrides) -> Frete:
    values = dict(
        origem="Rio Verde - GO",
        destino="Porto de Santos - SP",
        motorista_id=motorista.id,
        caminhao_id=caminhao.id,
        fazenda_id=fazenda.id if fazenda else None,
        mercadoria="Soja",
        data_frete=date(2026, 3, 10),
        quantidade_sacas=400.0,
        toneladas=10.0,
        valor_por_tonelada=150.0,
        receita=1500.0,
        # Deliberately stale
        custos=999.0,
        resultado=-1.0,
    )
    values.update(overrides)
    frete = Frete(**values)
    db.add(frete)
    await db.flush()
    return frete


def _custo(frete: Frete, valor: float) -> Custo:
    return Custo(
        frete_id=frete.id,
        tipo="pedagio",
        descricao="Pedagio BR-060",
        valor=valor,
        data=date(2026, 3, 10),
    )


@pytest.mark.unit
@pytest.mark.asyncio
class TestShipmentTotals:

    async def test_sums_cost_entries(self, db_session, motorista, caminhao, fazenda):
        frete = await _frete(db_session, motorista, caminhao, fazenda)
        db_session.add_all([_custo(frete, 200.0), _custo(frete, 50.5)])
        await db_session.flush()

        result = await recompute_shipment_totals(db_session, frete.id)

        assert result.custos == pytest.approx(250.5)
        assert result.resultado == pytest.approx(1500.0 - 250.5)

    async def test_no_costs_means_zero(self, db_session, motorista, caminhao, fazenda):
        frete = await _frete(db_session, motorista, caminhao, fazenda)

        result = await recompute_shipment_totals(db_session, frete.id)

        assert result.custos == 0.0
        assert result.resultado == 1500.0

    async def test_is_idempotent(self, db_session, motorista, caminhao, fazenda):
        frete = await _frete(db_session, motorista, caminhao, fazenda)
        db_session.add(_custo(frete, 120.0))
        await db_session.flush()

        first = await recompute_shipment_totals(db_session, frete.id)
        snapshot = (first.custos, first.resultado)
        second = await recompute_shipment_totals(db_session, frete.id)

        assert (second.custos, second.resultado) == snapshot

    async def test_missing_shipment_returns_none(self, db_session):
        assert await recompute_shipment_totals(db_session, 424242) is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestFarmTotals:

    async def test_sums_linked_shipments(self, db_session, motorista, caminhao, fazenda):
        await _frete(db_session, motorista, caminhao, fazenda)
        await _frete(
            db_session, motorista, caminhao, fazenda,
            data_frete=date(2026, 3, 15), quantidade_sacas=200.0,
            toneladas=5.0, receita=800.0,
        )

        result = await recompute_farm_totals(db_session, fazenda.id)

        assert result.total_toneladas == pytest.approx(15.0)
        assert result.total_sacas_carregadas == pytest.approx(600.0)
        assert result.faturamento_total == pytest.approx(2300.0)
        assert result.ultimo_frete == date(2026, 3, 15)

    async def test_farm_without_shipments_is_zeroed(self, db_session, fazenda):
        fazenda.total_toneladas = 77.0
        fazenda.faturamento_total = 1.0
        await db_session.flush()

        result = await recompute_farm_totals(db_session, fazenda.id)

        assert result.total_toneladas == 0.0
        assert result.total_sacas_carregadas == 0.0
        assert result.faturamento_total == 0.0
        assert result.ultimo_frete is None

    async def test_none_id_is_ignored(self, db_session):
        assert await recompute_farm_totals(db_session, None) is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestRecomputeAll:

    async def test_repairs_every_aggregate(self, db_session, motorista, caminhao, fazenda):
        frete = await _frete(db_session, motorista, caminhao, fazenda)
        db_session.add(_custo(frete, 300.0))
        await db_session.flush()

        counts = await recompute_all(db_session)

        assert counts == {"fretes": 1, "fazendas": 1}
        assert frete.custos == 300.0
        assert frete.resultado == 1200.0
        farm = await db_session.get(Fazenda, fazenda.id)
        assert farm.faturamento_total == 1500.0

    async def test_second_run_changes_nothing(self, db_session, motorista, caminhao, fazenda):
        frete = await _frete(db_session, motorista, caminhao, fazenda)
        db_session.add(_custo(frete, 75.0))
        await db_session.flush()

        await recompute_all(db_session)
        before = (frete.custos, frete.resultado, fazenda.total_toneladas, fazenda.faturamento_total)
        await recompute_all(db_session)
        after = (frete.custos, frete.resultado, fazenda.total_toneladas, fazenda.faturamento_total)

        assert before == after

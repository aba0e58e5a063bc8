"""Shipment (frete) endpoint tests."""

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.custo import Custo
from app.models.fazenda import Fazenda
from app.models.frete import Frete
from app.models.frota import Veiculo
from app.models.pagamento import Pagamento


async def _mark_paid(db: AsyncSession, frete_id: int, motorista_id: int) -> None:
    pagamento = Pagamento(
        motorista_id=motorista_id,
        motorista_nome="Joao Silva",
        periodo_fretes="Marco/2026",
        valor_total=1500.0,
        data_pagamento=date(2026, 3, 31),
        metodo_pagamento="pix",
    )
    db.add(pagamento)
    await db.flush()
    frete = await db.get(Frete, frete_id)
    frete.pagamento_id = pagamento.id
    await db.commit()


@pytest.mark.api
@pytest.mark.asyncio
class TestCreateFrete:

    async def test_create_derives_revenue_and_code(self, client: AsyncClient, frete_payload):
        resp = await client.post("/fretes", json=frete_payload)

        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Frete criado com sucesso"
        data = body["data"]
        assert data["receita"] == 1500.0
        assert data["custos"] == 0.0
        assert data["resultado"] == 1500.0
        assert data["codigo_frete"] == f"FRT-{date.today().year}-{data['id']:03d}"
        assert data["motorista_nome"] == "Joao Silva"
        assert data["caminhao_placa"] == "ABC-1D23"
        assert data["fazenda_nome"] == "Fazenda Santa Rita"
        assert data["proprietario_id"] == frete_payload["motorista_id"]
        assert data["motorista_tipo"] == "terceirizado"

    async def test_explicit_revenue_is_kept(self, client: AsyncClient, frete_payload):
        resp = await client.post("/fretes", json={**frete_payload, "receita": 1600})

        assert resp.status_code == 201
        assert resp.json()["data"]["receita"] == 1600.0

    async def test_client_code_is_kept_when_well_formed(self, client: AsyncClient, frete_payload):
        resp = await client.post("/fretes", json={**frete_payload, "id": "frt-2026-abc"})

        assert resp.json()["data"]["codigo_frete"] == "FRT-2026-ABC"

    async def test_derived_code_skips_one_taken_by_client(
        self, client: AsyncClient, frete_payload
    ):
        year = date.today().year
        taken = f"FRT-{year}-002"
        first = await client.post("/fretes", json={**frete_payload, "id": taken})

        resp = await client.post("/fretes", json=frete_payload)

        assert first.json()["data"]["codigo_frete"] == taken
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["id"] == 2
        assert data["codigo_frete"] == f"{taken}-2"

    async def test_duplicate_client_code_is_rejected(self, client: AsyncClient, frete_payload):
        await client.post("/fretes", json={**frete_payload, "id": "FRT-2026-ABC"})

        resp = await client.post("/fretes", json={**frete_payload, "id": "FRT-2026-ABC"})

        assert resp.status_code == 400
        assert resp.json()["code"] == "DUPLICATE_RECORD"

    async def test_malformed_client_code_is_replaced(self, client: AsyncClient, frete_payload):
        resp = await client.post("/fretes", json={**frete_payload, "id": "qualquer"})

        data = resp.json()["data"]
        assert data["codigo_frete"].startswith("FRT-")
        assert data["codigo_frete"] != "QUALQUER"

    async def test_create_updates_farm_totals(
        self, client: AsyncClient, db_session: AsyncSession, frete_payload, fazenda
    ):
        await client.post("/fretes", json=frete_payload)

        farm = await db_session.get(Fazenda, fazenda.id, populate_existing=True)
        assert farm.total_toneladas == 10.0
        assert farm.total_sacas_carregadas == 400.0
        assert farm.faturamento_total == 1500.0
        assert farm.ultimo_frete == date(2026, 3, 10)

    async def test_missing_motorista_reports_field(self, client: AsyncClient, frete_payload):
        resp = await client.post("/fretes", json={**frete_payload, "motorista_id": 9999})

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["code"] == "REFERENCE_NOT_FOUND"
        assert body["field"] == "motorista_id"

    async def test_missing_caminhao_reports_field(self, client: AsyncClient, frete_payload):
        resp = await client.post("/fretes", json={**frete_payload, "caminhao_id": 9999})

        assert resp.status_code == 400
        assert resp.json()["field"] == "caminhao_id"

    async def test_zero_tonnage_is_rejected(self, client: AsyncClient, frete_payload):
        resp = await client.post("/fretes", json={**frete_payload, "toneladas": 0})

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["field"] == "toneladas"

    async def test_failed_create_inserts_nothing(
        self, client: AsyncClient, db_session: AsyncSession, frete_payload
    ):
        await client.post("/fretes", json={**frete_payload, "fazenda_id": 9999})

        assert await db_session.scalar(select(func.count(Frete.id))) == 0


@pytest.mark.api
@pytest.mark.asyncio
class TestReadFretes:

    async def test_list_with_meta(self, client: AsyncClient, frete):
        resp = await client.get("/fretes")

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Fretes listados com sucesso"
        assert [f["id"] for f in body["data"]] == [frete["id"]]
        assert body["meta"]["total"] == 1

    async def test_filter_by_date_range(self, client: AsyncClient, frete):
        resp = await client.get("/fretes", params={"data_inicio": "2026-04-01"})

        assert resp.json()["data"] == []

    async def test_proprietario_id_filters_like_motorista_id(
        self, client: AsyncClient, frete, motorista_proprio
    ):
        resp = await client.get("/fretes", params={"proprietario_id": motorista_proprio.id})

        assert resp.json()["data"] == []

    async def test_get_by_id(self, client: AsyncClient, frete):
        resp = await client.get(f"/fretes/{frete['id']}")

        assert resp.status_code == 200
        assert resp.json()["data"]["codigo_frete"] == frete["codigo_frete"]

    async def test_get_unknown_is_404(self, client: AsyncClient):
        resp = await client.get("/fretes/9999")

        assert resp.status_code == 404
        assert resp.json()["message"] == "Frete nao encontrado"


@pytest.mark.api
@pytest.mark.asyncio
class TestUpdateFrete:

    async def test_tonnage_change_recomputes_revenue_and_result(
        self, client: AsyncClient, frete, custo_payload
    ):
        await client.post("/custos", json=custo_payload(frete["id"], valor=200.0))

        resp = await client.put(f"/fretes/{frete['id']}", json={"toneladas": 12})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["receita"] == 1800.0
        assert data["custos"] == 200.0
        assert data["resultado"] == 1600.0

    async def test_moving_to_another_farm_updates_both(
        self, client: AsyncClient, db_session: AsyncSession, frete, fazenda, outra_fazenda
    ):
        resp = await client.put(f"/fretes/{frete['id']}", json={"fazenda_id": outra_fazenda.id})

        assert resp.status_code == 200
        old = await db_session.get(Fazenda, fazenda.id, populate_existing=True)
        new = await db_session.get(Fazenda, outra_fazenda.id, populate_existing=True)
        assert old.total_toneladas == 0.0
        assert old.faturamento_total == 0.0
        assert old.ultimo_frete is None
        assert new.total_toneladas == 10.0
        assert new.faturamento_total == 1500.0
        assert resp.json()["data"]["fazenda_nome"] == "Fazenda Boa Vista"

    async def test_reassigned_driver_and_truck_refresh_names(
        self, client: AsyncClient, db_session: AsyncSession, frete, motorista_proprio
    ):
        truck = Veiculo(
            codigo_frota="FROTA-002", placa="DEF-4G56", modelo="Volvo FH",
            tipo_veiculo="TRUCK", status="disponivel", proprietario_tipo="PROPRIO",
        )
        db_session.add(truck)
        await db_session.commit()

        resp = await client.put(
            f"/fretes/{frete['id']}",
            json={"motorista_id": motorista_proprio.id, "caminhao_id": truck.id},
        )

        data = resp.json()["data"]
        assert data["motorista_nome"] == "Carlos Souza"
        assert data["caminhao_placa"] == "DEF-4G56"
        assert data["motorista_tipo"] == "proprio"

    async def test_explicit_name_wins_over_reference(
        self, client: AsyncClient, frete, outra_fazenda
    ):
        resp = await client.put(
            f"/fretes/{frete['id']}",
            json={"fazenda_id": outra_fazenda.id, "fazenda_nome": "Boa Vista (talhao 3)"},
        )

        assert resp.json()["data"]["fazenda_nome"] == "Boa Vista (talhao 3)"

    async def test_empty_update_is_rejected(self, client: AsyncClient, frete):
        resp = await client.put(f"/fretes/{frete['id']}", json={})

        assert resp.status_code == 400
        assert resp.json()["message"] == "Nenhum campo valido para atualizar"

    async def test_update_unknown_is_404(self, client: AsyncClient):
        resp = await client.put("/fretes/9999", json={"origem": "Jatai - GO"})

        assert resp.status_code == 404

    async def test_paid_shipment_is_locked(
        self, client: AsyncClient, db_session: AsyncSession, frete, motorista
    ):
        await _mark_paid(db_session, frete["id"], motorista.id)

        resp = await client.put(f"/fretes/{frete['id']}", json={"toneladas": 20})

        assert resp.status_code == 400
        assert resp.json()["code"] == "PAYMENT_LOCKED"


@pytest.mark.api
@pytest.mark.asyncio
class TestDeleteFrete:

    async def test_delete_removes_costs_and_farm_totals(
        self, client: AsyncClient, db_session: AsyncSession, frete, fazenda, custo_payload
    ):
        await client.post("/custos", json=custo_payload(frete["id"]))

        resp = await client.delete(f"/fretes/{frete['id']}")

        assert resp.status_code == 200
        assert resp.json()["message"] == "Frete removido com sucesso"
        assert await db_session.scalar(select(func.count(Custo.id))) == 0
        farm = await db_session.get(Fazenda, fazenda.id, populate_existing=True)
        assert farm.total_toneladas == 0.0

    async def test_paid_shipment_cannot_be_deleted(
        self, client: AsyncClient, db_session: AsyncSession, frete, motorista
    ):
        await _mark_paid(db_session, frete["id"], motorista.id)

        resp = await client.delete(f"/fretes/{frete['id']}")

        assert resp.status_code == 400
        assert await db_session.get(Frete, frete["id"]) is not None


@pytest.mark.api
@pytest.mark.asyncio
class TestPendentes:

    async def test_groups_unpaid_by_owner(
        self, client: AsyncClient, frete_payload, motorista_proprio
    ):
        await client.post("/fretes", json=frete_payload)
        await client.post("/fretes", json={**frete_payload, "toneladas": 5})
        await client.post("/fretes", json={**frete_payload, "motorista_id": motorista_proprio.id})

        resp = await client.get("/fretes/pendentes")

        assert resp.status_code == 200
        grupos = resp.json()["data"]
        # Sorted by owner name
        assert [g["proprietario_nome"] for g in grupos] == ["Carlos Souza", "Joao Silva"]
        carlos, joao = grupos
        assert carlos["tipo_relatorio"] == "GUIA_INTERNA"
        assert joao["tipo_relatorio"] == "PAGAMENTO_TERCEIRO"
        assert joao["quantidade_fretes"] == 2
        assert joao["total_toneladas"] == 15.0
        assert joao["valor_total"] == 2250.0
        assert joao["caminhao_placas"] == ["ABC-1D23"]

    async def test_paid_shipments_are_excluded(
        self, client: AsyncClient, db_session: AsyncSession, frete, motorista
    ):
        await _mark_paid(db_session, frete["id"], motorista.id)

        resp = await client.get("/fretes/pendentes")

        assert resp.json()["data"] == []

    async def test_filter_by_owner(self, client: AsyncClient, frete, motorista):
        resp = await client.get("/fretes/pendentes", params={"motorista_id": str(motorista.id)})

        grupos = resp.json()["data"]
        assert len(grupos) == 1
        assert grupos[0]["proprietario_id"] == motorista.id

    async def test_non_numeric_owner_is_rejected(self, client: AsyncClient):
        resp = await client.get("/fretes/pendentes", params={"motorista_id": "abc"})

        assert resp.status_code == 400
        assert resp.json()["message"] == "motorista_id invalido"

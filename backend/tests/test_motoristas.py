"""Driver / owner-operator (motorista) endpoint tests."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.frota import Veiculo


@pytest.fixture
def motorista_payload() -> dict:
    return {
        "nome": "Pedro Alves",
        "cpf": "987.654.321-00",
        "telefone": "(64) 98888-7777",
        "email": "",
        "tipo": "agregado",
        "tipo_pagamento": "pix",
        "chave_pix_tipo": "telefone",
        "chave_pix": "64988887777",
    }


@pytest.mark.api
@pytest.mark.asyncio
class TestMotoristas:

    async def test_create_assigns_code(self, client: AsyncClient, motorista_payload):
        resp = await client.post("/motoristas", json=motorista_payload)

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["codigo_motorista"].startswith("MOT-")
        # Blank optional strings are stored as null
        assert data["email"] is None
        assert data["status"] == "ativo"

    async def test_pix_requires_key(self, client: AsyncClient, motorista_payload):
        resp = await client.post("/motoristas", json={**motorista_payload, "chave_pix": ""})

        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    async def test_bank_transfer_requires_account(self, client: AsyncClient, motorista_payload):
        resp = await client.post(
            "/motoristas",
            json={**motorista_payload, "tipo_pagamento": "transferencia_bancaria", "banco": "Sicoob"},
        )

        assert resp.status_code == 400

    async def test_list_filters_and_search(
        self, client: AsyncClient, motorista, motorista_proprio
    ):
        resp = await client.get("/motoristas", params={"tipo": "proprio"})
        assert [m["nome"] for m in resp.json()["data"]] == ["Carlos Souza"]

        resp = await client.get("/motoristas", params={"busca": "joao"})
        assert [m["nome"] for m in resp.json()["data"]] == ["Joao Silva"]

    async def test_bind_vehicle(
        self, client: AsyncClient, db_session: AsyncSession, motorista, caminhao
    ):
        resp = await client.put(f"/motoristas/{motorista.id}", json={"veiculo_id": caminhao.id})

        assert resp.status_code == 200
        vinculado = resp.json()["data"]["veiculo_vinculado"]
        assert vinculado["id"] == caminhao.id
        assert vinculado["placa"] == "ABC-1D23"
        row = await db_session.get(Veiculo, caminhao.id, populate_existing=True)
        assert row.motorista_fixo_id == motorista.id

    async def test_bind_unknown_vehicle_reports_field(self, client: AsyncClient, motorista):
        resp = await client.put(f"/motoristas/{motorista.id}", json={"veiculo_id": 9999})

        assert resp.status_code == 400
        assert resp.json()["field"] == "veiculo_id"

    async def test_update_fields(self, client: AsyncClient, motorista):
        resp = await client.put(f"/motoristas/{motorista.id}", json={"status": "ferias"})

        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "ferias"

    async def test_update_rejects_bad_email(self, client: AsyncClient, motorista):
        resp = await client.put(f"/motoristas/{motorista.id}", json={"email": "sem-arroba"})

        assert resp.status_code == 400

    async def test_delete_without_history(self, client: AsyncClient, motorista_proprio):
        resp = await client.delete(f"/motoristas/{motorista_proprio.id}")

        assert resp.status_code == 200
        assert (await client.get(f"/motoristas/{motorista_proprio.id}")).status_code == 404

    async def test_delete_with_shipments_is_rejected(
        self, client: AsyncClient, frete, motorista
    ):
        resp = await client.delete(f"/motoristas/{motorista.id}")

        assert resp.status_code == 400
        assert resp.json()["code"] == "BUSINESS_RULE_VIOLATION"

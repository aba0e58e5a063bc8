"""Fleet vehicle (frota) endpoint tests."""

import pytest
from httpx import AsyncClient

from app.utils.veiculos import format_placa, normalize_veiculo_payload


@pytest.mark.unit
class TestVeiculoNormalization:

    def test_format_placa(self):
        assert format_placa(" abc1d23 ") == "ABC-1D23"
        assert format_placa("abc-1234") == "ABC-1234"

    def test_light_truck_has_no_trailer(self):
        out = normalize_veiculo_payload({
            "placa": "qwe1234", "placa_carreta": "zzz9999", "tipo_veiculo": "truck",
            "modelo": "VW 24.280",
        })

        assert out["tipo_veiculo"] == "TRUCK"
        assert out["placa_carreta"] is None
        assert out["proprietario_tipo"] == "PROPRIO"

    def test_decimal_comma(self):
        out = normalize_veiculo_payload({"capacidade_toneladas": "14,5", "km_atual": ""})

        assert out["capacidade_toneladas"] == 14.5
        assert out["km_atual"] is None

    def test_partial_leaves_unsent_keys_out(self):
        out = normalize_veiculo_payload({"status": "manutencao"}, partial=True)

        assert out == {"status": "manutencao"}


@pytest.mark.api
@pytest.mark.asyncio
class TestFrota:

    async def test_create_normalizes_plate(self, client: AsyncClient):
        resp = await client.post("/frota", json={
            "placa": "bra2e19",
            "placa_carreta": "bra3f20",
            "modelo": "Volvo FH 540",
            "tipo_veiculo": "bitrem",
            "capacidade_toneladas": "37,0",
        })

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["placa"] == "BRA-2E19"
        assert data["placa_carreta"] == "BRA-3F20"
        assert data["tipo_veiculo"] == "BITREM"
        assert data["capacidade_toneladas"] == 37.0
        assert data["codigo_frota"].startswith("FROTA-")

    async def test_duplicate_plate_is_rejected(self, client: AsyncClient, caminhao):
        resp = await client.post("/frota", json={
            "placa": "abc1d23", "modelo": "Outro", "tipo_veiculo": "TRUCK",
        })

        assert resp.status_code == 400
        assert resp.json()["code"] == "DUPLICATE_RECORD"

    async def test_switch_to_light_type_clears_trailer(self, client: AsyncClient, caminhao):
        resp = await client.put(f"/frota/{caminhao.id}", json={"tipo_veiculo": "toco"})

        assert resp.status_code == 200
        assert resp.json()["data"]["placa_carreta"] is None

    async def test_delete_with_shipments_is_rejected(self, client: AsyncClient, frete, caminhao):
        resp = await client.delete(f"/frota/{caminhao.id}")

        assert resp.status_code == 400

    async def test_delete_unused_vehicle(self, client: AsyncClient, caminhao):
        resp = await client.delete(f"/frota/{caminhao.id}")

        assert resp.status_code == 200
        assert (await client.get(f"/frota/{caminhao.id}")).status_code == 404

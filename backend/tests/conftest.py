"""Pytest configuration and fixtures for the fretes API tests.

Every test gets a fresh in-memory SQLite database (aiosqlite) with the full
schema, an HTTP client wired to it, and an in-memory Redis stand-in so the
dashboard cache works without a server.
"""

import fnmatch
from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models.fazenda import Fazenda
from app.models.frota import Veiculo
from app.models.motorista import Motorista
from app.utils import cache


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine():
    """In-memory database shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting rows outside the API."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client; each request gets its own session, as in production."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Redis Fixtures ───────────────────────────────────────────────

class FakeRedis:
    """In-memory subset of redis.asyncio.Redis used by app.utils.cache."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def scan_iter(self, match="*"):
        for key in list(self.store):
            if fnmatch.fnmatch(key, match):
                yield key

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    async def ping(self):
        return True

    async def aclose(self):
        pass


@pytest.fixture(autouse=True)
def redis_client(monkeypatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(cache, "_redis_client", fake)
    return fake


# ── Test Data Fixtures ───────────────────────────────────────────

@pytest_asyncio.fixture
async def motorista(db_session: AsyncSession) -> Motorista:
    """Third-party owner-operator paid by PIX."""
    motorista = Motorista(
        codigo_motorista="MOT-2026-001",
        nome="Joao Silva",
        cpf="123.456.789-00",
        telefone="(62) 99999-0001",
        status="ativo",
        tipo="terceirizado",
        tipo_pagamento="pix",
        chave_pix_tipo="cpf",
        chave_pix="12345678900",
    )
    db_session.add(motorista)
    await db_session.commit()
    return motorista


@pytest_asyncio.fixture
async def motorista_proprio(db_session: AsyncSession) -> Motorista:
    """Company driver paid by bank transfer."""
    motorista = Motorista(
        codigo_motorista="MOT-2026-002",
        nome="Carlos Souza",
        telefone="(62) 99999-0002",
        status="ativo",
        tipo="proprio",
        tipo_pagamento="transferencia_bancaria",
        banco="Banco do Brasil",
        agencia="1234",
        conta="56789-0",
        tipo_conta="corrente",
    )
    db_session.add(motorista)
    await db_session.commit()
    return motorista


@pytest_asyncio.fixture
async def caminhao(db_session: AsyncSession) -> Veiculo:
    veiculo = Veiculo(
        codigo_frota="FROTA-001",
        placa="ABC-1D23",
        placa_carreta="XYZ-9876",
        modelo="Scania R450",
        tipo_veiculo="CARRETA",
        capacidade_toneladas=35.0,
        status="disponivel",
        proprietario_tipo="PROPRIO",
    )
    db_session.add(veiculo)
    await db_session.commit()
    return veiculo


async def _fazenda(db_session: AsyncSession, nome: str) -> Fazenda:
    fazenda = Fazenda(
        fazenda=nome,
        estado="GO",
        proprietario="Familia Caramello",
        mercadoria="Soja",
        safra="2025/2026",
        preco_por_tonelada=120.0,
        peso_medio_saca=25.0,
        total_sacas_carregadas=0.0,
        total_toneladas=0.0,
        faturamento_total=0.0,
    )
    db_session.add(fazenda)
    await db_session.commit()
    return fazenda


@pytest_asyncio.fixture
async def fazenda(db_session: AsyncSession) -> Fazenda:
    return await _fazenda(db_session, "Fazenda Santa Rita")


@pytest_asyncio.fixture
async def outra_fazenda(db_session: AsyncSession) -> Fazenda:
    return await _fazenda(db_session, "Fazenda Boa Vista")


@pytest.fixture
def frete_payload(motorista, caminhao, fazenda) -> dict:
    """Body for POST /fretes: 10 t at 150/t, so receita = 1500."""
    return {
        "origem": "Rio Verde - GO",
        "destino": "Porto de Santos - SP",
        "motorista_id": motorista.id,
        "caminhao_id": caminhao.id,
        "fazenda_id": fazenda.id,
        "mercadoria": "Soja",
        "data_frete": date(2026, 3, 10).isoformat(),
        "quantidade_sacas": 400,
        "toneladas": 10,
        "valor_por_tonelada": 150,
    }


@pytest_asyncio.fixture
async def frete(client: AsyncClient, frete_payload: dict) -> dict:
    """A shipment created through the API."""
    response = await client.post("/fretes", json=frete_payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def custo_payload():
    """Builder for POST /custos bodies."""

    def build(frete_id: int, valor: float = 200.0, **extra) -> dict:
        body = {
            "frete_id": frete_id,
            "tipo": "combustivel",
            "descricao": "Diesel S10",
            "valor": valor,
            "data": date(2026, 3, 11).isoformat(),
            "litros": 35.5,
        }
        body.update(extra)
        return body

    return build


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: HTTP API tests")
    config.addinivalue_line("markers", "cache: Redis cache tests")

"""Pydantic schemas for farms (fazendas)."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class FazendaCreate(BaseModel):
    fazenda: str = Field(..., min_length=1, max_length=255)
    estado: str = Field(..., min_length=2, max_length=2)
    proprietario: str = Field(..., min_length=1, max_length=255)
    mercadoria: str = Field(..., min_length=1, max_length=100)
    variedade: str | None = None
    safra: str = Field(..., min_length=1, max_length=20)
    preco_por_tonelada: float = Field(..., ge=0)
    peso_medio_saca: float = Field(25.0, gt=0)
    colheita_finalizada: bool = False


class FazendaUpdate(BaseModel):
    """Descriptive fields only; the harvest totals are derived."""
    fazenda: str | None = Field(None, min_length=1, max_length=255)
    estado: str | None = Field(None, min_length=2, max_length=2)
    proprietario: str | None = Field(None, min_length=1, max_length=255)
    mercadoria: str | None = Field(None, min_length=1, max_length=100)
    variedade: str | None = None
    safra: str | None = Field(None, min_length=1, max_length=20)
    preco_por_tonelada: float | None = Field(None, ge=0)
    peso_medio_saca: float | None = Field(None, gt=0)
    colheita_finalizada: bool | None = None


class FazendaOut(BaseModel):
    id: int
    codigo_fazenda: str | None
    fazenda: str
    estado: str
    proprietario: str
    mercadoria: str
    variedade: str | None = None
    safra: str
    preco_por_tonelada: float
    peso_medio_saca: float
    total_sacas_carregadas: float
    total_toneladas: float
    faturamento_total: float
    ultimo_frete: date | None = None
    colheita_finalizada: bool
    created_at: datetime

    # ── Aggregates over linked shipments ─────────────────────
    total_fretes_realizados: int = 0
    total_custos_operacionais: float = 0.0
    lucro_liquido: float = 0.0
    ultimo_frete_id: int | None = None
    ultimo_frete_motorista: str | None = None
    ultimo_frete_placa: str | None = None
    ultimo_frete_origem: str | None = None
    ultimo_frete_destino: str | None = None
    ultimo_frete_data: date | None = None

    model_config = {"from_attributes": True}

"""Pydantic schemas for cost entries (custos)."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

TipoCusto = Literal["combustivel", "manutencao", "pedagio", "outros"]


class CustoCreate(BaseModel):
    frete_id: int
    tipo: TipoCusto
    descricao: str = Field(..., min_length=1, max_length=255)
    valor: float = Field(..., gt=0)
    data: date
    comprovante: bool = False
    observacoes: str | None = None
    motorista: str | None = None
    caminhao: str | None = None
    rota: str | None = None
    litros: float | None = Field(None, ge=0)
    tipo_combustivel: str | None = None


class CustoUpdate(BaseModel):
    frete_id: int | None = None
    tipo: TipoCusto | None = None
    descricao: str | None = Field(None, min_length=1, max_length=255)
    valor: float | None = Field(None, gt=0)
    data: date | None = None
    comprovante: bool | None = None
    observacoes: str | None = None
    motorista: str | None = None
    caminhao: str | None = None
    rota: str | None = None
    litros: float | None = Field(None, ge=0)
    tipo_combustivel: str | None = None


class CustoOut(BaseModel):
    id: int
    frete_id: int
    tipo: str
    descricao: str
    valor: float
    data: date
    comprovante: bool
    observacoes: str | None = None
    motorista: str | None = None
    caminhao: str | None = None
    rota: str | None = None
    litros: float | None = None
    tipo_combustivel: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CustosCriados(BaseModel):
    """Result of a batch create."""
    ids: list[int]
    totalCriados: int
    frete_id: int

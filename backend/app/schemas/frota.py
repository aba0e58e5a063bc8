"""Pydantic schemas for fleet vehicles (frota)."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from app.utils.veiculos import normalize_veiculo_payload

StatusVeiculo = Literal["disponivel", "em_viagem", "manutencao", "inativo"]


class VeiculoCreate(BaseModel):
    placa: str = Field(..., min_length=7, max_length=10)
    placa_carreta: str | None = Field(None, max_length=10)
    modelo: str = Field(..., min_length=1, max_length=100)
    tipo_veiculo: str = Field(..., min_length=1, max_length=30)
    capacidade_toneladas: float | None = Field(None, ge=0)
    km_atual: float | None = Field(None, ge=0)
    status: StatusVeiculo = "disponivel"
    proprietario_tipo: str = "PROPRIO"
    motorista_fixo_id: int | None = None
    validade_licenciamento: date | None = None
    validade_seguro: date | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        if isinstance(data, dict):
            return normalize_veiculo_payload(data)
        return data


class VeiculoUpdate(BaseModel):
    placa: str | None = Field(None, min_length=7, max_length=10)
    placa_carreta: str | None = Field(None, max_length=10)
    modelo: str | None = Field(None, min_length=1, max_length=100)
    tipo_veiculo: str | None = Field(None, min_length=1, max_length=30)
    capacidade_toneladas: float | None = Field(None, ge=0)
    km_atual: float | None = Field(None, ge=0)
    status: StatusVeiculo | None = None
    proprietario_tipo: str | None = None
    motorista_fixo_id: int | None = None
    validade_licenciamento: date | None = None
    validade_seguro: date | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        if isinstance(data, dict):
            return normalize_veiculo_payload(data, partial=True)
        return data


class VeiculoOut(BaseModel):
    id: int
    codigo_frota: str | None
    placa: str
    placa_carreta: str | None = None
    modelo: str
    tipo_veiculo: str
    capacidade_toneladas: float | None = None
    km_atual: float | None = None
    status: str
    proprietario_tipo: str
    motorista_fixo_id: int | None = None
    validade_licenciamento: date | None = None
    validade_seguro: date | None = None
    created_at: datetime

    model_config = {"from_attributes": True}

"""Pydantic schemas for drivers / owner-operators (motoristas)."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

TipoMotorista = Literal["proprio", "terceirizado", "agregado"]
TipoPagamento = Literal["pix", "transferencia_bancaria"]
StatusMotorista = Literal["ativo", "inativo", "ferias"]

# Optional contact/bank fields where the UI sends "" for "not informed"
BLANK_AS_NULL = ("email", "banco", "agencia", "conta", "chave_pix", "tipo_conta", "endereco")


def _blank_to_none(data):
    if isinstance(data, dict):
        data = dict(data)
        for key in BLANK_AS_NULL:
            if data.get(key) == "":
                data[key] = None
    return data


class MotoristaCreate(BaseModel):
    nome: str = Field(..., min_length=1, max_length=255)
    cpf: str | None = Field(None, max_length=14)
    documento: str | None = Field(None, max_length=20)
    telefone: str = Field(..., min_length=8, max_length=20)
    email: str | None = Field(None, max_length=255)
    endereco: str | None = None
    cnh_validade: date | None = None
    status: StatusMotorista = "ativo"
    tipo: TipoMotorista
    tipo_pagamento: TipoPagamento
    chave_pix_tipo: str | None = None
    chave_pix: str | None = None
    banco: str | None = None
    agencia: str | None = None
    conta: str | None = None
    tipo_conta: str | None = None

    @model_validator(mode="before")
    @classmethod
    def blank_strings(cls, data):
        return _blank_to_none(data)

    @model_validator(mode="after")
    def payment_details(self):
        if self.tipo_pagamento == "pix" and not self.chave_pix:
            raise ValueError("chave_pix e obrigatoria para pagamento via pix")
        if self.tipo_pagamento == "transferencia_bancaria" and not (
            self.banco and self.agencia and self.conta
        ):
            raise ValueError("banco, agencia e conta sao obrigatorios para transferencia bancaria")
        return self


class MotoristaUpdate(BaseModel):
    nome: str | None = Field(None, min_length=1, max_length=255)
    cpf: str | None = Field(None, max_length=14)
    documento: str | None = Field(None, max_length=20)
    telefone: str | None = Field(None, min_length=8, max_length=20)
    email: str | None = Field(None, max_length=255)
    endereco: str | None = None
    cnh_validade: date | None = None
    status: StatusMotorista | None = None
    tipo: TipoMotorista | None = None
    tipo_pagamento: TipoPagamento | None = None
    chave_pix_tipo: str | None = None
    chave_pix: str | None = None
    banco: str | None = None
    agencia: str | None = None
    conta: str | None = None
    tipo_conta: str | None = None
    # Bind a fleet vehicle to this driver (frota.motorista_fixo_id)
    veiculo_id: int | None = None

    @model_validator(mode="before")
    @classmethod
    def blank_strings(cls, data):
        return _blank_to_none(data)

    @field_validator("email")
    @classmethod
    def email_shape(cls, v: str | None) -> str | None:
        if v is not None and "@" not in v:
            raise ValueError("email invalido")
        return v


class VeiculoVinculado(BaseModel):
    id: int
    placa: str
    modelo: str
    motorista_fixo_id: int | None

    model_config = {"from_attributes": True}


class MotoristaOut(BaseModel):
    id: int
    codigo_motorista: str | None
    nome: str
    cpf: str | None = None
    documento: str | None = None
    telefone: str
    email: str | None = None
    endereco: str | None = None
    cnh_validade: date | None = None
    status: str
    tipo: str
    tipo_pagamento: str
    chave_pix_tipo: str | None = None
    chave_pix: str | None = None
    banco: str | None = None
    agencia: str | None = None
    conta: str | None = None
    tipo_conta: str | None = None
    receita_gerada: float
    viagens_realizadas: int
    created_at: datetime
    veiculo_vinculado: VeiculoVinculado | None = None

    model_config = {"from_attributes": True}

"""Initial schema: motoristas, frota, fazendas, pagamentos, fretes, custos.

Revision ID: 0001
Revises:
Create Date: 2026-03-02
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "motoristas",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("codigo_motorista", sa.String(30), unique=True),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("cpf", sa.String(14)),
        sa.Column("documento", sa.String(20)),
        sa.Column("telefone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("endereco", sa.Text()),
        sa.Column("cnh_validade", sa.Date()),
        sa.Column("status", sa.String(20), server_default="ativo", nullable=False),
        sa.Column("tipo", sa.String(20), nullable=False),
        sa.Column("tipo_pagamento", sa.String(30), nullable=False),
        sa.Column("chave_pix_tipo", sa.String(20)),
        sa.Column("chave_pix", sa.String(255)),
        sa.Column("banco", sa.String(100)),
        sa.Column("agencia", sa.String(20)),
        sa.Column("conta", sa.String(30)),
        sa.Column("tipo_conta", sa.String(20)),
        sa.Column("receita_gerada", sa.Float(), server_default="0", nullable=False),
        sa.Column("viagens_realizadas", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_motoristas_codigo_motorista", "motoristas", ["codigo_motorista"])
    op.create_index("ix_motoristas_status", "motoristas", ["status"])

    op.create_table(
        "frota",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("codigo_frota", sa.String(30), unique=True),
        sa.Column("placa", sa.String(10), unique=True, nullable=False),
        sa.Column("placa_carreta", sa.String(10)),
        sa.Column("modelo", sa.String(100), nullable=False),
        sa.Column("tipo_veiculo", sa.String(30), nullable=False),
        sa.Column("capacidade_toneladas", sa.Float()),
        sa.Column("km_atual", sa.Float()),
        sa.Column("status", sa.String(20), server_default="disponivel", nullable=False),
        sa.Column("proprietario_tipo", sa.String(20), server_default="PROPRIO", nullable=False),
        sa.Column("motorista_fixo_id", sa.Integer(), sa.ForeignKey("motoristas.id")),
        sa.Column("validade_licenciamento", sa.Date()),
        sa.Column("validade_seguro", sa.Date()),
        *_timestamps(),
    )
    op.create_index("ix_frota_codigo_frota", "frota", ["codigo_frota"])
    op.create_index("ix_frota_status", "frota", ["status"])
    op.create_index("ix_frota_motorista_fixo_id", "frota", ["motorista_fixo_id"])

    op.create_table(
        "fazendas",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("codigo_fazenda", sa.String(30), unique=True),
        sa.Column("fazenda", sa.String(255), nullable=False),
        sa.Column("estado", sa.String(2), nullable=False),
        sa.Column("proprietario", sa.String(255), nullable=False),
        sa.Column("mercadoria", sa.String(100), nullable=False),
        sa.Column("variedade", sa.String(100)),
        sa.Column("safra", sa.String(20), nullable=False),
        sa.Column("preco_por_tonelada", sa.Float(), nullable=False),
        sa.Column("peso_medio_saca", sa.Float(), server_default="25", nullable=False),
        sa.Column("total_sacas_carregadas", sa.Float(), server_default="0", nullable=False),
        sa.Column("total_toneladas", sa.Float(), server_default="0", nullable=False),
        sa.Column("faturamento_total", sa.Float(), server_default="0", nullable=False),
        sa.Column("ultimo_frete", sa.Date()),
        sa.Column("colheita_finalizada", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_fazendas_codigo_fazenda", "fazendas", ["codigo_fazenda"])
    op.create_index("ix_fazendas_estado", "fazendas", ["estado"])

    op.create_table(
        "pagamentos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("codigo_pagamento", sa.String(30), unique=True),
        sa.Column("motorista_id", sa.Integer(), sa.ForeignKey("motoristas.id"), nullable=False),
        sa.Column("motorista_nome", sa.String(255), nullable=False),
        sa.Column("periodo_fretes", sa.String(100), nullable=False),
        sa.Column("quantidade_fretes", sa.Integer(), server_default="0", nullable=False),
        sa.Column("fretes_incluidos", sa.Text()),
        sa.Column("total_toneladas", sa.Float(), server_default="0", nullable=False),
        sa.Column("valor_por_tonelada", sa.Float(), server_default="0", nullable=False),
        sa.Column("valor_total", sa.Float(), nullable=False),
        sa.Column("data_pagamento", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), server_default="pendente", nullable=False),
        sa.Column("metodo_pagamento", sa.String(30), nullable=False),
        sa.Column("comprovante_nome", sa.String(255)),
        sa.Column("comprovante_url", sa.String(500)),
        sa.Column("comprovante_data_upload", sa.DateTime()),
        sa.Column("observacoes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_pagamentos_codigo_pagamento", "pagamentos", ["codigo_pagamento"])
    op.create_index("ix_pagamentos_motorista_id", "pagamentos", ["motorista_id"])
    op.create_index("ix_pagamentos_status", "pagamentos", ["status"])

    op.create_table(
        "fretes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("codigo_frete", sa.String(30), unique=True),
        sa.Column("origem", sa.String(255), nullable=False),
        sa.Column("destino", sa.String(255), nullable=False),
        sa.Column("motorista_id", sa.Integer(), sa.ForeignKey("motoristas.id"), nullable=False),
        sa.Column("motorista_nome", sa.String(255)),
        sa.Column("caminhao_id", sa.Integer(), sa.ForeignKey("frota.id"), nullable=False),
        sa.Column("caminhao_placa", sa.String(10)),
        sa.Column("fazenda_id", sa.Integer(), sa.ForeignKey("fazendas.id")),
        sa.Column("fazenda_nome", sa.String(255)),
        sa.Column("pagamento_id", sa.Integer(), sa.ForeignKey("pagamentos.id")),
        sa.Column("ticket", sa.String(50)),
        sa.Column("numero_nota_fiscal", sa.String(50)),
        sa.Column("mercadoria", sa.String(100), nullable=False),
        sa.Column("variedade", sa.String(100)),
        sa.Column("data_frete", sa.Date(), nullable=False),
        sa.Column("quantidade_sacas", sa.Float(), server_default="0", nullable=False),
        sa.Column("toneladas", sa.Float(), nullable=False),
        sa.Column("valor_por_tonelada", sa.Float(), nullable=False),
        sa.Column("receita", sa.Float(), server_default="0", nullable=False),
        sa.Column("custos", sa.Float(), server_default="0", nullable=False),
        sa.Column("resultado", sa.Float(), server_default="0", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_fretes_codigo_frete", "fretes", ["codigo_frete"])
    op.create_index("ix_fretes_motorista_id", "fretes", ["motorista_id"])
    op.create_index("ix_fretes_caminhao_id", "fretes", ["caminhao_id"])
    op.create_index("ix_fretes_fazenda_id", "fretes", ["fazenda_id"])
    op.create_index("ix_fretes_pagamento_id", "fretes", ["pagamento_id"])
    op.create_index("ix_fretes_data_frete", "fretes", ["data_frete"])

    op.create_table(
        "custos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("frete_id", sa.Integer(), sa.ForeignKey("fretes.id"), nullable=False),
        sa.Column("tipo", sa.String(30), nullable=False),
        sa.Column("descricao", sa.String(255), nullable=False),
        sa.Column("valor", sa.Float(), nullable=False),
        sa.Column("data", sa.Date(), nullable=False),
        sa.Column("comprovante", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("observacoes", sa.Text()),
        sa.Column("motorista", sa.String(255)),
        sa.Column("caminhao", sa.String(20)),
        sa.Column("rota", sa.String(255)),
        sa.Column("litros", sa.Float()),
        sa.Column("tipo_combustivel", sa.String(30)),
        *_timestamps(),
    )
    op.create_index("ix_custos_frete_id", "custos", ["frete_id"])


def downgrade() -> None:
    op.drop_table("custos")
    op.drop_table("fretes")
    op.drop_table("pagamentos")
    op.drop_table("fazendas")
    op.drop_table("frota")
    op.drop_table("motoristas")

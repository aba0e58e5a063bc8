"""Display code generation.

Codes are derived from the database-generated primary key, so two
concurrent inserts can never receive the same code and no counter state
lives outside the database.  ``assign_code`` must run inside the same
transaction as the owning insert: it flushes to obtain the id and writes
the code back before commit.

Formats:
  frete:     FRT-{year}-{id:3}
  fazenda:   FAZ-{year}-{id:3}
  motorista: MOT-{year}-{id:3}
  pagamento: PAG-{year}-{id:3}
  veiculo:   FROTA-{id:3}
"""

import re
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.middleware.exceptions import BusinessRuleError

DEFAULT_FORMATS = {
    "frete": "FRT-{year}-{seq:3}",
    "fazenda": "FAZ-{year}-{seq:3}",
    "motorista": "MOT-{year}-{seq:3}",
    "pagamento": "PAG-{year}-{seq:3}",
    "veiculo": "FROTA-{seq:3}",
}

# Map entity types to the column holding their code
ENTITY_CODE_COLUMN = {
    "frete": "codigo_frete",
    "fazenda": "codigo_fazenda",
    "motorista": "codigo_motorista",
    "pagamento": "codigo_pagamento",
    "veiculo": "codigo_frota",
}

CLIENT_CODE_RE = {
    "frete": re.compile(r"^FRT-\d{4}-[A-Z0-9]+$"),
    "pagamento": re.compile(r"^PAG-\d{4}-[A-Z0-9]+$"),
}


def format_code(entity: str, seq: int, year: int | None = None) -> str:
    """Render the code for ``entity`` with sequence ``seq``.

    >>> format_code("frete", 7, year=2026)
    'FRT-2026-007'
    """
    fmt = DEFAULT_FORMATS[entity]
    year = year or date.today().year

    seq_match = re.search(r"\{seq:(\d+)\}", fmt)
    seq_width = int(seq_match.group(1)) if seq_match else 3

    code = fmt.replace("{year}", str(year))
    return re.sub(r"\{seq:\d+\}", f"{seq:0{seq_width}d}", code)


def normalize_client_code(entity: str, value: str | None) -> str | None:
    """Accept a client-supplied code only if it is well formed for ``entity``."""
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip().upper()
    return candidate if CLIENT_CODE_RE[entity].match(candidate) else None


async def _code_taken(db: AsyncSession, obj, column: str, code: str) -> bool:
    model = type(obj)
    stmt = select(model.id).where(getattr(model, column) == code)
    if obj.id is not None:
        stmt = stmt.where(model.id != obj.id)
    with db.no_autoflush:
        return (await db.execute(stmt.limit(1))).scalar_one_or_none() is not None


async def assign_code(db: AsyncSession, obj, entity: str) -> str:
    """Flush ``obj`` to get its id, then store and return its display code.

    A code already on the object (supplied by the client) is kept, and
    rejected when another row holds it.  When the derived code was taken
    earlier by a client-supplied one, a ``-N`` suffix is appended.
    """
    column = ENTITY_CODE_COLUMN[entity]

    current = getattr(obj, column)
    if current and await _code_taken(db, obj, column, current):
        raise BusinessRuleError(f"Codigo {current} ja esta em uso", error_code="DUPLICATE_RECORD")

    await db.flush()  # populate obj.id
    if current:
        return current

    base = format_code(entity, obj.id)
    code = base
    suffix = 1
    while await _code_taken(db, obj, column, code):
        suffix += 1
        code = f"{base}-{suffix}"

    setattr(obj, column, code)
    await db.flush()
    return code

"""Management CLI.

Usage:
    python -m app.cli migrate            # Run Alembic upgrade head
    python -m app.cli recalcular-totais  # Rebuild every shipment and farm total
"""

import asyncio
import subprocess
import sys

from app.database import async_session, engine, transaction
from app.services.totals import recompute_all


def migrate():
    """Run Alembic upgrade head against the configured database."""
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        capture_output=True, text=True,
    )
    if result.returncode != 0:
        print(f"  FAILED: {result.stderr}")
        sys.exit(result.returncode)
    print("  OK")


async def _recalcular_totais() -> dict:
    try:
        async with async_session() as db:
            async with transaction(db):
                return await recompute_all(db)
    finally:
        await engine.dispose()


def recalcular_totais():
    """Recompute custos/resultado of every frete and the totals of every fazenda."""
    counts = asyncio.run(_recalcular_totais())
    print(f"  {counts['fretes']} frete(s) recalculado(s)")
    print(f"  {counts['fazendas']} fazenda(s) recalculada(s)")


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    if cmd == "migrate":
        migrate()
    elif cmd == "recalcular-totais":
        recalcular_totais()
    else:
        print("Usage: python -m app.cli [migrate|recalcular-totais]")

"""Vehicle payload normalisation (plates, numeric fields, trailer rules)."""

import re

HEAVY_TYPES = ("CARRETA", "BITREM", "RODOTREM")

_MERCOSUL_RE = re.compile(r"^([A-Z]{3})(\d[A-Z]\d{2})$")
_OLD_PLATE_RE = re.compile(r"^([A-Z]{3})(\d{4})$")


def format_placa(placa: str) -> str:
    """Normalise a Brazilian plate.

    >>> format_placa(" abc1d23 ")
    'ABC-1D23'
    >>> format_placa("abc-1234")
    'ABC-1234'
    """
    cleaned = re.sub(r"[^A-Z0-9]", "", placa.strip().upper())
    match = _MERCOSUL_RE.match(cleaned) or _OLD_PLATE_RE.match(cleaned)
    if match:
        return f"{match.group(1)}-{match.group(2)}"
    return cleaned


def _to_number(value):
    if value == "" or value is None:
        return None
    if isinstance(value, str):
        try:
            return float(value.replace(",", "."))
        except ValueError:
            return None
    return value


def normalize_veiculo_payload(data: dict, partial: bool = False) -> dict:
    """Return a cleaned copy of a vehicle create/update payload.

    With ``partial=True`` (updates) keys that were not sent stay absent so
    they are not overwritten.
    """
    out = dict(data)

    for key in ("placa", "placa_carreta"):
        if isinstance(out.get(key), str):
            out[key] = format_placa(out[key])

    for key in ("capacidade_toneladas", "km_atual"):
        if key in out or not partial:
            out[key] = _to_number(out.get(key))

    if "tipo_veiculo" in out:
        out["tipo_veiculo"] = str(out["tipo_veiculo"]).upper()
        if out["tipo_veiculo"] not in HEAVY_TYPES:
            out["placa_carreta"] = None

    if not partial and not out.get("proprietario_tipo"):
        out["proprietario_tipo"] = "PROPRIO"

    return out

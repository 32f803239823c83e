"""Presentational fingerprint printed on the audit page.

This is NOT a cryptographic digest. It is a 32-bit rolling hash of the record
identity and both signature payloads, suffixed with the render instant, and is
labelled "Simulado" wherever it is shown. Do not use it for tamper detection.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000

DELIMITER = 'x'


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - 0x100000000 if value & _INT32_SIGN else value


def _utf16_code_units(text: str):
    data = text.encode('utf-16-le')
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def rolling_hash(seed: str) -> int:
    """hash = hash * 31 + code unit, kept as a signed 32-bit integer."""
    h = 0
    for unit in _utf16_code_units(seed):
        h = _to_int32((h << 5) - h + unit)
    return h


def epoch_millis(instant: datetime) -> int:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return int(instant.timestamp() * 1000)


def generate_fingerprint(seed: str, instant: datetime | None = None) -> str:
    """Hex hash of ``seed`` joined to the hex epoch-milliseconds of ``instant``.

    Identical seed and instant give identical tokens; the same seed at another
    instant gives a different token, since the token identifies a render.
    """
    instant = instant or datetime.now(timezone.utc)
    return f"{abs(rolling_hash(seed)):x}{DELIMITER}{epoch_millis(instant):x}"


def iso_millis(instant: datetime) -> str:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    utc = instant.astimezone(timezone.utc)
    return utc.strftime('%Y-%m-%dT%H:%M:%S.') + f"{utc.microsecond // 1000:03d}Z"


def build_seed(
    *,
    record_id: str | None,
    razao_social: str,
    cnpj: str,
    created: datetime,
    client_signature: str = '',
    contractor_signature: str = '',
) -> str:
    identity = json.dumps(
        {'id': record_id, 'razao': razao_social, 'cnpj': cnpj, 'created': iso_millis(created)},
        ensure_ascii=False,
        separators=(',', ':'),
    )
    return identity + (client_signature or '') + (contractor_signature or '')

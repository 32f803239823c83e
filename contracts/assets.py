"""Loading of the logo and signature images used by the renderer.

Every source is resolved to either ``Loaded`` or ``Unavailable``; nothing in
here raises, so one broken image never aborts a render.
"""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Union

import requests
from django.conf import settings
from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Loaded:
    image: Image.Image
    source_text: str = ''

    @property
    def available(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    reason: str
    source_text: str = ''

    @property
    def available(self) -> bool:
        return False


AssetResult = Union[Loaded, Unavailable]


def _decode_data_url(data_url: str) -> bytes:
    header, _, payload = data_url.partition(',')
    if not payload:
        raise ValueError('Empty data URL')
    if 'base64' not in header.lower():
        raise ValueError('Expected base64 data URL')
    return base64.b64decode(payload, validate=False)


def _open(raw: bytes) -> Image.Image:
    img = Image.open(BytesIO(raw))
    img.load()
    return img


def _source_bytes(source: str) -> bytes:
    if source.startswith('data:'):
        return _decode_data_url(source)
    if source.startswith(('http://', 'https://')):
        timeout = getattr(settings, 'ASSET_FETCH_TIMEOUT', 10)
        resp = requests.get(source, timeout=timeout)
        resp.raise_for_status()
        return resp.content
    if not os.path.exists(source):
        raise FileNotFoundError(source)
    with open(source, 'rb') as fh:
        return fh.read()


def load_image(source: Any, *, label: str = 'image') -> AssetResult:
    """Resolve a Pillow image, raw bytes, a data URL, a URL or a file path."""
    if source is None or (isinstance(source, str) and not source.strip()):
        return Unavailable(f'no {label} provided')
    if isinstance(source, (Loaded, Unavailable)):
        return source
    if isinstance(source, Image.Image):
        return Loaded(source)

    source_text = source.strip() if isinstance(source, str) else ''
    try:
        raw = bytes(source) if isinstance(source, (bytes, bytearray)) else _source_bytes(source_text)
        return Loaded(_open(raw), source_text=source_text)
    except (OSError, ValueError, requests.RequestException) as e:
        logger.warning(f"Failed to load {label}: {e}")
        return Unavailable(f'{label} could not be loaded: {e}', source_text=source_text)

"""Service line items offered by the agency.

A service text may contain the ``[QTD]`` placeholder; it is replaced at render
time by the quantity stored on the record, or by ``X`` when none was given.
"""

from __future__ import annotations

from typing import Mapping, Sequence

QUANTITY_PLACEHOLDER = '[QTD]'
MISSING_QUANTITY_MARKER = 'X'
EMPTY_SELECTION_FALLBACK = 'Gestão de redes sociais'

AVAILABLE_SERVICES: tuple[str, ...] = (
    'Criação de [QTD] postagens semanais, com inclusão de textos e legendas nas artes',
    'Desenvolvimento e publicação de stories, incluindo assessoria para sua elaboração',
    'Gerenciamento dos impulsionamentos patrocinados',
    'Elaboração de planejamento estratégico com [QTD] conteúdos mensais, acompanhado de cronograma e apresentação dos conteúdos',
    'Produção de roteiro para reels',
    'Edição de vídeo simples',
    'Elaboração de relatório mensal de investimento e desempenho, com análise de melhorias e sugestões',
)


def has_quantity_placeholder(service: str) -> bool:
    return QUANTITY_PLACEHOLDER in (service or '')


def resolve_service_text(service: str, quantities: Mapping[str, str] | None = None) -> str:
    """Substitute the quantity placeholder exactly once."""
    if not has_quantity_placeholder(service):
        return service
    quantity = str((quantities or {}).get(service) or '').strip() or MISSING_QUANTITY_MARKER
    return service.replace(QUANTITY_PLACEHOLDER, quantity, 1)


def prune_quantities(selected: Sequence[str], quantities: Mapping[str, str] | None) -> dict[str, str]:
    """Keep only quantities for selected services that carry the placeholder."""
    selected_set = set(selected or [])
    pruned = {}
    for service, quantity in (quantities or {}).items():
        if service in selected_set and has_quantity_placeholder(service):
            pruned[service] = str(quantity)
    return pruned

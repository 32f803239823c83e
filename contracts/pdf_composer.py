"""Ordered block sequence of the service contract."""

from __future__ import annotations

from typing import Optional

from . import clause_library as clauses
from .assets import AssetResult
from .catalog import EMPTY_SELECTION_FALLBACK
from .contract_data import ContractData
from .pdf_flow import (
    Alignment,
    Block,
    SectionTitle,
    SignatureBlock,
    SignatureParty,
    Spacer,
    TextBlock,
    TextStyle,
)

CLAUSE_STYLE = TextStyle(font_size=9, alignment=Alignment.JUSTIFY)
LIST_STYLE = TextStyle(font_size=9, alignment=Alignment.LEFT)
DATE_LINE_STYLE = TextStyle(font_size=10, alignment=Alignment.LEFT)

DEFAULT_DURATION = '4'
DEFAULT_PAYMENT_SPLIT = '4'
DEFAULT_AMOUNT = '0,00'
DEFAULT_PAYMENT_DAY = '10'
BULLET = '• '


def _or_default(value: str, default: str) -> str:
    value = (value or '').strip()
    return value or default


def _written_amount(value: str) -> str:
    value = (value or '').strip()
    return f' ({value})' if value else ''


def contracting_party_text(data: ContractData) -> str:
    return (
        f"CONTRATANTE: {data.razao_social}, CNPJ: {data.cnpj}, localizada na {data.endereco_empresa}. "
        f"CEP: {data.cep_empresa}. Cidade: {data.cidade_empresa}. "
        f"Responsável que responde pela empresa: {data.responsavel_nome}, {data.responsavel_estado_civil}, "
        f"{data.responsavel_profissao}, carteira de identidade nº {data.responsavel_rg}, "
        f"CPF. nº {data.responsavel_cpf}, domiciliado: {data.responsavel_endereco}, "
        f"Cidade: {data.responsavel_cidade}, no Estado de {data.responsavel_estado}."
    )


def services_text(data: ContractData) -> str:
    lines = data.service_lines() or [EMPTY_SELECTION_FALLBACK]
    return '\n'.join(f'{BULLET}{line}' for line in lines)


def period_text(data: ContractData) -> str:
    return (
        'utilizando mecanismos para alcançar mais pessoas e divulgar os serviços no período do dia '
        f'{data.data_inicio} a {data.data_fim}'
    )


def duration_text(data: ContractData) -> str:
    duration = _or_default(data.contract_duration, DEFAULT_DURATION)
    return (
        f'§1º. O presente contrato tem validade de {duration} meses, podendo ser renovado por igual '
        'período sucessiva e automaticamente, conforme anuência das partes.'
    )


def payment_clause_text(data: ContractData) -> str:
    """Clause 12. A written-out amount is only parenthesized when present."""
    total = _or_default(data.valor_total, DEFAULT_AMOUNT)
    monthly = _or_default(data.valor_mensal, DEFAULT_AMOUNT)
    split = _or_default(data.quantidade_meses_pagamento, DEFAULT_PAYMENT_SPLIT)
    day = _or_default(data.dia_pagamento, DEFAULT_PAYMENT_DAY)
    return (
        f'Cláusula 12ª. O presente serviço será remunerado pela quantia de R${total}'
        f'{_written_amount(data.valor_total_extenso)} sendo dividido em {split}, '
        f'totalizando mensalmente em R${monthly}{_written_amount(data.valor_mensal_extenso)} '
        'referente aos serviços efetivamente prestados conforme a Cláusula 1ª. '
        f'O pagamento será realizado todo dia {day} do mês. '
        'Devendo ser pago em dinheiro, pix ou outra forma de pagamento em que ocorra a prévia '
        'concordância de ambas as partes. E o valor combinado entre ambas as partes para o '
        'impulsionamento. Devendo ser pago em boleto bancário, pix ou cartão de crédito.'
    )


def signature_date_text(data: ContractData) -> str:
    return f'Campo Grande, {data.data_assinatura}'


def signature_block(
    data: ContractData,
    contractor_signature: Optional[AssetResult] = None,
    client_signature: Optional[AssetResult] = None,
) -> SignatureBlock:
    return SignatureBlock(
        left=SignatureParty(
            name=clauses.CONTRACTOR_SIGNATORY,
            affiliation=clauses.CONTRACTOR_COMPANY,
            signature=contractor_signature,
        ),
        right=SignatureParty(
            name=data.responsavel_nome or clauses.CLIENT_SIGNATORY_FALLBACK,
            affiliation=data.razao_social or clauses.CLIENT_COMPANY_FALLBACK,
            signature=client_signature,
        ),
    )


def compose_contract(
    data: ContractData,
    *,
    contractor_signature: Optional[AssetResult] = None,
    client_signature: Optional[AssetResult] = None,
) -> list[Block]:
    blocks: list[Block] = [
        SectionTitle(clauses.DOCUMENT_TITLE),
        Spacer(5),

        SectionTitle(clauses.SECTION_PARTIES),
        TextBlock(contracting_party_text(data), CLAUSE_STYLE),
        TextBlock(clauses.CONTRACTED_PARTY, CLAUSE_STYLE),
        TextBlock(clauses.RECITAL, CLAUSE_STYLE),
        Spacer(3),

        SectionTitle(clauses.SECTION_OBJECT),
        TextBlock(clauses.OBJECT_CLAUSE, LIST_STYLE),
        TextBlock(services_text(data), LIST_STYLE),
        TextBlock(period_text(data), CLAUSE_STYLE),
        TextBlock(duration_text(data), CLAUSE_STYLE),
        Spacer(2),

        SectionTitle(clauses.SECTION_CLIENT_OBLIGATIONS),
    ]
    blocks.extend(TextBlock(text, CLAUSE_STYLE) for text in clauses.CLIENT_OBLIGATIONS)
    blocks.append(Spacer(1))

    blocks.append(SectionTitle(clauses.SECTION_PROVIDER_OBLIGATIONS))
    blocks.extend(TextBlock(text, CLAUSE_STYLE) for text in clauses.PROVIDER_OBLIGATIONS)
    blocks.append(Spacer(1))

    blocks.extend([
        SectionTitle(clauses.SECTION_PAYMENT),
        TextBlock(payment_clause_text(data), CLAUSE_STYLE),
        TextBlock(clauses.LATE_PAYMENT_CLAUSE, CLAUSE_STYLE),
        TextBlock(clauses.COLLECTION_PARAGRAPH, CLAUSE_STYLE),
        Spacer(1),
        SectionTitle(clauses.SECTION_GENERAL),
    ])
    blocks.extend(TextBlock(text, CLAUSE_STYLE) for text in clauses.GENERAL_CONDITIONS)

    blocks.extend([
        SectionTitle(clauses.SECTION_VENUE),
        TextBlock(clauses.VENUE_CLAUSE, CLAUSE_STYLE),
        Spacer(2),
        TextBlock(signature_date_text(data), DATE_LINE_STYLE),
        Spacer(15),
        signature_block(data, contractor_signature, client_signature),
    ])
    return blocks

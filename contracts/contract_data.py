"""Plain, framework-free view of a contract record used by the PDF renderer."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Mapping

from .catalog import resolve_service_text

# camelCase keys used by the API and the frontend form -> dataclass attribute.
PAYLOAD_FIELDS: dict[str, str] = {
    'id': 'id',
    'razaoSocial': 'razao_social',
    'cnpj': 'cnpj',
    'enderecoEmpresa': 'endereco_empresa',
    'cepEmpresa': 'cep_empresa',
    'cidadeEmpresa': 'cidade_empresa',
    'responsavelNome': 'responsavel_nome',
    'responsavelEstadoCivil': 'responsavel_estado_civil',
    'responsavelProfissao': 'responsavel_profissao',
    'responsavelRg': 'responsavel_rg',
    'responsavelCpf': 'responsavel_cpf',
    'responsavelEndereco': 'responsavel_endereco',
    'responsavelCidade': 'responsavel_cidade',
    'responsavelEstado': 'responsavel_estado',
    'email': 'email',
    'dataInicio': 'data_inicio',
    'dataFim': 'data_fim',
    'contractDuration': 'contract_duration',
    'quantidadeMesesPagamento': 'quantidade_meses_pagamento',
    'valorTotal': 'valor_total',
    'valorTotalExtenso': 'valor_total_extenso',
    'valorMensal': 'valor_mensal',
    'valorMensalExtenso': 'valor_mensal_extenso',
    'diaPagamento': 'dia_pagamento',
    'cidadeAssinatura': 'cidade_assinatura',
    'dataAssinatura': 'data_assinatura',
    'selectedServices': 'selected_services',
    'serviceQuantities': 'service_quantities',
    'ipAddress': 'ip_address',
    'userAgent': 'user_agent',
    'signedAt': 'signed_at',
}


@dataclass(frozen=True)
class ContractData:
    """Everything the composer and the audit page read from a record.

    Amount fields are display strings; nothing here does arithmetic on them.
    """

    id: str | None = None
    razao_social: str = ''
    cnpj: str = ''
    endereco_empresa: str = ''
    cep_empresa: str = ''
    cidade_empresa: str = ''
    responsavel_nome: str = ''
    responsavel_estado_civil: str = ''
    responsavel_profissao: str = ''
    responsavel_rg: str = ''
    responsavel_cpf: str = ''
    responsavel_endereco: str = ''
    responsavel_cidade: str = ''
    responsavel_estado: str = ''
    email: str = ''
    data_inicio: str = ''
    data_fim: str = ''
    contract_duration: str = ''
    quantidade_meses_pagamento: str = ''
    valor_total: str = ''
    valor_total_extenso: str = ''
    valor_mensal: str = ''
    valor_mensal_extenso: str = ''
    dia_pagamento: str = ''
    cidade_assinatura: str = ''
    data_assinatura: str = ''
    selected_services: tuple[str, ...] = ()
    service_quantities: Mapping[str, str] = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    signed_at: datetime | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'ContractData':
        """Build from a camelCase dict (form data that was never persisted)."""
        values: dict[str, Any] = {}
        for key, attr in PAYLOAD_FIELDS.items():
            if key in payload and payload[key] is not None:
                values[attr] = payload[key]
        return cls.from_values(values)

    @classmethod
    def from_values(cls, values: Mapping[str, Any]) -> 'ContractData':
        known = {f.name for f in fields(cls)}
        cleaned: dict[str, Any] = {}
        for name, value in values.items():
            if name not in known:
                continue
            if name == 'selected_services':
                value = tuple(str(s) for s in (value or []))
            elif name == 'service_quantities':
                value = {str(k): str(v) for k, v in dict(value or {}).items()}
            elif name == 'id':
                value = str(value) if value else None
            elif name not in ('signed_at', 'ip_address', 'user_agent'):
                value = '' if value is None else str(value)
            cleaned[name] = value
        return cls(**cleaned)

    def service_lines(self) -> list[str]:
        return [resolve_service_text(s, self.service_quantities) for s in self.selected_services]

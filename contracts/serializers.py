from rest_framework import serializers

from .catalog import prune_quantities
from .models import ContractAuditEvent, ContractRecord


def _text(source, max_length=None, **kwargs):
    kwargs.setdefault('required', False)
    kwargs.setdefault('allow_blank', True)
    if max_length:
        kwargs['max_length'] = max_length
    if source:
        kwargs['source'] = source
    return serializers.CharField(**kwargs)


class ContractRecordSerializer(serializers.ModelSerializer):
    """Record as seen by the dashboard and the client signing page (camelCase keys)."""

    accessKey = serializers.UUIDField(source='access_key', read_only=True)
    razaoSocial = serializers.CharField(source='razao_social', max_length=255)
    cnpj = _text(None, 32)
    enderecoEmpresa = _text('endereco_empresa', 500)
    cepEmpresa = _text('cep_empresa', 16)
    cidadeEmpresa = _text('cidade_empresa', 120)
    responsavelNome = _text('responsavel_nome', 255)
    responsavelEstadoCivil = _text('responsavel_estado_civil', 60)
    responsavelProfissao = _text('responsavel_profissao', 120)
    responsavelRg = _text('responsavel_rg', 40)
    responsavelCpf = _text('responsavel_cpf', 20)
    responsavelEndereco = _text('responsavel_endereco', 500)
    responsavelCidade = _text('responsavel_cidade', 120)
    responsavelEstado = _text('responsavel_estado', 60)
    email = serializers.EmailField(required=False, allow_blank=True)
    dataInicio = _text('data_inicio', 40)
    dataFim = _text('data_fim', 40)
    contractDuration = _text('contract_duration', 10)
    quantidadeMesesPagamento = _text('quantidade_meses_pagamento', 10)
    valorTotal = _text('valor_total', 40)
    valorTotalExtenso = _text('valor_total_extenso', 255)
    valorMensal = _text('valor_mensal', 40)
    valorMensalExtenso = _text('valor_mensal_extenso', 255)
    diaPagamento = _text('dia_pagamento', 10)
    cidadeAssinatura = _text('cidade_assinatura', 120)
    dataAssinatura = _text('data_assinatura', 60)
    selectedServices = serializers.ListField(
        source='selected_services',
        child=serializers.CharField(),
        required=False,
    )
    serviceQuantities = serializers.DictField(
        source='service_quantities',
        child=serializers.CharField(allow_blank=True),
        required=False,
    )
    clientSignature = serializers.CharField(source='client_signature', read_only=True)
    signedAt = serializers.DateTimeField(source='signed_at', read_only=True)
    ipAddress = serializers.CharField(source='ip_address', read_only=True)
    userAgent = serializers.CharField(source='user_agent', read_only=True)
    termsAccepted = serializers.BooleanField(source='terms_accepted', read_only=True)
    sentToEmail = serializers.EmailField(source='sent_to_email', read_only=True)
    emailStatus = serializers.CharField(source='email_status', read_only=True)
    emailRequestedAt = serializers.DateTimeField(source='email_requested_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = ContractRecord
        fields = [
            'id', 'accessKey', 'status',
            'razaoSocial', 'cnpj', 'enderecoEmpresa', 'cepEmpresa', 'cidadeEmpresa',
            'responsavelNome', 'responsavelEstadoCivil', 'responsavelProfissao', 'responsavelRg',
            'responsavelCpf', 'responsavelEndereco', 'responsavelCidade', 'responsavelEstado',
            'email', 'dataInicio', 'dataFim', 'contractDuration', 'quantidadeMesesPagamento',
            'valorTotal', 'valorTotalExtenso', 'valorMensal', 'valorMensalExtenso', 'diaPagamento',
            'cidadeAssinatura', 'dataAssinatura', 'selectedServices', 'serviceQuantities',
            'clientSignature', 'signedAt', 'ipAddress', 'userAgent', 'termsAccepted',
            'sentToEmail', 'emailStatus', 'emailRequestedAt', 'createdAt',
        ]
        read_only_fields = ['id', 'status']

    def validate(self, attrs):
        selected = attrs.get('selected_services') or []
        attrs['service_quantities'] = prune_quantities(selected, attrs.get('service_quantities'))
        # Empty strings fall back to the model defaults.
        for name in ('contract_duration', 'quantidade_meses_pagamento', 'cidade_assinatura', 'data_assinatura'):
            if name in attrs and not (attrs[name] or '').strip():
                attrs.pop(name)
        return attrs


class ContractRecordListSerializer(serializers.ModelSerializer):
    """Small payload serializer for the dashboard list."""

    accessKey = serializers.UUIDField(source='access_key', read_only=True)
    razaoSocial = serializers.CharField(source='razao_social', read_only=True)
    responsavelNome = serializers.CharField(source='responsavel_nome', read_only=True)
    emailStatus = serializers.CharField(source='email_status', read_only=True)
    signedAt = serializers.DateTimeField(source='signed_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = ContractRecord
        fields = ['id', 'accessKey', 'razaoSocial', 'responsavelNome', 'status', 'emailStatus', 'signedAt', 'createdAt']
        read_only_fields = fields


class SignContractSerializer(serializers.Serializer):
    signature = serializers.CharField(required=False, allow_blank=True, default='')
    termsAccepted = serializers.BooleanField(required=False, default=False)


class EmailRequestSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True, default='')


class ContractAuditEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContractAuditEvent
        fields = ['id', 'event', 'message', 'ip_address', 'user_agent', 'extra', 'created_at']
        read_only_fields = fields

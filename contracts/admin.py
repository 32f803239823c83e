from django.contrib import admin
from .models import ContractAuditEvent, ContractRecord


class ContractAuditEventInline(admin.TabularInline):
    model = ContractAuditEvent
    extra = 0
    readonly_fields = ('event', 'message', 'ip_address', 'user_agent', 'extra', 'created_at')
    can_delete = False


@admin.register(ContractRecord)
class ContractRecordAdmin(admin.ModelAdmin):
    list_display = ('razao_social', 'responsavel_nome', 'status', 'email_status', 'created_at')
    list_filter = ('status', 'email_status')
    search_fields = ('razao_social', 'cnpj', 'responsavel_nome', 'responsavel_cpf')
    readonly_fields = ('access_key', 'client_signature', 'signed_at', 'ip_address', 'user_agent', 'terms_accepted')
    inlines = [ContractAuditEventInline]


@admin.register(ContractAuditEvent)
class ContractAuditEventAdmin(admin.ModelAdmin):
    list_display = ('record', 'event', 'ip_address', 'created_at')
    list_filter = ('event',)

from django.urls import path

from . import views

urlpatterns = [
    # Staff
    path('contracts/', views.contract_create, name='contract-create'),
    path('contracts/recent/', views.contract_recent, name='contract-recent'),
    path('contracts/preview-pdf/', views.contract_preview_pdf, name='contract-preview-pdf'),
    path('contracts/reset/', views.contract_reset, name='contract-reset'),
    path('contracts/<uuid:record_id>/', views.contract_detail, name='contract-detail'),
    path('contracts/<uuid:record_id>/pdf/', views.contract_pdf, name='contract-pdf'),
    path('services/', views.service_catalog, name='service-catalog'),

    # Client signing link
    path('c/<str:key>/', views.client_contract, name='client-contract'),
    path('c/<str:key>/sign/', views.client_sign, name='client-sign'),
    path('c/<str:key>/pdf/', views.client_pdf, name='client-pdf'),
    path('c/<str:key>/email/', views.client_email, name='client-email'),
]

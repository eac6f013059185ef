from django.urls import path
from . import views

app_name = 'tax'

urlpatterns = [
    # IVA
    path('iva/trend/', views.iva_trend, name='iva_trend'),
    path('iva/<int:year>/<int:month>/', views.iva_monthly, name='iva_monthly'),
    path('iva/<int:year>/<int:month>/form120/', views.iva_form120, name='iva_form120'),

    # IRP
    path('irp/<int:year>/', views.irp_annual, name='irp_annual'),
    path('irp/<int:year>/<int:month>/projection/', views.irp_projection, name='irp_projection'),
    path('irp/<int:year>/form515/', views.irp_form515, name='irp_form515'),
]

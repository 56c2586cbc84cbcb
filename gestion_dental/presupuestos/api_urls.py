from django.urls import path
from .api_views import (
    api_calcular_plan,
    api_aceptar_presupuesto,
    api_rechazar_presupuesto,
    api_registrar_pago,
    api_cronograma_presupuesto,
)

urlpatterns = [
    path('presupuestos/calcular-plan/', api_calcular_plan, name='api_calcular_plan'),
    path('presupuestos/<int:presupuesto_id>/aceptar/', api_aceptar_presupuesto, name='api_aceptar_presupuesto'),
    path('presupuestos/<int:presupuesto_id>/rechazar/', api_rechazar_presupuesto, name='api_rechazar_presupuesto'),
    path('presupuestos/<int:presupuesto_id>/pagos/', api_registrar_pago, name='api_registrar_pago'),
    path('presupuestos/<int:presupuesto_id>/cronograma/', api_cronograma_presupuesto, name='api_cronograma_presupuesto'),
]

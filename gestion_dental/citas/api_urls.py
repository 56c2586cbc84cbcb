from django.urls import path
from .api_views import (
    api_disponibilidad,
    api_completar_cita,
    api_cancelar_cita,
)

urlpatterns = [
    path('citas/disponibilidad/', api_disponibilidad, name='api_disponibilidad'),
    path('citas/<int:cita_id>/completar/', api_completar_cita, name='api_completar_cita'),
    path('citas/<int:cita_id>/cancelar/', api_cancelar_cita, name='api_cancelar_cita'),
]

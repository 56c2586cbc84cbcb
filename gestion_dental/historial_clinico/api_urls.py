from django.urls import path
from .api_views import (
    api_odontograma_paciente,
    api_presupuesto_desde_odontograma,
    api_crear_consulta,
    api_sugerencias_medicamentos,
)

urlpatterns = [
    # Odontograma
    path('pacientes/<int:paciente_id>/odontograma/', api_odontograma_paciente, name='api_odontograma_paciente'),
    path('pacientes/<int:paciente_id>/odontograma/presupuesto/', api_presupuesto_desde_odontograma, name='api_presupuesto_desde_odontograma'),

    # Consultas
    path('pacientes/<int:paciente_id>/consultas/', api_crear_consulta, name='api_crear_consulta'),
    path('medicamentos/sugerencias/', api_sugerencias_medicamentos, name='api_sugerencias_medicamentos'),
]

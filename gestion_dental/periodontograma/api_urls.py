from django.urls import path
from .api_views import (
    api_periodontograma_paciente,
    api_estadisticas_periodontograma,
    api_geometria_diente,
)

urlpatterns = [
    path('pacientes/<int:paciente_id>/periodontograma/', api_periodontograma_paciente, name='api_periodontograma_paciente'),
    path('pacientes/<int:paciente_id>/periodontograma/estadisticas/', api_estadisticas_periodontograma, name='api_estadisticas_periodontograma'),
    path('pacientes/<int:paciente_id>/periodontograma/dientes/<int:numero>/geometria/', api_geometria_diente, name='api_geometria_diente'),
]

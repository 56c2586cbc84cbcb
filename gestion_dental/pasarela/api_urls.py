from django.urls import path
from .api_views import api_registros, api_registro

urlpatterns = [
    # Colecciones genéricas
    path('colecciones/<str:coleccion>/registros/', api_registros, name='api_registros'),
    path('colecciones/<str:coleccion>/registros/<int:id>/', api_registro, name='api_registro'),
]

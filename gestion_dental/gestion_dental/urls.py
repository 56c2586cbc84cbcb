from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # API
    path('api/', include('pasarela.api_urls')),
    path('api/', include('presupuestos.api_urls')),
    path('api/', include('periodontograma.api_urls')),
    path('api/', include('historial_clinico.api_urls')),
    path('api/', include('citas.api_urls')),
]

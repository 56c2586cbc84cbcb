from django.contrib import admin
from .models import Parametro


@admin.register(Parametro)
class ParametroAdmin(admin.ModelAdmin):
    list_display = ['clave', 'descripcion', 'actualizado_el']
    search_fields = ['clave', 'descripcion']
    readonly_fields = ['actualizado_el']

from django.contrib import admin
from .models import Periodontograma


@admin.register(Periodontograma)
class PeriodontogramaAdmin(admin.ModelAdmin):
    list_display = ['paciente', 'fecha_examen', 'actualizado_el']
    list_filter = ['fecha_examen']
    search_fields = ['paciente__nombre', 'paciente__apellido', 'paciente__dni']
    readonly_fields = ['creado_el', 'actualizado_el']
    date_hierarchy = 'fecha_examen'

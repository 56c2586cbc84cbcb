from django.contrib import admin
from .models import Consulta, Odontograma


@admin.register(Odontograma)
class OdontogramaAdmin(admin.ModelAdmin):
    list_display = ['paciente', 'actualizado_el']
    search_fields = ['paciente__nombre', 'paciente__apellido', 'paciente__dni']
    readonly_fields = ['creado_el', 'actualizado_el']


@admin.register(Consulta)
class ConsultaAdmin(admin.ModelAdmin):
    list_display = ['paciente', 'fecha', 'motivo']
    list_filter = ['fecha']
    search_fields = ['paciente__nombre', 'paciente__apellido', 'motivo', 'diagnostico']
    readonly_fields = ['cita', 'creado_el']
    raw_id_fields = ['consulta_origen']
    date_hierarchy = 'fecha'
    fieldsets = (
        ('Paciente', {
            'fields': ('paciente', 'fecha', 'cita', 'consulta_origen')
        }),
        ('Atención', {
            'fields': ('motivo', 'diagnostico', 'plan_tratamiento', 'medicamentos')
        }),
        ('Información Adicional', {
            'fields': ('notas', 'creado_el'),
            'classes': ('collapse',)
        }),
    )

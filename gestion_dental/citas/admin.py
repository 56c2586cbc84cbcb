from django.contrib import admin
from .models import AuditoriaLog, Cita, HorarioClinica


@admin.register(Cita)
class CitaAdmin(admin.ModelAdmin):
    list_display = ['fecha_hora', 'duracion', 'nombre_paciente', 'dentista', 'sillon', 'estado']
    list_filter = ['estado', 'dentista', 'sillon']
    search_fields = ['paciente__nombre', 'paciente__apellido', 'paciente_nombre', 'motivo']
    # Los cambios de estado pasan por citas.servicios
    readonly_fields = ['estado', 'fecha_completada', 'creada_el', 'actualizada_el']
    date_hierarchy = 'fecha_hora'


@admin.register(HorarioClinica)
class HorarioClinicaAdmin(admin.ModelAdmin):
    list_display = ['dia_semana', 'abierto', 'hora_inicio', 'hora_fin']


@admin.register(AuditoriaLog)
class AuditoriaLogAdmin(admin.ModelAdmin):
    list_display = ['fecha_hora', 'usuario_nombre', 'accion', 'modulo', 'descripcion']
    list_filter = ['accion', 'modulo']
    search_fields = ['descripcion', 'usuario_nombre']
    date_hierarchy = 'fecha_hora'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

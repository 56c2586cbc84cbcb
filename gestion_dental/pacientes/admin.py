from django.contrib import admin
from .models import Paciente


@admin.register(Paciente)
class PacienteAdmin(admin.ModelAdmin):
    list_display = ['nombre', 'apellido', 'dni', 'telefono', 'saldo', 'activo', 'ultima_visita']
    list_filter = ['activo', 'fecha_registro']
    search_fields = ['nombre', 'apellido', 'dni', 'telefono', 'email']
    readonly_fields = ['fecha_registro', 'saldo', 'ultima_visita']
    fieldsets = (
        ('Información Personal', {
            'fields': ('nombre', 'apellido', 'dni', 'email', 'telefono', 'fecha_nacimiento')
        }),
        ('Información Médica', {
            'fields': ('alergias', 'antecedentes_patologicos', 'antecedentes_no_patologicos')
        }),
        ('Cuenta', {
            'fields': ('saldo',)
        }),
        ('Información Adicional', {
            'fields': ('notas', 'activo', 'ultima_visita', 'fecha_registro')
        }),
    )

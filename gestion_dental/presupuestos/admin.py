from django.contrib import admin, messages
from django.db.models import Sum

from .models import ItemPresupuesto, PagoPresupuesto, Presupuesto, TratamientoDental


def _es_pendiente(obj):
    return obj is None or obj.estado == 'pendiente'


@admin.register(TratamientoDental)
class TratamientoDentalAdmin(admin.ModelAdmin):
    list_display = ['nombre', 'codigo', 'precio', 'activo']
    list_filter = ['activo']
    search_fields = ['nombre', 'codigo']


class ItemPresupuestoInline(admin.TabularInline):
    model = ItemPresupuesto
    extra = 0
    fields = ['orden', 'nombre', 'codigo', 'diente', 'tratamiento', 'precio']

    # Los ítems de un presupuesto aceptado o rechazado no se tocan
    def has_add_permission(self, request, obj=None):
        return _es_pendiente(obj) and super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        return _es_pendiente(obj) and super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return _es_pendiente(obj) and super().has_delete_permission(request, obj)


class PagoPresupuestoInline(admin.TabularInline):
    model = PagoPresupuesto
    extra = 0
    # Los pagos se registran con presupuestos.servicios.registrar_pago
    readonly_fields = ['monto', 'fecha', 'metodo', 'creado_el']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Presupuesto)
class PresupuestoAdmin(admin.ModelAdmin):
    list_display = ['id', 'paciente', 'estado', 'total', 'tipo_plan', 'duracion', 'creado_el']
    list_filter = ['estado', 'tipo_plan', 'creado_el']
    search_fields = ['paciente__nombre', 'paciente__apellido', 'paciente__dni']
    readonly_fields = ['estado', 'total', 'cargo_saldo', 'fecha_aceptacion', 'fecha_rechazo', 'creado_el', 'actualizado_el']
    # Una vez aceptado o rechazado, el plan queda fijo
    campos_plan = ['paciente', 'tipo_plan', 'duracion', 'tasa_interes']
    inlines = [ItemPresupuestoInline, PagoPresupuestoInline]
    date_hierarchy = 'creado_el'

    def get_readonly_fields(self, request, obj=None):
        campos = list(super().get_readonly_fields(request, obj))
        if not _es_pendiente(obj):
            campos += self.campos_plan
        return campos

    def has_delete_permission(self, request, obj=None):
        if obj is not None and not obj.puede_eliminarse:
            return False
        return super().has_delete_permission(request, obj)

    def delete_queryset(self, request, queryset):
        bloqueados = queryset.exclude(estado__in=Presupuesto.ESTADOS_ELIMINABLES)
        if bloqueados.exists():
            self.message_user(
                request,
                f"Se omitieron {bloqueados.count()} presupuestos que ya afectaron el saldo del paciente",
                messages.WARNING,
            )
        super().delete_queryset(request, queryset.filter(estado__in=Presupuesto.ESTADOS_ELIMINABLES))

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        presupuesto = form.instance
        if presupuesto.estado == 'pendiente':
            # El total de un presupuesto pendiente sigue a sus ítems
            total = presupuesto.items.aggregate(suma=Sum('precio'))['suma'] or 0
            if total != presupuesto.total:
                presupuesto.total = total
                presupuesto.save(update_fields=['total', 'actualizado_el'])

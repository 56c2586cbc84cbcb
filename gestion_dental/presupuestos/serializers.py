from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .calculadora import CONTADO, calcular_plan_pago
from .models import ItemPresupuesto, PagoPresupuesto, Presupuesto, TratamientoDental


def plan_a_json(plan):
    """Montos del plan como texto para no perder precisión en JSON"""
    return {clave: valor if clave in ('tipo', 'cuotas') else str(valor) for clave, valor in plan.items()}


class TratamientoDentalSerializer(serializers.ModelSerializer):
    class Meta:
        model = TratamientoDental
        fields = ['id', 'nombre', 'codigo', 'precio', 'activo']
        read_only_fields = ['id']


class ItemPresupuestoSerializer(serializers.ModelSerializer):
    class Meta:
        model = ItemPresupuesto
        fields = ['id', 'nombre', 'codigo', 'precio', 'diente', 'tratamiento', 'orden']
        read_only_fields = ['id', 'orden']
        extra_kwargs = {'nombre': {'required': False}, 'precio': {'required': False}}


class PagoPresupuestoSerializer(serializers.ModelSerializer):
    metodo_display = serializers.CharField(source='get_metodo_display', read_only=True)

    class Meta:
        model = PagoPresupuesto
        fields = ['id', 'monto', 'fecha', 'metodo', 'metodo_display', 'creado_el']
        read_only_fields = ['id', 'creado_el']


class PresupuestoSerializer(serializers.ModelSerializer):
    """
    Los ítems se envían al crear. El estado, el total y el cargo al saldo
    solo cambian mediante las operaciones de `presupuestos.servicios`.
    """
    items = ItemPresupuestoSerializer(many=True)
    pagos = PagoPresupuestoSerializer(many=True, read_only=True)
    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    plan_pago = serializers.SerializerMethodField()
    total_pagado = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Presupuesto
        fields = [
            'id', 'paciente', 'estado', 'estado_display', 'total', 'tipo_plan', 'duracion',
            'tasa_interes', 'cargo_saldo', 'plan_pago', 'total_pagado', 'items', 'pagos',
            'fecha_aceptacion', 'fecha_rechazo', 'notas', 'creado_el', 'actualizado_el',
        ]
        read_only_fields = [
            'id', 'estado', 'total', 'cargo_saldo', 'fecha_aceptacion', 'fecha_rechazo',
            'creado_el', 'actualizado_el',
        ]

    def get_plan_pago(self, obj):
        return plan_a_json(obj.plan_pago)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("El presupuesto debe tener al menos un ítem.")
        return value

    def validate(self, attrs):
        if self.instance is not None:
            if 'items' in attrs or 'paciente' in attrs:
                raise serializers.ValidationError("Los ítems y el paciente de un presupuesto no se pueden modificar.")
            if self.instance.estado != 'pendiente':
                raise serializers.ValidationError("Solo se puede modificar el plan de un presupuesto pendiente.")
            total = self.instance.total
        else:
            total = sum((item.get('precio') or 0 for item in attrs.get('items', [])), 0)

        instancia = self.instance
        try:
            calcular_plan_pago(
                total,
                attrs.get('tipo_plan', getattr(instancia, 'tipo_plan', CONTADO)),
                attrs.get('duracion', getattr(instancia, 'duracion', 1)),
                attrs.get('tasa_interes', getattr(instancia, 'tasa_interes', 0)),
            )
        except DjangoValidationError as e:
            raise serializers.ValidationError({'plan_pago': e.messages})
        return attrs

    def create(self, validated_data):
        from .servicios import crear_presupuesto

        presupuesto, _ = crear_presupuesto(
            validated_data['paciente'],
            validated_data['items'],
            tipo_plan=validated_data.get('tipo_plan', CONTADO),
            duracion=validated_data.get('duracion', 1),
            tasa_interes=validated_data.get('tasa_interes', 0),
            notas=validated_data.get('notas', ''),
        )
        return presupuesto

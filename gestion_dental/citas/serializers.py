from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .disponibilidad import validar_duracion, verificar_disponibilidad
from .models import AuditoriaLog, Cita, HorarioClinica
from .models_auditoria import registrar_auditoria

CAMPOS_HORARIO = ('fecha_hora', 'duracion', 'dentista', 'sillon')


class CitaSerializer(serializers.ModelSerializer):
    """
    El estado solo cambia con las operaciones de `citas.servicios`
    (completar, cancelar o al registrar una consulta).
    """
    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    nombre_paciente = serializers.CharField(read_only=True)
    fin = serializers.DateTimeField(read_only=True)

    class Meta:
        model = Cita
        fields = [
            'id', 'fecha_hora', 'duracion', 'fin', 'paciente', 'paciente_nombre', 'paciente_telefono',
            'nombre_paciente', 'dentista', 'sillon', 'motivo', 'notas', 'estado', 'estado_display',
            'origen', 'fecha_completada', 'creada_el', 'actualizada_el',
        ]
        read_only_fields = ['id', 'estado', 'fecha_completada', 'creada_el', 'actualizada_el']
        extra_kwargs = {'duracion': {'required': False}}

    def validate(self, attrs):
        instancia = self.instance
        if instancia is not None:
            if instancia.estado not in Cita.ESTADOS_PENDIENTES:
                raise serializers.ValidationError("Solo se pueden modificar citas programadas o confirmadas.")
            if not any(campo in attrs for campo in CAMPOS_HORARIO):
                return attrs

        try:
            duracion = validar_duracion(attrs.get('duracion', getattr(instancia, 'duracion', None)))
        except DjangoValidationError as e:
            raise serializers.ValidationError({'duracion': e.messages})
        attrs['duracion'] = duracion

        resultado = verificar_disponibilidad(
            attrs.get('fecha_hora', getattr(instancia, 'fecha_hora', None)),
            duracion,
            attrs.get('dentista', getattr(instancia, 'dentista', '')),
            attrs.get('sillon', getattr(instancia, 'sillon', '')),
            excluir=getattr(instancia, 'pk', None),
        )
        if not resultado['disponible']:
            raise serializers.ValidationError({'fecha_hora': [resultado['motivo']]})
        return attrs

    def create(self, validated_data):
        from .servicios import agendar_cita

        return agendar_cita(**validated_data)

    def update(self, instance, validated_data):
        cita = super().update(instance, validated_data)
        registrar_auditoria(
            'actualizar', 'citas', f"Cita {cita.pk} modificada",
            detalles={campo: validated_data[campo] for campo in CAMPOS_HORARIO if campo in validated_data},
            objeto=cita,
        )
        return cita


class HorarioClinicaSerializer(serializers.ModelSerializer):
    dia_semana_display = serializers.CharField(source='get_dia_semana_display', read_only=True)

    class Meta:
        model = HorarioClinica
        fields = ['id', 'dia_semana', 'dia_semana_display', 'abierto', 'hora_inicio', 'hora_fin']
        read_only_fields = ['id']

    def validate(self, attrs):
        inicio = attrs.get('hora_inicio', getattr(self.instance, 'hora_inicio', None))
        fin = attrs.get('hora_fin', getattr(self.instance, 'hora_fin', None))
        if inicio and fin and fin <= inicio:
            raise serializers.ValidationError("La hora de fin debe ser mayor que la hora de inicio.")
        return attrs


class AuditoriaLogSerializer(serializers.ModelSerializer):
    accion_display = serializers.CharField(source='get_accion_display', read_only=True)
    modulo_display = serializers.CharField(source='get_modulo_display', read_only=True)

    class Meta:
        model = AuditoriaLog
        fields = [
            'id', 'usuario_nombre', 'accion', 'accion_display', 'modulo', 'modulo_display',
            'descripcion', 'detalles', 'ip_address', 'fecha_hora', 'objeto_id', 'tipo_objeto',
        ]
        read_only_fields = ['id', 'fecha_hora']

    def validate(self, attrs):
        if self.instance is not None:
            raise serializers.ValidationError("Los registros de auditoría no se modifican.")
        return attrs

    def validate_detalles(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Los detalles deben ser un objeto.")
        return value

from rest_framework import serializers
from .models import Consulta, Odontograma


class OdontogramaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Odontograma
        fields = ['id', 'paciente', 'datos', 'creado_el', 'actualizado_el']
        read_only_fields = ['id', 'creado_el', 'actualizado_el']

    def validate_datos(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("El odontograma debe ser un objeto con 'seleccionados' y 'tratamientos'.")
        return value


class ConsultaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Consulta
        fields = [
            'id', 'paciente', 'fecha', 'motivo', 'diagnostico', 'plan_tratamiento',
            'medicamentos', 'notas', 'consulta_origen', 'cita', 'creado_el',
        ]
        read_only_fields = ['id', 'cita', 'creado_el']

    def validate_medicamentos(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Los medicamentos deben ser una lista.")
        return value

    def validate(self, attrs):
        origen = attrs.get('consulta_origen')
        if origen is None:
            return attrs
        paciente = attrs.get('paciente', getattr(self.instance, 'paciente', None))
        if paciente is not None and origen.paciente_id != paciente.pk:
            raise serializers.ValidationError({'consulta_origen': ["La consulta de origen pertenece a otro paciente."]})
        if self.instance is not None and origen.pk == self.instance.pk:
            raise serializers.ValidationError({'consulta_origen': ["Una consulta no puede ser control de sí misma."]})
        return attrs

    def create(self, validated_data):
        # La consulta también actualiza la última visita y las citas del día
        from .servicios import crear_consulta

        return crear_consulta(
            validated_data['paciente'],
            validated_data['motivo'],
            diagnostico=validated_data.get('diagnostico', ''),
            plan_tratamiento=validated_data.get('plan_tratamiento', ''),
            medicamentos=validated_data.get('medicamentos'),
            notas=validated_data.get('notas', ''),
            fecha=validated_data.get('fecha'),
            consulta_origen=validated_data.get('consulta_origen'),
        )

from rest_framework import serializers
from .mediciones import Cartilla
from .models import Periodontograma


class PeriodontogramaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Periodontograma
        fields = ['id', 'paciente', 'datos', 'fecha_examen', 'observaciones', 'creado_el', 'actualizado_el']
        read_only_fields = ['id', 'creado_el', 'actualizado_el']

    def validate_datos(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Las mediciones deben ser un objeto indexado por número de diente.")
        # Se guarda siempre la cartilla completa, sin claves desconocidas
        return Cartilla(value).a_dict()

from rest_framework import serializers
from .models import Parametro


class ParametroSerializer(serializers.ModelSerializer):
    class Meta:
        model = Parametro
        fields = ['id', 'clave', 'valor', 'descripcion', 'actualizado_el']
        read_only_fields = ['id', 'actualizado_el']

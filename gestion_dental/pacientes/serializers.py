from rest_framework import serializers
from .models import Paciente


class PacienteSerializer(serializers.ModelSerializer):
    nombre_completo = serializers.CharField(read_only=True)

    class Meta:
        model = Paciente
        fields = [
            'id', 'nombre', 'apellido', 'nombre_completo', 'dni', 'email', 'telefono',
            'fecha_nacimiento', 'alergias', 'antecedentes_patologicos',
            'antecedentes_no_patologicos', 'saldo', 'ultima_visita', 'activo',
            'notas', 'fecha_registro',
        ]
        # El saldo solo cambia mediante las operaciones de presupuestos
        read_only_fields = ['id', 'saldo', 'ultima_visita', 'fecha_registro']

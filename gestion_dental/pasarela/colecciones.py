"""
Registro de colecciones expuestas por la pasarela.

Cada colección se asocia a un modelo y a su serializer; los nombres de
colección son los que usan los clientes de la API.
"""
from django.utils.module_loading import import_string

from .excepciones import ColeccionDesconocida

COLECCIONES = {
    'patients': 'pacientes.serializers.PacienteSerializer',
    'presupuestos': 'presupuestos.serializers.PresupuestoSerializer',
    'tratamientos_dentales': 'presupuestos.serializers.TratamientoDentalSerializer',
    'periodontogramas': 'periodontograma.serializers.PeriodontogramaSerializer',
    'odontogramas': 'historial_clinico.serializers.OdontogramaSerializer',
    'consultas': 'historial_clinico.serializers.ConsultaSerializer',
    'config': 'configuracion.serializers.ParametroSerializer',
    'citas': 'citas.serializers.CitaSerializer',
    'horarios_clinica': 'citas.serializers.HorarioClinicaSerializer',
    'auditoria': 'citas.serializers.AuditoriaLogSerializer',
}


def obtener_serializer(coleccion):
    """
    Retorna la clase serializer de una colección.

    Raises:
        ColeccionDesconocida: Si la colección no está registrada
    """
    ruta = COLECCIONES.get(coleccion)
    if not ruta:
        raise ColeccionDesconocida(f"Colección desconocida: {coleccion!r}")
    return import_string(ruta)


def obtener_modelo(coleccion):
    return obtener_serializer(coleccion).Meta.model


def coleccion_de_modelo(modelo):
    """Nombre de la colección registrada para un modelo, o None"""
    for nombre in COLECCIONES:
        if obtener_modelo(nombre) is modelo:
            return nombre
    return None

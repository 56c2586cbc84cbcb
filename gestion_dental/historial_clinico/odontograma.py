"""
Selección de dientes del odontograma y tratamientos asignados.

Al seleccionar un diente se le asigna un tratamiento del catálogo; los
dientes con tratamiento se convierten en ítems de presupuesto.
"""
import copy
import datetime
import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.utils import timezone

from periodontograma.dientes import es_numero_valido, validar_numero

logger = logging.getLogger(__name__)

PLANIFICADO = 'planificado'
EN_PROGRESO = 'en_progreso'
COMPLETADO = 'completado'
CANCELADO = 'cancelado'

ESTADOS_TRATAMIENTO = (PLANIFICADO, EN_PROGRESO, COMPLETADO, CANCELADO)

COLORES_ESTADO = {
    PLANIFICADO: 'blue',
    COMPLETADO: 'green',
}


def _precio(valor):
    try:
        return Decimal(str(valor or 0))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Precio de tratamiento inválido: {valor!r}")


def _tratamiento_a_dict(tratamiento):
    """Acepta un dict o una instancia de TratamientoDental"""
    if isinstance(tratamiento, dict):
        datos = tratamiento
    else:
        datos = {
            'id': tratamiento.pk,
            'nombre': tratamiento.nombre,
            'codigo': tratamiento.codigo,
            'precio': tratamiento.precio,
        }
    if not datos.get('nombre'):
        raise ValidationError("El tratamiento debe tener un nombre")
    return {
        'id': datos.get('id'),
        'nombre': datos['nombre'],
        'codigo': datos.get('codigo') or '',
        'precio': str(_precio(datos.get('precio'))),
    }


class SeleccionOdontograma:
    """
    Estado del odontograma de un paciente.

    `seleccionados` conserva el orden en que se marcaron los dientes;
    `tratamientos` asocia cada diente a {tratamiento, fecha, estado}.
    """

    def __init__(self, datos=None):
        self.seleccionados = []
        self.tratamientos = {}
        self.modificado = False
        if datos:
            self._cargar(datos)

    def _cargar(self, datos):
        for numero in datos.get('seleccionados') or []:
            if not es_numero_valido(numero):
                logger.warning(f"Se ignora el diente desconocido {numero!r} al cargar el odontograma")
                continue
            numero = validar_numero(numero)
            if numero not in self.seleccionados:
                self.seleccionados.append(numero)
        for clave, anotacion in (datos.get('tratamientos') or {}).items():
            if not es_numero_valido(clave) or not isinstance(anotacion, dict):
                logger.warning(f"Se ignora el tratamiento del diente {clave!r} al cargar el odontograma")
                continue
            numero = validar_numero(clave)
            self.tratamientos[numero] = copy.deepcopy(anotacion)
            if numero not in self.seleccionados:
                self.seleccionados.append(numero)

    def seleccionar(self, numero):
        """Retorna True si el diente no estaba seleccionado"""
        numero = validar_numero(numero)
        if numero in self.seleccionados:
            return False
        self.seleccionados.append(numero)
        self.modificado = True
        return True

    def deseleccionar(self, numero):
        """Quita el diente de la selección junto con su tratamiento"""
        numero = validar_numero(numero)
        if numero not in self.seleccionados:
            return False
        self.seleccionados.remove(numero)
        self.tratamientos.pop(numero, None)
        self.modificado = True
        return True

    def asignar_tratamiento(self, numero, tratamiento, fecha=None, estado=PLANIFICADO):
        """
        Asigna (o reemplaza) el tratamiento de un diente y lo selecciona.

        Args:
            numero: Número FDI del diente
            tratamiento: dict con nombre, precio, codigo, id o un TratamientoDental
            fecha: date/datetime o texto ISO (por defecto, ahora)
            estado: planificado, en_progreso, completado o cancelado
        """
        numero = validar_numero(numero)
        if estado not in ESTADOS_TRATAMIENTO:
            raise ValidationError(f"Estado de tratamiento inválido: {estado!r}")
        tratamiento = _tratamiento_a_dict(tratamiento)
        if fecha is None:
            fecha = timezone.now()
        if isinstance(fecha, (datetime.date, datetime.datetime)):
            fecha = fecha.isoformat()

        self.seleccionar(numero)
        self.tratamientos[numero] = {
            'tratamiento': tratamiento,
            'fecha': fecha,
            'estado': estado,
        }
        self.modificado = True
        return self.tratamientos[numero]

    def cambiar_estado(self, numero, estado):
        numero = validar_numero(numero)
        if estado not in ESTADOS_TRATAMIENTO:
            raise ValidationError(f"Estado de tratamiento inválido: {estado!r}")
        if numero not in self.tratamientos:
            raise ValidationError(f"El diente {numero} no tiene tratamiento asignado")
        self.tratamientos[numero]['estado'] = estado
        self.modificado = True

    def quitar_tratamiento(self, numero):
        """Quita el tratamiento pero mantiene el diente seleccionado"""
        numero = validar_numero(numero)
        if self.tratamientos.pop(numero, None) is not None:
            self.modificado = True

    def colores(self):
        """Color de cada diente según el estado de su tratamiento"""
        return {
            numero: COLORES_ESTADO[anotacion['estado']]
            for numero, anotacion in self.tratamientos.items()
            if anotacion.get('estado') in COLORES_ESTADO
        }

    def items_presupuesto(self):
        """
        Ítems de presupuesto para los dientes con tratamiento no cancelado,
        en el orden de selección.
        """
        items = []
        for numero in self.seleccionados:
            anotacion = self.tratamientos.get(numero)
            if not anotacion or anotacion.get('estado') == CANCELADO:
                continue
            tratamiento = anotacion.get('tratamiento') or {}
            if not tratamiento.get('nombre'):
                continue
            items.append({
                'nombre': tratamiento['nombre'],
                'codigo': tratamiento.get('codigo') or '',
                'precio': _precio(tratamiento.get('precio')),
                'diente': numero,
                'tratamiento': tratamiento.get('id'),
            })
        return items

    def total(self):
        return sum((item['precio'] for item in self.items_presupuesto()), Decimal('0'))

    def marcar_guardado(self):
        self.modificado = False

    def a_dict(self):
        return {
            'seleccionados': list(self.seleccionados),
            'tratamientos': {str(numero): copy.deepcopy(anotacion) for numero, anotacion in self.tratamientos.items()},
        }

"""
Carga y guardado de la cartilla periodontal a través de la pasarela.
"""
import logging

from django.core.exceptions import ValidationError

from pasarela.base import obtener_pasarela
from .mediciones import Cartilla

logger = logging.getLogger(__name__)

COLECCION = 'periodontogramas'


def filtro_paciente(paciente_id):
    try:
        return f"paciente = {int(paciente_id)}"
    except (TypeError, ValueError):
        raise ValidationError(f"ID de paciente inválido: {paciente_id!r}")


class ServicioPeriodontograma:
    """
    Un periodontograma por paciente. La cartilla vive en memoria mientras se
    edita y solo se persiste al llamar a `guardar`.
    """

    def __init__(self, pasarela=None):
        self.pasarela = pasarela or obtener_pasarela()

    def registro(self, paciente_id):
        """Registro guardado del paciente, o None"""
        return self.pasarela.primero(COLECCION, filtro=filtro_paciente(paciente_id))

    def cargar(self, paciente_id):
        """
        Retorna la cartilla del paciente; una cartilla vacía si no tiene.

        Raises:
            ErrorPasarela: Si la pasarela falla
        """
        registro = self.registro(paciente_id)
        if registro is None:
            logger.info(f"Paciente {paciente_id} sin periodontograma; se usa una cartilla vacía")
            return Cartilla()
        return Cartilla(registro.get('datos') or {})

    def guardar(self, paciente_id, cartilla, observaciones=None, fecha_examen=None):
        """
        Crea o actualiza el periodontograma del paciente.

        Si la pasarela falla, la excepción se propaga y la cartilla conserva
        `modificado = True`.

        Returns:
            dict: Registro guardado
        """
        campos = {'datos': cartilla.a_dict()}
        if observaciones is not None:
            campos['observaciones'] = observaciones
        if fecha_examen is not None:
            campos['fecha_examen'] = fecha_examen.isoformat() if hasattr(fecha_examen, 'isoformat') else fecha_examen

        existente = self.registro(paciente_id)
        if existente:
            registro = self.pasarela.actualizar(COLECCION, existente['id'], campos)
            logger.info(f"Periodontograma {existente['id']} del paciente {paciente_id} actualizado")
        else:
            campos['paciente'] = int(paciente_id)
            registro = self.pasarela.crear(COLECCION, campos)
            logger.info(f"Periodontograma creado para el paciente {paciente_id}")

        cartilla.marcar_guardado()
        return registro

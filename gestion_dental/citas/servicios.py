"""
Operaciones sobre citas: agendar, completar y cancelar.
"""
import datetime
import logging
from typing import List

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .disponibilidad import validar_duracion, verificar_disponibilidad
from .models import Cita
from .models_auditoria import registrar_auditoria

logger = logging.getLogger(__name__)


def agendar_cita(fecha_hora, duracion=None, dentista='', sillon='', **campos) -> Cita:
    """
    Crea una cita programada si el horario está disponible.

    Args:
        campos: paciente, paciente_nombre, paciente_telefono, motivo, notas, origen

    Raises:
        ValidationError: Si el horario no está disponible o la duración es inválida
    """
    minutos = validar_duracion(duracion)
    with transaction.atomic():
        resultado = verificar_disponibilidad(fecha_hora, minutos, dentista, sillon)
        if not resultado['disponible']:
            raise ValidationError(resultado['motivo'])
        cita = Cita.objects.create(
            fecha_hora=fecha_hora,
            duracion=minutos,
            dentista=dentista or '',
            sillon=sillon or '',
            **campos
        )
        registrar_auditoria(
            'crear', 'citas', f"Cita agendada para {cita.nombre_paciente}",
            detalles={'fecha_hora': cita.fecha_hora, 'dentista': cita.dentista, 'sillon': cita.sillon},
            objeto=cita,
        )

    logger.info(f"Cita {cita.pk} agendada: {cita}")
    return cita


def _cambiar_estado(cita_id, metodo, verbo) -> Cita:
    with transaction.atomic():
        cita = Cita.objects.select_for_update().get(pk=cita_id)
        anterior = cita.estado
        if not getattr(cita, metodo)():
            raise ValidationError(f"No se puede {verbo} una cita en estado '{cita.get_estado_display()}'")
        registrar_auditoria(
            'cambio_estado', 'citas', f"Cita {cita.pk}: {anterior} -> {cita.estado}",
            detalles={'estado_anterior': anterior, 'estado': cita.estado},
            objeto=cita,
        )
    logger.info(f"Cita {cita.pk}: {anterior} -> {cita.estado}")
    return cita


def completar_cita(cita_id) -> Cita:
    return _cambiar_estado(cita_id, 'completar', 'completar')


def cancelar_cita(cita_id) -> Cita:
    return _cambiar_estado(cita_id, 'cancelar', 'cancelar')


def completar_citas_del_dia(paciente, fecha=None) -> List[Cita]:
    """
    Marca como completadas las citas pendientes del paciente en el día de
    `fecha` (hora local). Se usa al registrar una consulta.

    Returns:
        Lista de citas completadas (puede estar vacía)
    """
    fecha = fecha or timezone.now()
    if isinstance(fecha, datetime.datetime):
        dia = timezone.localtime(fecha).date() if timezone.is_aware(fecha) else fecha.date()
    else:
        dia = fecha
    completadas = []
    with transaction.atomic():
        citas = Cita.objects.select_for_update().filter(
            paciente=paciente,
            fecha_hora__date=dia,
            estado__in=Cita.ESTADOS_PENDIENTES,
        )
        for cita in citas:
            anterior = cita.estado
            cita.completar()
            registrar_auditoria(
                'cambio_estado', 'citas', f"Cita {cita.pk} completada al registrar la consulta",
                detalles={'estado_anterior': anterior, 'estado': cita.estado},
                objeto=cita,
            )
            completadas.append(cita)

    if completadas:
        logger.info(f"Citas completadas del paciente {getattr(paciente, 'pk', paciente)} el {dia}: {[c.pk for c in completadas]}")
    return completadas

"""
Verificación de disponibilidad para agendar citas.

Una cita nueva no puede superponerse en el tiempo con otra del mismo dentista
ni del mismo sillón. Las citas canceladas no ocupan horario. Si la clínica
tiene horario configurado, la cita debe caber completa dentro del horario del
día.
"""
import logging
from datetime import timedelta
from typing import Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from .models import Cita, HorarioClinica

logger = logging.getLogger(__name__)

DENTISTA_OCUPADO = "Dentista ocupado en este horario"
SILLON_OCUPADO = "Sillón ocupado en este horario"
CLINICA_CERRADA = "Clínica cerrada este día"
FUERA_DE_HORARIO = "Fuera de horario de atención"


def duracion_maxima():
    return getattr(settings, 'CITAS_DURACION_MAX', 480)


def validar_duracion(duracion):
    """Retorna la duración en minutos como entero, o la por defecto si es None"""
    if duracion in (None, ''):
        return getattr(settings, 'CITAS_DURACION_DEFECTO', 30)
    try:
        minutos = int(duracion)
    except (TypeError, ValueError):
        raise ValidationError("La duración debe ser un número entero de minutos")
    if minutos < 1 or minutos > duracion_maxima():
        raise ValidationError(f"La duración debe estar entre 1 y {duracion_maxima()} minutos")
    return minutos


def _mismo(a, b):
    return bool(a) and bool(b) and a.strip().lower() == b.strip().lower()


def _motivo_horario(inicio, fin) -> Optional[str]:
    horarios = {horario.dia_semana: horario for horario in HorarioClinica.objects.all()}
    if not horarios:
        # Sin horario configurado se puede agendar a cualquier hora
        return None

    inicio_local = timezone.localtime(inicio)
    fin_local = timezone.localtime(fin)
    horario = horarios.get(inicio_local.weekday())
    if horario is None or not horario.abierto:
        return CLINICA_CERRADA
    if fin_local.date() != inicio_local.date():
        return FUERA_DE_HORARIO
    if inicio_local.time() < horario.hora_inicio or fin_local.time() > horario.hora_fin:
        return FUERA_DE_HORARIO
    return None


def verificar_disponibilidad(fecha_hora, duracion=None, dentista='', sillon='', excluir=None) -> Dict:
    """
    Verifica si se puede agendar una cita.

    Se revisa en orden: dentista, sillón y horario de la clínica. Se informa
    solo el primer motivo encontrado.

    Args:
        fecha_hora: Inicio de la cita (sin zona horaria se interpreta en la zona local)
        duracion: Minutos (por defecto CITAS_DURACION_DEFECTO)
        dentista: Nombre o identificador del dentista (opcional)
        sillon: Sillón o box (opcional)
        excluir: Id de una cita a ignorar, para reprogramarla

    Returns:
        dict: {'disponible': bool, 'motivo': str o None}

    Raises:
        ValidationError: Si la duración está fuera de rango
    """
    minutos = validar_duracion(duracion)
    if timezone.is_naive(fecha_hora):
        fecha_hora = timezone.make_aware(fecha_hora)
    inicio = fecha_hora
    fin = inicio + timedelta(minutes=minutos)

    candidatas = Cita.objects.exclude(estado='cancelada').filter(
        fecha_hora__lt=fin,
        fecha_hora__gt=inicio - timedelta(minutes=duracion_maxima()),
    )
    if excluir:
        candidatas = candidatas.exclude(pk=excluir)
    superpuestas = [cita for cita in candidatas if cita.fin > inicio]

    motivo = None
    if any(_mismo(dentista, cita.dentista) for cita in superpuestas):
        motivo = DENTISTA_OCUPADO
    elif any(_mismo(sillon, cita.sillon) for cita in superpuestas):
        motivo = SILLON_OCUPADO
    else:
        motivo = _motivo_horario(inicio, fin)

    if motivo:
        logger.info(f"Horario no disponible {inicio.isoformat()} ({minutos} min): {motivo}")
    return {'disponible': motivo is None, 'motivo': motivo}

import datetime

from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date, parse_datetime, parse_time
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import permissions

from pasarela.respuestas import manejar_errores
from .disponibilidad import verificar_disponibilidad
from .serializers import CitaSerializer
from .servicios import cancelar_cita, completar_cita


def _fecha_hora(parametros):
    """Acepta 'fecha_hora' ISO o el par 'fecha' + 'hora'"""
    valor = parametros.get('fecha_hora')
    if valor:
        fecha_hora = parse_datetime(valor)
    else:
        fecha = parse_date(parametros.get('fecha') or '')
        hora = parse_time(parametros.get('hora') or '')
        fecha_hora = datetime.datetime.combine(fecha, hora) if fecha and hora else None
    if fecha_hora is None:
        raise ValidationError("Indique 'fecha_hora' (AAAA-MM-DDTHH:MM) o 'fecha' y 'hora'")
    return fecha_hora


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_disponibilidad(request):
    """
    Verifica si un horario está libre.

    Parámetros GET:
    - fecha_hora: AAAA-MM-DDTHH:MM (o bien fecha=AAAA-MM-DD y hora=HH:MM)
    - duracion: Minutos (opcional)
    - dentista: Dentista a revisar (opcional)
    - sillon: Sillón o box a revisar (opcional)
    - excluir: Id de una cita a ignorar (opcional)

    Retorna:
    - 200: { "disponible": true/false, "motivo": "..." }
    - 400: Parámetros inválidos
    """
    parametros = request.GET
    resultado = verificar_disponibilidad(
        _fecha_hora(parametros),
        parametros.get('duracion'),
        dentista=parametros.get('dentista', ''),
        sillon=parametros.get('sillon', ''),
        excluir=parametros.get('excluir') or None,
    )
    return Response({"success": True, **resultado})


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_completar_cita(request, cita_id):
    cita = completar_cita(cita_id)
    return Response({"success": True, "message": "Cita completada", "data": CitaSerializer(cita).data})


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_cancelar_cita(request, cita_id):
    cita = cancelar_cita(cita_id)
    return Response({"success": True, "message": "Cita cancelada", "data": CitaSerializer(cita).data})

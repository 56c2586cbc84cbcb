from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from pasarela.respuestas import manejar_errores
from .calculadora import CONTADO, calcular_plan_pago, generar_cronograma
from .models import Presupuesto
from .serializers import PresupuestoSerializer, plan_a_json
from .servicios import aceptar_presupuesto, rechazar_presupuesto, registrar_pago


def _fecha(valor, por_defecto):
    if not valor:
        return por_defecto
    fecha = parse_date(str(valor))
    if fecha is None:
        raise ValidationError(f"Fecha inválida: {valor!r} (formato esperado AAAA-MM-DD)")
    return fecha


def _cronograma_json(cronograma):
    return [
        {'numero': cuota['numero'], 'fecha': cuota['fecha'].isoformat(), 'monto': str(cuota['monto'])}
        for cuota in cronograma
    ]


def _respuesta_operacion(presupuesto, delta, mensaje):
    presupuesto.refresh_from_db()
    return Response({
        "success": True,
        "message": mensaje,
        "variacion_saldo": str(delta),
        "saldo_paciente": str(presupuesto.paciente.saldo),
        "data": PresupuestoSerializer(presupuesto).data,
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_calcular_plan(request):
    """
    Calcula un plan de pago sin guardarlo.

    Espera JSON:
    {
      "subtotal": "1300.00",
      "tipo_plan": "mensual",
      "duracion": 6,
      "tasa_interes": 10,
      "fecha_inicio": "2025-01-15"   (opcional)
    }

    Retorna:
    - 200: { "plan": {...}, "cronograma": [...] }
    - 400: Parámetros inválidos
    """
    data = request.data
    plan = calcular_plan_pago(
        data.get('subtotal', 0),
        data.get('tipo_plan', CONTADO),
        data.get('duracion', 1),
        data.get('tasa_interes', 0),
    )
    fecha_inicio = _fecha(data.get('fecha_inicio'), timezone.localdate())
    return Response({
        "success": True,
        "plan": plan_a_json(plan),
        "cronograma": _cronograma_json(generar_cronograma(plan, fecha_inicio)),
    })


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_aceptar_presupuesto(request, presupuesto_id):
    presupuesto, delta = aceptar_presupuesto(presupuesto_id)
    return _respuesta_operacion(presupuesto, delta, "Presupuesto aceptado")


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_rechazar_presupuesto(request, presupuesto_id):
    presupuesto, delta = rechazar_presupuesto(presupuesto_id)
    return _respuesta_operacion(presupuesto, delta, "Presupuesto rechazado")


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_registrar_pago(request, presupuesto_id):
    """
    Registra un pago.

    Espera JSON:
    {
      "monto": "500.00",
      "metodo": "efectivo",        (efectivo, tarjeta, transferencia, cheque)
      "fecha": "2025-02-01"        (opcional)
    }
    """
    data = request.data
    if data.get('monto') in (None, ''):
        return Response(
            {"success": False, "detail": "El monto es requerido"},
            status=status.HTTP_400_BAD_REQUEST
        )
    presupuesto, delta = registrar_pago(
        presupuesto_id,
        data.get('monto'),
        metodo=data.get('metodo', 'efectivo'),
        fecha=_fecha(data.get('fecha'), None),
    )
    return _respuesta_operacion(presupuesto, delta, "Pago registrado")


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_cronograma_presupuesto(request, presupuesto_id):
    """
    Cronograma de cuotas de un presupuesto.

    Parámetros GET:
    - fecha_inicio: AAAA-MM-DD (por defecto, la fecha de aceptación o hoy)
    """
    presupuesto = Presupuesto.objects.get(pk=presupuesto_id)
    if presupuesto.fecha_aceptacion:
        por_defecto = timezone.localtime(presupuesto.fecha_aceptacion).date()
    else:
        por_defecto = timezone.localdate()
    fecha_inicio = _fecha(request.GET.get('fecha_inicio'), por_defecto)

    plan = presupuesto.plan_pago
    return Response({
        "success": True,
        "presupuesto": presupuesto.pk,
        "plan": plan_a_json(plan),
        "cronograma": _cronograma_json(generar_cronograma(plan, fecha_inicio)),
    })

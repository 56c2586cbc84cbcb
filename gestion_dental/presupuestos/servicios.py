"""
Operaciones de presupuestos que afectan el saldo del paciente.

Cada operación corre en una transacción con bloqueo de filas sobre el
presupuesto y el paciente, y retorna el presupuesto junto con la variación
aplicada al saldo. Cada transición se anota en el registro de auditoría.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from citas.models_auditoria import registrar_auditoria
from pacientes.models import Paciente
from periodontograma.dientes import validar_numero
from .calculadora import CONTADO, calcular_plan_pago, redondear
from .models import ItemPresupuesto, PagoPresupuesto, Presupuesto, TratamientoDental

logger = logging.getLogger(__name__)

CERO = Decimal('0.00')


def _monto(valor, nombre="El monto"):
    try:
        return redondear(Decimal(str(valor)))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{nombre} debe ser un número válido")


def _bloquear(presupuesto_id) -> Tuple[Presupuesto, Paciente]:
    presupuesto = Presupuesto.objects.select_for_update().get(pk=presupuesto_id)
    paciente = Paciente.objects.select_for_update().get(pk=presupuesto.paciente_id)
    return presupuesto, paciente


def _ajustar_saldo(paciente, delta):
    Paciente.objects.filter(pk=paciente.pk).update(saldo=F('saldo') + delta)
    paciente.refresh_from_db(fields=['saldo'])


def _preparar_item(datos, orden):
    nombre = (datos.get('nombre') or '').strip()
    tratamiento = datos.get('tratamiento')
    if tratamiento is not None and not isinstance(tratamiento, TratamientoDental):
        try:
            tratamiento = TratamientoDental.objects.get(pk=tratamiento)
        except (TratamientoDental.DoesNotExist, ValueError, TypeError):
            raise ValidationError(f"El tratamiento {tratamiento!r} no existe")

    if not nombre and tratamiento:
        nombre = tratamiento.nombre
    if not nombre:
        raise ValidationError("Cada ítem debe tener un nombre")

    precio = datos.get('precio')
    if precio is None and tratamiento:
        precio = tratamiento.precio
    precio = _monto(precio, "El precio")
    if precio < 0:
        raise ValidationError(f"El precio de '{nombre}' no puede ser negativo")

    diente = datos.get('diente')
    if diente not in (None, ''):
        diente = validar_numero(diente)
    else:
        diente = None

    return ItemPresupuesto(
        nombre=nombre,
        codigo=datos.get('codigo') or (tratamiento.codigo if tratamiento else ''),
        precio=precio,
        diente=diente,
        tratamiento=tratamiento,
        orden=orden,
    )


def crear_presupuesto(paciente, items: List[Dict], tipo_plan=CONTADO, duracion=1,
                      tasa_interes=0, notas='') -> Tuple[Presupuesto, Decimal]:
    """
    Crea un presupuesto pendiente, sin pagos. No modifica el saldo.

    Args:
        paciente: Paciente o su id
        items: Lista de dicts con nombre, precio y opcionalmente codigo,
            diente y tratamiento (instancia o id)
        tipo_plan: 'contado', 'semanal', 'quincenal' o 'mensual'
        duracion: Número de cuotas
        tasa_interes: Porcentaje de interés

    Returns:
        tuple: (presupuesto, Decimal('0.00'))

    Raises:
        ValidationError: Sin ítems, ítems inválidos o plan inválido
    """
    if not items:
        raise ValidationError("El presupuesto debe tener al menos un ítem")

    if not isinstance(paciente, Paciente):
        paciente = Paciente.objects.get(pk=paciente)

    items_preparados = [_preparar_item(datos, orden) for orden, datos in enumerate(items)]
    total = sum((item.precio for item in items_preparados), CERO)

    # Validar el plan antes de escribir nada
    plan = calcular_plan_pago(total, tipo_plan, duracion, tasa_interes)

    with transaction.atomic():
        presupuesto = Presupuesto.objects.create(
            paciente=paciente,
            total=total,
            tipo_plan=tipo_plan,
            duracion=plan['cuotas'],
            tasa_interes=redondear(plan['tasa_interes']),
            notas=notas or '',
        )
        for item in items_preparados:
            item.presupuesto = presupuesto
        ItemPresupuesto.objects.bulk_create(items_preparados)
        registrar_auditoria(
            'crear', 'presupuestos', f"Presupuesto {presupuesto.pk} creado para el paciente {paciente.pk}",
            detalles={'total': total, 'tipo_plan': tipo_plan, 'cuotas': plan['cuotas']},
            objeto=presupuesto,
        )

    logger.info(f"Presupuesto {presupuesto.pk} creado para paciente {paciente.pk}: ${total} ({tipo_plan})")
    return presupuesto, CERO


def aceptar_presupuesto(presupuesto_id) -> Tuple[Presupuesto, Decimal]:
    """
    Acepta un presupuesto pendiente y carga su total final al saldo del paciente.

    Raises:
        ValidationError: Si el presupuesto no está pendiente
        Presupuesto.DoesNotExist: Si no existe
    """
    with transaction.atomic():
        presupuesto, paciente = _bloquear(presupuesto_id)
        if presupuesto.estado != 'pendiente':
            raise ValidationError(
                f"Solo se pueden aceptar presupuestos pendientes (estado actual: {presupuesto.estado})"
            )

        cargo = presupuesto.total_final
        presupuesto.estado = 'aceptado'
        presupuesto.cargo_saldo = cargo
        presupuesto.fecha_aceptacion = timezone.now()
        presupuesto.save(update_fields=['estado', 'cargo_saldo', 'fecha_aceptacion', 'actualizado_el'])
        _ajustar_saldo(paciente, cargo)
        registrar_auditoria(
            'cambio_estado', 'presupuestos', f"Presupuesto {presupuesto.pk} aceptado",
            detalles={
                'estado_anterior': 'pendiente', 'estado': presupuesto.estado,
                'variacion_saldo': cargo, 'saldo_paciente': paciente.saldo,
            },
            objeto=presupuesto,
        )

    logger.info(f"Presupuesto {presupuesto.pk} aceptado: saldo del paciente {paciente.pk} +${cargo} = ${paciente.saldo}")
    return presupuesto, cargo


def rechazar_presupuesto(presupuesto_id) -> Tuple[Presupuesto, Decimal]:
    """
    Rechaza un presupuesto pendiente, o uno aceptado que aún no tiene pagos.
    Si estaba aceptado se revierte el cargo al saldo.
    """
    with transaction.atomic():
        presupuesto, paciente = _bloquear(presupuesto_id)

        if presupuesto.estado == 'pendiente':
            delta = CERO
        elif presupuesto.estado == 'aceptado' and not presupuesto.pagos.exists():
            delta = -presupuesto.cargo_saldo
        else:
            raise ValidationError(
                f"No se puede rechazar un presupuesto en estado '{presupuesto.estado}' o con pagos registrados"
            )

        anterior = presupuesto.estado
        presupuesto.estado = 'rechazado'
        presupuesto.fecha_rechazo = timezone.now()
        presupuesto.save(update_fields=['estado', 'fecha_rechazo', 'actualizado_el'])
        if delta:
            _ajustar_saldo(paciente, delta)
        registrar_auditoria(
            'cambio_estado', 'presupuestos', f"Presupuesto {presupuesto.pk} rechazado",
            detalles={
                'estado_anterior': anterior, 'estado': presupuesto.estado,
                'variacion_saldo': delta, 'saldo_paciente': paciente.saldo,
            },
            objeto=presupuesto,
        )

    logger.info(f"Presupuesto {presupuesto.pk} rechazado (variación de saldo: ${delta})")
    return presupuesto, delta


def registrar_pago(presupuesto_id, monto, metodo='efectivo', fecha=None) -> Tuple[Presupuesto, Decimal]:
    """
    Registra un pago sobre un presupuesto aceptado o con pago parcial.

    El presupuesto pasa a 'pagado' cuando los pagos acumulados cubren el cargo
    hecho al saldo al aceptarlo; si no, queda 'parcial'. El saldo del paciente
    disminuye en `monto`.

    Raises:
        ValidationError: Estado no admite pagos, monto no positivo o método inválido
    """
    monto = _monto(monto)
    if monto <= 0:
        raise ValidationError("El monto del pago debe ser mayor que cero")
    if metodo not in dict(PagoPresupuesto.METODO_CHOICES):
        raise ValidationError(f"Método de pago inválido: {metodo!r}")

    with transaction.atomic():
        presupuesto, paciente = _bloquear(presupuesto_id)
        if presupuesto.estado not in ('aceptado', 'parcial'):
            raise ValidationError(
                f"Solo se registran pagos en presupuestos aceptados o parciales (estado actual: {presupuesto.estado})"
            )

        anterior = presupuesto.estado
        PagoPresupuesto.objects.create(
            presupuesto=presupuesto,
            monto=monto,
            metodo=metodo,
            fecha=fecha or timezone.localdate(),
        )
        presupuesto.estado = 'pagado' if presupuesto.total_pagado >= presupuesto.total_a_pagar else 'parcial'
        presupuesto.save(update_fields=['estado', 'actualizado_el'])
        _ajustar_saldo(paciente, -monto)
        registrar_auditoria(
            'pago', 'presupuestos', f"Pago de ${monto} en presupuesto {presupuesto.pk}",
            detalles={
                'monto': monto, 'metodo': metodo, 'estado_anterior': anterior,
                'estado': presupuesto.estado, 'saldo_paciente': paciente.saldo,
            },
            objeto=presupuesto,
        )

    logger.info(
        f"Pago de ${monto} ({metodo}) en presupuesto {presupuesto.pk}: estado {presupuesto.estado}, "
        f"saldo del paciente {paciente.pk} = ${paciente.saldo}"
    )
    return presupuesto, -monto


def saldo_esperado(paciente) -> Decimal:
    """
    Saldo que corresponde a los presupuestos del paciente: cargos de los
    presupuestos no rechazados menos sus pagos.
    """
    presupuestos = Presupuesto.objects.filter(paciente=paciente).exclude(estado='rechazado')
    cargos = presupuestos.aggregate(suma=Sum('cargo_saldo'))['suma'] or CERO
    pagos = PagoPresupuesto.objects.filter(presupuesto__in=presupuestos).aggregate(suma=Sum('monto'))['suma'] or CERO
    return redondear(cargos - pagos)


def conciliar_saldo(paciente, aplicar=False) -> Dict:
    """
    Compara el saldo guardado con el esperado y, si `aplicar`, lo corrige.

    Returns:
        dict: paciente_id, saldo_actual, saldo_esperado, diferencia, corregido
    """
    with transaction.atomic():
        paciente = Paciente.objects.select_for_update().get(pk=getattr(paciente, 'pk', paciente))
        esperado = saldo_esperado(paciente)
        diferencia = paciente.saldo - esperado
        corregido = False

        if diferencia:
            logger.warning(
                f"Saldo descuadrado del paciente {paciente.pk}: guardado ${paciente.saldo}, "
                f"esperado ${esperado} (diferencia ${diferencia})"
            )
            if aplicar:
                Paciente.objects.filter(pk=paciente.pk).update(saldo=esperado)
                corregido = True
                registrar_auditoria(
                    'ajuste_saldo', 'pacientes', f"Saldo del paciente {paciente.pk} conciliado",
                    detalles={'saldo_anterior': paciente.saldo, 'saldo': esperado, 'diferencia': diferencia},
                    objeto=paciente,
                )
                logger.info(f"Saldo del paciente {paciente.pk} corregido a ${esperado}")

    return {
        'paciente_id': paciente.pk,
        'saldo_actual': paciente.saldo,
        'saldo_esperado': esperado,
        'diferencia': diferencia,
        'corregido': corregido,
    }

"""
Cálculo de planes de pago de presupuestos.

Funciones puras: no acceden a la base de datos. Los montos se manejan como
Decimal y se redondean a centavos (mitad hacia arriba).
"""
import datetime
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Dict, List

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.exceptions import ValidationError

CONTADO = 'contado'
SEMANAL = 'semanal'
QUINCENAL = 'quincenal'
MENSUAL = 'mensual'

TIPOS_PLAN = [
    (CONTADO, 'Contado'),
    (SEMANAL, 'Semanal'),
    (QUINCENAL, 'Quincenal'),
    (MENSUAL, 'Mensual'),
]

PERIODOS = {
    SEMANAL: relativedelta(weeks=1),
    QUINCENAL: relativedelta(weeks=2),
    MENSUAL: relativedelta(months=1),
}

CENTAVOS = Decimal('0.01')


def redondear(monto):
    return Decimal(monto).quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def duracion_maxima():
    return getattr(settings, 'PRESUPUESTOS_DURACION_MAX', 120)


def _a_decimal(valor, nombre):
    try:
        numero = Decimal(str(valor))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{nombre} debe ser un número válido")
    if not numero.is_finite():
        raise ValidationError(f"{nombre} debe ser un número finito")
    return numero


def calcular_plan_pago(subtotal, tipo_plan, duracion=1, tasa_interes=0) -> Dict:
    """
    Calcula el desglose de un plan de pago.

    Args:
        subtotal: Suma de los ítems del presupuesto
        tipo_plan: 'contado', 'semanal', 'quincenal' o 'mensual'
        duracion: Número de cuotas (se ignora en contado), entre 1 y
            PRESUPUESTOS_DURACION_MAX
        tasa_interes: Porcentaje de interés sobre el subtotal (se ignora en contado)

    Returns:
        dict: tipo, subtotal, tasa_interes, interes, total, cuotas, monto_cuota

    Raises:
        ValidationError: Si el tipo de plan es desconocido, los montos son
            negativos o no finitos, o la duración está fuera de rango en un
            plan en cuotas
    """
    if tipo_plan not in dict(TIPOS_PLAN):
        raise ValidationError(f"Tipo de plan desconocido: {tipo_plan!r}")

    subtotal = _a_decimal(subtotal, "El subtotal")
    if subtotal < 0:
        raise ValidationError("El subtotal no puede ser negativo")

    if tipo_plan == CONTADO:
        tasa = Decimal('0')
        cuotas = 1
    else:
        tasa = _a_decimal(tasa_interes or 0, "La tasa de interés")
        if tasa < 0:
            raise ValidationError("La tasa de interés no puede ser negativa")
        try:
            cuotas = int(duracion)
        except (ValueError, TypeError, OverflowError):
            raise ValidationError("La duración debe ser un número entero")
        if cuotas < 1:
            raise ValidationError("La duración de un plan en cuotas debe ser de al menos 1")
        if cuotas > duracion_maxima():
            raise ValidationError(f"La duración de un plan en cuotas no puede superar {duracion_maxima()} cuotas")

    interes = redondear(subtotal * tasa / 100)
    total = redondear(subtotal + interes)

    return {
        'tipo': tipo_plan,
        'subtotal': redondear(subtotal),
        'tasa_interes': tasa,
        'interes': interes,
        'total': total,
        'cuotas': cuotas,
        'monto_cuota': redondear(total / cuotas),
    }


def generar_cronograma(plan: Dict, fecha_inicio: datetime.date) -> List[Dict]:
    """
    Genera las fechas y montos de cada cuota de un plan.

    La primera cuota vence un período después de `fecha_inicio` (el pago al
    contado vence ese mismo día). Las cuotas se truncan a centavos y la
    última suma la diferencia, de modo que ningún monto es negativo y la suma
    coincide con el total.

    Raises:
        ValidationError: Si alguna fecha queda fuera del calendario
    """
    cuotas = plan['cuotas']
    total = plan['total']

    if plan['tipo'] == CONTADO:
        return [{'numero': 1, 'fecha': fecha_inicio, 'monto': total}]

    periodo = PERIODOS[plan['tipo']]
    monto_base = (total / cuotas).quantize(CENTAVOS, rounding=ROUND_DOWN)
    cronograma = []
    for numero in range(1, cuotas + 1):
        try:
            fecha = fecha_inicio + periodo * numero
        except (ValueError, OverflowError):
            raise ValidationError(f"La cuota {numero} vence fuera del calendario (inicio {fecha_inicio})")
        monto = monto_base if numero < cuotas else total - monto_base * (cuotas - 1)
        cronograma.append({'numero': numero, 'fecha': fecha, 'monto': monto})
    return cronograma

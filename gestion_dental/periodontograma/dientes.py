"""
Numeración dental FDI y atributos derivados del número de cada diente.
"""
from django.core.exceptions import ValidationError


# Orden de los dientes por cuadrante, tal como se dibujan en la cartilla
DIENTES_MAXILAR_DERECHO = [18, 17, 16, 15, 14, 13, 12, 11]
DIENTES_MAXILAR_IZQUIERDO = [21, 22, 23, 24, 25, 26, 27, 28]
DIENTES_MANDIBULA_IZQUIERDO = [31, 32, 33, 34, 35, 36, 37, 38]
DIENTES_MANDIBULA_DERECHO = [48, 47, 46, 45, 44, 43, 42, 41]

TODOS_LOS_DIENTES = (
    DIENTES_MAXILAR_DERECHO
    + DIENTES_MAXILAR_IZQUIERDO
    + DIENTES_MANDIBULA_IZQUIERDO
    + DIENTES_MANDIBULA_DERECHO
)

CLASE_ANTERIOR = 'anterior'
CLASE_PREMOLAR = 'premolar'
CLASE_MOLAR = 'molar'

# Clase anatómica según la posición dentro del cuadrante (dígito de unidades)
CLASES_POR_POSICION = {
    1: CLASE_ANTERIOR,
    2: CLASE_ANTERIOR,
    3: CLASE_ANTERIOR,
    4: CLASE_PREMOLAR,
    5: CLASE_PREMOLAR,
    6: CLASE_MOLAR,
    7: CLASE_MOLAR,
    8: CLASE_MOLAR,
}

_DIENTES_VALIDOS = frozenset(TODOS_LOS_DIENTES)


def es_numero_valido(numero):
    """Indica si `numero` es un diente permanente en notación FDI"""
    try:
        return int(numero) in _DIENTES_VALIDOS
    except (TypeError, ValueError):
        return False


def validar_numero(numero):
    """
    Normaliza un número de diente a entero.

    Acepta enteros o cadenas ("18"), que es como llegan las claves desde JSON.

    Raises:
        ValidationError: Si no corresponde a un diente FDI permanente
    """
    if not es_numero_valido(numero):
        raise ValidationError(f"Número de diente inválido: {numero!r}")
    return int(numero)


def cuadrante(numero):
    return validar_numero(numero) // 10


def es_maxilar(numero):
    """Determina si un diente está en el maxilar (arriba)"""
    return 11 <= validar_numero(numero) <= 28


def es_mandibular(numero):
    return not es_maxilar(numero)


def es_lado_derecho(numero):
    """Determina si un diente está en el lado derecho del paciente"""
    return cuadrante(numero) in (1, 4)


def clase_anatomica(numero):
    """Retorna 'anterior', 'premolar' o 'molar'"""
    return CLASES_POR_POSICION[validar_numero(numero) % 10]

"""
Valores clínicos derivados de las mediciones periodontales.
"""
from decimal import Decimal, ROUND_HALF_UP

from .mediciones import (
    CARAS, PUNTOS, MARGEN_GINGIVAL, PROFUNDIDAD_SONDAJE, SANGRADO, PLACA, Cartilla,
)

# Profundidad de sondaje (mm) a partir de la cual hay bolsa patológica (estrictamente mayor)
UMBRAL_BOLSA_PATOLOGICA = 3


def es_bolsa_patologica(ps):
    return ps > UMBRAL_BOLSA_PATOLOGICA


def calcular_nic(margen, sondaje):
    """
    Nivel de Inserción Clínica.

    Se usa una sola resta para todos los sitios: NIC = PS - MG. Con recesión
    (MG negativo) el resultado equivale a PS + |MG|.
    """
    return sondaje - margen


def nic_por_sitio(datos_cara):
    margen = datos_cara.get(MARGEN_GINGIVAL) or {}
    sondaje = datos_cara.get(PROFUNDIDAD_SONDAJE) or {}
    return {
        punto: calcular_nic(margen.get(punto) or 0, sondaje.get(punto) or 0)
        for punto in PUNTOS
    }


def _porcentaje(parte, total):
    if total <= 0:
        return 0
    valor = Decimal(parte * 100) / Decimal(total)
    return int(valor.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def calcular_estadisticas(datos):
    """
    Porcentaje de sitios con sangrado, placa y bolsa patológica.

    Los dientes ausentes no cuentan ni en el numerador ni en el denominador;
    tampoco las caras que falten en un blob guardado.

    Args:
        datos: Cartilla o dict {numero: datos_diente}

    Returns:
        dict: porc_sangrado, porc_placa, porc_bolsas y total_sitios
    """
    if isinstance(datos, Cartilla):
        datos = datos.datos

    total_sitios = 0
    sitios_sangrado = 0
    sitios_placa = 0
    sitios_bolsa = 0

    for diente in datos.values():
        if not diente or diente.get('ausente'):
            continue
        for cara in CARAS:
            datos_cara = diente.get(cara)
            if not datos_cara:
                continue
            sangrado = datos_cara.get(SANGRADO) or {}
            placa = datos_cara.get(PLACA) or {}
            sondaje = datos_cara.get(PROFUNDIDAD_SONDAJE) or {}
            for punto in PUNTOS:
                total_sitios += 1
                if sangrado.get(punto):
                    sitios_sangrado += 1
                if placa.get(punto):
                    sitios_placa += 1
                if es_bolsa_patologica(sondaje.get(punto) or 0):
                    sitios_bolsa += 1

    return {
        'porc_sangrado': _porcentaje(sitios_sangrado, total_sitios),
        'porc_placa': _porcentaje(sitios_placa, total_sitios),
        'porc_bolsas': _porcentaje(sitios_bolsa, total_sitios),
        'total_sitios': total_sitios,
    }

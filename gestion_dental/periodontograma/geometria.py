"""
Conversión de mediciones (mm) a coordenadas del gráfico SVG de cada diente.

En el maxilar los valores positivos se dibujan hacia arriba de la línea cero;
en la mandíbula, hacia abajo. El margen gingival y la profundidad de sondaje se
dibujan de forma independiente, ambos desde la línea cero.
"""
from django.core.exceptions import ValidationError

from .derivaciones import es_bolsa_patologica
from .dientes import es_maxilar, validar_numero
from .mediciones import CARAS, MARGEN_GINGIVAL, PROFUNDIDAD_SONDAJE, PUNTOS

ANCHO_DIENTE = 55
ALTO_GRAFICO = 80
ESCALA = 4  # pixels por mm

# Línea cero: cerca de las raíces en el maxilar, cerca de las coronas en la mandíbula
LINEA_CERO_Y_SUPERIOR = 65
LINEA_CERO_Y_INFERIOR = 15

POSICIONES_X = {
    'mesial': 8,
    'central': ANCHO_DIENTE / 2,
    'distal': ANCHO_DIENTE - 8,
}

COLOR_MARGEN = '#3b82f6'
COLOR_SONDAJE = '#ef4444'
COLOR_BOLSA = '#dc2626'


def mm_a_pixels(mm, escala=ESCALA):
    return mm * escala


def linea_cero_y(numero):
    return LINEA_CERO_Y_SUPERIOR if es_maxilar(numero) else LINEA_CERO_Y_INFERIOR


def valor_a_y(valor, numero, escala=ESCALA):
    """
    Posición Y de una medición.

    y = cero - valor*escala en el maxilar, y = cero + valor*escala en la mandíbula.
    """
    cero = linea_cero_y(numero)
    if es_maxilar(numero):
        return cero - mm_a_pixels(valor, escala)
    return cero + mm_a_pixels(valor, escala)


def generar_path(puntos):
    """Polilínea SVG mesial -> central -> distal con segmentos rectos"""
    if len(puntos) < 2:
        return ''
    inicio, *resto = puntos
    path = f"M {inicio['x']} {inicio['y']}"
    for punto in resto:
        path += f" L {punto['x']} {punto['y']}"
    return path


def color_por_sondaje(ps):
    """Color de severidad para una profundidad de sondaje"""
    if ps <= 3:
        return '#22c55e'  # verde - normal
    if ps <= 5:
        return '#eab308'  # amarillo - leve
    if ps <= 7:
        return '#f97316'  # naranja - moderado
    return '#ef4444'  # rojo - severo


def calcular_series(numero, datos_cara):
    """
    Calcula las series de margen y sondaje de una cara.

    Args:
        numero: Número FDI del diente
        datos_cara: Mediciones de una cara (vestibular o lingual)

    Returns:
        dict: {'margen': {...}, 'sondaje': {...}}, cada uno con 'puntos'
        (x, y, valor, color) y 'path'
    """
    numero = validar_numero(numero)
    margen = datos_cara.get(MARGEN_GINGIVAL) or {}
    sondaje = datos_cara.get(PROFUNDIDAD_SONDAJE) or {}

    puntos_margen = []
    puntos_sondaje = []
    for punto in PUNTOS:
        mg = margen.get(punto) or 0
        ps = sondaje.get(punto) or 0
        puntos_margen.append({
            'x': POSICIONES_X[punto],
            'y': valor_a_y(mg, numero),
            'valor': mg,
            'color': COLOR_MARGEN,
        })
        bolsa = es_bolsa_patologica(ps)
        puntos_sondaje.append({
            'x': POSICIONES_X[punto],
            'y': valor_a_y(ps, numero),
            'valor': ps,
            'color': COLOR_BOLSA if bolsa else COLOR_SONDAJE,
            'es_bolsa': bolsa,
        })

    return {
        'margen': {'puntos': puntos_margen, 'path': generar_path(puntos_margen)},
        'sondaje': {'puntos': puntos_sondaje, 'path': generar_path(puntos_sondaje)},
    }


def geometria_diente(numero, datos_diente, cara='vestibular'):
    """Geometría completa de un diente para una cara; sin series si está ausente"""
    numero = validar_numero(numero)
    if cara not in CARAS:
        raise ValidationError(f"Cara inválida: {cara!r}")
    ausente = bool(datos_diente.get('ausente'))
    geometria = {
        'numero': numero,
        'cara': cara,
        'arco': 'maxilar' if es_maxilar(numero) else 'mandibula',
        'ancho': ANCHO_DIENTE,
        'alto': ALTO_GRAFICO,
        'linea_cero_y': linea_cero_y(numero),
        'ausente': ausente,
        'series': None,
    }
    if not ausente:
        geometria['series'] = calcular_series(numero, datos_diente.get(cara) or {})
    return geometria

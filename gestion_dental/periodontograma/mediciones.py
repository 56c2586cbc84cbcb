"""
Modelo de mediciones del periodontograma.

Una cartilla guarda, para cada diente y cada cara (vestibular/lingual), el
margen gingival, la profundidad de sondaje, el sangrado y la placa en tres
puntos (mesial, central, distal), además de movilidad, furcación y si el
diente está ausente.

Hay dos formas de modificar un valor numérico:

- `establecer`: entrada tecleada; el valor se limita al rango permitido.
- `ciclar`: entrada por clic; al pasar del máximo vuelve al mínimo y viceversa.
"""
import copy
import logging

from django.conf import settings
from django.core.exceptions import ValidationError

from .dientes import TODOS_LOS_DIENTES, validar_numero

logger = logging.getLogger(__name__)

CARAS = ('vestibular', 'lingual')
PUNTOS = ('mesial', 'central', 'distal')

MARGEN_GINGIVAL = 'margen_gingival'
PROFUNDIDAD_SONDAJE = 'profundidad_sondaje'
SANGRADO = 'sangrado'
PLACA = 'placa'

TIPOS_NUMERICOS = (MARGEN_GINGIVAL, PROFUNDIDAD_SONDAJE)
TIPOS_BOOLEANOS = (SANGRADO, PLACA)
TIPOS_MEDICION = TIPOS_NUMERICOS + TIPOS_BOOLEANOS

GRADO_MIN = 0
GRADO_MAX = 3


def limitar(valor, minimo, maximo):
    """Limita `valor` al intervalo cerrado [minimo, maximo]"""
    return max(minimo, min(maximo, valor))


def ciclar_valor(valor, minimo, maximo, incrementar=True):
    """
    Incrementa o decrementa en 1 con vuelta circular.

    Incrementar en el máximo retorna el mínimo; decrementar en el mínimo
    retorna el máximo.
    """
    if incrementar:
        return minimo if valor >= maximo else valor + 1
    return maximo if valor <= minimo else valor - 1


def rango_medicion(tipo):
    """Retorna (minimo, maximo) configurado para un tipo de medición numérica"""
    if tipo == MARGEN_GINGIVAL:
        return settings.PERIODONTOGRAMA_MARGEN_MIN, settings.PERIODONTOGRAMA_MARGEN_MAX
    if tipo == PROFUNDIDAD_SONDAJE:
        return settings.PERIODONTOGRAMA_SONDAJE_MIN, settings.PERIODONTOGRAMA_SONDAJE_MAX
    raise ValidationError(f"La medición '{tipo}' no es numérica")


def datos_cara_vacia():
    return {
        MARGEN_GINGIVAL: {punto: 0 for punto in PUNTOS},
        PROFUNDIDAD_SONDAJE: {punto: 0 for punto in PUNTOS},
        SANGRADO: {punto: False for punto in PUNTOS},
        PLACA: {punto: False for punto in PUNTOS},
    }


def datos_diente_vacio():
    """Genera la estructura de mediciones vacías para un diente"""
    return {
        'vestibular': datos_cara_vacia(),
        'lingual': datos_cara_vacia(),
        'movilidad': 0,
        'furcacion': 0,
        'ausente': False,
    }


def _a_entero(valor):
    """Convierte a entero truncando; retorna None si no es un número"""
    if isinstance(valor, bool):
        return None
    try:
        return int(float(valor))
    except (TypeError, ValueError, OverflowError):
        return None


class Cartilla:
    """
    Cartilla periodontal completa (todos los dientes permanentes).

    Siempre contiene los 32 dientes con ambas caras y los tres puntos; un sitio
    sin medir vale 0/False. `modificado` indica si hay cambios sin guardar.
    """

    def __init__(self, datos=None):
        self.datos = {numero: datos_diente_vacio() for numero in TODOS_LOS_DIENTES}
        self.modificado = False
        if datos:
            if not isinstance(datos, dict):
                raise ValidationError("Las mediciones deben ser un objeto indexado por número de diente")
            self._combinar(datos)

    def _combinar(self, datos):
        """Copia sobre la cartilla vacía los valores reconocidos de un blob guardado"""
        for clave, diente in datos.items():
            try:
                numero = validar_numero(clave)
            except ValidationError:
                logger.warning(f"Se ignora el diente desconocido {clave!r} al cargar la cartilla")
                continue
            if not isinstance(diente, dict):
                continue

            destino = self.datos[numero]
            destino['ausente'] = bool(diente.get('ausente', False))
            destino['movilidad'] = limitar(_a_entero(diente.get('movilidad')) or 0, GRADO_MIN, GRADO_MAX)
            destino['furcacion'] = limitar(_a_entero(diente.get('furcacion')) or 0, GRADO_MIN, GRADO_MAX)

            for cara in CARAS:
                cara_guardada = diente.get(cara)
                if not isinstance(cara_guardada, dict):
                    continue
                for tipo in TIPOS_MEDICION:
                    serie = cara_guardada.get(tipo)
                    if not isinstance(serie, dict):
                        continue
                    for punto in PUNTOS:
                        if punto in serie:
                            self._escribir(numero, cara, punto, tipo, serie[punto])

    def _validar_clave(self, numero, cara, punto, tipo):
        numero = validar_numero(numero)
        if cara not in CARAS:
            raise ValidationError(f"Cara inválida: {cara!r}")
        if punto not in PUNTOS:
            raise ValidationError(f"Punto de medición inválido: {punto!r}")
        if tipo not in TIPOS_MEDICION:
            raise ValidationError(f"Tipo de medición inválido: {tipo!r}")
        return numero

    def _escribir(self, numero, cara, punto, tipo, valor):
        serie = self.datos[numero][cara][tipo]
        if tipo in TIPOS_BOOLEANOS:
            serie[punto] = bool(valor)
            return serie[punto]

        entero = _a_entero(valor)
        if entero is None:
            # Entrada no numérica: se conserva el valor anterior
            return serie[punto]
        minimo, maximo = rango_medicion(tipo)
        serie[punto] = limitar(entero, minimo, maximo)
        return serie[punto]

    def obtener(self, numero, cara, punto, tipo):
        numero = self._validar_clave(numero, cara, punto, tipo)
        return self.datos[numero][cara][tipo][punto]

    def establecer(self, numero, cara, punto, tipo, valor):
        """
        Asigna una medición limitándola a su rango.

        Los valores fuera de rango se ajustan al límite más cercano sin error.
        Si `valor` no es un número, la medición no cambia.

        Returns:
            El valor efectivamente almacenado
        """
        numero = self._validar_clave(numero, cara, punto, tipo)
        resultado = self._escribir(numero, cara, punto, tipo, valor)
        self.modificado = True
        return resultado

    def ciclar(self, numero, cara, punto, tipo, incrementar=True):
        """Avanza una medición numérica en 1 con vuelta circular al rango"""
        numero = self._validar_clave(numero, cara, punto, tipo)
        minimo, maximo = rango_medicion(tipo)
        serie = self.datos[numero][cara][tipo]
        serie[punto] = ciclar_valor(serie[punto], minimo, maximo, incrementar)
        self.modificado = True
        return serie[punto]

    def alternar(self, numero, cara, punto, tipo):
        """Invierte un indicador de sangrado o placa"""
        numero = self._validar_clave(numero, cara, punto, tipo)
        if tipo not in TIPOS_BOOLEANOS:
            raise ValidationError(f"Solo sangrado y placa se pueden alternar, no '{tipo}'")
        serie = self.datos[numero][cara][tipo]
        serie[punto] = not serie[punto]
        self.modificado = True
        return serie[punto]

    def alternar_ausente(self, numero):
        diente = self.datos[validar_numero(numero)]
        diente['ausente'] = not diente['ausente']
        self.modificado = True
        return diente['ausente']

    def establecer_movilidad(self, numero, valor):
        return self._establecer_grado(numero, 'movilidad', valor)

    def establecer_furcacion(self, numero, valor):
        return self._establecer_grado(numero, 'furcacion', valor)

    def _establecer_grado(self, numero, campo, valor):
        diente = self.datos[validar_numero(numero)]
        entero = _a_entero(valor)
        if entero is not None:
            diente[campo] = limitar(entero, GRADO_MIN, GRADO_MAX)
            self.modificado = True
        return diente[campo]

    def diente(self, numero):
        """Retorna una copia de los datos de un diente"""
        return copy.deepcopy(self.datos[validar_numero(numero)])

    def marcar_guardado(self):
        self.modificado = False

    def a_dict(self):
        """Serializa la cartilla con claves de texto, lista para guardarse como JSON"""
        return {str(numero): copy.deepcopy(diente) for numero, diente in self.datos.items()}

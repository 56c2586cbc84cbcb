"""
Lenguaje de filtros de la pasarela.

Ejemplos:
    paciente = 12
    estado != "rechazado" && total >= 1000
    (nombre ~ "ana" || dni ~ "123") && activo = true
    paciente.apellido ~ "pérez"

Operadores: = != ~ (contiene, sin distinguir mayúsculas) !~ > >= < <=.
Los filtros se convierten en un árbol (`Comparacion` / `Conjuncion`) y luego
en objetos `Q` de Django.
"""
import re

from django.db.models import Q

from .excepciones import ErrorValidacionRegistro

OPERADORES = ('!=', '!~', '>=', '<=', '=', '~', '>', '<')

_TOKEN = re.compile(r"""
    \s*(?:
        (?P<parentesis>[()])
      | (?P<logico>&&|\|\|)
      | (?P<operador>!=|!~|>=|<=|=|~|>|<)
      | (?P<cadena>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
      | (?P<numero>-?\d+(?:\.\d+)?)
      | (?P<palabra>[A-Za-z_][A-Za-z0-9_.]*)
    )""", re.VERBOSE)

_CAMPO = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$')


class Comparacion:
    def __init__(self, campo, operador, valor):
        self.campo = campo
        self.operador = operador
        self.valor = valor

    def __eq__(self, otro):
        return (
            isinstance(otro, Comparacion)
            and (self.campo, self.operador, self.valor) == (otro.campo, otro.operador, otro.valor)
        )

    def __repr__(self):
        return f"Comparacion({self.campo!r}, {self.operador!r}, {self.valor!r})"


class Conjuncion:
    def __init__(self, operador, hijos):
        self.operador = operador  # '&&' o '||'
        self.hijos = hijos

    def __eq__(self, otro):
        return isinstance(otro, Conjuncion) and (self.operador, self.hijos) == (otro.operador, otro.hijos)

    def __repr__(self):
        return f"Conjuncion({self.operador!r}, {self.hijos!r})"


def _tokenizar(texto):
    tokens = []
    posicion = 0
    texto = texto.rstrip()
    while posicion < len(texto):
        coincidencia = _TOKEN.match(texto, posicion)
        if not coincidencia or coincidencia.end() == posicion:
            raise ErrorValidacionRegistro(f"Filtro inválido cerca de: {texto[posicion:]!r}")
        tipo = coincidencia.lastgroup
        tokens.append((tipo, coincidencia.group(tipo)))
        posicion = coincidencia.end()
    return tokens


def _valor_literal(tipo, texto):
    if tipo == 'cadena':
        contenido = texto[1:-1]
        return re.sub(r'\\(.)', r'\1', contenido)
    if tipo == 'numero':
        return float(texto) if '.' in texto else int(texto)
    if tipo == 'palabra':
        literales = {'true': True, 'false': False, 'null': None}
        if texto in literales:
            return literales[texto]
    raise ErrorValidacionRegistro(f"Valor inválido en el filtro: {texto!r}")


class _Parser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.posicion = 0

    def _actual(self):
        if self.posicion < len(self.tokens):
            return self.tokens[self.posicion]
        return (None, None)

    def _consumir(self, tipo=None, texto=None):
        actual = self._actual()
        if actual[0] is None:
            raise ErrorValidacionRegistro("El filtro termina de forma inesperada")
        if (tipo and actual[0] != tipo) or (texto and actual[1] != texto):
            raise ErrorValidacionRegistro(f"Se esperaba {texto or tipo} y se encontró {actual[1]!r}")
        self.posicion += 1
        return actual

    def parsear(self):
        arbol = self._o()
        if self._actual()[0] is not None:
            raise ErrorValidacionRegistro(f"Texto sobrante en el filtro: {self._actual()[1]!r}")
        return arbol

    def _o(self):
        hijos = [self._y()]
        while self._actual() == ('logico', '||'):
            self._consumir()
            hijos.append(self._y())
        return hijos[0] if len(hijos) == 1 else Conjuncion('||', hijos)

    def _y(self):
        hijos = [self._unario()]
        while self._actual() == ('logico', '&&'):
            self._consumir()
            hijos.append(self._unario())
        return hijos[0] if len(hijos) == 1 else Conjuncion('&&', hijos)

    def _unario(self):
        if self._actual() == ('parentesis', '('):
            self._consumir()
            arbol = self._o()
            self._consumir('parentesis', ')')
            return arbol
        _, campo = self._consumir('palabra')
        if not _CAMPO.match(campo):
            raise ErrorValidacionRegistro(f"Campo inválido en el filtro: {campo!r}")
        _, operador = self._consumir('operador')
        tipo, texto = self._consumir()
        return Comparacion(campo, operador, _valor_literal(tipo, texto))


def parsear_filtro(texto):
    """
    Convierte un filtro en árbol. Retorna None para filtros vacíos.

    Raises:
        ErrorValidacionRegistro: Si la sintaxis es inválida
    """
    if not texto or not texto.strip():
        return None
    return _Parser(_tokenizar(texto)).parsear()


def _ruta_orm(campo):
    return campo.replace('.', '__')


def _comparacion_a_q(nodo):
    ruta = _ruta_orm(nodo.campo)
    valor = nodo.valor
    operador = nodo.operador

    if operador in ('=', '!='):
        q = Q(**{f'{ruta}__isnull': True}) if valor is None else Q(**{ruta: valor})
        return q if operador == '=' else ~q
    if valor is None:
        raise ErrorValidacionRegistro(f"El operador {operador} no admite null")
    if operador in ('~', '!~'):
        q = Q(**{f'{ruta}__icontains': valor})
        return q if operador == '~' else ~q

    sufijos = {'>': 'gt', '>=': 'gte', '<': 'lt', '<=': 'lte'}
    return Q(**{f'{ruta}__{sufijos[operador]}': valor})


def arbol_a_q(arbol):
    if arbol is None:
        return Q()
    if isinstance(arbol, Comparacion):
        return _comparacion_a_q(arbol)

    resultado = None
    for hijo in arbol.hijos:
        q = arbol_a_q(hijo)
        if resultado is None:
            resultado = q
        elif arbol.operador == '&&':
            resultado &= q
        else:
            resultado |= q
    return resultado


def filtro_a_q(texto):
    """Atajo: texto de filtro -> objeto Q"""
    return arbol_a_q(parsear_filtro(texto))


def parsear_orden(texto):
    """
    Convierte '-creado_el,nombre' en ['-creado_el', 'nombre'] para order_by.

    Raises:
        ErrorValidacionRegistro: Si algún campo no es válido
    """
    if not texto:
        return []
    campos = []
    for parte in texto.split(','):
        parte = parte.strip()
        if not parte:
            continue
        prefijo = ''
        if parte[0] in '+-':
            prefijo = '-' if parte[0] == '-' else ''
            parte = parte[1:]
        if not _CAMPO.match(parte):
            raise ErrorValidacionRegistro(f"Campo de orden inválido: {parte!r}")
        campos.append(prefijo + _ruta_orm(parte))
    return campos


def parsear_expansion(texto):
    """'paciente,tratamiento' -> ['paciente', 'tratamiento']"""
    if not texto:
        return []
    if isinstance(texto, (list, tuple)):
        return [parte for parte in texto if parte]
    return [parte.strip() for parte in texto.split(',') if parte.strip()]

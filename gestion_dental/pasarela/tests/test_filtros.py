from django.db.models import Q
from django.test import SimpleTestCase

from pasarela.excepciones import ErrorValidacionRegistro
from pasarela.filtros import (
    Comparacion, Conjuncion, filtro_a_q, parsear_expansion, parsear_filtro, parsear_orden,
)


class ParsearFiltroTests(SimpleTestCase):

    def test_filtro_vacio(self):
        self.assertIsNone(parsear_filtro(''))
        self.assertIsNone(parsear_filtro('   '))
        self.assertIsNone(parsear_filtro(None))
        self.assertEqual(filtro_a_q(''), Q())

    def test_comparacion_simple(self):
        self.assertEqual(parsear_filtro('paciente = 12'), Comparacion('paciente', '=', 12))
        self.assertEqual(parsear_filtro('total >= 10.5'), Comparacion('total', '>=', 10.5))
        self.assertEqual(parsear_filtro("nombre ~ 'ana'"), Comparacion('nombre', '~', 'ana'))
        self.assertEqual(parsear_filtro('activo = true'), Comparacion('activo', '=', True))
        self.assertEqual(parsear_filtro('dni = null'), Comparacion('dni', '=', None))

    def test_cadena_con_escapes(self):
        self.assertEqual(parsear_filtro(r'notas ~ "dice \"hola\""'), Comparacion('notas', '~', 'dice "hola"'))

    def test_precedencia_y_parentesis(self):
        arbol = parsear_filtro('a = 1 || b = 2 && c = 3')
        self.assertEqual(arbol, Conjuncion('||', [
            Comparacion('a', '=', 1),
            Conjuncion('&&', [Comparacion('b', '=', 2), Comparacion('c', '=', 3)]),
        ]))

        arbol = parsear_filtro('(a = 1 || b = 2) && c = 3')
        self.assertEqual(arbol, Conjuncion('&&', [
            Conjuncion('||', [Comparacion('a', '=', 1), Comparacion('b', '=', 2)]),
            Comparacion('c', '=', 3),
        ]))

    def test_errores_de_sintaxis(self):
        for filtro in ('paciente =', 'paciente 12', '(a = 1', 'a = 1 b = 2', 'a = hola', 'a = "x" &&', 'a $ 3'):
            with self.subTest(filtro=filtro):
                with self.assertRaises(ErrorValidacionRegistro):
                    parsear_filtro(filtro)


class FiltroAQTests(SimpleTestCase):

    def test_operadores(self):
        self.assertEqual(filtro_a_q('paciente = 3'), Q(paciente=3))
        self.assertEqual(filtro_a_q('estado != "rechazado"'), ~Q(estado='rechazado'))
        self.assertEqual(filtro_a_q('nombre ~ "an"'), Q(nombre__icontains='an'))
        self.assertEqual(filtro_a_q('nombre !~ "an"'), ~Q(nombre__icontains='an'))
        self.assertEqual(filtro_a_q('total > 5'), Q(total__gt=5))
        self.assertEqual(filtro_a_q('total <= 5'), Q(total__lte=5))

    def test_null(self):
        self.assertEqual(filtro_a_q('dni = null'), Q(dni__isnull=True))
        self.assertEqual(filtro_a_q('dni != null'), ~Q(dni__isnull=True))
        with self.assertRaises(ErrorValidacionRegistro):
            filtro_a_q('total > null')

    def test_rutas_con_punto(self):
        self.assertEqual(filtro_a_q('paciente.apellido ~ "soto"'), Q(paciente__apellido__icontains='soto'))

    def test_combinaciones(self):
        self.assertEqual(
            filtro_a_q('paciente = 1 && estado = "pendiente"'),
            Q(paciente=1) & Q(estado='pendiente'),
        )
        self.assertEqual(
            filtro_a_q('estado = "pagado" || estado = "parcial"'),
            Q(estado='pagado') | Q(estado='parcial'),
        )


class OrdenExpansionTests(SimpleTestCase):

    def test_parsear_orden(self):
        self.assertEqual(parsear_orden('-creado_el,nombre'), ['-creado_el', 'nombre'])
        self.assertEqual(parsear_orden('+total, paciente.apellido'), ['total', 'paciente__apellido'])
        self.assertEqual(parsear_orden(''), [])
        with self.assertRaises(ErrorValidacionRegistro):
            parsear_orden('nombre;drop')

    def test_parsear_expansion(self):
        self.assertEqual(parsear_expansion('paciente, items'), ['paciente', 'items'])
        self.assertEqual(parsear_expansion(['paciente', '']), ['paciente'])
        self.assertEqual(parsear_expansion(None), [])

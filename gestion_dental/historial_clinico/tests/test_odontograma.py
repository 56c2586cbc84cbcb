import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from historial_clinico.odontograma import (
    CANCELADO, COMPLETADO, EN_PROGRESO, SeleccionOdontograma,
)

CORONA = {'id': 4, 'nombre': 'Corona', 'codigo': 'COR', 'precio': '500.00'}
RESINA = {'nombre': 'Resina', 'precio': 80}


class SeleccionOdontogramaTests(SimpleTestCase):

    def setUp(self):
        self.seleccion = SeleccionOdontograma()

    def test_seleccionar_conserva_orden_y_evita_duplicados(self):
        self.assertTrue(self.seleccion.seleccionar(21))
        self.assertTrue(self.seleccion.seleccionar('16'))
        self.assertFalse(self.seleccion.seleccionar(21))
        self.assertEqual(self.seleccion.seleccionados, [21, 16])
        self.assertTrue(self.seleccion.modificado)

    def test_diente_invalido(self):
        with self.assertRaises(ValidationError):
            self.seleccion.seleccionar(19)
        with self.assertRaises(ValidationError):
            self.seleccion.asignar_tratamiento(52, CORONA)

    def test_asignar_selecciona_el_diente(self):
        anotacion = self.seleccion.asignar_tratamiento(36, CORONA, fecha=datetime.date(2025, 3, 1))
        self.assertEqual(self.seleccion.seleccionados, [36])
        self.assertEqual(anotacion['fecha'], '2025-03-01')
        self.assertEqual(anotacion['estado'], 'planificado')
        self.assertEqual(anotacion['tratamiento']['precio'], '500.00')

    def test_asignar_reemplaza_tratamiento(self):
        self.seleccion.asignar_tratamiento(36, CORONA)
        self.seleccion.asignar_tratamiento(36, RESINA)
        self.assertEqual(self.seleccion.tratamientos[36]['tratamiento']['nombre'], 'Resina')
        self.assertEqual(self.seleccion.seleccionados, [36])

    def test_tratamiento_sin_nombre_o_estado_invalido(self):
        with self.assertRaises(ValidationError):
            self.seleccion.asignar_tratamiento(11, {'precio': 10})
        with self.assertRaises(ValidationError):
            self.seleccion.asignar_tratamiento(11, CORONA, estado='terminado')
        self.assertEqual(self.seleccion.seleccionados, [])

    def test_deseleccionar_quita_el_tratamiento(self):
        self.seleccion.asignar_tratamiento(11, CORONA)
        self.assertTrue(self.seleccion.deseleccionar(11))
        self.assertEqual(self.seleccion.tratamientos, {})
        self.assertFalse(self.seleccion.deseleccionar(11))

    def test_quitar_tratamiento_mantiene_la_seleccion(self):
        self.seleccion.asignar_tratamiento(11, CORONA)
        self.seleccion.quitar_tratamiento(11)
        self.assertEqual(self.seleccion.seleccionados, [11])
        self.assertNotIn(11, self.seleccion.tratamientos)

    def test_cambiar_estado(self):
        with self.assertRaises(ValidationError):
            self.seleccion.cambiar_estado(11, COMPLETADO)
        self.seleccion.asignar_tratamiento(11, CORONA)
        self.seleccion.cambiar_estado(11, COMPLETADO)
        self.assertEqual(self.seleccion.tratamientos[11]['estado'], COMPLETADO)

    def test_colores_por_estado(self):
        self.seleccion.asignar_tratamiento(11, CORONA)
        self.seleccion.asignar_tratamiento(12, RESINA, estado=COMPLETADO)
        self.seleccion.asignar_tratamiento(13, RESINA, estado=EN_PROGRESO)
        self.seleccion.seleccionar(14)
        self.assertEqual(self.seleccion.colores(), {11: 'blue', 12: 'green'})

    def test_items_presupuesto_en_orden_de_seleccion(self):
        self.seleccion.seleccionar(46)
        self.seleccion.asignar_tratamiento(21, RESINA)
        self.seleccion.asignar_tratamiento(46, CORONA)
        self.seleccion.asignar_tratamiento(11, RESINA, estado=CANCELADO)

        items = self.seleccion.items_presupuesto()

        self.assertEqual([(i['diente'], i['nombre']) for i in items], [(46, 'Corona'), (21, 'Resina')])
        self.assertEqual(items[0]['precio'], Decimal('500.00'))
        self.assertEqual(items[0]['tratamiento'], 4)
        self.assertIsNone(items[1]['tratamiento'])
        self.assertEqual(self.seleccion.total(), Decimal('580.00'))

    def test_a_dict_y_carga(self):
        self.seleccion.asignar_tratamiento(16, CORONA, fecha='2025-01-10T10:00:00')
        self.seleccion.seleccionar(21)

        datos = self.seleccion.a_dict()
        self.assertEqual(datos['seleccionados'], [16, 21])
        self.assertEqual(list(datos['tratamientos']), ['16'])

        cargada = SeleccionOdontograma(datos)
        self.assertEqual(cargada.seleccionados, [16, 21])
        self.assertEqual(cargada.tratamientos[16]['tratamiento']['nombre'], 'Corona')
        self.assertFalse(cargada.modificado)

    def test_carga_ignora_dientes_desconocidos(self):
        with self.assertLogs('historial_clinico.odontograma', level='WARNING'):
            cargada = SeleccionOdontograma({
                'seleccionados': [11, 99, 'x'],
                'tratamientos': {'55': {'estado': 'planificado'}, '12': 'texto', '13': {'estado': 'completado'}},
            })
        self.assertEqual(cargada.seleccionados, [11, 13])
        self.assertEqual(list(cargada.tratamientos), [13])

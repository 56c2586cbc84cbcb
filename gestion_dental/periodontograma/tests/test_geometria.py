from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from periodontograma.geometria import (
    COLOR_BOLSA, COLOR_MARGEN, COLOR_SONDAJE, POSICIONES_X, calcular_series,
    color_por_sondaje, geometria_diente, linea_cero_y, valor_a_y,
)
from periodontograma.mediciones import MARGEN_GINGIVAL, PROFUNDIDAD_SONDAJE, datos_diente_vacio


class GeometriaTests(SimpleTestCase):

    def test_posiciones_de_los_puntos(self):
        self.assertEqual(POSICIONES_X, {'mesial': 8, 'central': 27.5, 'distal': 47})

    def test_linea_cero(self):
        self.assertEqual(linea_cero_y(11), 65)
        self.assertEqual(linea_cero_y(27), 65)
        self.assertEqual(linea_cero_y(31), 15)
        self.assertEqual(linea_cero_y(48), 15)

    def test_valor_a_y_maxilar_hacia_arriba(self):
        self.assertEqual(valor_a_y(0, 16), 65)
        self.assertEqual(valor_a_y(3, 16), 53)
        self.assertEqual(valor_a_y(-2, 16), 73)

    def test_valor_a_y_mandibula_hacia_abajo(self):
        self.assertEqual(valor_a_y(0, 36), 15)
        self.assertEqual(valor_a_y(3, 36), 27)
        self.assertEqual(valor_a_y(-2, 36), 7)

    def test_series_independientes_desde_linea_cero(self):
        cara = {
            MARGEN_GINGIVAL: {'mesial': 2, 'central': 0, 'distal': -1},
            PROFUNDIDAD_SONDAJE: {'mesial': 5, 'central': 3, 'distal': 2},
        }
        series = calcular_series(16, cara)

        margen = series['margen']
        self.assertEqual([p['y'] for p in margen['puntos']], [57, 65, 69])
        self.assertEqual(margen['path'], 'M 8 57 L 27.5 65 L 47 69')
        self.assertTrue(all(p['color'] == COLOR_MARGEN for p in margen['puntos']))

        sondaje = series['sondaje']
        # El sondaje no se desplaza según el margen
        self.assertEqual([p['y'] for p in sondaje['puntos']], [45, 53, 57])
        self.assertEqual(sondaje['path'], 'M 8 45 L 27.5 53 L 47 57')
        self.assertEqual(sondaje['puntos'][0]['color'], COLOR_BOLSA)
        self.assertTrue(sondaje['puntos'][0]['es_bolsa'])
        self.assertEqual(sondaje['puntos'][1]['color'], COLOR_SONDAJE)
        self.assertFalse(sondaje['puntos'][1]['es_bolsa'])

    def test_series_mandibulares(self):
        cara = {PROFUNDIDAD_SONDAJE: {'mesial': 4, 'central': 0, 'distal': 1}}
        series = calcular_series(46, cara)
        self.assertEqual(series['sondaje']['path'], 'M 8 31 L 27.5 15 L 47 19')
        self.assertEqual(series['margen']['path'], 'M 8 15 L 27.5 15 L 47 15')

    def test_geometria_diente_ausente_sin_series(self):
        diente = datos_diente_vacio()
        diente['ausente'] = True
        geometria = geometria_diente(26, diente, 'lingual')
        self.assertTrue(geometria['ausente'])
        self.assertIsNone(geometria['series'])
        self.assertEqual(geometria['arco'], 'maxilar')
        self.assertEqual(geometria['ancho'], 55)
        self.assertEqual(geometria['alto'], 80)

    def test_geometria_diente_presente(self):
        geometria = geometria_diente(33, datos_diente_vacio())
        self.assertEqual(geometria['arco'], 'mandibula')
        self.assertEqual(geometria['linea_cero_y'], 15)
        self.assertEqual(len(geometria['series']['margen']['puntos']), 3)

    def test_geometria_valida_claves(self):
        with self.assertRaises(ValidationError):
            geometria_diente(19, datos_diente_vacio())
        with self.assertRaises(ValidationError):
            geometria_diente(11, datos_diente_vacio(), 'oclusal')

    def test_color_por_sondaje(self):
        self.assertEqual(color_por_sondaje(3), '#22c55e')
        self.assertEqual(color_por_sondaje(5), '#eab308')
        self.assertEqual(color_por_sondaje(7), '#f97316')
        self.assertEqual(color_por_sondaje(8), '#ef4444')

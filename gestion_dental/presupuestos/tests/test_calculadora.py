import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, override_settings

from presupuestos.calculadora import calcular_plan_pago, generar_cronograma


class CalcularPlanPagoTests(SimpleTestCase):

    def test_plan_mensual_con_interes(self):
        plan = calcular_plan_pago(Decimal('1300'), 'mensual', 6, 10)
        self.assertEqual(plan['interes'], Decimal('130.00'))
        self.assertEqual(plan['total'], Decimal('1430.00'))
        self.assertEqual(plan['cuotas'], 6)
        self.assertEqual(plan['monto_cuota'], Decimal('238.33'))

    def test_cuotas_exactas(self):
        plan = calcular_plan_pago(1200, 'mensual', 6, 10)
        self.assertEqual(plan['interes'], Decimal('120.00'))
        self.assertEqual(plan['total'], Decimal('1320.00'))
        self.assertEqual(plan['monto_cuota'], Decimal('220.00'))

    def test_contado_ignora_interes_y_duracion(self):
        plan = calcular_plan_pago('500.00', 'contado', 12, 15)
        self.assertEqual(plan['tasa_interes'], Decimal('0'))
        self.assertEqual(plan['interes'], Decimal('0.00'))
        self.assertEqual(plan['total'], Decimal('500.00'))
        self.assertEqual(plan['cuotas'], 1)
        self.assertEqual(plan['monto_cuota'], Decimal('500.00'))

    def test_contado_sin_duracion_es_valido(self):
        self.assertEqual(calcular_plan_pago(100, 'contado', 0)['cuotas'], 1)

    def test_redondeo_a_centavos(self):
        plan = calcular_plan_pago('100', 'semanal', 3, 0)
        self.assertEqual(plan['monto_cuota'], Decimal('33.33'))
        plan = calcular_plan_pago('10.05', 'quincenal', 2, '5')
        # 10.05 * 5% = 0.5025 -> 0.50
        self.assertEqual(plan['interes'], Decimal('0.50'))
        self.assertEqual(plan['total'], Decimal('10.55'))
        self.assertEqual(plan['monto_cuota'], Decimal('5.28'))

    def test_duracion_invalida_en_cuotas(self):
        for duracion in (0, -3, 'x', None):
            with self.subTest(duracion=duracion):
                with self.assertRaises(ValidationError):
                    calcular_plan_pago(1000, 'mensual', duracion, 0)

    def test_parametros_invalidos(self):
        with self.assertRaises(ValidationError):
            calcular_plan_pago(100, 'anual', 2, 0)
        with self.assertRaises(ValidationError):
            calcular_plan_pago(-1, 'contado')
        with self.assertRaises(ValidationError):
            calcular_plan_pago(100, 'mensual', 2, -5)
        with self.assertRaises(ValidationError):
            calcular_plan_pago('cien', 'contado')

    def test_montos_no_finitos(self):
        for valor in ('NaN', 'Infinity', '-Infinity', 'sNaN'):
            with self.subTest(valor=valor):
                with self.assertRaises(ValidationError):
                    calcular_plan_pago(valor, 'contado')
                with self.assertRaises(ValidationError):
                    calcular_plan_pago(100, 'mensual', 2, valor)

    def test_duracion_maxima(self):
        self.assertEqual(calcular_plan_pago(1200, 'mensual', 120)['cuotas'], 120)
        with self.assertRaises(ValidationError):
            calcular_plan_pago(1200, 'mensual', 121)
        with self.assertRaises(ValidationError):
            calcular_plan_pago(1200, 'semanal', 100000)

    @override_settings(PRESUPUESTOS_DURACION_MAX=12)
    def test_duracion_maxima_configurable(self):
        self.assertEqual(calcular_plan_pago(1200, 'mensual', 12)['cuotas'], 12)
        with self.assertRaises(ValidationError):
            calcular_plan_pago(1200, 'mensual', 13)


class GenerarCronogramaTests(SimpleTestCase):

    def test_contado_una_cuota_en_la_fecha_de_inicio(self):
        plan = calcular_plan_pago(800, 'contado')
        cronograma = generar_cronograma(plan, datetime.date(2025, 3, 10))
        self.assertEqual(cronograma, [{'numero': 1, 'fecha': datetime.date(2025, 3, 10), 'monto': Decimal('800.00')}])

    def test_mensual_con_fin_de_mes(self):
        plan = calcular_plan_pago(100, 'mensual', 3)
        cronograma = generar_cronograma(plan, datetime.date(2025, 1, 31))
        self.assertEqual(
            [cuota['fecha'] for cuota in cronograma],
            [datetime.date(2025, 2, 28), datetime.date(2025, 3, 31), datetime.date(2025, 4, 30)],
        )
        self.assertEqual([cuota['monto'] for cuota in cronograma], [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')])
        self.assertEqual(sum(cuota['monto'] for cuota in cronograma), plan['total'])

    def test_semanal_y_quincenal(self):
        inicio = datetime.date(2025, 1, 1)
        semanal = generar_cronograma(calcular_plan_pago(60, 'semanal', 2), inicio)
        self.assertEqual([c['fecha'] for c in semanal], [datetime.date(2025, 1, 8), datetime.date(2025, 1, 15)])

        quincenal = generar_cronograma(calcular_plan_pago(60, 'quincenal', 2), inicio)
        self.assertEqual([c['fecha'] for c in quincenal], [datetime.date(2025, 1, 15), datetime.date(2025, 1, 29)])
        self.assertEqual([c['numero'] for c in quincenal], [1, 2])

    def test_cuotas_suman_el_total_con_interes(self):
        plan = calcular_plan_pago(Decimal('1300'), 'mensual', 6, 10)
        cronograma = generar_cronograma(plan, datetime.date(2025, 6, 1))
        self.assertEqual(len(cronograma), 6)
        self.assertEqual(cronograma[-1]['monto'], Decimal('238.35'))
        self.assertEqual(sum(c['monto'] for c in cronograma), Decimal('1430.00'))

    def test_total_menor_que_las_cuotas_no_deja_montos_negativos(self):
        plan = calcular_plan_pago('0.05', 'mensual', 10, 0)
        cronograma = generar_cronograma(plan, datetime.date(2025, 1, 1))
        montos = [c['monto'] for c in cronograma]
        self.assertEqual(len(montos), 10)
        self.assertTrue(all(monto >= 0 for monto in montos))
        self.assertEqual(montos[:9], [Decimal('0.00')] * 9)
        self.assertEqual(montos[-1], Decimal('0.05'))
        self.assertEqual(sum(montos), Decimal('0.05'))

    def test_cuotas_truncadas_a_centavos(self):
        plan = calcular_plan_pago('2.00', 'semanal', 3, 0)
        cronograma = generar_cronograma(plan, datetime.date(2025, 1, 1))
        self.assertEqual([c['monto'] for c in cronograma], [Decimal('0.66'), Decimal('0.66'), Decimal('0.68')])

    def test_fecha_fuera_del_calendario(self):
        plan = calcular_plan_pago(100, 'mensual', 3)
        with self.assertRaises(ValidationError):
            generar_cronograma(plan, datetime.date(9999, 11, 1))

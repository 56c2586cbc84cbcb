from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from pacientes.models import Paciente
from presupuestos.models import Presupuesto


class PresupuestosApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.paciente = Paciente.objects.create(nombre='Lucía', apellido='Paz')

    def _crear(self, **extra):
        datos = {
            'paciente': self.paciente.pk,
            'items': [{'nombre': 'Corona', 'precio': '1000.00', 'diente': 16}, {'nombre': 'Limpieza', 'precio': '200.00'}],
            'tipo_plan': 'mensual',
            'duracion': 3,
            'tasa_interes': '0',
        }
        datos.update(extra)
        return self.client.post('/api/colecciones/presupuestos/registros/', datos, format='json')

    def test_crear_por_la_coleccion(self):
        response = self._crear()
        self.assertEqual(response.status_code, 201)
        registro = response.json()
        self.assertEqual(registro['estado'], 'pendiente')
        self.assertEqual(registro['total'], '1200.00')
        self.assertEqual(len(registro['items']), 2)
        self.assertEqual(registro['plan_pago']['cuotas'], 3)
        self.assertEqual(registro['plan_pago']['monto_cuota'], '400.00')

    def test_crear_sin_items(self):
        response = self._crear(items=[])
        self.assertEqual(response.status_code, 400)
        self.assertIn('items', response.json()['errores'])
        self.assertFalse(Presupuesto.objects.exists())

    def test_crear_con_plan_invalido(self):
        response = self._crear(duracion=0)
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Presupuesto.objects.exists())

    def test_estado_no_se_escribe_por_la_coleccion(self):
        presupuesto_id = self._crear().json()['id']
        url = f'/api/colecciones/presupuestos/registros/{presupuesto_id}/'
        response = self.client.patch(url, {'estado': 'pagado', 'duracion': 6}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['estado'], 'pendiente')
        self.assertEqual(response.json()['duracion'], 6)

    def test_aceptar_y_pagar(self):
        presupuesto_id = self._crear().json()['id']

        response = self.client.post(f'/api/presupuestos/{presupuesto_id}/aceptar/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['variacion_saldo'], '1200.00')
        self.assertEqual(response.json()['saldo_paciente'], '1200.00')
        self.assertEqual(response.json()['data']['estado'], 'aceptado')

        response = self.client.post(
            f'/api/presupuestos/{presupuesto_id}/pagos/',
            {'monto': '200', 'metodo': 'tarjeta', 'fecha': '2025-02-01'},
            format='json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['variacion_saldo'], '-200.00')
        self.assertEqual(response.json()['data']['estado'], 'parcial')
        self.assertEqual(response.json()['data']['pagos'][0]['fecha'], '2025-02-01')

        self.paciente.refresh_from_db()
        self.assertEqual(self.paciente.saldo, Decimal('1000.00'))

    def test_aceptar_dos_veces(self):
        presupuesto_id = self._crear().json()['id']
        self.client.post(f'/api/presupuestos/{presupuesto_id}/aceptar/')
        response = self.client.post(f'/api/presupuestos/{presupuesto_id}/aceptar/')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_rechazar(self):
        presupuesto_id = self._crear().json()['id']
        response = self.client.post(f'/api/presupuestos/{presupuesto_id}/rechazar/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data']['estado'], 'rechazado')
        self.assertEqual(response.json()['variacion_saldo'], '0.00')

    def test_eliminar_aceptado_por_la_coleccion(self):
        presupuesto_id = self._crear(tipo_plan='contado', items=[{'nombre': 'Corona', 'precio': '1000'}]).json()['id']
        self.client.post(f'/api/presupuestos/{presupuesto_id}/aceptar/')

        response = self.client.delete(f'/api/colecciones/presupuestos/registros/{presupuesto_id}/')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])
        self.assertTrue(Presupuesto.objects.filter(pk=presupuesto_id).exists())
        self.paciente.refresh_from_db()
        self.assertEqual(self.paciente.saldo, Decimal('1000.00'))

    def test_eliminar_pendiente_por_la_coleccion(self):
        presupuesto_id = self._crear().json()['id']
        response = self.client.delete(f'/api/colecciones/presupuestos/registros/{presupuesto_id}/')
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Presupuesto.objects.exists())

    def test_pago_sin_monto_o_en_pendiente(self):
        presupuesto_id = self._crear().json()['id']
        response = self.client.post(f'/api/presupuestos/{presupuesto_id}/pagos/', {}, format='json')
        self.assertEqual(response.status_code, 400)

        response = self.client.post(f'/api/presupuestos/{presupuesto_id}/pagos/', {'monto': '50'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_presupuesto_inexistente(self):
        response = self.client.post('/api/presupuestos/9999/aceptar/')
        self.assertEqual(response.status_code, 404)

    def test_cronograma(self):
        presupuesto_id = self._crear().json()['id']
        response = self.client.get(f'/api/presupuestos/{presupuesto_id}/cronograma/', {'fecha_inicio': '2025-01-31'})
        self.assertEqual(response.status_code, 200)
        cronograma = response.json()['cronograma']
        self.assertEqual([c['fecha'] for c in cronograma], ['2025-02-28', '2025-03-31', '2025-04-30'])
        self.assertEqual([c['monto'] for c in cronograma], ['400.00', '400.00', '400.00'])

    def test_cronograma_fecha_invalida(self):
        presupuesto_id = self._crear().json()['id']
        response = self.client.get(f'/api/presupuestos/{presupuesto_id}/cronograma/', {'fecha_inicio': '31/01/2025'})
        self.assertEqual(response.status_code, 400)


class CalcularPlanApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_calcular_plan(self):
        response = self.client.post('/api/presupuestos/calcular-plan/', {
            'subtotal': '1300',
            'tipo_plan': 'mensual',
            'duracion': 6,
            'tasa_interes': 10,
            'fecha_inicio': '2025-01-15',
        }, format='json')
        self.assertEqual(response.status_code, 200)
        datos = response.json()
        self.assertEqual(datos['plan']['total'], '1430.00')
        self.assertEqual(datos['plan']['monto_cuota'], '238.33')
        self.assertEqual(len(datos['cronograma']), 6)
        self.assertEqual(datos['cronograma'][0]['fecha'], '2025-02-15')
        self.assertEqual(datos['cronograma'][-1]['monto'], '238.35')

    def test_plan_invalido(self):
        response = self.client.post('/api/presupuestos/calcular-plan/', {
            'subtotal': '100', 'tipo_plan': 'anual',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_duracion_excesiva(self):
        response = self.client.post('/api/presupuestos/calcular-plan/', {
            'subtotal': '1000', 'tipo_plan': 'mensual', 'duracion': 100000,
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_subtotal_no_finito(self):
        for subtotal in ('NaN', '-Infinity'):
            with self.subTest(subtotal=subtotal):
                response = self.client.post('/api/presupuestos/calcular-plan/', {
                    'subtotal': subtotal, 'tipo_plan': 'contado',
                }, format='json')
                self.assertEqual(response.status_code, 400)

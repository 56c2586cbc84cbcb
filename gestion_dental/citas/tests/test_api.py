import datetime

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from citas.disponibilidad import DENTISTA_OCUPADO, FUERA_DE_HORARIO
from citas.models import AuditoriaLog, Cita, HorarioClinica
from citas.servicios import agendar_cita
from pacientes.models import Paciente
from presupuestos.servicios import aceptar_presupuesto, crear_presupuesto

URL_CITAS = '/api/colecciones/citas/registros/'


class DisponibilidadApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        agendar_cita(timezone.make_aware(datetime.datetime(2025, 3, 10, 10)), 60, dentista='Dr. Soto')

    def test_horario_ocupado(self):
        response = self.client.get('/api/citas/disponibilidad/', {
            'fecha_hora': '2025-03-10T10:30', 'duracion': 30, 'dentista': 'Dr. Soto',
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True, 'disponible': False, 'motivo': DENTISTA_OCUPADO})

    def test_fecha_y_hora_por_separado(self):
        response = self.client.get('/api/citas/disponibilidad/', {
            'fecha': '2025-03-10', 'hora': '11:00', 'dentista': 'Dr. Soto',
        })
        self.assertTrue(response.json()['disponible'])

    def test_parametros_invalidos(self):
        self.assertEqual(self.client.get('/api/citas/disponibilidad/', {'fecha': '2025-03-10'}).status_code, 400)
        response = self.client.get('/api/citas/disponibilidad/', {'fecha_hora': '2025-03-10T11:00', 'duracion': 0})
        self.assertEqual(response.status_code, 400)


class CitasApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.paciente = Paciente.objects.create(nombre='Ana', apellido='Rojas')
        HorarioClinica.objects.create(dia_semana=0, hora_inicio=datetime.time(9), hora_fin=datetime.time(18))

    def _agendar(self, **extra):
        datos = {
            'fecha_hora': '2025-03-10T10:00:00',
            'duracion': 60,
            'paciente': self.paciente.pk,
            'dentista': 'Dr. Soto',
            'sillon': 'Box 1',
        }
        datos.update(extra)
        return self.client.post(URL_CITAS, datos, format='json')

    def test_agendar_por_la_coleccion(self):
        response = self._agendar()
        self.assertEqual(response.status_code, 201)
        cita = response.json()
        self.assertEqual(cita['estado'], 'programada')
        self.assertEqual(cita['nombre_paciente'], 'Ana Rojas')
        self.assertTrue(AuditoriaLog.objects.filter(modulo='citas', objeto_id=cita['id']).exists())

    def test_agendar_con_conflicto(self):
        self._agendar()
        response = self._agendar(fecha_hora='2025-03-10T10:30:00', sillon='Box 2')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errores']['fecha_hora'], [DENTISTA_OCUPADO])

        response = self._agendar(fecha_hora='2025-03-10T17:30:00')
        self.assertEqual(response.json()['errores']['fecha_hora'], [FUERA_DE_HORARIO])
        self.assertEqual(Cita.objects.count(), 1)

    def test_reprogramar(self):
        url = f"{URL_CITAS}{self._agendar().json()['id']}/"
        response = self.client.patch(url, {'fecha_hora': '2025-03-10T10:30:00'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(AuditoriaLog.objects.filter(modulo='citas', accion='actualizar').count(), 1)

        # El estado no se cambia editando el registro
        response = self.client.patch(url, {'estado': 'completada'}, format='json')
        self.assertEqual(response.json()['estado'], 'programada')

    def test_completar_y_cancelar(self):
        cita_id = self._agendar().json()['id']
        response = self.client.post(f'/api/citas/{cita_id}/completar/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data']['estado'], 'completada')

        self.assertEqual(self.client.post(f'/api/citas/{cita_id}/cancelar/').status_code, 400)
        response = self.client.patch(f"{URL_CITAS}{cita_id}/", {'notas': 'x'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_cita_inexistente(self):
        self.assertEqual(self.client.post('/api/citas/9999/cancelar/').status_code, 404)


class AuditoriaApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        paciente = Paciente.objects.create(nombre='Marta', apellido='Ruiz')
        presupuesto, _ = crear_presupuesto(paciente, [{'nombre': 'Corona', 'precio': '1000.00'}])
        aceptar_presupuesto(presupuesto.pk)

    def test_listar(self):
        response = self.client.get('/api/colecciones/auditoria/registros/', {'filter': 'accion = "cambio_estado"'})
        self.assertEqual(response.status_code, 200)
        items = response.json()['items']
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]['detalles']['estado'], 'aceptado')
        self.assertEqual(items[0]['detalles']['variacion_saldo'], '1000.00')

    def test_registros_de_solo_lectura(self):
        url = f'/api/colecciones/auditoria/registros/{AuditoriaLog.objects.first().pk}/'
        self.assertEqual(self.client.patch(url, {'descripcion': 'otra'}, format='json').status_code, 400)
        self.assertEqual(self.client.delete(url).status_code, 400)
        self.assertEqual(AuditoriaLog.objects.count(), 2)

import datetime
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from citas.disponibilidad import SILLON_OCUPADO
from citas.models import AuditoriaLog, Cita
from citas.models_auditoria import registrar_auditoria
from citas.servicios import agendar_cita, cancelar_cita, completar_cita, completar_citas_del_dia
from pacientes.models import Paciente
from presupuestos.servicios import (
    aceptar_presupuesto, conciliar_saldo, crear_presupuesto, rechazar_presupuesto, registrar_pago,
)


def _hora(dia, hora, minuto=0):
    return timezone.make_aware(datetime.datetime(2025, 3, dia, hora, minuto))


class AgendarCitaTests(TestCase):

    def setUp(self):
        self.paciente = Paciente.objects.create(nombre='Ana', apellido='Rojas')

    def test_agendar(self):
        cita = agendar_cita(_hora(10, 10), 45, dentista='Dr. Soto', sillon='Box 1', paciente=self.paciente)

        self.assertEqual(cita.estado, 'programada')
        self.assertEqual(cita.duracion, 45)
        self.assertEqual(cita.fin, _hora(10, 10, 45))
        self.assertEqual(cita.nombre_paciente, self.paciente.nombre_completo)
        log = AuditoriaLog.objects.get(modulo='citas')
        self.assertEqual(log.accion, 'crear')
        self.assertEqual((log.tipo_objeto, log.objeto_id), ('cita', cita.pk))

    def test_agendar_sin_paciente_registrado(self):
        cita = agendar_cita(_hora(10, 10), paciente_nombre='Pedro', paciente_telefono='555')
        self.assertEqual(cita.duracion, 30)
        self.assertEqual(cita.nombre_paciente, 'Pedro')

    def test_horario_ocupado(self):
        agendar_cita(_hora(10, 10), 60, sillon='Box 1')
        with self.assertRaisesMessage(ValidationError, SILLON_OCUPADO):
            agendar_cita(_hora(10, 10, 30), 30, sillon='box 1')
        self.assertEqual(Cita.objects.count(), 1)

    def test_cita_contigua(self):
        agendar_cita(_hora(10, 10), 60, dentista='Dr. Soto')
        cita = agendar_cita(_hora(10, 11), 30, dentista='Dr. Soto')
        self.assertEqual(Cita.objects.count(), 2)
        self.assertEqual(cita.fecha_hora, _hora(10, 11))


class EstadoCitaTests(TestCase):

    def setUp(self):
        self.paciente = Paciente.objects.create(nombre='Ana', apellido='Rojas')
        self.cita = agendar_cita(_hora(10, 10), paciente=self.paciente)

    def test_completar(self):
        cita = completar_cita(self.cita.pk)
        self.assertEqual(cita.estado, 'completada')
        self.assertIsNotNone(cita.fecha_completada)
        with self.assertRaises(ValidationError):
            completar_cita(self.cita.pk)
        with self.assertRaises(ValidationError):
            cancelar_cita(self.cita.pk)

    def test_cancelar(self):
        cita = cancelar_cita(self.cita.pk)
        self.assertEqual(cita.estado, 'cancelada')
        log = AuditoriaLog.objects.filter(accion='cambio_estado').get()
        self.assertEqual(log.detalles, {'estado_anterior': 'programada', 'estado': 'cancelada'})
        with self.assertRaises(ValidationError):
            completar_cita(self.cita.pk)

    def test_cita_inexistente(self):
        with self.assertRaises(Cita.DoesNotExist):
            completar_cita(9999)

    def test_completar_citas_del_dia(self):
        tarde = agendar_cita(_hora(10, 16), paciente=self.paciente)
        otro_dia = agendar_cita(_hora(11, 10), paciente=self.paciente)
        cancelada = agendar_cita(_hora(10, 18), paciente=self.paciente)
        cancelar_cita(cancelada.pk)

        completadas = completar_citas_del_dia(self.paciente, _hora(10, 12))

        self.assertEqual([c.pk for c in completadas], [self.cita.pk, tarde.pk])
        otro_dia.refresh_from_db()
        cancelada.refresh_from_db()
        self.assertEqual(otro_dia.estado, 'programada')
        self.assertEqual(cancelada.estado, 'cancelada')
        self.assertEqual(completar_citas_del_dia(self.paciente, datetime.date(2025, 3, 10)), [])


class AuditoriaTests(TestCase):

    def setUp(self):
        self.paciente = Paciente.objects.create(nombre='Marta', apellido='Ruiz')
        self.presupuesto, _ = crear_presupuesto(self.paciente, [{'nombre': 'Corona', 'precio': '1000.00'}])

    def _logs(self, **filtros):
        return list(AuditoriaLog.objects.filter(modulo='presupuestos', **filtros).order_by('id'))

    def test_transiciones_de_presupuesto(self):
        aceptar_presupuesto(self.presupuesto.pk)
        registrar_pago(self.presupuesto.pk, '400.00')

        acciones = [(log.accion, log.detalles.get('estado')) for log in self._logs()]
        self.assertEqual(acciones, [('crear', None), ('cambio_estado', 'aceptado'), ('pago', 'parcial')])
        aceptacion, pago = self._logs(accion__in=['cambio_estado', 'pago'])
        self.assertEqual(Decimal(aceptacion.detalles['variacion_saldo']), Decimal('1000.00'))
        self.assertEqual(pago.detalles['estado_anterior'], 'aceptado')
        self.assertEqual(Decimal(pago.detalles['monto']), Decimal('400.00'))
        self.assertEqual(pago.objeto_id, self.presupuesto.pk)

    def test_rechazo(self):
        aceptar_presupuesto(self.presupuesto.pk)
        rechazar_presupuesto(self.presupuesto.pk)
        log = self._logs(accion='cambio_estado')[-1]
        self.assertEqual(log.detalles['estado_anterior'], 'aceptado')
        self.assertEqual(Decimal(log.detalles['variacion_saldo']), Decimal('-1000.00'))

    def test_operacion_fallida_no_deja_registro(self):
        with self.assertRaises(ValidationError):
            registrar_pago(self.presupuesto.pk, '100.00')
        self.assertEqual(self._logs(accion='pago'), [])

    def test_ajuste_de_saldo(self):
        Paciente.objects.filter(pk=self.paciente.pk).update(saldo=Decimal('50.00'))
        conciliar_saldo(self.paciente)
        self.assertFalse(AuditoriaLog.objects.filter(accion='ajuste_saldo').exists())

        conciliar_saldo(self.paciente, aplicar=True)
        log = AuditoriaLog.objects.get(accion='ajuste_saldo')
        self.assertEqual((log.modulo, log.tipo_objeto, log.objeto_id), ('pacientes', 'paciente', self.paciente.pk))
        self.assertEqual(Decimal(log.detalles['diferencia']), Decimal('50.00'))

    def test_registros_no_se_eliminan(self):
        log = AuditoriaLog.objects.first()
        with self.assertRaises(ValidationError):
            log.delete()
        self.assertTrue(AuditoriaLog.objects.filter(pk=log.pk).exists())

    def test_fallo_al_registrar_no_interrumpe(self):
        with mock.patch.object(AuditoriaLog.objects, 'create', side_effect=DatabaseError("disco lleno")):
            with self.assertLogs('citas.models_auditoria', level='ERROR'):
                resultado = registrar_auditoria('otro', 'sistema', 'Prueba')
        self.assertIsNone(resultado)

    def test_ip_desde_la_request(self):
        request = mock.Mock(META={'REMOTE_ADDR': '10.0.0.7'})
        log = registrar_auditoria('otro', 'sistema', 'Prueba', request=request, usuario_nombre='')
        self.assertEqual(log.ip_address, '10.0.0.7')
        self.assertEqual(log.usuario_nombre, 'Sistema')

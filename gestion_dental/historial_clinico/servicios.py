"""
Servicios del historial clínico: odontograma y consultas.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from citas.servicios import completar_citas_del_dia
from pacientes.models import Paciente
from pasarela.base import obtener_pasarela
from periodontograma.servicios import filtro_paciente
from .medicamentos import normalizar_medicamento
from .models import Consulta
from .odontograma import SeleccionOdontograma

logger = logging.getLogger(__name__)

COLECCION_ODONTOGRAMAS = 'odontogramas'


class ServicioOdontograma:
    """Carga y guarda la selección del odontograma de cada paciente"""

    def __init__(self, pasarela=None):
        self.pasarela = pasarela or obtener_pasarela()

    def registro(self, paciente_id):
        return self.pasarela.primero(COLECCION_ODONTOGRAMAS, filtro=filtro_paciente(paciente_id))

    def cargar(self, paciente_id):
        registro = self.registro(paciente_id)
        if registro is None:
            return SeleccionOdontograma()
        return SeleccionOdontograma(registro.get('datos') or {})

    def guardar(self, paciente_id, seleccion):
        campos = {'datos': seleccion.a_dict()}
        existente = self.registro(paciente_id)
        if existente:
            registro = self.pasarela.actualizar(COLECCION_ODONTOGRAMAS, existente['id'], campos)
        else:
            campos['paciente'] = int(paciente_id)
            registro = self.pasarela.crear(COLECCION_ODONTOGRAMAS, campos)
        seleccion.marcar_guardado()
        logger.info(f"Odontograma del paciente {paciente_id} guardado ({len(seleccion.seleccionados)} dientes)")
        return registro

    def generar_presupuesto(self, paciente_id, seleccion, tipo_plan='contado', duracion=1, tasa_interes=0, notas=''):
        """
        Crea un presupuesto pendiente con un ítem por diente con tratamiento.

        Raises:
            ValidationError: Si ningún diente tiene tratamiento
        """
        items = seleccion.items_presupuesto()
        if not items:
            raise ValidationError("No hay dientes con tratamiento para presupuestar")

        return self.pasarela.crear('presupuestos', {
            'paciente': int(paciente_id),
            'items': [dict(item, precio=str(item['precio'])) for item in items],
            'tipo_plan': tipo_plan,
            'duracion': duracion,
            'tasa_interes': str(tasa_interes),
            'notas': notas,
        })


def _consulta_origen(valor, paciente):
    if valor in (None, ''):
        return None
    if not isinstance(valor, Consulta):
        try:
            valor = Consulta.objects.get(pk=valor)
        except (Consulta.DoesNotExist, ValueError, TypeError):
            raise ValidationError(f"La consulta de origen {valor!r} no existe")
    if valor.paciente_id != paciente.pk:
        raise ValidationError("La consulta de origen pertenece a otro paciente")
    return valor


def crear_consulta(paciente, motivo, diagnostico='', plan_tratamiento='', medicamentos=None,
                   notas='', fecha=None, historial=None, consulta_origen=None):
    """
    Registra una consulta y, en la misma transacción, actualiza la última
    visita del paciente y marca como completadas sus citas pendientes del día.
    La consulta queda enlazada a la primera de esas citas.

    Args:
        paciente: Paciente o su id
        medicamentos: Lista de nombres o dicts (nombre, dosis, frecuencia, duracion)
        historial: HistorialMedicamentos donde anotar los medicamentos indicados
        consulta_origen: Consulta (o id) del mismo paciente si es un control

    Returns:
        Consulta
    """
    if not (motivo or '').strip():
        raise ValidationError("El motivo de consulta es requerido")

    indicados = []
    for medicamento in medicamentos or []:
        normalizado = normalizar_medicamento(medicamento)
        if normalizado:
            indicados.append(normalizado)

    fecha = fecha or timezone.now()
    paciente_id = getattr(paciente, 'pk', paciente)

    with transaction.atomic():
        paciente = Paciente.objects.select_for_update().get(pk=paciente_id)
        origen = _consulta_origen(consulta_origen, paciente)
        citas = completar_citas_del_dia(paciente, fecha)
        consulta = Consulta.objects.create(
            paciente=paciente,
            fecha=fecha,
            motivo=motivo.strip(),
            diagnostico=diagnostico or '',
            plan_tratamiento=plan_tratamiento or '',
            medicamentos=indicados,
            notas=notas or '',
            consulta_origen=origen,
            cita=citas[0] if citas else None,
        )
        if paciente.ultima_visita is None or fecha > paciente.ultima_visita:
            paciente.ultima_visita = fecha
            paciente.save(update_fields=['ultima_visita'])

    logger.info(f"Consulta {consulta.pk} registrada para el paciente {paciente.pk}")

    if historial is not None:
        for medicamento in indicados:
            historial.registrar(medicamento)

    return consulta

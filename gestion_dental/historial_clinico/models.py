from django.db import models
from django.utils import timezone
from pacientes.models import Paciente


# Odontograma - Dientes seleccionados y tratamientos asignados por diente
class Odontograma(models.Model):
    paciente = models.OneToOneField(
        Paciente,
        on_delete=models.CASCADE,
        related_name='odontograma',
        verbose_name="Paciente"
    )

    # {'seleccionados': [...], 'tratamientos': {numero: {...}}}; ver historial_clinico.odontograma
    datos = models.JSONField(default=dict, blank=True, verbose_name="Dientes y Tratamientos")

    creado_el = models.DateTimeField(auto_now_add=True, verbose_name="Fecha de Creación")
    actualizado_el = models.DateTimeField(auto_now=True, verbose_name="Fecha de Actualización")

    def __str__(self):
        return f"Odontograma - {self.paciente.nombre_completo}"

    class Meta:
        verbose_name = "Odontograma"
        verbose_name_plural = "Odontogramas"
        ordering = ['-actualizado_el']


# Consulta - Registro de cada atención del paciente
class Consulta(models.Model):
    paciente = models.ForeignKey(
        Paciente,
        on_delete=models.CASCADE,
        related_name='consultas',
        verbose_name="Paciente"
    )
    fecha = models.DateTimeField(default=timezone.now, verbose_name="Fecha de la Consulta")

    motivo = models.TextField(verbose_name="Motivo de Consulta")
    diagnostico = models.TextField(blank=True, default='', verbose_name="Diagnóstico")
    plan_tratamiento = models.TextField(blank=True, default='', verbose_name="Plan de Tratamiento")

    # Lista de {'nombre', 'dosis', 'frecuencia', 'duracion'}
    medicamentos = models.JSONField(default=list, blank=True, verbose_name="Medicamentos Indicados")

    notas = models.TextField(blank=True, default='', verbose_name="Notas")

    # Consulta de control: apunta a la consulta que origina el seguimiento
    consulta_origen = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='seguimientos',
        verbose_name="Consulta de Origen"
    )
    cita = models.ForeignKey(
        'citas.Cita',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='consultas',
        verbose_name="Cita"
    )
    creado_el = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Consulta - {self.paciente.nombre_completo} ({timezone.localtime(self.fecha).strftime('%d/%m/%Y')})"

    class Meta:
        verbose_name = "Consulta"
        verbose_name_plural = "Consultas"
        ordering = ['-fecha']

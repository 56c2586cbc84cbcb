from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from pacientes.models import Paciente
from .models_auditoria import AuditoriaLog


class Cita(models.Model):
    ESTADO_CHOICES = (
        ('programada', 'Programada'),
        ('confirmada', 'Confirmada'),
        ('completada', 'Completada'),
        ('cancelada', 'Cancelada'),
        ('no_show', 'No Llegó'),
    )
    # Estados que todavía esperan la atención del paciente
    ESTADOS_PENDIENTES = ('programada', 'confirmada')

    fecha_hora = models.DateTimeField(verbose_name="Fecha y Hora")
    duracion = models.PositiveIntegerField(default=30, verbose_name="Duración (minutos)")

    paciente = models.ForeignKey(
        Paciente,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='citas',
        verbose_name="Paciente"
    )
    # Campos de respaldo para citas sin paciente registrado
    paciente_nombre = models.CharField(max_length=150, blank=True, default='')
    paciente_telefono = models.CharField(max_length=20, blank=True, default='')

    dentista = models.CharField(max_length=150, blank=True, default='', verbose_name="Dentista")
    sillon = models.CharField(max_length=50, blank=True, default='', verbose_name="Sillón / Box")

    motivo = models.CharField(max_length=200, default='Consulta General', verbose_name="Motivo")
    notas = models.TextField(blank=True, default='')
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default='programada', verbose_name="Estado")
    origen = models.CharField(max_length=30, default='manual', verbose_name="Origen")

    fecha_completada = models.DateTimeField(blank=True, null=True, verbose_name="Fecha de Finalización")
    creada_el = models.DateTimeField(auto_now_add=True)
    actualizada_el = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Cita"
        verbose_name_plural = "Citas"
        ordering = ['fecha_hora']
        indexes = [models.Index(fields=['fecha_hora'], name='cita_fecha_hora_idx')]

    @property
    def fin(self):
        return self.fecha_hora + timedelta(minutes=self.duracion)

    @property
    def nombre_paciente(self):
        """Obtiene el nombre del paciente de forma segura (paciente o campo de respaldo)"""
        if self.paciente:
            return self.paciente.nombre_completo
        return self.paciente_nombre or 'Sin nombre'

    def completar(self):
        """Marca una cita como completada"""
        if self.estado in self.ESTADOS_PENDIENTES:
            self.estado = 'completada'
            self.fecha_completada = timezone.now()
            self.save(update_fields=['estado', 'fecha_completada', 'actualizada_el'])
            return True
        return False

    def cancelar(self):
        """Cancela una cita; el horario queda libre"""
        if self.estado in self.ESTADOS_PENDIENTES:
            self.estado = 'cancelada'
            self.save(update_fields=['estado', 'actualizada_el'])
            return True
        return False

    def __str__(self):
        return f"{timezone.localtime(self.fecha_hora):%d/%m/%Y %H:%M} - {self.get_estado_display()} - {self.nombre_paciente}"


class HorarioClinica(models.Model):
    DIA_SEMANA_CHOICES = (
        (0, 'Lunes'),
        (1, 'Martes'),
        (2, 'Miércoles'),
        (3, 'Jueves'),
        (4, 'Viernes'),
        (5, 'Sábado'),
        (6, 'Domingo'),
    )

    dia_semana = models.IntegerField(choices=DIA_SEMANA_CHOICES, unique=True, verbose_name="Día de la Semana")
    abierto = models.BooleanField(default=True, verbose_name="Abierto")
    hora_inicio = models.TimeField(verbose_name="Hora de Inicio")
    hora_fin = models.TimeField(verbose_name="Hora de Fin")

    class Meta:
        verbose_name = "Horario de la Clínica"
        verbose_name_plural = "Horarios de la Clínica"
        ordering = ['dia_semana']

    def __str__(self):
        if not self.abierto:
            return f"{self.get_dia_semana_display()} - Cerrado"
        return f"{self.get_dia_semana_display()} {self.hora_inicio:%H:%M}-{self.hora_fin:%H:%M}"

    def clean(self):
        """Validar que hora_fin sea mayor que hora_inicio"""
        if self.hora_inicio and self.hora_fin and self.hora_fin <= self.hora_inicio:
            raise ValidationError('La hora de fin debe ser mayor que la hora de inicio.')

from django.db import models
from django.utils import timezone
from pacientes.models import Paciente


# Periodontograma - Cartilla periodontal del paciente
class Periodontograma(models.Model):
    paciente = models.OneToOneField(
        Paciente,
        on_delete=models.CASCADE,
        related_name='periodontograma',
        verbose_name="Paciente"
    )

    # Mediciones por diente (numeración FDI como clave); ver periodontograma.mediciones
    datos = models.JSONField(default=dict, blank=True, verbose_name="Mediciones")

    fecha_examen = models.DateField(default=timezone.localdate, verbose_name="Fecha del Examen")
    observaciones = models.TextField(blank=True, default='', verbose_name="Observaciones")

    creado_el = models.DateTimeField(auto_now_add=True, verbose_name="Fecha de Creación")
    actualizado_el = models.DateTimeField(auto_now=True, verbose_name="Fecha de Actualización")

    def __str__(self):
        return f"Periodontograma - {self.paciente.nombre_completo} ({self.fecha_examen.strftime('%d/%m/%Y')})"

    class Meta:
        verbose_name = "Periodontograma"
        verbose_name_plural = "Periodontogramas"
        ordering = ['-actualizado_el']

from django.db import models


# Parámetros de configuración clave/valor
class Parametro(models.Model):
    """
    Almacén clave/valor para configuración y preferencias persistentes.

    Cada clave existe una sola vez; el valor es JSON libre (listas, objetos,
    números o texto).
    """
    clave = models.CharField(max_length=100, unique=True, verbose_name="Clave")
    valor = models.JSONField(default=dict, blank=True, verbose_name="Valor")
    descripcion = models.CharField(max_length=200, blank=True, default='', verbose_name="Descripción")
    actualizado_el = models.DateTimeField(auto_now=True, verbose_name="Última Actualización")

    def __str__(self):
        return self.clave

    class Meta:
        verbose_name = "Parámetro"
        verbose_name_plural = "Parámetros"
        ordering = ['clave']

from decimal import Decimal

from django.db import models


class Paciente(models.Model):
    nombre = models.CharField(max_length=100, verbose_name="Nombre")
    apellido = models.CharField(max_length=100, blank=True, default='', verbose_name="Apellido")

    # DNI/RUT - Identificación
    dni = models.CharField(
        max_length=20,
        unique=True,
        blank=True,
        null=True,
        verbose_name="DNI",
        help_text="Documento de identidad (opcional pero recomendado)"
    )

    email = models.EmailField(blank=True, null=True, verbose_name="Email")
    telefono = models.CharField(max_length=20, blank=True, default='', verbose_name="Teléfono")

    # Fecha de nacimiento - Para calcular edad automáticamente
    fecha_nacimiento = models.DateField(
        blank=True,
        null=True,
        verbose_name="Fecha de Nacimiento"
    )

    # Alergias - CRÍTICO para seguridad del paciente
    alergias = models.TextField(
        blank=True,
        default='',
        verbose_name="Alergias",
        help_text="Lista de alergias conocidas (medicamentos, materiales dentales, anestesia, etc.)"
    )
    antecedentes_patologicos = models.TextField(
        blank=True,
        default='',
        verbose_name="Antecedentes Patológicos"
    )
    antecedentes_no_patologicos = models.TextField(
        blank=True,
        default='',
        verbose_name="Antecedentes No Patológicos"
    )

    # Saldo pendiente: aumenta al aceptar un presupuesto y disminuye con cada pago
    saldo = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        verbose_name="Saldo Pendiente"
    )

    ultima_visita = models.DateTimeField(blank=True, null=True, verbose_name="Última Visita")
    fecha_registro = models.DateTimeField(auto_now_add=True)
    activo = models.BooleanField(default=True)
    notas = models.TextField(blank=True, default='')

    def __str__(self):
        if self.dni:
            return f"{self.nombre_completo} (DNI: {self.dni})"
        return self.nombre_completo

    @property
    def nombre_completo(self):
        return f"{self.nombre} {self.apellido}".strip()

    @property
    def edad(self):
        """Calcula la edad automáticamente basándose en la fecha de nacimiento"""
        if self.fecha_nacimiento:
            from datetime import date
            today = date.today()
            return today.year - self.fecha_nacimiento.year - (
                (today.month, today.day) < (self.fecha_nacimiento.month, self.fecha_nacimiento.day)
            )
        return None

    @property
    def tiene_alergias(self):
        """Verifica si el paciente tiene alergias registradas"""
        return bool(self.alergias and self.alergias.strip())

    class Meta:
        verbose_name = "Paciente"
        verbose_name_plural = "Pacientes"
        ordering = ['apellido', 'nombre']

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from pacientes.models import Paciente
from .calculadora import CONTADO, TIPOS_PLAN, calcular_plan_pago


class TratamientoDental(models.Model):
    """Catálogo de tratamientos con su precio de lista"""
    nombre = models.CharField(max_length=200, verbose_name="Nombre")
    codigo = models.CharField(max_length=20, blank=True, default='', verbose_name="Código")
    precio = models.DecimalField(max_digits=10, decimal_places=2, verbose_name="Precio")
    activo = models.BooleanField(default=True)

    def __str__(self):
        if self.codigo:
            return f"{self.codigo} - {self.nombre}"
        return self.nombre

    class Meta:
        verbose_name = "Tratamiento Dental"
        verbose_name_plural = "Tratamientos Dentales"
        ordering = ['nombre']


class Presupuesto(models.Model):
    ESTADO_CHOICES = [
        ('pendiente', 'Pendiente'),
        ('aceptado', 'Aceptado'),
        ('rechazado', 'Rechazado'),
        ('pagado', 'Pagado'),
        ('parcial', 'Pago Parcial'),
    ]
    # Estados que aún no afectan el saldo del paciente
    ESTADOS_ELIMINABLES = ('pendiente', 'rechazado')

    paciente = models.ForeignKey(Paciente, on_delete=models.PROTECT, related_name='presupuestos', verbose_name="Paciente")
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default='pendiente', verbose_name="Estado")
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), verbose_name="Total")

    # Plan de pago
    tipo_plan = models.CharField(max_length=20, choices=TIPOS_PLAN, default=CONTADO, verbose_name="Tipo de Plan")
    duracion = models.PositiveIntegerField(default=1, verbose_name="Número de Cuotas")
    tasa_interes = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), verbose_name="Tasa de Interés (%)")

    # Monto cargado al saldo del paciente al aceptar (se revierte al rechazar)
    cargo_saldo = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), verbose_name="Cargo al Saldo")

    fecha_aceptacion = models.DateTimeField(blank=True, null=True)
    fecha_rechazo = models.DateTimeField(blank=True, null=True)
    notas = models.TextField(blank=True, default='')
    creado_el = models.DateTimeField(auto_now_add=True, verbose_name="Fecha de Creación")
    actualizado_el = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Presupuesto #{self.pk} - {self.paciente} - ${self.total} ({self.get_estado_display()})"

    def save(self, *args, **kwargs):
        # El pago al contado no lleva interés ni cuotas
        if self.tipo_plan == CONTADO:
            self.tasa_interes = Decimal('0.00')
            self.duracion = 1
        super().save(*args, **kwargs)

    @property
    def plan_pago(self):
        return calcular_plan_pago(self.total, self.tipo_plan, self.duracion, self.tasa_interes)

    @property
    def total_final(self):
        """Total con intereses del plan"""
        return self.plan_pago['total']

    @property
    def total_pagado(self):
        resultado = self.pagos.aggregate(suma=models.Sum('monto'))['suma']
        return resultado or Decimal('0.00')

    @property
    def total_a_pagar(self):
        """Monto cargado al saldo al aceptar; antes de aceptar, el total final del plan"""
        if self.estado != 'pendiente' and self.cargo_saldo:
            return self.cargo_saldo
        return self.total_final

    @property
    def saldo_pendiente(self):
        return self.total_a_pagar - self.total_pagado

    @property
    def puede_eliminarse(self):
        return self.estado in self.ESTADOS_ELIMINABLES

    def delete(self, *args, **kwargs):
        if not self.puede_eliminarse:
            raise ValidationError(
                f"No se puede eliminar un presupuesto en estado '{self.get_estado_display()}': ya afectó el saldo del paciente"
            )
        return super().delete(*args, **kwargs)

    class Meta:
        verbose_name = "Presupuesto"
        verbose_name_plural = "Presupuestos"
        ordering = ['-creado_el']


class ItemPresupuesto(models.Model):
    presupuesto = models.ForeignKey(Presupuesto, on_delete=models.CASCADE, related_name='items')
    tratamiento = models.ForeignKey(
        TratamientoDental,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='items_presupuesto'
    )
    nombre = models.CharField(max_length=200, verbose_name="Descripción")
    codigo = models.CharField(max_length=20, blank=True, default='')
    precio = models.DecimalField(max_digits=10, decimal_places=2, verbose_name="Precio")
    diente = models.PositiveSmallIntegerField(blank=True, null=True, verbose_name="Diente (FDI)")
    orden = models.PositiveIntegerField(default=0)

    def __str__(self):
        if self.diente:
            return f"{self.nombre} (diente {self.diente}) - ${self.precio}"
        return f"{self.nombre} - ${self.precio}"

    class Meta:
        verbose_name = "Ítem de Presupuesto"
        verbose_name_plural = "Ítems de Presupuesto"
        ordering = ['orden', 'id']


class PagoPresupuesto(models.Model):
    METODO_CHOICES = [
        ('efectivo', 'Efectivo'),
        ('tarjeta', 'Tarjeta'),
        ('transferencia', 'Transferencia'),
        ('cheque', 'Cheque'),
    ]

    presupuesto = models.ForeignKey(Presupuesto, on_delete=models.CASCADE, related_name='pagos')
    monto = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="Monto")
    fecha = models.DateField(default=timezone.localdate, verbose_name="Fecha")
    metodo = models.CharField(max_length=20, choices=METODO_CHOICES, default='efectivo', verbose_name="Método de Pago")
    creado_el = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Pago ${self.monto} - {self.get_metodo_display()} - {self.fecha}"

    class Meta:
        verbose_name = "Pago de Presupuesto"
        verbose_name_plural = "Pagos de Presupuesto"
        ordering = ['fecha', 'id']

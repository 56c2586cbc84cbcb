import logging

from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, models, transaction

logger = logging.getLogger(__name__)


class AuditoriaLog(models.Model):
    """Registro de movimientos de presupuestos, saldos y citas"""

    ACCION_CHOICES = (
        ('crear', 'Crear'),
        ('actualizar', 'Actualizar'),
        ('eliminar', 'Eliminar'),
        ('cambio_estado', 'Cambio de Estado'),
        ('pago', 'Pago'),
        ('ajuste_saldo', 'Ajuste de Saldo'),
        ('otro', 'Otro'),
    )

    MODULO_CHOICES = (
        ('presupuestos', 'Presupuestos'),
        ('pacientes', 'Pacientes'),
        ('citas', 'Citas'),
        ('consultas', 'Consultas'),
        ('sistema', 'Sistema'),
        ('otro', 'Otro'),
    )

    # No hay cuentas de usuario: se guarda el nombre que informe el cliente
    usuario_nombre = models.CharField(max_length=150, default='Sistema', verbose_name="Usuario")

    accion = models.CharField(max_length=20, choices=ACCION_CHOICES, verbose_name="Acción")
    modulo = models.CharField(max_length=20, choices=MODULO_CHOICES, verbose_name="Módulo")
    descripcion = models.CharField(max_length=500, verbose_name="Descripción")

    # Valores antes/después de la transición (montos como texto)
    detalles = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder, verbose_name="Detalles Adicionales")

    ip_address = models.GenericIPAddressField(null=True, blank=True, verbose_name="Dirección IP")
    fecha_hora = models.DateTimeField(auto_now_add=True, verbose_name="Fecha y Hora")

    # Referencia al objeto afectado
    objeto_id = models.PositiveBigIntegerField(null=True, blank=True, verbose_name="ID del Objeto")
    tipo_objeto = models.CharField(max_length=100, blank=True, default='', verbose_name="Tipo de Objeto")

    class Meta:
        verbose_name = "Registro de Auditoría"
        verbose_name_plural = "Registros de Auditoría"
        ordering = ['-fecha_hora', '-id']
        indexes = [
            models.Index(fields=['-fecha_hora'], name='auditoria_fecha_idx'),
            models.Index(fields=['modulo', '-fecha_hora'], name='auditoria_modulo_idx'),
            models.Index(fields=['tipo_objeto', 'objeto_id'], name='auditoria_objeto_idx'),
        ]

    def __str__(self):
        return f"{self.usuario_nombre} - {self.get_accion_display()} - {self.get_modulo_display()} - {self.fecha_hora:%d/%m/%Y %H:%M}"

    def delete(self, *args, **kwargs):
        raise ValidationError("Los registros de auditoría no se eliminan")


def registrar_auditoria(accion, modulo, descripcion, detalles=None, objeto=None,
                        usuario_nombre='Sistema', ip_address=None, request=None):
    """
    Función helper para registrar acciones en el log de auditoría

    Se llama dentro de la transacción de la operación auditada. Un fallo al
    escribir el registro se anota en el log y no revierte la operación.

    Args:
        accion: Tipo de acción (crear, cambio_estado, pago, ...)
        modulo: Módulo afectado (presupuestos, citas, ...)
        descripcion: Descripción de la acción
        detalles: Dict con valores de la transición (opcional)
        objeto: Instancia afectada; se guardan su id y su tipo (opcional)
        request: Request de Django para obtener la IP (opcional)

    Returns:
        AuditoriaLog o None si no se pudo guardar
    """
    if request is not None and not ip_address:
        ip_address = request.META.get('REMOTE_ADDR') or request.META.get('HTTP_X_FORWARDED_FOR', '').split(',')[0].strip() or None

    try:
        with transaction.atomic():
            return AuditoriaLog.objects.create(
                usuario_nombre=(usuario_nombre or 'Sistema')[:150],
                accion=accion,
                modulo=modulo,
                descripcion=(descripcion or '')[:500],
                detalles=detalles or {},
                ip_address=ip_address,
                objeto_id=getattr(objeto, 'pk', None),
                tipo_objeto=objeto._meta.model_name if objeto is not None else '',
            )
    except DatabaseError as e:
        logger.error(f"Error al registrar auditoría ({modulo}/{accion}): {e}")
        return None

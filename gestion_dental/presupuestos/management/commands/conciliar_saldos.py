"""
Comando de gestión para conciliar el saldo de los pacientes con sus presupuestos.

El saldo esperado es la suma de los cargos de presupuestos no rechazados
menos los pagos registrados en ellos.

Uso:
    python manage.py conciliar_saldos                 # Solo informar diferencias
    python manage.py conciliar_saldos --aplicar       # Corregir los saldos descuadrados
    python manage.py conciliar_saldos --paciente 12   # Un solo paciente
"""

from django.core.management.base import BaseCommand, CommandError
from pacientes.models import Paciente
from presupuestos.servicios import conciliar_saldo
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Compara el saldo de cada paciente con el que resulta de sus presupuestos y pagos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--aplicar',
            action='store_true',
            help='Corregir los saldos descuadrados (por defecto solo se informan)',
        )
        parser.add_argument(
            '--paciente',
            type=int,
            help='ID del paciente a conciliar (por defecto: todos)',
        )

    def handle(self, *args, **options):
        aplicar = options['aplicar']
        paciente_id = options.get('paciente')

        pacientes = Paciente.objects.all()
        if paciente_id:
            pacientes = pacientes.filter(pk=paciente_id)
            if not pacientes.exists():
                raise CommandError(f'No existe el paciente {paciente_id}')

        revisados = 0
        descuadrados = 0
        for paciente_pk in pacientes.values_list('pk', flat=True):
            resultado = conciliar_saldo(paciente_pk, aplicar=aplicar)
            revisados += 1
            if not resultado['diferencia']:
                continue

            descuadrados += 1
            mensaje = (
                f"Paciente {paciente_pk}: saldo ${resultado['saldo_actual']}, "
                f"esperado ${resultado['saldo_esperado']} (diferencia ${resultado['diferencia']})"
            )
            if resultado['corregido']:
                self.stdout.write(self.style.SUCCESS(f'{mensaje} -> corregido'))
            else:
                self.stdout.write(self.style.WARNING(mensaje))

        self.stdout.write(f'Pacientes revisados: {revisados:,}')
        if descuadrados == 0:
            self.stdout.write(self.style.SUCCESS('Todos los saldos están conciliados'))
        elif aplicar:
            self.stdout.write(self.style.SUCCESS(f'Saldos corregidos: {descuadrados:,}'))
        else:
            self.stdout.write(
                self.style.WARNING(f'Saldos descuadrados: {descuadrados:,} (usa --aplicar para corregirlos)')
            )
        logger.info(f"Conciliación de saldos: {revisados} revisados, {descuadrados} descuadrados, aplicar={aplicar}")

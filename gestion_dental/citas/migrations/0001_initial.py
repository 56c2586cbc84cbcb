import django.core.serializers.json
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('pacientes', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditoriaLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('usuario_nombre', models.CharField(default='Sistema', max_length=150, verbose_name='Usuario')),
                ('accion', models.CharField(choices=[('crear', 'Crear'), ('actualizar', 'Actualizar'), ('eliminar', 'Eliminar'), ('cambio_estado', 'Cambio de Estado'), ('pago', 'Pago'), ('ajuste_saldo', 'Ajuste de Saldo'), ('otro', 'Otro')], max_length=20, verbose_name='Acción')),
                ('modulo', models.CharField(choices=[('presupuestos', 'Presupuestos'), ('pacientes', 'Pacientes'), ('citas', 'Citas'), ('consultas', 'Consultas'), ('sistema', 'Sistema'), ('otro', 'Otro')], max_length=20, verbose_name='Módulo')),
                ('descripcion', models.CharField(max_length=500, verbose_name='Descripción')),
                ('detalles', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder, verbose_name='Detalles Adicionales')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True, verbose_name='Dirección IP')),
                ('fecha_hora', models.DateTimeField(auto_now_add=True, verbose_name='Fecha y Hora')),
                ('objeto_id', models.PositiveBigIntegerField(blank=True, null=True, verbose_name='ID del Objeto')),
                ('tipo_objeto', models.CharField(blank=True, default='', max_length=100, verbose_name='Tipo de Objeto')),
            ],
            options={
                'verbose_name': 'Registro de Auditoría',
                'verbose_name_plural': 'Registros de Auditoría',
                'ordering': ['-fecha_hora', '-id'],
                'indexes': [
                    models.Index(fields=['-fecha_hora'], name='auditoria_fecha_idx'),
                    models.Index(fields=['modulo', '-fecha_hora'], name='auditoria_modulo_idx'),
                    models.Index(fields=['tipo_objeto', 'objeto_id'], name='auditoria_objeto_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HorarioClinica',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('dia_semana', models.IntegerField(choices=[(0, 'Lunes'), (1, 'Martes'), (2, 'Miércoles'), (3, 'Jueves'), (4, 'Viernes'), (5, 'Sábado'), (6, 'Domingo')], unique=True, verbose_name='Día de la Semana')),
                ('abierto', models.BooleanField(default=True, verbose_name='Abierto')),
                ('hora_inicio', models.TimeField(verbose_name='Hora de Inicio')),
                ('hora_fin', models.TimeField(verbose_name='Hora de Fin')),
            ],
            options={
                'verbose_name': 'Horario de la Clínica',
                'verbose_name_plural': 'Horarios de la Clínica',
                'ordering': ['dia_semana'],
            },
        ),
        migrations.CreateModel(
            name='Cita',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha_hora', models.DateTimeField(verbose_name='Fecha y Hora')),
                ('duracion', models.PositiveIntegerField(default=30, verbose_name='Duración (minutos)')),
                ('paciente_nombre', models.CharField(blank=True, default='', max_length=150)),
                ('paciente_telefono', models.CharField(blank=True, default='', max_length=20)),
                ('dentista', models.CharField(blank=True, default='', max_length=150, verbose_name='Dentista')),
                ('sillon', models.CharField(blank=True, default='', max_length=50, verbose_name='Sillón / Box')),
                ('motivo', models.CharField(default='Consulta General', max_length=200, verbose_name='Motivo')),
                ('notas', models.TextField(blank=True, default='')),
                ('estado', models.CharField(choices=[('programada', 'Programada'), ('confirmada', 'Confirmada'), ('completada', 'Completada'), ('cancelada', 'Cancelada'), ('no_show', 'No Llegó')], default='programada', max_length=20, verbose_name='Estado')),
                ('origen', models.CharField(default='manual', max_length=30, verbose_name='Origen')),
                ('fecha_completada', models.DateTimeField(blank=True, null=True, verbose_name='Fecha de Finalización')),
                ('creada_el', models.DateTimeField(auto_now_add=True)),
                ('actualizada_el', models.DateTimeField(auto_now=True)),
                ('paciente', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='citas', to='pacientes.paciente', verbose_name='Paciente')),
            ],
            options={
                'verbose_name': 'Cita',
                'verbose_name_plural': 'Citas',
                'ordering': ['fecha_hora'],
                'indexes': [models.Index(fields=['fecha_hora'], name='cita_fecha_hora_idx')],
            },
        ),
    ]

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('pacientes', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Periodontograma',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('datos', models.JSONField(blank=True, default=dict, verbose_name='Mediciones')),
                ('fecha_examen', models.DateField(default=django.utils.timezone.localdate, verbose_name='Fecha del Examen')),
                ('observaciones', models.TextField(blank=True, default='', verbose_name='Observaciones')),
                ('creado_el', models.DateTimeField(auto_now_add=True, verbose_name='Fecha de Creación')),
                ('actualizado_el', models.DateTimeField(auto_now=True, verbose_name='Fecha de Actualización')),
                ('paciente', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='periodontograma', to='pacientes.paciente', verbose_name='Paciente')),
            ],
            options={
                'verbose_name': 'Periodontograma',
                'verbose_name_plural': 'Periodontogramas',
                'ordering': ['-actualizado_el'],
            },
        ),
    ]

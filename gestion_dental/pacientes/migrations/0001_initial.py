from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Paciente',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100, verbose_name='Nombre')),
                ('apellido', models.CharField(blank=True, default='', max_length=100, verbose_name='Apellido')),
                ('dni', models.CharField(blank=True, help_text='Documento de identidad (opcional pero recomendado)', max_length=20, null=True, unique=True, verbose_name='DNI')),
                ('email', models.EmailField(blank=True, max_length=254, null=True, verbose_name='Email')),
                ('telefono', models.CharField(blank=True, default='', max_length=20, verbose_name='Teléfono')),
                ('fecha_nacimiento', models.DateField(blank=True, null=True, verbose_name='Fecha de Nacimiento')),
                ('alergias', models.TextField(blank=True, default='', help_text='Lista de alergias conocidas (medicamentos, materiales dentales, anestesia, etc.)', verbose_name='Alergias')),
                ('antecedentes_patologicos', models.TextField(blank=True, default='', verbose_name='Antecedentes Patológicos')),
                ('antecedentes_no_patologicos', models.TextField(blank=True, default='', verbose_name='Antecedentes No Patológicos')),
                ('saldo', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, verbose_name='Saldo Pendiente')),
                ('ultima_visita', models.DateTimeField(blank=True, null=True, verbose_name='Última Visita')),
                ('fecha_registro', models.DateTimeField(auto_now_add=True)),
                ('activo', models.BooleanField(default=True)),
                ('notas', models.TextField(blank=True, default='')),
            ],
            options={
                'verbose_name': 'Paciente',
                'verbose_name_plural': 'Pacientes',
                'ordering': ['apellido', 'nombre'],
            },
        ),
    ]

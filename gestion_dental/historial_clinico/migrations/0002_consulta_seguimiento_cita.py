import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('citas', '0001_initial'),
        ('historial_clinico', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='consulta',
            name='consulta_origen',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='seguimientos', to='historial_clinico.consulta', verbose_name='Consulta de Origen'),
        ),
        migrations.AddField(
            model_name='consulta',
            name='cita',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='consultas', to='citas.cita', verbose_name='Cita'),
        ),
    ]

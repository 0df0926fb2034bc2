import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Supply',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('name', models.CharField(max_length=100, verbose_name='Supply Name')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('quantity_available', models.PositiveIntegerField(default=0, verbose_name='Quantity Available')),
                ('unit', models.CharField(help_text='e.g. pieces, boxes, reams', max_length=20, verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Supply',
                'verbose_name_plural': 'Supplies',
                'ordering': ['name'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity_available__gte', 0)), name='supply_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SupplyDistribution',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='Quantity')),
                ('distribution_date', models.DateField(db_index=True, verbose_name='Distribution Date')),
                ('distributed_by_id', models.CharField(blank=True, max_length=50, null=True, verbose_name='Distributed By ID')),
                ('notes', models.TextField(blank=True, verbose_name='Notes')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='supply_distributions', to='students.student', verbose_name='Student')),
                ('supply', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='distributions', to='supplies.supply', verbose_name='Supply')),
            ],
            options={
                'verbose_name': 'Supply Distribution',
                'verbose_name_plural': 'Supply Distributions',
                'ordering': ['-distribution_date', '-created_at'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='distribution_quantity_positive'),
                ],
            },
        ),
    ]

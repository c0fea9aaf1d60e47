from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Property',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('address', models.TextField()),
                ('floor_capacity', models.PositiveIntegerField(default=0, help_text='Maximum floors (0 = unlimited)')),
                ('room_capacity', models.PositiveIntegerField(default=0, help_text='Maximum rooms (0 = unlimited)')),
                ('bed_capacity', models.PositiveIntegerField(default=0, help_text='Maximum beds (0 = unlimited)')),
                ('monthly_rent', models.DecimalField(decimal_places=2, default=0, help_text='Default monthly rent per bed', max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('security_deposit', models.DecimalField(decimal_places=2, default=0, help_text='Default security deposit', max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='properties', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Property',
                'verbose_name_plural': 'Properties',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['owner', 'name'], name='property_owner_name_idx'),
                    models.Index(fields=['owner', 'status'], name='property_owner_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Floor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="e.g., 'Ground Floor'", max_length=100)),
                ('floor_number', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='floors', to='properties.property')),
            ],
            options={
                'verbose_name': 'Floor',
                'verbose_name_plural': 'Floors',
                'ordering': ['floor_number', 'name'],
                'indexes': [
                    models.Index(fields=['property', 'floor_number'], name='floor_property_number_idx'),
                ],
                'unique_together': {('property', 'name')},
            },
        ),
    ]

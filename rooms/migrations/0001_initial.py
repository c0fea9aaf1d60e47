import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('properties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Room',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('room_number', models.CharField(help_text="e.g., '101', 'A1'", max_length=20)),
                ('room_type', models.CharField(blank=True, help_text="e.g., 'Double Sharing', 'AC Single'", max_length=50)),
                ('capacity', models.PositiveIntegerField(default=0, help_text='Maximum beds (0 = unlimited)')),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('floor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rooms', to='properties.floor')),
            ],
            options={
                'verbose_name': 'Room',
                'verbose_name_plural': 'Rooms',
                'ordering': ['room_number'],
                'indexes': [
                    models.Index(fields=['floor'], name='room_floor_idx'),
                ],
                'unique_together': {('floor', 'room_number')},
            },
        ),
        migrations.CreateModel(
            name='Bed',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bed_number', models.CharField(help_text="e.g., 'A', '1'", max_length=10)),
                ('bed_type', models.CharField(blank=True, help_text="e.g., 'Single', 'Bunk - Lower'", max_length=50)),
                ('rent', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('deposit', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=[('AVAILABLE', 'Available'), ('OCCUPIED', 'Occupied'), ('MAINTENANCE', 'Maintenance')], default='AVAILABLE', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='beds', to='rooms.room')),
            ],
            options={
                'verbose_name': 'Bed',
                'verbose_name_plural': 'Beds',
                'ordering': ['room__room_number', 'bed_number'],
                'indexes': [
                    models.Index(fields=['room', 'status'], name='bed_room_status_idx'),
                    models.Index(fields=['status'], name='bed_status_idx'),
                ],
                'unique_together': {('room', 'bed_number')},
            },
        ),
    ]

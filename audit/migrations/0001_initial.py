from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('property_id', models.IntegerField(blank=True, db_index=True, help_text='Property the action belongs to', null=True)),
                ('action', models.CharField(choices=[('CREATE', 'Create'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('ASSIGN_BED', 'Assign Bed'), ('RELOCATE', 'Relocate'), ('VACATE', 'Vacate'), ('STATUS_CHANGE', 'Status Change'), ('PAYMENT', 'Payment')], db_index=True, max_length=20)),
                ('resource_type', models.CharField(choices=[('Property', 'Property'), ('Floor', 'Floor'), ('Room', 'Room'), ('Bed', 'Bed'), ('Tenant', 'Tenant'), ('Payment', 'Payment')], db_index=True, max_length=50)),
                ('resource_id', models.CharField(blank=True, help_text='ID of the resource affected', max_length=50)),
                ('description', models.TextField(help_text='Human-readable description of the action')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict, help_text='Additional context data')),
                ('timestamp', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('user', models.ForeignKey(blank=True, help_text='User who performed the action', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'ordering': ['-timestamp', '-id'],
                'indexes': [
                    models.Index(fields=['property_id', '-timestamp'], name='audit_property_time_idx'),
                    models.Index(fields=['resource_type', 'resource_id'], name='audit_resource_idx'),
                ],
            },
        ),
    ]

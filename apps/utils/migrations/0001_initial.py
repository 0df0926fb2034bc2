from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.CharField(blank=True, db_index=True, help_text='ID of user who performed this action', max_length=50, null=True, verbose_name='User ID')),
                ('action', models.CharField(choices=[('fee_created', 'Fee Created'), ('fee_updated', 'Fee Updated'), ('fee_deleted', 'Fee Deleted'), ('fee_assigned', 'Fee Assigned'), ('payment_recorded', 'Payment Recorded'), ('ledger_reconciled', 'Ledger Reconciled'), ('supply_created', 'Supply Created'), ('supply_updated', 'Supply Updated'), ('supply_deleted', 'Supply Deleted'), ('supply_distributed', 'Supply Distributed'), ('student_created', 'Student Created'), ('student_updated', 'Student Updated'), ('student_deleted', 'Student Deleted')], db_index=True, max_length=50, verbose_name='Action')),
                ('details', models.TextField(blank=True, verbose_name='Details')),
                ('content_type', models.CharField(blank=True, db_index=True, max_length=100, verbose_name='Model Type')),
                ('object_id', models.CharField(blank=True, max_length=100, verbose_name='Object ID')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True, verbose_name='IP Address')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created At')),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['content_type', 'object_id'], name='audit_target_idx'),
                    models.Index(fields=['user_id', 'created_at'], name='audit_user_time_idx'),
                ],
            },
        ),
    ]

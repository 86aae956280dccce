import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import backend.apps.accounts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('email', models.EmailField(db_index=True, max_length=254, unique=True, verbose_name='email address')),
                ('name', models.CharField(blank=True, max_length=150, verbose_name='name')),
                ('role', models.CharField(choices=[('USER', 'User'), ('ADMIN', 'Admin'), ('AGENT', 'Agent')], db_index=True, default='USER', max_length=20)),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('is_staff', models.BooleanField(default=False, verbose_name='staff status')),
                ('is_verified', models.BooleanField(default=False, verbose_name='verified')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'ordering': ['-date_joined'],
                'indexes': [
                    models.Index(fields=['role', 'is_active'], name='user_role_active_idx'),
                    models.Index(fields=['date_joined'], name='user_date_joined_idx'),
                ],
            },
            managers=[
                ('objects', backend.apps.accounts.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='ActivityLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('create_order', 'Order created'), ('confirm_payment', 'Payment confirmed by buyer'), ('verify_order', 'Order verified'), ('reject_order', 'Order rejected'), ('create_credential', 'Credential created'), ('update_credential', 'Credential updated'), ('delete_credential', 'Credential deleted'), ('create_plan', 'Plan created'), ('update_plan', 'Plan updated'), ('delete_plan', 'Plan deleted'), ('create_payment_method', 'Payment method created'), ('update_payment_method', 'Payment method updated'), ('delete_payment_method', 'Payment method deleted'), ('create_payment_widget', 'Payment widget created'), ('update_payment_widget', 'Payment widget updated'), ('delete_payment_widget', 'Payment widget deleted'), ('update_user_role', 'User role updated'), ('delete_user', 'User deleted'), ('guest_checkout', 'Guest checkout')], max_length=50, verbose_name='action')),
                ('entity_type', models.CharField(blank=True, max_length=50, verbose_name='entity type')),
                ('entity_id', models.BigIntegerField(blank=True, null=True, verbose_name='entity ID')),
                ('details', models.JSONField(blank=True, default=dict, verbose_name='details')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True, verbose_name='IP address')),
                ('user_agent', models.TextField(blank=True, verbose_name='user agent')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='activity_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'activity log',
                'verbose_name_plural': 'activity logs',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'created_at'], name='activity_user_created_idx'),
                    models.Index(fields=['action', 'created_at'], name='activity_action_created_idx'),
                    models.Index(fields=['entity_type', 'entity_id'], name='activity_entity_idx'),
                ],
            },
        ),
    ]

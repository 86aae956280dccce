import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='IptvCredential',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('connection_number', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(10)], verbose_name='connection number')),
                ('credential_type', models.CharField(choices=[('xtream', 'Xtream Codes'), ('m3u', 'M3U playlist'), ('portal', 'Portal (MAG)'), ('combined', 'Combined')], max_length=20, verbose_name='credential type')),
                ('server_url', models.CharField(blank=True, max_length=500, verbose_name='server URL')),
                ('username', models.CharField(blank=True, max_length=255, verbose_name='username')),
                ('password', models.CharField(blank=True, max_length=255, verbose_name='password')),
                ('m3u_url', models.CharField(blank=True, max_length=1000, verbose_name='M3U URL')),
                ('epg_url', models.CharField(blank=True, max_length=1000, verbose_name='EPG URL')),
                ('portal_url', models.CharField(blank=True, max_length=500, verbose_name='portal URL')),
                ('mac_address', models.CharField(blank=True, max_length=50, verbose_name='MAC address')),
                ('expires_at', models.DateTimeField(blank=True, null=True, verbose_name='expires at')),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='credentials', to='orders.order')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='iptv_credentials', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'IPTV credential',
                'verbose_name_plural': 'IPTV credentials',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'is_active'], name='credential_user_active_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('order', 'connection_number'), name='unique_order_connection_credential'),
                ],
            },
        ),
    ]

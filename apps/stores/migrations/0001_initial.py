import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name_ar', models.CharField(max_length=255, verbose_name='name (Arabic)')),
                ('name_fr', models.CharField(max_length=255, verbose_name='name (French)')),
                ('name_en', models.CharField(max_length=255, verbose_name='name (English)')),
                ('slug', models.SlugField(blank=True, max_length=255, unique=True, verbose_name='slug')),
                ('risk_level', models.CharField(choices=[('normal', 'Normal'), ('high_risk', 'High Risk')], default='normal', max_length=20, verbose_name='risk level')),
                ('icon_key', models.CharField(blank=True, max_length=50, null=True, verbose_name='icon key')),
                ('show_on_home', models.BooleanField(default=True, verbose_name='show on home')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
            ],
            options={
                'verbose_name': 'category',
                'verbose_name_plural': 'categories',
                'ordering': ['name_en'],
            },
        ),
        migrations.CreateModel(
            name='Store',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='name')),
                ('slug', models.SlugField(blank=True, max_length=255, unique=True, verbose_name='slug')),
                ('description', models.TextField(blank=True, null=True, verbose_name='description')),
                ('city', models.CharField(blank=True, max_length=100, null=True, verbose_name='city')),
                ('logo', models.ImageField(blank=True, null=True, upload_to='stores/logos/', verbose_name='logo')),
                ('logo_data', models.TextField(blank=True, null=True, verbose_name='logo data')),
                ('status', models.CharField(choices=[('active', 'Active'), ('suspended', 'Suspended')], default='active', max_length=20, verbose_name='status')),
                ('is_verified', models.BooleanField(default=False, verbose_name='verified')),
                ('verified_at', models.DateTimeField(blank=True, null=True, verbose_name='verified at')),
                ('avg_rating_cache', models.DecimalField(decimal_places=2, default=0, max_digits=3, verbose_name='average rating')),
                ('reviews_count_cache', models.PositiveIntegerField(default=0, verbose_name='reviews count')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('categories', models.ManyToManyField(blank=True, related_name='stores', to='stores.category')),
                ('submitted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submitted_stores', to=settings.AUTH_USER_MODEL)),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verified_stores', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'store',
                'verbose_name_plural': 'stores',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='StoreOwner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('owner', 'Owner'), ('admin', 'Admin')], default='owner', max_length=20, verbose_name='role')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='store_owners', to='stores.store')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='store_ownerships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'store owner',
                'verbose_name_plural': 'store owners',
            },
        ),
        migrations.AddField(
            model_name='store',
            name='owners',
            field=models.ManyToManyField(blank=True, related_name='owned_stores', through='stores.StoreOwner', to=settings.AUTH_USER_MODEL),
        ),
        migrations.AddConstraint(
            model_name='storeowner',
            constraint=models.UniqueConstraint(fields=('store', 'user'), name='unique_store_owner'),
        ),
        migrations.AddIndex(
            model_name='store',
            index=models.Index(fields=['status', 'avg_rating_cache'], name='stores_status_rating_idx'),
        ),
        migrations.AddIndex(
            model_name='store',
            index=models.Index(fields=['status', 'reviews_count_cache'], name='stores_status_count_idx'),
        ),
        migrations.CreateModel(
            name='StoreLink',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('platform', models.CharField(choices=[('website', 'Website'), ('instagram', 'Instagram'), ('facebook', 'Facebook'), ('tiktok', 'TikTok'), ('whatsapp', 'WhatsApp')], db_index=True, max_length=20, verbose_name='platform')),
                ('url', models.CharField(db_index=True, max_length=500, verbose_name='URL')),
                ('handle', models.CharField(blank=True, db_index=True, max_length=100, null=True, verbose_name='handle')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='links', to='stores.store')),
            ],
            options={
                'verbose_name': 'store link',
                'verbose_name_plural': 'store links',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='StoreContact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('whatsapp', models.CharField(blank=True, db_index=True, max_length=20, null=True, verbose_name='WhatsApp')),
                ('phone', models.CharField(blank=True, db_index=True, max_length=20, null=True, verbose_name='phone')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('store', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='contacts', to='stores.store')),
            ],
            options={
                'verbose_name': 'store contact',
                'verbose_name_plural': 'store contacts',
            },
        ),
        migrations.CreateModel(
            name='StoreClaimRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('requester_name', models.CharField(max_length=255, verbose_name='requester name')),
                ('requester_phone', models.CharField(max_length=20, verbose_name='requester phone')),
                ('note', models.TextField(blank=True, null=True, verbose_name='note')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='pending', max_length=20, verbose_name='status')),
                ('handled_at', models.DateTimeField(blank=True, null=True, verbose_name='handled at')),
                ('reject_reason', models.TextField(blank=True, null=True, verbose_name='reject reason')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('handled_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='handled_claims', to=settings.AUTH_USER_MODEL)),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='claim_requests', to='stores.store')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='claim_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'store claim request',
                'verbose_name_plural': 'store claim requests',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='storeclaimrequest',
            constraint=models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('store', 'user'), name='unique_pending_claim'),
        ),
    ]

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Banner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255, verbose_name='title')),
                ('title_ar', models.CharField(blank=True, max_length=255, null=True, verbose_name='title (Arabic)')),
                ('title_fr', models.CharField(blank=True, max_length=255, null=True, verbose_name='title (French)')),
                ('subtitle', models.CharField(blank=True, max_length=255, null=True, verbose_name='subtitle')),
                ('subtitle_ar', models.CharField(blank=True, max_length=255, null=True, verbose_name='subtitle (Arabic)')),
                ('subtitle_fr', models.CharField(blank=True, max_length=255, null=True, verbose_name='subtitle (French)')),
                ('image_url', models.CharField(blank=True, help_text='Absolute URL or storage path', max_length=500, verbose_name='image URL')),
                ('image_data', models.TextField(blank=True, help_text='Base64 data URL', verbose_name='image data')),
                ('link_type', models.CharField(choices=[('none', 'None'), ('store', 'Store'), ('category', 'Category'), ('url', 'URL')], default='none', max_length=20, verbose_name='link type')),
                ('link_value', models.CharField(blank=True, help_text='Store slug, category slug or URL', max_length=500, null=True, verbose_name='link value')),
                ('background_color', models.CharField(default='#22C55E', max_length=20, verbose_name='background color')),
                ('sort_order', models.IntegerField(default=0, verbose_name='sort order')),
                ('is_active', models.BooleanField(default=True, help_text='Inactive banners are not displayed', verbose_name='active')),
                ('starts_at', models.DateTimeField(blank=True, null=True, verbose_name='starts at')),
                ('ends_at', models.DateTimeField(blank=True, help_text='Leave blank for no expiration', null=True, verbose_name='ends at')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
            ],
            options={
                'verbose_name': 'banner',
                'verbose_name_plural': 'banners',
                'ordering': ['sort_order', '-created_at'],
                'indexes': [models.Index(fields=['is_active', 'sort_order'], name='common_bann_is_acti_idx')],
            },
        ),
    ]

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=32, unique=True)),
                ('company_name', models.CharField(max_length=255)),
                ('tier', models.CharField(choices=[('REGULAR', 'Regular'), ('VIP', 'VIP')], default='REGULAR', max_length=10)),
                ('contact_name', models.CharField(blank=True, default='', max_length=255)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('phone', models.CharField(blank=True, default='', max_length=64)),
                ('address', models.TextField(blank=True, default='')),
                ('notes', models.TextField(blank=True, default='')),
            ],
            options={
                'ordering': ['company_name'],
            },
        ),
        migrations.CreateModel(
            name='Vendor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, unique=True)),
                ('tier', models.CharField(choices=[('STANDARD', 'Standard'), ('PREMIUM', 'Premium')], default='STANDARD', max_length=10)),
                ('capabilities', models.JSONField(blank=True, default=list)),
                ('lanes', models.JSONField(blank=True, default=list)),
                ('api_ready', models.BooleanField(default=False)),
                ('contract_expiry', models.DateField(blank=True, null=True)),
                ('contact_name', models.CharField(blank=True, default='', max_length=255)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('phone', models.CharField(blank=True, default='', max_length=64)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
    ]

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('waste_requests', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CollectionRecord',
            fields=[
                ('collection_id', models.AutoField(primary_key=True, serialize=False)),
                ('total_weight_kg', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=14)),
                ('total_price', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=20)),
                ('collected_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('collector', models.ForeignKey(limit_choices_to={'role': 'collector'}, on_delete=django.db.models.deletion.PROTECT, related_name='collections_made', to=settings.AUTH_USER_MODEL)),
                ('resident', models.ForeignKey(limit_choices_to={'role': 'resident'}, on_delete=django.db.models.deletion.PROTECT, related_name='collections', to=settings.AUTH_USER_MODEL)),
                ('source_request', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='collection_record', to='waste_requests.wasterequest')),
            ],
            options={
                'ordering': ['-collected_at', '-collection_id'],
                'indexes': [
                    models.Index(fields=['resident', 'collected_at'], name='coll_resident_collected_idx'),
                    models.Index(fields=['collector', '-collected_at'], name='coll_collector_collected_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CollectionItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('category', models.CharField(choices=[('food', 'Food Waste'), ('cardboard', 'Cardboard'), ('polythene', 'Polythene'), ('plastic', 'Plastic'), ('glass', 'Glass'), ('metal', 'Metal'), ('paper', 'Paper'), ('organic', 'Organic')], max_length=20)),
                ('weight_kg', models.DecimalField(decimal_places=3, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('rate_per_kg', models.DecimalField(decimal_places=2, max_digits=10)),
                ('line_total', models.DecimalField(decimal_places=5, editable=False, max_digits=18)),
                ('position', models.PositiveIntegerField(default=0)),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='collection_management.collectionrecord')),
            ],
            options={
                'ordering': ['position', 'id'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['category'], name='collitem_category_idx'),
                ],
            },
        ),
    ]

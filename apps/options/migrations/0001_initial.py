from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


OPTION_TYPE_CHOICES = [
    ('text', 'Text'),
    ('number', 'Number'),
    ('dropdown', 'Dropdown'),
    ('dropdown_thumbnail', 'Dropdown with thumbnails'),
    ('radio', 'Radio buttons'),
]

HISTORY_TYPE_CHOICES = [('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='OptionSet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('shop', models.CharField(db_index=True, help_text='Shop domain, e.g. example.myshopify.com', max_length=255, verbose_name='Shop')),
                ('active', models.BooleanField(default=True, verbose_name='Active')),
                ('apply_to_all', models.BooleanField(default=True, verbose_name='Apply to all products')),
                ('product_tags', models.TextField(blank=True, help_text='Comma separated tags; used when "apply to all products" is off', verbose_name='Product tags')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
            ],
            options={
                'verbose_name': 'Option Set',
                'verbose_name_plural': 'Option Sets',
                'ordering': ['shop', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Option',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Label shown to customers and key of the cart line property', max_length=255, verbose_name='Name')),
                ('type', models.CharField(choices=OPTION_TYPE_CHOICES, default='text', max_length=32, verbose_name='Type')),
                ('required', models.BooleanField(default=False, verbose_name='Required')),
                ('values', models.JSONField(blank=True, default=list, verbose_name='Values')),
                ('price', models.DecimalField(blank=True, decimal_places=2, help_text='Flat surcharge for text, number and dropdown options', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Price')),
                ('show_when_value', models.CharField(blank=True, help_text='Label of the radio value that must be selected', max_length=255, verbose_name='Show when value')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
                ('depend_on', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='dependents', to='options.option', verbose_name='Depends on')),
                ('option_set', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='options', to='options.optionset', verbose_name='Option set')),
            ],
            options={
                'verbose_name': 'Option',
                'verbose_name_plural': 'Options',
                'ordering': ['position', 'id'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalOptionSet',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('shop', models.CharField(db_index=True, help_text='Shop domain, e.g. example.myshopify.com', max_length=255, verbose_name='Shop')),
                ('active', models.BooleanField(default=True, verbose_name='Active')),
                ('apply_to_all', models.BooleanField(default=True, verbose_name='Apply to all products')),
                ('product_tags', models.TextField(blank=True, help_text='Comma separated tags; used when "apply to all products" is off', verbose_name='Product tags')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=HISTORY_TYPE_CHOICES, max_length=1)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Option Set',
                'verbose_name_plural': 'historical Option Sets',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalOption',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(help_text='Label shown to customers and key of the cart line property', max_length=255, verbose_name='Name')),
                ('type', models.CharField(choices=OPTION_TYPE_CHOICES, default='text', max_length=32, verbose_name='Type')),
                ('required', models.BooleanField(default=False, verbose_name='Required')),
                ('values', models.JSONField(blank=True, default=list, verbose_name='Values')),
                ('price', models.DecimalField(blank=True, decimal_places=2, help_text='Flat surcharge for text, number and dropdown options', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Price')),
                ('show_when_value', models.CharField(blank=True, help_text='Label of the radio value that must be selected', max_length=255, verbose_name='Show when value')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=HISTORY_TYPE_CHOICES, max_length=1)),
                ('depend_on', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='options.option', verbose_name='Depends on')),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('option_set', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='options.optionset', verbose_name='Option set')),
            ],
            options={
                'verbose_name': 'historical Option',
                'verbose_name_plural': 'historical Options',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]

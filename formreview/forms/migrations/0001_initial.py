# pylint: skip-file


from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import simple_history.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('organizations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Form',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('open', 'Open'), ('closed', 'Closed'), ('archived', 'Archived')], db_index=True, default='draft', max_length=20)),
                ('min_reviews_required', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('visibility_mode', models.CharField(choices=[('REVEAL_AFTER_ME_SUBMIT', 'After I submit my review'), ('REVEAL_AFTER_MIN_REVIEWS', 'After the minimum number of reviews'), ('NEVER', 'Never'), ('AVERAGES_ONLY_UNTIL_LOCK', 'Averages only until locked')], default='REVEAL_AFTER_ME_SUBMIT', max_length=32)),
                ('visibility_threshold', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='forms', to='organizations.organization')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'unique_together': {('organization', 'slug')},
            },
        ),
        migrations.CreateModel(
            name='HistoricalForm',
            fields=[
                ('id', models.IntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('open', 'Open'), ('closed', 'Closed'), ('archived', 'Archived')], db_index=True, default='draft', max_length=20)),
                ('min_reviews_required', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('visibility_mode', models.CharField(choices=[('REVEAL_AFTER_ME_SUBMIT', 'After I submit my review'), ('REVEAL_AFTER_MIN_REVIEWS', 'After the minimum number of reviews'), ('NEVER', 'Never'), ('AVERAGES_ONLY_UNTIL_LOCK', 'Averages only until locked')], default='REVEAL_AFTER_ME_SUBMIT', max_length=32)),
                ('visibility_threshold', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField()),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='organizations.organization')),
            ],
            options={
                'verbose_name': 'historical form',
                'verbose_name_plural': 'historical forms',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='FormVersion',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('version', models.PositiveIntegerField()),
                ('schema', models.JSONField(default=dict)),
                ('published_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True, default='')),
                ('form', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='versions', to='forms.form')),
            ],
            options={
                'ordering': ['form', '-version'],
                'unique_together': {('form', 'version')},
            },
        ),
        migrations.CreateModel(
            name='RubricVersion',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('version', models.PositiveIntegerField()),
                ('scale_min', models.IntegerField(default=1)),
                ('scale_max', models.IntegerField(default=5)),
                ('scale_step', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('published_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('form', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rubric_versions', to='forms.form')),
            ],
            options={
                'ordering': ['form', '-version'],
                'unique_together': {('form', 'version')},
            },
        ),
        migrations.CreateModel(
            name='RubricQuestion',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('question_id', models.CharField(max_length=100)),
                ('label', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('weight', models.DecimalField(decimal_places=4, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(1)])),
                ('required', models.BooleanField(default=True)),
                ('order_num', models.PositiveIntegerField()),
                ('rubric_version', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='forms.rubricversion')),
            ],
            options={
                'ordering': ['rubric_version', 'order_num'],
                'unique_together': {('rubric_version', 'question_id')},
            },
        ),
    ]

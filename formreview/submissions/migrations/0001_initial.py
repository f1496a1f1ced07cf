# pylint: skip-file


from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import model_utils.fields
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('organizations', '0001_initial'),
        ('forms', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', model_utils.fields.StatusField(choices=[('ungraded', 'ungraded'), ('partially_graded', 'partially_graded'), ('fully_graded', 'fully_graded')], default='ungraded', max_length=100, no_check_for_status=True, verbose_name='status')),
                ('status_changed', model_utils.fields.MonitorField(default=django.utils.timezone.now, monitor='status', verbose_name='status changed')),
                ('uuid', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, unique=True)),
                ('submitter_email', models.EmailField(db_index=True, max_length=254)),
                ('data', models.JSONField(default=dict)),
                ('submitted_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='organizations.organization')),
                ('form', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='forms.form')),
                ('form_version', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='submissions', to='forms.formversion')),
                ('rubric_version', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='submissions', to='forms.rubricversion')),
            ],
            options={
                'ordering': ['-submitted_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='SubmissionAggregate',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reviews_count', models.PositiveIntegerField(default=0)),
                ('composite_score', models.DecimalField(blank=True, decimal_places=4, max_digits=12, null=True)),
                ('last_review_at', models.DateTimeField(blank=True, null=True)),
                ('submission', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='aggregate', to='submissions.submission')),
            ],
        ),
    ]

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='School',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('district', models.CharField(max_length=200)),
                ('contact_name', models.CharField(max_length=100)),
                ('contact_email', models.EmailField(max_length=255)),
                ('contact_phone', models.CharField(blank=True, max_length=20)),
                ('short_code', models.CharField(max_length=10, unique=True)),
            ],
            options={
                'ordering': ('name',),
            },
        ),
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120)),
                ('kind', models.CharField(choices=[('TRACK', 'Track'), ('FIELD', 'Field')], max_length=5)),
                ('gender', models.CharField(choices=[('MALE', 'Male'), ('FEMALE', 'Female')], max_length=6)),
                ('category', models.CharField(choices=[('U14', 'Under 14'), ('U17', 'Under 17'), ('U19', 'Under 19')], max_length=3)),
                ('date', models.DateField()),
                ('start_time', models.TimeField()),
                ('venue', models.CharField(blank=True, max_length=120)),
                ('rules', models.JSONField(blank=True, default=dict)),
            ],
            options={
                'ordering': ('pk',),
                'constraints': [
                    models.UniqueConstraint(fields=('name', 'gender', 'category'), name='unique_event_per_division'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Athlete',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('age', models.PositiveIntegerField()),
                ('gender', models.CharField(choices=[('MALE', 'Male'), ('FEMALE', 'Female')], max_length=6)),
                ('category', models.CharField(choices=[('U14', 'Under 14'), ('U17', 'Under 17'), ('U19', 'Under 19')], max_length=3)),
                ('personal_best', models.CharField(blank=True, max_length=32)),
                ('bib_number', models.CharField(max_length=32, unique=True)),
                ('school', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='athletes', to='athletics.school')),
            ],
            options={
                'ordering': ('pk',),
                'constraints': [
                    models.UniqueConstraint(fields=('name', 'age', 'school'), name='unique_athlete_per_school'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Registration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('athlete', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='athletics.athlete')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='athletics.event')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('athlete', 'event'), name='unique_registration'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Heat',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('heat_number', models.PositiveIntegerField()),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='heats', to='athletics.event')),
            ],
            options={
                'ordering': ('event', 'heat_number'),
                'constraints': [
                    models.UniqueConstraint(fields=('event', 'heat_number'), name='unique_heat_number'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Lane',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lane_number', models.PositiveIntegerField()),
                ('athlete', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lanes', to='athletics.athlete')),
                ('heat', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lanes', to='athletics.heat')),
            ],
            options={
                'ordering': ('heat', 'lane_number'),
                'constraints': [
                    models.UniqueConstraint(fields=('heat', 'lane_number'), name='unique_lane_number'),
                    models.UniqueConstraint(fields=('heat', 'athlete'), name='unique_athlete_per_heat'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Result',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('FINISHED', 'Finished'), ('DNS', 'Did Not Start'), ('DNF', 'Did Not Finish'), ('DQ', 'Disqualified')], max_length=8)),
                ('result_value', models.CharField(blank=True, max_length=32, null=True)),
                ('rank', models.PositiveIntegerField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('athlete', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='athletics.athlete')),
                ('heat', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='athletics.heat')),
            ],
            options={
                'ordering': ('heat', models.OrderBy(models.F('rank'), nulls_last=True), 'pk'),
                'constraints': [
                    models.UniqueConstraint(fields=('heat', 'athlete'), name='unique_result_per_heat'),
                ],
            },
        ),
    ]

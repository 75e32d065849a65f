import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Schedule",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("event_id", models.CharField(max_length=255)),
                ("current_version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["event_id", "created_at"], name="scheduling__event_i_5c1f0e_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="RegisteredAthlete",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("event_id", models.CharField(max_length=255)),
                ("athlete_id", models.CharField(max_length=255)),
                ("name", models.CharField(blank=True, max_length=255)),
                ("category_id", models.CharField(max_length=255)),
                ("category_name", models.CharField(blank=True, max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending_payment", "Pending Payment"), ("ready", "Ready")],
                        default="ready",
                        max_length=20,
                    ),
                ),
                ("registered_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["registered_at", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("event_id", "athlete_id"), name="unique_event_athlete"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ScheduleVersion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("version", models.PositiveIntegerField()),
                ("snapshot", models.JSONField()),
                ("change_type", models.CharField(max_length=50)),
                ("created_by", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField()),
                (
                    "schedule",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="versions",
                        to="scheduling.schedule",
                    ),
                ),
            ],
            options={
                "ordering": ["version"],
                "constraints": [
                    models.UniqueConstraint(fields=("schedule", "version"), name="unique_schedule_version"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLogEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sequence_number", models.PositiveIntegerField()),
                ("timestamp", models.DateTimeField()),
                ("user_id", models.CharField(max_length=255)),
                ("change_type", models.CharField(max_length=50)),
                ("before_version", models.PositiveIntegerField(blank=True, null=True)),
                ("after_version", models.PositiveIntegerField()),
                ("details", models.JSONField(blank=True, default=dict)),
                (
                    "schedule",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="audit_entries",
                        to="scheduling.schedule",
                    ),
                ),
            ],
            options={
                "ordering": ["sequence_number"],
                "indexes": [
                    models.Index(fields=["schedule", "timestamp"], name="scheduling__schedul_8a2d41_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("schedule", "sequence_number"), name="unique_audit_sequence"
                    ),
                ],
            },
        ),
    ]

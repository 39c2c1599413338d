from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="TrackingEventRecord",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("tracking_number", models.CharField(max_length=128)),
                ("provider", models.CharField(max_length=40)),
                ("status", models.CharField(blank=True, max_length=80)),
                ("location", models.CharField(blank=True, max_length=200)),
                ("description", models.TextField(blank=True)),
                ("event_time", models.DateTimeField()),
                ("raw_payload", models.JSONField(blank=True, null=True)),
                ("received_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ("received_at", "id"),
                "indexes": [
                    models.Index(
                        fields=["tracking_number", "received_at"],
                        name="tracking_tr_trackin_5c21e0_idx",
                    ),
                    models.Index(
                        fields=["provider", "event_time"],
                        name="tracking_tr_provide_9a4f13_idx",
                    ),
                ],
            },
        ),
    ]

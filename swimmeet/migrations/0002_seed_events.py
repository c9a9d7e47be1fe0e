from django.db import migrations

CATALOG = [
    # name, full name, type, distance, stroke
    ("200 Medley Relay", "200 Yard Medley Relay", "relay", 200, "Medley"),
    ("800 Free Relay", "800 Yard Freestyle Relay", "relay", 800, "Free"),
    ("500 Free", "500 Yard Freestyle", "individual", 500, "Free"),
    ("200 IM", "200 Yard Individual Medley", "individual", 200, "IM"),
    ("50 Free", "50 Yard Freestyle", "individual", 50, "Free"),
    ("1M Diving", "1 Meter Diving", "diving", None, ""),
    ("200 Free Relay", "200 Yard Freestyle Relay", "relay", 200, "Free"),
    ("1000 Free", "1000 Yard Freestyle", "individual", 1000, "Free"),
    ("100 Fly", "100 Yard Butterfly", "individual", 100, "Fly"),
    ("400 IM", "400 Yard Individual Medley", "individual", 400, "IM"),
    ("200 Free", "200 Yard Freestyle", "individual", 200, "Free"),
    ("100 Breast", "100 Yard Breaststroke", "individual", 100, "Breast"),
    ("100 Back", "100 Yard Backstroke", "individual", 100, "Back"),
    ("400 Medley Relay", "400 Yard Medley Relay", "relay", 400, "Medley"),
    ("1650 Free", "1650 Yard Freestyle", "individual", 1650, "Free"),
    ("200 Back", "200 Yard Backstroke", "individual", 200, "Back"),
    ("100 Free", "100 Yard Freestyle", "individual", 100, "Free"),
    ("200 Breast", "200 Yard Breaststroke", "individual", 200, "Breast"),
    ("200 Fly", "200 Yard Butterfly", "individual", 200, "Fly"),
    ("3M Diving", "3 Meter Diving", "diving", None, ""),
    ("400 Free Relay", "400 Yard Freestyle Relay", "relay", 400, "Free"),
    # relay leg distances without a championship event of their own
    ("50 Back", "50 Yard Backstroke", "individual", 50, "Back"),
    ("50 Breast", "50 Yard Breaststroke", "individual", 50, "Breast"),
    ("50 Fly", "50 Yard Butterfly", "individual", 50, "Fly"),
]


def seed_events(apps, schema_editor):
    Event = apps.get_model("swimmeet", "Event")  # historical model, not direct import

    for index, (name, full_name, event_type, distance, stroke) in enumerate(CATALOG, start=1):
        Event.objects.update_or_create(
            name=name,
            defaults=dict(
                full_name=full_name,
                event_type=event_type,
                distance=distance,
                stroke=stroke,
                sort_order=index * 10,
            ),
        )


def unseed_events(apps, schema_editor):
    Event = apps.get_model("swimmeet", "Event")
    Event.objects.filter(name__in=[row[0] for row in CATALOG]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("swimmeet", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_events, reverse_code=unseed_events),
    ]

from rest_framework import serializers

from .models import ViewMode


class ViewModeSerializer(serializers.Serializer):
    view = serializers.ChoiceField(choices=ViewMode.choices, required=False)
    real_results_event_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        allow_empty=True,
    )


class WarningSerializer(serializers.Serializer):
    kind = serializers.CharField()
    message = serializers.CharField()
    record_id = serializers.IntegerField(allow_null=True)


class EventSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    category = serializers.CharField()


class ResultRowSerializer(serializers.Serializer):
    record_id = serializers.IntegerField()
    team_id = serializers.IntegerField()
    team_name = serializers.CharField()
    athlete_id = serializers.IntegerField(allow_null=True)
    athlete_name = serializers.CharField()
    members = serializers.ListField(child=serializers.IntegerField(allow_null=True))
    time = serializers.CharField()
    seconds = serializers.DecimalField(max_digits=8, decimal_places=2, allow_null=True)
    time_source = serializers.CharField()
    variant = serializers.CharField()
    place = serializers.IntegerField(allow_null=True)
    points = serializers.DecimalField(max_digits=7, decimal_places=2)
    scored = serializers.BooleanField()
    counts_for_team = serializers.BooleanField()


class EventResultSerializer(serializers.Serializer):
    event = EventSerializer()
    has_data = serializers.BooleanField()
    rows = ResultRowSerializer(many=True)


class TeamStandingSerializer(serializers.Serializer):
    team_id = serializers.IntegerField()
    team_name = serializers.CharField()
    individual = serializers.DecimalField(max_digits=8, decimal_places=2)
    diving = serializers.DecimalField(max_digits=8, decimal_places=2)
    relay = serializers.DecimalField(max_digits=8, decimal_places=2)
    total = serializers.DecimalField(max_digits=8, decimal_places=2)


class MeetResultsSerializer(serializers.Serializer):
    view_mode = serializers.CharField()
    has_real_results = serializers.BooleanField()
    has_simulated_data = serializers.BooleanField()
    events = EventResultSerializer(many=True)
    standings = TeamStandingSerializer(many=True)
    warnings = WarningSerializer(many=True)


class SensitivityOutcomeSerializer(serializers.Serializer):
    variant = serializers.CharField()
    athlete_points = serializers.DecimalField(max_digits=8, decimal_places=2)
    team_total = serializers.DecimalField(max_digits=8, decimal_places=2)


class AthleteSensitivitySerializer(serializers.Serializer):
    athlete_id = serializers.IntegerField()
    athlete_name = serializers.CharField()
    percent = serializers.DecimalField(max_digits=5, decimal_places=2)
    outcomes = SensitivityOutcomeSerializer(many=True)

from django.urls import path

from .api import MeetResultsView, MeetSimulateView, TeamSensitivityView

app_name = "swimmeet"

urlpatterns = [
    path("meets/<int:pk>/results/", MeetResultsView.as_view(), name="meet-results"),
    path("meets/<int:pk>/simulate/", MeetSimulateView.as_view(), name="meet-simulate"),
    path(
        "meets/<int:pk>/teams/<int:team_id>/sensitivity/",
        TeamSensitivityView.as_view(),
        name="team-sensitivity",
    ),
]

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404

from rest_framework import permissions, status, views
from rest_framework.response import Response

from .exceptions import MalformedConfiguration, MeetComputationError
from .models import Meet
from .serializers import AthleteSensitivitySerializer, MeetResultsSerializer, ViewModeSerializer
from .services import analyze_sensitivity, build_snapshot, compute_meet_results, simulate_meet

logger = logging.getLogger(__name__)


def _configuration_error(meet: Meet, exc: MalformedConfiguration) -> Response:
    logger.warning("Meet %s has malformed configuration: %s", meet.pk, exc)
    return Response(
        {"detail": "Meet configuration could not be read.", "field": exc.field, "error": exc.detail},
        status=status.HTTP_400_BAD_REQUEST,
    )


class MeetResultsView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk, *args, **kwargs):
        meet = get_object_or_404(Meet, pk=pk)
        params = {"view": request.query_params.get("view")} if request.query_params.get("view") else {}
        real_ids = request.query_params.getlist("real_results_event_ids")
        if real_ids:
            params["real_results_event_ids"] = real_ids
        ser = ViewModeSerializer(data=params)
        ser.is_valid(raise_exception=True)

        try:
            results = compute_meet_results(
                build_snapshot(meet),
                ser.validated_data.get("view"),
                ser.validated_data.get("real_results_event_ids"),
            )
        except MalformedConfiguration as exc:
            return _configuration_error(meet, exc)
        return Response(MeetResultsSerializer(results).data, status=status.HTTP_200_OK)


class MeetSimulateView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk, *args, **kwargs):
        meet = get_object_or_404(Meet, pk=pk)
        ser = ViewModeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            results = simulate_meet(meet, ser.validated_data.get("view"))
        except MalformedConfiguration as exc:
            return _configuration_error(meet, exc)
        return Response(MeetResultsSerializer(results).data, status=status.HTTP_200_OK)


class TeamSensitivityView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk, team_id, *args, **kwargs):
        meet = get_object_or_404(Meet, pk=pk)
        params = {"view": request.query_params.get("view")} if request.query_params.get("view") else {}
        ser = ViewModeSerializer(data=params)
        ser.is_valid(raise_exception=True)

        try:
            analysis = analyze_sensitivity(build_snapshot(meet), team_id, ser.validated_data.get("view"))
        except MalformedConfiguration as exc:
            return _configuration_error(meet, exc)
        except MeetComputationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(
            {"team_id": team_id, "athletes": AthleteSensitivitySerializer(analysis, many=True).data},
            status=status.HTTP_200_OK,
        )

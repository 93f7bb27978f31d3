from __future__ import annotations

import logging

from rest_framework import status, views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .serializers import CargoMetricsSerializer, IntakeDataSerializer, PhaseCheckSerializer
from .services.cargo_metrics import metrics_for_intake
from .services.commercial_parameters import get_commercial_parameters
from .services.completeness import score_completeness
from .services.phase_rules import can_advance, next_phase
from .types import JobPhase, coerce_enum

logger = logging.getLogger(__name__)


class CargoMetricsView(views.APIView):
    """Chargeable-weight preview for an intake being edited."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        ser = IntakeDataSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        metrics = metrics_for_intake(ser.to_intake(), get_commercial_parameters())
        return Response(CargoMetricsSerializer(metrics).data, status=status.HTTP_200_OK)


class ReadinessView(views.APIView):
    """Completeness score and phase gate for an intake, without saving anything."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        if not isinstance(request.data, dict):
            return Response({"detail": "Expected a JSON object"}, status=status.HTTP_400_BAD_REQUEST)
        payload = {key: value for key, value in request.data.items() if key != "phase"}
        raw_phase = request.data.get("phase") or JobPhase.DRAFT.value
        phase = coerce_enum(JobPhase, raw_phase)
        if phase is None:
            return Response({"detail": f"Unknown phase '{raw_phase}'"}, status=status.HTTP_400_BAD_REQUEST)

        ser = IntakeDataSerializer(data=payload)
        ser.is_valid(raise_exception=True)
        intake = ser.to_intake()

        check = can_advance(phase, intake)
        following = next_phase(phase)
        return Response(
            {
                "phase": phase.value,
                "next_phase": following.value if following else None,
                "completeness": score_completeness(intake),
                "check": PhaseCheckSerializer(check).data,
            },
            status=status.HTTP_200_OK,
        )

from __future__ import annotations

import logging

from django.db import transaction
from django.shortcuts import get_object_or_404

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cargo.dataclasses import IntakeData
from cargo.serializers import CargoMetricsSerializer, IntakeDataSerializer
from cargo.services.cargo_metrics import metrics_for_intake
from cargo.services.commercial_parameters import get_commercial_parameters

from .models import Job, QuoteVersion, VendorBid
from .reporting import kpis_from_repo
from .repository import DjangoJobRepository
from .serializers import (
    JobCreateSerializer,
    JobKPISerializer,
    JobSerializer,
    QuoteOutcomeSerializer,
    QuoteVersionCreateSerializer,
    QuoteVersionSerializer,
    VendorBidSerializer,
)
from .services import (
    AllocationError,
    ApprovalError,
    BidError,
    InvalidPhaseError,
    PhaseAdvanceError,
    add_quote_version,
    advance_job,
    approve_quote_version,
    award_bid,
    cancel_job,
    create_job,
    mark_quote_sent,
    record_bid,
    record_quote_outcome,
    update_intake,
)

logger = logging.getLogger(__name__)


def _intake_payload(data):
    # Accept either {"intake_data": {...}} or the intake fields at top level
    if isinstance(data, dict) and isinstance(data.get("intake_data"), dict):
        return data["intake_data"]
    return data


# ---- ViewSet for the job envelope ----
class JobViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    queryset = Job.objects.all().prefetch_related('quote_versions', 'vendor_bids')
    serializer_class = JobSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        phase = self.request.query_params.get('phase')
        if phase:
            qs = qs.filter(phase=phase.upper())
        return qs

    def create(self, request, *args, **kwargs):
        ser = JobCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        intake_data = dict(ser.validated_data.get("intake_data") or {})
        if not intake_data.get("modality"):
            intake_data["modality"] = ser.validated_data["modality"]
        intake = IntakeData.from_dict(intake_data)

        try:
            with transaction.atomic():
                job = create_job(DjangoJobRepository(), request.user, intake.modality, intake)
        except AllocationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(JobSerializer(job).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        job = self.get_object()
        partial = kwargs.pop('partial', False)
        payload = _intake_payload(request.data)
        if not isinstance(payload, dict):
            return Response({"detail": "Expected a JSON object"}, status=status.HTTP_400_BAD_REQUEST)
        if partial:
            # Intake is replaced wholesale; merge the patch into the stored record first
            payload = {**job.intake.to_dict(), **payload}
        ser = IntakeDataSerializer(data=payload)
        ser.is_valid(raise_exception=True)

        update_intake(job, ser.to_intake(), DjangoJobRepository(), request.user)
        return Response(JobSerializer(job).data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        job = self.get_object()
        DjangoJobRepository().delete("jobs", job.pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class JobAdvanceView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        job = get_object_or_404(Job, pk=id)
        try:
            with transaction.atomic():
                advance_job(job, DjangoJobRepository(), request.user)
        except PhaseAdvanceError as e:
            return Response(
                {
                    "detail": "Job cannot advance",
                    "errors": e.errors,
                    "issues": [
                        {"kind": i.kind.value, "message": i.message, "line_index": i.line_index}
                        for i in e.issues
                    ],
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(JobSerializer(job).data, status=status.HTTP_200_OK)


class JobCancelView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        job = get_object_or_404(Job, pk=id)
        try:
            cancel_job(job, DjangoJobRepository(), request.user)
        except InvalidPhaseError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(JobSerializer(job).data, status=status.HTTP_200_OK)


class JobMetricsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, id):
        job = get_object_or_404(Job, pk=id)
        metrics = metrics_for_intake(job.intake, get_commercial_parameters())
        return Response(CargoMetricsSerializer(metrics).data, status=status.HTTP_200_OK)


class QuoteVersionCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        job = get_object_or_404(Job, pk=id)
        ser = QuoteVersionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        try:
            with transaction.atomic():
                version = add_quote_version(
                    job,
                    DjangoJobRepository(),
                    data["buy_price"],
                    data["sell_price"],
                    user=request.user,
                    currency=data.get("currency") or None,
                    valid_until=data.get("valid_until"),
                    buy_source=data.get("buy_source", ""),
                )
        except AllocationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(QuoteVersionSerializer(version).data, status=status.HTTP_201_CREATED)


class QuoteVersionApproveView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        version = get_object_or_404(QuoteVersion, pk=id)
        try:
            approve_quote_version(version, DjangoJobRepository(), request.user)
        except ApprovalError as e:
            code = status.HTTP_403_FORBIDDEN if not request.user.is_staff else status.HTTP_400_BAD_REQUEST
            return Response({"detail": str(e)}, status=code)
        return Response(QuoteVersionSerializer(version).data, status=status.HTTP_200_OK)


class QuoteVersionSendView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        version = get_object_or_404(QuoteVersion, pk=id)
        try:
            mark_quote_sent(version, DjangoJobRepository(), request.user)
        except ApprovalError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(QuoteVersionSerializer(version).data, status=status.HTTP_200_OK)


class QuoteVersionOutcomeView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        version = get_object_or_404(QuoteVersion, pk=id)
        ser = QuoteOutcomeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            record_quote_outcome(version, DjangoJobRepository(), ser.validated_data["accepted"], request.user)
        except ApprovalError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(QuoteVersionSerializer(version).data, status=status.HTTP_200_OK)


class VendorBidCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        job = get_object_or_404(Job, pk=id)
        ser = VendorBidSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        fields = dict(ser.validated_data)
        try:
            bid = record_bid(job, DjangoJobRepository(), fields.pop("vendor_name", ""), fields.pop("amount"),
                             user=request.user, **fields)
        except BidError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(VendorBidSerializer(bid).data, status=status.HTTP_201_CREATED)


class VendorBidAwardView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, id):
        bid = get_object_or_404(VendorBid.objects.select_related('job'), pk=id)
        try:
            with transaction.atomic():
                version = award_bid(bid, DjangoJobRepository(), request.user)
        except InvalidPhaseError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except AllocationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(
            {
                "bid": VendorBidSerializer(bid).data,
                "quote_version": QuoteVersionSerializer(version).data,
                "job": JobSerializer(bid.job).data,
            },
            status=status.HTTP_200_OK,
        )


class KPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        kpis = kpis_from_repo(DjangoJobRepository())
        return Response(JobKPISerializer(kpis).data, status=status.HTTP_200_OK)

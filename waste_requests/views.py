from rest_framework import viewsets, mixins, status, filters
from rest_framework.response import Response
from rest_framework.decorators import action
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django_filters.rest_framework import DjangoFilterBackend

from accounts.permissions import IsAdmin, IsCollectorOrAdmin, IsResident, IsResidentOrAdmin
from . import services
from .filters import WasteRequestFilter
from .models import WasteRequest
from .serializers import (
    WasteRequestListSerializer,
    WasteRequestDetailSerializer,
    WasteRequestCreateSerializer,
    AssignCollectorSerializer,
    CompleteRequestSerializer,
    CancelRequestSerializer,
    StatusSummarySerializer,
)

error_response = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "error": openapi.Schema(type=openapi.TYPE_STRING, description="Error kind"),
        "detail": openapi.Schema(type=openapi.TYPE_STRING),
    },
)
error_409 = openapi.Response(
    "Invalid transition",
    error_response,
    examples={"application/json": {
        "error": "invalid_transition",
        "detail": "Cannot complete request #4: status is pending, expected assigned.",
    }},
)
error_404 = openapi.Response("Request or collector not found", error_response)

tag = ['Waste Requests']


class WasteRequestViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.CreateModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    """
    Pickup requests and their lifecycle.

    Status never changes through a generic update; every change is a named
    action below (assign, reassign, complete, cancel, confirm_payment).
    """

    queryset = WasteRequest.objects.select_related('resident', 'collector').prefetch_related('items')
    serializer_class = WasteRequestDetailSerializer
    filterset_class = WasteRequestFilter
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    ordering_fields = ['requested_at', 'total_price', 'request_status']

    def get_serializer_class(self):
        if self.action == 'create':
            return WasteRequestCreateSerializer
        if self.action == 'list':
            return WasteRequestListSerializer
        return WasteRequestDetailSerializer

    def get_permissions(self):
        if self.action == 'create':
            return [IsResident()]
        if self.action == 'destroy':
            return [IsResidentOrAdmin()]
        return super().get_permissions()

    def get_queryset(self):
        user = self.request.user
        qs = super().get_queryset()

        if getattr(user, 'is_admin', False):
            return qs

        if getattr(user, 'is_collector', False):
            return qs.filter(collector=user)

        if getattr(user, 'is_resident', False):
            return qs.filter(resident=user)

        # Default fallback: no access
        return qs.none()

    @swagger_auto_schema(
        tags=tag,
        operation_summary="Create pickup request",
        operation_description="Resident only: request a pickup; each item is priced at the current rate.",
        request_body=WasteRequestCreateSerializer,
        responses={201: WasteRequestDetailSerializer},
    )
    def create(self, request, *args, **kwargs):
        serializer = WasteRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        waste_request = services.create_request(request.user, serializer.validated_data['items'])
        return Response(
            WasteRequestDetailSerializer(waste_request).data,
            status=status.HTTP_201_CREATED,
        )

    @swagger_auto_schema(
        tags=tag,
        operation_summary="Delete completed request",
        operation_description="Only completed requests can be deleted; cancel in-flight requests instead.",
        responses={204: "Deleted", 404: error_404, 409: error_409},
    )
    def destroy(self, request, *args, **kwargs):
        waste_request = self.get_object()
        services.delete_request(request.user, waste_request.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ---------------------------
    # Workflow Actions
    # ---------------------------

    @swagger_auto_schema(
        method='post',
        tags=tag,
        operation_summary="Assign Collector",
        operation_description="Admin only: assign a collector to a pending request.",
        request_body=AssignCollectorSerializer,
        responses={200: WasteRequestDetailSerializer, 404: error_404, 409: error_409},
    )
    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def assign(self, request, pk=None):
        serializer = AssignCollectorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        waste_request = services.assign_collector(request.user, pk, serializer.validated_data['collector'])
        return Response(WasteRequestDetailSerializer(waste_request).data)

    @swagger_auto_schema(
        method='post',
        tags=tag,
        operation_summary="Reassign Collector",
        operation_description="Admin only: replace the collector of an assigned request.",
        request_body=AssignCollectorSerializer,
        responses={200: WasteRequestDetailSerializer, 404: error_404, 409: error_409},
    )
    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def reassign(self, request, pk=None):
        serializer = AssignCollectorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        waste_request = services.reassign_collector(request.user, pk, serializer.validated_data['collector'])
        return Response(WasteRequestDetailSerializer(waste_request).data)

    @swagger_auto_schema(
        method='post',
        tags=tag,
        operation_summary="Complete Request",
        operation_description=(
            "Assigned collector (or admin) completes the request. Optional items "
            "carry the weights actually collected; otherwise the requested weights are billed."
        ),
        request_body=CompleteRequestSerializer,
        responses={200: WasteRequestDetailSerializer, 404: error_404, 409: error_409},
    )
    @action(detail=True, methods=['post'], permission_classes=[IsCollectorOrAdmin])
    def complete(self, request, pk=None):
        serializer = CompleteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        waste_request = services.complete_request(
            request.user, pk,
            items=serializer.validated_data.get('items'),
            notes=serializer.validated_data.get('notes', ''),
        )
        return Response(WasteRequestDetailSerializer(waste_request).data)

    @swagger_auto_schema(
        method='post',
        tags=tag,
        operation_summary="Cancel Request",
        operation_description="Resident (own requests) or admin: cancel a pending or assigned request.",
        request_body=CancelRequestSerializer,
        responses={200: WasteRequestDetailSerializer, 404: error_404, 409: error_409},
    )
    @action(detail=True, methods=['post'], permission_classes=[IsResidentOrAdmin])
    def cancel(self, request, pk=None):
        serializer = CancelRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        waste_request = services.cancel_request(
            request.user, pk, reason=serializer.validated_data.get('cancellation_reason', ''),
        )
        return Response(WasteRequestDetailSerializer(waste_request).data)

    @swagger_auto_schema(
        method='post',
        tags=tag,
        operation_summary="Confirm Payment",
        operation_description="Admin only: record the payment gateway's confirmation for a request.",
        responses={200: WasteRequestDetailSerializer, 404: error_404, 409: error_409},
    )
    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def confirm_payment(self, request, pk=None):
        waste_request = services.confirm_payment(request.user, pk)
        return Response(WasteRequestDetailSerializer(waste_request).data)

    # ---------------------------
    # Summary Endpoints
    # ---------------------------

    @swagger_auto_schema(
        method='get',
        tags=tag,
        operation_summary="Request status summary",
        operation_description="Counts of visible requests by status (scoped by role, honours filters).",
        responses={200: StatusSummarySerializer},
    )
    @action(detail=False, methods=['get'])
    def summary(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(StatusSummarySerializer(services.status_summary(qs)).data)

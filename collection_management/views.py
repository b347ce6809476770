from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from django_filters.rest_framework import DjangoFilterBackend

from accounts.permissions import IsCollector
from .filters import CollectionRecordFilter
from .models import CollectionRecord
from .serializers import (
    CollectionRecordSerializer,
    CollectionRecordCreateSerializer,
    CategorySummarySerializer,
)
from .services import record_collection, summarize_by_category

tag = ['Collection Records']


class CollectionRecordViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for recording and reading CollectionRecord data.

    CollectionRecord is the immutable evidence log of a waste collection event:
    who collected what, from whom, when, and at which rates. Invoices are
    aggregated from these records. There is no update or delete endpoint.

    Role-based access:
    - Residents: only their own records.
    - Collectors: records they created; collectors create new records.
    - Admins: all records.

    Endpoints exposed:
    - GET /collection-records/ → list records (scoped by role, filterable by
      collector, resident, category, collected_after, collected_before, date)
    - GET /collection-records/{id}/ → retrieve single record
    - POST /collection-records/ → collector records a collection
    - GET /collection-records/category_summary/ → weight & amount per category
    """

    queryset = CollectionRecord.objects.select_related(
        "collector", "resident"
    ).prefetch_related("items")
    serializer_class = CollectionRecordSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = CollectionRecordFilter

    def get_permissions(self):
        if self.action == "create":
            return [IsCollector()]
        return super().get_permissions()

    def get_queryset(self):
        """
        Role-based queryset filtering:
        - Resident → only their own records
        - Collector → records they executed
        - Admin → everything
        - Others → no access
        """
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_admin", False):
            return qs
        elif getattr(user, "is_collector", False):
            return qs.filter(collector=user)
        elif getattr(user, "is_resident", False):
            return qs.filter(resident=user)
        return qs.none()

    @swagger_auto_schema(
        tags=tag,
        operation_summary="Record a garbage collection",
        operation_description=(
            "Collector logs an ad-hoc collection for a resident. Every item needs "
            "a positive weight and is priced at the current rate."
        ),
        request_body=CollectionRecordCreateSerializer,
        responses={201: CollectionRecordSerializer},
    )
    def create(self, request, *args, **kwargs):
        """
        POST /collection-records/

        Request example:
        {
          "resident": 12,
          "items": [
            {"category": "food", "weight_kg": "10"},
            {"category": "cardboard", "weight_kg": "2.5"}
          ],
          "notes": "Left at the gate"
        }
        """
        serializer = CollectionRecordCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        record = record_collection(
            request.user,
            data["resident"],
            data["items"],
            collected_at=data.get("collected_at"),
            notes=data.get("notes", ""),
        )
        return Response(CollectionRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(
        method="get",
        tags=tag,
        operation_summary="Collection totals by category",
        operation_description=(
            "Total weight and amount per waste category over the visible, "
            "filtered records. Useful for dashboards and charts."
        ),
        responses={200: CategorySummarySerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def category_summary(self, request):
        """
        GET /collection-records/category_summary/?collected_after=2025-01-01T00:00:00Z

        Response example:
        [
          {"category": "food", "total_weight_kg": "15.000", "amount": "750.00", "items": 2},
          {"category": "cardboard", "total_weight_kg": "2.000", "amount": "60.00", "items": 1}
        ]
        """
        records = self.filter_queryset(self.get_queryset())
        rows = summarize_by_category(records, category=request.query_params.get("category"))
        return Response(CategorySummarySerializer(rows, many=True).data)

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from django_filters.rest_framework import DjangoFilterBackend

from accounts.permissions import IsResidentOrAdmin
from .models import Invoice
from .serializers import InvoiceSerializer, GenerateInvoiceSerializer
from .services import generate_invoice

tag = ['Invoices']


class InvoiceViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Invoices are read-only; they are created and replaced only by
    POST /invoices/generate/.
    """

    queryset = Invoice.objects.select_related('resident')
    serializer_class = InvoiceSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['resident']

    def get_queryset(self):
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, 'is_admin', False):
            return qs
        if getattr(user, 'is_resident', False):
            return qs.filter(resident=user)
        return qs.none()

    @swagger_auto_schema(
        method='post',
        tags=tag,
        operation_summary="Generate invoice",
        operation_description=(
            "Aggregate the resident's collection records in [period_start, period_end) "
            "by waste category. Regenerating the same period replaces the invoice."
        ),
        request_body=GenerateInvoiceSerializer,
        responses={200: InvoiceSerializer},
    )
    @action(detail=False, methods=['post'], permission_classes=[IsResidentOrAdmin])
    def generate(self, request):
        serializer = GenerateInvoiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        resident_id = data.get('resident')
        if resident_id is None:
            if not request.user.is_resident:
                return Response(
                    {"detail": "resident is required."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            resident_id = request.user.pk

        invoice = generate_invoice(request.user, resident_id, data['period_start'], data['period_end'])
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)

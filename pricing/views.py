from rest_framework.views import APIView
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema

from .rates import WasteCategory, get_rate_table
from .serializers import RateSerializer


class RateTableView(APIView):

    @swagger_auto_schema(
        tags=["Rates"],
        operation_summary="List waste rates",
        operation_description="Price per kilogram for every waste category, as applied to new items.",
        responses={200: RateSerializer(many=True)},
    )
    def get(self, request):
        labels = dict(WasteCategory.choices)
        rows = [
            {"category": category, "label": labels[category], "rate_per_kg": rate}
            for category, rate in get_rate_table().items()
        ]
        return Response(RateSerializer(rows, many=True).data)

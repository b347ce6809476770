from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import InvoiceViewSet

router = SimpleRouter()
router.register(r'', InvoiceViewSet, basename='invoice')

urlpatterns = [
    path('', include(router.urls)),
]

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import WasteRequestViewSet

# Registered at the app prefix, so no API root view
router = SimpleRouter()
router.register(r'', WasteRequestViewSet, basename='waste-request')

urlpatterns = [
    path('', include(router.urls)),
]

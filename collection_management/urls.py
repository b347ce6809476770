from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import CollectionRecordViewSet

router = SimpleRouter()
router.register(r'', CollectionRecordViewSet, basename='collection-record')

urlpatterns = [
    path('', include(router.urls)),
]

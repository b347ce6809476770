from django.urls import path
from .views import RateTableView

urlpatterns = [
    path('', RateTableView.as_view(), name='rate-table'),
]

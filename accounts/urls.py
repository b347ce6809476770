from django.urls import path

from .views import CollectorListView, LoginView, LogoutView, TokenRefreshView

urlpatterns = [
    path('login/', LoginView.as_view(), name='login'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('collectors/', CollectorListView.as_view(), name='collector-list'),
]

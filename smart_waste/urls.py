from django.contrib import admin
from django.urls import path, include, re_path
from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi



schema_view = get_schema_view(
   openapi.Info(
      title="Smart Waste (Waste Collection & Billing)",
      default_version='v1',
      description="API documentation for Smart Waste: pickup requests, collection records and invoices",
   ),
   public=True,
   permission_classes=(permissions.AllowAny,),
)




urlpatterns = [
    path('admin/', admin.site.urls),
    path('api-auth/', include('rest_framework.urls')),

    path('api/auth/', include('accounts.urls')),
    path('api/rates/', include('pricing.urls')),
    path('api/waste-requests/', include('waste_requests.urls')),
    path('api/collection-records/', include('collection_management.urls')),
    path('api/invoices/', include('invoices.urls')),



    #Swagger/OpenAPI docs
    re_path(r'^api/docs/swagger(?P<format>\.json|\.yaml)$', schema_view.without_ui(cache_timeout=0), name='schema-json'),
    path('api/docs/swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('api/docs/redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),

]

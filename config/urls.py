from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('apps.options.api.urls')),
    path('options/', include('apps.options.urls')),
]

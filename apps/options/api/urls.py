from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import OptionSetViewSet

router = DefaultRouter()
router.register(r'option-sets', OptionSetViewSet, basename='option-set')

urlpatterns = [
    path('', include(router.urls)),
]

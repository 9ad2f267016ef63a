"""
Events URLs - events, files, orphan repository.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import FileViewSet, HealthEventViewSet, OrphanFileViewSet

router = DefaultRouter()
router.register(r'events', HealthEventViewSet, basename='event')
router.register(r'files', FileViewSet, basename='file')
router.register(r'repository/orphan-files', OrphanFileViewSet, basename='orphan-file')

urlpatterns = [
    path('', include(router.urls)),
]

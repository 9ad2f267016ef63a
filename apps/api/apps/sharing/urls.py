from django.urls import path

from .views import ShareGenerateView, ShareValidateView

urlpatterns = [
    path('share/generate/', ShareGenerateView.as_view(), name='share-generate'),
    path('share/validate/', ShareValidateView.as_view(), name='share-validate'),
]

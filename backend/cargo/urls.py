from django.urls import path

from .views import CargoMetricsView, ReadinessView

urlpatterns = [
    path('metrics', CargoMetricsView.as_view(), name='cargo-metrics'),
    path('readiness', ReadinessView.as_view(), name='cargo-readiness'),
]

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    JobAdvanceView,
    JobCancelView,
    JobMetricsView,
    JobViewSet,
    KPIView,
    QuoteVersionApproveView,
    QuoteVersionCreateView,
    QuoteVersionOutcomeView,
    QuoteVersionSendView,
    VendorBidAwardView,
    VendorBidCreateView,
)

router = DefaultRouter()
router.register(r'jobs', JobViewSet, basename='jobs')

urlpatterns = [
    path('jobs/<int:id>/advance', JobAdvanceView.as_view(), name='job-advance'),
    path('jobs/<int:id>/cancel', JobCancelView.as_view(), name='job-cancel'),
    path('jobs/<int:id>/metrics', JobMetricsView.as_view(), name='job-metrics'),
    path('jobs/<int:id>/quote-versions', QuoteVersionCreateView.as_view(), name='quote-version-create'),
    path('jobs/<int:id>/bids', VendorBidCreateView.as_view(), name='vendor-bid-create'),
    path('quote-versions/<int:id>/approve', QuoteVersionApproveView.as_view(), name='quote-version-approve'),
    path('quote-versions/<int:id>/send', QuoteVersionSendView.as_view(), name='quote-version-send'),
    path('quote-versions/<int:id>/outcome', QuoteVersionOutcomeView.as_view(), name='quote-version-outcome'),
    path('bids/<int:id>/award', VendorBidAwardView.as_view(), name='vendor-bid-award'),
    path('reports/kpis', KPIView.as_view(), name='job-kpis'),
]
urlpatterns += router.urls

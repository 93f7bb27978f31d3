from rest_framework.routers import SimpleRouter

from .views import CustomerViewSet, VendorViewSet

router = SimpleRouter()
router.register(r'customers', CustomerViewSet, basename='customers')
router.register(r'vendors', VendorViewSet, basename='vendors')

urlpatterns = router.urls

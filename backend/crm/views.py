from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Customer, Vendor
from .serializers import CustomerSerializer, VendorSerializer


class CustomerViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        search = self.request.query_params.get('q')
        if search:
            qs = qs.filter(company_name__icontains=search) | qs.filter(code__iexact=search)
        return qs


class VendorViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    queryset = Vendor.objects.all()
    serializer_class = VendorSerializer

    def list(self, request, *args, **kwargs):
        # Capabilities and lanes are JSON lists, so matching happens in Python
        params = request.query_params
        vendors = [
            v for v in self.get_queryset()
            if v.serves(params.get('modality'), params.get('origin', ''), params.get('destination', ''))
        ]
        return Response(self.get_serializer(vendors, many=True).data)

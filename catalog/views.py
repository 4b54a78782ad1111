"""
Manager catalog API.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsManager
from .models import LessonPackage
from .serializers import LessonPackageSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManager])
def manager_packages_view(request):
    """
    GET /api/manager/packages
    """
    packages = LessonPackage.objects.order_by('code')
    return Response(LessonPackageSerializer(packages, many=True).data)

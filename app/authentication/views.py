"""
Authentication views.

Token issue and refresh come from djangorestframework-simplejwt
(see urls.py); this module only adds the current-user endpoint.
"""

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import UserSerializer


class CurrentUserView(APIView):
    """Return the authenticated principal."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user",
        responses={200: UserSerializer},
        tags=["Auth"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

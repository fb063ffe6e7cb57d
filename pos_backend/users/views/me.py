from drf_spectacular.utils import extend_schema
from rest_framework import serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

# ---------------------------
# SERIALIZER
# ---------------------------


class MeSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    email = serializers.EmailField()
    name = serializers.CharField()
    phone = serializers.CharField()
    role = serializers.CharField()


# ---------------------------
# VIEW
# ---------------------------


class MeView(APIView):
    """
    Identity of the caller: the same identity the POS stamps on every bill.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = MeSerializer

    @extend_schema(
        responses={200: MeSerializer},
        description="Get current authenticated staff profile (identity + role)",
    )
    def get(self, request):
        user = request.user

        return Response(
            MeSerializer(
                {
                    "id": user.id,
                    "email": user.email,
                    "name": user.display_name,
                    "phone": user.phone,
                    "role": user.role,
                }
            ).data
        )

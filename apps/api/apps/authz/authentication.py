"""
JWT authentication that records the caller in the log correlation context.
"""
from rest_framework_simplejwt.authentication import JWTAuthentication

from apps.core.observability.correlation import bind_user


class CorrelatedJWTAuthentication(JWTAuthentication):

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            bind_user(result[0])
        return result

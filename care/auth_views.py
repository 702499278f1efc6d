"""
Authentication views.

Sign-up and login run the same form validation as the front-end and
answer with a field-keyed error map when anything is wrong, so the
client can show each message beside its field.  A successful call
returns both the legacy DRF token and a JWT pair.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from care.serializers.auth import LoginSerializer, RegisterSerializer
from care.services.accounts import issue_tokens, normalize_email, register_user, simulated_delay
from care.services.audit import try_log_action

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Sign-up
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    simulated_delay()
    user = register_user(s.validated_data)
    try_log_action(user=user, action='register', object_type='user', object_id=user.id,
                   detail={'ip': request.META.get('REMOTE_ADDR')})
    payload = issue_tokens(user)
    payload['message'] = 'Account created successfully!'
    return Response(payload, status=201)

register_view.cls.throttle_scope = 'register'


# ---------------------------------------------------------------------
# Email/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    simulated_delay()

    email = normalize_email(s.validated_data['email'])
    user = authenticate(request, username=email, password=s.validated_data['password'])
    if not user:
        # only the address is recorded, never the password
        try_log_action(user=None, action='login', object_type='user', object_id=None,
                       detail={'result': 'fail', 'email': email, 'ip': request.META.get('REMOTE_ADDR')})
        logger.info("Failed login for %s", email)
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                'message': 'Invalid email or password'}}, status=400)

    try_log_action(user=user, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    payload = issue_tokens(user)
    payload['message'] = 'Welcome back!'
    return Response(payload, status=200)

login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or all of the user's tokens."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            return Response({'ok': False, 'error': {'code': 'invalid_token', 'message': str(e)}}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    try_log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
                   detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count, 'message': 'Logged out successfully!'})

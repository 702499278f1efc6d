"""Profile page: the signed-in user's details, record counters and edits."""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.serializers.auth import ProfileUpdateSerializer
from care.services.accounts import serialize_user, update_profile
from care.services.audit import try_log_action
from care.services.dashboard import profile_stats


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile(request):
    return Response({'ok': True, 'user': serialize_user(request.user), 'stats': profile_stats(request.user)})


@api_view(['POST', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile_update(request):
    s = ProfileUpdateSerializer(data=request.data, context={'user': request.user})
    s.is_valid(raise_exception=True)
    user = update_profile(request.user, dict(s.validated_data))
    try_log_action(user=user, action='profile_update', object_type='user', object_id=user.id,
                   detail={'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'message': 'Profile updated successfully!', 'user': serialize_user(user)})

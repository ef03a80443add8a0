"""
Administrative user management.

Admins list and delete donors, hospitals and organisations.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.models import User
from core.permissions import IsAdminRole
from core.services.audit import log_action
from core.services.users import delete_user_with_role, format_user, users_with_role


def _list(role: str, key: str, message: str) -> Response:
    return Response({
        'success': True,
        'message': message,
        key: [format_user(u) for u in users_with_role(role)],
    })


def _delete(request, pk: int, role: str, message: str) -> Response:
    user = delete_user_with_role(pk, role)
    log_action(user=request.user, action='user_delete', object_type=role, object_id=pk,
               detail={'email': user.email}, request=request)
    return Response({'success': True, 'message': message})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def donar_list(request):
    return _list(User.ROLE_DONOR, 'donarData', 'Donar List Fetched Successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def hospital_list(request):
    return _list(User.ROLE_HOSPITAL, 'hospitalData', 'Hospital List Fetched Successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def org_list(request):
    return _list(User.ROLE_ORGANISATION, 'orgData', 'Org List Fetched Successfully')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def delete_donar(request, pk: int):
    return _delete(request, pk, User.ROLE_DONOR, 'Donar Record Deleted successfully')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def delete_hospital(request, pk: int):
    return _delete(request, pk, User.ROLE_HOSPITAL, 'Hospital Record Deleted successfully')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def delete_organisation(request, pk: int):
    return _delete(request, pk, User.ROLE_ORGANISATION, 'Organisation Record Deleted successfully')

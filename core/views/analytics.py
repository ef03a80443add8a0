"""
Analytics endpoints for organisation dashboards.

Both endpoints take the organisation from the authenticated caller; a
``userId`` query parameter sent by older clients is ignored.  Any
failure while aggregating aborts the whole response with a 500 that
carries the raw error.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import error_payload, raw_error
from core.services.analytics import blood_group_breakdown, organisation_stats

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def blood_groups_data(request):
    """Per blood group: totalIn, totalOut and availabeBlood."""
    try:
        data = blood_group_breakdown(request.user)
    except Exception as e:
        logger.exception("Blood group analytics failed for org %s", request.user.id)
        return Response(error_payload('Error In Bloodgroup Data Analytics API', raw_error(e)), status=500)
    return Response({
        'success': True,
        'message': 'Blood Group Data Fetch Successfully',
        'bloodGroupData': data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stats(request):
    """Organisation totals, distinct donors/hospitals and recent transactions."""
    try:
        data = organisation_stats(request.user)
    except Exception as e:
        logger.exception("Stats analytics failed for org %s", request.user.id)
        return Response(error_payload('Error in stats API', raw_error(e)), status=500)
    return Response({
        'success': True,
        'message': 'Stats fetched successfully',
        'data': data,
    })

import logging
from collections.abc import Mapping

from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdminRole, IsAdminOrOwner

from . import services
from .compat import translate_legacy_billing_payload
from .exceptions import (
    BillingGenerationFailedError,
    BillingConflictAPIError,
    PaymentAlreadyPaidAPIError,
)
from .models import Payment
from .serializers import (
    GenerateBillingInputSerializer,
    PaymentFilterSerializer,
    PaymentSerializer,
    PaymentDetailSerializer,
    BillingSummarySerializer,
    PaymentListSummarySerializer,
)

logger = logging.getLogger(__name__)

NO_OP_MESSAGE = 'No unbilled milk collections found for the specified period'


# Response serializers for API documentation
class GenerateBillingResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    payments_generated = PaymentSerializer(many=True)
    summary = BillingSummarySerializer()


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


def _first_error(errors):
    """Flatten serializer errors to the first message."""
    for messages in errors.values():
        if isinstance(messages, dict):
            return _first_error(messages)
        return str(messages[0])
    return 'Invalid request'


@extend_schema(
    request=GenerateBillingInputSerializer,
    responses={
        200: GenerateBillingResponseSerializer,
        201: GenerateBillingResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description=(
        "Bill every unbilled milk collection in the period. Creates one pending "
        "payment per farmer and flags the collections as billed, all or nothing."
    ),
    tags=['billing'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def generate_billing(request):
    """
    Run billing for a period.

    POST /api/billing/generate/
    Body: {"period_start_date": "2025-11-01", "period_end_date": "2025-11-30",
           "rate_per_liter": "35.00"}
    """
    if not isinstance(request.data, Mapping):
        return Response({'error': 'Invalid request body'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = GenerateBillingInputSerializer(
        data=translate_legacy_billing_payload(request.data)
    )
    if not serializer.is_valid():
        return Response({
            'error': _first_error(serializer.errors),
            'details': serializer.errors,
        }, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        result = services.generate_billing(
            period_start=data['period_start_date'],
            period_end=data['period_end_date'],
            rate_per_liter=data.get('rate_per_liter'),
            generated_by=request.user,
        )
    except services.BillingValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except services.BillingConflictError:
        raise BillingConflictAPIError()
    except services.BillingTransactionError:
        raise BillingGenerationFailedError()

    summary = BillingSummarySerializer.from_result(result).data

    if result['is_noop']:
        return Response({
            'message': NO_OP_MESSAGE,
            'payments_generated': [],
            'summary': summary,
        }, status=status.HTTP_200_OK)

    return Response({
        'message': f"Billing generated successfully for {result['total_farmers']} farmer(s)",
        'payments_generated': PaymentSerializer(result['payments'], many=True).data,
        'summary': summary,
    }, status=status.HTTP_201_CREATED)


class PaymentPagination(PageNumberPagination):
    """Custom pagination for payments."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data, summary=None):
        response = super().get_paginated_response(data)
        if summary is not None:
            response.data['summary'] = summary
        return response


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for payments (read-only apart from settlement).

    list: Payments visible to the caller (admins: all, farmers: own)
    retrieve: A payment with the collections it covers
    mark_paid: Settle a pending payment (admin only)
    """

    queryset = (
        Payment.objects
        .select_related('farmer', 'generated_by')
        .prefetch_related('covered_collections')
    )
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsAdminOrOwner]
    pagination_class = PaymentPagination

    def get_permissions(self):
        if self.action == 'mark_paid':
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action in ('retrieve', 'mark_paid'):
            return PaymentDetailSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        """Scope to the caller and apply validated filters."""
        queryset = super().get_queryset()
        user = self.request.user

        if not user.is_admin:
            queryset = queryset.filter(farmer=user)

        if self.action != 'list':
            return queryset

        filter_serializer = PaymentFilterSerializer(
            data=self.request.query_params.dict()
        )
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('farmer') and user.is_admin:
            queryset = queryset.filter(farmer_id=params['farmer'])
        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'date_from' in params:
            queryset = queryset.filter(created_at__date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(created_at__date__lte=params['date_to'])

        return queryset

    def list(self, request, *args, **kwargs):
        """List payments with totals per status."""
        queryset = self.filter_queryset(self.get_queryset())
        summary = PaymentListSummarySerializer(services.summarize_payments(queryset)).data

        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.paginator.get_paginated_response(serializer.data, summary=summary)

    @extend_schema(
        request=None,
        responses={200: PaymentDetailSerializer},
        description="Mark a pending payment as paid.",
        tags=['billing'],
    )
    @action(detail=True, methods=['post'])
    def mark_paid(self, request, pk=None):
        """
        Settle a payment.

        POST /api/billing/payments/{id}/mark_paid/
        """
        payment = self.get_object()

        try:
            payment = services.mark_payment_paid(payment_id=payment.id)
        except services.PaymentNotFoundError as e:
            raise NotFound(str(e))
        except services.PaymentAlreadyPaidError as e:
            raise PaymentAlreadyPaidAPIError(str(e))

        logger.info("Payment %s settled by %s", payment.id, request.user.email)
        return Response(PaymentDetailSerializer(payment).data)

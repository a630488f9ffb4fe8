from rest_framework import viewsets, mixins, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdminRole, IsAdminOrOwner
from apps.accounts.services import FarmerNotFoundError

from .models import MilkCollection
from .serializers import (
    MilkCollectionSerializer,
    MilkCollectionCreateSerializer,
    MilkCollectionFilterSerializer,
    MilkCollectionSummarySerializer,
)
from .services import record_collection, summarize_collections, InvalidCollectionError
from .exceptions import FarmerNotFoundAPIError, InvalidCollectionAPIError


class CollectionPagination(PageNumberPagination):
    """Custom pagination for milk collections."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data, summary=None):
        response = super().get_paginated_response(data)
        if summary is not None:
            response.data['summary'] = summary
        return response


class MilkCollectionViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for milk collection records.

    list: Collections visible to the caller (admins: all, farmers: own)
    retrieve: A specific collection
    create: Record a new collection (admin only)

    Billing owns the billed flag, so there is no update or delete here.
    """

    queryset = MilkCollection.objects.select_related('farmer')
    serializer_class = MilkCollectionSerializer
    permission_classes = [IsAuthenticated, IsAdminOrOwner]
    pagination_class = CollectionPagination

    def get_permissions(self):
        """Only administrators record collections."""
        if self.action == 'create':
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def get_queryset(self):
        """Scope to the caller and apply validated filters."""
        queryset = super().get_queryset()
        user = self.request.user

        if not user.is_admin:
            queryset = queryset.filter(farmer=user)

        if self.action != 'list':
            return queryset

        filter_serializer = MilkCollectionFilterSerializer(
            data=self.request.query_params.dict()
        )
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('farmer') and user.is_admin:
            queryset = queryset.filter(farmer_id=params['farmer'])
        if 'is_billed' in params:
            queryset = queryset.filter(is_billed=params['is_billed'])
        if 'date_from' in params:
            queryset = queryset.filter(created_at__date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(created_at__date__lte=params['date_to'])

        return queryset

    def list(self, request, *args, **kwargs):
        """List collections with quantity and quality totals."""
        queryset = self.filter_queryset(self.get_queryset())
        summary = MilkCollectionSummarySerializer(summarize_collections(queryset)).data

        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.paginator.get_paginated_response(serializer.data, summary=summary)

    @extend_schema(
        request=MilkCollectionCreateSerializer,
        responses={201: MilkCollectionSerializer},
        description="Record a milk collection for a farmer.",
        tags=['collections'],
    )
    def create(self, request, *args, **kwargs):
        """Record a new collection through the intake service."""
        serializer = MilkCollectionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            collection = record_collection(
                farmer_id=serializer.validated_data['farmer'],
                quantity=serializer.validated_data['quantity'],
                fat_percentage=serializer.validated_data['fat_percentage'],
                snf=serializer.validated_data.get('snf'),
            )
        except FarmerNotFoundError as e:
            raise FarmerNotFoundAPIError(str(e))
        except InvalidCollectionError as e:
            raise InvalidCollectionAPIError(str(e))

        return Response(
            {
                'message': 'Milk collection recorded successfully',
                'milk_collection': MilkCollectionSerializer(collection).data,
            },
            status=status.HTTP_201_CREATED
        )

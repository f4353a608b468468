"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ``GenericViewSet``.
Domain exceptions are caught and translated into the standard error
envelope; anything unexpected propagates to the global exception handler.
"""

from __future__ import annotations

from typing import Any, Dict

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_response, pydantic_error_response
from modules.products.constants import DEFAULT_SORT_FIELD, SORT_ASC
from modules.products.dtos import CreateProductDTO, PatchProductDTO
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ProductPatchSerializer,
    ProductSerializer,
    ProductWriteSerializer,
)
from modules.products.services import ProductService


def _payload(request: Request) -> Dict[str, Any] | None:
    """Return the request body as a plain dict, or ``None`` if it is not an object."""
    data = request.data
    if hasattr(data, "dict"):
        return data.dict()
    if isinstance(data, dict):
        return data
    return None


def _not_found(exc: ProductNotFound) -> Response:
    return error_response(status.HTTP_404_NOT_FOUND, "product_not_found", str(exc))


def _invalid_body() -> Response:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "invalid_payload",
        "Request body must be a JSON object.",
    )


class ProductViewSet(GenericViewSet):
    """ViewSet for the product catalog.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend]
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_serializer_class(self):
        if self.action == "create":
            return ProductWriteSerializer
        if self.action == "partial_update":
            return ProductPatchSerializer
        return ProductSerializer

    def get_queryset(self):
        params = self.request.query_params
        return self._service.list_products(
            search=params.get("search", ""),
            sort=params.get("sort", DEFAULT_SORT_FIELD),
            direction=params.get("order", SORT_ASC),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/

        ``search``, ``sort`` and ``order`` are handled by the service;
        ``min_price``, ``max_price`` and ``in_stock`` by ``ProductFilter``.
        """
        queryset = self.filter_queryset(self.get_queryset())
        return Response(ProductSerializer(queryset, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Patch / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = _payload(request)
        if data is None:
            return _invalid_body()

        try:
            dto = CreateProductDTO.model_validate(data)
        except PydanticValidationError as exc:
            return pydantic_error_response(exc)

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return error_response(
                status.HTTP_409_CONFLICT, "duplicate_sku", str(exc), attr="sku"
            )

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/

        Only ``price_cents`` and ``stock_quantity`` are applied.
        """
        data = _payload(request)
        if data is None:
            return _invalid_body()

        try:
            dto = PatchProductDTO.model_validate(data)
        except PydanticValidationError as exc:
            return pydantic_error_response(exc)

        try:
            product = self._service.patch_product(pk, dto)
        except ProductNotFound as exc:
            return _not_found(exc)

        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound as exc:
            return _not_found(exc)
        except ProductInUse as exc:
            return error_response(status.HTTP_409_CONFLICT, "product_in_use", str(exc))
        return Response(status=status.HTTP_204_NO_CONTENT)

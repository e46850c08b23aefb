"""Workspace import integration tests.

Validates that both packages (greenroom, greenroom_api) are importable and
their public interfaces are accessible.
"""

import pytest


class TestCorePackageImports:
    def test_can_import_core_package(self):
        import greenroom

        assert greenroom.__version__ == "0.1.0"

    def test_can_import_models(self):
        from greenroom.models import (
            CheckoutRequest,
            DispatchReport,
            ErrorCode,
            FieldError,
            GenericPayload,
            MembershipDraft,
            MenuOrderDraft,
            PriceBreakdown,
            ProductType,
            ReservationDraft,
            SocialEntryDraft,
            UploadResult,
            ValidationResult,
            parse_metadata,
            parse_order,
        )

        assert ProductType.SOCIAL_ENTRY.value == "social-entry"
        assert all(
            model is not None
            for model in (
                CheckoutRequest,
                DispatchReport,
                ErrorCode,
                FieldError,
                GenericPayload,
                MembershipDraft,
                MenuOrderDraft,
                PriceBreakdown,
                ReservationDraft,
                SocialEntryDraft,
                UploadResult,
                ValidationResult,
                parse_metadata,
                parse_order,
            )
        )

    def test_models_all_is_complete(self):
        import greenroom.models as models

        for name in models.__all__:
            assert hasattr(models, name), name

    def test_services_all_is_complete(self):
        import greenroom.services as services

        for name in services.__all__:
            assert hasattr(services, name), name


class TestApiPackageImports:
    def test_can_import_app(self):
        from greenroom_api.main import app, handler

        assert app.title == "The Green Room API"
        assert handler is not None

    def test_dependencies_reset(self):
        from greenroom_api.dependencies import get_checkout_service, reset_services

        first = get_checkout_service()
        assert get_checkout_service() is first

        reset_services()

        assert get_checkout_service() is not first

    @pytest.mark.parametrize(
        "module",
        [
            "greenroom_api.routes.checkout",
            "greenroom_api.routes.orders",
            "greenroom_api.routes.webhooks",
            "greenroom_api.routes.uploads",
            "greenroom_api.routes.health",
            "greenroom_api.exceptions",
            "greenroom_api.middleware.correlation",
        ],
    )
    def test_api_modules_import(self, module: str):
        import importlib

        assert importlib.import_module(module) is not None

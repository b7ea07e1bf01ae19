from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import (
    ChangePasswordView,
    ForgotPasswordView,
    LoginView,
    MeView,
    RegisterView,
    ResetPasswordView,
    UserAdminViewSet,
    VerifyEmailView,
)
from bookings.api import BookingIntentCreateView, BookingViewSet
from catalog.api import TravelPackageViewSet
from payments.api import (
    CreateOrderView,
    GatewayKeyView,
    OrderIntentListView,
    RazorpayWebhookView,
)
from ratings.api import RatingReviewViewSet

router = DefaultRouter()
router.register(r"packages", TravelPackageViewSet, basename="package")
router.register(r"ratings", RatingReviewViewSet, basename="rating")
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"users", UserAdminViewSet, basename="user")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/register/", RegisterView.as_view(), name="auth-register"),
    path("api/auth/login/", LoginView.as_view(), name="auth-login"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path("api/auth/verify-email/", VerifyEmailView.as_view(), name="auth-verify-email"),
    path(
        "api/auth/forgot-password/",
        ForgotPasswordView.as_view(),
        name="auth-forgot-password",
    ),
    path(
        "api/auth/reset-password/",
        ResetPasswordView.as_view(),
        name="auth-reset-password",
    ),
    path(
        "api/auth/change-password/",
        ChangePasswordView.as_view(),
        name="auth-change-password",
    ),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),
    path(
        "api/bookings/intents/",
        BookingIntentCreateView.as_view(),
        name="booking-intent-create",
    ),
    path("api/payments/key/", GatewayKeyView.as_view(), name="payment-key"),
    path(
        "api/payments/create-order/",
        CreateOrderView.as_view(),
        name="payment-create-order",
    ),
    path("api/payments/orders/", OrderIntentListView.as_view(), name="payment-orders"),
    path("api/webhooks/razorpay/", RazorpayWebhookView.as_view(), name="razorpay-webhook"),
    path("api/", include(router.urls)),
]

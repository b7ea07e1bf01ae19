import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from core.services.notifier import NotificationFailed, NotifierNotConfigured, get_notifier

from .serializers import (
    EmailTokenObtainPairSerializer,
    ForgotPasswordSerializer,
    PasswordChangeSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    UserSerializer,
)
from .services.emails import (
    build_frontend_link,
    send_password_reset_email,
    send_verification_email,
)
from .services.tokens import (
    InvalidScopedToken,
    issue_password_reset_token,
    issue_verification_token,
    user_from_password_reset_token,
    user_from_verification_token,
)

logger = logging.getLogger(__name__)

User = get_user_model()

GENERIC_RESET_MESSAGE = "If that email exists, you'll receive a link."


class NotifierMixin:
    notifier = None

    def get_notifier(self):
        return self.notifier or get_notifier()


class RegisterView(NotifierMixin, APIView):
    """Create an unverified account and email a verification link."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        notifier = self.get_notifier()
        try:
            notifier.ensure_configured()
            if not settings.FRONTEND_URL:
                raise NotifierNotConfigured("FRONTEND_URL is not configured.")
        except NotifierNotConfigured as exc:
            logger.error("Signup blocked: %s", exc)
            return Response(
                {
                    "success": False,
                    "message": "Server misconfigured: email verification settings missing. Contact admin.",
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        user = serializer.save()
        link = build_frontend_link("/verify-email", issue_verification_token(user))
        try:
            send_verification_email(notifier=notifier, user=user, link=link)
        except NotificationFailed as exc:
            logger.error("Signup mail error for %s: %s", user.email, exc)
            user.delete()
            return Response(
                {
                    "success": False,
                    "message": "We couldn't send the verification email. Please try again later.",
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {
                "success": True,
                "message": "User created. Check your email to verify your account.",
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(TokenObtainPairView):
    """Authenticate a verified user via email + password."""

    serializer_class = EmailTokenObtainPairSerializer


class VerifyEmailView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get(self, request, *args, **kwargs):
        token = request.query_params.get("token", "")
        try:
            user = user_from_verification_token(token)
        except InvalidScopedToken as exc:
            logger.info("Rejected verification token: %s", exc)
            return Response(
                {"success": False, "message": "Invalid or expired token"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user.mark_verified()
        return Response(
            {"success": True, "message": "Email verified. You can log in now."}
        )


class ForgotPasswordView(NotifierMixin, APIView):
    """Email a reset link; the answer never reveals whether the account exists."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"].lower()

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is not None:
            link = build_frontend_link("/reset-password", issue_password_reset_token(user))
            try:
                send_password_reset_email(
                    notifier=self.get_notifier(), user=user, link=link
                )
            except NotificationFailed:
                logger.exception("Could not send password reset email to %s", email)
                return Response(
                    {"success": False, "message": "Could not send reset link"},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                )

        return Response({"success": True, "message": GENERIC_RESET_MESSAGE})


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            user = user_from_password_reset_token(serializer.validated_data["token"])
        except InvalidScopedToken as exc:
            logger.info("Rejected password reset token: %s", exc)
            return Response(
                {"success": False, "message": "Invalid or expired token"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        user.set_password(serializer.validated_data["new_password"])
        user.last_password_reset_at = timezone.now()
        user.save(update_fields=["password", "last_password_reset_at"])
        return Response({"success": True, "message": "Password updated"})


class MeView(NotifierMixin, APIView):
    """Return the serialized profile for the current authenticated user."""

    def get(self, request, *args, **kwargs):
        return Response(UserSerializer(request.user).data)

    def patch(self, request, *args, **kwargs):
        """Update the current user's profile; a new email must be verified again."""
        serializer = ProfileUpdateSerializer(
            instance=request.user, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        if serializer.email_changed:
            link = build_frontend_link("/verify-email", issue_verification_token(user))
            try:
                send_verification_email(notifier=self.get_notifier(), user=user, link=link)
            except NotificationFailed as exc:
                logger.error("Could not send verification email to %s: %s", user.email, exc)
        return Response(UserSerializer(user).data)

    def delete(self, request, *args, **kwargs):
        """Deactivate the current account; bookings and payments are kept."""
        user = request.user
        user.is_active = False
        user.save(update_fields=["is_active"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class ChangePasswordView(APIView):
    """Allow the current user to rotate their password after verifying the old one."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PasswordChangeSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserAdminViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Admin view over traveller accounts."""

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminUser]
    search_fields = ["email", "display_name", "phone"]
    ordering_fields = ["date_joined", "email"]

    def get_queryset(self):
        return User.objects.filter(is_active=True, is_staff=False).order_by("-date_joined")

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=["is_active"])

# apps/core/auth_service.py

"""
Authentication service - email-code sign up and sign in

Accounts have no password. Ownership of the mailbox is proven with a
6 digit code that lives for a few minutes; a successful sign in opens a
regular Django session, which the websocket stack reuses.
"""

import logging
from typing import Tuple

from django.contrib.auth import login, logout

from .email_service import send_verification_email
from .exceptions import (
    AuthenticationFailed,
    ConflictError,
    EmailDeliveryError,
    NotFoundError,
    RequestValidationError,
)
from .models import User

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Encapsulates the email-code authentication flow

    Public methods raise ``MiniTrelloError`` subclasses on failure; the API
    error middleware turns them into responses.
    """

    SESSION_BACKEND = 'django.contrib.auth.backends.ModelBackend'

    def sign_up(self, email: str) -> Tuple[User, bool]:
        """
        Creates an unverified account and sends its first code

        Returns (user, email_sent). A failed send does not undo the sign up,
        the user can ask for the code again.
        """
        if User.objects.get_by_email(email):
            raise ConflictError('Email is already in use', error='User already exists')

        user = User.objects.create_user(email=email)
        code = user.generate_verification_code()
        user.save(update_fields=['verification_code', 'verification_code_expires', 'updated_at'])

        logger.info(f"New account created: {user.email}")
        logger.debug(f"Verification code for {user.email}: {code}")

        email_sent = send_verification_email(user.email, user.name, code)
        return user, email_sent

    def request_code(self, email: str) -> User:
        """Sends a fresh sign-in code to an existing account"""
        user = self._get_user(email)
        if not user.is_active:
            raise AuthenticationFailed('Account is deactivated', error='Account deactivated')

        self._send_new_code(user)
        return user

    def sign_in(self, request, email: str, code: str) -> User:
        """
        Signs in with email + code

        Unknown email, deactivated account and wrong/expired code all answer
        401. A valid code also verifies the account.
        """
        user = User.objects.get_by_email(email)
        if not user:
            raise AuthenticationFailed('Invalid email or verification code', error='Invalid credentials')

        if not user.is_active:
            raise AuthenticationFailed('Account is deactivated', error='Account deactivated')

        verified = user.verify_code(code)
        # verify_code may have cleared an expired code
        user.save()
        if not verified:
            logger.warning(f"Failed sign in for {user.email}")
            raise AuthenticationFailed(
                'Verification code is invalid or expired',
                error='Invalid verification code'
            )

        login(request, user, backend=self.SESSION_BACKEND)
        logger.info(f"User signed in: {user.email}")
        return user

    def verify_email(self, email: str, code: str) -> User:
        user = self._get_user(email)
        if user.is_verified:
            raise RequestValidationError('Account is already verified', error='User already verified')

        verified = user.verify_code(code)
        user.save()
        if not verified:
            raise AuthenticationFailed(
                'Verification code is invalid or expired',
                error='Invalid verification code'
            )

        logger.info(f"Email verified: {user.email}")
        return user

    def resend_verification(self, email: str) -> User:
        user = self._get_user(email)
        if user.is_verified:
            raise RequestValidationError('Account is already verified', error='User already verified')

        self._send_new_code(user)
        return user

    def sign_out(self, request):
        email = getattr(request.user, 'email', None)
        logout(request)
        if email:
            logger.info(f"User signed out: {email}")

    # === PRIVATE METHODS ===

    def _get_user(self, email: str) -> User:
        user = User.objects.get_by_email(email)
        if not user:
            raise NotFoundError('Email does not exist', error='User not found')
        return user

    def _send_new_code(self, user: User):
        code = user.generate_verification_code()
        user.save(update_fields=['verification_code', 'verification_code_expires', 'updated_at'])
        logger.debug(f"Verification code for {user.email}: {code}")

        if not send_verification_email(user.email, user.name, code):
            raise EmailDeliveryError()


# Service instance shared by the views
auth_service = AuthenticationService()

# apps/core/views.py

import logging

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import PermissionDenied
from django.db.models import Q
from django.http import Http404, JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .auth_service import auth_service
from .exceptions import RequestValidationError
from .forms import EmailForm, UserUpdateForm, VerificationCodeForm
from .models import User
from .permissions import api_login_required
from .utils import parse_json_body, validate_form

logger = logging.getLogger(__name__)


# === AUTHENTICATION ===

@csrf_exempt
@require_http_methods(['POST'])
def signup_view(request):
    """Creates an unverified account and emails its code"""
    data = validate_form(EmailForm, parse_json_body(request))
    user, email_sent = auth_service.sign_up(data['email'])

    return JsonResponse({
        'message': 'Sign up successful. Check your email to verify your account.',
        'emailSent': email_sent,
        'user': {
            'id': user.pk,
            'email': user.email,
            'name': user.name,
            'isVerified': user.is_verified,
        }
    }, status=201)


@csrf_exempt
@require_http_methods(['POST'])
def request_code_view(request):
    """Sends a sign-in code to an existing account"""
    data = validate_form(EmailForm, parse_json_body(request))
    auth_service.request_code(data['email'])
    return JsonResponse({'message': 'A sign-in code was sent. Check your email.'})


@csrf_exempt
@require_http_methods(['POST'])
def signin_view(request):
    data = validate_form(VerificationCodeForm, parse_json_body(request))
    user = auth_service.sign_in(request, data['email'], data['verification_code'])

    return JsonResponse({
        'message': 'Signed in successfully',
        'user': user.profile(),
    })


@csrf_exempt
@require_http_methods(['POST'])
def verify_email_view(request):
    data = validate_form(VerificationCodeForm, parse_json_body(request))
    user = auth_service.verify_email(data['email'], data['verification_code'])

    return JsonResponse({
        'message': 'Email verified successfully',
        'user': {
            'id': user.pk,
            'email': user.email,
            'name': user.name,
            'isVerified': user.is_verified,
        }
    })


@csrf_exempt
@require_http_methods(['POST'])
def resend_verification_view(request):
    data = validate_form(EmailForm, parse_json_body(request))
    auth_service.resend_verification(data['email'])
    return JsonResponse({'message': 'A new verification code was sent. Check your email.'})


@csrf_exempt
@require_http_methods(['POST'])
def signout_view(request):
    auth_service.sign_out(request)
    return JsonResponse({'message': 'Signed out'})


@require_http_methods(['GET'])
@api_login_required
def me_view(request):
    return JsonResponse({'user': request.user.profile()})


# === USERS ===

@require_http_methods(['GET'])
@api_login_required
def user_list(request):
    """Active users, capped"""
    limit = getattr(settings, 'MINITRELLO_USERS_LIST_LIMIT', 50)
    users = User.objects.filter(is_active=True)[:limit]
    return JsonResponse({'users': [user.public_profile() for user in users]})


@require_http_methods(['GET'])
@api_login_required
def user_search(request):
    """Search active users by name or email (case-insensitive contains)"""
    query = request.GET.get('q', '').strip()
    if len(query) < 2:
        raise RequestValidationError(
            'Search query must have at least 2 characters',
            error='Search query required'
        )

    limit = getattr(settings, 'MINITRELLO_USERS_SEARCH_LIMIT', 10)
    users = User.objects.filter(
        Q(name__icontains=query) | Q(email__icontains=query),
        is_active=True
    )[:limit]
    return JsonResponse({'users': [user.public_profile() for user in users]})


@csrf_exempt
@require_http_methods(['GET', 'PUT'])
@api_login_required
def user_detail(request, user_id):
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise Http404('User not found')

    if request.method == 'GET':
        return JsonResponse({'user': user.profile()})

    # Only your own profile can be updated
    if user.pk != request.user.pk:
        raise PermissionDenied('You can only update your own profile')

    data = validate_form(UserUpdateForm, parse_json_body(request))
    if 'name' in data:
        user.name = data['name']
    if 'avatar' in data:
        user.avatar = data['avatar'] or None
    user.save()

    logger.info(f"Profile updated: {user.email}")
    return JsonResponse({'message': 'Profile updated', 'user': user.profile()})


# === MONITORING ===

@require_http_methods(['GET'])
def health_check(request):
    """
    Health check for monitoring
    """
    try:
        # Database
        User.objects.exists()

        # Cache (Redis outside of development/tests)
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        return JsonResponse({
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
        })

    except Exception as e:
        logger.exception("Health check failed")
        return JsonResponse({
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
        }, status=503)

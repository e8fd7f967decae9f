# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTHENTICATION ===
    path('api/auth/signup/', views.signup_view, name='signup'),
    path('api/auth/request-code/', views.request_code_view, name='request_code'),
    path('api/auth/signin/', views.signin_view, name='signin'),
    path('api/auth/verify-email/', views.verify_email_view, name='verify_email'),
    path('api/auth/resend-verification/', views.resend_verification_view, name='resend_verification'),
    path('api/auth/signout/', views.signout_view, name='signout'),
    path('api/auth/me/', views.me_view, name='me'),

    # === USERS ===
    path('api/users/', views.user_list, name='user_list'),
    # Before <user_id> so "search" is never read as an id
    path('api/users/search/', views.user_search, name='user_search'),
    path('api/users/<int:user_id>/', views.user_detail, name='user_detail'),

    # === MONITORING ===
    path('health/', views.health_check, name='health'),
]

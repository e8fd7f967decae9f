# apps/core/email_service.py

"""
Outgoing email of Mini Trello

Both senders return True/False; delivery errors are logged and never
propagate, the caller decides whether a failed send matters.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import escape

logger = logging.getLogger(__name__)

APP_NAME = 'Mini Trello'


def _frontend_url(path=''):
    base = getattr(settings, 'MINITRELLO_FRONTEND_URL', 'http://localhost:5173').rstrip('/')
    return f"{base}{path}"


def _deliver(subject, message, html_message, recipient):
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient],
            html_message=html_message,
            fail_silently=False
        )
        return True
    except Exception:
        logger.exception(f"Could not send '{subject}' to {recipient}")
        return False


def send_verification_email(email, name, code):
    """Sends the 6 digit sign-in/verification code"""
    ttl = getattr(settings, 'MINITRELLO_VERIFICATION_CODE_TTL_MINUTES', 10)
    subject = f'Verify your email - {APP_NAME}'
    message = f"""
Hello {name}!

Use the code below to verify your {APP_NAME} account:

    {code}

The code expires in {ttl} minutes. If you did not ask for it, ignore this email.
Never share this code with anyone.
"""
    html_message = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1>{APP_NAME}</h1>
  <h2>Hello {escape(name)}!</h2>
  <p>Use the code below to verify your account:</p>
  <p style="font-size: 32px; letter-spacing: 5px; font-weight: bold;">{code}</p>
  <p>The code expires in {ttl} minutes. If you did not ask for it, ignore this email.</p>
</div>
"""
    sent = _deliver(subject, message, html_message, email)
    if sent:
        logger.info(f"Verification email sent to {email}")
    return sent


def send_invitation_email(invitation, board_name, inviter_name):
    """Invitation to join a board, with accept and decline links"""
    ttl = getattr(settings, 'MINITRELLO_INVITATION_TTL_DAYS', 7)
    accept_url = _frontend_url(f'/invitations/{invitation.pk}')
    decline_url = _frontend_url(f'/invitations/{invitation.pk}/decline')

    subject = f'Invitation to join the board - {board_name}'
    quoted = f'\n"{invitation.message}"\n' if invitation.message else ''
    message = f"""
Hello!

{inviter_name} invited you to join the board "{board_name}" on {APP_NAME} as {invitation.role}.
{quoted}
Accept: {accept_url}
Decline: {decline_url}

This invitation expires in {ttl} days.
"""
    quoted_html = f'<p><em>"{escape(invitation.message)}"</em></p>' if invitation.message else ''
    html_message = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1>{APP_NAME}</h1>
  <p><strong>{escape(inviter_name)}</strong> invited you to join the board
     <strong>"{escape(board_name)}"</strong> as <strong>{invitation.role}</strong>.</p>
  {quoted_html}
  <p>
    <a href="{accept_url}">Accept invitation</a> |
    <a href="{decline_url}">Decline</a>
  </p>
  <p>This invitation expires in {ttl} days.</p>
</div>
"""
    sent = _deliver(subject, message, html_message, invitation.email)
    if sent:
        logger.info(f"Invitation email sent to {invitation.email} for board {invitation.board_id}")
    return sent

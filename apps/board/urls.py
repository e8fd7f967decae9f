# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # === BOARDS ===
    path('boards/', views.board_collection, name='board_collection'),
    path('boards/<int:board_id>/', views.board_detail, name='board_detail'),
    path('boards/<int:board_id>/archive/', views.board_archive, name='board_archive'),
    path('boards/<int:board_id>/invite/', views.board_invite, name='board_invite'),
    path('boards/<int:board_id>/invitations/', views.board_invitations, name='board_invitations'),
    path('boards/<int:board_id>/members/<int:user_id>/', views.board_remove_member, name='board_remove_member'),

    # === CARDS ===
    path('cards/board/<int:board_id>/', views.card_collection, name='card_collection'),
    path('cards/<int:card_id>/', views.card_detail, name='card_detail'),
    path('cards/<int:card_id>/members/', views.card_add_member, name='card_add_member'),
    path('cards/<int:card_id>/members/<int:user_id>/', views.card_remove_member, name='card_remove_member'),
    path('cards/<int:card_id>/labels/', views.card_add_label, name='card_add_label'),
    path('cards/<int:card_id>/labels/<str:name>/', views.card_remove_label, name='card_remove_label'),
    path('cards/<int:card_id>/archive/', views.card_archive, name='card_archive'),

    # === TASKS ===
    path('tasks/card/<int:card_id>/', views.task_collection, name='task_collection'),
    path('tasks/<int:task_id>/', views.task_detail, name='task_detail'),
    path('tasks/<int:task_id>/assign/', views.task_assign, name='task_assign'),
    path('tasks/<int:task_id>/assign/<int:user_id>/', views.task_unassign, name='task_unassign'),
    path('tasks/<int:task_id>/complete/', views.task_complete, name='task_complete'),
    path('tasks/<int:task_id>/reopen/', views.task_reopen, name='task_reopen'),
    path('tasks/<int:task_id>/comments/', views.task_add_comment, name='task_add_comment'),

    # === INVITATIONS ===
    path('invitations/', views.invitation_list, name='invitation_list'),
    path('invitations/<int:invitation_id>/accept/', views.invitation_accept, name='invitation_accept'),
    path('invitations/<int:invitation_id>/decline/', views.invitation_decline, name='invitation_decline'),
]

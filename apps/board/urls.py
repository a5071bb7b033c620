# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Board page (?view=board|list)
    path('<int:board_id>/', views.detail, name='detail'),
    path('<int:board_id>/state/', views.board_state, name='state'),

    # Tasks
    path('<int:board_id>/tasks/create/', views.task_create, name='task_create'),
    path('<int:board_id>/tasks/<int:task_id>/', views.task_detail, name='task_detail'),
    path('<int:board_id>/tasks/<int:task_id>/update/', views.task_update, name='task_update'),
    path('<int:board_id>/tasks/<int:task_id>/delete/', views.task_delete, name='task_delete'),

    # Subtasks
    path('<int:board_id>/tasks/<int:task_id>/subtasks/create/', views.subtask_create, name='subtask_create'),
    path('<int:board_id>/tasks/<int:task_id>/subtasks/<int:subtask_id>/update/',
         views.subtask_update, name='subtask_update'),
    path('<int:board_id>/tasks/<int:task_id>/subtasks/<int:subtask_id>/delete/',
         views.subtask_delete, name='subtask_delete'),

    # AJAX - drag and drop / assignment
    path('<int:board_id>/move/', views.move_item, name='move_item'),
    path('<int:board_id>/assign/', views.assign_item, name='assign_item'),

    # Members
    path('<int:board_id>/members/', views.members, name='members'),
    path('<int:board_id>/members/invite/', views.member_invite, name='member_invite'),
    path('<int:board_id>/members/<str:member_uid>/remove/', views.member_remove, name='member_remove'),
]

# apps/core/urls.py

from django.urls import path
from django.views.generic import RedirectView

from . import views

app_name = 'core'

urlpatterns = [
    # === DASHBOARD ===
    path('', RedirectView.as_view(pattern_name='core:dashboard', permanent=False), name='home'),
    path('dashboard/', views.dashboard, name='dashboard'),

    # === BOARDS ===
    path('boards/new/', views.board_create, name='board_create'),
    path('boards/<int:board_id>/edit/', views.board_edit, name='board_edit'),
    path('boards/<int:board_id>/delete/', views.board_delete, name='board_delete'),

    # Custom statuses (owner only)
    path('boards/<int:board_id>/statuses/add/', views.status_add, name='status_add'),
    path('boards/<int:board_id>/statuses/reorder/', views.status_reorder, name='status_reorder'),
    path('boards/<int:board_id>/statuses/<str:key>/update/', views.status_update, name='status_update'),
    path('boards/<int:board_id>/statuses/<str:key>/delete/', views.status_delete, name='status_delete'),

    # === USER ===
    path('profile/', views.profile, name='profile'),
    path('my-tasks/', views.my_tasks, name='my_tasks'),

    # === NOTIFICATIONS API ===
    path('api/notifications/', views.notifications_list, name='notifications'),
    path('api/notifications/read-all/', views.notification_mark_all_read, name='notifications_read_all'),
    path('api/notifications/<str:notification_id>/read/', views.notification_mark_read, name='notification_read'),
    path('api/notifications/<str:notification_id>/clear/', views.notification_clear, name='notification_clear'),

    # === MONITORING ===
    path('health/', views.health_check, name='health'),
]

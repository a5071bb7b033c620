# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils import timezone
from django.utils.html import format_html

from .models import Board, BoardStatus, Subtask, Task, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for the custom user model"""

    list_display = [
        'username', 'email', 'display_name', 'boards_count',
        'is_active', 'date_joined'
    ]
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['username', 'display_name', 'first_name', 'last_name', 'email']
    ordering = ['-date_joined']
    readonly_fields = ['uid']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Profile', {
            'fields': ('uid', 'display_name', 'photo_url')
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Profile', {
            'fields': ('email', 'display_name')
        }),
    )

    def boards_count(self, obj):
        return obj.boards.count()

    boards_count.short_description = 'Boards'


class BoardStatusInline(admin.TabularInline):
    model = BoardStatus
    extra = 0
    fields = ['key', 'name', 'color', 'order']
    ordering = ['order']


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Admin for boards"""

    list_display = ['name', 'owner', 'members_count', 'tasks_count', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'description', 'owner__email']
    filter_horizontal = ['members']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description')
        }),
        ('Team', {
            'fields': ('owner', 'members')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    inlines = [BoardStatusInline]

    def members_count(self, obj):
        return obj.members.count()

    members_count.short_description = 'Members'

    def tasks_count(self, obj):
        return obj.tasks.count()

    tasks_count.short_description = 'Tasks'


class SubtaskInline(admin.TabularInline):
    model = Subtask
    fk_name = 'task'
    extra = 0
    fields = ['title', 'status', 'assigned_to', 'due_date']


class WorkItemAdmin(admin.ModelAdmin):
    """Shared admin options for tasks and subtasks"""

    date_hierarchy = 'created_at'
    readonly_fields = ['created_at', 'updated_at']

    def due_status(self, obj):
        """Due date state"""
        due_date = obj.effective_due_date
        if not due_date:
            return '-'

        if obj.is_done:
            return format_html('<span style="color: green;">✓ Done</span>')

        if obj.is_overdue():
            days = (timezone.now() - due_date).days
            return format_html('<span style="color: red;">⚠️ Overdue {} days</span>', days)

        days = (due_date - timezone.now()).days
        if days == 0:
            return format_html('<span style="color: orange;">⏰ Due today</span>')
        return f"In {days} days"

    due_status.short_description = 'Due'


@admin.register(Task)
class TaskAdmin(WorkItemAdmin):
    """Admin for tasks"""

    list_display = ['id', 'title', 'board', 'status', 'owner', 'assigned_to', 'due_status', 'subtasks']
    list_filter = ['status', 'board', 'created_at']
    search_fields = ['title', 'description', 'remark']

    fieldsets = (
        ('Basic Information', {
            'fields': ('board', 'title', 'description', 'status', 'due_date', 'remark')
        }),
        ('People', {
            'fields': ('owner', 'assigned_to')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    inlines = [SubtaskInline]

    def subtasks(self, obj):
        done, total = obj.subtask_progress()
        return f"{done}/{total}"

    subtasks.short_description = 'Subtasks'


@admin.register(Subtask)
class SubtaskAdmin(WorkItemAdmin):
    """Admin for subtasks"""

    list_display = ['id', 'title', 'task', 'status', 'owner', 'assigned_to', 'due_status']
    list_filter = ['status', 'task__board', 'created_at']
    search_fields = ['title', 'remark', 'task__title']

# apps/core/forms.py

from django import forms
from django.core.exceptions import ValidationError

from .models import Board, BoardStatus, DEFAULT_STATUS_COLOR, Subtask, Task, User

INPUT_CLASS = 'form-input w-full px-4 py-2 border rounded-lg'
TEXTAREA_CLASS = 'form-textarea w-full px-4 py-2 border rounded-lg'
SELECT_CLASS = 'form-select w-full px-4 py-2 border rounded-lg'

STATUS_COLOR_CHOICES = [
    ('from-yellow-500 to-orange-600', 'Yellow'),
    ('from-blue-500 to-cyan-600', 'Blue'),
    ('from-green-500 to-emerald-600', 'Green'),
    ('from-purple-500 to-pink-600', 'Purple'),
    ('from-red-500 to-rose-600', 'Red'),
    (DEFAULT_STATUS_COLOR, 'Gray'),
]


class ProfileForm(forms.ModelForm):
    """Display name and photo shown to other board members"""

    class Meta:
        model = User
        fields = ['display_name', 'photo_url']
        widgets = {
            'display_name': forms.TextInput(attrs={
                'class': INPUT_CLASS,
                'placeholder': 'Your name'
            }),
            'photo_url': forms.URLInput(attrs={
                'class': INPUT_CLASS,
                'placeholder': 'https://...'
            }),
        }

    def clean_display_name(self):
        return self.cleaned_data['display_name'].strip()


class BoardForm(forms.ModelForm):
    """Create/edit a board"""

    class Meta:
        model = Board
        fields = ['name', 'description']
        widgets = {
            'name': forms.TextInput(attrs={
                'class': INPUT_CLASS,
                'placeholder': 'Board name'
            }),
            'description': forms.Textarea(attrs={
                'class': TEXTAREA_CLASS,
                'rows': 3,
                'placeholder': 'What is this board about?'
            }),
        }

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise ValidationError('Board name is required.')
        return name


class BoardStatusForm(forms.ModelForm):
    """Add/rename a custom status"""

    color = forms.ChoiceField(
        choices=STATUS_COLOR_CHOICES,
        initial=DEFAULT_STATUS_COLOR,
        widget=forms.Select(attrs={'class': SELECT_CLASS})
    )

    class Meta:
        model = BoardStatus
        fields = ['name', 'color']
        widgets = {
            'name': forms.TextInput(attrs={
                'class': INPUT_CLASS,
                'placeholder': 'e.g., Review, Testing, Blocked'
            }),
        }


class BoardItemForm(forms.ModelForm):
    """
    Base form for tasks and subtasks

    Status choices come from the board columns; the assignee list from the
    board members.
    """

    due_date = forms.DateTimeField(
        required=False,
        widget=forms.DateTimeInput(attrs={'class': INPUT_CLASS, 'type': 'datetime-local'})
    )

    def __init__(self, *args, board=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.board = board

        self.fields['status'] = forms.ChoiceField(
            choices=[(s['key'], s['name']) for s in board.get_statuses()],
            widget=forms.Select(attrs={'class': SELECT_CLASS})
        )
        if not self.instance.pk:
            self.fields['status'].initial = board.get_status_keys()[0]

        self.fields['assigned_to'] = forms.ModelChoiceField(
            queryset=board.members.order_by('username'),
            required=False,
            empty_label='Unassigned',
            widget=forms.Select(attrs={'class': SELECT_CLASS})
        )

    def clean_title(self):
        title = self.cleaned_data['title'].strip()
        if not title:
            raise ValidationError('Title is required.')
        return title


class TaskForm(BoardItemForm):

    class Meta:
        model = Task
        fields = ['title', 'description', 'status', 'due_date', 'assigned_to', 'remark']
        widgets = {
            'title': forms.TextInput(attrs={
                'class': INPUT_CLASS,
                'placeholder': 'Task title'
            }),
            'description': forms.Textarea(attrs={
                'class': TEXTAREA_CLASS,
                'rows': 3,
                'placeholder': 'Task description'
            }),
            'remark': forms.Textarea(attrs={
                'class': TEXTAREA_CLASS,
                'rows': 2,
                'placeholder': 'Notes'
            }),
        }


class SubtaskForm(BoardItemForm):

    class Meta:
        model = Subtask
        fields = ['title', 'status', 'due_date', 'assigned_to', 'remark']
        widgets = {
            'title': forms.TextInput(attrs={
                'class': INPUT_CLASS,
                'placeholder': 'Subtask title'
            }),
            'remark': forms.Textarea(attrs={
                'class': TEXTAREA_CLASS,
                'rows': 2,
                'placeholder': 'Notes'
            }),
        }


class InviteMemberForm(forms.Form):

    email = forms.EmailField(
        label='Email',
        widget=forms.EmailInput(attrs={
            'class': INPUT_CLASS,
            'placeholder': 'teammate@example.com'
        })
    )


class MyTasksFilterForm(forms.Form):
    """Filters of the "my tasks" page"""

    ORDER_CHOICES = [
        ('asc', 'Due date (soonest first)'),
        ('desc', 'Due date (latest first)'),
    ]

    status = forms.CharField(required=False, initial='all')
    order = forms.ChoiceField(choices=ORDER_CHOICES, required=False, initial='asc')

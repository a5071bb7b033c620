# apps/core/utils.py

import hashlib
from typing import Dict, List, Optional


def user_color(uid: str) -> str:
    """
    Consistent colour derived from the user's uid
    Used for avatars when there's no photo
    """
    hash_hex = hashlib.md5(str(uid).encode()).hexdigest()
    return f"#{hash_hex[:6]}"


def user_initials(name: Optional[str], email: Optional[str] = None) -> str:
    """
    Avatar initials
    Ex: "Ada Lovelace" -> "AL", None + "bob@x.io" -> "B"
    """
    if name and name.strip():
        parts = name.split()
        return ''.join(part[0] for part in parts[:2]).upper()
    if email:
        return email[0].upper()
    return '?'


def isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None


# === Payloads sent to the browser (JSON and WebSocket) ===

def serialize_member(user) -> Dict:
    """BoardMember profile"""
    return {
        'uid': str(user.uid),
        'email': user.email,
        'displayName': user.display_name or None,
        'photoURL': user.photo_url or None,
        'initials': user_initials(user.display_name, user.email),
        'color': user_color(user.uid),
    }


def serialize_board(board) -> Dict:
    return {
        'id': board.id,
        'name': board.name,
        'description': board.description,
        'owner': str(board.owner.uid),
        'members': [str(uid) for uid in board.members.values_list('uid', flat=True)],
        'customStatuses': board.get_statuses(),
        'createdAt': isoformat(board.created_at),
    }


def _serialize_item(item) -> Dict:
    return {
        'id': item.id,
        'title': item.title,
        'status': item.status,
        'dueDate': isoformat(item.due_date),
        'owner': str(item.owner.uid),
        'assignedTo': str(item.assigned_to.uid) if item.assigned_to_id else None,
        'remark': item.remark,
        'createdAt': isoformat(item.created_at),
    }


def serialize_task(task) -> Dict:
    data = _serialize_item(task)
    data.update({
        'boardId': task.board_id,
        'description': task.description,
    })
    return data


def serialize_subtask(subtask) -> Dict:
    data = _serialize_item(subtask)
    data.update({
        'boardId': subtask.task.board_id,
        'taskId': subtask.task_id,
    })
    return data


def board_snapshot(board) -> Dict:
    """
    Full board state: board, statuses, tasks, subtasks per task and members

    Sent on WebSocket connect and on sync requests.
    """
    from .models import Subtask

    tasks = list(board.tasks.select_related('owner', 'assigned_to'))
    subtasks: Dict[str, List[Dict]] = {str(task.id): [] for task in tasks}

    for subtask in Subtask.objects.filter(task__board=board).select_related('task', 'owner', 'assigned_to'):
        subtasks.setdefault(str(subtask.task_id), []).append(serialize_subtask(subtask))

    return {
        'board': serialize_board(board),
        'statuses': board.get_statuses(),
        'tasks': [serialize_task(task) for task in tasks],
        'subtasks': subtasks,
        'members': [serialize_member(member) for member in board.members.order_by('username')],
    }


def group_by_status(statuses: List[Dict], items) -> List[Dict]:
    """
    Distributes items over the board columns, in column order

    Items whose status isn't a column are left out.
    """
    columns = [dict(status, items=[]) for status in statuses]
    by_key = {column['key']: column for column in columns}
    for item in items:
        column = by_key.get(item.status)
        if column is not None:
            column['items'].append(item)
    return columns

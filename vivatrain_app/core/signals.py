"""
Central Signal Registry for Event-Driven Architecture.

Uses Flask's built-in blinker integration to enable decoupled
communication between modules.

Usage:
    # Publisher (sender)
    from vivatrain_app.core.signals import task_created
    task_created.send(current_app._get_current_object(), task=task)

    # Subscriber (receiver)
    @task_created.connect
    def on_task_created(sender, **kwargs):
        ...
"""
from blinker import Namespace

# ============================================
# Account Signals
# ============================================
auth_signals = Namespace()

# Payload: user
user_registered = auth_signals.signal('user_registered')

# Payload: user
user_logged_in = auth_signals.signal('user_logged_in')

# ============================================
# Content Signals
# ============================================
content_signals = Namespace()

# Payload: sentence
sentence_created = content_signals.signal('sentence_created')

# Payload: task, assigned_count
task_created = content_signals.signal('task_created')

# Payload: task_id, user_id
task_deleted = content_signals.signal('task_deleted')

# ============================================
# Learning Signals
# ============================================
learning_signals = Namespace()

# Payload: student_task, missed_sentence_ids
student_task_completed = learning_signals.signal('student_task_completed')

# Payload: revision_item
revision_item_updated = learning_signals.signal('revision_item_updated')

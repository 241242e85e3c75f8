"""
Reminder subsystem.

Components:
- notifications.py: local notification center + delivery loop
- reminder_scheduler.py: primary/nag requests mirrored from store events, snooze, turn-off
- actions.py: maps user responses (SNOOZE_15/30/60, TURN_OFF) to the scheduler
"""

"""Amayalert notifier: email notifications for the emergency-management dashboard."""

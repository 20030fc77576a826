"""
clinic_queue
============
Clinic intake and triage queue backend: symptom scoring, urgency tiers,
wait-time estimates, department queues and preferred-doctor routing.
"""

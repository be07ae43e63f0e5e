"""
Services - Meeting triage core

- extraction: email parsing pipeline (heuristic extractors and the model path)
- scheduling: availability reconciliation and event matching
- triage: orchestration against calendar/CRM collaborators
"""

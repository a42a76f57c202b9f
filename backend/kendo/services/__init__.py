"""
Services Layer

Business logic for tournaments and championships that:
- Accept domain inputs (sessions, model instances, ids)
- Return domain outputs (models, lists, dicts)
- Do NOT depend on HTTP request/response objects
- Commit only where the operation's docstring says so
"""

# Routes package init
"""
StarPrep Backend — API Routes Package
=======================================

Route Inventory:
    - questions.py: /api/questions, /api/users/{id}/questions,
                    /api/questions/{id}/answers, .../answers/{id}/comments
    - health.py:    GET /health

Design Principle:
    Routes validate the request shape and map outcomes to status codes.
    Every storage step goes through a helper in app.services.
"""

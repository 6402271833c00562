"""
Services layer - Business logic goes here.
Keep services focused on one collection or concern (reports, notifications, etc.)

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Services raise ApiError for expected failures; routes stay thin
- References between documents are resolved here, never in routes
"""

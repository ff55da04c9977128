"""
Services layer - business logic goes here.
Keep services focused on specific domains (reports, users, notifications...).

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Services raise participium.core.errors.AppError subclasses; routes never
  decide status codes
- Repositories are injected through constructors, defaulting to the
  module-level singletons
"""

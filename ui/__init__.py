"""
Web UI module.

Provides the Flask fact page (flask_app) and its JSON endpoints:
- /api/fact: fact for a category selector
- /api/entropy: fact seeded by pointer samples
- /api/categories: category search suggestions
"""

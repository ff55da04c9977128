"""
Repositories - one class per Firestore collection.
Services receive repositories through their constructors and fall back to
the module-level singletons.
"""

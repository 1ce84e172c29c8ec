"""
Services layer - business logic behind the routes.

Routes stay thin: they validate input and hand off to a service obtained
through a `get_*` dependency. Services own persistence (Firestore or the
mock store), outbound calls (geocoding, news feed, SMS) and the
process-local request state (rate limit windows, response cache).
"""

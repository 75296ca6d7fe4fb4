# Routes package init
"""
HISS Backend — API Routes Package
==================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - values.py:     GET    /values                                  (vocabularies)
    - radiology.py:  GET    /radiology/rows[/for/{pid}]              (report count)
                     GET    /radiology/records[/for/{pid}]/{limit}/{offset}
    - features.py:   GET    /features/for/{report_uid}               (all kinds)
                     GET    /features/{kind}/for/{report_uid}
                     POST   /features/{kind}
                     PUT    /features/{kind}
                     DELETE /features/{kind}/{feature_id}
    - health.py:     GET    /health

Design Principle:
    Routes are thin: resolve the feature kind, hand the session to a
    repository or to FeatureService, return the result. Errors are raised
    and rendered by the handlers registered in main.py.
"""

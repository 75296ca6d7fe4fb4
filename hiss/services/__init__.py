# Services package init
"""
HISS Backend — Services Layer
==============================

What:  Workflow layer sitting between routes (HTTP) and repositories (SQL).

Service Inventory:
    - FeatureService: decode → vocabulary check → insert/update/delete
"""

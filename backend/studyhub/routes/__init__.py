"""
StudyHub Backend — Route Handlers Package
==========================================

Routers (all under /api):
    - health:    GET /api/health
    - subjects:  /api/subjects
    - resources: /api/resources
    - stats:     GET /api/stats
"""

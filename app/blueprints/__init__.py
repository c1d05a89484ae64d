"""
QA Scenario Hub
Blueprint registry.

    auth       /api/v1/auth/*
    user       /api/v1/users, /api/v1/my/scenarios
    project    /api/v1/projects/*
    scenario   /api/v1/scenarios/*
    test_run   /api/v1/test-runs/*
    ai         /api/v1/generate
    health     /api/v1/health/*
"""

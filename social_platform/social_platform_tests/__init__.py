"""
Tests for the social_service package.

- Relation store and relationship resolver (`test_follow_store.py`, `test_follow_service.py`)
- Follow HTTP API (`test_follow_routes.py`)
- Accounts: users, companies, password reset (`test_users.py`, `test_companies.py`, `test_password_reset.py`)
- Publications, database setup and the account event logger
"""

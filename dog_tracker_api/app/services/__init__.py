"""
Service layer.

``dog_service`` holds the request-handling logic and ``dog_store`` the
persistence backends it runs against.
"""

"""
Session subsystem.

Components:
- models.py: Identity, Credential, SessionStatus, SessionChange
- storage.py: JSON-file key/value storage for the persisted credential
- auth_api.py: public /auth endpoints
- store.py: the SessionStore state machine
"""

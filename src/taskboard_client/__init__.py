"""
Session & task-board client for the todo REST API.

Components:
- transport/gateway.py: httpx gateway (bearer header, 401 detection, typed results)
- session/: credential models, durable storage, the SessionStore state machine
- tasks/: task models, wire API, the TaskBoard cache, background refresher
- validators.py: pure form validators
- cli/, connectors/: interactive console on top of the above
"""

__version__ = "0.1.0"

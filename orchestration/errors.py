"""
Relay Errors

Lookup failures raised by the session registry. The API layer maps every
NotFoundError to a 404; the subclasses keep the cause available to callers.
"""


class NotFoundError(LookupError):
    """Requested session-scoped entity does not exist."""


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class UserNotFoundError(NotFoundError):
    def __init__(self, session_id: str, user_id: str):
        super().__init__(f"User {user_id} not found in session {session_id}")
        self.session_id = session_id
        self.user_id = user_id


class PairingArtifactNotFoundError(NotFoundError):
    def __init__(self, session_id: str):
        super().__init__(f"No pairing artifact for session {session_id}")
        self.session_id = session_id

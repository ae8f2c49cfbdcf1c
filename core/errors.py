# core/errors.py


class OmamoriError(Exception):
    """
    Base class for domain failures that callers are expected to handle.
    The API maps these onto the failure envelope.
    """

    status_code: int = 400
    error_type: str = "omamori_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTimeline(OmamoriError):
    status_code = 422
    error_type = "invalid_timeline"

    def __init__(self, timeline):
        super().__init__(f"Could not understand the timeline {timeline!r}")
        self.timeline = timeline


class FamilyGroupNotFound(OmamoriError):
    status_code = 404
    error_type = "family_group_not_found"

    def __init__(self, group_id: str):
        super().__init__(f"Family group {group_id} not found")
        self.group_id = group_id


class NotInFamilyGroup(OmamoriError):
    status_code = 409
    error_type = "not_in_family_group"

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} is not in a family group")
        self.user_id = user_id

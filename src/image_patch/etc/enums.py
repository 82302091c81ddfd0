from enum import Enum


class OperationKind(Enum):
    """
    Operations the image service accepts in a patch request.

    Any verb outside the known set is represented as UNRECOGNIZED so that
    a newer service adding verbs does not break parsing on older clients.
    """
    ADD = 'add'
    REPLACE = 'replace'
    REMOVE = 'remove'
    UNRECOGNIZED = 'unrecognized'

    @classmethod
    def parse(cls, raw) -> 'OperationKind':
        """
        Match a wire value against the known operations, ignoring case.
        :param raw: The raw value of the "op" key, may be None or any JSON type.
        :return: The matching operation kind, or UNRECOGNIZED.
        """
        if not isinstance(raw, str):
            return cls.UNRECOGNIZED

        try:
            kind = cls(raw.lower())
        except ValueError:
            return cls.UNRECOGNIZED

        return kind

    def serialize(self) -> str:
        """
        Lowercase canonical name used on the wire.
        """
        return self.value


class ImageStatus(Enum):
    """
    Status of an image as reported by the image service.
    """
    UNRECOGNIZED = 'unrecognized'   # Not one of the documented statuses
    QUEUED = 'queued'               # Identifier reserved, no data uploaded yet
    SAVING = 'saving'               # Data is being uploaded
    ACTIVE = 'active'               # Fully available
    DEACTIVATED = 'deactivated'     # Data access restricted to admins
    KILLED = 'killed'               # Upload failed, image not readable
    DELETED = 'deleted'             # Retained information only, removed later
    PENDING_DELETE = 'pending_delete'   # Data not yet removed, not recoverable
    UPLOADING = 'uploading'         # Staged upload in progress
    IMPORTING = 'importing'         # Import task in progress

    @classmethod
    def parse(cls, raw) -> 'ImageStatus':
        """
        Match a status string reported by the service, ignoring case.
        :param raw: The raw status value.
        :return: The matching status, or UNRECOGNIZED.
        """
        if not isinstance(raw, str):
            return cls.UNRECOGNIZED

        try:
            return cls(raw.lower())
        except ValueError:
            return cls.UNRECOGNIZED

class ManifestError(Exception):
    """Base error for the manifest routes.

    ``message`` is the fixed text sent to the client; the exception chain
    stays server-side.
    """

    status = 500
    message = 'Internal Server Error.'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ManifestError):
    status = 400


class NotFoundError(ManifestError):
    status = 404


class UpstreamError(ManifestError):
    status = 500


class InternalError(ManifestError):
    status = 500

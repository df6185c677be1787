class ExporterError(Exception):
    pass


class ConfigInvalid(ExporterError):
    pass


class UpstreamUnavailable(ExporterError):
    def __init__(self, call, reason):
        self.call = call
        self.reason = reason
        super().__init__(f"{call}: {reason}")


class MalformedUpstream(ExporterError):
    pass


class NotFound(ExporterError):
    pass


class BadRequest(ExporterError):
    pass

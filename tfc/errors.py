class TfcError(Exception):
    """Base error; carries the process exit status the CLI should return."""

    exit_code = 1


class ConfigError(TfcError):
    pass


class InputOpenError(TfcError):
    pass


class ReplaceError(TfcError):
    pass


class OutputError(TfcError):
    pass

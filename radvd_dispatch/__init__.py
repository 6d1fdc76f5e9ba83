DEFAULT_PLACEHOLDER = '@PREFIX@'


class DispatchException(Exception):
    """Fatal condition, the run is aborted and the generated file is left untouched"""
    pass

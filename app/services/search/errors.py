class SearchError(Exception):
    """Base class for everything the search engine raises."""


class SearchInputError(SearchError):
    """The request itself is wrong; detected before the store is touched."""


class InvalidFilterSyntax(SearchInputError):
    def __init__(self, raw: str, reason: str | None = None):
        self.raw = raw
        self.reason = reason
        message = f"invalid filter '{raw}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownField(SearchInputError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"invalid column name '{field}'")


class FilterTypeMismatch(SearchInputError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"cannot supply range filter for categorical column '{field}'")


class InvalidPagination(SearchInputError):
    def __init__(self, param: str, value):
        self.param = param
        self.value = value
        super().__init__(f"invalid {param} query parameter '{value}'")


class InvalidFilterValue(SearchInputError):
    def __init__(self, field: str, value, kind: str):
        self.field = field
        self.value = value
        self.kind = kind
        super().__init__(f"invalid {kind} value '{value}' for column '{field}'")


class SearchExecutionError(SearchError):
    """The store failed. The message is generic; the cause stays in the log."""

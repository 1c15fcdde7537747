class DailyQuoteError(Exception):
    """Base error for the daily quote handler, carrying the HTTP status to respond with."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class SessionIdRequiredError(DailyQuoteError):
    status_code = 400

    def __init__(self):
        super().__init__("sessionId is required")


class NoQuotesAvailableError(DailyQuoteError):
    """Raised when the quotes table is empty. A configuration problem, never retried."""

    status_code = 500

    def __init__(self):
        super().__init__("No quotes available")


class QuoteNotFoundError(DailyQuoteError):
    status_code = 500

    def __init__(self, quote_id: str):
        super().__init__("Failed to fetch quote")
        self.quote_id = quote_id

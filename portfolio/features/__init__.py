"""Feature modules composing the portfolio application."""

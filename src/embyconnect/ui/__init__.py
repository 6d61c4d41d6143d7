"""Qt user interface for the connection screen."""

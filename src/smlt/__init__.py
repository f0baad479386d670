"""Similar-content lookups through the Semantic More-Like-This search handler."""

__version__ = "0.1.0"

"""vanityeth: vanity Ethereum address search with hex pattern alternation."""

__version__ = "1.0.0"

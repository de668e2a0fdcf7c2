"""
Persona Protocol: behavioral personas for blockchain wallets.

Turns one wallet's transaction history into three bounded scores
(risk appetite, loyalty, activity), a persona title, a short summary,
key traits and the wallet's most-used protocols. The analysis engine is
pure; ingest, output, CLI and HTTP layers wrap it.
"""

__version__ = "0.1.0"

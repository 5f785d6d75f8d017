"""
Account Token Service package.

Issues and validates the tokens used by the account subsystem:

- app.tokens: token models, the wire codec and the issuer.
- app.crypto: NintendoBase64 and password hashing.
- app.keys: key providers the codec pulls key material from.
- app.nasc: request value normalization and NASC error bodies.
- app.cli: developer command line.

Design notes:
- Importing the package performs no IO. Keys are read lazily through a
  KeyProvider.
- Use the shared/ utilities for logging, configuration and errors.
- HTTP routing, mail and persistence live outside this package.
"""

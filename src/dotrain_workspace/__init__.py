"""
Top-level package for the dotrain workspace tooling.

`meta_store` holds the content-addressed store the composer reads from;
`rainconfig` turns a workspace `rainconfig.json` into a populated store.
"""

__all__: list[str] = []

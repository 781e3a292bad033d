"""Multi-base binary codecs and identifier generation.

Codecs live in :mod:`idforge.bytecodec`, :mod:`idforge.bech32`,
:mod:`idforge.checked` and :mod:`idforge.bigbase`; identifier formats in
:mod:`idforge.uuids`, :mod:`idforge.ulid`, :mod:`idforge.ksuid`,
:mod:`idforge.snowflake` and :mod:`idforge.nanoid`. :mod:`idforge.registry`
maps format tags to all of them.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

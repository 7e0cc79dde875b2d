"""Core composition modules.

WHY: The core package holds the stable heart of the composer: the
cursor model, the tracking writer, the declarations IR and the file
composers. Renderers and the CLI are built on top of it.

HOW: cursor.py defines positions, writer.py tracks them while writing,
ir.py holds the declarations, composer.py writes complete files.

RULES:
- IR dataclasses are the contract; change with care
- Nothing in core mutates a Declarations instance
"""

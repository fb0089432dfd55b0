"""ExeToMsi: wrap a standalone .exe installer into a Windows .msi package.

Core design goals:
- Deterministic upgrade codes per package name
- Toolset unpacked once into a per-user cache
- Manifest, compile and link run strictly in order
- First failure stops the build
- Centralized logging
"""

__all__ = []

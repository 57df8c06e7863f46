"""npm-importmap core package.

Generates browser import maps from pnpm lockfiles, resolving every package's
entry points against the jsDelivr CDN.
"""

__all__ = [
    "core",
]

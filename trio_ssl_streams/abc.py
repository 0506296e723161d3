# This is a public namespace, so we don't want to expose any non-underscored
# attributes that aren't actually part of our public API. The implementation
# lives in an underscored module and the public parts are re-exported here.

# Uses `from x import y as y` for compatibility with `pyright --verifytypes`
from ._abc import SecureSession as SecureSession
